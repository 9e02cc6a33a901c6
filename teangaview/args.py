# License: BSD3

"""
Command line options
"""

from teangaview.corpus import Reader
from teangaview.sections import ResolveSettings
from teangaview.util import mk_doc_filter


def add_usual_input_args(parser):
    """
    Augment a subcommand argparser with options to read a corpus and
    pick out the documents and layers to look at
    """
    parser.add_argument('corpus', metavar='FILE',
                        help='Teanga JSON corpus')
    parser.add_argument('--doc', metavar='PY_REGEX',
                        help='Limit to documents whose id matches')
    parser.add_argument('--layer', metavar='NAME', action='append',
                        help='Only show this layer (may be repeated; '
                        'default: all layers)')
    parser.add_argument('--strict', action='store_true',
                        help='Stop at the first broken layer rather than '
                        'reporting it and carrying on')
    parser.add_argument('--char-seq-data', action='store_true',
                        dest='char_seq_data',
                        help='Attach payloads of seq layers that sit '
                        'directly on the text')
    parser.add_argument('--verbose', '-v', action='store_true',
                        help='Say what we are reading')


def read_corpus(args):
    """
    Read the section of the corpus specified in the command line
    arguments
    """
    reader = Reader(args.corpus)
    return reader.slurp(mk_doc_filter(args.doc), verbose=args.verbose)


def layer_selection(args, document):
    """
    `(layer, enabled)` list for a document, as requested on the
    command line (None if every layer is wanted)
    """
    if not args.layer:
        return None
    wanted = frozenset(args.layer)
    return [(name, name in wanted) for name in sorted(document)]


def settings_from_args(args):
    """
    Resolution settings requested on the command line
    """
    return ResolveSettings(attach_character_seq_data=args.char_seq_data)
