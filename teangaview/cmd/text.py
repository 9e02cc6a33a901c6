"""Show the text of each document

With `--layer`, only the texts the given layers are built on (or the
given character layers themselves) are shown.
"""

# License: BSD3

from teangaview.errors import ResolutionError
from teangaview.resolve import Resolver

from ..args import add_usual_input_args, read_corpus

NAME = 'text'


def config_argparser(parser):
    """
    Subcommand flags.

    You should create and pass in the subparser to which the flags
    are to be added.
    """
    add_usual_input_args(parser)
    parser.set_defaults(func=main)


def texts_under(document, meta, layers):
    """
    Names of the character layers that the given layers lead down to
    (all of them if `layers` is empty). Layers we cannot trace are
    ignored.
    """
    texts = document.text_layers()
    if not layers:
        return sorted(texts)
    resolver = Resolver(document, meta)
    roots = set()
    for name in layers:
        try:
            roots.add(resolver.root_of(name))
        except ResolutionError:
            continue
    return sorted(roots)


def main(args):
    """
    Subcommand main.

    You shouldn't need to call this yourself if you're using
    `config_argparser`
    """
    corpus = read_corpus(args)
    for doc_id, doc in corpus:
        texts = doc.text_layers()
        for name in texts_under(doc, corpus.meta, args.layer):
            print("== %s [%s]" % (doc_id, name))
            print(texts[name])
