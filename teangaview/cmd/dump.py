"""Show the resolved annotations of each document

Annotations are shown nested, the way they would be rendered. A label
like `<A>` says that annotation A was cut at both ends to avoid
crossing some other annotation.
"""

# License: BSD3

import sys

from teangaview.errors import ResolutionError
from teangaview.sections import doc_sections
from teangaview.tree import to_tree

from ..args import (add_usual_input_args, layer_selection,
                    read_corpus, settings_from_args)

NAME = 'dump'


def config_argparser(parser):
    """
    Subcommand flags.

    You should create and pass in the subparser to which the flags
    are to be added.
    """
    add_usual_input_args(parser)
    parser.add_argument('--flat', action='store_true',
                        help='one annotation per line, indented, instead '
                        'of bracketed trees')
    parser.set_defaults(func=main)


def _flat_lines(docsecs, annos, depth=0):
    lines = []
    for anno in annos:
        lines.append('%s%s\t%r' % ('  ' * depth, anno,
                                   docsecs.text(anno.span)))
        lines.extend(_flat_lines(docsecs, anno.children, depth + 1))
    return lines


def dump_sections(doc_id, sections, flat=False):
    """
    Text dump of the resolved character layers of a document
    """
    lines = []
    for name in sorted(sections):
        docsecs = sections[name]
        lines.append("== %s [%s]" % (doc_id, name))
        if docsecs.error is not None:
            lines.append("ERROR: %s" % docsecs.error)
        elif flat:
            lines.extend(_flat_lines(docsecs, docsecs.annos))
        else:
            lines.append(to_tree(docsecs, label=name).pformat())
    return "\n".join(lines)


def main(args):
    """
    Subcommand main.

    You shouldn't need to call this yourself if you're using
    `config_argparser`
    """
    corpus = read_corpus(args)
    settings = settings_from_args(args)
    for doc_id, doc in corpus:
        try:
            sections = doc_sections(doc, corpus.meta,
                                    layers=layer_selection(args, doc),
                                    settings=settings,
                                    strict=args.strict)
        except ResolutionError as err:
            print("== %s" % doc_id)
            print("ERROR: %s" % err)
            print("Skipping %s" % doc_id, file=sys.stderr)
            continue
        print(dump_sections(doc_id, sections, flat=args.flat))
