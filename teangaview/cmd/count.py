"""Count annotations per layer

Pieces are what annotations become once cut to avoid crossing each
other; an annotation which crosses nothing is a single piece.
"""

# License: BSD3

from collections import defaultdict

from tabulate import tabulate

from teangaview.errors import ResolutionError
from teangaview.sections import doc_sections

from ..args import (add_usual_input_args, layer_selection,
                    read_corpus, settings_from_args)

NAME = 'count'


def config_argparser(parser):
    """
    Subcommand flags.
    """
    add_usual_input_args(parser)
    parser.set_defaults(func=main)


def empty_counts():
    "A fresh set of counts"
    return defaultdict(int)


def count(sections, pieces=None, clipped=None):
    """
    Tally the annotation pieces in a document's sections by layer.

    Returns the (updated) pieces and clipped counts
    """
    pieces = empty_counts() if pieces is None else pieces
    clipped = empty_counts() if clipped is None else clipped
    for docsecs in sections.values():
        for anno in docsecs.flatten():
            pieces[anno.layer] += 1
            if not anno.is_complete():
                clipped[anno.layer] += 1
    return pieces, clipped


def summary(meta, pieces, clipped, failures):
    """
    Table of counts, one row per layer
    """
    headers = ["layer", "type", "pieces", "clipped"]
    rows = []
    for layer in sorted(pieces):
        ltype = str(meta[layer].layer_type) if layer in meta else '?'
        rows.append([layer, ltype, pieces[layer], clipped[layer]])
    res = tabulate(rows, headers=headers)
    if failures:
        res += "\n\nCould not resolve:\n"
        res += "\n".join("%s [%s]: %s" % x for x in failures)
    return res


def main(args):
    """
    Subcommand main.
    """
    corpus = read_corpus(args)
    settings = settings_from_args(args)
    pieces = empty_counts()
    clipped = empty_counts()
    failures = []
    for doc_id, doc in corpus:
        try:
            sections = doc_sections(doc, corpus.meta,
                                    layers=layer_selection(args, doc),
                                    settings=settings,
                                    strict=args.strict)
        except ResolutionError as err:
            failures.append((doc_id, '*', err))
            continue
        for name, docsecs in sorted(sections.items()):
            if docsecs.error is not None:
                failures.append((doc_id, name, docsecs.error))
        count(sections, pieces, clipped)
    print(summary(corpus.meta, pieces, clipped, failures))
