"""Draw the layer hierarchy as a dot graph

The graph has an edge from each layer to the layers built on it.
Feed the output to graphviz (eg. `dot -Tpdf`) to see it.
"""

# License: BSD3

from teangaview.graph import LayerDotGraph, LayerGraph

from ..args import add_usual_input_args, read_corpus

NAME = 'graph'


def config_argparser(parser):
    """
    Subcommand flags.
    """
    add_usual_input_args(parser)
    parser.add_argument('--output', '-o', metavar='FILE',
                        help='write the dot graph here instead of stdout')
    parser.set_defaults(func=main)


def main(args):
    """
    Subcommand main.
    """
    corpus = read_corpus(args)
    names = set()
    for _, doc in corpus:
        names.update(doc.layer_names())
    dot_graph = LayerDotGraph(LayerGraph.from_meta(corpus.meta, names))
    if args.output:
        dot_graph.write(args.output, format='raw')
    else:
        print(dot_graph.to_string())
