"""
Deterministic order over layer names.

When two annotations cover exactly the same text we need to decide
which one goes on the outside. The rule is that the more primitive
layer wins: tokens enclose the part of speech tags laid on them, which
in turn enclose anything laid on the tags. Layers with no such
relationship are told apart by the names of the branches of the layer
hierarchy they belong to.
"""

# License: BSD3

# pylint: disable=too-few-public-methods

from teangaview.graph import LayerGraph


class LayerOrder(object):
    """
    Total order over layer names derived from the layer hierarchy.

    Names are ranked once, on construction, by a preorder walk of the
    hierarchy (see `LayerGraph.preorder`); comparisons are then just
    comparisons of ranks. Names the hierarchy does not know about sort
    after all known names, lexically.
    """
    def __init__(self, layer_graph):
        self.graph = layer_graph
        self._rank = dict((name, i) for i, name in
                          enumerate(layer_graph.preorder()))

    @classmethod
    def from_meta(cls, meta, names=None):
        """
        Order for the layers described in `meta` (plus `names`)
        """
        return cls(LayerGraph.from_meta(meta, names))

    def key(self, name):
        """
        Sort key for a layer name
        """
        if name in self._rank:
            return (0, self._rank[name], '')
        return (1, 0, name)

    def compare(self, name1, name2):
        """
        Negative if layer `name1` goes before `name2` (on the
        outside), positive if after, 0 if they are the same layer
        """
        key1 = self.key(name1)
        key2 = self.key(name2)
        return (key1 > key2) - (key1 < key2)

    def sorted(self, names):
        """
        The given layer names, in order
        """
        return sorted(names, key=self.key)

    def anno_key(self, anno):
        """
        Sort key for annotations: start first, widest first, then
        most primitive layer first
        """
        return (anno.start, 0 - anno.end, self.key(anno.layer))
