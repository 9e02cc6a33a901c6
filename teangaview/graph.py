"""
The layer hierarchy: which layers are built on which.

Every derived layer sits on exactly one anchor, so the `on` links form
a forest rooted at the character layers ::

    text --> tokens --> pos
               |
               +------> sentences

(modulo malformed metadata, where they may also form cycles).

Classes of interest:

* LayerGraph: the hierarchy as a directed graph, anchor to layer
* LayerDotGraph: visual representation, built from `LayerGraph`
"""

# License: BSD3

import pydot
import pygraph.classes.digraph as dgr
from pygraph.algorithms.searching import depth_first_search


class LayerGraph(dgr.digraph):
    """
    Directed graph with an edge from each anchor layer to each layer
    built on it.

    Nodes are layer names. Each node has a `type` attribute giving its
    layer type as a string ('?' for layers we have no description for).

    You most likely want to use `LayerGraph.from_meta`.
    """
    def __init__(self):
        super(LayerGraph, self).__init__()

    @classmethod
    def from_meta(cls, meta, names=None):
        """
        Build the hierarchy for a set of layer descriptions.

        :param meta: layer descriptions
        :type  meta: dict from str to `LayerDesc`

        :param names: extra layer names to include (eg. the layers
            of a particular document), even if `meta` says nothing
            about them
        :type  names: iterable of str
        """
        grph = cls()
        everything = set(meta)
        everything.update(names or [])
        everything.update(desc.on for desc in meta.values() if desc.on)
        # insertion order fixes the order of neighbours,
        # so insert everything lexically
        for name in sorted(everything):
            grph.add_node(name)
            ltype = str(meta[name].layer_type) if name in meta else '?'
            grph.add_node_attribute(name, ('type', ltype))
        for name in sorted(meta):
            anchor = meta[name].on
            if anchor and not grph.has_edge((anchor, name)):
                grph.add_edge((anchor, name))
        return grph

    def type(self, name):
        """
        Layer type of a node, as a string
        """
        return dict(self.node_attributes(name))['type']

    def anchor(self, name):
        """
        Layer the given one is built on, or None for roots
        """
        incidents = self.incidents(name)
        return incidents[0] if incidents else None

    def built_on(self, name):
        """
        Layers built directly on the given one, in lexical order
        """
        return sorted(self.neighbors(name))

    def roots(self):
        """
        Layers which are not built on anything, in lexical order
        """
        return sorted(n for n in self.nodes() if not self.incidents(n))

    def preorder(self):
        """
        All layers, each anchor before the layers built on it, siblings
        and roots in lexical order.

        Layers that cannot be reached from a root (ie. those caught in
        or hanging off an anchoring cycle) come last, lexically.
        """
        order = []
        for root in self.roots():
            _, pre, _ = depth_first_search(self, root=root)
            order.extend(pre)
        seen = set(order)
        order.extend(sorted(n for n in self.nodes() if n not in seen))
        return order


class LayerDotGraph(pydot.Dot):
    """
    A dot representation of the layer hierarchy.
    The `to_string()` method is most likely to be of interest here
    """
    def _layer_label(self, name):
        return "%s\n(%s)" % (name, self.core.type(name))

    def _layer_attrs(self, name):
        attrs = {'label': self._layer_label(name),
                 'shape': 'box'}
        if self.core.type(name) == 'characters':
            attrs['style'] = 'bold'
        elif self.core.type(name) == '?':
            attrs['color'] = 'red'
        return attrs

    def _dot_id(self, name):
        """
        Quote layer names so that pydot does not read ports
        into colons
        """
        return '"%s"' % name.replace('"', '\\"')

    def __init__(self, layer_graph):
        super(LayerDotGraph, self).__init__(graph_type='digraph')
        self.core = layer_graph
        for name in self.core.preorder():
            self.add_node(pydot.Node(self._dot_id(name),
                                     **self._layer_attrs(name)))
        for anchor, name in sorted(self.core.edges()):
            self.add_edge(pydot.Edge(self._dot_id(anchor),
                                     self._dot_id(name)))
