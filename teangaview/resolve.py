"""
Translating layers into character offsets.

A derived layer's positions are relative to its anchor layer: the
third element of a Seq on `tokens` is attached to whatever the third
token covers. To find out what a layer covers in terms of characters
we follow the chain of `on` links down to a character layer, resolving
each intermediary layer on the way.

The main entry points are `resolve` (one layer) and `Resolver`, which
remembers what it has already resolved so that several layers sitting
on the same anchors only pay for it once.
"""

# License: BSD3

# pylint: disable=too-few-public-methods

import warnings

from teangaview import model
from teangaview.annotation import Anno
from teangaview.errors import (AnchorRangeError,
                               MissingMetadataError,
                               StructuralError,
                               UnknownLayerError)


def _check_index(name, index, limit, what):
    """
    Complain unless `0 <= index < limit`
    """
    if index < 0 or index >= limit:
        raise AnchorRangeError("Layer %s refers to %s %d but its anchor "
                               "only has %d" % (name, what, index, limit),
                               layer=name)


def _check_boundary(name, index, limit, what):
    """
    Complain unless `0 <= index <= limit` (boundaries may sit at
    the very end)
    """
    if index < 0 or index > limit:
        raise AnchorRangeError("Layer %s has a %s at %d, outside of "
                               "[0, %d]" % (name, what, index, limit),
                               layer=name)


def _check_ascending(name, positions):
    for before, after in zip(positions, positions[1:]):
        if after < before:
            raise AnchorRangeError("Layer %s has breakpoints out of order "
                                   "(%d after %d)" % (name, after, before),
                                   layer=name)


def _payload(layer, k):
    return None if layer.data is None else layer.data[k]


def _mk_anno(name, data, start, end):
    if end < start:
        raise AnchorRangeError("Layer %s would cover (%d,%d), which ends "
                               "before it starts; are the anchor units out "
                               "of order?" % (name, start, end), layer=name)
    return Anno(name, data, start, end)


class Resolver(object):
    """
    Resolve layers of a single document.

    Results are cached for the lifetime of the resolver; create a new
    one for each document (or each request).

    Parameters
    ----------
    document : Document
    meta : dict from str to LayerDesc
    attach_character_seq_data : boolean, optional
        Seq layers sitting directly on a character layer traditionally
        produce one annotation per character without any payload. Set
        this to pair up the payloads with the characters instead.
    """
    def __init__(self, document, meta, attach_character_seq_data=False):
        self.document = document
        self.meta = meta
        self.attach_character_seq_data = attach_character_seq_data
        self._cache = {}

    def layer(self, name):
        """
        Layer of the given name, or `UnknownLayerError`
        """
        if name not in self.document:
            raise UnknownLayerError(name)
        return self.document[name]

    def desc(self, name):
        """
        Description of the given layer, or `MissingMetadataError`
        """
        if name not in self.meta:
            raise MissingMetadataError(name)
        return self.meta[name]

    def root_of(self, name):
        """
        Name of the character layer at the end of the anchoring chain
        for a layer, without resolving anything
        """
        seen = []
        while True:
            if name in seen:
                raise StructuralError(
                    "Layers are anchored in a cycle: %s" %
                    " -> ".join(seen + [name]), layer=name)
            seen.append(name)
            if isinstance(self.layer(name), model.Characters):
                return name
            anchor = self.desc(name).on
            if not anchor:
                raise StructuralError("Layer %s is not on any layer" % name,
                                      layer=name)
            name = anchor

    def resolve(self, name):
        """
        Character offset annotations for a derived layer.

        Returns
        -------
        annos : list of Anno
            One annotation per unit of the layer, in layer order.
        root : str
            Name of the character layer the offsets refer to.
        """
        annos, root = self._resolve(name, ())
        return list(annos), root

    def _resolve(self, name, chain):
        if name in self._cache:
            return self._cache[name]
        if name in chain:
            raise StructuralError("Layers are anchored in a cycle: %s" %
                                  " -> ".join(chain + (name,)), layer=name)
        layer = self.layer(name)
        if isinstance(layer, model.Characters):
            raise StructuralError("Cannot resolve character layer %s as if "
                                  "it were a derived layer" % name,
                                  layer=name)
        desc = self.desc(name)
        if not desc.on:
            raise StructuralError("Layer %s is not on any layer" % name,
                                  layer=name)
        anchor = self.layer(desc.on)
        if isinstance(anchor, model.Characters):
            units = None
            root = desc.on
            limit = len(anchor.text)
        else:
            units, root = self._resolve(desc.on, chain + (name,))
            limit = len(units)

        if isinstance(layer, model.Seq):
            annos = self._seq(name, layer, units, limit)
        elif isinstance(layer, model.Div):
            annos = self._div(name, layer, units, limit)
        elif isinstance(layer, model.Element):
            annos = self._element(name, layer, units, limit)
        elif isinstance(layer, model.Span):
            annos = self._span(name, layer, units, limit)
        else:
            raise StructuralError("Layer %s has unknown layer type %s" %
                                  (name, type(layer).__name__), layer=name)
        res = (tuple(annos), root)
        self._cache[name] = res
        return res

    # -----------------------------------------------------------------
    # one per layer type
    #
    # `units` is None if the anchor is a character layer, in which case
    # `limit` is the length of the text; otherwise it is the list of
    # resolved anchor annotations
    # -----------------------------------------------------------------

    def _seq(self, name, layer, units, limit):
        if units is None and not self.attach_character_seq_data:
            return [Anno(name, None, i, i + 1) for i in range(limit)]
        if len(layer.data) != limit:
            warnings.warn("Layer %s has %d values for %d anchor units; "
                          "ignoring the extra ones" %
                          (name, len(layer.data), limit))
        if units is None:
            return [Anno(name, d, i, i + 1)
                    for i, d in zip(range(limit), layer.data)]
        return [Anno(name, d, u.start, u.end)
                for u, d in zip(units, layer.data)]

    def _div(self, name, layer, units, limit):
        points = layer.breakpoints
        _check_ascending(name, points)
        res = []
        if units is None:
            for point in points:
                _check_boundary(name, point, limit, 'breakpoint')
            ends = points[1:] + (limit,)
            for k, (start, end) in enumerate(zip(points, ends)):
                res.append(_mk_anno(name, _payload(layer, k), start, end))
            return res
        for point in points:
            _check_index(name, point, limit, 'unit')
        for k, point in enumerate(points):
            start = units[point].start
            if k + 1 == len(points):
                end = units[-1].end
            elif points[k + 1] == point:
                end = start
            else:
                # the division stops with the unit just before the next one
                end = units[points[k + 1] - 1].end
            res.append(_mk_anno(name, _payload(layer, k), start, end))
        return res

    def _element(self, name, layer, units, limit):
        res = []
        for k, index in enumerate(layer.indices):
            _check_index(name, index, limit, 'unit')
            if units is None:
                start, end = index, index + 1
            else:
                start, end = units[index].start, units[index].end
            res.append(_mk_anno(name, _payload(layer, k), start, end))
        return res

    def _span(self, name, layer, units, limit):
        res = []
        for k, (start, end) in enumerate(layer.spans):
            _check_boundary(name, start, limit, 'span start')
            _check_boundary(name, end, limit, 'span end')
            if end < start:
                raise AnchorRangeError("Layer %s has a span (%d,%d) ending "
                                       "before it starts" %
                                       (name, start, end), layer=name)
            if units is None:
                pass
            elif start < end:
                start, end = units[start].start, units[end - 1].end
            elif start < limit:
                start = end = units[start].start
            elif limit > 0:
                start = end = units[-1].end
            else:
                raise AnchorRangeError("Layer %s has an empty span but its "
                                       "anchor has no units" % name,
                                       layer=name)
            res.append(_mk_anno(name, _payload(layer, k), start, end))
        return res


def resolve(layer_name, meta, document, attach_character_seq_data=False):
    """
    Character offset annotations for a derived layer, and the name of
    the character layer they refer to.

    See `Resolver.resolve`
    """
    resolver = Resolver(document, meta,
                        attach_character_seq_data=attach_character_seq_data)
    return resolver.resolve(layer_name)
