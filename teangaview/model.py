"""
The Teanga data model: layer descriptions, layers and documents.

A document is a set of named layers. One (or more) of these is a
`Characters` layer holding the raw text; every other layer is laid
*on* some other layer, and refers to positions in it rather than to
characters directly ::

    text     : Characters  "This is a document."
    tokens   : Span on text          [[0,4], [5,7], [8,9], [10,19]]
    pos      : Seq on tokens         ["DT", "VBZ", "DT", "NN"]
    sentence : Div on tokens         [0]

How a layer value is to be read (which layer it sits on, whether it
carries any data) is given by its `LayerDesc`, which lives in the
corpus metadata rather than in the document.

Nothing here interprets positions; see `teangaview.resolve` for that.
"""

# License: BSD3

# pylint: disable=too-few-public-methods, too-many-arguments

from enum import Enum

from frozendict import frozendict


class LayerType(Enum):
    """
    How a layer refers to its anchor
    """
    characters = 'characters'
    seq = 'seq'
    div = 'div'
    element = 'element'
    span = 'span'

    def __str__(self):
        return self.value


class DataKind(Enum):
    """
    What sort of payload a layer carries
    """
    string = 'string'
    enum = 'enum'
    link = 'link'
    typed_link = 'typed_link'

    def __str__(self):
        return self.value


class DataType(object):
    """
    Payload type of a layer.

    Enumerations carry their allowed values; typed links carry the
    allowed link types.
    """
    def __init__(self, kind, values=None):
        self.kind = kind
        self.values = tuple(values) if values is not None else None

    @classmethod
    def string(cls):
        "free text payload"
        return cls(DataKind.string)

    @classmethod
    def enum(cls, values):
        "payload from a closed set of strings"
        return cls(DataKind.enum, values)

    @classmethod
    def link(cls):
        "payload pointing at a position in the target layer"
        return cls(DataKind.link)

    @classmethod
    def typed_link(cls, types):
        "labelled link"
        return cls(DataKind.typed_link, types)

    def is_textual(self):
        """
        True for payloads read and written as plain strings
        """
        return self.kind in (DataKind.string, DataKind.enum)

    def __eq__(self, other):
        return isinstance(other, DataType) and\
            (self.kind, self.values) == (other.kind, other.values)

    def __ne__(self, other):
        return not self == other

    def __hash__(self):
        return hash((self.kind, self.values))

    def __repr__(self):
        if self.values is None:
            return 'DataType(%s)' % self.kind
        return 'DataType(%s, %r)' % (self.kind, list(self.values))

    def __str__(self):
        return str(self.kind)


class LayerDesc(object):
    """Description of a layer.

    Attributes
    ----------
    layer_type : LayerType
        How the layer refers to its anchor.
    on : str
        Name of the anchor layer; empty for character layers (and only
        for them).
    data : DataType or None
        Payload type; None if the layer has no payload.
    values : list of str, optional
        Allowed values for enumerated data.
    target : str, optional
        Layer that links point into.
    default : list of str, optional
        Default values for the layer.
    """
    def __init__(self, layer_type, on='', data=None, values=None,
                 target=None, default=None):
        self.layer_type = layer_type
        self.on = on or ''
        self.data = data
        self.values = values
        self.target = target
        self.default = default

    def _tuple(self):
        return (self.layer_type, self.on, self.data,
                None if self.values is None else tuple(self.values),
                self.target,
                None if self.default is None else tuple(self.default))

    def __eq__(self, other):
        return isinstance(other, LayerDesc) and self._tuple() == other._tuple()

    def __ne__(self, other):
        return not self == other

    def __hash__(self):
        return hash(self._tuple())

    def __repr__(self):
        return 'LayerDesc(%s, on=%r, data=%r)' %\
            (self.layer_type, self.on, self.data)


# ---------------------------------------------------------------------
# layers
# ---------------------------------------------------------------------


class Layer(object):
    """
    Base class for layer values.

    Subclasses hold the raw (unresolved) encoding of a layer, which is
    only meaningful together with the layer's `LayerDesc`.
    """
    layer_type = None

    def _tuple(self):
        raise NotImplementedError

    def has_data(self):
        """
        True if this layer carries payloads
        """
        return getattr(self, 'data', None) is not None

    def __eq__(self, other):
        return type(self) is type(other) and self._tuple() == other._tuple()

    def __ne__(self, other):
        return not self == other

    def __hash__(self):
        return hash(self._tuple())

    def __repr__(self):
        return '%s%r' % (self.__class__.__name__, self._tuple())


def _data_tuple(data, expected_len, what):
    if data is None:
        return None
    data = tuple(data)
    if len(data) != expected_len:
        raise ValueError("%s: %d positions but %d payloads" %
                         (what, expected_len, len(data)))
    return data


class Characters(Layer):
    """
    The raw text of a document
    """
    layer_type = LayerType.characters

    def __init__(self, text):
        self.text = text

    def __len__(self):
        return len(self.text)

    def _tuple(self):
        return (self.text,)


class Seq(Layer):
    """
    One payload for each unit of the anchor layer, in order
    """
    layer_type = LayerType.seq

    def __init__(self, data):
        self.data = tuple(data)

    def __len__(self):
        return len(self.data)

    def _tuple(self):
        return (self.data,)


class Div(Layer):
    """
    Divisions of the anchor layer: each breakpoint starts a division
    that runs up to the next breakpoint (or the end of the anchor).

    `data` is either None (no payload) or a payload per breakpoint.
    """
    layer_type = LayerType.div

    def __init__(self, breakpoints, data=None):
        self.breakpoints = tuple(breakpoints)
        self.data = _data_tuple(data, len(self.breakpoints), 'div')

    def __len__(self):
        return len(self.breakpoints)

    def _tuple(self):
        return (self.breakpoints, self.data)


class Element(Layer):
    """
    Annotations on single units of the anchor layer
    """
    layer_type = LayerType.element

    def __init__(self, indices, data=None):
        self.indices = tuple(indices)
        self.data = _data_tuple(data, len(self.indices), 'element')

    def __len__(self):
        return len(self.indices)

    def _tuple(self):
        return (self.indices, self.data)


class Span(Layer):
    """
    Annotations over ranges `[start, end)` of anchor units
    """
    layer_type = LayerType.span

    def __init__(self, spans, data=None):
        self.spans = tuple((start, end) for start, end in spans)
        self.data = _data_tuple(data, len(self.spans), 'span')

    def __len__(self):
        return len(self.spans)

    def _tuple(self):
        return (self.spans, self.data)


# ---------------------------------------------------------------------
# documents
# ---------------------------------------------------------------------


class Document(object):
    """
    A single document: an immutable mapping from layer names to layers
    """
    def __init__(self, layers=None):
        self._layers = frozendict(layers or {})

    def __contains__(self, name):
        return name in self._layers

    def __getitem__(self, name):
        return self._layers[name]

    def __iter__(self):
        return iter(self._layers)

    def __len__(self):
        return len(self._layers)

    def __eq__(self, other):
        return isinstance(other, Document) and self._layers == other._layers

    def __ne__(self, other):
        return not self == other

    def __hash__(self):
        return hash(self._layers)

    def __repr__(self):
        return 'Document(%r)' % dict(self._layers)

    def get(self, name, default=None):
        "layer of the given name, if any"
        return self._layers.get(name, default)

    def items(self):
        "(name, layer) pairs"
        return self._layers.items()

    def layer_names(self):
        "names of all the layers in this document"
        return list(self._layers)

    def text_layers(self):
        """
        Dictionary from the names of the character layers in this
        document to their text
        """
        return dict((name, layer.text) for name, layer in self._layers.items()
                    if isinstance(layer, Characters))


class Corpus(object):
    """
    A set of documents sharing one set of layer descriptions.

    Attributes
    ----------
    meta : frozendict from str to LayerDesc
    order : list of str
        Preferred order of the document ids (may be partial)
    documents : list of (str, Document)
        Documents in the order they were read
    """
    def __init__(self, meta=None, order=None, documents=None):
        self.meta = frozendict(meta or {})
        self.order = list(order or [])
        self.documents = list(documents or [])

    def __len__(self):
        return len(self.documents)

    def __iter__(self):
        for doc_id in self.doc_ids():
            yield doc_id, self.document(doc_id)

    def __eq__(self, other):
        return isinstance(other, Corpus) and\
            (self.meta, self.order, self.documents) ==\
            (other.meta, other.order, other.documents)

    def __ne__(self, other):
        return not self == other

    def doc_ids(self):
        """
        Ids of the documents: those mentioned in `order` first, in
        that order, then any others in the order they were read
        """
        known = set(doc_id for doc_id, _ in self.documents)
        res = [x for x in self.order if x in known]
        listed = set(res)
        res.extend(doc_id for doc_id, _ in self.documents
                   if doc_id not in listed)
        return res

    def document(self, doc_id):
        """
        Document with the given id (KeyError if there is none)
        """
        for key, doc in self.documents:
            if key == doc_id:
                return doc
        raise KeyError(doc_id)
