"""
The Teanga JSON format in `teangaview.model` form.

A corpus is a single JSON object ::

    {"_meta":  {"text":   {"type": "characters"},
                "tokens": {"type": "span", "on": "text"},
                "pos":    {"type": "seq", "on": "tokens",
                           "data": ["DT", "NN", "VBZ"]}},
     "_order": ["Kjco"],
     "Kjco":   {"text": "This is a document.",
                "tokens": [[0, 4], [5, 7], [8, 9], [10, 19]],
                "pos": ["DT", "VBZ", "DT", "NN"]}}

Layer values are untagged: `[[0, 4], ...]` could be a span layer
without data or an element layer with links. We always decode a layer
with its description at hand, which says which it is.

You're likely most interested in `read_corpus_file` and
`write_corpus_file`.
"""

# License: BSD3

import codecs
import json

from teangaview.annotation import LinkData, StringData, TypedLinkData
from teangaview.errors import TeangaFormatError
from teangaview import model
from teangaview.model import DataKind, DataType, LayerDesc, LayerType


META_KEY = '_meta'
ORDER_KEY = '_order'


# ---------------------------------------------------------------------
# small checks
# ---------------------------------------------------------------------


def _is_int(value):
    return isinstance(value, int) and not isinstance(value, bool)


def _int(value, what):
    if not _is_int(value):
        raise TeangaFormatError("Expected an integer for %s, got %r" %
                                (what, value))
    return value


def _str(value, what):
    if not isinstance(value, str):
        raise TeangaFormatError("Expected a string for %s, got %r" %
                                (what, value))
    return value


def _list(value, what):
    if not isinstance(value, (list, tuple)):
        raise TeangaFormatError("Expected a list for %s, got %r" %
                                (what, value))
    return value


def _row(value, width, what):
    row = _list(value, what)
    if len(row) != width:
        raise TeangaFormatError("Expected %d items for %s, got %r" %
                                (width, what, value))
    return row


def _str_list(value, what):
    return [_str(x, what) for x in _list(value, what)]


# ---------------------------------------------------------------------
# layer descriptions
# ---------------------------------------------------------------------


def decode_data_type(obj):
    """
    Data type from the `data` (and `link_types`, `values`) fields of a
    layer description, or None if there is no data.

    Accepts the lowercase spellings (`"string"`, `"link"`, a list of
    enumerated values) as well as the capitalised ones (`"String"`,
    `{"Enum": [...]}`, `"Link"`, `{"TypedLink": [...]}`).
    """
    data = obj.get('data')
    if data is None:
        return None
    if isinstance(data, list):
        return DataType.enum(_str_list(data, 'enum values'))
    if isinstance(data, dict):
        if len(data) != 1:
            raise TeangaFormatError("Cannot read data type %r" % data)
        key, values = list(data.items())[0]
        if key.lower() == 'enum':
            return DataType.enum(_str_list(values, 'enum values'))
        elif key.lower() in ('typedlink', 'typed_link'):
            return DataType.typed_link(_str_list(values, 'link types'))
        raise TeangaFormatError("Unknown data type %s" % key)
    kind = _str(data, 'data type').lower()
    if kind == 'string':
        return DataType.string()
    elif kind == 'enum':
        return DataType.enum(_str_list(obj.get('values') or [],
                                       'enum values'))
    elif kind == 'link':
        if 'link_types' in obj:
            return DataType.typed_link(_str_list(obj['link_types'],
                                                 'link types'))
        return DataType.link()
    elif kind in ('typedlink', 'typed_link'):
        return DataType.typed_link(_str_list(obj.get('link_types') or [],
                                             'link types'))
    raise TeangaFormatError("Unknown data type %s" % data)


def encode_data_type(data_type, obj):
    """
    Fill in the `data` (and `link_types`) fields of a JSON layer
    description
    """
    if data_type is None:
        return
    if data_type.kind is DataKind.string:
        obj['data'] = 'string'
    elif data_type.kind is DataKind.enum:
        obj['data'] = list(data_type.values)
    elif data_type.kind is DataKind.link:
        obj['data'] = 'link'
    else:
        obj['data'] = 'link'
        obj['link_types'] = list(data_type.values)


def decode_desc(obj, name='?'):
    """
    `LayerDesc` from its JSON object
    """
    if not isinstance(obj, dict):
        raise TeangaFormatError("Description of layer %s is not an object" %
                                name)
    if 'type' not in obj:
        raise TeangaFormatError("Description of layer %s has no type" % name)
    try:
        layer_type = LayerType(_str(obj['type'], 'layer type').lower())
    except ValueError:
        raise TeangaFormatError("Layer %s has unknown type %s" %
                                (name, obj['type']))
    on = _str(obj.get('on') or '', 'anchor name')
    if layer_type is LayerType.characters and on:
        raise TeangaFormatError("Character layer %s cannot be on another "
                                "layer (%s)" % (name, on))
    if layer_type is not LayerType.characters and not on:
        raise TeangaFormatError("Layer %s is not on any layer" % name)
    values = obj.get('values')
    default = obj.get('default')
    target = obj.get('target')
    return LayerDesc(layer_type,
                     on=on,
                     data=decode_data_type(obj),
                     values=None if values is None else
                     _str_list(values, 'values'),
                     target=None if target is None else
                     _str(target, 'target'),
                     default=None if default is None else
                     _str_list(default, 'default'))


def encode_desc(desc):
    """
    JSON object for a `LayerDesc`
    """
    obj = {'type': str(desc.layer_type)}
    if desc.on:
        obj['on'] = desc.on
    encode_data_type(desc.data, obj)
    if desc.values is not None:
        obj['values'] = list(desc.values)
    if desc.target is not None:
        obj['target'] = desc.target
    if desc.default is not None:
        obj['default'] = list(desc.default)
    return obj


# ---------------------------------------------------------------------
# layers
# ---------------------------------------------------------------------


def _payload_width(data_type):
    return 2 if data_type.kind is DataKind.typed_link else 1


def _decode_payload(items, data_type):
    """
    Payload from the trailing item(s) of a row
    """
    if data_type.is_textual():
        return StringData(_str(items[0], 'string data'))
    elif data_type.kind is DataKind.link:
        return LinkData(_int(items[0], 'link'))
    return TypedLinkData(_int(items[0], 'link'),
                         _str(items[1], 'link type'))


def _encode_payload(payload, data_type):
    if data_type.is_textual() and isinstance(payload, StringData):
        return [payload.value]
    elif data_type.kind is DataKind.link and isinstance(payload, LinkData):
        return [payload.target]
    elif data_type.kind is DataKind.typed_link and\
            isinstance(payload, TypedLinkData):
        return [payload.target, payload.link_type]
    raise TeangaFormatError("Cannot write %r as %s data" %
                            (payload, data_type))


def decode_layer(value, desc):
    """
    Layer from its JSON value, read as its description says.

    :type desc: LayerDesc
    :rtype: teangaview.model.Layer
    """
    ltype = desc.layer_type
    dtype = desc.data
    if ltype is LayerType.characters:
        return model.Characters(_str(value, 'character layer'))
    rows = _list(value, '%s layer' % ltype)
    if ltype is LayerType.seq:
        if dtype is None:
            raise TeangaFormatError("Seq layer without a data type")
        if dtype.kind is DataKind.typed_link:
            return model.Seq(_decode_payload(_row(x, 2, 'typed link'), dtype)
                             for x in rows)
        return model.Seq(_decode_payload([x], dtype) for x in rows)

    nums = 2 if ltype is LayerType.span else 1
    if dtype is None:
        if nums == 1:
            positions = [_int(x, 'index') for x in rows]
        else:
            positions = [tuple(_int(y, 'index')
                               for y in _row(x, 2, 'span'))
                         for x in rows]
        data = None
    else:
        width = nums + _payload_width(dtype)
        positions = []
        data = []
        for row in rows:
            row = _row(row, width, '%s entry' % ltype)
            idx = tuple(_int(y, 'index') for y in row[:nums])
            positions.append(idx[0] if nums == 1 else idx)
            data.append(_decode_payload(row[nums:], dtype))

    if ltype is LayerType.div:
        return model.Div(positions, data)
    elif ltype is LayerType.element:
        return model.Element(positions, data)
    return model.Span(positions, data)


def encode_layer(layer, desc):
    """
    JSON value for a layer

    :type desc: LayerDesc
    """
    if layer.layer_type is not desc.layer_type:
        raise TeangaFormatError("Cannot write a %s layer as %s" %
                                (layer.layer_type, desc.layer_type))
    dtype = desc.data
    if isinstance(layer, model.Characters):
        return layer.text
    if layer.has_data() and dtype is None:
        raise TeangaFormatError("Layer contains data but no data type")
    if not layer.has_data() and dtype is not None:
        raise TeangaFormatError("Layer has a data type but no data")
    if isinstance(layer, model.Seq):
        res = [_encode_payload(d, dtype) for d in layer.data]
        if dtype.kind is DataKind.typed_link:
            return res
        return [x[0] for x in res]

    if isinstance(layer, model.Div):
        positions = [[x] for x in layer.breakpoints]
    elif isinstance(layer, model.Element):
        positions = [[x] for x in layer.indices]
    else:
        positions = [list(x) for x in layer.spans]
    if dtype is None:
        return [x[0] if len(x) == 1 else x for x in positions]
    return [pos + _encode_payload(d, dtype)
            for pos, d in zip(positions, layer.data)]


# ---------------------------------------------------------------------
# corpora
# ---------------------------------------------------------------------


def decode_corpus(obj):
    """
    Corpus from the (already parsed) JSON object
    """
    if not isinstance(obj, dict):
        raise TeangaFormatError("A corpus must be a JSON object")
    raw_meta = obj.get(META_KEY) or {}
    if not isinstance(raw_meta, dict):
        raise TeangaFormatError("%s must be an object" % META_KEY)
    meta = dict((name, decode_desc(desc, name))
                for name, desc in raw_meta.items())
    order = _str_list(obj.get(ORDER_KEY) or [], 'document id')
    documents = []
    for doc_id, raw_doc in obj.items():
        if doc_id in (META_KEY, ORDER_KEY):
            continue
        if not isinstance(raw_doc, dict):
            raise TeangaFormatError("Document %s is not an object" % doc_id)
        layers = {}
        for name, value in raw_doc.items():
            if name not in meta:
                raise TeangaFormatError("No meta for layer %s (document %s)" %
                                        (name, doc_id))
            try:
                layers[name] = decode_layer(value, meta[name])
            except TeangaFormatError as err:
                raise TeangaFormatError("Layer %s of document %s: %s" %
                                        (name, doc_id, err))
        documents.append((doc_id, model.Document(layers)))
    return model.Corpus(meta, order, documents)


def encode_corpus(corpus):
    """
    JSON object for a corpus
    """
    obj = {META_KEY: dict((name, encode_desc(desc))
                          for name, desc in corpus.meta.items()),
           ORDER_KEY: list(corpus.order)}
    for doc_id, doc in corpus.documents:
        raw_doc = {}
        for name, layer in doc.items():
            if name not in corpus.meta:
                raise TeangaFormatError("No meta for layer %s (document %s)" %
                                        (name, doc_id))
            raw_doc[name] = encode_layer(layer, corpus.meta[name])
        obj[doc_id] = raw_doc
    return obj


def read_corpus_from_json_string(text):
    """
    Corpus from a JSON string
    """
    try:
        obj = json.loads(text)
    except ValueError as err:
        raise TeangaFormatError("Not valid JSON: %s" % err)
    return decode_corpus(obj)


def write_corpus_to_json_string(corpus, indent=None):
    """
    JSON string for a corpus
    """
    return json.dumps(encode_corpus(corpus), indent=indent,
                      ensure_ascii=False)


def read_corpus_file(filename):
    """
    Read a corpus from a (UTF-8) JSON file
    """
    try:
        with codecs.open(filename, 'r', 'utf-8') as stream:
            text = stream.read()
    except UnicodeDecodeError as err:
        raise TeangaFormatError("%s is not valid UTF-8: %s" % (filename, err))
    return read_corpus_from_json_string(text)


def write_corpus_file(corpus, filename, indent=None):
    """
    Write a corpus to a (UTF-8) JSON file
    """
    with codecs.open(filename, 'w', 'utf-8') as stream:
        stream.write(write_corpus_to_json_string(corpus, indent=indent))
