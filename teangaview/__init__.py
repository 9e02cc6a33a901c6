"""
The teangaview library resolves Teanga corpora into something that can
be displayed: a text with nested annotations on it.

A Teanga document stores each annotation layer sparsely and relative to
some other layer (parts of speech are given per token, tokens per
character span). To display a document we need to go the other way.
There are three steps:

* resolution (teangaview.resolve): follow each layer's anchoring chain
  down to the text, turning relative positions into character offsets

* partition (teangaview.partition): layers that were never meant to
  line up (eg. named entities and chunks) may cross; cut them into
  pieces that nest, remembering which sides were cut

* nesting (teangaview.ordering, teangaview.tree): sort the pieces and
  build a forest where each annotation is inside the narrowest one that
  encloses it, more primitive layers on the outside

`teangaview.sections.doc_sections` does all three for a document.

Around this sit the data model (teangaview.model), the JSON format
(teangaview.json_format, teangaview.corpus), the layer hierarchy
(teangaview.graph) and the `teanga-util` command line tool
(teangaview.cmd) ::

            cmd                               [tools]
             |
      +------+--------+
      |               |
      v               v
    corpus -> json_format                     [formats]
                      |
                      v
    sections -> resolve, partition, tree,     [resolution]
                ordering -> graph
                      |
                      v
                model, annotation             [data]
"""
