# -*- coding: utf-8 -*-
#
# License: BSD3
# pylint: disable=too-many-public-methods, invalid-name

"""
Tests for teangaview
"""

import os
import random
import shutil
import tempfile
import time
import unittest

from nltk import Tree

from teangaview import model
from teangaview.annotation import (Anno, DocSecs, LinkData, Span,
                                   StringData, TypedLinkData)
from teangaview.errors import (AnchorRangeError,
                               MissingMetadataError,
                               PartitionIntegrityError,
                               ResolutionLimitError,
                               StructuralError,
                               TeangaFormatError,
                               UnknownLayerError)
from teangaview.graph import LayerDotGraph, LayerGraph
from teangaview.json_format import (decode_desc, decode_layer,
                                    encode_desc, encode_layer,
                                    read_corpus_file,
                                    read_corpus_from_json_string,
                                    write_corpus_file,
                                    write_corpus_to_json_string)
from teangaview.model import DataType, LayerDesc, LayerType
from teangaview.ordering import LayerOrder
from teangaview.partition import partition, reproject
from teangaview.resolve import Resolver, resolve
from teangaview.sections import ResolveSettings, doc_sections
from teangaview.tree import anno_label, build_forest, depth, to_tree

# ---------------------------------------------------------------------
# example corpora
# ---------------------------------------------------------------------

CORPUS_JSON = """
{"_meta": {"text": {"type": "characters"},
           "tokens": {"type": "span", "on": "text"}},
 "_order": ["Kjco"],
 "Kjco": {"text": "This is a document.",
          "tokens": [[0, 4], [5, 7], [8, 9], [10, 19]]},
 "abcd": {"text": "This is a second document"}}
"""

TEXT = "This is a document."
TOKENS = [(0, 4), (5, 7), (8, 9), (10, 19)]
POS = ["DT", "VBZ", "DT", "NN"]


def chars_desc():
    "description of a character layer"
    return LayerDesc(LayerType.characters)


def mk_meta(**kwargs):
    """
    Metadata with a `text` character layer, a `tokens` span layer on
    it, and whatever else is passed in
    """
    meta = {'text': chars_desc(),
            'tokens': LayerDesc(LayerType.span, on='text')}
    meta.update(kwargs)
    return meta


def mk_doc(**kwargs):
    """
    Document with the usual text and tokens, and whatever else is
    passed in
    """
    layers = {'text': model.Characters(TEXT),
              'tokens': model.Span(TOKENS)}
    layers.update(kwargs)
    return model.Document(layers)


def pos_layer(tags=None):
    "Seq of part of speech tags"
    return model.Seq(StringData(x) for x in (tags or POS))


def pos_desc():
    "description of the part of speech layer"
    return LayerDesc(LayerType.seq, on='tokens', data=DataType.string())


def spans(annos):
    "(start, end) pairs of some annotations"
    return [(a.start, a.end) for a in annos]


def check_forest(test, forest, lo, hi):
    """
    Siblings ascending and non overlapping, children within their
    parent, everything within `[lo, hi]`
    """
    last_end = lo
    for anno in forest:
        test.assertTrue(lo <= anno.start <= anno.end <= hi,
                        "%s not within (%d,%d)" % (anno, lo, hi))
        test.assertTrue(anno.start >= last_end,
                        "%s overlaps its left sibling" % anno)
        last_end = anno.end
        check_forest(test, anno.children, anno.start, anno.end)


def crossing_pairs(blocks):
    "all pairs of crossing spans"
    return [(x, y) for i, x in enumerate(blocks)
            for y in blocks[i + 1:] if x.crosses(y)]


# ---------------------------------------------------------------------
# spans
# ---------------------------------------------------------------------


class SpanTest(unittest.TestCase):
    "tests for teangaview.annotation.Span"

    def test_crosses(self):
        "Span.crosses() function"
        self.assertTrue(Span(0, 5).crosses(Span(3, 8)))
        self.assertTrue(Span(3, 8).crosses(Span(0, 5)))
        # nested, disjoint, touching, identical
        self.assertFalse(Span(0, 5).crosses(Span(1, 4)))
        self.assertFalse(Span(0, 5).crosses(Span(0, 3)))
        self.assertFalse(Span(0, 5).crosses(Span(6, 8)))
        self.assertFalse(Span(0, 5).crosses(Span(5, 8)))
        self.assertFalse(Span(0, 5).crosses(Span(0, 5)))
        self.assertFalse(Span(3, 3).crosses(Span(0, 5)))

    def test_split(self):
        "Span.split() function"
        self.assertEqual((Span(0, 3), Span(3, 5), Span(5, 8)),
                         Span(3, 8).split(Span(0, 5)))
        self.assertRaises(ValueError, Span(0, 5).split, Span(1, 2))

    def test_sort_first_widest(self):
        "spans sort by start, widest first"
        self.assertEqual([Span(0, 9), Span(0, 4), Span(2, 3)],
                         sorted([Span(2, 3), Span(0, 4), Span(0, 9)]))


# ---------------------------------------------------------------------
# resolution
# ---------------------------------------------------------------------


class ResolveTest(unittest.TestCase):
    "tests for teangaview.resolve"

    def test_span_on_characters(self):
        annos, root = resolve('tokens', mk_meta(), mk_doc())
        self.assertEqual('text', root)
        self.assertEqual(TOKENS, spans(annos))
        self.assertTrue(all(a.data is None for a in annos))
        self.assertTrue(all(a.is_complete() for a in annos))

    def test_seq_on_tokens(self):
        meta = mk_meta(pos=pos_desc())
        annos, root = resolve('pos', meta, mk_doc(pos=pos_layer()))
        self.assertEqual('text', root)
        self.assertEqual(TOKENS, spans(annos))
        self.assertEqual([StringData(x) for x in POS],
                         [a.data for a in annos])

    def test_seq_length_mismatch(self):
        meta = mk_meta(pos=pos_desc())
        doc = mk_doc(pos=pos_layer(["DT", "VBZ"]))
        with self.assertWarns(UserWarning):
            annos, _ = resolve('pos', meta, doc)
        self.assertEqual(TOKENS[:2], spans(annos))

        doc = mk_doc(pos=pos_layer(POS + ["X", "Y"]))
        with self.assertWarns(UserWarning):
            annos, _ = resolve('pos', meta, doc)
        self.assertEqual(4, len(annos))

    def test_seq_on_characters(self):
        meta = {'text': chars_desc(),
                'case': LayerDesc(LayerType.seq, on='text',
                                  data=DataType.enum(['l', 'u']))}
        doc = model.Document({'text': model.Characters('aBc'),
                              'case': model.Seq([StringData('l'),
                                                 StringData('u'),
                                                 StringData('l')])})
        annos, _ = resolve('case', meta, doc)
        self.assertEqual([(0, 1), (1, 2), (2, 3)], spans(annos))
        self.assertEqual([None, None, None], [a.data for a in annos])

        annos, _ = resolve('case', meta, doc, attach_character_seq_data=True)
        self.assertEqual([StringData('l'), StringData('u'), StringData('l')],
                         [a.data for a in annos])

    def test_offsets_are_code_points(self):
        meta = {'text': chars_desc(),
                'chars': LayerDesc(LayerType.seq, on='text',
                                   data=DataType.string())}
        doc = model.Document({'text': model.Characters(u'café'),
                              'chars': model.Seq([])})
        annos, _ = resolve('chars', meta, doc)
        self.assertEqual(4, len(annos))

    def test_div_on_characters(self):
        meta = {'text': chars_desc(),
                'lines': LayerDesc(LayerType.div, on='text')}
        doc = model.Document({'text': model.Characters('One. Two.'),
                              'lines': model.Div([0, 5])})
        annos, _ = resolve('lines', meta, doc)
        self.assertEqual([(0, 5), (5, 9)], spans(annos))

    def test_div_on_tokens(self):
        meta = mk_meta(sentences=LayerDesc(LayerType.div, on='tokens',
                                           data=DataType.string()))
        doc = mk_doc(sentences=model.Div([0, 2], [StringData('a'),
                                                  StringData('b')]))
        annos, _ = resolve('sentences', meta, doc)
        # the first division stops at the end of the token before
        # the next breakpoint, not at the start of the next division
        self.assertEqual([(0, 7), (8, 19)], spans(annos))
        self.assertEqual([StringData('a'), StringData('b')],
                         [a.data for a in annos])

    def test_div_empty_division(self):
        meta = mk_meta(sentences=LayerDesc(LayerType.div, on='tokens'))
        doc = mk_doc(sentences=model.Div([0, 0, 2]))
        annos, _ = resolve('sentences', meta, doc)
        self.assertEqual([(0, 0), (0, 7), (8, 19)], spans(annos))

    def test_element(self):
        meta = mk_meta(marks=LayerDesc(LayerType.element, on='text'),
                       heads=LayerDesc(LayerType.element, on='tokens',
                                       data=DataType.link()))
        doc = mk_doc(marks=model.Element([1, 3]),
                     heads=model.Element([3], [LinkData(0)]))
        annos, _ = resolve('marks', meta, doc)
        self.assertEqual([(1, 2), (3, 4)], spans(annos))
        annos, _ = resolve('heads', meta, doc)
        self.assertEqual([(10, 19)], spans(annos))
        self.assertEqual(LinkData(0), annos[0].data)

    def test_span_on_tokens(self):
        meta = mk_meta(chunks=LayerDesc(LayerType.span, on='tokens'))
        doc = mk_doc(chunks=model.Span([(0, 2), (3, 4), (1, 1)]))
        annos, _ = resolve('chunks', meta, doc)
        self.assertEqual([(0, 7), (10, 19), (5, 5)], spans(annos))

    def test_deep_chain(self):
        meta = mk_meta(chunks=LayerDesc(LayerType.span, on='tokens'),
                       labels=LayerDesc(LayerType.seq, on='chunks',
                                        data=DataType.string()),
                       notes=LayerDesc(LayerType.element, on='labels',
                                       data=DataType.string()))
        doc = mk_doc(chunks=model.Span([(0, 2), (2, 4)]),
                     labels=model.Seq([StringData('NP'), StringData('VP')]),
                     notes=model.Element([1], [StringData('!')]))
        resolver = Resolver(doc, meta)
        annos, root = resolver.resolve('labels')
        self.assertEqual('text', root)
        self.assertEqual([(0, 7), (8, 19)], spans(annos))
        annos, root = resolver.resolve('notes')
        self.assertEqual('text', root)
        self.assertEqual([(8, 19)], spans(annos))
        self.assertEqual('text', resolver.root_of('notes'))

    def test_character_layer(self):
        self.assertRaises(StructuralError,
                          resolve, 'text', mk_meta(), mk_doc())

    def test_unknown_layer(self):
        with self.assertRaises(LookupError):
            resolve('ghost', mk_meta(), mk_doc())
        self.assertRaises(UnknownLayerError,
                          resolve, 'ghost', mk_meta(), mk_doc())

    def test_missing_metadata(self):
        doc = mk_doc(pos=pos_layer())
        self.assertRaises(MissingMetadataError,
                          resolve, 'pos', mk_meta(), doc)

    def test_missing_anchor(self):
        meta = mk_meta(pos=LayerDesc(LayerType.seq, on='words',
                                     data=DataType.string()))
        self.assertRaises(UnknownLayerError,
                          resolve, 'pos', meta, mk_doc(pos=pos_layer()))

    def test_cycle(self):
        meta = mk_meta(a=LayerDesc(LayerType.span, on='b'),
                       b=LayerDesc(LayerType.span, on='a'))
        doc = mk_doc(a=model.Span([(0, 1)]), b=model.Span([(0, 1)]))
        self.assertRaises(StructuralError, resolve, 'a', meta, doc)
        self.assertRaises(StructuralError, Resolver(doc, meta).root_of, 'b')

    def test_out_of_range(self):
        def check(desc, layer):
            "resolving the layer should fail with a range error"
            meta = mk_meta(bad=desc)
            doc = mk_doc(bad=layer)
            self.assertRaises(AnchorRangeError, resolve, 'bad', meta, doc)
            with self.assertRaises(IndexError):
                resolve('bad', meta, doc)

        on_tokens = lambda t: LayerDesc(t, on='tokens')
        on_text = lambda t: LayerDesc(t, on='text')
        check(on_tokens(LayerType.element), model.Element([4]))
        check(on_tokens(LayerType.element), model.Element([-1]))
        check(on_text(LayerType.element), model.Element([19]))
        check(on_tokens(LayerType.span), model.Span([(2, 5)]))
        check(on_tokens(LayerType.span), model.Span([(3, 2)]))
        check(on_text(LayerType.span), model.Span([(10, 20)]))
        check(on_tokens(LayerType.div), model.Div([0, 4]))
        check(on_tokens(LayerType.div), model.Div([2, 1]))
        check(on_text(LayerType.div), model.Div([0, 20]))

    def test_unordered_anchor(self):
        meta = mk_meta(chunks=LayerDesc(LayerType.span, on='tokens'))
        doc = mk_doc(tokens=model.Span([(5, 7), (0, 4)]),
                     chunks=model.Span([(0, 2)]))
        self.assertRaises(AnchorRangeError, resolve, 'chunks', meta, doc)


# ---------------------------------------------------------------------
# partition
# ---------------------------------------------------------------------


class PartitionTest(unittest.TestCase):
    "tests for teangaview.partition"

    def test_disjoint(self):
        blocks = partition([Span(x, y) for x, y in TOKENS])
        self.assertEqual([Span(x, y) for x, y in TOKENS], blocks)

    def test_crossing(self):
        blocks = partition([Span(0, 5), Span(3, 8)])
        self.assertEqual([Span(0, 3), Span(3, 5), Span(5, 8)], blocks)

    def test_nested_and_duplicates(self):
        blocks = partition([Span(5, 7), Span(0, 4), Span(0, 19),
                            Span(0, 4)])
        self.assertEqual([Span(0, 19), Span(0, 4), Span(0, 4), Span(5, 7)],
                         blocks)

    def test_chain(self):
        blocks = partition([Span(0, 10), Span(5, 15), Span(12, 20)])
        self.assertEqual([], crossing_pairs(blocks))
        self.assertEqual(blocks, partition(blocks))

    def test_limit(self):
        self.assertRaises(ResolutionLimitError,
                          partition, [Span(0, 5), Span(3, 8)], max_splits=0)
        partition([Span(0, 5), Span(3, 8)], max_splits=1)

    def test_reproject_crossing(self):
        a = Anno('A', None, 0, 5)
        b = Anno('B', None, 3, 8)
        blocks = partition([a.span, b.span])
        res = reproject([a, b], blocks)
        expected = [Anno('A', None, 0, 3, True, False),
                    Anno('A', None, 3, 5, False, True),
                    Anno('B', None, 3, 5, True, False),
                    Anno('B', None, 5, 8, True, True)]
        self.assertEqual(expected, res)

    def test_reproject_nested(self):
        sentence = Anno('sentences', None, 0, 19)
        token = Anno('tokens', None, 0, 4)
        blocks = partition([sentence.span, token.span])
        self.assertEqual([sentence, token],
                         reproject([sentence, token], blocks))

    def test_reproject_empty(self):
        empty = Anno('marks', None, 3, 3)
        wide = Anno('A', None, 0, 5)
        blocks = partition([empty.span, wide.span])
        self.assertEqual([empty, wide], reproject([empty, wide], blocks))

    def test_reproject_integrity(self):
        anno = Anno('A', None, 0, 5)
        self.assertRaises(PartitionIntegrityError,
                          reproject, [anno], [Span(0, 3)])
        self.assertRaises(StructuralError,
                          reproject, [anno], [Span(1, 5)])

    def test_many_crossing(self):
        rng = random.Random(1600)
        crossing = []
        for _ in range(2000):
            start = rng.randint(0, 2000)
            crossing.append(Span(start, start + rng.randint(1, 300)))
        settings = ResolveSettings()
        started = time.time()
        try:
            partition(crossing, max_splits=settings.max_partition_splits)
        except ResolutionLimitError:
            pass
        self.assertLess(time.time() - started, 10)

    def test_many_crossing_no_limit(self):
        rng = random.Random(400)
        crossing = []
        for _ in range(200):
            start = rng.randint(0, 400)
            crossing.append(Span(start, start + rng.randint(1, 60)))
        blocks = partition(crossing)
        self.assertEqual([], crossing_pairs(blocks))
        self.assertEqual(blocks, sorted(blocks, key=Span.sort_key))
        annos = [Anno('L', None, s.char_start, s.char_end) for s in crossing]
        self.assertEqual(len(annos),
                         len([a for a in reproject(annos, blocks)
                              if a.left_complete]))

    def test_random_properties(self):
        rng = random.Random(42)
        for _ in range(20):
            annos = []
            for i in range(15):
                start = rng.randint(0, 50)
                end = rng.randint(start, 50)
                annos.append(Anno('L%d' % (i % 3), None, start, end))
            blocks = partition([a.span for a in annos])
            self.assertEqual([], crossing_pairs(blocks))
            self.assertEqual(blocks, partition(blocks))
            for anno in annos:
                pieces = reproject([anno], blocks)
                self.assertEqual(anno.start, pieces[0].start)
                self.assertEqual(anno.end, pieces[-1].end)
                for p1, p2 in zip(pieces, pieces[1:]):
                    self.assertEqual(p1.end, p2.start)
                self.assertEqual(len(pieces) == 1,
                                 all(p.is_complete() for p in pieces))

            order = LayerOrder.from_meta({})
            flat = sorted(reproject(annos, blocks), key=order.anno_key)
            forest = build_forest(flat)
            check_forest(self, forest, 0, 50)
            again = build_forest(DocSecs('', forest).flatten())
            self.assertEqual(forest, again)


# ---------------------------------------------------------------------
# layer order
# ---------------------------------------------------------------------


class OrderingTest(unittest.TestCase):
    "tests for teangaview.graph and teangaview.ordering"

    def setUp(self):
        self.meta = mk_meta(pos=pos_desc(),
                            sentences=LayerDesc(LayerType.div, on='tokens'),
                            chunks=LayerDesc(LayerType.span, on='text'))

    def test_graph(self):
        grph = LayerGraph.from_meta(self.meta)
        self.assertEqual(['text'], grph.roots())
        self.assertEqual(['pos', 'sentences'], grph.built_on('tokens'))
        self.assertEqual('tokens', grph.anchor('pos'))
        self.assertIsNone(grph.anchor('text'))
        self.assertEqual('seq', grph.type('pos'))
        self.assertEqual(['text', 'chunks', 'tokens', 'pos', 'sentences'],
                         grph.preorder())

    def test_compare(self):
        order = LayerOrder.from_meta(self.meta)
        self.assertTrue(order.compare('tokens', 'pos') < 0)
        self.assertTrue(order.compare('pos', 'tokens') > 0)
        self.assertTrue(order.compare('text', 'sentences') < 0)
        self.assertTrue(order.compare('pos', 'sentences') < 0)
        self.assertTrue(order.compare('chunks', 'pos') < 0)
        self.assertEqual(0, order.compare('pos', 'pos'))
        # unknown names go last
        self.assertTrue(order.compare('zzz', 'sentences') > 0)
        self.assertTrue(order.compare('aaa', 'zzz') < 0)
        self.assertEqual(['tokens', 'pos', 'zzz'],
                         order.sorted(['zzz', 'pos', 'tokens']))

    def test_cycle(self):
        meta = mk_meta(b=LayerDesc(LayerType.span, on='a'),
                       a=LayerDesc(LayerType.span, on='b'))
        grph = LayerGraph.from_meta(meta)
        self.assertEqual(['text', 'tokens', 'a', 'b'], grph.preorder())

    def test_undescribed(self):
        grph = LayerGraph.from_meta(self.meta, ['extra'])
        self.assertEqual('?', grph.type('extra'))
        self.assertEqual(['extra', 'text'], grph.roots())

    def test_dot(self):
        dot = LayerDotGraph(LayerGraph.from_meta(self.meta)).to_string()
        self.assertIn('digraph', dot)
        self.assertIn('tokens', dot)
        self.assertIn('->', dot)


# ---------------------------------------------------------------------
# putting it together
# ---------------------------------------------------------------------


class SectionsTest(unittest.TestCase):
    "tests for teangaview.sections and teangaview.tree"

    def test_tokens(self):
        sections = doc_sections(mk_doc(), mk_meta())
        self.assertEqual(['text'], list(sections))
        docsecs = sections['text']
        self.assertEqual(TEXT, docsecs.content)
        self.assertIsNone(docsecs.error)
        self.assertEqual(TOKENS, spans(docsecs.annos))
        for anno in docsecs.annos:
            self.assertEqual('tokens', anno.layer)
            self.assertEqual((), anno.children)
            self.assertTrue(anno.is_complete())

    def test_pos_under_tokens(self):
        meta = mk_meta(pos=pos_desc())
        docsecs = doc_sections(mk_doc(pos=pos_layer()), meta)['text']
        self.assertEqual(4, len(docsecs.annos))
        self.assertEqual(2, depth(docsecs.annos))
        for token, tag in zip(docsecs.annos, POS):
            self.assertEqual('tokens', token.layer)
            self.assertEqual(1, len(token.children))
            kid = token.children[0]
            self.assertEqual('pos', kid.layer)
            self.assertEqual(StringData(tag), kid.data)
            self.assertEqual(token.span, kid.span)
            self.assertTrue(kid.is_complete())
        check_forest(self, docsecs.annos, 0, len(TEXT))

    def test_crossing_layers(self):
        meta = {'text': chars_desc(),
                'A': LayerDesc(LayerType.span, on='text'),
                'B': LayerDesc(LayerType.span, on='text')}
        doc = model.Document({'text': model.Characters('abcdefgh'),
                              'A': model.Span([(0, 5)]),
                              'B': model.Span([(3, 8)])})
        forest = doc_sections(doc, meta)['text'].annos
        expected = [Anno('A', None, 0, 3, True, False),
                    Anno('A', None, 3, 5, False, True,
                         children=[Anno('B', None, 3, 5, True, False)]),
                    Anno('B', None, 5, 8, True, True)]
        self.assertEqual(expected, list(forest))

    def test_nesting_follows_width(self):
        meta = mk_meta(pos=pos_desc(),
                       sentences=LayerDesc(LayerType.div, on='tokens'))
        doc = mk_doc(pos=pos_layer(), sentences=model.Div([0]))
        forest = doc_sections(doc, meta)['text'].annos
        self.assertEqual(1, len(forest))
        self.assertEqual('sentences', forest[0].layer)
        self.assertEqual(3, depth(forest))
        self.assertEqual(TOKENS, spans(forest[0].children))

    def test_layer_filter(self):
        meta = mk_meta(pos=pos_desc())
        doc = mk_doc(pos=pos_layer())
        layers = [('tokens', False), ('pos', True)]
        forest = doc_sections(doc, meta, layers=layers)['text'].annos
        self.assertEqual(['pos'] * 4, [a.layer for a in forest])
        self.assertEqual(TOKENS, spans(forest))
        self.assertEqual(1, depth(forest))

        forest = doc_sections(doc, meta, layers=[])['text'].annos
        self.assertEqual((), forest)

    def test_text_only(self):
        corpus = read_corpus_from_json_string(CORPUS_JSON)
        sections = doc_sections(corpus.document('abcd'), corpus.meta)
        self.assertEqual(DocSecs("This is a second document"),
                         sections['text'])

    def test_strict(self):
        meta = mk_meta(heads=LayerDesc(LayerType.element, on='tokens'))
        doc = mk_doc(heads=model.Element([7]))
        self.assertRaises(AnchorRangeError, doc_sections, doc, meta)

    def test_lenient(self):
        meta = mk_meta(fr=chars_desc(),
                       fr_tokens=LayerDesc(LayerType.span, on='fr'),
                       heads=LayerDesc(LayerType.element, on='fr_tokens'))
        doc = mk_doc(fr=model.Characters("C'est un document."),
                     fr_tokens=model.Span([(0, 5), (6, 8), (9, 18)]),
                     heads=model.Element([7]))
        sections = doc_sections(doc, meta, strict=False)
        self.assertEqual(set(['text', 'fr']), set(sections))
        self.assertIsInstance(sections['fr'].error, AnchorRangeError)
        self.assertEqual((), sections['fr'].annos)
        self.assertIsNone(sections['text'].error)
        self.assertEqual(TOKENS, spans(sections['text'].annos))

    def test_lenient_orphan(self):
        meta = mk_meta(pos=LayerDesc(LayerType.seq, on='words',
                                     data=DataType.string()))
        doc = mk_doc(pos=pos_layer())
        with self.assertWarns(UserWarning):
            sections = doc_sections(doc, meta, strict=False)
        self.assertEqual(TOKENS, spans(sections['text'].annos))

    def test_limits(self):
        meta = mk_meta(pos=pos_desc())
        doc = mk_doc(pos=pos_layer())
        settings = ResolveSettings(max_annotations=4)
        self.assertRaises(ResolutionLimitError,
                          doc_sections, doc, meta, settings=settings)
        sections = doc_sections(doc, meta, settings=settings, strict=False)
        self.assertIsInstance(sections['text'].error, ResolutionLimitError)

    def test_to_tree(self):
        docsecs = doc_sections(mk_doc(), mk_meta())['text']
        expected = Tree('text', [Tree('tokens', ['This']), ' ',
                                 Tree('tokens', ['is']), ' ',
                                 Tree('tokens', ['a']), ' ',
                                 Tree('tokens', ['document.'])])
        self.assertEqual(expected, to_tree(docsecs, label='text'))

    def test_anno_label(self):
        self.assertEqual('pos:DT',
                         anno_label(Anno('pos', StringData('DT'), 0, 4)))
        self.assertEqual('<A>',
                         anno_label(Anno('A', None, 3, 5, False, False)))
        self.assertEqual('dep:subj=3',
                         anno_label(Anno('dep', TypedLinkData(3, 'subj'),
                                         0, 4)))


# ---------------------------------------------------------------------
# json
# ---------------------------------------------------------------------

ALL_VARIANTS_META = {
    'text': {'type': 'characters'},
    'tokens': {'type': 'span', 'on': 'text'},
    'chunks': {'type': 'span', 'on': 'tokens', 'data': 'string'},
    'pos': {'type': 'seq', 'on': 'tokens', 'data': ['DT', 'NN', 'VBZ']},
    'sentences': {'type': 'div', 'on': 'tokens'},
    'mood': {'type': 'div', 'on': 'tokens', 'data': 'string'},
    'heads': {'type': 'element', 'on': 'tokens'},
    'ner': {'type': 'element', 'on': 'tokens', 'data': 'link',
            'target': 'tokens'},
    'deps': {'type': 'span', 'on': 'tokens', 'data': 'link',
             'link_types': ['subj', 'obj'], 'target': 'tokens'},
}

# layer name, wire value, decoded layer, resolved spans
ALL_VARIANTS = [
    ('text', TEXT, model.Characters(TEXT), None),
    ('tokens', [[0, 4], [5, 7], [8, 9], [10, 19]],
     model.Span(TOKENS), TOKENS),
    ('chunks', [[0, 1, 'NP'], [1, 2, 'VP'], [2, 4, 'NP']],
     model.Span([(0, 1), (1, 2), (2, 4)],
                [StringData('NP'), StringData('VP'), StringData('NP')]),
     [(0, 4), (5, 7), (8, 19)]),
    ('pos', POS, pos_layer(), TOKENS),
    ('sentences', [0], model.Div([0]), [(0, 19)]),
    ('mood', [[0, 'decl']], model.Div([0], [StringData('decl')]),
     [(0, 19)]),
    ('heads', [1], model.Element([1]), [(5, 7)]),
    ('ner', [[3, 1]], model.Element([3], [LinkData(1)]), [(10, 19)]),
    ('deps', [[0, 1, 1, 'subj'], [2, 4, 1, 'obj']],
     model.Span([(0, 1), (2, 4)],
                [TypedLinkData(1, 'subj'), TypedLinkData(1, 'obj')]),
     [(0, 4), (8, 19)]),
]


class JsonFormatTest(unittest.TestCase):
    "tests for teangaview.json_format"

    def setUp(self):
        self.meta = dict((k, decode_desc(v, k))
                         for k, v in ALL_VARIANTS_META.items())

    def test_read(self):
        corpus = read_corpus_from_json_string(CORPUS_JSON)
        self.assertEqual(['Kjco', 'abcd'], corpus.doc_ids())
        self.assertEqual(['Kjco'], corpus.order)
        self.assertEqual(LayerType.span, corpus.meta['tokens'].layer_type)
        self.assertEqual('text', corpus.meta['tokens'].on)
        doc = corpus.document('Kjco')
        self.assertEqual(model.Span(TOKENS), doc['tokens'])
        self.assertEqual({'text': TEXT}, doc.text_layers())
        annos, on = resolve('tokens', corpus.meta, doc)
        self.assertEqual('text', on)
        self.assertEqual(TOKENS, spans(annos))

    def test_descs(self):
        self.assertEqual(DataType.enum(['DT', 'NN', 'VBZ']),
                         self.meta['pos'].data)
        self.assertEqual(DataType.typed_link(['subj', 'obj']),
                         self.meta['deps'].data)
        self.assertEqual(DataType.link(), self.meta['ner'].data)
        self.assertEqual('tokens', self.meta['ner'].target)
        for name, desc in self.meta.items():
            self.assertEqual(desc, decode_desc(encode_desc(desc), name))

    def test_capitalised_descs(self):
        def data_type(data):
            "data type of a seq layer with the given data field"
            obj = {'type': 'seq', 'on': 'tokens', 'data': data}
            return decode_desc(obj).data
        self.assertEqual(DataType.string(), data_type('String'))
        self.assertEqual(DataType.link(), data_type('Link'))
        self.assertEqual(DataType.enum(['A', 'B']),
                         data_type({'Enum': ['A', 'B']}))
        self.assertEqual(DataType.typed_link(['x']),
                         data_type({'TypedLink': ['x']}))

    def test_variants(self):
        values = {}
        for name, value, layer, _ in ALL_VARIANTS:
            decoded = decode_layer(value, self.meta[name])
            self.assertEqual(layer, decoded, name)
            self.assertEqual(value, encode_layer(decoded, self.meta[name]),
                             name)
            values[name] = decoded
        doc = model.Document(values)
        resolver = Resolver(doc, self.meta)
        for name, _, layer, expected in ALL_VARIANTS:
            if expected is None:
                continue
            annos, root = resolver.resolve(name)
            self.assertEqual('text', root)
            self.assertEqual(expected, spans(annos), name)
            data = layer.data or [None] * len(annos)
            self.assertEqual(list(data), [a.data for a in annos], name)

    def test_bad_shapes(self):
        def bad(name, value):
            "decoding this should fail"
            self.assertRaises(TeangaFormatError,
                              decode_layer, value, self.meta[name])
        bad('text', [1, 2])
        bad('tokens', [[0, 4, 'x']])
        bad('tokens', [[0, True]])
        bad('tokens', 'nope')
        bad('chunks', [[0, 1]])
        bad('pos', [1, 2])
        bad('deps', [[0, 1, 1]])
        bad('heads', [[1, 'x']])
        seq = LayerDesc(LayerType.seq, on='tokens')
        self.assertRaises(TeangaFormatError, decode_layer, ['x'], seq)

    def test_bad_corpus(self):
        self.assertRaises(TeangaFormatError,
                          read_corpus_from_json_string, '{"_meta": ')
        self.assertRaises(TeangaFormatError,
                          read_corpus_from_json_string, '[]')
        self.assertRaises(TeangaFormatError,
                          read_corpus_from_json_string,
                          '{"_meta": {}, "d": {"text": "x"}}')
        self.assertRaises(TeangaFormatError,
                          read_corpus_from_json_string,
                          '{"_meta": {"t": {"type": "tree"}}}')
        self.assertRaises(TeangaFormatError,
                          read_corpus_from_json_string,
                          '{"_meta": {"t": {"type": "span"}}}')

    def test_bad_write(self):
        self.assertRaises(TeangaFormatError, encode_layer,
                          model.Span(TOKENS), self.meta['chunks'])
        self.assertRaises(TeangaFormatError, encode_layer,
                          model.Span(TOKENS), self.meta['pos'])
        self.assertRaises(TeangaFormatError, encode_layer,
                          model.Span([(0, 1)], [LinkData(1)]),
                          self.meta['chunks'])

    def test_round_trip(self):
        corpus = read_corpus_from_json_string(CORPUS_JSON)
        again = read_corpus_from_json_string(
            write_corpus_to_json_string(corpus))
        self.assertEqual(corpus, again)

    def test_files(self):
        tmpdir = tempfile.mkdtemp(prefix='teangaview-')
        try:
            path = os.path.join(tmpdir, 'corpus.json')
            corpus = read_corpus_from_json_string(CORPUS_JSON)
            write_corpus_file(corpus, path, indent=2)
            self.assertEqual(corpus, read_corpus_file(path))
        finally:
            shutil.rmtree(tmpdir)

    def test_bad_encoding(self):
        tmpdir = tempfile.mkdtemp(prefix='teangaview-')
        try:
            path = os.path.join(tmpdir, 'corpus.json')
            with open(path, 'wb') as stream:
                stream.write(b'{"_meta": {}, "d\xff": {}}')
            self.assertRaises(TeangaFormatError, read_corpus_file, path)
        finally:
            shutil.rmtree(tmpdir)
