# License: BSD3

"""
Tests for the teanga-util subcommands
"""

from contextlib import redirect_stderr, redirect_stdout
from io import StringIO
import os
import shutil
import tempfile
import unittest

from teangaview.cmd import main

CORPUS_JSON = """
{"_meta": {"text": {"type": "characters"},
           "tokens": {"type": "span", "on": "text"},
           "pos": {"type": "seq", "on": "tokens", "data": "string"},
           "heads": {"type": "element", "on": "tokens"}},
 "_order": ["good"],
 "good": {"text": "This is a document.",
          "tokens": [[0, 4], [5, 7], [8, 9], [10, 19]],
          "pos": ["DT", "VBZ", "DT", "NN"]},
 "bad": {"text": "Oops",
         "tokens": [[0, 4]],
         "heads": [3]}}
"""


class CmdTest(unittest.TestCase):
    "run teanga-util on a small corpus"

    def setUp(self):
        self.tmpdir = tempfile.mkdtemp(prefix='teangaview-')
        self.corpus = os.path.join(self.tmpdir, 'corpus.json')
        with open(self.corpus, 'w', encoding='utf-8') as stream:
            stream.write(CORPUS_JSON)

    def tearDown(self):
        shutil.rmtree(self.tmpdir)

    def run_main(self, *argv):
        "stdout of teanga-util with the given arguments"
        out = StringIO()
        with redirect_stdout(out):
            main(list(argv))
        return out.getvalue()

    def test_text(self):
        out = self.run_main('text', self.corpus)
        self.assertEqual("== good [text]\nThis is a document.\n"
                         "== bad [text]\nOops\n", out)
        out = self.run_main('text', self.corpus, '--doc', 'go')
        self.assertNotIn('Oops', out)

    def test_text_layers(self):
        out = self.run_main('text', self.corpus, '--layer', 'pos')
        self.assertEqual("== good [text]\nThis is a document.\n", out)
        out = self.run_main('text', self.corpus, '--layer', 'tokens')
        self.assertEqual("== good [text]\nThis is a document.\n"
                         "== bad [text]\nOops\n", out)
        out = self.run_main('text', self.corpus, '--layer', 'text')
        self.assertIn('Oops', out)

    def test_bad_corpus(self):
        for content in [b'{"_meta": ', b'\xff\xfe{}']:
            with open(self.corpus, 'wb') as stream:
                stream.write(content)
            out = StringIO()
            err = StringIO()
            with redirect_stdout(out), redirect_stderr(err):
                res = main(['dump', self.corpus])
            self.assertEqual(1, res)
            self.assertEqual('', out.getvalue())
            self.assertTrue(err.getvalue().startswith('ERROR: '))

    def test_dump(self):
        out = self.run_main('dump', self.corpus)
        self.assertIn('== good [text]', out)
        self.assertIn('(tokens (pos:DT This))', out)
        self.assertIn('== bad [text]', out)
        self.assertIn('ERROR:', out)

    def test_dump_strict(self):
        out = self.run_main('dump', '--strict', self.corpus)
        self.assertIn('== good [text]', out)
        self.assertIn('== bad\nERROR:', out)

    def test_dump_flat(self):
        out = self.run_main('dump', '--flat', '--layer', 'pos',
                            '--doc', 'good', self.corpus)
        lines = out.splitlines()
        self.assertEqual('== good [text]', lines[0])
        self.assertEqual("pos [0,4) DT\t'This'", lines[1])
        self.assertEqual(5, len(lines))

    def test_count(self):
        out = self.run_main('count', self.corpus)
        rows = dict((line.split()[0], line.split()[1:])
                    for line in out.splitlines() if line.strip())
        # the tokens of the broken document are not counted
        self.assertEqual(['span', '4', '0'], rows['tokens'])
        self.assertEqual(['seq', '4', '0'], rows['pos'])
        self.assertIn('Could not resolve:', out)
        self.assertIn('bad [text]', out)

    def test_graph(self):
        out = self.run_main('graph', self.corpus)
        self.assertIn('digraph', out)
        self.assertIn('tokens', out)
        self.assertIn('->', out)
