"""
Corpus management
"""

# License: BSD3

import sys

from teangaview.json_format import read_corpus_file
from teangaview.model import Corpus


class Reader(object):
    """
    `Reader` reads a corpus file and hands out the documents in it.

    :param filename: path to a Teanga JSON corpus
    :type filename: str

    A potentially useful pattern is to read only a slice of the corpus,
    for example the documents whose id starts with "dev" ::

        reader = Reader(corpus_file)
        corpus = reader.slurp(lambda doc_id: doc_id.startswith('dev'))
    """
    def __init__(self, filename):
        self.filename = filename

    def slurp(self, doc_filter=None, verbose=False):
        """
        Read the corpus, keeping only the documents whose id satisfies
        `doc_filter` (all of them if None).

        Parameters
        ----------
        doc_filter : function from str to boolean, optional
        verbose : boolean, defaults to False
            If True, print what we're reading to stderr.

        Returns
        -------
        corpus : Corpus
        """
        if verbose:
            print("Slurping corpus %s" % self.filename, file=sys.stderr)
        corpus = read_corpus_file(self.filename)
        if doc_filter is None:
            return corpus
        documents = [(k, v) for k, v in corpus.documents if doc_filter(k)]
        if verbose:
            print("Keeping %d of %d documents" %
                  (len(documents), len(corpus.documents)), file=sys.stderr)
        kept = set(k for k, _ in documents)
        return Corpus(corpus.meta,
                      [k for k in corpus.order if k in kept],
                      documents)
