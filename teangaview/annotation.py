"""
Resolved annotations: what a Teanga layer looks like once its sparse,
relatively indexed encoding has been translated into character offsets.

Everything here is a value. Resolving the same document twice gives
equal (but not identical) objects, and nothing keeps a reference back to
the layer an annotation was read from other than its name.
"""

# License: BSD3

# pylint: disable=too-many-arguments, too-few-public-methods

from collections import namedtuple


class Span(object):
    """
    What portion of text an annotation corresponds to, in terms of
    character offsets.

    Offsets sit in between characters, the way Python slice indices
    do ::

          h   o   w   d   y
        0   1   2   3   4   5

    So `(0,5)` covers the whole word above, and `(1,2)`
    picks out the letter "o"
    """
    def __init__(self, start, end):
        self.char_start = start
        self.char_end = end

    def __str__(self):
        return '(%d,%d)' % (self.char_start, self.char_end)

    def __repr__(self):
        return 'Span(%d, %d)' % (self.char_start, self.char_end)

    def __lt__(self, other):
        return self.sort_key() < other.sort_key()

    def __eq__(self, other):
        return isinstance(other, Span) and\
            self.char_start == other.char_start and\
            self.char_end == other.char_end

    def __ne__(self, other):
        return not self == other

    def __hash__(self):
        return (self.char_start, self.char_end).__hash__()

    def sort_key(self):
        """
        Order by starting point and, on a tie, widest first
        """
        return (self.char_start, 0 - self.char_end)

    def encloses(self, other):
        """
        Return True if this span includes the argument

        Note that `x.encloses(x) == True`
        """
        if other is None:
            return False
        return\
            self.char_start <= other.char_start and\
            self.char_end >= other.char_end

    def crosses(self, other):
        """
        True if the two spans partially overlap: one of them starts
        strictly inside the other and ends strictly after it ::

            Span(0, 5).crosses(Span(3, 8)) == True
            Span(0, 5).crosses(Span(1, 4)) == False  # nested
            Span(0, 5).crosses(Span(5, 8)) == False  # touching
        """
        first, second = (self, other) if self.char_start <= other.char_start\
            else (other, self)
        return first.char_start < second.char_start < first.char_end <\
            second.char_end

    def split(self, other):
        """
        Three way decomposition of a crossing pair: the part only the
        leftmost span covers, the shared middle, and the part only the
        rightmost span covers.
        """
        if not self.crosses(other):
            raise ValueError("%s and %s do not cross" % (self, other))
        first, second = (self, other) if self.char_start <= other.char_start\
            else (other, self)
        return (Span(first.char_start, second.char_start),
                Span(second.char_start, first.char_end),
                Span(first.char_end, second.char_end))


# ---------------------------------------------------------------------
# payloads
# ---------------------------------------------------------------------


class StringData(namedtuple('StringData', 'value')):
    "a string (or enumerated value) attached to an annotation"
    __slots__ = ()

    def __str__(self):
        return self.value


class LinkData(namedtuple('LinkData', 'target')):
    "a link to a position in the layer's target layer"
    __slots__ = ()

    def __str__(self):
        return str(self.target)


class TypedLinkData(namedtuple('TypedLinkData', 'target link_type')):
    "a link with a label saying what sort of link it is"
    __slots__ = ()

    def __str__(self):
        return '%s=%d' % (self.link_type, self.target)


# ---------------------------------------------------------------------
# annotations
# ---------------------------------------------------------------------


class Anno(object):
    """A resolved annotation.

    Attributes
    ----------
    layer : str
        Name of the layer this annotation comes from.
    data : StringData, LinkData, TypedLinkData or None
        Payload, if the layer carries any.
    span : Span
        Absolute character offsets into the root text.
    left_complete, right_complete : boolean
        False if the annotation really starts before (resp. ends after)
        `span`, ie. it was clipped to fit a partition block.
    children : tuple of Anno
        Annotations nested within this one, in text order.
    """
    def __init__(self, layer, data, start, end,
                 left_complete=True, right_complete=True, children=()):
        self.layer = layer
        self.data = data
        self.span = Span(start, end)
        self.left_complete = left_complete
        self.right_complete = right_complete
        self.children = tuple(children)

    @property
    def start(self):
        "start offset (inclusive)"
        return self.span.char_start

    @property
    def end(self):
        "end offset (exclusive)"
        return self.span.char_end

    def is_complete(self):
        """
        True if neither side was clipped
        """
        return self.left_complete and self.right_complete

    def _tuple(self):
        return (self.layer, self.data, self.start, self.end,
                self.left_complete, self.right_complete, self.children)

    def __eq__(self, other):
        return isinstance(other, Anno) and self._tuple() == other._tuple()

    def __ne__(self, other):
        return not self == other

    def __hash__(self):
        return hash(self._tuple())

    def __repr__(self):
        return 'Anno(%r, %r, %d, %d, %r, %r, children=%r)' %\
            (self.layer, self.data, self.start, self.end,
             self.left_complete, self.right_complete, list(self.children))

    def __str__(self):
        left = '[' if self.left_complete else '<'
        right = ')' if self.right_complete else '>'
        data = '' if self.data is None else ' ' + str(self.data)
        return '%s %s%d,%d%s%s' % (self.layer, left, self.start, self.end,
                                    right, data)

    def clip(self, span):
        """
        Copy of this annotation restricted to a sub-span of it,
        recording which sides were cut off
        """
        if not self.span.encloses(span):
            raise ValueError("%s does not lie within %s" % (span, self))
        return Anno(self.layer, self.data, span.char_start, span.char_end,
                    left_complete=(self.left_complete and
                                   span.char_start == self.start),
                    right_complete=(self.right_complete and
                                    span.char_end == self.end))

    def with_children(self, children):
        """
        Copy of this annotation with the given children
        """
        return Anno(self.layer, self.data, self.start, self.end,
                    left_complete=self.left_complete,
                    right_complete=self.right_complete,
                    children=children)

    def flatten(self):
        """
        This annotation followed by all its descendants in text order
        (children dropped)
        """
        res = [self.with_children(())]
        for kid in self.children:
            res.extend(kid.flatten())
        return res


class DocSecs(object):
    """
    A root text together with the forest of annotations resolved
    onto it.

    If resolution of one of the layers built on this text failed (and
    we were asked to carry on anyway) `error` holds the exception and
    `annos` is empty.
    """
    def __init__(self, content, annos=(), error=None):
        self.content = content
        self.annos = tuple(annos)
        self.error = error

    def __repr__(self):
        return 'DocSecs(%r, %r, error=%r)' %\
            (self.content, list(self.annos), self.error)

    def __eq__(self, other):
        return isinstance(other, DocSecs) and\
            self.content == other.content and\
            self.annos == other.annos and\
            self.error is other.error

    def __ne__(self, other):
        return not self == other

    def text(self, span=None):
        """
        Return the root text, optionally limited to a span
        """
        if span is None:
            return self.content
        return self.content[span.char_start:span.char_end]

    def flatten(self):
        """
        All annotations in the forest, in text order (children dropped)
        """
        res = []
        for anno in self.annos:
            res.extend(anno.flatten())
        return res
