"""
Reconciling layers whose annotations cross each other.

Nested rendering needs annotations to nest: either one encloses the
other or they are disjoint. Layers built independently on the same text
(say, named entities and noun phrases) do not always oblige ::

    A     [---------)
    B           [---------)
          0     3   5     8

We compute a partition of the text into blocks such that no two blocks
cross ::

          [-----)[--)[----)
          0     3   5     8

and then project each annotation onto the blocks it covers, noting
which of its sides have been cut off along the way ::

    A     [-----)[-->
    B            <--)[----)
"""

# License: BSD3

from bisect import bisect_left, bisect_right, insort

from teangaview.annotation import Span
from teangaview.errors import PartitionIntegrityError, ResolutionLimitError


def _find_crossing(divisions, start=0):
    """
    Indices of some pair of crossing spans in a list sorted
    first-widest, looking only at pairs whose left member is at `start`
    or after; None if there is none
    """
    for i in range(start, len(divisions)):
        left = divisions[i]
        l_start, l_end = left.char_start, left.char_end
        for j in range(i + 1, len(divisions)):
            right = divisions[j]
            if right.char_start >= l_end:
                break
            # sorted: right starts no earlier, and is no wider on a tie
            if l_start < right.char_start and l_end < right.char_end:
                return i, j
    return None


def partition(spans, max_splits=None):
    """
    Minimal set of non-crossing spans that respects every boundary of
    the input.

    Crossing pairs are replaced with their three way decomposition (see
    `Span.split`) until there are none left. Nested and disjoint spans
    are left alone, and duplicates are kept.

    Every split strictly reduces the summed length of the spans, so this
    terminates; `max_splits` puts a bound on the work all the same.

    Parameters
    ----------
    spans : iterable of Span
    max_splits : int, optional
        Give up with `ResolutionLimitError` after this many splits.

    Returns
    -------
    divisions : list of Span
        Sorted by start, and widest first on a tie.
    """
    divisions = sorted((Span(s.char_start, s.char_end) for s in spans),
                       key=Span.sort_key)
    splits = 0
    start = 0
    while True:
        pair = _find_crossing(divisions, start)
        if pair is None:
            return divisions
        if max_splits is not None and splits >= max_splits:
            raise ResolutionLimitError("Gave up partitioning after %d "
                                       "splits" % splits)
        i, j = pair
        right = divisions.pop(j)
        left = divisions.pop(i)
        for piece in left.split(right):
            insort(divisions, piece)
        # nothing before i crosses `left` or `right`, so nothing before
        # i crosses their pieces either, which all sort at i or after
        start = i
        splits += 1


def maximal_blocks(span, blocks, starts=None):
    """
    The widest blocks lying within a span, in text order.

    Parameters
    ----------
    span : Span
    blocks : list of Span
        Distinct, non-crossing, sorted first-widest.
    starts : list of int, optional
        Start offsets of `blocks` (precomputed for bisection).
    """
    if starts is None:
        starts = [b.char_start for b in blocks]
    lo = bisect_left(starts, span.char_start)
    hi = bisect_right(starts, span.char_end)
    res = []
    for block in blocks[lo:hi]:
        if not span.encloses(block):
            continue
        # blocks do not cross, so anything within an earlier
        # block is within the last one we kept
        if res and res[-1].encloses(block):
            continue
        res.append(block)
    return res


def _check_tiling(anno, tiles):
    ok = bool(tiles) and\
        tiles[0].char_start == anno.start and\
        tiles[-1].char_end == anno.end and\
        all(t1.char_end == t2.char_start for t1, t2 in zip(tiles, tiles[1:]))
    if not ok:
        raise PartitionIntegrityError(
            "Annotation %s is not covered exactly by partition blocks %s" %
            (anno, ' '.join(str(t) for t in tiles)), layer=anno.layer)


def reproject(annos, blocks):
    """
    Project annotations onto a partition.

    Each annotation is replaced by one copy per maximal block lying
    within it, with `left_complete` (resp. `right_complete`) False if
    the block does not start (resp. end) where the annotation does.

    Parameters
    ----------
    annos : iterable of Anno
    blocks : iterable of Span
        Output of `partition` on (at least) the spans of the annotations

    Returns
    -------
    res : list of Anno
        Copies grouped by original annotation, in input order.
    """
    distinct = sorted(set(blocks), key=Span.sort_key)
    starts = [b.char_start for b in distinct]
    res = []
    for anno in annos:
        tiles = maximal_blocks(anno.span, distinct, starts)
        _check_tiling(anno, tiles)
        res.extend(anno.clip(tile) for tile in tiles)
    return res
