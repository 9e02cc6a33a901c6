"""
Turning a flat list of non-crossing annotations into a forest, where
each annotation is the child of the narrowest one enclosing it.
"""

# License: BSD3

from nltk import Tree


def build_forest(annos):
    """
    Nest a list of annotations.

    The list must be sorted by start, widest first (see
    `LayerOrder.anno_key`), and no two annotations may cross. Each
    annotation opens a batch, which collects all the following
    annotations it encloses; these are nested in turn and become its
    children. The first annotation outside the batch opens the next
    one.

    Any children the input annotations already have are ignored.

    Parameters
    ----------
    annos : list of Anno

    Returns
    -------
    forest : list of Anno
        Top level annotations, in input order.
    """
    forest = []
    i = 0
    while i < len(annos):
        head = annos[i]
        j = i + 1
        while j < len(annos) and head.span.encloses(annos[j].span):
            j += 1
        forest.append(head.with_children(build_forest(annos[i + 1:j])))
        i = j
    return forest


def depth(forest):
    """
    Number of levels in a forest (0 if empty)
    """
    if not forest:
        return 0
    return 1 + max(depth(anno.children) for anno in forest)


# ---------------------------------------------------------------------
# nltk views
# ---------------------------------------------------------------------


def anno_label(anno):
    """
    Short label for an annotation: layer name and payload, with `<`
    (resp. `>`) marking a left (resp. right) side that was cut off
    """
    label = anno.layer
    if anno.data is not None:
        label += ':' + str(anno.data)
    if not anno.left_complete:
        label = '<' + label
    if not anno.right_complete:
        label += '>'
    return label


def _subtrees(content, annos, start, end):
    res = []
    pos = start
    for anno in annos:
        if anno.start > pos:
            res.append(content[pos:anno.start])
        res.append(Tree(anno_label(anno),
                        _subtrees(content, anno.children,
                                  anno.start, anno.end)))
        pos = anno.end
    if pos < end:
        res.append(content[pos:end])
    return res


def to_tree(docsecs, label='ROOT'):
    """
    The forest of a `DocSecs` as a single `nltk.Tree`, whose leaves are
    the pieces of text between annotation boundaries
    """
    return Tree(label, _subtrees(docsecs.content, docsecs.annos,
                                 0, len(docsecs.content)))
