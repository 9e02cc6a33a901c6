"""
Putting it all together: from a document and its layer descriptions to
one forest of annotations per character layer.

::

    doc_sections(document, meta)
      |
      +-- resolve each derived layer  (teangaview.resolve)
      +-- group by character layer
      +-- partition, reproject        (teangaview.partition)
      +-- sort                        (teangaview.ordering)
      +-- nest                        (teangaview.tree)
"""

# License: BSD3

# pylint: disable=too-few-public-methods, too-many-arguments

import warnings

from teangaview.annotation import DocSecs
from teangaview.errors import ResolutionError, ResolutionLimitError
from teangaview.ordering import LayerOrder
from teangaview.partition import partition, reproject
from teangaview.resolve import Resolver
from teangaview.tree import build_forest


class ResolveSettings(object):
    """
    Knobs for resolution. The defaults should be fine for any document
    a person would want to look at.

    :param max_annotations: refuse to merge more than this many
        annotations on a single text (None for no limit)
    :param max_partition_splits: give up partitioning after this many
        splits (None for no limit)
    :param attach_character_seq_data: see `teangaview.resolve.Resolver`
    """
    def __init__(self,
                 max_annotations=20000,
                 max_partition_splits=5000,
                 attach_character_seq_data=False):
        self.max_annotations = max_annotations
        self.max_partition_splits = max_partition_splits
        self.attach_character_seq_data = attach_character_seq_data


DEFAULT_SETTINGS = ResolveSettings()


def enabled_layers(layers):
    """
    Names of the enabled layers in a list of `(name, enabled)` pairs,
    or None (everything enabled) if there is no list
    """
    if layers is None:
        return None
    return frozenset(name for name, enabled in layers if enabled)


def merge_annotations(annos, order, settings=DEFAULT_SETTINGS):
    """
    Forest of non-crossing annotations from resolved annotations on a
    single text, cutting up the ones that cross.

    :type annos: list of Anno
    :type order: LayerOrder
    """
    if settings.max_annotations is not None and\
            len(annos) > settings.max_annotations:
        raise ResolutionLimitError("Refusing to merge %d annotations "
                                   "(limit is %d)" %
                                   (len(annos), settings.max_annotations))
    blocks = partition([anno.span for anno in annos],
                       max_splits=settings.max_partition_splits)
    flat = reproject(annos, blocks)
    flat.sort(key=order.anno_key)
    return build_forest(flat)


def _root_or_none(resolver, name):
    try:
        return resolver.root_of(name)
    except ResolutionError:
        return None


def doc_sections(document, meta, layers=None, settings=DEFAULT_SETTINGS,
                 strict=True):
    """
    Resolve a document.

    Parameters
    ----------
    document : Document
    meta : dict from str to LayerDesc
    layers : list of (str, boolean), optional
        Layers to display and whether they are enabled; only annotations
        from enabled layers are merged (disabled layers are still used
        as anchors). If None, all layers are enabled.
    settings : ResolveSettings, optional
    strict : boolean, optional
        If True, the first error raised by any layer aborts the whole
        thing. Otherwise errors are confined to the character layer
        they concern: its `DocSecs` has the error and no annotations,
        while other character layers are resolved normally. Layers that
        cannot be traced back to a character layer at all are skipped
        with a warning.

    Returns
    -------
    sections : dict from str to DocSecs
        One entry per character layer in the document.
    """
    resolver = Resolver(document, meta,
                        attach_character_seq_data=(
                            settings.attach_character_seq_data))
    wanted = enabled_layers(layers)
    texts = document.text_layers()
    grouped = dict((name, []) for name in texts)
    failed = {}

    for name in sorted(document.layer_names()):
        if name in texts or (wanted is not None and name not in wanted):
            continue
        try:
            annos, root = resolver.resolve(name)
        except ResolutionError as err:
            if strict:
                raise
            root = _root_or_none(resolver, name)
            if root is None:
                warnings.warn("Skipping layer %s: %s" % (name, err))
            elif root not in failed:
                failed[root] = err
            continue
        grouped[root].extend(annos)

    order = LayerOrder.from_meta(meta, document.layer_names())
    sections = {}
    for root, text in texts.items():
        if root in failed:
            sections[root] = DocSecs(text, error=failed[root])
            continue
        try:
            forest = merge_annotations(grouped[root], order, settings)
        except ResolutionError as err:
            if strict:
                raise
            sections[root] = DocSecs(text, error=err)
            continue
        sections[root] = DocSecs(text, forest)
    return sections
