# License: BSD3

"""
Exceptions raised while reading or resolving Teanga documents
"""


class TeangaException(Exception):
    """
    Base class for everything that goes wrong in teangaview
    """
    def __init__(self, *args, **kw):
        super(TeangaException, self).__init__(*args, **kw)


class TeangaFormatError(TeangaException):
    """
    A corpus, layer description or layer value does not have the
    shape the JSON format calls for
    """
    pass


class ResolutionError(TeangaException):
    """
    Something prevented a layer from being translated into
    character offsets.

    Attributes
    ----------
    layer : str or None
        Name of the layer being resolved when the problem arose
    """
    def __init__(self, msg, layer=None):
        super(ResolutionError, self).__init__(msg)
        self.layer = layer


class UnknownLayerError(ResolutionError, LookupError):
    """
    A layer is referred to but the document has no such layer
    """
    def __init__(self, layer):
        super(UnknownLayerError, self).__init__(
            "No layer %s" % layer, layer=layer)


class MissingMetadataError(ResolutionError, LookupError):
    """
    A layer is present but has no description in the corpus metadata
    """
    def __init__(self, layer):
        super(MissingMetadataError, self).__init__(
            "No meta data for layer %s" % layer, layer=layer)


class StructuralError(ResolutionError):
    """
    The anchoring structure is malformed: a character layer resolved as
    if it were derived, a derived layer with no anchor, a cycle...
    """
    pass


class PartitionIntegrityError(StructuralError):
    """
    An annotation could not be tiled exactly by partition blocks
    """
    pass


class AnchorRangeError(ResolutionError, IndexError):
    """
    A layer refers to a position its anchor does not have
    """
    pass


class ResolutionLimitError(ResolutionError):
    """
    The input exceeds the configured bounds on annotation volume
    """
    pass
