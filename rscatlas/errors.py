class RscError(Exception):
    """Base class for every error raised by rscatlas."""


class InvalidExtension(RscError):
    """The file is not handled by this codec."""


class DecodeError(RscError):
    """The container could not be decoded."""


class TruncatedHeader(DecodeError):
    """The buffer is shorter than the offset table it declares."""


class TruncatedTileData(DecodeError):
    """A tile record points outside its own extent or the buffer."""


class PlacementOverflow(DecodeError):
    """A tile does not fit in the atlas."""
