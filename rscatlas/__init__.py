from .atlas import (
    Atlas,
    BinaryAtlasMap,
    JsonAtlasMap,
    Placement,
    )
from .codec import RscCodec
from .errors import (
    DecodeError,
    InvalidExtension,
    PlacementOverflow,
    RscError,
    TruncatedHeader,
    TruncatedTileData,
    )

__all__ = (
    'Atlas',
    'BinaryAtlasMap',
    'JsonAtlasMap',
    'Placement',
    'RscCodec',
    'DecodeError',
    'InvalidExtension',
    'PlacementOverflow',
    'RscError',
    'TruncatedHeader',
    'TruncatedTileData',
	)
