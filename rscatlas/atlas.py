from __future__ import annotations

import json
import math
import struct

from dataclasses import dataclass
from typing import BinaryIO, NamedTuple, TextIO

import PIL.Image as Image

from .container import RawTile


class Placement(NamedTuple):
    """Where a tile ended up in the atlas."""

    position: tuple[int, int]
    size: tuple[int, int]


def atlas_size_for(area: int) -> int:
    """Smallest power of two whose square holds area pixels."""
    side = math.isqrt(area - 1) + 1 if area > 0 else 0
    size = 1
    while size < side:
        size <<= 1
    return size


@dataclass
class Atlas:
    """A square single-channel image holding every tile of a container."""

    size: int
    pixels: bytearray
    tiles: list[RawTile]

    @classmethod
    def blank(cls, tiles: list[RawTile]) -> Atlas:
        size = atlas_size_for(sum(tile.area for tile in tiles))
        return cls(size, bytearray(size * size), tiles)

    def pixel(self, x: int, y: int) -> int:
        return self.pixels[x + y * self.size]

    def placements(self) -> list[Placement]:
        """Placed rectangles in tile index order."""
        return [
            Placement(tile.position, tile.size)
            for tile in self.tiles
            if tile.position is not None
        ]

    def to_image(self, palette: list[int] | None = None) -> Image.Image:
        """Render as an 'L' image, or a 'P' image when a palette is given."""
        if palette is None:
            return Image.frombytes("L", (self.size, self.size), bytes(self.pixels))
        image = Image.frombytes("P", (self.size, self.size), bytes(self.pixels))
        image.putpalette(palette)
        return image


class BinaryAtlasMap:
    """Binary atlas map file generator.

    HEADER FORMAT

    Offset Size Description
    ------ ---- -----------
    0      4    Magic ('RSCA')
    4      4    Atlas Size (width and height)
    8      4    Number of Tiles

    TILE FORMAT, one per tile in container order

    Offset Size Description
    ------ ---- -----------
    0      4    X-Coordinate of Tile
    4      4    Y-Coordinate of Tile
    8      4    Tile Width
    12     4    Tile Height
    """

    def __init__(self, atlas: Atlas):
        self.atlas = atlas

    def write(self, file: BinaryIO) -> None:
        """Writes the binary atlas map file into file object."""
        placements = self.atlas.placements()
        file.write(b"RSCA")
        file.write(struct.pack("<II", self.atlas.size, len(placements)))
        for (x, y), (width, height) in placements:
            file.write(struct.pack("<IIII", x, y, width, height))


class JsonAtlasMap:
    """A JSON encoding of the atlas map."""

    def __init__(self, atlas: Atlas):
        self.atlas = atlas

    def write(self, file: TextIO) -> None:
        """Writes the JSON atlas map."""
        json.dump(
            {
                "size": self.atlas.size,
                "tiles": [
                    (x, y, width, height)
                    for (x, y), (width, height) in self.atlas.placements()
                ],
            },
            file,
            indent=2,
        )
