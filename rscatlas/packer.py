from __future__ import annotations

import logging

from .atlas import Atlas
from .buckets import BucketTable, ColumnBucket
from .container import RawTile
from .errors import PlacementOverflow

logger = logging.getLogger(__name__)

INTERLACE = 4


def deinterleave_into(
    pixels: bytearray, size: int, x: int, y: int, data: bytes, width: int, height: int
) -> int:
    """Write a 4-way interlaced tile into pixels at (x, y).

    The source holds four passes back to back. Pass p stores, row by row,
    every fourth column starting at column p. Returns the number of source
    bytes consumed, which is less than width * height when data is short.
    """
    if width % INTERLACE or height % INTERLACE:
        raise PlacementOverflow(
            f"tile size {width}x{height} does not split into {INTERLACE}-pixel groups"
        )

    quarter = width // INTERLACE
    origin = x + y * size
    consumed = 0
    for lane in range(INTERLACE):
        for row in range(height):
            chunk = data[consumed : consumed + quarter]
            if not chunk:
                return consumed
            start = origin + lane + row * size
            pixels[start : start + INTERLACE * len(chunk) : INTERLACE] = chunk
            consumed += len(chunk)
    return consumed


class ShelfPacker:
    """Places bucketed tiles on shelves, tallest class first."""

    def __init__(self, atlas: Atlas, source: bytes):
        self.atlas = atlas
        self.source = source

    def pack(self, table: BucketTable) -> None:
        """Empty every bucket of table into the atlas."""
        x = y = shelf = 0
        for row in reversed(table.rows):
            while row.count > 0:
                fresh = x == 0
                placed = False
                for column in reversed(row.columns):
                    while column.tiles and self._has_room(x, column):
                        index = column.tiles.pop()
                        row.count -= 1
                        tile = self.atlas.tiles[index]
                        self._place(index, tile, x, y)
                        x += tile.width
                        shelf = max(shelf, row.threshold, tile.height)
                        placed = True

                if row.count == 0:
                    break
                if fresh and not placed:
                    raise PlacementOverflow(
                        f"no tile of row class {row.threshold} fits in a "
                        f"{self.atlas.size}x{self.atlas.size} atlas"
                    )

                # Next shelf
                x = 0
                y += shelf
                shelf = 0

    def _has_room(self, x: int, column: ColumnBucket) -> bool:
        following = self.atlas.tiles[column.tiles[-1]]
        return x + max(column.threshold, following.width) <= self.atlas.size

    def _place(self, index: int, tile: RawTile, x: int, y: int) -> None:
        size = self.atlas.size
        if y + tile.height > size or x + tile.width > size:
            raise PlacementOverflow(
                f"tile {index} ({tile.width}x{tile.height}) at ({x}, {y}) "
                f"overflows a {size}x{size} atlas"
            )

        data = self.source[tile.origin : tile.origin + tile.length]
        consumed = deinterleave_into(
            self.atlas.pixels, size, x, y, data, tile.width, tile.height
        )
        if consumed < tile.area:
            logger.warning(
                "Tile %d has %d of %d pixel bytes, rest left blank",
                index,
                consumed,
                tile.area,
            )

        tile.position = (x, y)
