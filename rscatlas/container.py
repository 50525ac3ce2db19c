from __future__ import annotations

import logging
import struct

from dataclasses import dataclass, field

from .errors import TruncatedHeader, TruncatedTileData

logger = logging.getLogger(__name__)


@dataclass
class TileHeader:
    """Header of one tile record, as stored in the container.

    Offset Size Description
    ------ ---- -----------
    0      1    Height in pixels
    1      1    Width in groups of 8 pixels
    2      H-2  Padding, H = round_up_to_4(height + 5)
    H      ...  Interlaced pixel data, up to the next tile offset
    """

    index: int
    offset: int
    end: int
    height: int
    width_raw: int

    @property
    def width(self) -> int:
        return self.width_raw * 8

    @property
    def header_length(self) -> int:
        # Rounds up: height 8 gives 16. The original engine masked
        # (height + 5) & 0xFC, which rounds down to 12.
        return (self.height + 5 + 3) & ~3

    @property
    def data_start(self) -> int:
        return self.offset + self.header_length

    @property
    def data_length(self) -> int:
        return (self.end - self.offset) - self.header_length


@dataclass
class RawTile:
    """One tile copied into the staging buffer."""

    origin: int
    length: int
    width: int
    height: int
    position: tuple[int, int] | None = None

    @property
    def size(self) -> tuple[int, int]:
        return self.width, self.height

    @property
    def area(self) -> int:
        return self.width * self.height


@dataclass
class Staging:
    """All tiles of a container, packed back to back without their headers."""

    buffer: bytearray = field(default_factory=bytearray)
    tiles: list[RawTile] = field(default_factory=list)
    total_area: int = 0
    rounded_sizes: list[tuple[int, int]] = field(default_factory=list)


def read_offsets(buffer: bytes) -> list[int]:
    """Read the offset table and append the buffer length as sentinel."""
    if len(buffer) < 2:
        raise TruncatedHeader(
            f"buffer of {len(buffer)} bytes cannot hold a tile count"
        )

    (count,) = struct.unpack_from("<H", buffer, 0)
    table_end = 2 + 4 * count
    if len(buffer) < table_end:
        raise TruncatedHeader(
            f"offset table of {count} tiles needs {table_end} bytes, "
            f"buffer has {len(buffer)}"
        )

    offsets = list(struct.unpack_from(f"<{count}I", buffer, 2))
    offsets.append(len(buffer))
    logger.debug("Read %d tile offsets", count)
    return offsets


def read_tile_header(buffer: bytes, offsets: list[int], index: int) -> TileHeader:
    """Decode the header of tile `index` and check its bounds."""
    start, end = offsets[index], offsets[index + 1]
    if start > end or end > len(buffer):
        raise TruncatedTileData(
            f"tile {index} spans [{start}, {end}) outside a buffer of "
            f"{len(buffer)} bytes"
        )
    if end - start < 2:
        raise TruncatedTileData(f"tile {index} at {start} has no header")

    header = TileHeader(index, start, end, buffer[start], buffer[start + 1])
    if header.data_length < 0:
        raise TruncatedTileData(
            f"tile {index} header needs {header.header_length} bytes, "
            f"record has {end - start}"
        )
    return header


def rounded_size(width: int, height: int) -> tuple[int, int]:
    """Round each dimension up to the next of 8, 16, 32, ... above it."""

    def round_dim(value: int) -> int:
        step = 8
        while value >= step:
            step <<= 1
        return step

    return round_dim(width), round_dim(height)


def stage_tiles(buffer: bytes, offsets: list[int]) -> Staging:
    """Copy the pixel data of every tile into one staging buffer."""
    staging = Staging()
    for index in range(len(offsets) - 1):
        header = read_tile_header(buffer, offsets, index)
        logger.debug(
            "Tile %d: %dx%d, header %d bytes, data %d bytes at %d",
            index,
            header.width,
            header.height,
            header.header_length,
            header.data_length,
            header.data_start,
        )

        tile = RawTile(
            len(staging.buffer), header.data_length, header.width, header.height
        )
        staging.buffer += buffer[header.data_start : header.end]
        staging.tiles.append(tile)
        staging.total_area += tile.area

        size = rounded_size(tile.width, tile.height)
        if size not in staging.rounded_sizes:
            staging.rounded_sizes.append(size)

    logger.debug("Rounded tile sizes: %s", staging.rounded_sizes)
    return staging
