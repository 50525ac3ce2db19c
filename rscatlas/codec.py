from __future__ import annotations

import logging
import os.path

from .atlas import Atlas, Placement
from .buckets import BucketTable
from .container import read_offsets, stage_tiles
from .errors import InvalidExtension, TruncatedHeader
from .packer import ShelfPacker

logger = logging.getLogger(__name__)


class RscCodec:
    """Decoder for .RSC sprite containers.

    Every tile of the container is packed into one square greyscale atlas.
    The rectangle each tile was given stays available until it is drained
    with drain_placed_tiles().
    """

    extension = ".rsc"

    def __init__(self):
        self._placed: list[Placement] = []

    def accepts(self, path: str) -> bool:
        return os.path.splitext(path)[1].lower() == self.extension

    def decode(self, buffer: bytes, byte_length: int | None = None) -> Atlas:
        """Decode a container held in memory."""
        self._placed = []
        if byte_length is not None:
            if byte_length > len(buffer):
                raise TruncatedHeader(
                    f"declared length {byte_length} exceeds buffer of "
                    f"{len(buffer)} bytes"
                )
            buffer = buffer[:byte_length]

        offsets = read_offsets(buffer)
        staging = stage_tiles(buffer, offsets)

        table = BucketTable.step(8, 8, 10)
        for index, tile in enumerate(staging.tiles):
            table.store(index, tile.width, tile.height)

        atlas = Atlas.blank(staging.tiles)
        logger.debug(
            "Packing %d tiles (%d pixels) into a %dx%d atlas",
            len(staging.tiles),
            staging.total_area,
            atlas.size,
            atlas.size,
        )
        ShelfPacker(atlas, staging.buffer).pack(table)

        self._placed = atlas.placements()
        return atlas

    def load(self, path: str) -> Atlas:
        """Decode a container file."""
        if not self.accepts(path):
            raise InvalidExtension(f"{path} is not an .RSC container")
        with open(path, "rb") as file:
            buffer = file.read()
        logger.info("Decoding %s (%d bytes)", path, len(buffer))
        return self.decode(buffer)

    def save(self, atlas: Atlas, path: str) -> bool:
        """Encoding is not supported; nothing is written."""
        logger.debug("Ignoring save of %dx%d atlas to %s", atlas.size, atlas.size, path)
        return True

    def drain_placed_tiles(self) -> list[Placement]:
        """Hand over the placed tile rectangles of the last decode, once."""
        placed, self._placed = self._placed, []
        return placed
