from __future__ import annotations

import os.path

from .errors import InvalidExtension

PALETTE_COLORS = 256


def read_palette(data: bytes) -> list[int]:
    """Read RGB triplets into a flat 256-colour palette, padded with black."""
    usable = min(len(data) // 3, PALETTE_COLORS) * 3
    palette = list(data[:usable])
    palette += [0] * (PALETTE_COLORS * 3 - len(palette))
    return palette


def load_palette(path: str) -> list[int]:
    """Load a .pal file."""
    if os.path.splitext(path)[1].lower() != ".pal":
        raise InvalidExtension(f"{path} is not a .pal file")
    with open(path, "rb") as file:
        return read_palette(file.read())
