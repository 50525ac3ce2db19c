import itertools
import unittest

from containers import source_index

from rscatlas.atlas import Atlas
from rscatlas.buckets import BucketTable
from rscatlas.container import RawTile
from rscatlas.errors import PlacementOverflow
from rscatlas.packer import ShelfPacker, deinterleave_into


def pack(sizes, size=None):
    tiles = [RawTile(0, 0, width, height) for width, height in sizes]
    if size is None:
        atlas = Atlas.blank(tiles)
    else:
        atlas = Atlas(size, bytearray(size * size), tiles)

    table = BucketTable.step(8, 8, 10)
    for index, tile in enumerate(tiles):
        table.store(index, tile.width, tile.height)
    ShelfPacker(atlas, b"").pack(table)
    return atlas


def overlaps(a, b):
    (ax, ay), (aw, ah) = a
    (bx, by), (bw, bh) = b
    return ax < bx + bw and bx < ax + aw and ay < by + bh and by < ay + ah


class TestDeinterleave(unittest.TestCase):

    def test_sequential_source(self):
        pixels = bytearray(32 * 32)
        consumed = deinterleave_into(pixels, 32, 8, 4, bytes(range(64)), 16, 4)
        self.assertEqual(consumed, 64)
        for row in range(4):
            for col in range(16):
                self.assertEqual(
                    pixels[(8 + col) + (4 + row) * 32],
                    source_index(col, row, 16, 4),
                )
        self.assertEqual(pixels[7 + 4 * 32], 0)
        self.assertEqual(pixels[24 + 4 * 32], 0)
        self.assertEqual(pixels[8 + 8 * 32], 0)

    def test_short_source(self):
        pixels = bytearray(16 * 16)
        consumed = deinterleave_into(pixels, 16, 0, 0, bytes(range(1, 9)), 16, 4)
        self.assertEqual(consumed, 8)
        self.assertEqual(pixels[0:16], bytes([1, 0, 0, 0, 2, 0, 0, 0, 3, 0, 0, 0, 4, 0, 0, 0]))
        self.assertEqual(pixels[16:32], bytes([5, 0, 0, 0, 6, 0, 0, 0, 7, 0, 0, 0, 8, 0, 0, 0]))
        self.assertEqual(sum(pixels[32:]), 0)

    def test_width_must_split_in_four(self):
        with self.assertRaises(PlacementOverflow):
            deinterleave_into(bytearray(64), 8, 0, 0, bytes(12), 6, 2)

    def test_height_must_split_in_four(self):
        with self.assertRaises(PlacementOverflow):
            deinterleave_into(bytearray(64), 8, 0, 0, bytes(24), 8, 3)


class TestShelfPacker(unittest.TestCase):

    def test_last_stored_is_placed_first(self):
        atlas = pack([(8, 8)] * 3)
        self.assertEqual(atlas.size, 16)
        self.assertEqual([t.position for t in atlas.tiles], [(0, 8), (8, 0), (0, 0)])

    def test_shelf_continues_with_shorter_tiles(self):
        atlas = pack([(8, 32)] + [(8, 8)] * 20)
        self.assertEqual(atlas.size, 64)
        self.assertEqual(atlas.tiles[0].position, (0, 0))
        self.assertEqual(atlas.tiles[20].position, (8, 0))
        self.assertEqual(atlas.tiles[14].position, (56, 0))
        # The wrap clears the 32 pixel tile, not only the 8 pixel row class
        self.assertEqual(atlas.tiles[13].position, (0, 32))
        self.assertEqual(atlas.tiles[1].position, (32, 40))

    def test_oversized_tiles_use_their_own_size(self):
        atlas = pack([(96, 8), (96, 8)], size=128)
        self.assertEqual([t.position for t in atlas.tiles], [(0, 8), (0, 0)])

        atlas = pack([(64, 92)] * 5, size=256)
        self.assertEqual(atlas.tiles[1].position, (192, 0))
        self.assertEqual(atlas.tiles[0].position, (0, 92))

    def test_no_overlap(self):
        sizes = [(32, 32)] * 4 + [(16, 16)] * 8 + [(8, 8)] * 16
        sizes += [(24, 4), (8, 12), (16, 8), (40, 40)]
        atlas = pack(sizes)
        rects = atlas.placements()
        self.assertEqual(len(rects), len(sizes))
        for (x, y), (width, height) in rects:
            self.assertGreaterEqual(x, 0)
            self.assertGreaterEqual(y, 0)
            self.assertLessEqual(x + width, atlas.size)
            self.assertLessEqual(y + height, atlas.size)
        for a, b in itertools.combinations(rects, 2):
            self.assertFalse(overlaps(a, b), f"{a} overlaps {b}")

    def test_buckets_are_drained(self):
        tiles = [RawTile(0, 0, 8, 8) for _ in range(4)]
        atlas = Atlas.blank(tiles)
        table = BucketTable.step(8, 8, 10)
        for index in range(4):
            table.store(index, 8, 8)
        with self.assertLogs("rscatlas.packer", "WARNING"):
            ShelfPacker(atlas, b"").pack(table)
        self.assertEqual(len(table), 0)
        self.assertEqual(table.contents(), [])

    def test_too_wide(self):
        with self.assertRaises(PlacementOverflow):
            pack([(16, 8)], size=8)

    def test_too_tall(self):
        with self.assertRaises(PlacementOverflow):
            pack([(8, 16)], size=8)


if __name__ == '__main__':
    unittest.main()
