from __future__ import annotations

from dataclasses import dataclass, field


@dataclass
class ColumnBucket:
    """Tiles of one width class inside a row bucket."""

    threshold: int
    tiles: list[int] = field(default_factory=list)


@dataclass
class RowBucket:
    """Tiles of one height class, split further by width."""

    threshold: int
    columns: list[ColumnBucket] = field(default_factory=list)
    count: int = 0


class BucketTable:
    """Two-level table of size classes.

    Tiles are classified by height into row buckets, then by width into the
    column buckets of that row. Both levels ascend by threshold; the last
    bucket of each level also takes every tile larger than its threshold.
    """

    def __init__(self, thresholds: list[int]):
        self.rows: list[RowBucket] = [
            RowBucket(row, [ColumnBucket(column) for column in thresholds])
            for row in thresholds
        ]

    @classmethod
    def step(cls, start: int, interval: int, count: int) -> BucketTable:
        return cls([start + interval * i for i in range(count)])

    @classmethod
    def power(cls, start: int, count: int) -> BucketTable:
        return cls([start << i for i in range(count)])

    def store(self, tile: int, width: int, height: int) -> None:
        """File tile index `tile` under the first class that holds its size."""
        row = _first_fit(self.rows, height)
        column = _first_fit(row.columns, width)
        column.tiles.append(tile)
        row.count += 1

    def __len__(self) -> int:
        return sum(row.count for row in self.rows)

    def contents(self) -> list[tuple[int, int, list[int]]]:
        """List (row threshold, column threshold, tiles) for non-empty classes."""
        return [
            (row.threshold, column.threshold, list(column.tiles))
            for row in self.rows
            for column in row.columns
            if column.tiles
        ]


def _first_fit(buckets, value: int):
    for bucket in buckets[:-1]:
        if value <= bucket.threshold:
            return bucket
    return buckets[-1]
