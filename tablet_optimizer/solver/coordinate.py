"""
Coordinate Module - Integer grid position on a tablet.
"""

from dataclasses import dataclass
from typing import Tuple


@dataclass(frozen=True, order=True)
class Coordinate:
    """
    Immutable 2D grid position.

    Ordered by x, then y, so coordinates can break ties in a heap.

    Attributes:
        x: Column index (0 = left)
        y: Row index (0 = bottom)
    """
    x: int
    y: int

    def offset(self, other: 'Coordinate') -> 'Coordinate':
        """
        Add another coordinate componentwise.

        Args:
            other: Offset to add

        Returns:
            New Coordinate
        """
        return Coordinate(self.x + other.x, self.y + other.y)

    def __add__(self, other: 'Coordinate') -> 'Coordinate':
        return self.offset(other)

    def as_tuple(self) -> Tuple[int, int]:
        """Return (x, y) tuple."""
        return (self.x, self.y)

    def __str__(self) -> str:
        return f"({self.x},{self.y})"


# 4-directional neighbour offsets, no diagonals
NEIGHBOR_OFFSETS: Tuple[Coordinate, ...] = (
    Coordinate(0, 1),
    Coordinate(1, 0),
    Coordinate(0, -1),
    Coordinate(-1, 0),
)
