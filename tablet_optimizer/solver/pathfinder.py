"""
Path Finder Module - Distance fields over a 4-directional unit-weight grid.

Distances are computed with a min-priority frontier (heapq). All edges
weigh exactly 1, so this settles cells in breadth-first order; the heap
keeps the same code valid if tile costs ever become non-uniform.
"""

import heapq
from typing import List, Tuple

import numpy as np

from .coordinate import Coordinate, NEIGHBOR_OFFSETS

# NEIGHBOR_OFFSETS as bare (dx, dy) pairs
NEIGHBOR_STEPS: Tuple[Tuple[int, int], ...] = tuple(o.as_tuple() for o in NEIGHBOR_OFFSETS)

# Sentinel for cells with no path from the source
UNREACHABLE: int = int(np.iinfo(np.int32).max)


class PathFinder:
    """
    Single-source shortest path over a boolean passability mask.

    The mask is indexed [y, x] (numpy row/column convention), so
    mask.shape == (height, width).

    Example:
        finder = PathFinder(np.array([[True, True, False]]))
        field = finder.distance_field(Coordinate(0, 0))
        # field -> [[0, 1, UNREACHABLE]]
    """

    def __init__(self, passable):
        """
        Initialize path finder.

        Args:
            passable: 2D boolean array-like indexed [y, x]
        """
        grid = np.asarray(passable, dtype=bool)
        if grid.ndim != 2:
            raise ValueError(f"Passability mask must be 2D, got shape {grid.shape}")
        self._height, self._width = grid.shape
        # Plain nested lists: the search loop indexes them per neighbour
        self._rows: List[List[bool]] = grid.tolist()

    def in_bounds(self, coord: Coordinate) -> bool:
        return 0 <= coord.x < self._width and 0 <= coord.y < self._height

    def is_pathable(self, coord: Coordinate) -> bool:
        """Check coordinate lies inside the grid and is passable."""
        return self.in_bounds(coord) and self._rows[coord.y][coord.x]

    def distance_rows(self, source: Coordinate) -> List[List[int]]:
        """
        Compute step counts from source as nested lists indexed [y][x].

        The source itself always gets distance 0. Cells that cannot be
        reached through passable cells keep UNREACHABLE.

        Args:
            source: Coordinate the distances are measured from

        Returns:
            height lists of width ints

        Raises:
            IndexError: If source lies outside the grid
        """
        if not self.in_bounds(source):
            raise IndexError(
                f"Source {source} outside {self._width}x{self._height} grid"
            )

        width, height, rows = self._width, self._height, self._rows
        distances = [[UNREACHABLE] * width for _ in range(height)]
        visited = [[False] * width for _ in range(height)]
        distances[source.y][source.x] = 0
        frontier: List[Tuple[int, int, int]] = [(0, source.x, source.y)]

        while frontier:
            current_distance, x, y = heapq.heappop(frontier)
            if visited[y][x]:
                continue
            visited[y][x] = True

            candidate = current_distance + 1
            for dx, dy in NEIGHBOR_STEPS:
                nx, ny = x + dx, y + dy
                if not (0 <= nx < width and 0 <= ny < height):
                    continue
                if not rows[ny][nx] or visited[ny][nx]:
                    continue
                if candidate < distances[ny][nx]:
                    distances[ny][nx] = candidate
                    heapq.heappush(frontier, (candidate, nx, ny))

        return distances

    def distance_field(self, source: Coordinate) -> np.ndarray:
        """
        Compute step counts from source to every cell.

        Args:
            source: Coordinate the distances are measured from

        Returns:
            int32 array of shape (height, width), UNREACHABLE where no
            path exists

        Raises:
            IndexError: If source lies outside the grid
        """
        return np.array(self.distance_rows(source), dtype=np.int32)


def compute_distance_field(passable, source: Coordinate) -> np.ndarray:
    """
    Convenience wrapper around PathFinder.distance_field().

    Args:
        passable: 2D boolean array-like indexed [y, x]
        source: Source coordinate

    Returns:
        int32 distance array, UNREACHABLE where no path exists
    """
    return PathFinder(passable).distance_field(source)
