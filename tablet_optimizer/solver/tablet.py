"""
Tablet State Module - Immutable tablet representation with cached distances.

A tablet is a small rectangular grid of typed cells. Every state carries
the distance of each cell from the single Entrance, computed eagerly when
the state is built, so a TabletState never holds a stale distance field.
Mutations (swap, type change, apply) always return a new instance.

Cells are stored x-major: linear index = y + x * height, matching the
column-wise order in which the game reports tiles.
"""

from dataclasses import dataclass, field
from enum import Enum, auto
from typing import Callable, Iterator, List, Optional, Sequence, Tuple, assert_never

import numpy as np

from .coordinate import Coordinate
from .pathfinder import PathFinder, UNREACHABLE
from .scoring import sum_of_squares
from .transformation import (
    Transformation, SwapEntrance, SwapWaterAndEmpty, TurnWaterToEmpty
)


class InvalidTabletError(ValueError):
    """Raised when a snapshot cannot form a valid tablet (e.g. no entrance)."""


class InvalidTransformationError(ValueError):
    """Raised when a transformation does not match the cells it references."""


class CellType(Enum):
    """
    Cell contents.

    Types:
        EMPTY: Free room, passable
        WATER: Impassable
        ENTRANCE: Distance source, exactly one per tablet
        ENCOUNTER: Occupied room, passable
    """
    EMPTY = auto()
    WATER = auto()
    ENTRANCE = auto()
    ENCOUNTER = auto()

    @property
    def is_passable(self) -> bool:
        return self is not CellType.WATER


@dataclass(frozen=True)
class Cell:
    """
    Single tablet cell.

    Attributes:
        type: Cell contents
        distance: Steps from the Entrance (0 for the Entrance and for
                  unreachable cells)
    """
    type: CellType
    distance: int


@dataclass(frozen=True)
class TabletState:
    """
    Immutable tablet state.

    Equality and hashing use the cell layout only; distances are derived
    from it and recomputed on construction.

    Attributes:
        width: Number of columns (x extent)
        height: Number of rows (y extent)
        types: Cell types in x-major order
        distances: Cached distance per cell, same order as types
    """
    width: int
    height: int
    types: Tuple[CellType, ...]
    distances: Tuple[int, ...] = field(init=False, repr=False, compare=False)

    def __post_init__(self):
        if self.width <= 0 or self.height <= 0:
            raise InvalidTabletError(f"Tablet must not be empty, got {self.width}x{self.height}")
        if len(self.types) != self.width * self.height:
            raise InvalidTabletError(
                f"Expected {self.width * self.height} cells, got {len(self.types)}"
            )

        entrances = sum(1 for t in self.types if t is CellType.ENTRANCE)
        if entrances == 0:
            raise InvalidTabletError(
                "Your tablet does not contain an entrance (or is not loaded properly)"
            )
        if entrances > 1:
            raise InvalidTabletError(f"Tablet contains {entrances} entrances, expected exactly one")

        object.__setattr__(self, "distances", self.recalculate_distances())

    @classmethod
    def from_columns(cls, columns: Sequence[Sequence[CellType]]) -> 'TabletState':
        """
        Create TabletState from column-major data (columns[x][y]).

        Args:
            columns: One sequence of cell types per column

        Returns:
            TabletState instance

        Raises:
            InvalidTabletError: If data is empty, ragged or has no entrance
        """
        if not columns or not columns[0]:
            raise InvalidTabletError("Tablet must not be empty")
        height = len(columns[0])
        if any(len(column) != height for column in columns):
            raise InvalidTabletError("All tablet columns must have the same length")

        types = tuple(cell for column in columns for cell in column)
        return cls(width=len(columns), height=height, types=types)

    @classmethod
    def from_rows(cls, rows: Sequence[Sequence[CellType]]) -> 'TabletState':
        """
        Create TabletState from row-major data (rows[y][x]).

        Args:
            rows: One sequence of cell types per row, rows[0] is y = 0

        Returns:
            TabletState instance
        """
        if not rows or not rows[0]:
            raise InvalidTabletError("Tablet must not be empty")
        width = len(rows[0])
        if any(len(row) != width for row in rows):
            raise InvalidTabletError("All tablet rows must have the same length")

        columns = [[row[x] for row in rows] for x in range(width)]
        return cls.from_columns(columns)

    def linear_to_coord(self, index: int) -> Coordinate:
        return Coordinate(index // self.height, index % self.height)

    def coord_to_linear(self, coord: Coordinate) -> int:
        return coord.y + coord.x * self.height

    def is_valid_coord(self, coord: Coordinate) -> bool:
        """Check coordinate lies inside the tablet."""
        return 0 <= coord.x < self.width and 0 <= coord.y < self.height

    def at(self, coord: Coordinate) -> Cell:
        """
        Get cell at coordinate.

        Args:
            coord: Cell position

        Returns:
            Cell with type and distance

        Raises:
            IndexError: If coord lies outside the tablet
        """
        if not self.is_valid_coord(coord):
            raise IndexError(f"Coordinate {coord} outside {self.width}x{self.height} tablet")
        index = self.coord_to_linear(coord)
        return Cell(type=self.types[index], distance=self.distances[index])

    def cells(self) -> Iterator[Tuple[Coordinate, Cell]]:
        """Iterate (coordinate, cell) pairs in x-major order."""
        for index, (cell_type, distance) in enumerate(zip(self.types, self.distances)):
            yield self.linear_to_coord(index), Cell(type=cell_type, distance=distance)

    @property
    def entrance_coordinate(self) -> Coordinate:
        """Coordinate of the unique Entrance cell."""
        return self.linear_to_coord(self.types.index(CellType.ENTRANCE))

    def passability_mask(self) -> np.ndarray:
        """
        Build passability mask indexed [y, x].

        Returns:
            Boolean array of shape (height, width), False for Water
        """
        passable = np.array([t.is_passable for t in self.types], dtype=bool)
        return passable.reshape(self.width, self.height).T

    def recalculate_distances(self) -> Tuple[int, ...]:
        """
        Compute every cell's distance from the Entrance.

        Unreachable cells collapse to 0, the same value as the Entrance.

        Returns:
            Distances in x-major order
        """
        rows = PathFinder(self.passability_mask()).distance_rows(self.entrance_coordinate)
        return tuple(
            0 if rows[y][x] == UNREACHABLE else rows[y][x]
            for x in range(self.width)
            for y in range(self.height)
        )

    def generate_transformations(self) -> Iterator[Transformation]:
        """
        Yield every legal transformation for this layout.

        Order is x-major over cells: an Empty cell yields SwapEntrance, a
        Water cell yields TurnWaterToEmpty followed by one SwapWaterAndEmpty
        per Empty cell.

        Yields:
            Transformation values
        """
        empties = [
            self.linear_to_coord(i)
            for i, t in enumerate(self.types) if t is CellType.EMPTY
        ]
        for index, cell_type in enumerate(self.types):
            coord = self.linear_to_coord(index)
            if cell_type is CellType.EMPTY:
                yield SwapEntrance(target=coord)

            if cell_type is CellType.WATER:
                yield TurnWaterToEmpty(water=coord)
                for empty in empties:
                    yield SwapWaterAndEmpty(water=coord, empty=empty)

    def swap(self, coord1: Coordinate, coord2: Coordinate) -> 'TabletState':
        """
        Exchange the contents of two cells.

        Args:
            coord1: First cell
            coord2: Second cell

        Returns:
            New TabletState with distances recomputed
        """
        for coord in (coord1, coord2):
            if not self.is_valid_coord(coord):
                raise IndexError(f"Coordinate {coord} outside {self.width}x{self.height} tablet")
        types = list(self.types)
        i, j = self.coord_to_linear(coord1), self.coord_to_linear(coord2)
        types[i], types[j] = types[j], types[i]
        return TabletState(width=self.width, height=self.height, types=tuple(types))

    def change_type(self, coord: Coordinate, cell_type: CellType) -> 'TabletState':
        """
        Rewrite one cell's type.

        Args:
            coord: Cell to change
            cell_type: New type

        Returns:
            New TabletState with distances recomputed
        """
        if not self.is_valid_coord(coord):
            raise IndexError(f"Coordinate {coord} outside {self.width}x{self.height} tablet")
        types = list(self.types)
        types[self.coord_to_linear(coord)] = cell_type
        return TabletState(width=self.width, height=self.height, types=tuple(types))

    def apply(self, transformation: Transformation) -> 'TabletState':
        """
        Apply a transformation to create a new tablet state.

        Args:
            transformation: Move generated from this exact state

        Returns:
            New TabletState, original is unchanged

        Raises:
            InvalidTransformationError: If the referenced cells do not hold
                the types the move requires
        """
        if isinstance(transformation, SwapEntrance):
            self._require(transformation.target, CellType.EMPTY, transformation)
            return self.swap(self.entrance_coordinate, transformation.target)
        elif isinstance(transformation, SwapWaterAndEmpty):
            self._require(transformation.water, CellType.WATER, transformation)
            self._require(transformation.empty, CellType.EMPTY, transformation)
            return self.swap(transformation.water, transformation.empty)
        elif isinstance(transformation, TurnWaterToEmpty):
            self._require(transformation.water, CellType.WATER, transformation)
            return self.change_type(transformation.water, CellType.EMPTY)
        else:
            assert_never(transformation)

    def _require(self, coord: Coordinate, expected: CellType,
                 transformation: Transformation) -> None:
        if not self.is_valid_coord(coord):
            raise InvalidTransformationError(f"{transformation}: {coord} is outside the tablet")
        actual = self.types[self.coord_to_linear(coord)]
        if actual is not expected:
            raise InvalidTransformationError(
                f"{transformation}: expected {expected.name} at {coord}, found {actual.name}"
            )

    def scored_distances(self) -> List[int]:
        """
        Distances fed to the score aggregator.

        Zero distances are excluded, which drops both the Entrance and any
        unreachable cell.

        Returns:
            Non-zero distances in x-major order
        """
        return [d for d in self.distances if d != 0]

    def score(self, aggregator: Optional[Callable[[Sequence[int]], float]] = None) -> float:
        """
        Score this layout.

        Args:
            aggregator: Function over the non-zero distances
                        (default: sum of squares)

        Returns:
            Aggregated score, higher is better
        """
        if aggregator is None:
            aggregator = sum_of_squares
        return float(aggregator(self.scored_distances()))

    def to_columns(self) -> List[List[CellType]]:
        """
        Convert to mutable column-major representation (columns[x][y]).

        Returns:
            2D list of cell types
        """
        return [
            list(self.types[x * self.height:(x + 1) * self.height])
            for x in range(self.width)
        ]

    def count(self, cell_type: CellType) -> int:
        """Count cells of the given type."""
        return sum(1 for t in self.types if t is cell_type)
