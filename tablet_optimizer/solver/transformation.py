"""
Transformation Module - The closed set of moves applicable to a tablet.

Transformations are pure value descriptions. TabletState produces them
in generate_transformations() and consumes them in apply().
"""

from dataclasses import dataclass
from typing import Optional, Union, TYPE_CHECKING, assert_never

from .coordinate import Coordinate

if TYPE_CHECKING:
    from .tablet import TabletState


@dataclass(frozen=True)
class SwapEntrance:
    """
    Relocate the Entrance to an Empty cell.

    Attributes:
        target: Empty cell that becomes the new Entrance
    """
    target: Coordinate

    def describe(self) -> str:
        return f"Move entrance to {self.target}"

    def __str__(self) -> str:
        return f"SwapEntrance {self.target}"


@dataclass(frozen=True)
class SwapWaterAndEmpty:
    """
    Exchange a Water cell with an Empty cell.

    Attributes:
        water: Cell currently holding Water
        empty: Cell currently Empty
    """
    water: Coordinate
    empty: Coordinate

    def describe(self) -> str:
        return f"Swap water {self.water} with empty {self.empty}"

    def __str__(self) -> str:
        return f"SwapWaterAndEmpty {self.water}<->{self.empty}"


@dataclass(frozen=True)
class TurnWaterToEmpty:
    """
    Convert a Water cell to Empty in place.

    Attributes:
        water: Cell currently holding Water
    """
    water: Coordinate

    def describe(self) -> str:
        return f"Drain water at {self.water}"

    def __str__(self) -> str:
        return f"TurnWaterToEmpty {self.water}"


Transformation = Union[SwapEntrance, SwapWaterAndEmpty, TurnWaterToEmpty]


def interactable_coordinate(
    tablet: 'TabletState',
    transformation: Transformation,
    coord: Coordinate
) -> Optional[Coordinate]:
    """
    Find the other cell a transformation touches, relative to a clicked cell.

    Used by the simulator so that picking a cell highlights every cell
    a single move could pair it with.

    Args:
        tablet: State the transformation was generated from
        transformation: Candidate move
        coord: Clicked cell

    Returns:
        The partner coordinate, the cell itself for in-place moves,
        or None if the move does not involve coord
    """
    if isinstance(transformation, SwapEntrance):
        entrance = tablet.entrance_coordinate
        if entrance == coord:
            return transformation.target
        if transformation.target == coord:
            return entrance
        return None
    elif isinstance(transformation, SwapWaterAndEmpty):
        if transformation.water == coord:
            return transformation.empty
        if transformation.empty == coord:
            return transformation.water
        return None
    elif isinstance(transformation, TurnWaterToEmpty):
        if transformation.water == coord:
            return transformation.water
        return None
    else:
        assert_never(transformation)
