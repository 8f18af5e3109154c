"""
Solver Package - Tablet model, move generation and bounded search.

This package scores tablet layouts by the distance of every room from
the Entrance and enumerates short move sequences that improve the score.

Public API:
    - Coordinate: Grid position
    - PathFinder / compute_distance_field(): Distance fields
    - CellType, Cell, TabletState: Immutable tablet representation
    - SwapEntrance, SwapWaterAndEmpty, TurnWaterToEmpty: Moves
    - interactable_coordinate(): Partner cell of a move for a clicked cell
    - explore(), rank(), SearchStep: Bounded search and grouping
    - TabletOptimizer, OptimizationResult: Configured search
    - register_scoring(), get_scoring(), get_scoring_names(): Scoring registry

Usage:
    from tablet_optimizer.solver import CellType, TabletState, TabletOptimizer

    state = TabletState.from_columns([[CellType.ENCOUNTER, CellType.ENTRANCE, CellType.EMPTY]])
    result = TabletOptimizer(search_depth=2).optimize(state)

    for depth, steps in result.rankings.items():
        print(f"{depth} moves: {steps[0].describe()} -> {steps[0].result_score}")
"""

# Core data structures
from .coordinate import Coordinate, NEIGHBOR_OFFSETS
from .pathfinder import PathFinder, compute_distance_field, UNREACHABLE
from .tablet import (
    CellType,
    Cell,
    TabletState,
    InvalidTabletError,
    InvalidTransformationError,
)
from .transformation import (
    Transformation,
    SwapEntrance,
    SwapWaterAndEmpty,
    TurnWaterToEmpty,
    interactable_coordinate,
)

# Scoring and search
from .scoring import (
    register_scoring,
    get_scoring,
    get_scoring_names,
    get_default_scoring_name,
    sum_of_squares,
)
from .search import SearchStep, SearchMetrics, explore, rank
from .optimizer import (
    TabletOptimizer,
    OptimizationResult,
    MIN_SEARCH_DEPTH,
    MAX_SEARCH_DEPTH,
)

__all__ = [
    # Data structures
    "Coordinate",
    "NEIGHBOR_OFFSETS",
    "PathFinder",
    "compute_distance_field",
    "UNREACHABLE",
    "CellType",
    "Cell",
    "TabletState",
    "InvalidTabletError",
    "InvalidTransformationError",
    # Moves
    "Transformation",
    "SwapEntrance",
    "SwapWaterAndEmpty",
    "TurnWaterToEmpty",
    "interactable_coordinate",
    # Scoring
    "register_scoring",
    "get_scoring",
    "get_scoring_names",
    "get_default_scoring_name",
    "sum_of_squares",
    # Search
    "SearchStep",
    "SearchMetrics",
    "explore",
    "rank",
    "TabletOptimizer",
    "OptimizationResult",
    "MIN_SEARCH_DEPTH",
    "MAX_SEARCH_DEPTH",
]
