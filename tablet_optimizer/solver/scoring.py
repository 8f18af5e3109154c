"""
Scoring Module - Registry of aggregators over per-cell distances.

An aggregator receives the non-zero cell distances of a tablet and
returns a score; higher scores rank first.
"""

from typing import Callable, Dict, List, Sequence

ScoringFunc = Callable[[Sequence[int]], float]

DEFAULT_SCORING = "sum_of_squares"

# Global registry of scoring functions
_SCORINGS: Dict[str, ScoringFunc] = {}


def register_scoring(func: ScoringFunc) -> ScoringFunc:
    """
    Decorator to register a scoring function under its __name__.

    Usage:
        @register_scoring
        def my_score(distances):
            ...

    Args:
        func: Aggregator to register

    Returns:
        The same function (for decorator chaining)
    """
    _SCORINGS[func.__name__] = func
    return func


@register_scoring
def sum_of_squares(distances: Sequence[int]) -> float:
    """Sum of squared distances; long detours weigh disproportionately."""
    return float(sum(d * d for d in distances))


@register_scoring
def sum_of_distances(distances: Sequence[int]) -> float:
    return float(sum(distances))


@register_scoring
def max_distance(distances: Sequence[int]) -> float:
    return float(max(distances, default=0))


def get_scoring(name: str) -> ScoringFunc:
    """
    Look up a scoring function by name.

    Args:
        name: Registered name (e.g., "sum_of_squares")

    Returns:
        Scoring function

    Raises:
        ValueError: If scoring name not found
    """
    if name not in _SCORINGS:
        available = ", ".join(_SCORINGS.keys())
        raise ValueError(f"Unknown scoring: {name}. Available: {available}")
    return _SCORINGS[name]


def get_scoring_names() -> List[str]:
    """
    Get list of available scoring names.

    Returns:
        List of registered scoring names
    """
    return list(_SCORINGS.keys())


def get_default_scoring_name() -> str:
    return DEFAULT_SCORING
