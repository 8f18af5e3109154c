"""
Search Module - Bounded-depth enumeration of transformation sequences.

explore() visits every sequence of legal transformations up to a depth
limit and records each visited prefix, not only the full-depth leaves.
rank() groups the results by sequence length for presentation.
"""

import logging
from dataclasses import dataclass, field
from itertools import groupby
from typing import Dict, Iterable, Iterator, List, Optional, Sequence, Tuple

from .tablet import TabletState
from .transformation import Transformation
from .scoring import ScoringFunc, sum_of_squares

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SearchStep:
    """
    One explored path through the search tree.

    Attributes:
        moves: Transformations applied, in order
        result_score: Score of the resulting tablet
        result_state: Tablet after all moves
    """
    moves: Tuple[Transformation, ...]
    result_score: float
    result_state: TabletState

    @property
    def depth(self) -> int:
        """Number of moves in this path."""
        return len(self.moves)

    @property
    def first_move(self) -> Optional[Transformation]:
        return self.moves[0] if self.moves else None

    def describe(self) -> str:
        """Human-readable move list, e.g. for a button label."""
        return ", ".join(str(move) for move in self.moves)


@dataclass
class SearchMetrics:
    """
    Performance metrics for one search.

    Attributes:
        computation_time_ms: Time taken in milliseconds
        states_explored: Number of tablet states built by applying moves
        result_count: Number of SearchStep values produced
        scoring_name: Name of the aggregator used
    """
    computation_time_ms: float = 0.0
    states_explored: int = 0
    result_count: int = 0
    scoring_name: str = ""


@dataclass
class _Frame:
    """Worklist entry: a tablet whose transformations are being expanded."""
    state: TabletState
    depth: int
    moves: Tuple[Transformation, ...]
    pending: Iterator[Transformation] = field(init=False)

    def __post_init__(self):
        self.pending = self.state.generate_transformations()


def explore(
    state: TabletState,
    max_depth: int,
    prior_moves: Sequence[Transformation] = (),
    scoring: ScoringFunc = sum_of_squares,
    metrics: Optional[SearchMetrics] = None
) -> List[SearchStep]:
    """
    Enumerate every transformation sequence up to max_depth moves.

    With max_depth == 0 the result is a single step for state itself.
    Otherwise each transformation is applied and explored one level
    shallower; once all of a state's descendants are recorded, the state
    itself is recorded too if it was reached by at least one move. A
    top-level call with no prior moves therefore never returns the empty
    sequence.

    The tree is walked with an explicit stack, so depth does not grow
    the Python call stack. Results come out in the same order as the
    recursive definition: descendants first, then the prefix.

    Args:
        state: Starting tablet
        max_depth: Maximum number of additional moves
        prior_moves: Moves already applied to reach state
        scoring: Aggregator over non-zero distances
        metrics: Optional metrics object updated in place

    Returns:
        Flat list of SearchStep values

    Raises:
        ValueError: If max_depth is negative
    """
    if max_depth < 0:
        raise ValueError(f"max_depth must be >= 0, got {max_depth}")

    prior = tuple(prior_moves)
    if max_depth == 0:
        return [SearchStep(prior, state.score(scoring), state)]

    results: List[SearchStep] = []
    states_explored = 0
    stack = [_Frame(state=state, depth=max_depth, moves=prior)]

    while stack:
        frame = stack[-1]
        transformation = next(frame.pending, None)

        if transformation is None:
            stack.pop()
            if frame.moves:
                results.append(SearchStep(frame.moves, frame.state.score(scoring), frame.state))
            continue

        child = frame.state.apply(transformation)
        states_explored += 1
        moves = frame.moves + (transformation,)

        if frame.depth == 1:
            results.append(SearchStep(moves, child.score(scoring), child))
        else:
            stack.append(_Frame(state=child, depth=frame.depth - 1, moves=moves))

    if metrics is not None:
        metrics.states_explored += states_explored
        metrics.result_count += len(results)

    logger.debug(
        f"[Search] depth={max_depth}: {len(results)} results, "
        f"{states_explored} states explored"
    )
    return results


def rank(steps: Iterable[SearchStep]) -> Dict[int, List[SearchStep]]:
    """
    Group steps by move count and order each group by descending score.

    Sorting is stable, so steps with equal scores keep their input order.

    Args:
        steps: Search results

    Returns:
        Mapping of sequence length -> steps, keys ascending
    """
    by_depth = sorted(steps, key=lambda s: s.depth)
    return {
        depth: sorted(group, key=lambda s: s.result_score, reverse=True)
        for depth, group in groupby(by_depth, key=lambda s: s.depth)
    }
