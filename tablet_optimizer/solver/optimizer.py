"""
Optimizer Module - Configured search + ranking for a tablet.
"""

import time
import logging
from dataclasses import dataclass, field
from typing import Dict, List

from .coordinate import Coordinate
from .tablet import TabletState
from .transformation import interactable_coordinate
from .scoring import get_scoring, DEFAULT_SCORING
from .search import SearchStep, SearchMetrics, explore, rank

logger = logging.getLogger(__name__)

MIN_SEARCH_DEPTH = 1
MAX_SEARCH_DEPTH = 3


@dataclass
class OptimizationResult:
    """
    Ranked improvements for one tablet.

    Attributes:
        state: Tablet that was searched
        score: Score of state itself
        rankings: Sequence length -> best steps first
        metrics: Performance statistics
    """
    state: TabletState
    score: float
    rankings: Dict[int, List[SearchStep]] = field(default_factory=dict)
    metrics: SearchMetrics = field(default_factory=SearchMetrics)

    def best(self, depth: int) -> SearchStep | None:
        """
        Get the highest-scoring step of a given length.

        Args:
            depth: Number of moves

        Returns:
            Best SearchStep, or None if no step has that length
        """
        steps = self.rankings.get(depth)
        return steps[0] if steps else None

    def score_delta(self, step: SearchStep) -> float:
        """Score change a step would bring relative to state."""
        return step.result_score - self.score


class TabletOptimizer:
    """
    Runs the bounded search with a fixed depth and scoring function.

    Attributes:
        search_depth: Maximum moves per sequence
        scoring_name: Registered scoring function name
        top_options_count: Steps kept per sequence length
    """

    def __init__(self, search_depth: int = 2, scoring_name: str = DEFAULT_SCORING,
                 top_options_count: int = 50):
        """
        Initialize optimizer.

        Args:
            search_depth: Moves to look ahead (1-3, higher = much slower)
            scoring_name: Scoring function name (see get_scoring_names())
            top_options_count: Steps kept per sequence length

        Raises:
            ValueError: If depth is out of range or scoring is unknown
        """
        if not MIN_SEARCH_DEPTH <= search_depth <= MAX_SEARCH_DEPTH:
            raise ValueError(
                f"search_depth must be between {MIN_SEARCH_DEPTH} and "
                f"{MAX_SEARCH_DEPTH}, got {search_depth}"
            )
        if top_options_count < 0:
            raise ValueError(f"top_options_count must be >= 0, got {top_options_count}")

        self.search_depth = search_depth
        self.scoring_name = scoring_name
        self.scoring = get_scoring(scoring_name)
        self.top_options_count = top_options_count

    def score(self, state: TabletState) -> float:
        return state.score(self.scoring)

    def optimize(self, state: TabletState) -> OptimizationResult:
        """
        Search and rank all move sequences for a tablet.

        Args:
            state: Tablet to improve

        Returns:
            OptimizationResult with rankings trimmed to top_options_count
        """
        start_time = time.perf_counter()
        metrics = SearchMetrics(scoring_name=self.scoring_name)

        steps = explore(state, self.search_depth, scoring=self.scoring, metrics=metrics)
        rankings = {
            depth: group[:self.top_options_count]
            for depth, group in rank(steps).items()
        }

        metrics.computation_time_ms = (time.perf_counter() - start_time) * 1000
        current_score = self.score(state)

        logger.info(
            f"[Optimizer] {state.width}x{state.height} tablet, score {current_score:g}: "
            f"{metrics.result_count} sequences, {metrics.states_explored} states "
            f"in {metrics.computation_time_ms:.1f}ms"
        )
        for depth, group in rankings.items():
            if group:
                logger.debug(
                    f"[Optimizer] Best {depth}-move: {group[0].describe()} "
                    f"-> {group[0].result_score:g}"
                )

        return OptimizationResult(
            state=state,
            score=current_score,
            rankings=rankings,
            metrics=metrics
        )

    def improvements_for(self, state: TabletState,
                         coord: Coordinate) -> Dict[Coordinate, SearchStep]:
        """
        Map single moves involving coord to the other cell they touch.

        Args:
            state: Current tablet
            coord: Selected cell

        Returns:
            Partner coordinate -> one-move SearchStep
        """
        improvements: Dict[Coordinate, SearchStep] = {}
        for step in explore(state, 1, scoring=self.scoring):
            other = interactable_coordinate(state, step.moves[0], coord)
            if other is not None:
                improvements[other] = step
        return improvements
