"""
Session Module - Navigation state for the tablet simulator.

Holds the current tablet with its ranked improvements, undo/redo
history, and a small state machine for picking a cell and then one of
the cells it can interact with:

    IDLE --click cell with moves--> CELL_SELECTED
     ^                                   |
     |       click highlighted cell      |
     |   (applies the move, new state)   |
     |___________________________________|
                 or clear_selection()

History is kept in memory only. The optimizer can run inline or, through
a scheduler, on a background thread while the UI stays responsive.
"""

from dataclasses import dataclass
from enum import Enum, auto
from typing import Callable, Dict, List, Optional
import logging

from tablet_optimizer.solver import (
    Coordinate, TabletState, SearchStep, TabletOptimizer, OptimizationResult
)

logger = logging.getLogger(__name__)

# scheduler(request_id, optimizer, state); the result comes back via accept_result
Scheduler = Callable[[int, TabletOptimizer, TabletState], None]


__all__ = [
    "Scheduler",
    "SelectionState",
    "TabletSession",
]


class SelectionState(Enum):
    """
    Selection states.

    States:
        IDLE: No cell selected
        CELL_SELECTED: A cell is selected, its partner cells are highlighted
    """
    IDLE = auto()
    CELL_SELECTED = auto()


@dataclass(frozen=True)
class _PendingState:
    """Requested tablet waiting for its optimization result."""
    request_id: int
    state: TabletState
    commit: Optional[Callable[[], None]]


class TabletSession:
    """
    Current tablet, its rankings and navigation history.

    Every state change re-runs the optimizer, so rankings always belong
    to the current tablet. Without a scheduler the optimizer runs inline.
    With one, the session only records the requested state as pending and
    hands it to the scheduler; the tablet and history change once the
    result comes back through accept_result().
    """

    def __init__(self, optimizer: Optional[TabletOptimizer] = None,
                 scheduler: Optional[Scheduler] = None):
        """
        Initialize session.

        Args:
            optimizer: Optimizer used to rank the current tablet
                       (default: TabletOptimizer())
            scheduler: Called as scheduler(request_id, optimizer, state) to
                       optimize in the background (default: run inline)
        """
        self._optimizer = optimizer or TabletOptimizer()
        self._scheduler = scheduler

        self._current: Optional[OptimizationResult] = None
        self._undo_stack: List[TabletState] = []
        self._redo_stack: List[TabletState] = []

        self._request_id = 0
        self._pending: Optional[_PendingState] = None

        self._selection_state = SelectionState.IDLE
        self._selected: Optional[Coordinate] = None
        self._selected_improvements: Dict[Coordinate, SearchStep] = {}

    @property
    def optimizer(self) -> TabletOptimizer:
        return self._optimizer

    def set_optimizer(self, optimizer: TabletOptimizer) -> None:
        """
        Replace the optimizer and re-rank the current tablet.

        A pending request is re-issued with the new optimizer.

        Args:
            optimizer: New optimizer
        """
        self._optimizer = optimizer
        self.clear_selection()
        if self._pending is not None:
            self._set_state(self._pending.state, self._pending.commit)
        elif self._current is not None:
            self._set_state(self._current.state)

    def set_scheduler(self, scheduler: Optional[Scheduler]) -> None:
        """Run future optimizations through scheduler (None: inline)."""
        self._scheduler = scheduler

    @property
    def busy(self) -> bool:
        """True while a scheduled optimization has not been accepted."""
        return self._pending is not None

    @property
    def state(self) -> Optional[TabletState]:
        """Current tablet, or None before anything is loaded."""
        return self._current.state if self._current else None

    @property
    def score(self) -> float:
        """Score of the current tablet (0.0 before anything is loaded)."""
        return self._current.score if self._current else 0.0

    @property
    def rankings(self) -> Dict[int, List[SearchStep]]:
        return self._current.rankings if self._current else {}

    @property
    def can_undo(self) -> bool:
        return len(self._undo_stack) > 0

    @property
    def can_redo(self) -> bool:
        return len(self._redo_stack) > 0

    @property
    def selection_state(self) -> SelectionState:
        return self._selection_state

    @property
    def selected(self) -> Optional[Coordinate]:
        """Selected cell, or None."""
        return self._selected

    @property
    def selected_improvements(self) -> Dict[Coordinate, SearchStep]:
        """Partner cell -> one-move step for the selected cell."""
        return dict(self._selected_improvements)

    def score_delta(self, step: SearchStep) -> float:
        """Score change a step would bring relative to the current tablet."""
        return step.result_score - self.score

    def load(self, state: TabletState) -> None:
        """
        Make a tablet current, recording the previous one for undo.

        Args:
            state: New current tablet
        """
        self.clear_selection()
        self._set_state(state, self._push_history)

    def apply_step(self, step: SearchStep) -> None:
        """
        Jump to the result of a ranked step.

        Args:
            step: Step from rankings or selected_improvements
        """
        logger.info(f"Applying {step.describe()} ({self.score_delta(step):+g})")
        self.load(step.result_state)

    def undo(self) -> bool:
        """
        Return to the previous tablet.

        Returns:
            True if there was something to undo
        """
        if not self._undo_stack:
            return False
        self.clear_selection()
        self._set_state(self._undo_stack[-1], self._commit_undo)
        return True

    def redo(self) -> bool:
        """
        Re-apply the most recently undone tablet.

        Returns:
            True if there was something to redo
        """
        if not self._redo_stack:
            return False
        self.clear_selection()
        self._set_state(self._redo_stack[-1], self._commit_redo)
        return True

    def click(self, coord: Coordinate) -> Optional[SearchStep]:
        """
        Handle a click on a cell.

        With nothing selected, selects coord if any single move involves
        it. With a cell selected, clicking one of its partner cells
        applies that move.

        Args:
            coord: Clicked cell

        Returns:
            The applied step, or None if no move was applied
        """
        state = self.state
        if state is None or self.busy:
            return None

        if self._selection_state is SelectionState.IDLE:
            improvements = self._optimizer.improvements_for(state, coord)
            if improvements:
                self._selected = coord
                self._selected_improvements = improvements
                self._selection_state = SelectionState.CELL_SELECTED
                logger.debug(f"Selected {coord}: {len(improvements)} partner cells")
            return None

        step = self._selected_improvements.get(coord)
        if step is None:
            return None
        self.apply_step(step)
        return step

    def clear_selection(self) -> None:
        self._selected = None
        self._selected_improvements = {}
        self._selection_state = SelectionState.IDLE

    def accept_result(self, request_id: int, result: OptimizationResult) -> bool:
        """
        Install the result of a scheduled optimization.

        Args:
            request_id: Id the scheduler was called with
            result: Optimizer output for that request

        Returns:
            False if the request was superseded and the result dropped
        """
        pending = self._pending
        if pending is None or pending.request_id != request_id:
            logger.debug(f"Dropping result of superseded request {request_id}")
            return False
        self._pending = None
        self._install(result, pending.commit)
        return True

    def discard_pending(self, request_id: int) -> bool:
        """
        Abandon a scheduled optimization, keeping the current tablet.

        Args:
            request_id: Id the scheduler was called with

        Returns:
            False if the request was already superseded
        """
        if self._pending is None or self._pending.request_id != request_id:
            return False
        logger.warning(f"Optimization request {request_id} abandoned")
        self._pending = None
        return True

    def _push_history(self) -> None:
        if self._current is not None:
            self._undo_stack.append(self._current.state)
        self._redo_stack.clear()

    def _commit_undo(self) -> None:
        self._undo_stack.pop()
        if self._current is not None:
            self._redo_stack.append(self._current.state)

    def _commit_redo(self) -> None:
        self._redo_stack.pop()
        if self._current is not None:
            self._undo_stack.append(self._current.state)

    def _set_state(self, state: TabletState,
                   commit: Optional[Callable[[], None]] = None) -> None:
        self._request_id += 1
        if self._scheduler is None:
            self._pending = None
            self._install(self._optimizer.optimize(state), commit)
            return

        self._pending = _PendingState(self._request_id, state, commit)
        self._scheduler(self._request_id, self._optimizer, state)

    def _install(self, result: OptimizationResult,
                 commit: Optional[Callable[[], None]]) -> None:
        if commit is not None:
            commit()
        self._current = result
