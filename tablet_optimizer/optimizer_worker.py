"""
Optimizer Worker Module for Tablet Optimizer

Runs one TabletOptimizer.optimize() call on a background QThread so the
simulator window keeps painting while deep searches run. Results travel
back to the UI thread through Qt signals.
"""

import logging

from PyQt5.QtCore import QThread, pyqtSignal

from tablet_optimizer.solver import TabletOptimizer, TabletState


# Configure module logger
logger = logging.getLogger(__name__)


class OptimizerWorker(QThread):
    """
    Background worker for a single optimization request.

    Signals:
        result_ready(int, object): (request_id, OptimizationResult)
        error_occurred(int, str): (request_id, error message)

    Example:
        worker = OptimizerWorker(request_id, optimizer, state)
        worker.result_ready.connect(session_owner.on_result)
        worker.start()
    """

    result_ready = pyqtSignal(int, object)
    error_occurred = pyqtSignal(int, str)

    def __init__(self, request_id: int, optimizer: TabletOptimizer, state: TabletState):
        """
        Initialize the worker.

        Args:
            request_id: Session request this result answers
            optimizer: Optimizer to run (read only from the worker thread)
            state: Tablet to rank
        """
        super().__init__()
        self.request_id = request_id
        self._optimizer = optimizer
        self._state = state

    def run(self):
        """Optimize the tablet and emit the outcome. Called when thread starts."""
        logger.debug(
            f"Optimizing request {self.request_id} at depth {self._optimizer.search_depth}"
        )
        try:
            result = self._optimizer.optimize(self._state)
        except Exception as e:
            logger.exception(f"Optimization request {self.request_id} failed")
            self.error_occurred.emit(self.request_id, str(e))
            return
        self.result_ready.emit(self.request_id, result)
