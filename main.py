"""
Tablet Optimizer - Entry Point

Opens the tablet simulator window, or prints the ranked improvements
for a layout when run headless.

Example:
    python main.py --sample
    python main.py --layout tablets/example.txt --depth 3
    python main.py --layout tablets/example.txt --headless --top 5
"""

import sys
import logging
import argparse
from functools import partial
from typing import List, Optional

from PyQt5.QtWidgets import QApplication

from tablet_optimizer.control_ui import TabletWindow
from tablet_optimizer.optimizer_worker import OptimizerWorker
from tablet_optimizer.session import TabletSession
from tablet_optimizer.settings import load_settings, save_settings, normalize_settings
from tablet_optimizer.snapshot import load_layout, sample_tablet, format_layout
from tablet_optimizer.solver import (
    TabletState, TabletOptimizer, OptimizationResult, InvalidTabletError,
    get_scoring_names
)

logger = logging.getLogger(__name__)


def configure_logging(debug: bool = False) -> None:
    """Log to both console and optimizer.log."""
    logging.basicConfig(
        level=logging.DEBUG if debug else logging.INFO,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%H:%M:%S",
        handlers=[
            logging.StreamHandler(),
            logging.FileHandler("optimizer.log", mode='w', encoding='utf-8')
        ]
    )


class Application:
    """
    Main application controller.

    Owns the session and settings, and connects the simulator window's
    signals to them.
    """

    def __init__(self, args: argparse.Namespace):
        """
        Initialize the application.

        Args:
            args: Parsed command line arguments (override saved settings)
        """
        self.args = args
        self.settings = load_settings()

        overrides = {}
        if args.depth is not None:
            overrides["search_depth"] = args.depth
        if args.top is not None:
            overrides["top_options_count"] = args.top
        if args.scoring is not None:
            overrides["scoring_name"] = args.scoring
        self.settings = normalize_settings({**self.settings, **overrides})

        self.session = TabletSession(self._create_optimizer())
        self.window = None
        self.workers: List[OptimizerWorker] = []

    def _create_optimizer(self) -> TabletOptimizer:
        return TabletOptimizer(
            search_depth=self.settings["search_depth"],
            scoring_name=self.settings["scoring_name"],
            top_options_count=self.settings["top_options_count"],
        )

    def load_initial(self) -> Optional[TabletState]:
        """
        Load the tablet named on the command line.

        Returns:
            Loaded tablet, or None if none was requested

        Raises:
            InvalidTabletError: If the layout is invalid
            OSError: If the layout file cannot be read
        """
        if self.args.layout:
            state = load_layout(self.args.layout)
        elif self.args.sample:
            state = sample_tablet()
        else:
            return None
        self.session.load(state)
        return state

    def run_headless(self) -> int:
        """
        Print the current tablet and its best improvements.

        Returns:
            Exit code
        """
        try:
            state = self.load_initial()
        except (InvalidTabletError, OSError) as e:
            logger.error(f"Failed to load tablet: {e}")
            return 1

        if state is None:
            logger.error("Headless mode needs --layout or --sample")
            return 1

        print(format_layout(state), end="")
        print(f"Score: {self.session.score:g}")
        for depth, steps in sorted(self.session.rankings.items()):
            print(f"\nBest {depth}-move sequences:")
            for step in steps:
                delta = self.session.score_delta(step)
                print(f"  {step.describe()}: {step.result_score:g} ({delta:+g})")
        return 0

    def setup(self):
        """Set up the UI and connect signals."""
        self.session.set_scheduler(self._start_worker)

        self.window = TabletWindow(self.session)
        self.window.load_sample_requested.connect(self._on_load_sample)
        self.window.load_file_requested.connect(self._on_load_file)
        self.window.depth_changed.connect(self._on_depth_changed)
        self.window.shutdown_requested.connect(self._on_shutdown)

        try:
            if self.load_initial() is not None:
                self.window.set_status("Tablet loaded")
        except (InvalidTabletError, OSError) as e:
            logger.error(f"Failed to load tablet: {e}")
            self.window.set_status(f"Error: {e}")
        self.window.refresh()

        logger.info(
            f"Application initialized, depth {self.settings['search_depth']}, "
            f"scoring {self.settings['scoring_name']}"
        )

    def _start_worker(self, request_id: int, optimizer: TabletOptimizer,
                      state: TabletState):
        """Run a session optimization request on a background thread."""
        worker = OptimizerWorker(request_id, optimizer, state)
        worker.result_ready.connect(self._on_result_ready)
        worker.error_occurred.connect(self._on_worker_error)
        worker.finished.connect(partial(self._on_worker_finished, worker))
        self.workers.append(worker)
        worker.start()

    def _on_result_ready(self, request_id: int, result: OptimizationResult):
        """Handle optimization result from a worker."""
        if self.session.accept_result(request_id, result):
            self.window.refresh()

    def _on_worker_error(self, request_id: int, error_msg: str):
        """Handle worker error."""
        logger.error(f"Worker error: {error_msg}")
        if self.session.discard_pending(request_id):
            self.window.set_status(f"Error: {error_msg}")
            self.window.refresh()

    def _on_worker_finished(self, worker: OptimizerWorker):
        if worker in self.workers:
            self.workers.remove(worker)
        worker.deleteLater()

    def _load(self, state: TabletState, source: str):
        self.session.load(state)
        self.window.set_status(f"Loaded {source}")
        self.window.refresh()

    def _on_load_sample(self):
        """Handle Load sample button click."""
        self._load(sample_tablet(), "sample tablet")

    def _on_load_file(self, path: str):
        """Handle layout file selection."""
        try:
            self._load(load_layout(path), path)
        except (InvalidTabletError, OSError) as e:
            logger.error(f"Failed to load {path}: {e}")
            self.window.set_status(f"Error: {e}")

    def _on_depth_changed(self, depth: int):
        """Handle search depth change from UI."""
        logger.info(f"Search depth changed to: {depth}")
        self.settings["search_depth"] = depth
        save_settings(self.settings)

        self.session.set_optimizer(self._create_optimizer())
        self.window.refresh()

    def _on_shutdown(self):
        logger.info("Shutdown requested")
        save_settings(self.settings)

        for worker in list(self.workers):
            worker.wait(2000)  # 2 second timeout
            if worker.isRunning():
                logger.warning("Worker did not stop gracefully, terminating")
                worker.terminate()
                worker.wait()

    def run(self) -> int:
        """
        Show the window.

        Returns:
            Exit code
        """
        self.window.show()
        return 0


def parse_args(argv=None):
    """Parse command line arguments."""
    parser = argparse.ArgumentParser(
        description="Tablet Optimizer - Rank tablet rearrangements by entrance distance"
    )
    parser.add_argument(
        "--layout", "-l",
        help="Text layout file to load (. empty, ~ water, E entrance, X encounter)"
    )
    parser.add_argument(
        "--sample", "-s",
        action="store_true",
        help="Load the built-in sample tablet"
    )
    parser.add_argument(
        "--depth",
        type=int,
        choices=[1, 2, 3],
        help="Search depth (default: saved setting)"
    )
    parser.add_argument(
        "--top",
        type=int,
        help="Options shown per sequence length (default: saved setting)"
    )
    parser.add_argument(
        "--scoring",
        choices=get_scoring_names(),
        help="Scoring function (default: saved setting)"
    )
    parser.add_argument(
        "--headless",
        action="store_true",
        help="Print rankings instead of opening the window"
    )
    parser.add_argument(
        "--debug", "-d",
        action="store_true",
        help="Enable debug logging"
    )
    return parser.parse_args(argv)


def main():
    """Initialize and run the Tablet Optimizer application."""
    args = parse_args()
    configure_logging(args.debug)

    application = Application(args)
    if args.headless:
        sys.exit(application.run_headless())

    app = QApplication(sys.argv)
    application.setup()
    application.run()

    sys.exit(app.exec_())


if __name__ == "__main__":
    main()
