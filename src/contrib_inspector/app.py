"""Main Textual TUI application for contrib-inspector."""

import logging

from textual.app import App

from contrib_inspector.analyzer import Analyzer
from contrib_inspector.config import InspectConfig
from contrib_inspector.exceptions import ContribInspectorError
from contrib_inspector.models import InspectionResult
from contrib_inspector.screens.loading import LoadingScreen
from contrib_inspector.screens.results import ResultsScreen

logger = logging.getLogger(__name__)


class ContribInspectorApp(App):
    """TUI that runs an inspection and lets you browse the results."""

    TITLE = "Contrib Inspector"
    SUB_TITLE = "Who wrote this codebase?"

    CSS = """
    Screen {
        background: $background;
    }
    """

    BINDINGS = [
        ("q", "quit", "Quit"),
    ]

    def __init__(self, config: InspectConfig, **kwargs) -> None:  # type: ignore[no-untyped-def]
        super().__init__(**kwargs)
        self.config = config
        self.result: InspectionResult | None = None

    def on_mount(self) -> None:
        self.run_inspection()

    def run_inspection(self) -> None:
        """Run the analyzer on a worker thread behind the loading screen."""
        loading = LoadingScreen()
        self.push_screen(loading)

        def on_status(msg: str) -> None:
            self.call_from_thread(loading.update_status, msg)

        def on_progress(done: int, total: int) -> None:
            # Repaint about a hundred times per run, not once per file
            step = max(1, total // 100)
            if done == total or done % step == 0:
                self.call_from_thread(loading.update_progress, done, total)

        def _do_work() -> None:
            analyzer = Analyzer(self.config, on_status=on_status, on_progress=on_progress)
            try:
                result = analyzer.inspect()
            except ContribInspectorError as e:
                self.call_from_thread(loading.update_status, f"❌ {e}")
                self.call_from_thread(loading.set_phase, "Press q to quit.")
                return
            except Exception as e:
                logger.exception("inspection failed")
                self.call_from_thread(loading.update_status, f"❌ Unexpected error: {e}")
                self.call_from_thread(loading.set_phase, "Press q to quit.")
                return
            self.call_from_thread(self._show_results, result)

        self.run_worker(_do_work, thread=True)

    def _show_results(self, result: InspectionResult) -> None:
        """Replace loading screen with results."""
        self.result = result
        self.pop_screen()
        self.push_screen(ResultsScreen(result, self.config))
