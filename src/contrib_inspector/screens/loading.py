"""Loading screen shown while lines are being attributed."""

from textual.app import ComposeResult
from textual.containers import Center, Vertical
from textual.screen import Screen
from textual.widgets import Footer, Header, Label, ProgressBar, Static


class LoadingScreen(Screen):
    """Displayed while the attribution is running."""

    BINDINGS = [
        ("q", "app.quit", "Quit"),
    ]

    CSS = """
    LoadingScreen {
        align: center middle;
    }
    #loading-container {
        width: 60;
        height: auto;
        padding: 1 3;
        border: heavy $accent;
    }
    #loading-title, #status-label, #phase-label {
        width: 100%;
        text-align: center;
    }
    #progress-bar {
        margin: 1 0;
    }
    """

    def compose(self) -> ComposeResult:
        yield Header(show_clock=True)
        with Center():
            with Vertical(id="loading-container"):
                yield Static("🔍  Attributing lines …", id="loading-title")
                yield Label("Initializing …", id="status-label")
                yield ProgressBar(total=None, show_eta=True, id="progress-bar")
                yield Label("", id="phase-label")
        yield Footer()

    def update_status(self, message: str) -> None:
        self.query_one("#status-label", Label).update(message)

    def update_progress(self, done: int, total: int) -> None:
        """Show ``done`` of ``total`` units (files or commits) finished."""
        bar = self.query_one("#progress-bar", ProgressBar)
        bar.update(total=total, progress=done)
        self.query_one("#phase-label", Label).update(f"{done}/{total}")

    def set_phase(self, phase: str) -> None:
        self.query_one("#phase-label", Label).update(phase)
