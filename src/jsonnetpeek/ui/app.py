from pathlib import Path
from typing import List, Optional

from textual.app import App, ComposeResult
from textual.widgets import Footer, TextArea
from textual.containers import VerticalScroll, Horizontal, Vertical
from textual.binding import Binding
from textual.message import Message
from ..engine import PreviewEngine
from ..utils.config import ConfigManager
from ..utils.state import PreviewState
from ..utils.highlighter import highlight_preview, highlight_source
from ..utils.lang import detect_kind, source_label
from .widgets import PreviewView, SourceView, StatusBar
from .source_peek import DiagnosticPeekPanel
from .ext_strs_palette import ExtStrsPopup, format_ext_strs

# User Palette
C_BG = "#EBEEEE"
C_TEXT = "#191A1A"
C_ACCENT1 = "#45d3ee" # Cyan
C_ACCENT2 = "#9FBFC5" # Muted Blue

class PreviewApp(App):
    """Jsonnet source on the left, rendered preview on the right."""

    CSS = f"""
    Screen {{
        background: {C_BG};
        color: {C_TEXT};
        layers: base popups;
        align: center middle;
    }}

    #main-layout {{ height: 1fr; width: 100%; layer: base; }}

    .pane {{
        height: 1fr;
        width: 1fr;
        border: solid {C_ACCENT2};
        background: {C_BG};
        margin: 0 1;
    }}

    #error-view {{ color: #a80000; display: none; height: 1fr; width: 1fr; margin: 0 1; }}

    DiagnosticPeekPanel {{ layer: popups; }}
    ExtStrsPopup {{
        display: none;
        layer: popups;
        margin: 1 1;
        width: 60;
    }}

    StatusBar {{ height: 1; dock: bottom; background: {C_ACCENT2}; }}
    Footer {{ background: {C_TEXT}; color: {C_ACCENT1}; }}
    """

    BINDINGS = [
        Binding("q", "quit", "Quit", show=True),
        Binding("r", "refresh", "Re-render", show=True),
        Binding("f", "toggle_format", "JSON/YAML", show=True),
        Binding("o", "toggle_ext_strs", "Ext vars", show=True),
        Binding("t", "next_document", "Next file", show=True),
        Binding("n", "next_diagnostic", "Next error", show=False),
        Binding("p", "previous_diagnostic", "Prev error", show=False),
    ]

    class StateUpdated(Message):
        def __init__(self, state: PreviewState) -> None:
            super().__init__()
            self.state = state

    def __init__(self, source_files: List[str], config_manager: Optional[ConfigManager] = None):
        super().__init__()
        self.documents = list(source_files)
        self._active = 0
        self.engine = PreviewEngine(self.documents[0], config_manager)
        self.engine.on_update_callback = lambda state: self.post_message(self.StateUpdated(state))

    def compose(self) -> ComposeResult:
        with Horizontal(id="main-layout"):
            with VerticalScroll(id="source-pane", classes="pane"):
                yield SourceView()
            with Vertical(classes="pane"):
                yield TextArea(id="error-view", read_only=True)
                with VerticalScroll(id="preview-pane"):
                    yield PreviewView()
        yield DiagnosticPeekPanel(id="diagnostic-peek")
        yield ExtStrsPopup(id="ext-strs-palette")
        yield StatusBar()
        yield Footer()

    def on_mount(self) -> None:
        self.engine.start()

    def on_unmount(self) -> None:
        self.engine.stop()

    # ── Actions ─────────────────────────────────────────────

    def action_refresh(self) -> None:
        self.query_one(StatusBar).set_status(status="rendering")
        self.engine.refresh()

    def action_toggle_format(self) -> None:
        current = self.engine.state.output_format
        self.engine.set_output_format("yaml" if current == "json" else "json")

    def action_toggle_ext_strs(self) -> None:
        self.query_one("#ext-strs-palette", ExtStrsPopup).show(self.engine.state.ext_strs)

    def action_next_document(self) -> None:
        if len(self.documents) < 2:
            return
        self._active = (self._active + 1) % len(self.documents)
        self.engine.open(self.documents[self._active])

    def action_next_diagnostic(self) -> None:
        self.query_one("#diagnostic-peek", DiagnosticPeekPanel).select_next()

    def action_previous_diagnostic(self) -> None:
        self.query_one("#diagnostic-peek", DiagnosticPeekPanel).select_previous()

    # ── Messages ────────────────────────────────────────────

    def on_ext_strs_popup_ext_strs_changed(self, message: ExtStrsPopup.ExtStrsChanged) -> None:
        self.engine.set_ext_strs(message.ext_strs)

    def on_preview_app_state_updated(self, message: StateUpdated) -> None:
        state = message.state
        file_diagnostics = state.diagnostics_for()

        self.query_one(SourceView).set_source(highlight_source(state.source_lines, file_diagnostics))
        self.query_one("#source-pane").border_title = source_label(detect_kind(state.source_path))

        error_view = self.query_one("#error-view", TextArea)
        preview_pane = self.query_one("#preview-pane", VerticalScroll)
        if state.render_failed and not state.diagnostics:
            # Nothing could be located; show the raw report
            preview_pane.display, error_view.display = False, True
            error_view.text = state.preview_text
        else:
            preview_pane.display, error_view.display = True, False
            self.query_one(PreviewView).set_preview(
                highlight_preview(state.preview_text, state.output_format, state.render_failed)
            )

        self.query_one("#diagnostic-peek", DiagnosticPeekPanel).update_context(
            state.source_lines, file_diagnostics
        )
        self.query_one(StatusBar).set_status(
            file=Path(state.source_path).name,
            output_format=state.output_format,
            ext_strs=format_ext_strs(state.ext_strs),
            status="error" if state.has_errors else "ok",
            errors=state.error_count,
        )

def run_tui(source_files: List[str], config_manager: Optional[ConfigManager] = None):
    app = PreviewApp(source_files, config_manager)
    app.run()
