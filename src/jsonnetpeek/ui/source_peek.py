"""
Diagnostic Peek Widget
======================
A small panel that shows the source lines around the selected
diagnostic, so the error is readable without scrolling the source pane.
"""

from __future__ import annotations

from typing import List, Optional

from textual.widgets import Static

from ..parsing.diagnostics import Diagnostic
from ..utils.highlighter import diagnostic_context


class DiagnosticPeekPanel(Static):
    """
    Bottom panel cycling through the diagnostics of the active file.

    The diagnostics come from the engine state (already filtered to the
    active file); `source_lines` is the file split by line.
    """

    DEFAULT_CSS = """
    DiagnosticPeekPanel {
        height: 6;
        dock: bottom;
        background: #252526;
        border-top: solid #3c3c3c;
        padding: 0 1;
    }
    """

    def __init__(self, **kwargs) -> None:
        super().__init__(**kwargs)
        self._source_lines: List[str] = []
        self._diagnostics: List[Diagnostic] = []
        self._index: int = 0

    # ── Public API ──────────────────────────────────────────

    def update_context(
        self,
        source_lines: List[str],
        diagnostics: List[Diagnostic],
    ) -> None:
        """Called whenever the engine produces new state."""
        self._source_lines = source_lines
        self._diagnostics = diagnostics
        self._index = 0
        self._render_current()

    @property
    def current(self) -> Optional[Diagnostic]:
        if not self._diagnostics:
            return None
        return self._diagnostics[self._index]

    def select_next(self) -> None:
        if self._diagnostics:
            self._index = (self._index + 1) % len(self._diagnostics)
            self._render_current()

    def select_previous(self) -> None:
        if self._diagnostics:
            self._index = (self._index - 1) % len(self._diagnostics)
            self._render_current()

    # ── Internal rendering ──────────────────────────────────

    def _render_current(self) -> None:
        self.update(diagnostic_context(self._source_lines, self.current))
