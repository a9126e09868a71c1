"""
Custom Widgets
==============
Exposes: SourceView, PreviewView, StatusBar

The user edits their Jsonnet in their own editor; watchdog detects saves
and both panes update live.
"""

from __future__ import annotations

from rich.console import RenderableType
from textual.widgets import Static


class SourceView(Static):
    """
    Left pane: the Jsonnet source with diagnostic markers.
    ID: #source-view
    """

    def __init__(self, **kwargs) -> None:
        super().__init__(id="source-view", **kwargs)

    def set_source(self, highlighted: RenderableType) -> None:
        self.update(highlighted)


class PreviewView(Static):
    """
    Right pane: the rendered JSON/YAML, or the failure text.
    ID: #preview-view
    """

    def __init__(self, **kwargs) -> None:
        super().__init__(id="preview-view", **kwargs)

    def set_preview(self, highlighted: RenderableType) -> None:
        """Update the preview pane with a Rich renderable."""
        self.update(highlighted)


class StatusBar(Static):
    """
    Bottom bar: current file, output format, ext-strs, render status, error count.
    ID: #status-bar
    """

    def __init__(self, **kwargs) -> None:
        super().__init__(id="status-bar", **kwargs)
        self._file: str = ""
        self._format: str = ""
        self._ext_strs: str = ""
        self._status: str = "idle"
        self._errors: int = 0

    def set_status(
        self,
        *,
        file: str | None = None,
        output_format: str | None = None,
        ext_strs: str | None = None,
        status: str | None = None,
        errors: int | None = None,
    ) -> None:
        if file is not None:
            self._file = file
        if output_format is not None:
            self._format = output_format
        if ext_strs is not None:
            self._ext_strs = ext_strs
        if status is not None:
            self._status = status
        if errors is not None:
            self._errors = errors
        self._render_bar()

    def render_text(self) -> str:
        parts = []
        if self._file:
            parts.append(f"📄 {self._file}")
        if self._format:
            parts.append(f"⇄ {self._format}")
        if self._ext_strs:
            parts.append(f"⚙  {self._ext_strs}")
        parts.append(f"● {self._status}")
        if self._errors:
            parts.append(f"❌ {self._errors} error(s)")
        return "  │  ".join(parts)

    def _render_bar(self) -> None:
        self.update(self.render_text())
