from typing import Dict, List, Optional, Tuple

from rich.console import RenderableType
from rich.syntax import Syntax
from rich.text import Text

from ..parsing.diagnostics import Diagnostic
from .lang import preview_language

ERROR_STYLE = "bold red underline"
GUTTER_ERROR = "bold red"
GUTTER_PLAIN = "dim"


def highlight_preview(preview: str, output_format: str, failed: bool = False) -> RenderableType:
    """
    Rich renderable for the preview pane: syntax-highlighted JSON/YAML,
    or the raw failure text in red.
    """
    if failed:
        return Text(preview, style="red")
    return Syntax(
        preview,
        preview_language(output_format, failed),
        theme="ansi_light",
        line_numbers=True,
        word_wrap=False,
    )


def _line_spans(diagnostics: List[Diagnostic], line_lengths: List[int]) -> Dict[int, List[Tuple[int, int]]]:
    """
    Per 0-based line, the (start, end) character spans covered by diagnostics.
    Multi-line ranges are split; columns are clamped to the line length.
    """
    spans: Dict[int, List[Tuple[int, int]]] = {}
    for diag in diagnostics:
        start, end = diag.range.start, diag.range.end
        for line in range(start.line, end.line + 1):
            if line < 0 or line >= len(line_lengths):
                continue
            length = line_lengths[line]
            first = start.character if line == start.line else 0
            last = end.character if line == end.line else length
            first, last = min(first, length), min(last, length)
            if last <= first:
                # Zero-width or past end of line: mark one cell so it stays visible
                first, last = max(0, min(first, length - 1)), min(first + 1, length)
            if last > first:
                spans.setdefault(line, []).append((first, last))
    return spans


def highlight_source(source_lines: List[str], diagnostics: List[Diagnostic]) -> Text:
    """
    Source listing with a line-number gutter. Lines with diagnostics get
    a red marker and the diagnostic ranges are underlined.
    """
    spans = _line_spans(diagnostics, [len(line) for line in source_lines])
    width = len(str(len(source_lines))) if source_lines else 1

    text = Text()
    for idx, line in enumerate(source_lines):
        line_spans = spans.get(idx)
        if line_spans:
            text.append(f"✖ {idx + 1:>{width}} │ ", style=GUTTER_ERROR)
        else:
            text.append(f"  {idx + 1:>{width}} │ ", style=GUTTER_PLAIN)

        segment = Text(line)
        for first, last in line_spans or []:
            segment.stylize(ERROR_STYLE, first, last)
        text.append_text(segment)
        if idx < len(source_lines) - 1:
            text.append("\n")
    return text


def format_diagnostic(file: str, diag: Diagnostic) -> str:
    """'file:line:col: error: message', 1-based like compiler output."""
    start = diag.range.start
    return f"{file}:{start.line + 1}:{start.character + 1}: {diag.severity.value}: {diag.message}"


def diagnostic_context(source_lines: List[str], diag: Optional[Diagnostic]) -> Text:
    """Three-line source excerpt around a diagnostic, for the peek panel."""
    if diag is None:
        t = Text()
        t.append("OK ", style="bold green")
        t.append("│ ", style="dim")
        t.append("(no diagnostics for this file)", style="dim italic")
        return t

    line_idx = diag.range.start.line
    context = Text()
    context.append(diag.message, style="bold red")
    context.append("\n")

    for idx in (line_idx - 1, line_idx, line_idx + 1):
        if idx < 0 or idx >= len(source_lines):
            continue
        if idx == line_idx:
            context.append(f"► {idx + 1:>4} │ ", style="bold yellow")
            segment = Text(source_lines[idx], style="bold")
            for first, last in _line_spans([diag], [len(l) for l in source_lines]).get(idx, []):
                segment.stylize(ERROR_STYLE, first, last)
            context.append_text(segment)
        else:
            context.append(f"  {idx + 1:>4} │ ", style="dim")
            context.append(source_lines[idx], style="dim")
        context.append("\n")
    context.rstrip()
    return context
