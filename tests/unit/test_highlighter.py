"""Unit tests for the rich renderables behind the source and preview panes."""
import pytest
from rich.syntax import Syntax
from rich.text import Text
from jsonnetpeek.parsing.diagnostics import Diagnostic
from jsonnetpeek.parsing.location import Position, Range
from jsonnetpeek.utils.highlighter import (
    ERROR_STYLE,
    _line_spans,
    diagnostic_context,
    format_diagnostic,
    highlight_preview,
    highlight_source,
)


def _diag(l1, c1, l2, c2, message="boom"):
    return Diagnostic(range=Range(Position(l1, c1), Position(l2, c2)), message=message)


class TestHighlightPreview:

    def test_success_is_syntax(self):
        assert isinstance(highlight_preview('{"a": 1}', "json"), Syntax)

    def test_failure_is_plain_red_text(self):
        result = highlight_preview("Command failed\nboom", "json", failed=True)
        assert isinstance(result, Text)
        assert result.plain == "Command failed\nboom"


class TestLineSpans:

    def test_single_line(self):
        assert _line_spans([_diag(0, 2, 0, 5)], [10]) == {0: [(2, 5)]}

    def test_multi_line_split(self):
        spans = _line_spans([_diag(0, 4, 2, 3)], [6, 8, 10])
        assert spans == {0: [(4, 6)], 1: [(0, 8)], 2: [(0, 3)]}

    def test_clamped_to_line_length(self):
        assert _line_spans([_diag(0, 2, 0, 50)], [4]) == {0: [(2, 4)]}

    def test_zero_width_marks_one_cell(self):
        assert _line_spans([_diag(1, 3, 1, 3)], [0, 10]) == {1: [(3, 4)]}

    def test_out_of_bounds_line_ignored(self):
        assert _line_spans([_diag(5, 0, 5, 2)], [3, 3]) == {}

    def test_empty_line_has_no_span(self):
        assert _line_spans([_diag(0, 0, 0, 0)], [0]) == {}


class TestHighlightSource:

    def test_marks_error_lines(self):
        text = highlight_source(["{", "  a: b,", "}"], [_diag(1, 5, 1, 6)])
        lines = text.plain.splitlines()
        assert lines[0].startswith("  1 │ ")
        assert lines[1].startswith("✖ 2 │ ")
        assert lines[1].endswith("a: b,")

    def test_error_range_styled(self):
        text = highlight_source(["abcdef"], [_diag(0, 1, 0, 3)])
        offset = len("✖ 1 │ ")
        styled = [
            (span.start, span.end) for span in text.spans if str(span.style) == ERROR_STYLE
        ]
        assert styled == [(offset + 1, offset + 3)]

    def test_no_diagnostics(self):
        text = highlight_source(["a", "b"], [])
        assert "✖" not in text.plain

    def test_empty_source(self):
        assert highlight_source([], []).plain == ""


class TestFormatDiagnostic:

    def test_one_based(self):
        assert format_diagnostic("main.jsonnet", _diag(2, 4, 2, 9, "bad")) == "main.jsonnet:3:5: error: bad"


class TestDiagnosticContext:

    def test_none(self):
        assert "no diagnostics" in diagnostic_context(["a"], None).plain

    def test_excerpt_around_line(self):
        lines = ["one", "two", "three", "four"]
        text = diagnostic_context(lines, _diag(1, 0, 1, 3, "bad two")).plain
        assert text.splitlines()[0] == "bad two"
        assert "►    2 │ two" in text
        assert "   1 │ one" in text
        assert "   3 │ three" in text
        assert "four" not in text

    def test_first_line(self):
        text = diagnostic_context(["only"], _diag(0, 0, 0, 4)).plain
        assert text.splitlines() == ["boom", "►    1 │ only"]
