"""
Tests for the PreviewState dataclass.
Ensures error flags and per-file diagnostic lookups behave for both
successful and failed renders.
"""
import pytest
from jsonnetpeek.utils.state import PreviewState
from jsonnetpeek.parsing.diagnostics import Diagnostic
from jsonnetpeek.parsing.location import Position, Range


def _diag(line: int, message: str = "boom") -> Diagnostic:
    return Diagnostic(range=Range(Position(line, 0), Position(line, 1)), message=message)


class TestPreviewStateDefaults:

    def test_default_fields(self):
        state = PreviewState()
        assert state.source_path == ""
        assert state.source_lines == []
        assert state.preview_text == ""
        assert state.output_format == "json"
        assert state.render_failed is False
        assert state.ext_strs == {}
        assert state.diagnostics == {}

    def test_no_errors_by_default(self):
        state = PreviewState()
        assert state.has_errors is False
        assert state.error_count == 0


class TestPreviewStateErrors:

    def test_failed_render_is_error(self):
        state = PreviewState()
        state.update_preview("Command failed: jsonnet x\nboom", failed=True)
        assert state.has_errors is True
        assert state.error_count == 0

    def test_diagnostics_are_errors(self):
        state = PreviewState(diagnostics={"a.jsonnet": [_diag(0), _diag(2)], "b.jsonnet": [_diag(1)]})
        assert state.has_errors is True
        assert state.error_count == 3


class TestDiagnosticsFor:

    def test_defaults_to_source_file(self, tmp_path):
        source = tmp_path / "main.jsonnet"
        state = PreviewState(
            source_path=str(source),
            diagnostics={str(source): [_diag(0)], str(tmp_path / "lib.libsonnet"): [_diag(4)]},
        )
        assert state.diagnostics_for() == [_diag(0)]

    def test_relative_paths_resolved(self, tmp_path, monkeypatch):
        monkeypatch.chdir(tmp_path)
        state = PreviewState(
            source_path=str(tmp_path / "main.jsonnet"),
            diagnostics={"main.jsonnet": [_diag(3)]},
        )
        assert state.diagnostics_for() == [_diag(3)]

    def test_other_file(self, tmp_path):
        lib = str(tmp_path / "lib.libsonnet")
        state = PreviewState(source_path=str(tmp_path / "main.jsonnet"), diagnostics={lib: [_diag(4)]})
        assert state.diagnostics_for() == []
        assert state.diagnostics_for(lib) == [_diag(4)]


class TestSourceLines:

    def test_update_source_splits_lines(self):
        state = PreviewState()
        state.update_source("{\n  a: 1,\n}\n")
        assert state.source_lines == ["{", "  a: 1,", "}"]

    def test_get_source_line_is_zero_based(self):
        state = PreviewState()
        state.update_source("first\nsecond")
        assert state.get_source_line(0) == "first"
        assert state.get_source_line(1) == "second"

    @pytest.mark.parametrize("idx", [-1, 2, 100])
    def test_out_of_range(self, idx):
        state = PreviewState()
        state.update_source("first\nsecond")
        assert state.get_source_line(idx) is None
