from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, List, Optional
from ..parsing.diagnostics import Diagnostic, DiagnosticSet, Severity, count_diagnostics

@dataclass
class PreviewState:
    """
    The single source of truth for the application's data.
    """
    source_path: str = ""
    source_code: str = ""
    source_lines: List[str] = field(default_factory=list)

    # Preview Data
    preview_text: str = ""
    output_format: str = "json"
    render_failed: bool = False

    # Compiler Metadata & Errors
    compiler_output: str = ""
    ext_strs: Dict[str, str] = field(default_factory=dict)
    diagnostics: DiagnosticSet = field(default_factory=dict)
    last_update: float = 0.0

    @property
    def has_errors(self) -> bool:
        """Returns True if the last render failed or produced error diagnostics."""
        if self.render_failed:
            return True
        return any(
            d.severity == Severity.ERROR
            for items in self.diagnostics.values()
            for d in items
        )

    @property
    def error_count(self) -> int:
        return count_diagnostics(self.diagnostics)

    def diagnostics_for(self, path: Optional[str] = None) -> List[Diagnostic]:
        """
        Diagnostics reported against `path` (default: the source file).
        Compiler paths may be relative to the working directory, so both
        sides are resolved before comparing.
        """
        target = Path(path or self.source_path).resolve()
        found: List[Diagnostic] = []
        for file, items in self.diagnostics.items():
            if Path(file).resolve() == target:
                found.extend(items)
        return found

    def get_source_line(self, line_idx: int) -> Optional[str]:
        """0-based line lookup, as used by diagnostic ranges."""
        if 0 <= line_idx < len(self.source_lines):
            return self.source_lines[line_idx]
        return None

    def update_source(self, code: str):
        self.source_code = code
        self.source_lines = code.splitlines()

    def update_preview(self, text: str, failed: bool):
        self.preview_text = text
        self.render_failed = failed
