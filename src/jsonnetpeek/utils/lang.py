"""
Source-kind detection: decides which files can be previewed and which
syntax the preview pane should use.
"""
from pathlib import Path
from enum import Enum


class SourceKind(str, Enum):
    JSONNET = "jsonnet"
    LIBSONNET = "libsonnet"
    UNKNOWN = "unknown"


# Extensions that map to each kind
_EXT_MAP = {
    ".jsonnet": SourceKind.JSONNET,
    ".libsonnet": SourceKind.LIBSONNET,
    ".json": SourceKind.JSONNET,
}

SUPPORTED_EXTENSIONS = set(_EXT_MAP.keys())


def detect_kind(file_path: str) -> SourceKind:
    """Detect source kind from file extension."""
    ext = Path(file_path).suffix
    return _EXT_MAP.get(ext, SourceKind.UNKNOWN)


def is_supported(file_path: str) -> bool:
    """Return True if the file extension is supported."""
    return Path(file_path).suffix in SUPPORTED_EXTENSIONS


def source_label(kind: SourceKind) -> str:
    """Return a human-readable label for the source kind (used in UI)."""
    if kind == SourceKind.LIBSONNET:
        return "LIBSONNET SOURCE"
    return "JSONNET SOURCE"


def preview_language(output_format: str, failed: bool) -> str:
    """Syntax for the preview pane; failures are shown as plain text."""
    if failed:
        return "text"
    return "yaml" if output_format == "yaml" else "json"
