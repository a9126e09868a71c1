"""
Preview rendering and the single-slot preview cache.

Only the document that currently has focus gets a cached preview.
Rendering another document replaces the entry; there is no per-document
history. Callers on a threaded host must keep at most one render in
flight, since the slot is last-write-wins.
"""
from __future__ import annotations

import json
import re
from dataclasses import dataclass
from typing import Optional, Union

import yaml

OUTPUT_FORMATS = ("json", "yaml")

# kubecfg and `jsonnet -y` separate documents with a line of '---'
DOCUMENT_SEPARATOR = "---"
RE_SEPARATOR_LINE = re.compile(r"^---[ \t]*$", re.MULTILINE)
# `jsonnet -y` closes the stream with a line of "..."
RE_END_OF_STREAM = re.compile(r"^\.\.\.[ \t]*$", re.MULTILINE)


class MalformedPayloadError(ValueError):
    """The renderer exited cleanly but its output is not JSON."""


@dataclass(frozen=True)
class Document:
    path: str
    text: Optional[str] = None


@dataclass(frozen=True)
class Rendered:
    text: str


@dataclass(frozen=True)
class RenderFailure:
    message: str


PreviewPayload = Union[Rendered, RenderFailure]


def is_failure(payload: Optional[PreviewPayload]) -> bool:
    return isinstance(payload, RenderFailure)


class PreviewCache:
    """Holds the last render result for the active document."""

    def __init__(self):
        self.source: Optional[str] = None
        self.payload: Optional[PreviewPayload] = None

    def store(self, source: str, payload: PreviewPayload):
        self.source = source
        self.payload = payload

    def get(self, source: Optional[str] = None) -> Optional[PreviewPayload]:
        """The cached payload; None if empty or cached for another source."""
        if source is not None and source != self.source:
            return None
        return self.payload

    def clear(self):
        self.source = None
        self.payload = None


class Previewer:
    """Renders documents through a driver and records the result in a cache."""

    def __init__(self, driver, cache: Optional[PreviewCache] = None):
        self.driver = driver
        self.cache = cache if cache is not None else PreviewCache()

    def render(self, document: Document) -> PreviewPayload:
        output, error = self.driver.render(document.path)
        payload: PreviewPayload = RenderFailure(error) if error else Rendered(output)
        self.cache.store(document.path, payload)
        return payload

    def reformat(self, fmt: str, source: Optional[str] = None) -> Optional[str]:
        """reformat() applied to the cached payload, if there is one."""
        payload = self.cache.get(source)
        if payload is None:
            return None
        return reformat(payload, fmt)


def join_documents(raw: str) -> str:
    """
    Rewrite a '---' separated stream into a JSON array:
    '---\\n{"a":1}\\n---\\n{"b":2}' -> '[{"a":1},{"b":2}]'
    A "..." end-of-stream line and anything after it are dropped.
    """
    end = RE_END_OF_STREAM.search(raw)
    if end:
        raw = raw[:end.start()]
    parts = [part.strip() for part in RE_SEPARATOR_LINE.split(raw)]
    return "[" + ",".join(part for part in parts if part) + "]"


def reformat(payload: PreviewPayload, fmt: str) -> str:
    """
    Re-serialize a rendered payload as 'json' or 'yaml'.
    A failure payload is returned as its message, unchanged.
    """
    if isinstance(payload, RenderFailure):
        return payload.message
    if fmt not in OUTPUT_FORMATS:
        raise ValueError(f"Unsupported output format '{fmt}'. Use one of: {', '.join(OUTPUT_FORMATS)}")

    raw = payload.text
    if raw.startswith(DOCUMENT_SEPARATOR):
        raw = join_documents(raw)

    try:
        data = json.loads(raw)
    except json.JSONDecodeError as e:
        raise MalformedPayloadError(f"Renderer output is not valid JSON: {e}") from e

    if fmt == "yaml":
        return yaml.safe_dump(data, default_flow_style=False, sort_keys=False, allow_unicode=True)
    return json.dumps(data, indent=2, ensure_ascii=False)
