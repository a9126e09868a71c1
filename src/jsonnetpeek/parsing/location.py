"""
Positional notation emitted by the jsonnet compiler.

jsonnet prints source ranges in a few shapes:

    foo.jsonnet:3:5            single position
    foo.jsonnet:3:5-9          range on one line
    foo.jsonnet:(3:5)-(4:2)    range over several lines
    foo.jsonnet:3:5-4:2        same, without the parentheses

The file part is split off by the stack-frame tokenizer; this module only
decodes what follows it.
"""
import re
from dataclasses import dataclass
from typing import Optional

# Markers on the first line of a compiler error report
STATIC_ERROR_PREFIX = "STATIC ERROR: "
RUNTIME_ERROR_PREFIX = "RUNTIME ERROR: "

# Phase annotation printed inside runtime traces; it is not a frame
MANIFESTATION_MARKER = "During manifestation"

# Each form must end at end-of-text, whitespace or ':'
_END = r"(?=$|[\s:])"
RE_PAREN_RANGE = re.compile(r"\((\d+):(\d+)\)-\((\d+):(\d+)\)" + _END)
RE_MULTILINE_RANGE = re.compile(r"(\d+):(\d+)-(\d+):(\d+)" + _END)
RE_LINE_RANGE = re.compile(r"(\d+):(\d+)-(\d+)" + _END)
RE_POSITION = re.compile(r"(\d+):(\d+)" + _END)


@dataclass(frozen=True, order=True)
class Location:
    line: int
    column: int


@dataclass(frozen=True)
class LocationRange:
    """A 1-based range as printed by the compiler."""
    begin: Location
    end: Location

    def to_range(self) -> "Range":
        """
        Project onto the 0-based convention used by editors.
        The end column is not decremented: the compiler's end column is
        already one past the last character once shifted to 0-based.
        """
        return Range(
            start=Position(self.begin.line - 1, self.begin.column - 1),
            end=Position(self.end.line - 1, self.end.column),
        )


@dataclass(frozen=True, order=True)
class Position:
    line: int
    character: int


@dataclass(frozen=True)
class Range:
    start: Position
    end: Position


def parse_location_range(token: str) -> Optional[LocationRange]:
    """
    Decode a positional token such as '3:5-9' or '(3:5)-(4:2)'.
    Text after the token (usually the message) is ignored.
    Returns None for anything that does not decode to a valid range.
    """
    if not token:
        return None

    text = token.lstrip()
    if text.startswith(":"):
        text = text[1:].lstrip()

    begin_line = begin_col = end_line = end_col = None

    match = RE_PAREN_RANGE.match(text) or RE_MULTILINE_RANGE.match(text)
    if match:
        begin_line, begin_col, end_line, end_col = (int(g) for g in match.groups())
    else:
        match = RE_LINE_RANGE.match(text)
        if match:
            begin_line, begin_col, end_col = (int(g) for g in match.groups())
            end_line = begin_line
        else:
            match = RE_POSITION.match(text)
            if not match:
                return None
            begin_line, begin_col = (int(g) for g in match.groups())
            end_line, end_col = begin_line, begin_col

    if min(begin_line, begin_col, end_line, end_col) < 1:
        return None

    begin = Location(begin_line, begin_col)
    end = Location(end_line, end_col)
    if end < begin:
        return None
    return LocationRange(begin=begin, end=end)


def location_token_length(token: str) -> int:
    """
    Number of characters of `token` consumed by its leading positional
    token (including a leading ':' and whitespace), or 0 if none.
    """
    text = token.lstrip()
    offset = len(token) - len(text)
    if text.startswith(":"):
        stripped = text[1:].lstrip()
        offset += len(text) - len(stripped)
        text = stripped

    for pattern in (RE_PAREN_RANGE, RE_MULTILINE_RANGE, RE_LINE_RANGE, RE_POSITION):
        match = pattern.match(text)
        if match:
            return offset + match.end()
    return 0
