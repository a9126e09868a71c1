import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, List, Tuple, Union

from .frames import match_stack_frame
from .location import (
    MANIFESTATION_MARKER,
    RUNTIME_ERROR_PREFIX,
    STATIC_ERROR_PREFIX,
    Range,
    location_token_length,
    parse_location_range,
)

logger = logging.getLogger(__name__)


class Severity(str, Enum):
    ERROR = "error"


@dataclass(frozen=True)
class Diagnostic:
    range: Range
    message: str
    severity: Severity = Severity.ERROR


# file path (as printed by the compiler) -> diagnostics in encounter order
DiagnosticSet = Dict[str, List[Diagnostic]]


@dataclass(frozen=True)
class StaticReport:
    """A single located failure, e.g. a syntax error. No trace."""
    message: str


@dataclass(frozen=True)
class RuntimeReport:
    """An evaluation failure followed by the raw stack-trace lines."""
    message: str
    frames: Tuple[str, ...] = field(default_factory=tuple)


@dataclass(frozen=True)
class UnrecognizedReport:
    """A report whose classification line matches neither marker."""
    line: str = ""


SourceError = Union[StaticReport, RuntimeReport]


def classify_report(report: str) -> Union[SourceError, UnrecognizedReport]:
    """
    The first line of a report is the command banner and is dropped;
    the second decides what kind of error this is.
    """
    lines = report.splitlines()
    if len(lines) < 2:
        return UnrecognizedReport()

    error_line = lines[1]
    if error_line.startswith(STATIC_ERROR_PREFIX):
        return StaticReport(message=error_line[len(STATIC_ERROR_PREFIX):])
    if error_line.startswith(RUNTIME_ERROR_PREFIX):
        return RuntimeReport(
            message=error_line[len(RUNTIME_ERROR_PREFIX):],
            frames=tuple(lines[2:]),
        )
    return UnrecognizedReport(line=error_line)


def extract_diagnostics(report: str) -> DiagnosticSet:
    """
    Turn the text of a failed render into diagnostics grouped by file.

    Every step degrades to "skip": a line that cannot be located is logged
    and ignored, so one odd frame never hides the frames that did parse.
    """
    error = classify_report(report)
    if isinstance(error, StaticReport):
        return _static_diagnostics(error)
    if isinstance(error, RuntimeReport):
        return _runtime_diagnostics(error)
    logger.debug("Unrecognized jsonnet error report: %r", error.line)
    return {}


def _static_diagnostics(error: StaticReport) -> DiagnosticSet:
    match = match_stack_frame(error.message)
    if match is None:
        logger.warning("Could not parse filename from jsonnet error: %r", error.message)
        return {}

    loc_and_message = error.message[len(match.full_match):]
    location = parse_location_range(loc_and_message)
    if location is None:
        logger.warning("Could not parse location range from jsonnet error: %r", error.message)
        return {}

    # '3:5-9: Expected token' -> 'Expected token'
    message = loc_and_message[location_token_length(loc_and_message):].lstrip(": \t")
    diagnostic = Diagnostic(
        range=location.to_range(),
        message=message or loc_and_message.strip(),
    )
    return {match.file: [diagnostic]}


def _runtime_diagnostics(error: RuntimeReport) -> DiagnosticSet:
    diagnostics: DiagnosticSet = {}

    for line in error.frames:
        # Lines we know are not stack frames
        trimmed = line.strip()
        if trimmed == "" or trimmed.startswith(MANIFESTATION_MARKER):
            continue

        match = match_stack_frame(line)
        if match is None:
            logger.warning("Could not parse filename from jsonnet stack frame: %r", line)
            continue

        location = parse_location_range(line[len(match.file_with_leading_whitespace):])
        if location is None:
            logger.warning("Could not parse location range from jsonnet stack frame: %r", line)
            continue

        diagnostics.setdefault(match.file, []).append(
            Diagnostic(range=location.to_range(), message=error.message)
        )

    return diagnostics


def count_diagnostics(diagnostics: DiagnosticSet) -> int:
    return sum(len(items) for items in diagnostics.values())
