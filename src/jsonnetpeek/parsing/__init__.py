from .location import (
    STATIC_ERROR_PREFIX,
    RUNTIME_ERROR_PREFIX,
    MANIFESTATION_MARKER,
    Location,
    LocationRange,
    Position,
    Range,
    parse_location_range,
)
from .frames import StackFrameMatch, match_stack_frame
from .diagnostics import (
    Diagnostic,
    DiagnosticSet,
    RuntimeReport,
    Severity,
    SourceError,
    StaticReport,
    UnrecognizedReport,
    classify_report,
    count_diagnostics,
    extract_diagnostics,
)
