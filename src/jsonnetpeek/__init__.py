"""Live Jsonnet preview with inline diagnostics."""

__version__ = "0.1.0"

from .parsing import extract_diagnostics, parse_location_range, match_stack_frame
from .preview import Document, PreviewCache, Previewer, Rendered, RenderFailure, reformat
