import re
from dataclasses import dataclass
from typing import Optional

# (leading whitespace)(path up to the first colon):
RE_STACK_FRAME = re.compile(r"^(\s*)([^\s:][^:]*?):")


@dataclass(frozen=True)
class StackFrameMatch:
    full_match: str
    file_with_leading_whitespace: str
    file: str


def match_stack_frame(line: str) -> Optional[StackFrameMatch]:
    """
    Split a trace line like '\tfoo.jsonnet:3:5-9\tobject <anonymous>'
    into its file prefix and the rest. The file is returned exactly as
    the compiler printed it.
    Returns None when the line has no colon-terminated path prefix.
    """
    match = RE_STACK_FRAME.match(line)
    if match is None:
        return None
    leading, path = match.group(1), match.group(2)
    return StackFrameMatch(
        full_match=match.group(0),
        file_with_leading_whitespace=leading + path,
        file=path,
    )
