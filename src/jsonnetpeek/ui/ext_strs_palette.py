from typing import Dict

from textual.widgets import Static, Input
from textual.message import Message


def parse_ext_strs(text: str) -> Dict[str, str]:
    """'env=prod region=eu' -> {'env': 'prod', 'region': 'eu'}; entries without '=' are ignored."""
    result: Dict[str, str] = {}
    for item in text.split():
        key, sep, value = item.partition("=")
        if sep and key:
            result[key] = value
    return result


def format_ext_strs(ext_strs: Dict[str, str]) -> str:
    return " ".join(f"{k}={v}" for k, v in ext_strs.items())


class ExtStrsPopup(Static):
    """A centered command palette for entering --ext-str variables."""

    DEFAULT_CSS = """
    ExtStrsPopup {
        display: none;
        width: 60;
        height: auto;
        background: #EBEEEE;
        border: solid #45d3ee;
        padding: 1 2;
        align: center middle;
    }

    ExtStrsPopup .title {
        color: #191A1A;
        text-style: bold;
        margin-bottom: 1;
    }

    ExtStrsPopup Input {
        background: #FFFFFF;
        color: #191A1A;
        border: solid #94bfc1;
    }
    """

    class ExtStrsChanged(Message):
        def __init__(self, ext_strs: Dict[str, str]) -> None:
            super().__init__()
            self.ext_strs = ext_strs

    def compose(self):
        yield Static("External Variables (--ext-str)", classes="title")
        yield Input(placeholder="env=prod cluster=eu-1 ...", id="ext-strs-input")

    def on_input_submitted(self, event: Input.Submitted):
        self.post_message(self.ExtStrsChanged(parse_ext_strs(event.value)))
        self.display = False

    def on_key(self, event):
        if event.key == "escape":
            self.display = False

    def show(self, current: Dict[str, str]):
        self.display = True
        input_widget = self.query_one("#ext-strs-input", Input)
        input_widget.value = format_ext_strs(current)
        input_widget.focus()
