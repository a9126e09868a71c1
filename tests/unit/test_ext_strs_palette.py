"""Tests for the ext-str palette helpers and popup."""
from __future__ import annotations

import pytest
from textual.app import App, ComposeResult
from textual.widgets import Input

from jsonnetpeek.ui.ext_strs_palette import ExtStrsPopup, format_ext_strs, parse_ext_strs


class TestParseExtStrs:

    def test_pairs(self):
        assert parse_ext_strs("env=prod region=eu") == {"env": "prod", "region": "eu"}

    def test_empty_value_allowed(self):
        assert parse_ext_strs("env=") == {"env": ""}

    def test_value_keeps_extra_equals(self):
        assert parse_ext_strs("q=a=b") == {"q": "a=b"}

    @pytest.mark.parametrize("text", ["", "   ", "noequals", "=value"])
    def test_ignored_entries(self, text):
        assert parse_ext_strs(text) == {}

    def test_last_wins(self):
        assert parse_ext_strs("env=dev env=prod") == {"env": "prod"}


class TestFormatExtStrs:

    def test_format(self):
        assert format_ext_strs({"env": "prod", "region": "eu"}) == "env=prod region=eu"

    def test_empty(self):
        assert format_ext_strs({}) == ""


class _PopupApp(App):
    def __init__(self):
        super().__init__()
        self.received = []

    def compose(self) -> ComposeResult:
        yield ExtStrsPopup(id="ext-strs-palette")

    def on_ext_strs_popup_ext_strs_changed(self, message: ExtStrsPopup.ExtStrsChanged) -> None:
        self.received.append(message.ext_strs)


class TestExtStrsPopup:

    @pytest.mark.asyncio
    async def test_hidden_by_default(self):
        async with _PopupApp().run_test() as pilot:
            popup = pilot.app.query_one(ExtStrsPopup)
            assert popup.display is False

    @pytest.mark.asyncio
    async def test_show_prefills_current_values(self):
        async with _PopupApp().run_test() as pilot:
            popup = pilot.app.query_one(ExtStrsPopup)
            popup.show({"env": "prod"})
            await pilot.pause()
            assert popup.display is True
            assert pilot.app.query_one("#ext-strs-input", Input).value == "env=prod"

    @pytest.mark.asyncio
    async def test_submit_posts_message_and_hides(self):
        async with _PopupApp().run_test() as pilot:
            popup = pilot.app.query_one(ExtStrsPopup)
            popup.show({})
            await pilot.pause()
            pilot.app.query_one("#ext-strs-input", Input).value = "env=dev cluster=eu-1"
            await pilot.press("enter")
            await pilot.pause()
            assert pilot.app.received == [{"env": "dev", "cluster": "eu-1"}]
            assert popup.display is False
