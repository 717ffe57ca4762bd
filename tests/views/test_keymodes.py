"""Tests for key modes and logical actions."""

import pytest

from kvlens.exceptions import InvalidConfigError
from kvlens.views import Action, KeyMode, parse_key_mode, resolve_action
from kvlens.views.keymodes import format_key, quit_key, quit_key_label


class TestResolveAction:
    """Test key to action mapping."""

    @pytest.mark.parametrize(
        "key,action",
        [("j", Action.DOWN), ("k", Action.UP), ("G", Action.BOTTOM), ("/", Action.SEARCH), ("q", Action.QUIT)],
    )
    def test_vim(self, key, action):
        assert resolve_action(key, KeyMode.VIM) is action

    def test_emacs(self):
        assert resolve_action("ctrl+n", KeyMode.EMACS) is Action.DOWN
        assert resolve_action("j", KeyMode.EMACS) is Action.NONE

    def test_function(self):
        assert resolve_action("f10", KeyMode.FUNCTION) is Action.QUIT
        assert resolve_action("q", KeyMode.FUNCTION) is Action.NONE

    @pytest.mark.parametrize("mode", list(KeyMode))
    def test_universal_keys(self, mode):
        assert resolve_action("down", mode) is Action.DOWN
        assert resolve_action("home", mode) is Action.TOP
        assert resolve_action("ctrl+c", mode) is Action.QUIT
        assert resolve_action("f1", mode) is Action.HELP


class TestKeyModeHelpers:
    """Test parsing and labels."""

    def test_parse(self):
        assert parse_key_mode("Emacs") is KeyMode.EMACS
        assert parse_key_mode(KeyMode.VIM) is KeyMode.VIM

    def test_parse_invalid(self):
        with pytest.raises(InvalidConfigError):
            parse_key_mode("nano")

    def test_quit_keys(self):
        assert quit_key(KeyMode.VIM) == "q"
        assert quit_key_label(KeyMode.EMACS) == "C-q"
        assert quit_key_label(KeyMode.FUNCTION) == "F10"

    def test_format_key(self):
        assert format_key("alt+<", KeyMode.EMACS) == "M-<"
        assert format_key("", KeyMode.VIM) == ""
