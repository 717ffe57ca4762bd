"""Tests for host side effects and key naming."""

import subprocess

from textual import events

from kvlens.tui import platform
from kvlens.tui.app import key_name


class TestClipboard:
    """Test clipboard tool selection and failures."""

    def test_no_tool(self, monkeypatch):
        monkeypatch.setattr(platform.shutil, "which", lambda name: None)
        assert platform.copy_to_clipboard("x") == "no clipboard tool found"

    def test_wayland_preferred(self, monkeypatch):
        monkeypatch.setattr(platform.sys, "platform", "linux")
        monkeypatch.setenv("WAYLAND_DISPLAY", "wayland-0")
        monkeypatch.setattr(platform.shutil, "which", lambda name: f"/usr/bin/{name}")
        assert platform.clipboard_command() == ["wl-copy"]

    def test_xclip_fallback(self, monkeypatch):
        monkeypatch.setattr(platform.sys, "platform", "linux")
        monkeypatch.delenv("WAYLAND_DISPLAY", raising=False)
        monkeypatch.setattr(platform.shutil, "which", lambda name: "/usr/bin/xsel" if name == "xsel" else None)
        assert platform.clipboard_command() == ["xsel", "--clipboard", "--input"]

    def test_copy_runs_tool(self, monkeypatch):
        calls = []
        monkeypatch.setattr(platform, "clipboard_command", lambda: ["pbcopy"])
        monkeypatch.setattr(platform.subprocess, "run", lambda *a, **kw: calls.append((a, kw)))
        assert platform.copy_to_clipboard("deploy-42") is None
        assert calls[0][0] == (["pbcopy"],)
        assert calls[0][1]["input"] == b"deploy-42"

    def test_copy_failure(self, monkeypatch):
        def fail(*args, **kwargs):
            raise subprocess.CalledProcessError(1, "pbcopy")

        monkeypatch.setattr(platform, "clipboard_command", lambda: ["pbcopy"])
        monkeypatch.setattr(platform.subprocess, "run", fail)
        assert platform.copy_to_clipboard("x") == "pbcopy failed"


class TestOpenUrl:
    """Test opening URLs."""

    def test_opened(self, monkeypatch):
        monkeypatch.setattr(platform.webbrowser, "open", lambda url: True)
        assert platform.open_url("https://example.com") is None

    def test_no_browser(self, monkeypatch):
        monkeypatch.setattr(platform.webbrowser, "open", lambda url: False)
        assert platform.open_url("https://example.com") == "no browser available"


class TestKeyName:
    """Test translating textual key events into view key names."""

    def test_escape(self):
        assert key_name(events.Key("escape", None)) == "esc"

    def test_printable(self):
        assert key_name(events.Key("G", "G")) == "G"
        assert key_name(events.Key("question_mark", "?")) == "?"

    def test_named(self):
        assert key_name(events.Key("ctrl+c", None)) == "ctrl+c"
        assert key_name(events.Key("f10", None)) == "f10"
