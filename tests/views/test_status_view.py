"""Tests for the status screen state machine."""

import pytest

from kvlens.views import (
    ActionResult,
    Batch,
    CompletionChannel,
    CopyToClipboard,
    DoneTimer,
    FlashClear,
    KeyMode,
    KeyPress,
    OpenUrl,
    PollCompletion,
    Quit,
    Schedule,
    SpinnerTick,
    StatusDone,
    StatusPhase,
    StatusTimeout,
    StatusView,
)
from kvlens.views.commands import flatten
from kvlens.views.schema import schema_from_dict


def make_config(**status):
    base = {
        "titleField": "title",
        "messageField": "messages",
        "waitMessage": "Waiting for deployment...",
        "displayFields": [{"label": "URL", "field": "url"}],
        "actions": [
            {
                "label": "copy id",
                "type": "copy-value",
                "field": "id",
                "keys": {"vim": "y", "emacs": "ctrl+y", "function": "f5"},
            },
            {
                "label": "open",
                "type": "open-url",
                "field": "url",
                "keys": {"vim": "o", "emacs": "ctrl+o", "function": "f6"},
            },
        ],
    }
    base.update(status)
    return schema_from_dict({"displaySchema": "v1", "status": base}).status


@pytest.fixture
def data():
    return {
        "title": "Deploying web",
        "messages": ["Uploading", "Checking health"],
        "id": "deploy-42",
        "url": "https://example.com/d/42",
    }


@pytest.fixture
def channel():
    return CompletionChannel()


def make_view(data, channel=None, key_mode=KeyMode.VIM, **status):
    return StatusView(make_config(**status), data, key_mode=key_mode, channel=channel)


class TestInit:
    """Test the startup command."""

    def test_spinner_poll_and_timeout(self, data, channel):
        view = make_view(data, channel, timeout="30s")
        command = view.init()
        assert isinstance(command, Batch)
        tick, poll, timeout = flatten(command)
        assert tick == Schedule(pytest.approx(view.tick_interval), SpinnerTick())
        assert poll == PollCompletion(channel)
        assert timeout == Schedule(30.0, StatusTimeout())

    def test_spinner_only(self, data):
        command = make_view(data).init()
        assert isinstance(command, Schedule)
        assert command.message == SpinnerTick()

    def test_non_positive_timeout_is_ignored(self, data, channel):
        view = make_view(data, channel, timeout="0s")
        assert view.deadline is None
        assert len(flatten(view.init())) == 2


class TestCompletion:
    """Test the waiting to success/error transitions."""

    def test_success_with_message(self, data, channel):
        view = make_view(data, channel)
        view, command = view.update(StatusDone(message="Deployment is live"))
        assert view.phase is StatusPhase.SUCCESS
        assert view.result_message == "Deployment is live"
        assert command == Schedule(2.0, DoneTimer())

    def test_success_falls_back_to_configured_message(self, data, channel):
        view = make_view(data, channel, successMessage="Deployed")
        view, _ = view.update(StatusDone())
        assert view.result_message == "Deployed"

    def test_success_default_message(self, data, channel):
        view = make_view(data, channel)
        view, _ = view.update(StatusDone())
        assert view.result_message == "Done"

    def test_error(self, data, channel):
        view = make_view(data, channel)
        view, _ = view.update(StatusDone(error="health checks failed"))
        assert view.phase is StatusPhase.ERROR
        assert view.result_message == "health checks failed"

    def test_completion_only_once(self, data, channel):
        view = make_view(data, channel)
        view, _ = view.update(StatusDone(message="first"))
        view, command = view.update(StatusDone(error="second"))
        assert command is None
        assert view.phase is StatusPhase.SUCCESS
        assert view.result_message == "first"

    def test_timeout_succeeds(self, data, channel):
        view = make_view(data, channel, timeout="5s", successMessage="Timed out fine")
        view, command = view.update(StatusTimeout())
        assert view.phase is StatusPhase.SUCCESS
        assert view.result_message == "Timed out fine"
        assert command == Schedule(2.0, DoneTimer())

    def test_timeout_after_completion_is_ignored(self, data, channel):
        view = make_view(data, channel, timeout="5s")
        view, _ = view.update(StatusDone(error="boom"))
        view, command = view.update(StatusTimeout())
        assert command is None
        assert view.phase is StatusPhase.ERROR

    def test_configured_done_delay(self, data, channel):
        view = make_view(data, channel, doneDelay="500ms")
        _, command = view.update(StatusDone())
        assert command == Schedule(0.5, DoneTimer())

    def test_done_timer_quits(self, data, channel):
        view = make_view(data, channel)
        view.update(StatusDone())
        view, command = view.update(DoneTimer())
        assert command == Quit()

    def test_wait_for_key(self, data, channel):
        view = make_view(data, channel, doneBehavior="wait-for-key")
        view, command = view.update(StatusDone())
        assert command is None
        view, command = view.update(KeyPress("x"))
        assert command == Quit()


class TestSpinner:
    """Test spinner ticks."""

    def test_tick_advances_while_waiting(self, data, channel):
        view = make_view(data, channel)
        view, command = view.update(SpinnerTick())
        assert view.spinner_frame == 1
        assert command == Schedule(pytest.approx(view.tick_interval), SpinnerTick())

    def test_tick_stops_after_completion(self, data, channel):
        view = make_view(data, channel)
        view.update(StatusDone())
        _, command = view.update(SpinnerTick())
        assert command is None


class TestKeys:
    """Test quit keys and actions."""

    @pytest.mark.parametrize("key", ["ctrl+c", "esc", "q"])
    def test_quit_keys_vim(self, data, channel, key):
        _, command = make_view(data, channel).update(KeyPress(key))
        assert command == Quit()

    def test_quit_key_depends_on_mode(self, data, channel):
        view = make_view(data, channel, key_mode=KeyMode.EMACS)
        _, command = view.update(KeyPress("q"))
        assert command is None
        _, command = view.update(KeyPress("ctrl+q"))
        assert command == Quit()

    def test_messages_ignored_after_quit(self, data, channel):
        view = make_view(data, channel)
        view.update(KeyPress("q"))
        view, command = view.update(StatusDone(message="late"))
        assert command is None
        assert view.phase is StatusPhase.WAITING

    def test_copy_action(self, data, channel):
        _, command = make_view(data, channel).update(KeyPress("y"))
        assert command == CopyToClipboard("deploy-42", "copy id")

    def test_open_action_in_function_mode(self, data, channel):
        view = make_view(data, channel, key_mode=KeyMode.FUNCTION)
        _, command = view.update(KeyPress("f6"))
        assert command == OpenUrl("https://example.com/d/42", "open")

    def test_action_with_missing_field_flashes(self, data, channel):
        del data["id"]
        view = make_view(data, channel)
        view, command = view.update(KeyPress("y"))
        assert view.flash_message() == ('⚠ copy id: field "id" not found', True)
        assert command == Schedule(2.0, FlashClear(1))


class TestFlash:
    """Test flash messages reported by the host."""

    def test_copy_result(self, data, channel):
        view = make_view(data, channel)
        view, command = view.update(ActionResult("copy id", "copy-value"))
        assert view.flash_message() == ("✓ Copied to clipboard", False)
        assert command == Schedule(2.0, FlashClear(1))

    def test_open_result(self, data, channel):
        view = make_view(data, channel)
        view, _ = view.update(ActionResult("open", "open-url"))
        assert view.flash_message() == ("✓ Opened in browser", False)

    def test_error_result(self, data, channel):
        view = make_view(data, channel)
        view, _ = view.update(ActionResult("copy id", "copy-value", error="no clipboard tool found"))
        assert view.flash_message() == ("⚠ copy id: no clipboard tool found", True)

    def test_stale_clear_keeps_newer_flash(self, data, channel):
        view = make_view(data, channel)
        view.update(ActionResult("copy id", "copy-value"))
        view.update(ActionResult("open", "open-url"))
        view, _ = view.update(FlashClear(1))
        assert view.flash_message() == ("✓ Opened in browser", False)
        view, _ = view.update(FlashClear(2))
        assert view.flash_message() == ("", False)


class TestRendering:
    """Test the rendered frame and metadata."""

    def test_title_and_footer(self, data, channel):
        view = make_view(data, channel)
        assert view.title == "Deploying web"
        assert view.footer == "y copy id o open q quit"
        assert view.position() == (1, 1, "status")

    def test_emacs_footer(self, data, channel):
        view = make_view(data, channel, key_mode=KeyMode.EMACS)
        assert view.footer == "C-y copy id C-o open C-q quit"

    def test_waiting_frame(self, data, channel):
        frame = make_view(data, channel).render(80, 20, color=False)
        assert "Uploading" in frame
        assert "URL: https://example.com/d/42" in frame
        assert "Waiting for deployment..." in frame

    def test_no_spinner_without_completion_source(self, data):
        frame = make_view(data).render(80, 20, color=False)
        assert "Waiting for deployment..." not in frame

    def test_success_frame(self, data, channel):
        view = make_view(data, channel, doneBehavior="wait-for-key")
        view.update(StatusDone(message="Live"))
        frame = view.render(80, 20, color=False)
        assert "✓ Live" in frame
        assert "Press any key to exit" in frame
        assert "Waiting for deployment..." not in frame

    def test_error_frame(self, data, channel):
        view = make_view(data, channel)
        view.update(StatusDone(error="boom"))
        assert "✗ boom" in view.render(80, 20, color=False)
