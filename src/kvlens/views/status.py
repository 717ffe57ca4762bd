"""Status screen for a long-running external operation.

The screen starts in the waiting phase with a spinner and moves to success or
error exactly once: when the completion channel delivers a result, or when
the configured timeout fires first. Afterwards it either exits after a delay
or waits for a key, depending on ``doneBehavior``.

All time-based behavior is expressed as returned commands (``Schedule``,
``PollCompletion``), so the state machine itself is synchronous and can be
driven message by message.
"""

import logging
from enum import Enum
from typing import Any, List, Mapping, Optional, Tuple

from rich.spinner import Spinner
from rich.text import Text

from .base import CustomView, ViewKind
from .channel import CompletionChannel
from .commands import Command, CopyToClipboard, OpenUrl, PollCompletion, Quit, Schedule, batch
from .format import paint, stringify
from .keymodes import KeyMode, format_key, quit_key, quit_key_label
from .messages import (
    ActionResult,
    DoneTimer,
    FlashClear,
    KeyPress,
    SpinnerTick,
    StatusDone,
    StatusTimeout,
)
from .schema import ACTION_COPY_VALUE, ACTION_OPEN_URL, StatusAction, StatusConfig
from .theme import DEFAULT_THEME, Theme

logger = logging.getLogger(__name__)

DEFAULT_SUCCESS_MESSAGE = "Done"
DEFAULT_DONE_DELAY = 2.0
DEFAULT_FLASH_SECONDS = 2.0
PRESS_ANY_KEY = "Press any key to exit"

# Keys that quit from any phase, whatever the key mode.
ALWAYS_QUIT = ("ctrl+c", "esc")


class StatusPhase(str, Enum):
    WAITING = "waiting"
    SUCCESS = "success"
    ERROR = "error"


def is_url(value: str) -> bool:
    return value.startswith("http://") or value.startswith("https://")


class StatusView(CustomView):
    """Waiting/success/error screen driven by messages.

    Args:
        config: The ``status`` section of the display schema
        data: The data node shown on the screen
        key_mode: Key binding scheme for quit and action keys
        theme: Styles used when rendering
        channel: One-shot source of the operation's result
        flash_seconds: How long action flash messages stay visible
        done_delay: Exit delay used when the schema does not set one
        spinner: Name of the rich spinner
    """

    kind = ViewKind.STATUS

    def __init__(
        self,
        config: StatusConfig,
        data: Any,
        key_mode: KeyMode = KeyMode.VIM,
        theme: Theme = DEFAULT_THEME,
        channel: Optional[CompletionChannel] = None,
        flash_seconds: float = DEFAULT_FLASH_SECONDS,
        done_delay: float = DEFAULT_DONE_DELAY,
        spinner: str = "dots",
    ):
        self.config = config
        self.data = data
        self.key_mode = key_mode
        self.theme = theme
        self.channel = channel
        self.flash_seconds = flash_seconds
        self.default_done_delay = done_delay

        self.phase = StatusPhase.WAITING
        self.result_message = ""
        self.flash = ""
        self.flash_generation = 0
        self.quitting = False

        self._spinner = Spinner(spinner)
        self.spinner_frame = 0

    # -- state queries ------------------------------------------------------

    @property
    def deadline(self) -> Optional[float]:
        return self.config.timeout_seconds

    @property
    def has_completion_source(self) -> bool:
        return self.channel is not None or self.deadline is not None

    @property
    def done(self) -> bool:
        return self.phase is not StatusPhase.WAITING

    @property
    def done_delay(self) -> float:
        delay = self.config.done_delay_seconds
        return delay if delay is not None else self.default_done_delay

    @property
    def tick_interval(self) -> float:
        return self._spinner.interval / 1000.0

    def field_value(self, name: str) -> str:
        if not name or not isinstance(self.data, Mapping):
            return ""
        return stringify(self.data.get(name))

    def messages(self) -> List[str]:
        if not self.config.message_field or not isinstance(self.data, Mapping):
            return []
        if self.config.message_field not in self.data:
            return []
        value = self.data[self.config.message_field]
        if isinstance(value, (list, tuple)):
            return [stringify(v) for v in value]
        return [stringify(value)]

    # -- CustomView contract ------------------------------------------------

    @property
    def title(self) -> str:
        return self.field_value(self.config.title_field)

    @property
    def footer(self) -> str:
        parts = []
        for action in self.config.actions:
            key = format_key(action.keys.for_mode(self.key_mode), self.key_mode)
            if key and action.label:
                parts.extend([key, action.label])
        parts.extend([quit_key_label(self.key_mode), "quit"])
        return " ".join(parts)

    def flash_message(self) -> Tuple[str, bool]:
        if not self.flash:
            return "", False
        return self.flash, self.flash.startswith("⚠")

    def position(self) -> Tuple[int, int, str]:
        return 1, 1, "status"

    def init(self) -> Optional[Command]:
        return batch(
            Schedule(self.tick_interval, SpinnerTick()),
            PollCompletion(self.channel) if self.channel is not None else None,
            Schedule(self.deadline, StatusTimeout()) if self.deadline is not None else None,
        )

    def update(self, message: Any) -> Tuple["StatusView", Optional[Command]]:
        if self.quitting:
            logger.debug("Ignoring %r after quit", message)
            return self, None

        if isinstance(message, KeyPress):
            return self, self._on_key(message.key)
        if isinstance(message, SpinnerTick):
            if self.done:
                return self, None
            self.spinner_frame += 1
            return self, Schedule(self.tick_interval, SpinnerTick())
        if isinstance(message, StatusDone):
            return self, self._on_done(message)
        if isinstance(message, StatusTimeout):
            if self.done:
                return self, None
            self._finish(StatusPhase.SUCCESS, self.config.success_message or DEFAULT_SUCCESS_MESSAGE)
            return self, self._done_command()
        if isinstance(message, DoneTimer):
            return self, self._quit()
        if isinstance(message, FlashClear):
            if message.generation == self.flash_generation:
                self.flash = ""
            return self, None
        if isinstance(message, ActionResult):
            return self, self._on_action_result(message)
        return self, None

    # -- transitions --------------------------------------------------------

    def _finish(self, phase: StatusPhase, message: str) -> None:
        self.phase = phase
        self.result_message = message

    def _on_done(self, message: StatusDone) -> Optional[Command]:
        if self.done:
            logger.debug("Ignoring completion in phase %s", self.phase.value)
            return None
        if message.error is not None:
            self._finish(StatusPhase.ERROR, message.error)
        else:
            self._finish(
                StatusPhase.SUCCESS,
                message.message or self.config.success_message or DEFAULT_SUCCESS_MESSAGE,
            )
        return self._done_command()

    def _done_command(self) -> Optional[Command]:
        if self.config.waits_for_key:
            return None
        return Schedule(self.done_delay, DoneTimer())

    def _quit(self) -> Command:
        self.quitting = True
        return Quit()

    def _on_key(self, key: str) -> Optional[Command]:
        if key in ALWAYS_QUIT:
            return self._quit()
        if self.done and self.config.waits_for_key:
            return self._quit()
        if key == quit_key(self.key_mode):
            return self._quit()
        for action in self.config.actions:
            bound = action.keys.for_mode(self.key_mode)
            if bound and bound == key:
                return self._run_action(action)
        return None

    def _run_action(self, action: StatusAction) -> Optional[Command]:
        value = self.field_value(action.field)
        if not value:
            return self._set_flash(f'⚠ {action.label}: field "{action.field}" not found')
        if action.type == ACTION_COPY_VALUE:
            return CopyToClipboard(value, action.label)
        if action.type == ACTION_OPEN_URL:
            return OpenUrl(value, action.label)
        return None

    def _on_action_result(self, result: ActionResult) -> Command:
        if result.error:
            return self._set_flash(f"⚠ {result.label}: {result.error}")
        if result.action_type == ACTION_OPEN_URL:
            return self._set_flash("✓ Opened in browser")
        return self._set_flash("✓ Copied to clipboard")

    def _set_flash(self, text: str) -> Command:
        self.flash = text
        self.flash_generation += 1
        return Schedule(self.flash_seconds, FlashClear(self.flash_generation))

    # -- rendering ----------------------------------------------------------

    def _body(self) -> Text:
        theme = self.theme
        text = Text()

        def line(*parts) -> None:
            text.append("  ")
            for part in parts:
                if isinstance(part, tuple):
                    text.append(*part)
                else:
                    text.append(part)
            text.append("\n")

        messages = self.messages()
        for message in messages:
            line((message, theme.status))
        if messages:
            text.append("\n")

        shown = False
        for display in self.config.display_fields:
            value = self.field_value(display.field)
            if not value:
                continue
            style = f"link {value}" if is_url(value) else ""
            line((f"{display.label}:", theme.label), " ", (value, style))
            shown = True
        if shown:
            text.append("\n")

        if self.phase is StatusPhase.WAITING:
            if self.has_completion_source and self.config.wait_message:
                frames = self._spinner.frames
                frame = frames[self.spinner_frame % len(frames)]
                line((frame, theme.status), " ", (self.config.wait_message, theme.status))
        else:
            if self.phase is StatusPhase.SUCCESS:
                line((f"✓ {self.result_message}", theme.success))
            else:
                line((f"✗ {self.result_message}", theme.error))
            if self.config.waits_for_key:
                text.append("\n")
                line(PRESS_ANY_KEY)

        text.rstrip()
        return text

    def render(self, width: int, height: int, color: bool = True) -> str:
        return paint(self._body(), width, color)
