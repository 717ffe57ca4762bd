"""One-shot completion channel between a worker thread and the UI loop."""

import logging
import queue
import threading
from dataclasses import dataclass
from typing import Optional, Union

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class StatusResult:
    """Outcome of an external operation.

    Attributes:
        message: Optional human-readable result message
        error: Error text (or exception) when the operation failed
    """

    message: str = ""
    error: Optional[Union[str, BaseException]] = None

    @property
    def failed(self) -> bool:
        return self.error is not None

    @property
    def error_text(self) -> Optional[str]:
        if self.error is None:
            return None
        return str(self.error) or type(self.error).__name__


class CompletionChannel:
    """Carries exactly one :class:`StatusResult` from a producer to the UI.

    ``send`` never blocks: the first result is kept and later sends are
    rejected. ``poll`` never blocks either and returns the result once.
    """

    def __init__(self) -> None:
        self._queue: "queue.Queue[StatusResult]" = queue.Queue(maxsize=1)
        self._lock = threading.Lock()
        self._sent = False

    def send(self, result: StatusResult) -> bool:
        """Publish *result*. Returns False if a result was already sent."""
        with self._lock:
            if self._sent:
                logger.debug("Completion already sent; dropping %r", result)
                return False
            try:
                self._queue.put_nowait(result)
            except queue.Full:
                return False
            self._sent = True
            return True

    def succeed(self, message: str = "") -> bool:
        return self.send(StatusResult(message=message))

    def fail(self, error: Union[str, BaseException]) -> bool:
        return self.send(StatusResult(error=error))

    @property
    def sent(self) -> bool:
        return self._sent

    def poll(self) -> Optional[StatusResult]:
        """Take the result if one is ready, without waiting."""
        try:
            return self._queue.get_nowait()
        except queue.Empty:
            return None
