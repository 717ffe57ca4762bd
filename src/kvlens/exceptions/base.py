"""Root of the kvlens exception hierarchy."""

from typing import Dict, Optional


class KvlensError(Exception):
    """Base exception for all kvlens errors.

    ``details`` are rendered after the message as ``key=value`` pairs.
    ``hint`` is a follow-up suggestion the CLI prints on its own line; it is
    not part of ``str(error)`` so the one-line status bar stays short.
    """

    hint: Optional[str] = None

    def __init__(
        self,
        message: str,
        details: Optional[Dict[str, str]] = None,
        hint: Optional[str] = None,
    ):
        super().__init__(message)
        self.message = message
        self.details = dict(details or {})
        if hint is not None:
            self.hint = hint

    def __str__(self) -> str:
        if not self.details:
            return self.message
        pairs = ", ".join(f"{key}={value}" for key, value in self.details.items())
        return f"{self.message} ({pairs})"
