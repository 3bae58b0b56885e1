"""Deduplicated, severity-gated diagnostics for best-effort curve operations.

Region building and bound detection run again on every edit of a curve. A curve
that cannot be inverted would otherwise emit the same warning each time, so
warnings are reported at most once per ``(tag, key)`` pair for the lifetime of
a :class:`DiagnosticContext`. Each session owns its own context.
"""

from __future__ import annotations

import logging

from .config import DEBUG
from .logging_config import get_logger


class DiagnosticContext:
    """Caller-owned record of which warnings have already been reported."""

    def __init__(
        self,
        enabled: bool | None = None,
        level: int = logging.WARNING,
        logger: logging.Logger | None = None,
    ):
        self.enabled = DEBUG if enabled is None else enabled
        self.level = level
        self.logger = logger or get_logger("diagnostics")
        self._seen: set[tuple[str, str]] = set()
        self.messages: list[str] = []

    def warn_once(self, tag: str, key: str, message: str) -> bool:
        """Report ``message`` unless ``(tag, key)`` was already reported.

        Returns True when the message was emitted.
        """
        if not self.enabled:
            return False
        dedup = (tag, key)
        if dedup in self._seen:
            return False
        self._seen.add(dedup)
        text = f"[{tag}] {message}"
        self.messages.append(text)
        self.logger.log(self.level, text)
        return True

    def has_warned(self, tag: str, key: str) -> bool:
        return (tag, key) in self._seen

    def reset(self) -> None:
        """Forget every reported pair, e.g. after loading a new preset."""
        self._seen.clear()
        self.messages.clear()
