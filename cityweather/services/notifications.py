from __future__ import annotations

import logging
from typing import Protocol

logger = logging.getLogger(__name__)


class Notifier(Protocol):
    def notify(self, message: str) -> None: ...


class LoggingNotifier:
    """Surfaces transient user notifications through the log."""

    def notify(self, message: str) -> None:
        logger.info("notification: %s", message)


class CollectingNotifier:
    """Keeps notifications so a rendered page can show them once."""

    def __init__(self) -> None:
        self.messages: list[str] = []

    def notify(self, message: str) -> None:
        self.messages.append(message)
