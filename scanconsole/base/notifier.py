"""
scanconsole/base/notifier.py
User-visible notifications.

The pipeline reports auth expiry and transport failures here; whatever front
end is attached (the CLI prints them) subscribes to `notified`.
"""

from __future__ import annotations

import logging
import time
from collections import deque
from dataclasses import dataclass, field
from typing import Deque, List

from scanconsole.utils.observer import Signal

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Notification:
    level: str
    message: str
    timestamp: float = field(default_factory=time.time)


class Notifier:
    def __init__(self, max_history: int = 200):
        self.history: Deque[Notification] = deque(maxlen=max_history)
        self.notified = Signal()

    def _push(self, level: str, message: str) -> Notification:
        note = Notification(level=level, message=message)
        self.history.append(note)
        self.notified.emit(note)
        return note

    def error(self, message: str) -> Notification:
        logger.warning(f"[Notify] {message}")
        return self._push("error", message)

    def info(self, message: str) -> Notification:
        logger.info(f"[Notify] {message}")
        return self._push("info", message)

    def messages(self, level: str = "") -> List[str]:
        return [n.message for n in self.history if not level or n.level == level]

    def clear(self) -> None:
        self.history.clear()
