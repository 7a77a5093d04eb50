from __future__ import annotations

import dataclasses
import logging
import time
from typing import Any, Callable, Dict, List, Optional

from notifications.models.notification import Notification

logger = logging.getLogger(__name__)

Clock = Callable[[], float]


class Notifier:
    """Holds the operator toast currently on screen.

    Only one toast is visible at a time: a new notification replaces the
    pending one.  Expiry is a timestamp compared against ``clock`` when the
    toast is read, so nothing runs in the background.
    """

    def __init__(self, *, duration_ms: int = 3000, clock: Clock = time.monotonic, history: int = 50) -> None:
        self._default_duration = duration_ms
        self._clock = clock
        self._history = history
        self._current: Optional[Notification] = None
        self._recent: List[Dict[str, Any]] = []

    # ---- Public API --------------------------------------------------------
    def notify(self, note: Notification) -> Notification:
        duration = note.toast_duration_ms
        if duration is None:
            duration = self._default_duration
        note = dataclasses.replace(
            note,
            toast_duration_ms=duration,
            expires_at=self._clock() + duration / 1000.0,
        )
        if self._current is not None and self.is_active(self._current):
            logger.debug("Replacing pending toast %r", self._current.message)
        self._current = note
        self._recent.append(dataclasses.asdict(note))
        del self._recent[: -self._history]
        return note

    def is_active(self, note: Notification) -> bool:
        return note.expires_at is not None and self._clock() < note.expires_at

    def current(self) -> Optional[Notification]:
        """Return the visible toast, or ``None`` once it has expired."""
        if self._current is not None and not self.is_active(self._current):
            self._current = None
        return self._current

    def dismiss(self) -> None:
        self._current = None

    def recent(self, limit: int = 50) -> List[Dict[str, Any]]:
        return self._recent[-limit:]

