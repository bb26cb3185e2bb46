from __future__ import annotations

import threading
from typing import Iterable

from ..core.constants import NOTIFICATION_INBOX_LIMIT
from .model import Notification


class NotificationInbox:
    """Newest-first list of notifications for one session.

    Incoming notifications whose id is already present are ignored; the inbox
    keeps at most ``limit`` items.
    """

    def __init__(self, *, limit: int = NOTIFICATION_INBOX_LIMIT):
        self._limit = limit
        self._items: list[Notification] = []
        self._lock = threading.Lock()

    def add(self, notifications: Iterable[Notification]) -> list[Notification]:
        with self._lock:
            known = {n.notification_id for n in self._items}
            fresh: list[Notification] = []
            for n in notifications:
                if n.notification_id in known:
                    continue
                known.add(n.notification_id)
                fresh.append(n)
            if fresh:
                self._items = (fresh + self._items)[: self._limit]
            return fresh

    def items(self) -> list[Notification]:
        with self._lock:
            return list(self._items)

    def unread_count(self) -> int:
        with self._lock:
            return sum(1 for n in self._items if not n.read)

    def mark_read(self, notification_id: str) -> bool:
        with self._lock:
            for i, n in enumerate(self._items):
                if n.notification_id == notification_id:
                    self._items[i] = n.mark_read()
                    return True
            return False

    def mark_all_read(self) -> int:
        with self._lock:
            changed = sum(1 for n in self._items if not n.read)
            self._items = [n if n.read else n.mark_read() for n in self._items]
            return changed

    def dismiss(self, notification_id: str) -> bool:
        with self._lock:
            before = len(self._items)
            self._items = [n for n in self._items if n.notification_id != notification_id]
            return len(self._items) != before
