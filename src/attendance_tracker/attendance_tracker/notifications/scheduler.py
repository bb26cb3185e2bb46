from __future__ import annotations

import logging
import threading
from typing import Callable, Optional

from ..auth.session import UserSession
from ..core.constants import DEFAULT_NOTIFICATION_INTERVAL_SECONDS
from .service import NotificationService

logger = logging.getLogger(__name__)


class _SessionTask:
    def __init__(self, session: UserSession, thread: threading.Thread, stop: threading.Event):
        self.session = session
        self.thread = thread
        self.stop = stop


class NotificationScheduler:
    """Runs one periodic notification refresh per live session.

    A task is started when a session is created and cancelled when it is
    destroyed. Each tick is independent: a failing tick is logged and the
    next one runs on schedule. A task whose session has expired hands the
    session to ``on_expired`` (normally the session manager's destroy) and stops.
    """

    def __init__(
        self,
        service: NotificationService,
        *,
        interval_seconds: float = DEFAULT_NOTIFICATION_INTERVAL_SECONDS,
        on_expired: Optional[Callable[[UserSession], object]] = None,
    ):
        self._service = service
        self._interval = float(interval_seconds)
        self._on_expired = on_expired
        self._tasks: dict[str, _SessionTask] = {}
        self._lock = threading.Lock()

    def start(self, session: UserSession) -> None:
        with self._lock:
            if session.session_id in self._tasks:
                return
            stop = threading.Event()
            thread = threading.Thread(
                target=self._run,
                args=(session, stop),
                name=f"notifications-{session.user_id}",
                daemon=True,
            )
            self._tasks[session.session_id] = _SessionTask(session, thread, stop)
        thread.start()
        logger.info("notification task started user_id=%s interval=%ss", session.user_id, self._interval)

    def cancel(self, session: UserSession, *, timeout: Optional[float] = None) -> bool:
        with self._lock:
            task = self._tasks.pop(session.session_id, None)
        if task is None:
            return False

        task.stop.set()
        if task.thread is not threading.current_thread():
            task.thread.join(timeout)
        logger.info("notification task stopped user_id=%s", session.user_id)
        return True

    def stop_all(self, *, timeout: Optional[float] = 5.0) -> None:
        with self._lock:
            sessions = [t.session for t in self._tasks.values()]
        for session in sessions:
            self.cancel(session, timeout=timeout)

    def running(self) -> int:
        with self._lock:
            return len(self._tasks)

    def tick(self, session: UserSession) -> None:
        try:
            self._service.refresh(session)
        except Exception:
            logger.exception("notification refresh failed user_id=%s", session.user_id)

    def _run(self, session: UserSession, stop: threading.Event) -> None:
        while not stop.is_set():
            if session.is_expired():
                self._expire(session)
                return
            self.tick(session)
            stop.wait(self._interval)

    def _expire(self, session: UserSession) -> None:
        logger.info("session expired, stopping notification task user_id=%s", session.user_id)
        try:
            if self._on_expired is not None:
                self._on_expired(session)
        finally:
            self.cancel(session)
