"""Push-style session notifications.

``SessionChannel`` holds the current session of one application instance and
notifies listeners on every change. A listener registered after the state has
been resolved is called immediately with the current value; a listener
registered before that waits for the first publication.
"""

import logging
from contextlib import contextmanager
from typing import Callable, Iterator, List, Optional

from ..models.domain import Session

logger = logging.getLogger(__name__)

SessionListener = Callable[[Optional[Session]], None]


class SessionChannel:
    def __init__(self) -> None:
        self._listeners: List[SessionListener] = []
        self._current: Optional[Session] = None
        self._resolved = False

    @property
    def current(self) -> Optional[Session]:
        return self._current

    @property
    def resolved(self) -> bool:
        return self._resolved

    def publish(self, session: Optional[Session]) -> None:
        self._current = session
        self._resolved = True
        # Copy so listeners may unsubscribe from inside the callback.
        for listener in list(self._listeners):
            listener(session)

    def on_change(self, listener: SessionListener) -> Callable[[], None]:
        self._listeners.append(listener)
        if self._resolved:
            listener(self._current)

        def unsubscribe() -> None:
            try:
                self._listeners.remove(listener)
            except ValueError:
                logger.debug("Session listener already removed")

        return unsubscribe

    @contextmanager
    def subscription(self, listener: SessionListener) -> Iterator[None]:
        unsubscribe = self.on_change(listener)
        try:
            yield
        finally:
            unsubscribe()

    @property
    def listener_count(self) -> int:
        return len(self._listeners)
