"""Gate for the protected dashboard surface.

The guard starts in ``CHECKING`` and resolves on the first session callback.
It never returns to ``CHECKING``. Once ``UNAUTHENTICATED`` it releases its
subscription; losing an established session also calls ``on_unauthenticated``
so the caller can tear down whatever it mounted behind the guard.
A different user signing in over an established session calls
``on_identity_changed`` for the same reason.
"""

import logging
from enum import Enum
from typing import Callable, Optional, TypeVar, Union

from ..models.domain import Session
from ..services.identity import IdentityGateway

logger = logging.getLogger(__name__)

T = TypeVar("T")


class GuardState(str, Enum):
    CHECKING = "checking"
    AUTHENTICATED = "authenticated"
    UNAUTHENTICATED = "unauthenticated"


class Loading:
    """Placeholder rendered while the session is being checked."""

    def __eq__(self, other):
        return isinstance(other, Loading)


class Redirect:
    def __init__(self, location: str) -> None:
        self.location = location

    def __eq__(self, other):
        return isinstance(other, Redirect) and other.location == self.location


class SessionGuard:
    def __init__(
        self,
        gateway: IdentityGateway,
        on_unauthenticated: Optional[Callable[[], None]] = None,
        on_identity_changed: Optional[Callable[[], None]] = None,
        login_path: str = "/login",
    ) -> None:
        self.gateway = gateway
        self.on_unauthenticated = on_unauthenticated
        self.on_identity_changed = on_identity_changed
        self.login_path = login_path
        self.state = GuardState.CHECKING
        self.session: Optional[Session] = None
        self._unsubscribe: Optional[Callable[[], None]] = None

    @property
    def mounted(self) -> bool:
        return self._unsubscribe is not None

    def mount(self) -> "SessionGuard":
        if self._unsubscribe is None:
            self._unsubscribe = self.gateway.subscribe_to_session_changes(self._on_session)
        return self

    def unmount(self) -> None:
        if self._unsubscribe is not None:
            self._unsubscribe()
            self._unsubscribe = None

    def __enter__(self) -> "SessionGuard":
        return self.mount()

    def __exit__(self, exc_type, exc, tb) -> None:
        self.unmount()

    def _on_session(self, session: Optional[Session]) -> None:
        previous = self.state
        previous_session = self.session
        self.session = session
        if session is not None and session.valid:
            self.state = GuardState.AUTHENTICATED
            if (
                previous == GuardState.AUTHENTICATED
                and previous_session is not None
                and previous_session.user_id != session.user_id
            ):
                logger.info("Signed-in user changed, remounting protected surface")
                if self.on_identity_changed:
                    self.on_identity_changed()
            return

        # Navigating away unmounts the guard, so the protected surface stays
        # hidden even if a later session arrives; a fresh guard is needed.
        self.state = GuardState.UNAUTHENTICATED
        self.unmount()
        if previous == GuardState.AUTHENTICATED:
            logger.info("Session lost, leaving protected surface")
            if self.on_unauthenticated:
                self.on_unauthenticated()

    def render(self, protected: Callable[[], T]) -> Union[T, Loading, Redirect]:
        if self.state == GuardState.CHECKING:
            return Loading()
        if self.state == GuardState.UNAUTHENTICATED:
            return Redirect(self.login_path)
        return protected()
