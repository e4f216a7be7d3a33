"""Identity gateway for one application instance.

Wraps the Firebase client and the instance's ``SessionChannel``: a successful
sign-in or sign-up publishes the new session, sign-out publishes ``None``.
Provider calls are blocking and run in a worker thread.
"""

import logging
from typing import Any, Callable, Dict, Optional

import anyio

from ..errors import AuthError
from ..models.domain import Session
from .firebase_auth import FirebaseAuthClient
from .session_channel import SessionChannel, SessionListener

logger = logging.getLogger(__name__)


def _session_from_auth_payload(data: Dict[str, Any]) -> Session:
    user_id = data.get("localId") if isinstance(data, dict) else None
    if not user_id:
        logger.error("Identity provider response without localId")
        raise AuthError("auth/internal-error")
    return Session(
        user_id=user_id,
        email=data.get("email", ""),
        id_token=data.get("idToken"),
    )


class IdentityGateway:
    def __init__(self, client: FirebaseAuthClient, channel: Optional[SessionChannel] = None):
        self.client = client
        self.channel = channel or SessionChannel()

    @property
    def current_session(self) -> Optional[Session]:
        return self.channel.current

    async def sign_in(self, email: str, password: str) -> Session:
        data = await anyio.to_thread.run_sync(self.client.sign_in_with_password, email, password)
        session = _session_from_auth_payload(data)
        logger.info("Signed in user %s", session.user_id)
        self.channel.publish(session)
        return session

    async def sign_up(self, email: str, password: str) -> Session:
        data = await anyio.to_thread.run_sync(self.client.sign_up, email, password)
        session = _session_from_auth_payload(data)
        logger.info("Created account for user %s", session.user_id)
        self.channel.publish(session)
        return session

    async def send_password_reset(self, email: str) -> None:
        await anyio.to_thread.run_sync(self.client.send_password_reset_email, email)
        logger.info("Password reset email requested")

    async def sign_out(self) -> None:
        session = self.channel.current
        if session:
            logger.info("Signing out user %s", session.user_id)
        self.channel.publish(None)

    async def restore(self, token: Optional[str]) -> Optional[Session]:
        """Resolve the initial session state from a previously issued ID token."""
        session = None
        if token:
            claims = await anyio.to_thread.run_sync(self.client.verify_id_token, token)
            if claims:
                session = Session(
                    user_id=claims.get("user_id") or claims["sub"],
                    email=claims.get("email", ""),
                    id_token=token,
                )
        self.channel.publish(session)
        return session

    def subscribe_to_session_changes(self, callback: SessionListener) -> Callable[[], None]:
        return self.channel.on_change(callback)

    def session_subscription(self, callback: SessionListener):
        return self.channel.subscription(callback)
