"""Blocking client for the Firebase Identity Toolkit REST API.

The web SDK's ``signInWithEmailAndPassword``, ``createUserWithEmailAndPassword``
and ``sendPasswordResetEmail`` are thin wrappers over these endpoints. REST
error messages (``EMAIL_EXISTS``, ``WEAK_PASSWORD : ...``) are normalised to
the SDK's ``auth/...`` codes before being raised as ``AuthError``.
"""

import logging
from typing import Any, Dict, Optional

import requests
from google.auth import exceptions as google_auth_exceptions
from google.auth.transport import requests as google_requests
from google.oauth2 import id_token

from ..config import FirebaseConfig
from ..errors import AuthError

logger = logging.getLogger(__name__)

_REST_ERROR_CODES = {
    "INVALID_EMAIL": "auth/invalid-email",
    "MISSING_EMAIL": "auth/invalid-email",
    "USER_DISABLED": "auth/user-disabled",
    "EMAIL_NOT_FOUND": "auth/user-not-found",
    "USER_NOT_FOUND": "auth/user-not-found",
    "INVALID_PASSWORD": "auth/wrong-password",
    "EMAIL_EXISTS": "auth/email-already-in-use",
    "WEAK_PASSWORD": "auth/weak-password",
    "TOO_MANY_ATTEMPTS_TRY_LATER": "auth/too-many-requests",
    "INVALID_LOGIN_CREDENTIALS": "auth/invalid-credential",
}


def provider_code_from_rest(message: Optional[str]) -> str:
    """``"WEAK_PASSWORD : Password should be ..."`` -> ``"auth/weak-password"``."""
    if not message:
        return "auth/internal-error"
    key = message.split(":", 1)[0].strip()
    return _REST_ERROR_CODES.get(key, "auth/internal-error")


class FirebaseAuthClient:
    def __init__(
        self,
        config: FirebaseConfig,
        base_url: str = "https://identitytoolkit.googleapis.com/v1",
        timeout: float = 30.0,
    ) -> None:
        self.config = config
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.session = requests.Session()
        self._request_adapter = google_requests.Request()

    def _post(self, method: str, body: Dict[str, Any]) -> Dict[str, Any]:
        url = f"{self.base_url}/accounts:{method}"
        try:
            resp = self.session.post(
                url, params={"key": self.config.api_key}, json=body, timeout=self.timeout
            )
        except requests.RequestException as exc:
            logger.error("Identity provider unreachable (%s): %s", method, exc)
            raise AuthError("auth/network-request-failed") from exc

        if resp.ok:
            try:
                return resp.json()
            except ValueError as exc:
                logger.error("Malformed identity provider response (%s): %s", method, exc)
                raise AuthError("auth/internal-error") from exc

        try:
            message = resp.json().get("error", {}).get("message")
        except ValueError:
            message = None
        code = provider_code_from_rest(message)
        logger.info("Identity provider rejected %s: %s (%s)", method, message, code)
        raise AuthError(code)

    def sign_in_with_password(self, email: str, password: str) -> Dict[str, Any]:
        return self._post(
            "signInWithPassword",
            {"email": email, "password": password, "returnSecureToken": True},
        )

    def sign_up(self, email: str, password: str) -> Dict[str, Any]:
        return self._post(
            "signUp",
            {"email": email, "password": password, "returnSecureToken": True},
        )

    def send_password_reset_email(self, email: str) -> None:
        self._post("sendOobCode", {"requestType": "PASSWORD_RESET", "email": email})

    def verify_id_token(self, token: str) -> Optional[Dict[str, Any]]:
        """Return the decoded claims, or ``None`` when the token is not valid."""
        try:
            return id_token.verify_firebase_token(
                token, self._request_adapter, audience=self.config.project_id
            )
        except (ValueError, google_auth_exceptions.GoogleAuthError) as e:
            logger.warning("ID token verification failed: %s", e)
            return None
