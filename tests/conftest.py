"""Pytest configuration and fixtures.

Environment is populated before any ``sqlanalyst`` import so the cached
settings and the module-level app see a complete configuration. External
collaborators (Firebase, the text-to-SQL service) are replaced with fakes
through FastAPI dependency overrides.
"""

import asyncio
import os
from typing import Any, Dict, List, Optional

import pytest

os.environ.setdefault("FIREBASE_API_KEY", "test-api-key")
os.environ.setdefault("FIREBASE_AUTH_DOMAIN", "test-project.firebaseapp.com")
os.environ.setdefault("FIREBASE_PROJECT_ID", "test-project")
os.environ.setdefault("FIREBASE_APP_ID", "1:123:web:abc")
os.environ.setdefault("FIREBASE_STORAGE_BUCKET", "test-project.appspot.com")
os.environ.setdefault("FIREBASE_MESSAGING_SENDER_ID", "123")
os.environ.setdefault("FIREBASE_MEASUREMENT_ID", "G-TEST")
os.environ.setdefault("TEXT_TO_SQL_URL", "https://text2sql.example.test/api/generate-sql")
os.environ.setdefault("TEXT_TO_SQL_TOKEN", "server-side-secret")
os.environ.setdefault("TEXT_TO_SQL_CONNECTION_ID", "conn-123")

from sqlanalyst.errors import AuthError  # noqa: E402
from sqlanalyst.models.domain import QueryRequest  # noqa: E402


class FakeFirebaseClient:
    """In-memory stand-in for ``FirebaseAuthClient``."""

    def __init__(self) -> None:
        self.users: Dict[str, str] = {"analyst@example.com": "hunter22"}
        self.disabled: set = set()
        self.reset_requests: List[str] = []

    def _payload(self, email: str) -> Dict[str, Any]:
        return {"localId": f"uid-{email.split('@')[0]}", "email": email, "idToken": f"token-{email}"}

    def sign_in_with_password(self, email: str, password: str) -> Dict[str, Any]:
        if "@" not in email:
            raise AuthError("auth/invalid-email")
        if email in self.disabled:
            raise AuthError("auth/user-disabled")
        if email not in self.users:
            raise AuthError("auth/user-not-found")
        if self.users[email] != password:
            raise AuthError("auth/wrong-password")
        return self._payload(email)

    def sign_up(self, email: str, password: str) -> Dict[str, Any]:
        if email in self.users:
            raise AuthError("auth/email-already-in-use")
        if len(password) < 6:
            raise AuthError("auth/weak-password")
        self.users[email] = password
        return self._payload(email)

    def send_password_reset_email(self, email: str) -> None:
        if email not in self.users:
            raise AuthError("auth/user-not-found")
        self.reset_requests.append(email)

    def verify_id_token(self, token: str) -> Optional[Dict[str, Any]]:
        if token.startswith("token-"):
            email = token[len("token-"):]
            return {"user_id": f"uid-{email.split('@')[0]}", "sub": "x", "email": email}
        return None


class FakeBackend:
    """Analysis backend returning a fixed payload or raising a fixed error."""

    def __init__(self, payload: Any = None, error: Optional[Exception] = None) -> None:
        self.payload = payload if payload is not None else {"sql": "SELECT 1"}
        self.error = error
        self.requests: List[QueryRequest] = []
        self.gate: Optional[asyncio.Event] = None

    async def analyze(self, request: QueryRequest) -> Any:
        self.requests.append(request)
        if self.gate is not None:
            await self.gate.wait()
        if self.error is not None:
            raise self.error
        return self.payload


@pytest.fixture
def firebase_client() -> FakeFirebaseClient:
    return FakeFirebaseClient()


@pytest.fixture
def backend() -> FakeBackend:
    return FakeBackend()


@pytest.fixture
def registry():
    from sqlanalyst.services.workspaces import WorkspaceRegistry

    return WorkspaceRegistry()


@pytest.fixture
def app_client(firebase_client, backend, registry):
    from fastapi.testclient import TestClient

    from sqlanalyst.api import deps
    from sqlanalyst.api.main import app
    app.dependency_overrides[deps.get_firebase_client] = lambda: firebase_client
    app.dependency_overrides[deps.get_analysis_backend] = lambda: backend
    app.dependency_overrides[deps.get_registry] = lambda: registry

    with TestClient(app) as client:
        yield client

    app.dependency_overrides.clear()


@pytest.fixture
def signed_in_client(app_client):
    resp = app_client.post("/auth/signin", json={"email": "analyst@example.com", "password": "hunter22"})
    assert resp.status_code == 200
    return app_client
