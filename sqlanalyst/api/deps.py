import logging
from functools import lru_cache
from typing import Optional, Union

from fastapi import Depends, HTTPException, Request, Response, status

from sqlanalyst.config import Settings, get_firebase_config, get_settings
from sqlanalyst.flows.query_flow import AnalysisBackend
from sqlanalyst.flows.session_guard import GuardState
from sqlanalyst.models.domain import Session
from sqlanalyst.services.firebase_auth import FirebaseAuthClient
from sqlanalyst.services.identity import IdentityGateway
from sqlanalyst.services.mock_analysis import MockAnalysisBackend, UploadWorkspace
from sqlanalyst.services.text_to_sql import TextToSqlClient
from sqlanalyst.services.workspaces import Workspace, WorkspaceRegistry


@lru_cache()
def get_registry() -> WorkspaceRegistry:
    settings = get_settings()
    return WorkspaceRegistry(
        max_count=settings.workspace_max_count,
        idle_ttl=settings.workspace_idle_ttl,
    )


@lru_cache()
def get_firebase_client() -> FirebaseAuthClient:
    logging.info("Initializing Firebase auth client...")
    settings = get_settings()
    return FirebaseAuthClient(
        get_firebase_config(),
        base_url=settings.identity_toolkit_url,
        timeout=settings.identity_timeout,
    )


@lru_cache()
def get_analysis_backend() -> Union[TextToSqlClient, MockAnalysisBackend]:
    settings = get_settings()
    if settings.mock_mode:
        logging.info("MOCK_MODE enabled, answers are simulated")
        return MockAnalysisBackend(delay=settings.mock_response_delay)
    logging.info("Initializing text-to-SQL client for %s", settings.text_to_sql_url)
    return TextToSqlClient(
        settings.analysis_endpoint,
        settings.text_to_sql_token,
        timeout=settings.text_to_sql_timeout,
    )


def bearer_token(request: Request) -> Optional[str]:
    """ID token from ``X-User-Authorization`` or ``Authorization``, if any."""
    auth_header = request.headers.get("x-user-authorization") or request.headers.get("authorization")
    if not auth_header or not auth_header.lower().startswith("bearer "):
        return None
    return auth_header.split(" ", 1)[1].strip() or None


def attach_workspace_cookie(response: Response, workspace: Workspace, settings: Settings) -> None:
    response.set_cookie(
        settings.session_cookie_name,
        workspace.id,
        httponly=True,
        secure=settings.session_cookie_secure,
        samesite="lax",
    )


def remember_workspace(
    response: Response, workspace: Workspace, registry: WorkspaceRegistry, settings: Settings
) -> None:
    """Register a workspace that now holds a session and hand out its cookie."""
    if workspace not in registry:
        registry.add(workspace)
    attach_workspace_cookie(response, workspace, settings)


def forget_workspace(
    response: Response, workspace: Workspace, registry: WorkspaceRegistry, settings: Settings
) -> None:
    registry.discard(workspace.id)
    response.delete_cookie(settings.session_cookie_name)


async def get_workspace(
    request: Request,
    response: Response,
    settings: Settings = Depends(get_settings),
    registry: WorkspaceRegistry = Depends(get_registry),
    firebase: FirebaseAuthClient = Depends(get_firebase_client),
    backend: AnalysisBackend = Depends(get_analysis_backend),
) -> Workspace:
    workspace = registry.get(request.cookies.get(settings.session_cookie_name))
    if workspace is not None:
        return workspace

    # Throwaway until a session is established; see remember_workspace.
    workspace = registry.build(
        IdentityGateway(firebase),
        backend,
        connection_id=settings.text_to_sql_connection_id,
        dialect=settings.text_to_sql_dialect,
        mock_mode=settings.mock_mode,
        upload_delay=settings.mock_upload_delay,
        response_delay=settings.mock_response_delay,
    )
    # Initial load: resolves the guard from Checking.
    if await workspace.gateway.restore(bearer_token(request)):
        remember_workspace(response, workspace, registry, settings)
    return workspace


async def require_session(workspace: Workspace = Depends(get_workspace)) -> Session:
    guard = workspace.dashboard_guard()
    if guard.state != GuardState.AUTHENTICATED or guard.session is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Authentication required",
            headers={"WWW-Authenticate": "Bearer"},
        )
    return guard.session


def require_mock_mode(settings: Settings = Depends(get_settings)) -> None:
    if not settings.mock_mode:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Not Found")


async def get_upload_workspace(
    _: None = Depends(require_mock_mode),
    session: Session = Depends(require_session),
    workspace: Workspace = Depends(get_workspace),
) -> UploadWorkspace:
    return workspace.upload_workspace()
