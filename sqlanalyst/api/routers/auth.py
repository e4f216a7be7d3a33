import logging

from fastapi import APIRouter, Depends, HTTPException, Response, status

from sqlanalyst.api.deps import forget_workspace, get_registry, get_workspace, remember_workspace
from sqlanalyst.config import Settings, get_settings
from sqlanalyst.errors import AuthError
from sqlanalyst.models.domain import Credentials, PasswordResetRequest, SessionResponse
from sqlanalyst.presentation import RESET_SENT_TEXT
from sqlanalyst.services.workspaces import Workspace, WorkspaceRegistry

router = APIRouter(prefix="/auth", tags=["auth"])


def _auth_failed(e: AuthError) -> HTTPException:
    return HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=e.message)


@router.post("/signin", response_model=SessionResponse)
async def sign_in(
    body: Credentials,
    response: Response,
    workspace: Workspace = Depends(get_workspace),
    registry: WorkspaceRegistry = Depends(get_registry),
    settings: Settings = Depends(get_settings),
):
    try:
        session = await workspace.gateway.sign_in(body.email, body.password)
    except AuthError as e:
        logging.info(f"Sign-in failed ({e.kind.value})")
        raise _auth_failed(e)
    remember_workspace(response, workspace, registry, settings)
    return SessionResponse(authenticated=True, session=session)


@router.post("/signup", response_model=SessionResponse, status_code=status.HTTP_201_CREATED)
async def sign_up(
    body: Credentials,
    response: Response,
    workspace: Workspace = Depends(get_workspace),
    registry: WorkspaceRegistry = Depends(get_registry),
    settings: Settings = Depends(get_settings),
):
    try:
        session = await workspace.gateway.sign_up(body.email, body.password)
    except AuthError as e:
        logging.info(f"Sign-up failed ({e.kind.value})")
        raise _auth_failed(e)
    remember_workspace(response, workspace, registry, settings)
    return SessionResponse(authenticated=True, session=session)


@router.post("/password-reset")
async def send_password_reset(body: PasswordResetRequest, workspace: Workspace = Depends(get_workspace)):
    try:
        await workspace.gateway.send_password_reset(body.email)
    except AuthError as e:
        raise _auth_failed(e)
    return {"message": RESET_SENT_TEXT}


@router.post("/signout", response_model=SessionResponse)
async def sign_out(
    response: Response,
    workspace: Workspace = Depends(get_workspace),
    registry: WorkspaceRegistry = Depends(get_registry),
    settings: Settings = Depends(get_settings),
):
    await workspace.gateway.sign_out()
    forget_workspace(response, workspace, registry, settings)
    return SessionResponse(authenticated=False)


@router.get("/session", response_model=SessionResponse)
async def current_session(workspace: Workspace = Depends(get_workspace)):
    session = workspace.gateway.current_session
    return SessionResponse(authenticated=session is not None, session=session)
