"""Server-rendered pages.

Forms post form-encoded data and every successful POST answers with a 303
redirect, so reloading a page never resubmits credentials or a question.
"""

import asyncio
import logging

from fastapi import APIRouter, Depends, Form, status
from fastapi.responses import HTMLResponse, RedirectResponse

from sqlanalyst.api.deps import (
    attach_workspace_cookie,
    forget_workspace,
    get_registry,
    get_workspace,
    remember_workspace,
)
from sqlanalyst.config import Settings, get_settings
from sqlanalyst.errors import AuthError
from sqlanalyst.flows.session_guard import GuardState, Loading, Redirect
from sqlanalyst.presentation import render_dashboard_page, render_loading_page, render_login_page
from sqlanalyst.services.workspaces import Workspace, WorkspaceRegistry

router = APIRouter(tags=["pages"])


def _see_other(location: str) -> RedirectResponse:
    return RedirectResponse(location, status_code=status.HTTP_303_SEE_OTHER)


@router.get("/", include_in_schema=False)
async def index():
    return _see_other("/login")


@router.get("/login", response_class=HTMLResponse, include_in_schema=False)
async def login_page(mode: str = "signin"):
    return HTMLResponse(content=render_login_page(mode=mode))


@router.post("/login", include_in_schema=False)
async def login_submit(
    email: str = Form(...),
    password: str = Form(...),
    mode: str = Form("signin"),
    workspace: Workspace = Depends(get_workspace),
    registry: WorkspaceRegistry = Depends(get_registry),
    settings: Settings = Depends(get_settings),
):
    try:
        if mode == "signup":
            await workspace.gateway.sign_up(email, password)
        else:
            await workspace.gateway.sign_in(email, password)
    except AuthError as e:
        logging.info(f"Login form rejected ({e.kind.value})")
        return HTMLResponse(
            content=render_login_page(mode=mode, error=e.message, email=email),
            status_code=status.HTTP_400_BAD_REQUEST,
        )

    response = _see_other("/dashboard")
    remember_workspace(response, workspace, registry, settings)
    return response


@router.post("/login/reset", include_in_schema=False)
async def reset_submit(email: str = Form(...), workspace: Workspace = Depends(get_workspace)):
    try:
        await workspace.gateway.send_password_reset(email)
    except AuthError as e:
        return HTMLResponse(
            content=render_login_page(mode="reset", error=e.message, email=email),
            status_code=status.HTTP_400_BAD_REQUEST,
        )
    return HTMLResponse(content=render_login_page(mode="reset", reset_sent=True, email=email))


@router.get("/dashboard", include_in_schema=False)
async def dashboard(
    workspace: Workspace = Depends(get_workspace),
    registry: WorkspaceRegistry = Depends(get_registry),
    settings: Settings = Depends(get_settings),
):
    guard = workspace.dashboard_guard()

    def protected():
        upload = workspace.upload if workspace.mock_mode else None
        return HTMLResponse(content=render_dashboard_page(
            guard.session.email,
            workspace.query_flow().outcome,
            messages=upload.messages if upload else None,
        ))

    view = guard.render(protected)
    if isinstance(view, Loading):
        return HTMLResponse(content=render_loading_page())
    if isinstance(view, Redirect):
        return _see_other(view.location)
    if workspace in registry:
        attach_workspace_cookie(view, workspace, settings)
    return view


@router.post("/dashboard", include_in_schema=False)
async def dashboard_submit(
    prompt: str = Form(""),
    workspace: Workspace = Depends(get_workspace),
):
    guard = workspace.dashboard_guard()
    if guard.state != GuardState.AUTHENTICATED:
        return _see_other("/login")

    # Blank prompts and overlapping submissions are no-ops.
    task = workspace.query_flow().submit(prompt)
    if task is not None:
        logging.info(f"Workspace {workspace.id} submitted query from dashboard: '{prompt[:50]}...'")
        await asyncio.shield(task)
    return _see_other("/dashboard")


@router.post("/logout", include_in_schema=False)
async def logout(
    workspace: Workspace = Depends(get_workspace),
    registry: WorkspaceRegistry = Depends(get_registry),
    settings: Settings = Depends(get_settings),
):
    await workspace.gateway.sign_out()
    response = _see_other("/login")
    forget_workspace(response, workspace, registry, settings)
    return response
