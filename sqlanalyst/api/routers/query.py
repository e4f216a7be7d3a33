import asyncio
import logging

from fastapi import APIRouter, Depends, HTTPException, status

from sqlanalyst.api.deps import get_workspace, require_session
from sqlanalyst.models.domain import OutcomeResponse, PromptRequest, QueryOutcome
from sqlanalyst.presentation import render_outcome
from sqlanalyst.services.workspaces import Workspace

router = APIRouter(prefix="/query", tags=["query"], dependencies=[Depends(require_session)])


def _to_response(outcome: QueryOutcome) -> OutcomeResponse:
    return OutcomeResponse(
        status=outcome.status,
        payload=outcome.payload,
        message=outcome.message,
        rendered=render_outcome(outcome),
    )


@router.get("", response_model=OutcomeResponse)
async def get_outcome(workspace: Workspace = Depends(get_workspace)):
    return _to_response(workspace.query_flow().outcome)


@router.post("", response_model=OutcomeResponse)
async def submit_query(body: PromptRequest, workspace: Workspace = Depends(get_workspace)):
    """Submit a question and wait for it to settle.

    Failures from the analysis service are returned as a ``failed`` outcome,
    not as an HTTP error; the flow is immediately ready for another submission.
    """
    flow = workspace.query_flow()
    task = flow.submit(body.prompt)
    if task is None:
        if not body.prompt.strip():
            raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Prompt cannot be empty")
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail="A query is already in progress")

    logging.info(f"Workspace {workspace.id} submitted query: '{body.prompt[:50]}...'")
    # Shielded: a disconnecting client must not cancel the outbound call.
    outcome = await asyncio.shield(task)

    if not flow.mounted:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Session ended before the query completed",
        )
    return _to_response(outcome)
