"""Upload-centric flow, available only when ``MOCK_MODE`` is enabled."""

from fastapi import APIRouter, Depends, HTTPException, status

from sqlanalyst.api.deps import get_upload_workspace
from sqlanalyst.models.domain import FileSelection, PromptRequest, WorkspaceView
from sqlanalyst.services.mock_analysis import UploadWorkspace

router = APIRouter(prefix="/workspace", tags=["workspace"])


@router.get("", response_model=WorkspaceView)
async def get_workspace_view(upload: UploadWorkspace = Depends(get_upload_workspace)):
    return upload.view()


@router.post("/file", response_model=WorkspaceView)
async def select_file(body: FileSelection, upload: UploadWorkspace = Depends(get_upload_workspace)):
    filename = body.filename.strip()
    if not filename:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Filename cannot be empty")
    await upload.select_file(filename)
    return upload.view()


@router.delete("/file", response_model=WorkspaceView)
async def remove_file(upload: UploadWorkspace = Depends(get_upload_workspace)):
    upload.remove_file()
    return upload.view()


@router.post("/messages", response_model=WorkspaceView)
async def send_prompt(body: PromptRequest, upload: UploadWorkspace = Depends(get_upload_workspace)):
    if upload.filename is None:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Upload a SQL file to get started")
    if not body.prompt.strip():
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Prompt cannot be empty")
    if not await upload.send_prompt(body.prompt):
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail="A prompt is already being processed")
    return upload.view()
