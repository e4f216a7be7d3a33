"""Simulated analysis used when ``MOCK_MODE`` is enabled.

Nothing here talks to the network. File selection and answers are delayed by
configurable amounts and produce canned text.
"""

import asyncio
import logging
from typing import Any, List, Optional

from ..models.domain import Message, QueryRequest, WorkspaceView

logger = logging.getLogger(__name__)


def upload_message(filename: str) -> str:
    return f'Successfully uploaded "{filename}". You can now ask questions about this dataset.'


def simulated_answer(prompt: str, filename: Optional[str] = None) -> str:
    if filename:
        return (
            "Analysis complete. This is a simulated response to your query: "
            f'"{prompt}" regarding the {filename} dataset.'
        )
    return f'Analysis complete. This is a simulated response to your query: "{prompt}".'


class MockAnalysisBackend:
    """Stand-in for ``TextToSqlClient`` with the same ``analyze`` signature."""

    def __init__(self, delay: float = 2.0) -> None:
        self.delay = delay

    async def analyze(self, request: QueryRequest) -> Any:
        await asyncio.sleep(self.delay)
        return {"response": simulated_answer(request.prompt)}


class UploadWorkspace:
    """Upload-centric variant: a selected dataset plus an ordered message log."""

    def __init__(self, upload_delay: float = 1.5, response_delay: float = 2.0) -> None:
        self.upload_delay = upload_delay
        self.response_delay = response_delay
        self.filename: Optional[str] = None
        self.messages: List[Message] = []
        self.is_uploading = False
        self.is_sending = False

    def can_send(self, prompt: str) -> bool:
        return bool(self.filename) and bool(prompt.strip()) and not self.is_sending

    async def select_file(self, filename: str) -> None:
        self.is_uploading = True
        try:
            await asyncio.sleep(self.upload_delay)
            self.filename = filename
            self.messages.append(Message(kind="system", content=upload_message(filename)))
            logger.info("Dataset %s ready", filename)
        finally:
            self.is_uploading = False

    async def send_prompt(self, prompt: str) -> bool:
        if not self.can_send(prompt):
            return False
        filename = self.filename
        self.messages.append(Message(kind="user", content=prompt))
        self.is_sending = True
        try:
            await asyncio.sleep(self.response_delay)
            # The file may have been removed while waiting; its log is gone too.
            if self.filename == filename:
                self.messages.append(Message(kind="ai", content=simulated_answer(prompt, filename)))
        finally:
            self.is_sending = False
        return True

    def remove_file(self) -> None:
        self.filename = None
        self.messages = []

    def view(self) -> WorkspaceView:
        return WorkspaceView(
            filename=self.filename,
            is_uploading=self.is_uploading,
            is_sending=self.is_sending,
            messages=list(self.messages),
        )
