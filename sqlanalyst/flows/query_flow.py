"""Lifecycle of a single natural-language query.

One flow instance backs one dashboard. It holds at most one outstanding
request and keeps only the most recent outcome.
"""

from __future__ import annotations

import asyncio
import logging
from enum import Enum
from typing import Any, Optional, Protocol

from ..errors import QueryError
from ..models.domain import QueryOutcome, QueryRequest

logger = logging.getLogger(__name__)

GENERIC_FAILURE_MESSAGE = "Something went wrong while analyzing your question. Please try again."


class AnalysisBackend(Protocol):
    async def analyze(self, request: QueryRequest) -> Any: ...


class FlowState(str, Enum):
    IDLE = "idle"
    PENDING = "pending"
    SUCCEEDED = "succeeded"
    FAILED = "failed"


class QuerySubmissionFlow:
    def __init__(
        self,
        backend: AnalysisBackend,
        connection_id: str,
        dialect: str = "postgres",
    ) -> None:
        self.backend = backend
        self.connection_id = connection_id
        self.dialect = dialect
        self.outcome = QueryOutcome()
        self.mounted = True
        self._task: Optional[asyncio.Task] = None

    @property
    def state(self) -> FlowState:
        return FlowState(self.outcome.status)

    @property
    def is_pending(self) -> bool:
        return self.state == FlowState.PENDING

    def can_submit(self, prompt: str) -> bool:
        return self.mounted and bool(prompt.strip()) and not self.is_pending

    def submit(self, prompt: str) -> Optional[asyncio.Task]:
        """Start a request for ``prompt``.

        Returns the running task, or ``None`` when the submission is rejected
        (blank prompt, a request already pending, or the flow unmounted).
        Must be called from a running event loop.
        """
        if not self.can_submit(prompt):
            return None

        request = QueryRequest(
            prompt=prompt,
            type=self.dialect,
            connection_id=self.connection_id,
        )
        self.outcome = QueryOutcome.pending()
        self._task = asyncio.create_task(self._run(request))
        return self._task

    async def _run(self, request: QueryRequest) -> QueryOutcome:
        try:
            payload = await self.backend.analyze(request)
            outcome = QueryOutcome.success(payload)
        except QueryError as e:
            outcome = QueryOutcome.failure(str(e) or GENERIC_FAILURE_MESSAGE)
        except Exception as e:
            logger.error("Unexpected error during analysis: %s", e, exc_info=True)
            outcome = QueryOutcome.failure(str(e) or GENERIC_FAILURE_MESSAGE)

        if not self.mounted:
            logger.debug("Flow unmounted before response arrived, dropping outcome")
            return outcome

        self.outcome = outcome
        logger.info("Query settled with status %s", outcome.status)
        return outcome

    def unmount(self) -> None:
        """Detach from the view; an in-flight response will be ignored."""
        self.mounted = False
