import logging
from typing import Any

import anyio
import requests

from ..errors import ParseError, ResponseError, TransportError
from ..models.domain import QueryRequest

logger = logging.getLogger(__name__)


class TextToSqlClient:
    """Relay to the external text-to-SQL API.

    The bearer token is held here, server-side; callers only ever see the
    parsed JSON payload or one of the ``QueryError`` subclasses.
    """

    def __init__(self, endpoint: str, token: str, timeout: float = 60.0) -> None:
        self.endpoint = endpoint
        self.timeout = timeout
        self.session = requests.Session()
        self.session.headers.update({
            "Authorization": f"Bearer {token}",
            "Content-Type": "application/json",
        })

    def _post(self, request: QueryRequest) -> Any:
        try:
            resp = self.session.post(self.endpoint, json=request.to_wire(), timeout=self.timeout)
        except requests.RequestException as exc:
            logger.error("Text-to-SQL service unreachable: %s", exc)
            raise TransportError(str(exc) or "Network request failed") from exc

        if not 200 <= resp.status_code < 300:
            logger.warning("Text-to-SQL service returned %s", resp.status_code)
            raise ResponseError(resp.status_code, resp.text[:200])

        try:
            return resp.json()
        except ValueError as exc:
            logger.error("Malformed response from text-to-SQL service: %s", exc)
            raise ParseError("Could not parse the response from the analysis service") from exc

    async def analyze(self, request: QueryRequest) -> Any:
        logger.info("Sending prompt to text-to-SQL service: '%s...'", request.prompt[:50])
        return await anyio.to_thread.run_sync(self._post, request)
