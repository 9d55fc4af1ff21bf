# app/core/bridge/client.py
"""
QUERY BRIDGE - Forward one SQL statement to the remote executor

Data Flow:
    sql → prepare_statement() → InvocationEnvelope → POST → decode_envelope()
        → NormalizedResult

Known limitation:
    No timeout, retry or backoff is applied to the executor call. A hung
    executor hangs the caller until the connection is dropped.
"""

import logging
from typing import Any, Optional

import httpx

from app.core import schemas
from app.core.bridge.envelope import decode_envelope, to_normalized
from app.core.bridge.statement import prepare_statement

logger = logging.getLogger(__name__)


def _describe(error: Exception) -> str:
    # Some httpx errors carry an empty message
    return str(error) or error.__class__.__name__


class QueryBridge:
    """Translate caller SQL into executor invocations and back."""

    def __init__(
        self,
        url: str,
        function_name: str,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        """
        Args:
            url: Remote invocation endpoint
            function_name: Remote routine that executes the SQL
            transport: Optional httpx transport (tests pass a MockTransport)
        """
        self.url = url
        self.function_name = function_name
        self.transport = transport

    def build_envelope(self, sql: str) -> schemas.InvocationEnvelope:
        return schemas.InvocationEnvelope(
            function_name=self.function_name, payload={"sql": sql}
        )

    async def _post(self, envelope: schemas.InvocationEnvelope) -> httpx.Response:
        # Each call opens and tears down its own connection
        async with httpx.AsyncClient(timeout=None, transport=self.transport) as client:
            return await client.post(self.url, json=envelope.model_dump(by_alias=True))

    @staticmethod
    def _error_from_status(response: httpx.Response) -> schemas.NormalizedResult:
        message = f"Executor returned HTTP {response.status_code}"
        try:
            data: Any = response.json()
        except ValueError:
            data = None
        if isinstance(data, dict) and data.get("error"):
            message = str(data["error"])
        return schemas.NormalizedResult(error=message)

    async def execute(self, sql: str) -> schemas.NormalizedResult:
        """
        Run one statement on the remote executor.

        Never raises: transport failures, non-2xx statuses and unparseable
        responses all come back as {"error": ...}.

        Example:
            await bridge.execute("SELECT id FROM t")
            -> NormalizedResult(rows=[{"id": 1}, {"id": 2}])
        """
        statement, row_producing = prepare_statement(sql)
        logger.debug(f"Forwarding statement (row_producing={row_producing}): {statement}")

        try:
            response = await self._post(self.build_envelope(statement))
            if response.is_error:
                result = self._error_from_status(response)
                logger.warning(f"Executor rejected statement: {result.error}")
                return result

            data = response.json()
            result = to_normalized(decode_envelope(data, row_producing))

        except httpx.HTTPError as e:
            logger.warning(f"Executor unreachable: {_describe(e)}")
            return schemas.NormalizedResult(error=_describe(e))
        except Exception as e:
            logger.error(f"Failed to decode executor response: {_describe(e)}")
            return schemas.NormalizedResult(error=_describe(e))

        if result.is_error:
            logger.warning(f"Statement failed on executor: {result.error}")
        return result
