# app/core/bridge/tools.py
"""Call named tools on the remote orchestrator routine."""

import logging
from typing import Any, Dict, Optional

import httpx

from app.core import schemas
from app.core.exceptions import ToolCallError

logger = logging.getLogger(__name__)

TOOL_ACTION = "mcp_tool"


class ToolClient:
    def __init__(
        self,
        url: str,
        function_name: str,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.url = url
        self.function_name = function_name
        self.transport = transport

    def build_envelope(
        self, tool: str, args: Dict[str, Any]
    ) -> schemas.InvocationEnvelope:
        return schemas.InvocationEnvelope(
            function_name=self.function_name,
            payload={"action": TOOL_ACTION, "tool": tool, "args": args},
        )

    async def call_tool(self, tool: str, args: Optional[Dict[str, Any]] = None) -> Any:
        """
        Invoke a tool and return the orchestrator's decoded JSON response.

        Unlike the query bridge this raises, because tool responses have no
        uniform shape to fold an error into.

        Raises:
            ToolCallError: transport failure, non-2xx status or non-JSON reply
        """
        envelope = self.build_envelope(tool, args or {})
        logger.debug(f"Calling tool {tool}")

        try:
            async with httpx.AsyncClient(timeout=None, transport=self.transport) as client:
                response = await client.post(
                    self.url, json=envelope.model_dump(by_alias=True)
                )
        except httpx.HTTPError as e:
            raise ToolCallError(tool, str(e) or e.__class__.__name__) from e

        if response.is_error:
            raise ToolCallError(tool, f"MCP call failed (HTTP {response.status_code})")

        try:
            return response.json()
        except ValueError as e:
            raise ToolCallError(tool, f"Invalid JSON response: {e}") from e
