import logging
from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, status

from app.core import schemas
from app.core.bridge.tools import ToolClient
from app.core.dependencies import get_tool_client
from app.core.exceptions import ToolCallError

router = APIRouter(prefix="/api/tools", tags=["Tools"])

tool_client_dep = Annotated[ToolClient, Depends(get_tool_client)]


@router.post("/{tool}")
async def call_tool(tool: str, payload: schemas.ToolCallRequest, tools: tool_client_dep):
    """Run a named tool on the remote orchestrator and pass its reply through."""
    try:
        return await tools.call_tool(tool, payload.args)
    except ToolCallError as error:
        logging.error(f"Tool call failed: {error}")
        raise HTTPException(status.HTTP_502_BAD_GATEWAY, error.message)
