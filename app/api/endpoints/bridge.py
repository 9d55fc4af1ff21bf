from typing import Annotated

from fastapi import APIRouter, Depends, status
from fastapi.responses import JSONResponse

from app.core import schemas
from app.core.bridge.client import QueryBridge
from app.core.dependencies import get_bridge

router = APIRouter(prefix="/api", tags=["Bridge"])

bridge_dep = Annotated[QueryBridge, Depends(get_bridge)]


@router.post("/bridge")
async def run_statement(payload: schemas.QueryRequest, bridge: bridge_dep):
    """
    Forward one SQL statement to the remote executor.

    200 -> {"rows": [...]} (plus command/success for mutating statements,
           or raw when the executor reply was not recognised)
    500 -> {"error": "..."}
    """
    result = await bridge.execute(payload.query)
    body = result.model_dump(exclude_unset=True)

    if result.is_error:
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, content=body
        )
    return body
