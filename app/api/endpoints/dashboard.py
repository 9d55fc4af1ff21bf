from typing import Annotated

from fastapi import APIRouter, Depends

from app.core import schemas
from app.core.bridge.aggregate import SnapshotStore
from app.core.bridge.client import QueryBridge
from app.core.bridge.dashboard import DASHBOARD_BATCH
from app.core.dependencies import get_bridge, get_snapshot_store

router = APIRouter(prefix="/dashboard", tags=["Dashboard"])

bridge_dep = Annotated[QueryBridge, Depends(get_bridge)]
store_dep = Annotated[SnapshotStore, Depends(get_snapshot_store)]


@router.get("", response_model=schemas.Snapshot)
async def get_dashboard(bridge: bridge_dep, store: store_dep):
    """Return the current snapshot, loading the first one on demand."""
    if store.current is None:
        return await store.refresh(bridge, DASHBOARD_BATCH)
    return store.current


@router.post("/refresh", response_model=schemas.Snapshot)
async def refresh_dashboard(bridge: bridge_dep, store: store_dep):
    """Run the whole dashboard batch again and replace the snapshot."""
    return await store.refresh(bridge, DASHBOARD_BATCH)
