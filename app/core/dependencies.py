from app.core.bridge.aggregate import SnapshotStore
from app.core.bridge.client import QueryBridge
from app.core.bridge.tools import ToolClient
from app.core.config import settings

# One snapshot slot per process, replaced wholesale on every refresh
snapshot_store = SnapshotStore()


# Routes reach the remote executor through these (tests override them)
def get_bridge() -> QueryBridge:
    return QueryBridge(settings.BRIDGE_URL, settings.EXECUTOR_FUNCTION_NAME)


def get_tool_client() -> ToolClient:
    return ToolClient(settings.BRIDGE_URL, settings.ORCHESTRATOR_FUNCTION_NAME)


def get_snapshot_store() -> SnapshotStore:
    return snapshot_store
