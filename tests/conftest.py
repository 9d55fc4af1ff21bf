import asyncio
import json
import os

import httpx
import pytest
import pytest_asyncio
from httpx import AsyncClient, ASGITransport

# Settings are read at import time, point them at a fake executor first
os.environ.setdefault("BRIDGE_URL", "http://executor.test/lambda/invoke")

from app.main import app
from app.core.bridge.aggregate import SnapshotStore
from app.core.bridge.client import QueryBridge
from app.core.bridge.tools import ToolClient
from app.core.config import settings
from app.core.dependencies import get_bridge, get_snapshot_store, get_tool_client


class StubExecutor:
    """
    Stand-in for the remote executor behind an httpx.MockTransport.

    Replies are chosen per request: the first route whose marker occurs in
    the forwarded SQL wins, otherwise `default` is used. A route value is
    either an httpx.Response or an exception to raise.
    """

    def __init__(self):
        self.requests = []
        self.routes = {}
        self.default = self.select_reply([])
        self.delay = 0.0
        self.active = 0
        self.peak = 0

    # Response builders -------------------------------------------------------
    @staticmethod
    def envelope(body, encode=True, status_code=200):
        inner = json.dumps(body) if encode else body
        return httpx.Response(
            status_code, json={"result": {"statusCode": 200, "body": inner}}
        )

    def select_reply(self, rows, encode=True):
        return self.envelope(
            {"success": True, "result": [{"json_agg": rows}]}, encode=encode
        )

    def command_reply(self, command, encode=True):
        return self.envelope(
            {"success": True, "result": {"command": command, "rowCount": 1}},
            encode=encode,
        )

    # Transport handler -------------------------------------------------------
    async def handle(self, request: httpx.Request) -> httpx.Response:
        envelope = json.loads(request.content)
        self.requests.append(envelope)
        sql = envelope["payload"].get("sql", "")

        self.active += 1
        self.peak = max(self.peak, self.active)
        try:
            if self.delay:
                await asyncio.sleep(self.delay)
        finally:
            self.active -= 1

        reply = self.default
        for marker, route in self.routes.items():
            if marker in sql:
                reply = route
                break
        if isinstance(reply, Exception):
            raise reply
        # Fresh response per request so one reply can serve many queries
        return httpx.Response(
            reply.status_code, headers=reply.headers, content=reply.content
        )

    @property
    def transport(self):
        return httpx.MockTransport(self.handle)

    @property
    def last_sql(self):
        return self.requests[-1]["payload"]["sql"]


@pytest.fixture
def executor():
    return StubExecutor()


@pytest.fixture
def bridge(executor):
    return QueryBridge(
        settings.BRIDGE_URL, settings.EXECUTOR_FUNCTION_NAME, transport=executor.transport
    )


@pytest.fixture
def tool_client(executor):
    return ToolClient(
        settings.BRIDGE_URL,
        settings.ORCHESTRATOR_FUNCTION_NAME,
        transport=executor.transport,
    )


@pytest.fixture
def store():
    return SnapshotStore()


# Client
@pytest_asyncio.fixture(scope="function")
async def client(bridge, tool_client, store):
    app.dependency_overrides[get_bridge] = lambda: bridge
    app.dependency_overrides[get_tool_client] = lambda: tool_client
    app.dependency_overrides[get_snapshot_store] = lambda: store

    async with AsyncClient(
        transport=ASGITransport(app=app), base_url="http://test"
    ) as ac:
        yield ac

    app.dependency_overrides.clear()
