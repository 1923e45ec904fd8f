"""Shared pytest fixtures for testing."""

import asyncio
from typing import Any, AsyncGenerator, Dict, List, Optional
from uuid import uuid4

import pytest
import pytest_asyncio
from fastapi import Body, FastAPI
from fastapi.responses import JSONResponse
from httpx import ASGITransport, AsyncClient

from botflow.config import CanvasConfig, PersistenceConfig, Settings
from botflow.graph import FlowGraph
from botflow.ids import new_draft_flow_id
from botflow.models import Flow, Position
from botflow.nodes import NodeCatalog, default_catalog
from botflow.persistence import FlowApiClient


# =============================================================================
# Fake Backend
# =============================================================================


class FakeBackend:
    """In-memory flow backend with call recording and failure injection."""

    def __init__(self) -> None:
        self.bots: Dict[str, Dict[str, Any]] = {}
        self.flows: Dict[str, Dict[str, Any]] = {}
        self.creates: List[Dict[str, Any]] = []
        self.updates: List[Dict[str, Any]] = []

        # Next request fails with this status
        self.fail_status: Optional[int] = None

        # Next write request waits on this event
        self.gate: Optional[asyncio.Event] = None
        self.entered = asyncio.Event()

    def add_bot(self, name: str = "Support bot") -> str:
        bot_id = f"bot_{uuid4().hex[:12]}"
        self.bots[bot_id] = {"id": bot_id, "name": name, "description": "", "isEnabled": True}
        return bot_id

    def add_flow(self, bot_id: str, payload: Dict[str, Any]) -> str:
        flow_id = str(uuid4())
        self.flows[flow_id] = {**payload, "id": flow_id, "botId": bot_id, "version": 1}
        return flow_id

    async def hold(self) -> None:
        if self.gate is not None:
            gate, self.gate = self.gate, None
            self.entered.set()
            await gate.wait()

    def failure(self) -> Optional[JSONResponse]:
        if self.fail_status is None:
            return None
        status, self.fail_status = self.fail_status, None
        return JSONResponse(status_code=status, content={"message": "Injected failure"})


def create_backend_app(backend: FakeBackend) -> FastAPI:
    """FastAPI app serving the flow endpoints from a FakeBackend."""
    app = FastAPI()

    def not_found(message: str) -> JSONResponse:
        return JSONResponse(status_code=404, content={"message": message})

    @app.get("/bots/{bot_id}")
    async def get_bot(bot_id: str):
        bot = backend.bots.get(bot_id)
        if bot is None:
            return not_found("Bot not found")
        return {"data": bot}

    @app.get("/bots/{bot_id}/flows")
    async def list_flows(bot_id: str):
        if bot_id not in backend.bots:
            return not_found("Bot not found")
        return {
            "data": [
                {
                    "id": f["id"],
                    "name": f.get("name", ""),
                    "version": f["version"],
                    "isActive": f.get("isActive", False),
                }
                for f in backend.flows.values()
                if f["botId"] == bot_id
            ]
        }

    @app.post("/bots/{bot_id}/flows", status_code=201)
    async def create_flow(bot_id: str, body: Dict[str, Any] = Body(...)):
        failure = backend.failure()
        if failure:
            return failure
        if bot_id not in backend.bots:
            return not_found("Bot not found")
        await backend.hold()

        backend.creates.append(body)
        flow_id = backend.add_flow(bot_id, body)
        return JSONResponse(status_code=201, content={"data": backend.flows[flow_id]})

    @app.get("/flows/{flow_id}")
    async def get_flow(flow_id: str):
        flow = backend.flows.get(flow_id)
        if flow is None:
            return not_found("Flow not found")
        return {"data": flow}

    @app.put("/flows/{flow_id}")
    async def update_flow(flow_id: str, body: Dict[str, Any] = Body(...)):
        failure = backend.failure()
        if failure:
            return failure
        if flow_id not in backend.flows:
            return not_found("Flow not found")
        await backend.hold()

        backend.updates.append(body)
        stored = backend.flows[flow_id]
        version = stored["version"] + 1
        backend.flows[flow_id] = {**body, "id": flow_id, "botId": stored["botId"], "version": version}
        return {"data": backend.flows[flow_id]}

    return app


# =============================================================================
# Settings / Catalog Fixtures
# =============================================================================


@pytest.fixture
def catalog() -> NodeCatalog:
    """Built-in node catalog."""
    return default_catalog()


@pytest.fixture
def canvas_config() -> CanvasConfig:
    return CanvasConfig()


@pytest.fixture
def persistence_config() -> PersistenceConfig:
    return PersistenceConfig(base_url="http://test", auto_save=False, auto_save_delay_s=0.01)


@pytest.fixture
def settings(canvas_config, persistence_config) -> Settings:
    return Settings(canvas=canvas_config, persistence=persistence_config)


# =============================================================================
# Graph Fixtures
# =============================================================================


@pytest.fixture
def bot_id() -> str:
    """Generate a test bot ID."""
    return f"bot_{uuid4().hex[:12]}"


@pytest.fixture
def draft_flow(bot_id) -> Flow:
    """Empty draft flow."""
    return Flow(id=new_draft_flow_id(), bot_id=bot_id, name="Main flow")


@pytest.fixture
def graph(draft_flow, catalog) -> FlowGraph:
    return FlowGraph(draft_flow, catalog)


@pytest.fixture
def greeting_graph(graph) -> FlowGraph:
    """Keyword trigger connected to a text message."""
    trigger = graph.add_node("trigger-keyword", Position(100, 100))
    reply = graph.add_node("action-send-text", Position(400, 100))
    graph.add_edge(trigger.id, reply.id)
    return graph


# =============================================================================
# API Fixtures
# =============================================================================


@pytest.fixture
def backend() -> FakeBackend:
    return FakeBackend()


@pytest.fixture
def app(backend) -> FastAPI:
    """Create test FastAPI application."""
    return create_backend_app(backend)


@pytest_asyncio.fixture
async def api_client(app: FastAPI, persistence_config) -> AsyncGenerator[FlowApiClient, None]:
    """Flow API client talking to the fake backend."""
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield FlowApiClient(persistence_config, http_client=ac)
