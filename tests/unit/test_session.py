"""End-to-end tests for the editor session."""

import pytest
from httpx import ASGITransport, AsyncClient

from botflow.config import PersistenceConfig, Settings
from botflow.exceptions import FlowNotFoundError
from botflow.models import Position
from botflow.persistence import FlowApiClient
from botflow.session import EditorSession


class TestEditorSession:
    """Tests for EditorSession."""

    @pytest.mark.asyncio
    async def test_bot_without_flows_opens_draft(self, api_client, backend, settings):
        """Test a bot with no flows gets an in-memory draft."""
        bot_id = backend.add_bot()

        session = await EditorSession.open(bot_id, client=api_client, settings=settings)

        assert session.flow.is_draft is True
        assert session.flow.name == "Main flow"
        assert session.flow.bot_id == bot_id
        assert backend.creates == []

    @pytest.mark.asyncio
    async def test_missing_bot(self, api_client, settings):
        with pytest.raises(FlowNotFoundError):
            await EditorSession.open("bot_missing", client=api_client, settings=settings)

    @pytest.mark.asyncio
    async def test_build_save_reload(self, api_client, backend, settings):
        """Test drop, connect, save and reload through the backend."""
        bot_id = backend.add_bot()
        session = await EditorSession.open(bot_id, client=api_client, settings=settings)

        trigger = session.canvas.drop_node("trigger-keyword", Position(100, 100))
        reply = session.canvas.drop_node("action-send-text", Position(400, 100))
        session.canvas.click_output(trigger.id)
        result = session.canvas.click_input(reply.id)
        assert result.created is True

        form = session.forms.open(reply.id)
        form.set_value("message", "Hello!")
        form.save()

        await session.save()
        session.close()

        reopened = await EditorSession.open(bot_id, client=api_client, settings=settings)
        flow = reopened.flow

        assert flow.id == session.flow.id
        assert len(flow.nodes) == 2
        assert len(flow.edges) == 1
        edge = flow.edges[0]
        assert (edge.source_node_id, edge.target_node_id) == (trigger.id, reply.id)
        assert reopened.graph.get_node(reply.id).configuration == {"message": "Hello!"}
        assert reopened.graph.get_node(trigger.id).position == Position(100, 100)
        assert len(backend.creates) == 1

    @pytest.mark.asyncio
    async def test_auto_save(self, api_client, backend):
        """Test mutations are saved after the debounce delay."""
        settings = Settings(
            persistence=PersistenceConfig(
                base_url="http://test", auto_save=True, auto_save_delay_s=0.01
            )
        )
        bot_id = backend.add_bot()
        session = await EditorSession.open(bot_id, client=api_client, settings=settings)

        session.canvas.drop_node("trigger-keyword", Position(100, 100))
        session.canvas.drop_node("action-send-text", Position(400, 100))
        await session.flush()

        assert len(backend.creates) == 1
        assert session.flow.is_draft is False

        session.graph.add_edge(*[n.id for n in session.graph.nodes])
        await session.flush()

        assert len(backend.creates) == 1
        assert len(backend.updates) == 1
        assert len(backend.flows[session.flow.id]["edges"]) == 1
        session.close()

    @pytest.mark.asyncio
    async def test_validate(self, api_client, backend, settings):
        bot_id = backend.add_bot()
        session = await EditorSession.open(bot_id, client=api_client, settings=settings)
        session.canvas.drop_node("trigger-keyword", Position(100, 100))

        result = session.validate()

        assert result.valid is True
        assert [w.field_key for w in result.warnings] == ["keywords"]


@pytest.fixture
def backend_transport(app, monkeypatch):
    """Route clients built by the session to the fake backend."""
    monkeypatch.setattr(
        FlowApiClient,
        "_create_http_client",
        lambda self: AsyncClient(transport=ASGITransport(app=app), base_url="http://test"),
    )


class TestSessionLifecycle:
    """Tests for closing sessions and their clients."""

    @pytest.mark.asyncio
    async def test_aclose_releases_own_client(self, backend_transport, backend, settings):
        """Test a client built by open() is closed with the session."""
        bot_id = backend.add_bot()
        session = await EditorSession.open(bot_id, settings=settings)
        http_client = session.adapter.client._http_client

        await session.aclose()

        assert http_client.is_closed is True

    @pytest.mark.asyncio
    async def test_aclose_keeps_borrowed_client(self, api_client, backend, settings):
        bot_id = backend.add_bot()
        session = await EditorSession.open(bot_id, client=api_client, settings=settings)

        await session.aclose()

        assert api_client._http_client.is_closed is False
        assert await api_client.get_bot(bot_id)

    @pytest.mark.asyncio
    async def test_failed_open_releases_own_client(self, backend_transport, settings, monkeypatch):
        clients = []
        original = FlowApiClient.close

        async def tracking_close(self):
            clients.append(self._http_client)
            await original(self)

        monkeypatch.setattr(FlowApiClient, "close", tracking_close)
        with pytest.raises(FlowNotFoundError):
            await EditorSession.open("bot_missing", settings=settings)

        assert len(clients) == 1
        assert clients[0].is_closed is True

    @pytest.mark.asyncio
    async def test_context_manager_saves_pending_edit(self, backend_transport, backend):
        """Test an edit made just before exit reaches the backend."""
        settings = Settings(
            persistence=PersistenceConfig(
                base_url="http://test", auto_save=True, auto_save_delay_s=10
            )
        )
        bot_id = backend.add_bot()

        async with await EditorSession.open(bot_id, settings=settings) as session:
            session.canvas.drop_node("trigger-keyword", Position(100, 100))

        assert len(backend.creates) == 1
        assert len(backend.flows[session.flow.id]["nodes"]) == 1
