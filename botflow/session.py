"""
Editor Session.

One open flow editor for a bot: graph, canvas, connection machine,
configuration forms and persistence wired together.
"""

import logging
from typing import Optional

from .canvas import CanvasController, ConnectionStateMachine
from .config import Settings, get_settings
from .exceptions import PersistenceError
from .forms import ConfigFormEngine
from .graph import FlowGraph, FlowValidator
from .models import Bot, Flow, ValidationResult
from .nodes import NodeCatalog, default_catalog
from .persistence import FlowApiClient, FlowSaver, Notifier, PersistenceAdapter

logger = logging.getLogger(__name__)


class EditorSession:
    """
    Editor for one flow of a bot.

    Use EditorSession.open() to load the bot's first flow, or a fresh
    draft when it has none.

    Example:
        >>> session = await EditorSession.open("bot-1")
        >>> node = session.canvas.drop_node("trigger-keyword", Position(100, 100))
        >>> await session.save()
    """

    def __init__(
        self,
        bot: Bot,
        flow: Flow,
        adapter: PersistenceAdapter,
        catalog: NodeCatalog,
        settings: Optional[Settings] = None,
        notifier: Optional[Notifier] = None,
        owns_client: bool = False,
    ):
        self.settings = settings or get_settings()
        self.bot = bot
        self.catalog = catalog
        self.adapter = adapter
        self._owns_client = owns_client

        self.graph = FlowGraph(flow, catalog)
        self.connections = ConnectionStateMachine(self.graph)
        self.canvas = CanvasController(
            self.graph,
            config=self.settings.canvas,
            connections=self.connections,
        )
        self.forms = ConfigFormEngine(self.graph)
        self.validator = FlowValidator(catalog)
        self.saver: FlowSaver = adapter.saver_for(self.graph, notifier=notifier)

        if self.settings.persistence.auto_save:
            self.saver.attach()

    @classmethod
    async def open(
        cls,
        bot_id: str,
        client: Optional[FlowApiClient] = None,
        catalog: Optional[NodeCatalog] = None,
        settings: Optional[Settings] = None,
        notifier: Optional[Notifier] = None,
    ) -> "EditorSession":
        """
        Open the editor for a bot.

        Args:
            bot_id: Bot whose flow is edited
            client: Backend client; built from settings when omitted
            catalog: Node catalog; the built-in one when omitted
            settings: Settings; the cached global ones when omitted
            notifier: Receives save errors

        Raises:
            PersistenceError: If the bot or its flow cannot be fetched
        """
        settings = settings or get_settings()
        catalog = catalog or default_catalog()
        owns_client = client is None
        client = client or FlowApiClient(settings.persistence)
        adapter = PersistenceAdapter(client, catalog, config=settings.persistence)

        try:
            bot = await adapter.get_bot(bot_id)
            summaries = await adapter.list_flows(bot_id)

            if summaries:
                flow = await adapter.load_flow(summaries[0].id, bot_id=bot_id)
            else:
                flow = adapter.new_draft(bot_id)
                logger.info(f"Bot {bot_id} has no flows, starting draft {flow.id}")
        except PersistenceError:
            if owns_client:
                await client.close()
            raise

        logger.info(f"Opened editor for bot {bot_id} on flow {flow.id}")
        return cls(
            bot,
            flow,
            adapter,
            catalog,
            settings=settings,
            notifier=notifier,
            owns_client=owns_client,
        )

    @property
    def flow(self) -> Flow:
        return self.graph.flow

    async def save(self):
        """Save immediately, bypassing the debounce timer."""
        return await self.saver.save()

    def validate(self) -> ValidationResult:
        return self.validator.validate(self.flow)

    async def flush(self) -> None:
        """Wait for pending and in-flight saves."""
        await self.saver.drain()

    def close(self) -> None:
        """Stop auto-saving. A pending save is started, in-flight saves are not aborted."""
        self.saver.close()
        logger.info(f"Closed editor on flow {self.flow.id}")

    async def aclose(self) -> None:
        """Close the editor, wait for its saves, and release a client it created."""
        self.close()
        await self.saver.drain()
        if self._owns_client:
            await self.adapter.client.close()

    async def __aenter__(self) -> "EditorSession":
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self.aclose()
