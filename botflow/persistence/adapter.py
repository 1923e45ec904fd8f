"""
Persistence Adapter.

Loads flows from the backend and saves the in-memory graph back.

Save protocol:
- A draft flow (client id) is created with POST and its id is rebound
  to the server id, exactly once.
- A persisted flow is updated with PUT; a 404 falls back to create.
- Every save takes a sequence number; only the latest response is
  applied, except that a server-issued id is never discarded.
- Failures are logged and reported to the notifier; in-memory state is
  kept as it is.
"""

import asyncio
import logging
from dataclasses import dataclass
from typing import Any, Callable, Dict, List, Optional, Set

from ..config import PersistenceConfig, get_settings
from ..exceptions import BotflowError, FlowNotFoundError, PersistenceError
from ..graph.model import FlowGraph, GraphChange
from ..ids import new_draft_flow_id
from ..models import Bot, Flow, FlowSummary
from ..nodes import NodeCatalog
from .client import FlowApiClient
from .wire import from_wire, to_wire

logger = logging.getLogger(__name__)

Notifier = Callable[[BotflowError], None]


@dataclass
class SaveResult:
    """Outcome of one save call."""

    sequence: int
    flow_id: str
    created: bool = False
    applied: bool = False


class FlowSaver:
    """
    Saves one flow graph.

    Features:
    - Exactly-once draft promotion
    - Per-flow sequence numbers (stale responses ignored)
    - Debounced auto-save on graph mutations
    """

    def __init__(
        self,
        graph: FlowGraph,
        client: FlowApiClient,
        config: Optional[PersistenceConfig] = None,
        notifier: Optional[Notifier] = None,
    ):
        self.graph = graph
        self.client = client
        self.config = config or get_settings().persistence
        self.notifier = notifier

        self._issued = 0
        self._applied = 0
        self._promotion_lock = asyncio.Lock()
        self._timer: Optional[asyncio.Task] = None
        self._inflight: Set[asyncio.Task] = set()
        self._unsubscribe: Optional[Callable[[], None]] = None
        self._closed = False

        self.creates = 0
        self.last_error: Optional[PersistenceError] = None

    @property
    def flow(self) -> Flow:
        return self.graph.flow

    @property
    def last_issued(self) -> int:
        return self._issued

    @property
    def last_applied(self) -> int:
        return self._applied

    # ------------------------------------------------------------------
    # Save
    # ------------------------------------------------------------------

    async def save(self) -> Optional[SaveResult]:
        """
        Save the flow now.

        Returns:
            SaveResult, or None if the save failed (the error has been
            reported to the notifier)
        """
        self._issued += 1
        sequence = self._issued

        try:
            if self.flow.is_draft:
                async with self._promotion_lock:
                    # Another save may have promoted the flow meanwhile
                    if self.flow.is_draft:
                        return await self._create(sequence)
            return await self._update(sequence)
        except PersistenceError as e:
            self._report(e, sequence)
            return None

    async def _create(self, sequence: int) -> SaveResult:
        payload = to_wire(self.flow, include_id=False)
        data = await self.client.create_flow(self.flow.bot_id, payload)
        self.creates += 1

        server_id = self._server_id(data)
        old_id = self.flow.id
        self.graph.rebind_flow_id(server_id)
        logger.info(f"Flow {old_id} persisted as {server_id}")

        # The server id is kept even when a newer save is pending
        self._apply(data, sequence, force=True)
        return SaveResult(sequence=sequence, flow_id=server_id, created=True, applied=True)

    async def _update(self, sequence: int) -> SaveResult:
        flow_id = self.flow.id
        payload = to_wire(self.flow)

        try:
            data = await self.client.update_flow(flow_id, payload)
        except FlowNotFoundError:
            logger.warning(f"Flow {flow_id} not found on update, creating it as new")
            async with self._promotion_lock:
                if self.flow.id == flow_id:
                    return await self._create(sequence)
            # Recreated by a concurrent save; update the new id
            return await self._update(sequence)

        applied = self._apply(data, sequence)
        return SaveResult(sequence=sequence, flow_id=flow_id, applied=applied)

    def _apply(self, data: Dict[str, Any], sequence: int, force: bool = False) -> bool:
        """Apply server-side state from a save response if it is the latest."""
        if not force and sequence < self._issued:
            logger.warning(
                f"Ignoring stale save response #{sequence} for flow {self.flow.id} "
                f"(latest is #{self._issued})"
            )
            return False

        if isinstance(data, dict) and data.get("version") is not None:
            self.flow.version = int(data["version"])

        self._applied = max(self._applied, sequence)
        logger.info(f"Flow {self.flow.id} saved (#{sequence}, version {self.flow.version})")
        return True

    @staticmethod
    def _server_id(data: Any) -> str:
        server_id = data.get("id") if isinstance(data, dict) else None
        if not server_id:
            raise PersistenceError("Create response did not include a flow id")
        return str(server_id)

    def _report(self, error: PersistenceError, sequence: int) -> None:
        self.last_error = error
        logger.error(f"Failed to save flow {self.flow.id} (#{sequence}): {error}")
        if self.notifier is not None:
            self.notifier(error)

    # ------------------------------------------------------------------
    # Background and debounced saves
    # ------------------------------------------------------------------

    def save_in_background(self) -> asyncio.Task:
        """Start a save without waiting for it."""
        task = asyncio.get_running_loop().create_task(self.save())
        self._inflight.add(task)
        task.add_done_callback(self._inflight.discard)
        return task

    def schedule_save(self, delay: Optional[float] = None) -> Optional[asyncio.Task]:
        """
        Save after a quiet period; a newer call restarts the timer.

        Returns:
            The timer task, or None once closed or outside an event loop
        """
        if self._closed:
            return None

        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            logger.debug(f"No running event loop, auto-save skipped for flow {self.flow.id}")
            return None

        if self._timer is not None and not self._timer.done():
            self._timer.cancel()

        delay = self.config.auto_save_delay_s if delay is None else delay
        self._timer = loop.create_task(self._save_after(delay))
        return self._timer

    async def _save_after(self, delay: float) -> None:
        await asyncio.sleep(delay)
        self._timer = None
        # Detached so cancelling a later timer never aborts this save
        self.save_in_background()

    @property
    def pending(self) -> bool:
        return self._timer is not None and not self._timer.done()

    def attach(self) -> None:
        """Schedule a save after every graph mutation."""
        if self._unsubscribe is None:
            self._unsubscribe = self.graph.subscribe(self._on_change)

    def _on_change(self, change: GraphChange) -> None:
        logger.debug(f"Graph changed ({change.action}), scheduling save")
        self.schedule_save()

    async def drain(self) -> None:
        """Wait for the pending timer and every in-flight save."""
        if self._timer is not None and not self._timer.done():
            await asyncio.gather(self._timer, return_exceptions=True)
        while self._inflight:
            await asyncio.gather(*list(self._inflight), return_exceptions=True)

    def close(self) -> None:
        """
        Stop scheduling saves.

        A save still waiting on the debounce timer is started right away;
        in-flight saves run to completion.
        """
        self._closed = True
        if self._unsubscribe is not None:
            self._unsubscribe()
            self._unsubscribe = None
        if self._timer is not None and not self._timer.done():
            self._timer.cancel()
            logger.debug(f"Flushing pending save for flow {self.flow.id} on close")
            self.save_in_background()
        self._timer = None


class PersistenceAdapter:
    """Loads flows and creates savers for them."""

    def __init__(
        self,
        client: FlowApiClient,
        catalog: NodeCatalog,
        config: Optional[PersistenceConfig] = None,
    ):
        self.client = client
        self.catalog = catalog
        self.config = config or get_settings().persistence

    async def get_bot(self, bot_id: str) -> Bot:
        return await self.client.get_bot(bot_id)

    async def list_flows(self, bot_id: str) -> List[FlowSummary]:
        return await self.client.list_flows(bot_id)

    async def load_flow(self, flow_id: str, bot_id: Optional[str] = None) -> Flow:
        """
        Fetch and decode a flow.

        Raises:
            FlowNotFoundError: If the backend does not know the flow
        """
        payload = await self.client.get_flow(flow_id)
        if isinstance(payload, dict) and not payload.get("id"):
            payload = {**payload, "id": flow_id}
        flow = from_wire(payload, self.catalog, bot_id=bot_id)

        logger.info(
            f"Loaded flow {flow.id} ({len(flow.nodes)} nodes, {len(flow.edges)} edges)"
        )
        return flow

    def new_draft(self, bot_id: str, name: Optional[str] = None) -> Flow:
        """In-memory flow that is created on the backend by its first save."""
        return Flow(
            id=new_draft_flow_id(),
            bot_id=bot_id,
            name=name or self.config.default_flow_name,
        )

    def saver_for(self, graph: FlowGraph, notifier: Optional[Notifier] = None) -> FlowSaver:
        return FlowSaver(graph, self.client, config=self.config, notifier=notifier)
