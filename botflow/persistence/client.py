"""
Flow backend REST client.

Thin async wrapper over the flow endpoints. Responses are wrapped in
{"data": ...}; errors are mapped onto the PersistenceError hierarchy.
"""

import logging
from typing import Any, Dict, List, Optional, Tuple

import httpx

from ..config import PersistenceConfig, get_settings
from ..exceptions import ApiConnectionError, FlowNotFoundError, PersistenceError, ServerError
from ..models import Bot, FlowSummary
from .wire import WireBot, WireFlowSummary

logger = logging.getLogger(__name__)


class FlowApiClient:
    """
    Async client for the flow backend.

    Args:
        config: Backend settings; defaults to the global settings
        http_client: Pre-built httpx client (tests mount an ASGI app here)

    Example:
        >>> async with FlowApiClient() as client:
        ...     flows = await client.list_flows("bot-1")
    """

    def __init__(
        self,
        config: Optional[PersistenceConfig] = None,
        http_client: Optional[httpx.AsyncClient] = None,
    ) -> None:
        self.config = config or get_settings().persistence
        self._owns_client = http_client is None
        self._http_client = http_client or self._create_http_client()

        logger.debug(f"Flow API client initialized with base URL: {self.config.base_url}")

    def _create_http_client(self) -> httpx.AsyncClient:
        """Create and configure the HTTP client."""
        headers = {
            "Content-Type": "application/json",
            "Accept": "application/json",
        }
        if self.config.token:
            headers["Authorization"] = f"Bearer {self.config.token}"

        transport = httpx.AsyncHTTPTransport(retries=self.config.max_retries)

        return httpx.AsyncClient(
            base_url=self.config.base_url,
            headers=headers,
            timeout=httpx.Timeout(self.config.timeout_s),
            transport=transport,
            follow_redirects=True,
        )

    async def _request(
        self,
        method: str,
        path: str,
        json: Optional[Dict[str, Any]] = None,
        resource: Optional[Tuple[str, str]] = None,
    ) -> Any:
        """
        Make an HTTP request and unwrap the response data.

        Args:
            method: HTTP method
            path: Endpoint path relative to the base URL
            json: JSON body
            resource: (type, id) named in a 404 error

        Raises:
            FlowNotFoundError: On 404
            ServerError: On 5xx
            PersistenceError: On any other non-2xx status
            ApiConnectionError: If the backend cannot be reached
        """
        logger.debug(f"Making {method} request to {path}")

        try:
            response = await self._http_client.request(method, path, json=json)
        except httpx.TimeoutException as e:
            raise ApiConnectionError(f"Request timed out: {e}") from e
        except httpx.RequestError as e:
            raise ApiConnectionError(f"Request failed: {e}") from e

        return self._handle_response(response, resource)

    def _handle_response(
        self,
        response: httpx.Response,
        resource: Optional[Tuple[str, str]],
    ) -> Any:
        """Handle API response and raise appropriate exceptions."""
        logger.debug(f"Response status: {response.status_code}")

        if response.status_code == 204:
            return None

        if response.is_success:
            body = response.json()
            if isinstance(body, dict) and "data" in body:
                return body["data"]
            return body

        try:
            error_data = response.json()
            error_message = error_data.get("message") or error_data.get("detail") or str(error_data)
        except ValueError:
            error_message = response.text or f"HTTP {response.status_code}"

        if response.status_code == 404:
            resource_type, resource_id = resource or ("Resource", str(response.url))
            raise FlowNotFoundError(resource_type, resource_id)
        if response.status_code >= 500:
            raise ServerError(error_message, status_code=response.status_code)
        raise PersistenceError(
            f"HTTP {response.status_code}: {error_message}",
            status_code=response.status_code,
        )

    # ------------------------------------------------------------------
    # Endpoints
    # ------------------------------------------------------------------

    async def get_bot(self, bot_id: str) -> Bot:
        data = await self._request("GET", f"/bots/{bot_id}", resource=("Bot", bot_id))
        wire = WireBot.model_validate(data)
        return Bot(
            id=wire.id,
            name=wire.name,
            description=wire.description or "",
            is_enabled=wire.is_enabled is not False,
        )

    async def list_flows(self, bot_id: str) -> List[FlowSummary]:
        data = await self._request("GET", f"/bots/{bot_id}/flows", resource=("Bot", bot_id))
        summaries = [WireFlowSummary.model_validate(item) for item in data or []]
        return [
            FlowSummary(
                id=s.id,
                name=s.name,
                version=s.version or 1,
                is_active=bool(s.is_active),
            )
            for s in summaries
        ]

    async def get_flow(self, flow_id: str) -> Dict[str, Any]:
        """Fetch a complete flow in wire format."""
        return await self._request("GET", f"/flows/{flow_id}", resource=("Flow", flow_id))

    async def create_flow(self, bot_id: str, payload: Dict[str, Any]) -> Dict[str, Any]:
        """Create a flow. The response carries the server-issued id."""
        return await self._request(
            "POST", f"/bots/{bot_id}/flows", json=payload, resource=("Bot", bot_id)
        )

    async def update_flow(self, flow_id: str, payload: Dict[str, Any]) -> Dict[str, Any]:
        return await self._request(
            "PUT", f"/flows/{flow_id}", json=payload, resource=("Flow", flow_id)
        )

    async def close(self) -> None:
        """Close the HTTP client if this instance created it."""
        if self._owns_client:
            await self._http_client.aclose()
        logger.debug("Flow API client closed")

    async def __aenter__(self) -> "FlowApiClient":
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self.close()

    def __repr__(self) -> str:
        return f"FlowApiClient(base_url='{self.config.base_url}')"
