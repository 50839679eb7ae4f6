"""
HTTP collaborators for the order board.

HttpOrderFeed       GET  /api/orders                 → list of orders
HttpMoveOperation   PUT  /api/orders/<id>/status     {"status": "<new>"}

Both are plain callables so a session can take them, or any stand-in
with the same shape, as injected dependencies.
"""
import logging
from typing import Any, Dict, List, Optional

import requests

from .config import BoardConfig
from .errors import FeedError, RemoteMoveFailed
from .schema import OrderStatus

logger = logging.getLogger(__name__)


def _headers(config: BoardConfig) -> Dict[str, str]:
    headers = {"Content-Type": "application/json", "Accept": "application/json"}
    if config.api_token:
        headers["Authorization"] = f"Bearer {config.api_token}"
    return headers


def _error_detail(response: requests.Response) -> str:
    """Best-effort message from an error response body."""
    try:
        body = response.json()
    except ValueError:
        return f"HTTP {response.status_code}"
    if isinstance(body, dict) and body.get("message"):
        return f"HTTP {response.status_code}: {body['message']}"
    return f"HTTP {response.status_code}"


class HttpOrderFeed:
    """Fetches the authoritative order list from the backend."""

    def __init__(self, config: Optional[BoardConfig] = None, session: Optional[requests.Session] = None):
        self.config = config or BoardConfig()
        self.http = session or requests.Session()

    @property
    def url(self) -> str:
        return f"{self.config.api_base_url}/api/orders"

    def __call__(self) -> List[Dict[str, Any]]:
        try:
            r = self.http.get(self.url, headers=_headers(self.config), timeout=self.config.request_timeout)
        except requests.RequestException as e:
            raise FeedError(f"Failed to fetch orders: {e}") from e
        if not r.ok:
            raise FeedError(f"Failed to fetch orders: {_error_detail(r)}")

        try:
            body = r.json()
        except ValueError as e:
            raise FeedError("Order feed returned invalid JSON") from e

        # Accept a bare list or the backend envelope {"success": ..., "data": [...]}
        orders = body.get("data") if isinstance(body, dict) else body
        if not isinstance(orders, list):
            raise FeedError("Order feed returned an unexpected payload")
        logger.info(f"Fetched {len(orders)} orders from {self.url}")
        return orders


class HttpMoveOperation:
    """Performs the authoritative status update for one order."""

    def __init__(self, config: Optional[BoardConfig] = None, session: Optional[requests.Session] = None):
        self.config = config or BoardConfig()
        self.http = session or requests.Session()

    def url_for(self, card_id: str) -> str:
        return f"{self.config.api_base_url}/api/orders/{card_id}/status"

    def __call__(self, card_id: str, new_status: OrderStatus) -> bool:
        status = new_status.value if isinstance(new_status, OrderStatus) else str(new_status)
        try:
            r = self.http.put(
                self.url_for(card_id),
                json={"status": status},
                headers=_headers(self.config),
                timeout=self.config.request_timeout,
            )
        except requests.RequestException as e:
            raise RemoteMoveFailed(card_id, status, str(e)) from e
        if not r.ok:
            raise RemoteMoveFailed(card_id, status, _error_detail(r))
        return True
