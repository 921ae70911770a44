"""
Support Backend HTTP Client.

Thin async wrapper over the remote support API: the content-article store,
the AI session history (which carries the pinned flow position) and the live
chat history endpoints. Transport only: callers get parsed JSON back and
map it onto domain/state models themselves.
"""

import logging
from typing import Any, Dict, Optional

import httpx

from ...config import settings

logger = logging.getLogger(__name__)


class SupportApiError(Exception):
    """Raised for any non-2xx response from the support backend."""

    def __init__(self, status_code: int, body: str):
        super().__init__(f"HTTP {status_code}: {body}")
        self.status_code = status_code
        self.body = body


class SupportApiClient:
    """
    Usage:
        async with SupportApiClient(admin_key="...") as client:
            data = await client.get_ai_history(customer_id)
    """

    def __init__(
        self,
        base_url: str = settings.API_BASE_URL,
        admin_key: Optional[str] = settings.ADMIN_API_KEY,
        user_id: Optional[str] = settings.USER_ID,
        timeout: float = settings.HTTP_TIMEOUT_SECONDS,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.base_url = base_url.rstrip("/")
        self.admin_key = (admin_key or "").strip() or None
        self.user_id = (user_id or "").strip() or None
        self.timeout = timeout
        self._transport = transport
        self._http_client: Optional[httpx.AsyncClient] = None

    async def __aenter__(self):
        self._ensure_client()
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self.close()

    def _ensure_client(self) -> httpx.AsyncClient:
        if self._http_client is None:
            headers = {"Content-Type": "application/json"}
            if self.user_id:
                headers["X-User-Id"] = self.user_id
            self._http_client = httpx.AsyncClient(
                base_url=self.base_url,
                timeout=self.timeout,
                headers=headers,
                transport=self._transport,
            )
        return self._http_client

    async def close(self) -> None:
        if self._http_client:
            await self._http_client.aclose()
            self._http_client = None

    async def request(
        self,
        method: str,
        path: str,
        json: Optional[Dict[str, Any]] = None,
        admin: bool = False,
    ) -> Any:
        """
        Sends a request and returns the decoded JSON body.

        Raises:
            SupportApiError: On a non-2xx response.
        """
        client = self._ensure_client()
        headers = {}
        if admin:
            headers["X-Admin-Key"] = self.admin_key or ""

        response = await client.request(method, path, json=json, headers=headers)
        if response.is_error:
            logger.error(f"{method} {path} failed with HTTP {response.status_code}")
            raise SupportApiError(response.status_code, response.text)
        if not response.content:
            return {}
        return response.json()

    # --- Content articles ---

    async def upsert_article(self, payload: Dict[str, Any]) -> Dict[str, Any]:
        return await self.request("POST", "/v1/admin/kb/upsert", json=payload, admin=True)

    async def get_article(self, article_id: str) -> Dict[str, Any]:
        return await self.request("GET", f"/v1/admin/kb/{article_id}", admin=True)

    # --- Sessions ---

    async def get_ai_history(self, customer_id: str) -> Dict[str, Any]:
        return await self.request("GET", f"/admin/ai-history/{customer_id}", admin=True)

    async def get_livechat_history(self, session_id: str) -> Dict[str, Any]:
        return await self.request("GET", f"/v1/livechat/history/{session_id}")

    async def get_admin_livechat_history(self, conversation_id: str) -> Dict[str, Any]:
        return await self.request(
            "GET", f"/v1/admin/livechat/history/{conversation_id}", admin=True
        )
