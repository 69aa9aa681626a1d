"""HTTP transport for the support chat endpoint."""

from __future__ import annotations

import asyncio
import logging
from typing import Any, Protocol

import httpx

from .exceptions import (
    RateLimitedError,
    ReplyDecodeError,
    SupportConnectionError,
    TransportError,
    TransportHTTPError,
)
from .models import ChatReply, PageContext

LOGGER = logging.getLogger(__name__)

DEFAULT_CHAT_PATH = "/support/chat"


class ChatTransport(Protocol):
    """Anything able to turn one user message into a reply."""

    async def send_chat_message(
        self, message: str, page_context: PageContext
    ) -> ChatReply | dict[str, Any]: ...


class HttpChatTransport:
    """POST messages to the support API with ``httpx``.

    Only connection failures and timeouts are retried; an HTTP error status
    is final.
    """

    def __init__(
        self,
        base_url: str,
        chat_path: str = DEFAULT_CHAT_PATH,
        timeout: float = 30.0,
        retries: int = 0,
        retry_backoff_seconds: float = 0.5,
        auth_token: str = "",
        client: httpx.AsyncClient | None = None,
    ) -> None:
        self.url = f"{base_url.rstrip('/')}/{chat_path.lstrip('/')}"
        self.retries = max(0, retries)
        self.retry_backoff_seconds = max(0.0, retry_backoff_seconds)
        self._headers = {"Accept": "application/json"}
        if auth_token:
            self._headers["Authorization"] = f"Bearer {auth_token}"
        self._owns_client = client is None
        self._client = client or httpx.AsyncClient(timeout=timeout)

    async def __aenter__(self) -> HttpChatTransport:
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        """Close the underlying client if this transport created it."""
        if self._owns_client:
            await self._client.aclose()

    async def send_chat_message(
        self, message: str, page_context: PageContext
    ) -> ChatReply:
        payload = {"message": message, "pageContext": page_context.to_payload()}
        response = await self._post_with_retries(payload)
        return self._decode(response)

    async def _post_with_retries(self, payload: dict[str, Any]) -> httpx.Response:
        for attempt in range(self.retries + 1):
            try:
                return await self._client.post(
                    self.url, json=payload, headers=self._headers
                )
            except httpx.TransportError as exc:
                mapped_exc = self._map_exception(exc)
                LOGGER.warning(
                    "transport.request.retry",
                    extra={
                        "event": "transport.request.retry",
                        "attempt": attempt + 1,
                        "error_type": exc.__class__.__name__,
                    },
                )
                if attempt >= self.retries:
                    raise mapped_exc from exc
                await asyncio.sleep(self.retry_backoff_seconds * (attempt + 1))
        raise TransportError(f"No response from {self.url}.")  # pragma: no cover

    def _map_exception(self, exc: httpx.TransportError) -> TransportError:
        if isinstance(exc, httpx.TimeoutException):
            return SupportConnectionError(f"Support API at {self.url} timed out.")
        return SupportConnectionError(f"Unable to reach support API at {self.url}.")

    def _decode(self, response: httpx.Response) -> ChatReply:
        if response.status_code == 429:
            raise RateLimitedError(
                "Support chat rate limit exceeded.",
                retry_after=response.headers.get("Retry-After"),
                remaining=response.headers.get("X-RateLimit-Remaining"),
            )
        if response.status_code >= 400:
            raise TransportHTTPError(
                f"Support API returned HTTP {response.status_code}.",
                status_code=response.status_code,
            )
        try:
            body = response.json()
        except ValueError as exc:
            raise ReplyDecodeError("Support API returned invalid JSON.") from exc
        if not isinstance(body, dict):
            raise ReplyDecodeError("Support API reply is not a JSON object.")
        return ChatReply.from_payload(body)
