"""HttpBackend — client for the authoritative conversation/message API."""

from __future__ import annotations

import os
from typing import Any

import httpx
from pydantic import TypeAdapter, ValidationError

from sealed_cache.exceptions import BackendError
from sealed_cache.models import Conversation, Message

_CONVERSATIONS = TypeAdapter(list[Conversation])
_MESSAGES = TypeAdapter(list[Message])


class HttpBackend:
    """Fetches the current conversation and message collections for an owner.

    The cache only ever mirrors what this backend returns.

    Parameters:
        base_url:  API base URL.  Falls back to the ``SEALED_CACHE_BACKEND_URL``
                   env var.
        api_token: Bearer token.  Falls back to ``SEALED_CACHE_BACKEND_TOKEN``.
                   Requests are sent unauthenticated when neither is set.
        timeout:   HTTP request timeout in seconds.  Defaults to 30.

    Raises:
        BackendError: On every fetch that does not yield a valid payload.
    """

    def __init__(
        self,
        base_url: str | None = None,
        api_token: str | None = None,
        timeout: float = 30.0,
    ) -> None:
        resolved_url = base_url or os.getenv("SEALED_CACHE_BACKEND_URL", "")
        self._base_url = resolved_url.rstrip("/") if resolved_url else ""
        self._api_token = api_token or os.getenv("SEALED_CACHE_BACKEND_TOKEN", "")
        self._timeout = timeout

    @property
    def base_url(self) -> str:
        return self._base_url

    async def fetch_conversations(self, owner_id: str) -> list[Conversation]:
        payload = await self._get("conversations", {"userId": owner_id})
        try:
            return _CONVERSATIONS.validate_python(_unwrap(payload, "conversations"))
        except ValidationError as e:
            raise BackendError("conversations", f"invalid payload: {e}") from e

    async def fetch_messages(self, owner_id: str, conversation_id: str) -> list[Message]:
        payload = await self._get(
            "messages", {"userId": owner_id, "conversationId": conversation_id}
        )
        try:
            return _MESSAGES.validate_python(_unwrap(payload, "messages"))
        except ValidationError as e:
            raise BackendError("messages", f"invalid payload: {e}") from e

    async def _get(self, resource: str, params: dict[str, str]) -> Any:
        if not self._base_url:
            raise BackendError(
                resource,
                "backend URL not configured (set base_url or SEALED_CACHE_BACKEND_URL env var)",
            )

        headers = {"Accept": "application/json"}
        if self._api_token:
            headers["Authorization"] = f"Bearer {self._api_token}"

        try:
            async with httpx.AsyncClient() as client:
                response = await client.get(
                    f"{self._base_url}/{resource}",
                    params=params,
                    headers=headers,
                    timeout=self._timeout,
                )
        except httpx.TimeoutException as e:
            raise BackendError(resource, f"timed out after {self._timeout} seconds") from e
        except httpx.ConnectError as e:
            raise BackendError(resource, "could not connect to backend") from e
        except httpx.HTTPError as e:
            raise BackendError(resource, str(e)) from e

        if response.status_code != 200:
            raise BackendError(resource, f"HTTP {response.status_code}")

        try:
            return response.json()
        except ValueError as e:
            raise BackendError(resource, "response is not valid JSON") from e


def _unwrap(payload: Any, field: str) -> Any:
    """Accept either a bare list or ``{"<field>": [...]}``."""
    if isinstance(payload, dict) and field in payload:
        return payload[field]
    return payload
