"""Async HTTP client for the Claude conversation API."""

from __future__ import annotations

from typing import Any, Protocol

import httpx
import orjson

from artifact_export import __version__
from artifact_export.errors import ConversationFetchError, IndexFetchError, RemoteFetchError
from artifact_export.logging import get_logger
from artifact_export.models import ConversationFull, ConversationSummary

logger = get_logger("artifact_export.remote")

DEFAULT_BASE_URL = "https://claude.ai/api"

# Query used by the web app to render a full conversation tree
CONVERSATION_PARAMS = {
    "tree": "true",
    "rendering_mode": "messages",
    "render_all_tools": "true",
}


class RemoteSource(Protocol):
    """Source of conversations consumed by the export orchestrator."""

    async def fetch_index(self) -> list[ConversationSummary]: ...

    async def fetch_full(self, conversation_id: str) -> ConversationFull: ...


class ClaudeClient:
    """Fetches the conversation index and full conversations.

    Each call is a single request: no retries and no caching. Failures
    surface as RemoteFetchError subclasses carrying the HTTP status.

    Example:
        async with ClaudeClient(org_id, session_key=key) as client:
            summaries = await client.fetch_index()
            conversation = await client.fetch_full(summaries[0].id)
    """

    def __init__(
        self,
        org_id: str,
        base_url: str = DEFAULT_BASE_URL,
        session_key: str | None = None,
        timeout: float = 30.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        """Initialize the client.

        Args:
            org_id: Organization whose conversations are exported
            base_url: API root (e.g., https://claude.ai/api)
            session_key: Value of the sessionKey cookie, if authenticating
            timeout: Request timeout in seconds
            transport: Optional httpx transport (used by tests)
        """
        self.org_id = org_id
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout

        cookies = {"sessionKey": session_key} if session_key else None
        self._client = httpx.AsyncClient(
            timeout=httpx.Timeout(timeout),
            headers={
                "Accept": "application/json",
                "User-Agent": f"artifact-export/{__version__}",
            },
            cookies=cookies,
            transport=transport,
        )

    @property
    def conversations_url(self) -> str:
        return f"{self.base_url}/organizations/{self.org_id}/chat_conversations"

    async def _get_json(
        self,
        url: str,
        error_cls: type[RemoteFetchError],
        what: str,
        params: dict[str, str] | None = None,
    ) -> Any:
        try:
            response = await self._client.get(url, params=params)
        except httpx.HTTPError as e:
            raise error_cls(f"Failed to fetch {what}: {e}", url=url) from e

        if not response.is_success:
            raise error_cls(
                f"Failed to fetch {what}: {response.status_code}",
                status=response.status_code,
                url=url,
            )

        try:
            return orjson.loads(response.content)
        except orjson.JSONDecodeError as e:
            raise error_cls(
                f"Failed to fetch {what}: invalid JSON ({e})",
                status=response.status_code,
                url=url,
            ) from e

    async def fetch_index(self) -> list[ConversationSummary]:
        """Fetch the list of conversations, in the order the API returns them.

        Raises:
            IndexFetchError: On a non-2xx response or transport failure
        """
        data = await self._get_json(self.conversations_url, IndexFetchError, "conversations")
        if not isinstance(data, list):
            raise IndexFetchError(
                "Failed to fetch conversations: expected a JSON list",
                url=self.conversations_url,
            )

        summaries = [ConversationSummary.from_api(item) for item in data if isinstance(item, dict)]
        logger.debug("index_fetched", count=len(summaries))
        return summaries

    async def fetch_full(self, conversation_id: str) -> ConversationFull:
        """Fetch one conversation with all of its messages.

        Raises:
            ConversationFetchError: On a non-2xx response or transport failure
        """
        url = f"{self.conversations_url}/{conversation_id}"
        data = await self._get_json(url, ConversationFetchError, "conversation", CONVERSATION_PARAMS)
        if not isinstance(data, dict):
            raise ConversationFetchError(
                "Failed to fetch conversation: expected a JSON object",
                url=url,
            )
        return ConversationFull.from_api(data)

    async def close(self) -> None:
        """Close the HTTP client and release resources."""
        await self._client.aclose()

    async def __aenter__(self) -> "ClaudeClient":
        """Enter async context manager."""
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: Any,
    ) -> None:
        """Exit async context manager."""
        await self.close()
