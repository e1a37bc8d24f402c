"""Thin async adapter over the Notion REST API.

Only the handful of endpoints the portal needs are exposed. Every failure,
whether transport, auth, rate limit or not-found, is raised as a
``RemoteUnavailableError`` and never retried here; callers decide.
"""

from typing import Any, Dict, List, Optional

import httpx
from httpx import HTTPStatusError, TimeoutException

from portal.core.config import Settings, settings
from portal.core.exceptions import (
    ConfigurationError,
    RemoteTimeoutError,
    RemoteUnavailableError,
)
from portal.utils.logging import get_logger

LOGGER = get_logger(__name__)


class NotionClient:
    """Async client for the Notion API.

    Attributes:
        api_key: Notion integration secret
        base_url: API root, without trailing slash
        api_version: Value of the ``Notion-Version`` header
        timeout: Request timeout in seconds
        page_size: Page size for paginated endpoints
    """

    def __init__(
        self,
        api_key: str,
        base_url: str = "https://api.notion.com/v1",
        api_version: str = "2022-06-28",
        timeout: int = 30,
        page_size: int = 100,
    ):
        """Initialize Notion client.

        Args:
            api_key: Notion integration secret
            base_url: API root URL
            api_version: Notion API version header value
            timeout: Request timeout in seconds
            page_size: Page size for paginated endpoints (max 100)
        """
        self.api_key = api_key
        self.base_url = base_url.rstrip("/")
        self.api_version = api_version
        self.timeout = timeout
        self.page_size = page_size
        self.headers = {
            "Authorization": f"Bearer {api_key}",
            "Notion-Version": api_version,
            "Content-Type": "application/json",
        }

    @classmethod
    def from_settings(cls, app_settings: Optional[Settings] = None) -> "NotionClient":
        """Create a client from application settings.

        Raises:
            ConfigurationError: If no integration secret is configured
        """
        app_settings = app_settings or settings
        notion = app_settings.notion
        if not notion.integration_secret:
            raise ConfigurationError("NOTION_INTEGRATION_SECRET is not set")

        return cls(
            api_key=notion.integration_secret,
            base_url=notion.api_url,
            api_version=notion.api_version,
            timeout=app_settings.http_timeout,
            page_size=notion.page_size,
        )

    async def list_children(
        self, block_id: str, start_cursor: Optional[str] = None
    ) -> Dict[str, Any]:
        """List one page of child blocks under a block or page.

        Args:
            block_id: Parent block or page id
            start_cursor: Cursor returned by the previous call

        Returns:
            Raw response with ``results``, ``has_more`` and ``next_cursor``
        """
        params: Dict[str, Any] = {"page_size": self.page_size}
        if start_cursor:
            params["start_cursor"] = start_cursor

        return await self._request("GET", f"/blocks/{block_id}/children", params=params)

    async def retrieve_database(self, database_id: str) -> Dict[str, Any]:
        """Retrieve a database object with its title and property schema."""
        return await self._request("GET", f"/databases/{database_id}")

    async def query_database(
        self,
        database_id: str,
        filter: Optional[Dict[str, Any]] = None,
        sorts: Optional[List[Dict[str, Any]]] = None,
    ) -> List[Dict[str, Any]]:
        """Query a database, following cursors until all pages are fetched.

        Args:
            database_id: Database to query
            filter: Optional Notion filter object
            sorts: Optional list of Notion sort objects

        Returns:
            All matching page objects, in the order Notion returns them
        """
        pages: List[Dict[str, Any]] = []
        start_cursor: Optional[str] = None

        while True:
            payload: Dict[str, Any] = {"page_size": self.page_size}
            if filter:
                payload["filter"] = filter
            if sorts:
                payload["sorts"] = sorts
            if start_cursor:
                payload["start_cursor"] = start_cursor

            response = await self._request("POST", f"/databases/{database_id}/query", payload=payload)
            pages.extend(response.get("results", []))

            start_cursor = response.get("next_cursor")
            if not response.get("has_more") or not start_cursor:
                break

        LOGGER.debug(f"Queried {len(pages)} pages from database {database_id}")
        return pages

    async def create_page(
        self,
        database_id: str,
        properties: Dict[str, Any],
        children: Optional[List[Dict[str, Any]]] = None,
    ) -> Dict[str, Any]:
        """Create a page (record) in a database.

        Args:
            database_id: Parent database id
            properties: Property bag in Notion's write shape
            children: Optional body blocks

        Returns:
            The created page object
        """
        payload: Dict[str, Any] = {
            "parent": {"database_id": database_id},
            "properties": properties,
        }
        if children:
            payload["children"] = children

        return await self._request("POST", "/pages", payload=payload)

    async def retrieve_page(self, page_id: str) -> Dict[str, Any]:
        """Retrieve a single page object."""
        return await self._request("GET", f"/pages/{page_id}")

    async def update_page(self, page_id: str, properties: Dict[str, Any]) -> Dict[str, Any]:
        """Update the given properties of a page, leaving the rest untouched."""
        return await self._request("PATCH", f"/pages/{page_id}", payload={"properties": properties})

    async def _request(
        self,
        method: str,
        path: str,
        params: Optional[Dict[str, Any]] = None,
        payload: Optional[Dict[str, Any]] = None,
    ) -> Dict[str, Any]:
        """Send a request to the Notion API.

        Raises:
            RemoteTimeoutError: If the request times out
            RemoteUnavailableError: For any other transport or HTTP failure
        """
        url = f"{self.base_url}{path}"

        LOGGER.debug(
            f"Calling Notion API: {method} {url}",
            extra={"method": method, "timeout": self.timeout},
        )

        try:
            async with httpx.AsyncClient(timeout=self.timeout) as client:
                response = await client.request(
                    method,
                    url,
                    headers=self.headers,
                    params=params,
                    json=payload,
                )
                response.raise_for_status()
                return response.json()

        except HTTPStatusError as e:
            raise self._status_error(e, method, url) from e

        except TimeoutException as e:
            LOGGER.error(f"Notion API timeout: {method} {url}", extra={"url": url})
            raise RemoteTimeoutError(f"Notion API timeout: {method} {path}", original_error=e) from e

        except httpx.HTTPError as e:
            LOGGER.error(f"Notion API transport error: {str(e)}", extra={"url": url})
            raise RemoteUnavailableError(
                f"Notion API request failed: {str(e)}", original_error=e
            ) from e

        except ValueError as e:
            LOGGER.error(f"Notion API returned invalid JSON: {str(e)}", extra={"url": url})
            raise RemoteUnavailableError(
                "Invalid response format from Notion API", original_error=e
            ) from e

    def _status_error(
        self, error: HTTPStatusError, method: str, url: str
    ) -> RemoteUnavailableError:
        """Translate an HTTP status error into a RemoteUnavailableError."""
        status_code = error.response.status_code
        code = None
        message = ""

        try:
            body = error.response.json()
        except ValueError:
            body = None

        if isinstance(body, dict):
            code = body.get("code")
            message = body.get("message") or ""
        else:
            message = error.response.text

        LOGGER.error(
            f"Notion API HTTP error {status_code}: {method} {url}",
            extra={"url": url, "status_code": status_code, "code": code, "error_body": message[:500]},
        )

        return RemoteUnavailableError(
            f"Notion API error {status_code}: {message}",
            status_code=status_code,
            code=code,
            original_error=error,
        )
