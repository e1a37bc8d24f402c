"""Discovery of child databases under the configured Notion page."""

from typing import List, Optional

from portal.core.exceptions import RemoteUnavailableError
from portal.core.notion_client import NotionClient
from portal.models.notion_models import DiscoveredCollection
from portal.utils.logging import get_logger

LOGGER = get_logger(__name__)

CHILD_DATABASE_BLOCK = "child_database"


class CollectionDiscoveryService:
    """Enumerates the databases embedded in a Notion page.

    Child blocks are paged through sequentially; each cursor depends on the
    previous response. For every ``child_database`` block the full schema is
    fetched. A database whose schema cannot be retrieved is logged and
    skipped, while a failure listing the page's children propagates.
    """

    def __init__(self, client: NotionClient):
        """Initialize the discovery service.

        Args:
            client: Notion API client
        """
        self.client = client

    async def discover(self, page_id: str) -> List[DiscoveredCollection]:
        """Discover all child databases of a page.

        Args:
            page_id: Bare 32-hex Notion page id

        Returns:
            Discovered collections in the order they appear on the page

        Raises:
            RemoteUnavailableError: If listing the page's children fails
        """
        LOGGER.info(f"Discovering databases under Notion page {page_id}")

        collections: List[DiscoveredCollection] = []
        start_cursor: Optional[str] = None
        batches = 0

        while True:
            response = await self.client.list_children(page_id, start_cursor=start_cursor)
            batches += 1

            for block in response.get("results", []):
                if block.get("type") != CHILD_DATABASE_BLOCK:
                    continue

                collection = await self._fetch_collection(block["id"])
                if collection is not None:
                    collections.append(collection)

            start_cursor = response.get("next_cursor")
            if not response.get("has_more") or not start_cursor:
                break

        LOGGER.info(
            f"Discovered {len(collections)} database(s) under page {page_id}",
            extra={"page_id": page_id, "batches": batches},
        )
        return collections

    async def _fetch_collection(self, database_id: str) -> Optional[DiscoveredCollection]:
        """Retrieve one database schema, returning None when it is unavailable."""
        try:
            database = await self.client.retrieve_database(database_id)
        except RemoteUnavailableError as e:
            LOGGER.error(
                f"Error retrieving database {database_id}: {str(e)}",
                extra={"database_id": database_id, "status_code": e.status_code},
            )
            return None

        collection = DiscoveredCollection.from_database(database)
        LOGGER.debug(
            f"Found database '{collection.title}' ({collection.id}) "
            f"with properties: {', '.join(collection.properties)}"
        )
        return collection
