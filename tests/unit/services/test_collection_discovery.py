"""Tests for child database discovery."""

import pytest

from portal.core.exceptions import RemoteUnavailableError
from portal.services.discovery.collection_discovery import CollectionDiscoveryService


def child_database(block_id: str) -> dict:
    return {"object": "block", "id": block_id, "type": "child_database", "child_database": {"title": ""}}


def paragraph(block_id: str) -> dict:
    return {"object": "block", "id": block_id, "type": "paragraph", "paragraph": {"rich_text": []}}


class TestCollectionDiscoveryService:
    """Test suite for CollectionDiscoveryService."""

    @pytest.mark.asyncio
    async def test_discovers_child_databases_in_order(self, mock_notion_client, portal_databases) -> None:
        by_id = {database["id"]: database for database in portal_databases}
        mock_notion_client.list_children.return_value = {
            "results": [
                child_database(portal_databases[2]["id"]),
                paragraph("p1"),
                child_database(portal_databases[0]["id"]),
            ],
            "has_more": False,
            "next_cursor": None,
        }
        mock_notion_client.retrieve_database.side_effect = lambda database_id: by_id[database_id]

        service = CollectionDiscoveryService(mock_notion_client)
        collections = await service.discover("page-1")

        assert [collection.title for collection in collections] == ["FAQs", "Categories"]
        assert collections[1].properties["Name"] == "title"
        assert mock_notion_client.retrieve_database.await_count == 2

    @pytest.mark.asyncio
    async def test_follows_cursor(self, mock_notion_client, portal_databases) -> None:
        by_id = {database["id"]: database for database in portal_databases}
        mock_notion_client.list_children.side_effect = [
            {"results": [child_database(portal_databases[0]["id"])], "has_more": True, "next_cursor": "cursor-2"},
            {"results": [child_database(portal_databases[3]["id"])], "has_more": False, "next_cursor": None},
        ]
        mock_notion_client.retrieve_database.side_effect = lambda database_id: by_id[database_id]

        service = CollectionDiscoveryService(mock_notion_client)
        collections = await service.discover("page-1")

        assert [collection.title for collection in collections] == ["Categories", "Support Tickets"]
        assert collections[1].select_options["status"] == ["new", "in-progress", "resolved", "closed"]

        calls = mock_notion_client.list_children.await_args_list
        assert calls[0].kwargs["start_cursor"] is None
        assert calls[1].kwargs["start_cursor"] == "cursor-2"

    @pytest.mark.asyncio
    async def test_failed_schema_fetch_is_skipped(self, mock_notion_client, portal_databases) -> None:
        def retrieve(database_id):
            if database_id == portal_databases[0]["id"]:
                raise RemoteUnavailableError("Notion API error 404: not shared", status_code=404)
            return portal_databases[1]

        mock_notion_client.list_children.return_value = {
            "results": [child_database(portal_databases[0]["id"]), child_database(portal_databases[1]["id"])],
            "has_more": False,
            "next_cursor": None,
        }
        mock_notion_client.retrieve_database.side_effect = retrieve

        service = CollectionDiscoveryService(mock_notion_client)
        collections = await service.discover("page-1")

        assert [collection.id for collection in collections] == [portal_databases[1]["id"]]

    @pytest.mark.asyncio
    async def test_empty_page(self, mock_notion_client) -> None:
        mock_notion_client.list_children.return_value = {"results": [], "has_more": False, "next_cursor": None}

        service = CollectionDiscoveryService(mock_notion_client)

        assert await service.discover("page-1") == []
        mock_notion_client.retrieve_database.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_listing_failure_propagates(self, mock_notion_client) -> None:
        mock_notion_client.list_children.side_effect = RemoteUnavailableError("Notion API error 401: unauthorized")

        service = CollectionDiscoveryService(mock_notion_client)

        with pytest.raises(RemoteUnavailableError):
            await service.discover("page-1")
