"""Pytest configuration and shared fixtures."""

from typing import Any, Dict, List, Optional

import pytest
from unittest.mock import AsyncMock, Mock

from portal.core.notion_client import NotionClient
from portal.models.notion_models import DiscoveredCollection
from portal.repositories.configuration_store import ConfigurationStore

CATEGORIES_DB_ID = "11111111111111111111111111111111"
ARTICLES_DB_ID = "22222222222222222222222222222222"
FAQS_DB_ID = "33333333333333333333333333333333"
TICKETS_DB_ID = "44444444444444444444444444444444"
PAGE_ID = "0123456789abcdef0123456789abcdef"


def make_database(
    database_id: str,
    title: str,
    properties: Dict[str, str],
    select_options: Optional[Dict[str, List[str]]] = None,
) -> Dict[str, Any]:
    """Build a Notion database object.

    Args:
        database_id: Database id
        title: Database title
        properties: Property name -> Notion type
        select_options: Option names for select properties

    Returns:
        Database object shaped like a GET /databases/{id} response
    """
    select_options = select_options or {}
    props: Dict[str, Any] = {}
    for name, prop_type in properties.items():
        prop: Dict[str, Any] = {"id": name[:4], "name": name, "type": prop_type, prop_type: {}}
        if prop_type == "select":
            prop["select"] = {"options": [{"name": option} for option in select_options.get(name, [])]}
        props[name] = prop

    return {
        "object": "database",
        "id": database_id,
        "title": [{"type": "text", "plain_text": title, "text": {"content": title}}],
        "properties": props,
    }


def rich_text(content: str) -> List[Dict[str, Any]]:
    return [{"type": "text", "plain_text": content, "text": {"content": content}}]


@pytest.fixture
def category_schema() -> Dict[str, str]:
    return {"Name": "title", "Description": "rich_text", "Icon": "rich_text"}


@pytest.fixture
def article_schema() -> Dict[str, str]:
    return {
        "Title": "title",
        "Content": "rich_text",
        "CategoryId": "rich_text",
        "CategoryName": "rich_text",
        "IsPopular": "checkbox",
    }


@pytest.fixture
def faq_schema() -> Dict[str, str]:
    return {
        "Question": "title",
        "Answer": "rich_text",
        "CategoryId": "rich_text",
        "CategoryName": "rich_text",
    }


@pytest.fixture
def ticket_schema() -> Dict[str, str]:
    return {
        "full_name": "title",
        "email": "email",
        "description": "rich_text",
        "status": "select",
        "submission_date": "date",
    }


@pytest.fixture
def ticket_status_options() -> Dict[str, List[str]]:
    return {"status": ["new", "in-progress", "resolved", "closed"]}


@pytest.fixture
def portal_databases(
    category_schema: Dict[str, str],
    article_schema: Dict[str, str],
    faq_schema: Dict[str, str],
    ticket_schema: Dict[str, str],
    ticket_status_options: Dict[str, List[str]],
) -> List[Dict[str, Any]]:
    """The four databases of a correctly set up portal page."""
    return [
        make_database(CATEGORIES_DB_ID, "Categories", category_schema),
        make_database(ARTICLES_DB_ID, "Documentation Articles", article_schema),
        make_database(FAQS_DB_ID, "FAQs", faq_schema),
        make_database(TICKETS_DB_ID, "Support Tickets", ticket_schema, ticket_status_options),
    ]


@pytest.fixture
def make_collection():
    """Factory for DiscoveredCollection instances."""
    def _make(
        title: str,
        properties: Dict[str, str],
        select_options: Optional[Dict[str, List[str]]] = None,
        database_id: str = CATEGORIES_DB_ID,
    ) -> DiscoveredCollection:
        return DiscoveredCollection.from_database(
            make_database(database_id, title, properties, select_options)
        )
    return _make


@pytest.fixture
def sample_ticket_page() -> Dict[str, Any]:
    """A support ticket page as returned by the Notion API."""
    return {
        "object": "page",
        "id": "ticket-page-1",
        "created_time": "2024-05-01T10:00:00.000Z",
        "last_edited_time": "2024-05-02T10:00:00.000Z",
        "properties": {
            "full_name": {"type": "title", "title": rich_text("Ada Lovelace")},
            "email": {"type": "email", "email": "ada@example.com"},
            "description": {"type": "rich_text", "rich_text": rich_text("Cannot log in")},
            "status": {"type": "select", "select": {"name": "in-progress"}},
            "submission_date": {"type": "date", "date": {"start": "2024-05-01T09:59:00+00:00"}},
        },
    }


@pytest.fixture
def mock_notion_client() -> Mock:
    """Create mock Notion client.

    Returns:
        Mock: Notion client whose API methods are AsyncMocks
    """
    client = Mock(spec=NotionClient)
    client.list_children = AsyncMock()
    client.retrieve_database = AsyncMock()
    client.query_database = AsyncMock(return_value=[])
    client.create_page = AsyncMock()
    client.retrieve_page = AsyncMock()
    client.update_page = AsyncMock()
    return client


@pytest.fixture
def config_path(tmp_path):
    return tmp_path / "notion-config.json"


@pytest.fixture
def store(config_path) -> ConfigurationStore:
    return ConfigurationStore(config_path)


@pytest.fixture
def database_factory():
    """Factory building Notion database objects (see make_database)."""
    return make_database
