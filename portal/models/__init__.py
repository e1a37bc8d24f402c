"""Data models for the portal."""

from portal.models.notion_models import (
    CollectionMapping,
    DiscoveredCollection,
    LogicalEntityType,
    PropertySpec,
    RemoteType,
)
from portal.models.records import FAQ, Article, Category, PortalRecord, SupportTicket

__all__ = [
    "CollectionMapping",
    "DiscoveredCollection",
    "LogicalEntityType",
    "PropertySpec",
    "RemoteType",
    "PortalRecord",
    "Category",
    "Article",
    "FAQ",
    "SupportTicket",
]
