"""Flat entity records exchanged with the portal's API layer.

Records are built fresh from Notion page responses on every request and are
never cached. Field names are snake_case in Python and camelCase on the wire.
"""

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, computed_field
from pydantic.alias_generators import to_camel


class PortalRecord(BaseModel):
    """Common configuration for portal records."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    id: Optional[str] = Field(default=None, description="Notion page id")


class Category(PortalRecord):
    """A documentation category."""

    name: str = "Untitled Category"
    description: str = ""
    icon: str = ""


class Article(PortalRecord):
    """A documentation article."""

    title: str = "Untitled Article"
    content: str = ""
    category_id: str = ""
    category_name: str = "Uncategorized"
    is_popular: bool = False
    created_at: Optional[str] = Field(default=None, description="Page created_time")
    updated_at: Optional[str] = Field(default=None, description="Page last_edited_time")


class FAQ(PortalRecord):
    """A frequently asked question."""

    question: str = "Untitled Question"
    answer: str = ""
    category_id: str = ""
    category_name: str = "Uncategorized"


class SupportTicket(PortalRecord):
    """A support ticket submitted through the portal."""

    name: str = ""
    email: str = ""
    description: str = ""
    status: str = "new"
    created_at: Optional[str] = Field(default=None, description="Submission date (ISO 8601)")

    # Not stored in Notion; the tickets database has no matching properties
    @computed_field
    @property
    def subject(self) -> str:
        return "Support Request"

    @computed_field
    @property
    def category(self) -> str:
        return "General"
