"""Data models for Notion collection discovery and mapping.

These models describe the remote side of the portal: which logical entity
types exist, how their expected properties are typed, what a discovered
collection looks like, and how collections are assigned to entity types.
"""

from enum import Enum
from typing import Any, Dict, List, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field


class LogicalEntityType(str, Enum):
    """The four record shapes the portal understands."""

    CATEGORY = "categories"
    ARTICLE = "articles"
    FAQ = "faqs"
    SUPPORT_TICKET = "supportTickets"


class RemoteType(str, Enum):
    """Notion property types the portal reads or writes."""

    TITLE = "title"
    RICH_TEXT = "rich_text"
    SELECT = "select"
    EMAIL = "email"
    CHECKBOX = "checkbox"
    DATE = "date"


class PropertySpec(BaseModel):
    """Expected shape of a single property in a logical entity's collection."""

    model_config = ConfigDict(frozen=True)

    name: str = Field(..., description="Canonical property name in the collection")
    remote_type: RemoteType = Field(..., description="Expected Notion property type")
    required: bool = Field(default=False, description="Whether the property must exist")
    synonyms: Tuple[str, ...] = Field(
        default=(),
        description="Lowercase substrings accepted in place of the name during lenient matching",
    )
    expected_options: Tuple[str, ...] = Field(
        default=(),
        description="Option names a select property is expected to offer",
    )


class DiscoveredCollection(BaseModel):
    """A child database found under the configured Notion page."""

    id: str = Field(..., description="Opaque Notion database id")
    title: str = Field(default="", description="Plain-text database title")
    properties: Dict[str, str] = Field(
        default_factory=dict,
        description="Property name to Notion property type, in remote order",
    )
    select_options: Dict[str, List[str]] = Field(
        default_factory=dict,
        description="Option names per select property",
    )

    @classmethod
    def from_database(cls, database: Dict[str, Any]) -> "DiscoveredCollection":
        """Build from a Notion database object (``GET /databases/{id}``)."""
        title = "".join(
            span.get("plain_text") or span.get("text", {}).get("content", "")
            for span in database.get("title") or []
        )

        properties: Dict[str, str] = {}
        select_options: Dict[str, List[str]] = {}
        for name, prop in (database.get("properties") or {}).items():
            prop_type = prop.get("type", "")
            properties[name] = prop_type
            if prop_type == RemoteType.SELECT.value:
                options = (prop.get("select") or {}).get("options") or []
                select_options[name] = [option.get("name", "") for option in options]

        return cls(
            id=database["id"],
            title=title,
            properties=properties,
            select_options=select_options,
        )


MAPPING_FIELDS = {
    LogicalEntityType.CATEGORY: "categories",
    LogicalEntityType.ARTICLE: "articles",
    LogicalEntityType.FAQ: "faqs",
    LogicalEntityType.SUPPORT_TICKET: "support_tickets",
}


class CollectionMapping(BaseModel):
    """Assignment of Notion database ids to logical entity types.

    Serialized as the ``databases`` object of the persisted configuration
    document; all four keys are always written.
    """

    model_config = ConfigDict(populate_by_name=True)

    categories: Optional[str] = None
    articles: Optional[str] = None
    faqs: Optional[str] = None
    support_tickets: Optional[str] = Field(default=None, alias="supportTickets")

    def get(self, entity_type: LogicalEntityType) -> Optional[str]:
        """Return the database id mapped to an entity type, if any."""
        return getattr(self, MAPPING_FIELDS[LogicalEntityType(entity_type)])

    def items(self) -> List[Tuple[LogicalEntityType, Optional[str]]]:
        """Entity types and their ids, in declaration order."""
        return [(entity_type, self.get(entity_type)) for entity_type in LogicalEntityType]

    @property
    def detected_count(self) -> int:
        return sum(1 for _, database_id in self.items() if database_id)

    @property
    def is_empty(self) -> bool:
        return self.detected_count == 0

    def to_config_dict(self) -> Dict[str, Any]:
        """Render the persisted configuration document."""
        return {"databases": self.model_dump(by_alias=True)}

    @classmethod
    def from_config_dict(cls, data: Dict[str, Any]) -> "CollectionMapping":
        """Parse the persisted configuration document."""
        return cls.model_validate(data.get("databases") or {})
