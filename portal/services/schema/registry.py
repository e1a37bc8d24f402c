"""Expected Notion database shapes for each logical entity type."""

from typing import Dict, List, Optional, Tuple

from pydantic import BaseModel, ConfigDict, model_validator

from portal.core.exceptions import SchemaNotDefinedError
from portal.models.notion_models import LogicalEntityType, PropertySpec, RemoteType


class EntitySchema(BaseModel):
    """Expected property set for one entity type's database.

    Notion allows exactly one title property per database, so at most one
    required property may be title-typed.
    """

    model_config = ConfigDict(frozen=True)

    entity_type: LogicalEntityType
    properties: Tuple[PropertySpec, ...]
    lenient: bool = False

    @model_validator(mode="after")
    def check_single_title(self) -> "EntitySchema":
        titles = [
            spec.name
            for spec in self.properties
            if spec.required and spec.remote_type == RemoteType.TITLE
        ]
        if len(titles) > 1:
            raise ValueError(
                f"{self.entity_type.value} declares more than one required title property: "
                f"{', '.join(titles)}"
            )
        return self

    @property
    def required_properties(self) -> List[PropertySpec]:
        return [spec for spec in self.properties if spec.required]

    @property
    def property_names(self) -> List[str]:
        return [spec.name for spec in self.properties]

    def get_property(self, name: str) -> Optional[PropertySpec]:
        for spec in self.properties:
            if spec.name == name:
                return spec
        return None


class SchemaRegistry:
    """Static table of expected database schemas.

    FAQ databases are commonly created by hand and keep Notion's default
    "Name"/"Title" title property, so the FAQ schema is matched leniently
    through per-property synonyms.
    """

    SCHEMAS: Dict[LogicalEntityType, EntitySchema] = {
        LogicalEntityType.CATEGORY: EntitySchema(
            entity_type=LogicalEntityType.CATEGORY,
            properties=(
                PropertySpec(name="Name", remote_type=RemoteType.TITLE, required=True),
                PropertySpec(name="Description", remote_type=RemoteType.RICH_TEXT),
                PropertySpec(name="Icon", remote_type=RemoteType.RICH_TEXT),
            ),
        ),
        LogicalEntityType.ARTICLE: EntitySchema(
            entity_type=LogicalEntityType.ARTICLE,
            properties=(
                PropertySpec(name="Title", remote_type=RemoteType.TITLE, required=True),
                PropertySpec(name="Content", remote_type=RemoteType.RICH_TEXT, required=True),
                PropertySpec(name="CategoryId", remote_type=RemoteType.RICH_TEXT, required=True),
                PropertySpec(name="CategoryName", remote_type=RemoteType.RICH_TEXT, required=True),
                PropertySpec(name="IsPopular", remote_type=RemoteType.CHECKBOX),
            ),
        ),
        LogicalEntityType.FAQ: EntitySchema(
            entity_type=LogicalEntityType.FAQ,
            lenient=True,
            properties=(
                PropertySpec(
                    name="Question",
                    remote_type=RemoteType.TITLE,
                    required=True,
                    synonyms=("question", "title"),
                ),
                PropertySpec(
                    name="Answer",
                    remote_type=RemoteType.RICH_TEXT,
                    required=True,
                    synonyms=("answer", "content", "description"),
                ),
                PropertySpec(name="CategoryId", remote_type=RemoteType.RICH_TEXT),
                PropertySpec(name="CategoryName", remote_type=RemoteType.RICH_TEXT),
            ),
        ),
        LogicalEntityType.SUPPORT_TICKET: EntitySchema(
            entity_type=LogicalEntityType.SUPPORT_TICKET,
            properties=(
                PropertySpec(name="full_name", remote_type=RemoteType.TITLE, required=True),
                PropertySpec(name="email", remote_type=RemoteType.EMAIL, required=True),
                PropertySpec(name="description", remote_type=RemoteType.RICH_TEXT, required=True),
                PropertySpec(
                    name="status",
                    remote_type=RemoteType.SELECT,
                    required=True,
                    expected_options=("new", "in-progress", "resolved", "closed"),
                ),
                PropertySpec(name="submission_date", remote_type=RemoteType.DATE),
            ),
        ),
    }

    # Select properties whose options users are expected to customize
    CUSTOMIZABLE_OPTIONS: Dict[LogicalEntityType, Tuple[str, ...]] = {
        LogicalEntityType.SUPPORT_TICKET: ("status",),
    }

    @classmethod
    def get_schema(cls, entity_type: str) -> Optional[EntitySchema]:
        """Return the expected schema for an entity type, or None if unknown.

        Args:
            entity_type: LogicalEntityType or its string value

        Returns:
            EntitySchema or None
        """
        try:
            return cls.SCHEMAS.get(LogicalEntityType(entity_type))
        except ValueError:
            return None

    @classmethod
    def require_schema(cls, entity_type: str) -> EntitySchema:
        """Like get_schema, but raise for unknown entity types.

        Raises:
            SchemaNotDefinedError: If no schema is registered for the type
        """
        schema = cls.get_schema(entity_type)
        if schema is None:
            type_name = entity_type.value if isinstance(entity_type, LogicalEntityType) else entity_type
            raise SchemaNotDefinedError(f"No schema defined for database type: {type_name}")
        return schema

    @classmethod
    def has_customizable_options(cls, entity_type: LogicalEntityType, property_name: str) -> bool:
        return property_name in cls.CUSTOMIZABLE_OPTIONS.get(entity_type, ())
