"""Base marshaller between Notion pages and flat portal records.

Each entity marshaller declares which record field lives in which Notion
property; property types come from the schema registry so the read/write
shapes always agree with what the validator expects.
"""

from typing import Any, ClassVar, Dict, Mapping, Optional, Type, Union

from portal.models.notion_models import LogicalEntityType, PropertySpec
from portal.models.records import PortalRecord
from portal.services.marshalling.properties import read_property, write_property
from portal.services.schema.registry import EntitySchema, SchemaRegistry
from portal.utils.logging import get_logger

LOGGER = get_logger(__name__)

RecordInput = Union[PortalRecord, Mapping[str, Any]]


class BaseMarshaller:
    """Converts between a Notion page and one record type.

    Both directions are pure: no I/O, no state beyond the class-level field
    map. The read path never fails on missing data; absent or empty
    properties (including empty strings) fall back to the record's defaults,
    so a field written as "" reads back as its default. The write path emits only
    fields that were explicitly set on the input, so partial updates leave
    other remote properties untouched.

    Attributes:
        ENTITY_TYPE: Logical entity type handled
        RECORD_TYPE: Pydantic record class produced
        FIELD_MAP: Record field name -> Notion property name
    """

    ENTITY_TYPE: ClassVar[LogicalEntityType]
    RECORD_TYPE: ClassVar[Type[PortalRecord]]
    FIELD_MAP: ClassVar[Dict[str, str]] = {}

    @classmethod
    def schema(cls) -> EntitySchema:
        return SchemaRegistry.require_schema(cls.ENTITY_TYPE)

    @classmethod
    def to_record(cls, page: Mapping[str, Any]) -> PortalRecord:
        """Build a record from a Notion page object.

        Args:
            page: Page object as returned by the Notion API

        Returns:
            Complete record, defaults filled in for absent properties
        """
        properties = page.get("properties") or {}
        schema = cls.schema()
        values: Dict[str, Any] = {}

        for field_name, property_name in cls.FIELD_MAP.items():
            spec = schema.get_property(property_name)
            prop = cls._find_property(properties, spec, schema.lenient)
            value = read_property(prop, spec.remote_type)
            if value is not None:
                values[field_name] = value

        values.update(cls._metadata(page, values))
        return cls.RECORD_TYPE(**values)

    @classmethod
    def to_remote_properties(cls, record: RecordInput) -> Dict[str, Any]:
        """Build the Notion property bag for a (possibly partial) record.

        Args:
            record: Record instance or mapping of record fields

        Returns:
            Property bag in Notion's write shape
        """
        if not isinstance(record, cls.RECORD_TYPE):
            record = cls.RECORD_TYPE.model_validate(record)

        schema = cls.schema()
        properties: Dict[str, Any] = {}

        for field_name, property_name in cls.FIELD_MAP.items():
            if field_name not in record.model_fields_set:
                continue
            value = getattr(record, field_name)
            if value is None:
                continue
            spec = schema.get_property(property_name)
            properties[property_name] = write_property(value, spec.remote_type)

        return properties

    @classmethod
    def _find_property(
        cls,
        properties: Mapping[str, Any],
        spec: PropertySpec,
        lenient: bool,
    ) -> Optional[Dict[str, Any]]:
        """Locate the property backing a field.

        The canonical name wins. For lenient schemas a property of the right
        type whose name contains one of the spec's synonyms is accepted.
        """
        prop = properties.get(spec.name)
        if prop is not None or not (lenient and spec.synonyms):
            return prop

        for name, candidate in properties.items():
            if candidate.get("type") != spec.remote_type.value:
                continue
            lowered = name.lower()
            if any(synonym in lowered for synonym in spec.synonyms):
                LOGGER.debug(f"Reading {spec.name} from property '{name}'")
                return candidate
        return None

    @classmethod
    def _metadata(cls, page: Mapping[str, Any], values: Dict[str, Any]) -> Dict[str, Any]:
        """Record fields taken from page metadata rather than properties."""
        return {"id": page.get("id")}
