"""Persistence of the collection mapping.

The mapping lives in a single JSON document::

    {"databases": {"categories": "...", "articles": null, "faqs": "...", "supportTickets": "..."}}

It is loaded once per process and only rewritten by an explicit setup pass,
always with all four keys.
"""

import json
import os
from functools import lru_cache
from pathlib import Path
from typing import Optional, Union

from pydantic import ValidationError as PydanticValidationError

from portal.core.config import NotionSettings, settings
from portal.core.exceptions import ConfigurationError
from portal.models.notion_models import CollectionMapping, LogicalEntityType
from portal.utils.logging import get_logger

LOGGER = get_logger(__name__)


class ConfigurationStore:
    """Loads and saves the entity type -> database id mapping.

    Attributes:
        path: Location of the JSON document
        defaults: Settings providing fallback database ids
    """

    def __init__(self, path: Union[str, Path], defaults: Optional[NotionSettings] = None):
        """Initialize the store.

        Args:
            path: Location of the JSON document
            defaults: Optional settings whose ``*_database_id`` fields are used
                when the persisted mapping has no id for a type
        """
        self.path = Path(path)
        self.defaults = defaults
        self._mapping: Optional[CollectionMapping] = None

    def load(self) -> CollectionMapping:
        """Return the persisted mapping, reading the file on first use.

        A missing file yields an empty mapping.

        Raises:
            ConfigurationError: If the file exists but is malformed
        """
        if self._mapping is None:
            self._mapping = self._read()
        return self._mapping

    def reload(self) -> CollectionMapping:
        """Discard the cached mapping and read the file again."""
        self._mapping = None
        return self.load()

    def save(self, mapping: CollectionMapping) -> None:
        """Persist a mapping, replacing the previous document entirely.

        Args:
            mapping: Mapping to store; all four keys are written
        """
        self.path.parent.mkdir(parents=True, exist_ok=True)
        tmp_path = self.path.with_name(f"{self.path.name}.tmp")
        tmp_path.write_text(json.dumps(mapping.to_config_dict(), indent=2), encoding="utf-8")
        os.replace(tmp_path, self.path)

        self._mapping = mapping
        LOGGER.info(
            f"Saved database configuration to {self.path}",
            extra={"databases": mapping.model_dump(by_alias=True)},
        )

    def find_database_id(self, entity_type: LogicalEntityType) -> Optional[str]:
        """Resolve the database id for an entity type, or None.

        The persisted mapping is consulted first, then the settings default.
        """
        entity_type = LogicalEntityType(entity_type)
        database_id = self.load().get(entity_type)
        if database_id:
            return database_id
        return self._default_id(entity_type)

    def get_database_id(self, entity_type: LogicalEntityType) -> str:
        """Like find_database_id, but raise when no id is available.

        Raises:
            ConfigurationError: If neither the mapping nor settings provide an id
        """
        database_id = self.find_database_id(entity_type)
        if not database_id:
            raise ConfigurationError(
                f"No Notion database configured for {LogicalEntityType(entity_type).value}"
            )
        return database_id

    def _default_id(self, entity_type: LogicalEntityType) -> Optional[str]:
        if self.defaults is None:
            return None
        return {
            LogicalEntityType.CATEGORY: self.defaults.categories_database_id,
            LogicalEntityType.ARTICLE: self.defaults.articles_database_id,
            LogicalEntityType.FAQ: self.defaults.faqs_database_id,
            LogicalEntityType.SUPPORT_TICKET: self.defaults.support_tickets_database_id,
        }[entity_type]

    def _read(self) -> CollectionMapping:
        if not self.path.exists():
            LOGGER.info(f"No database configuration at {self.path}; starting with an empty mapping")
            return CollectionMapping()

        LOGGER.info(f"Loading Notion database configuration from {self.path}")
        try:
            data = json.loads(self.path.read_text(encoding="utf-8"))
        except (OSError, ValueError) as e:
            raise ConfigurationError(
                f"Error loading Notion configuration file {self.path}: {str(e)}", original_error=e
            ) from e

        if not isinstance(data, dict) or not isinstance(data.get("databases"), dict):
            raise ConfigurationError(f"Invalid configuration format in {self.path}: missing 'databases'")

        try:
            mapping = CollectionMapping.from_config_dict(data)
        except PydanticValidationError as e:
            raise ConfigurationError(
                f"Invalid configuration format in {self.path}: {str(e)}", original_error=e
            ) from e

        for entity_type, database_id in mapping.items():
            LOGGER.info(f"- {entity_type.value} database: {database_id or 'Not configured'}")
        return mapping


@lru_cache()
def get_configuration_store() -> ConfigurationStore:
    """Process-wide store built from application settings."""
    return ConfigurationStore(settings.notion.config_path, defaults=settings.notion)
