"""Auto-configuration of the collection mapping.

A setup pass takes the configured parent page, discovers its child
databases, assigns them to entity types by title, validates each assignment
and persists the resulting mapping. Validation problems are reported, never
fatal: a database that fails validation is still mapped.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from portal.core.config import Settings, settings
from portal.core.exceptions import ConfigurationError, RemoteUnavailableError
from portal.core.notion_client import NotionClient
from portal.models.notion_models import CollectionMapping, DiscoveredCollection, LogicalEntityType
from portal.repositories.configuration_store import ConfigurationStore
from portal.services.discovery.collection_discovery import CollectionDiscoveryService
from portal.services.discovery.collection_resolver import CollectionResolver
from portal.services.schema.validator import SchemaValidator, ValidationResult, format_validation_result
from portal.utils.logging import get_logger
from portal.utils.page_id import extract_page_id

LOGGER = get_logger(__name__)

NO_DATABASES_MESSAGE = "No databases detected"


@dataclass
class SetupReport:
    """Outcome of a setup or validation pass.

    Attributes:
        mapping: Collection mapping produced (or inspected) by the pass
        collections: Databases discovered under the parent page
        validations: Validation result per mapped entity type
        persisted: Whether the mapping was written to the configuration store
        message: Human readable summary
    """
    mapping: CollectionMapping = field(default_factory=CollectionMapping)
    collections: List[DiscoveredCollection] = field(default_factory=list)
    validations: Dict[LogicalEntityType, ValidationResult] = field(default_factory=dict)
    persisted: bool = False
    message: str = ""

    @property
    def detected_count(self) -> int:
        return self.mapping.detected_count

    @property
    def all_valid(self) -> bool:
        return all(result.is_valid for result in self.validations.values())

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary."""
        return {
            "message": self.message,
            "detected_count": self.detected_count,
            "persisted": self.persisted,
            "databases": self.mapping.model_dump(by_alias=True),
            "collections": [
                {"id": collection.id, "title": collection.title} for collection in self.collections
            ],
            "validations": {
                entity_type.value: result.to_dict()
                for entity_type, result in self.validations.items()
            },
        }


class DatabaseSetupService:
    """Runs discovery, resolution, validation and persistence as one pass.

    Attributes:
        client: Notion API client
        store: Configuration store receiving the mapping
        discovery: Service listing the page's child databases
        resolver: Title based entity type resolver
        validator: Schema validator
    """

    def __init__(
        self,
        client: NotionClient,
        store: ConfigurationStore,
        discovery: Optional[CollectionDiscoveryService] = None,
        resolver: Optional[CollectionResolver] = None,
        validator: Optional[SchemaValidator] = None,
        app_settings: Optional[Settings] = None,
    ):
        """Initialize the setup service.

        Args:
            client: Notion API client
            store: Configuration store receiving the mapping
            discovery: Discovery service (built from client when omitted)
            resolver: Collection resolver
            validator: Schema validator
            app_settings: Settings supplying the default page URL
        """
        self.client = client
        self.store = store
        self.discovery = discovery or CollectionDiscoveryService(client)
        self.resolver = resolver or CollectionResolver()
        self.validator = validator or SchemaValidator()
        self.settings = app_settings or settings

    async def auto_configure(self, page_url: Optional[str] = None) -> SetupReport:
        """Discover, map, validate and persist the portal's databases.

        Args:
            page_url: Parent page URL; defaults to ``NOTION_PAGE_URL``

        Returns:
            SetupReport describing what was found and stored

        Raises:
            ConfigurationError: If no page URL is available
            MalformedReferenceError: If the page URL holds no page id
            RemoteUnavailableError: If the page's children cannot be listed
        """
        page_url = page_url or self.settings.notion_page_url
        if not page_url:
            raise ConfigurationError("NOTION_PAGE_URL is not set")

        page_id = extract_page_id(page_url)
        LOGGER.info(f"Starting database auto-configuration for page {page_id}")

        collections = await self.discovery.discover(page_id)
        mapping = self.resolver.resolve(collections)
        by_id = {collection.id: collection for collection in collections}

        validations: Dict[LogicalEntityType, ValidationResult] = {}
        for entity_type, database_id in mapping.items():
            if database_id:
                validations[entity_type] = self._validate(by_id[database_id], entity_type)

        report = SetupReport(mapping=mapping, collections=collections, validations=validations)

        if mapping.is_empty:
            report.message = NO_DATABASES_MESSAGE
            LOGGER.warning(
                f"{NO_DATABASES_MESSAGE} under page {page_id}; keeping the existing configuration",
                extra={"discovered": len(collections)},
            )
            return report

        self.store.save(mapping)
        report.persisted = True
        report.message = (
            f"Configured {report.detected_count} of {len(LogicalEntityType)} databases"
        )
        LOGGER.info(report.message, extra={"all_valid": report.all_valid})
        return report

    async def validate_configured(self) -> SetupReport:
        """Re-validate the databases of the stored mapping.

        Databases that can no longer be retrieved get an invalid result
        instead of aborting the pass.
        """
        mapping = self.store.load()
        report = SetupReport(mapping=mapping)

        for entity_type, database_id in mapping.items():
            if not database_id:
                continue
            try:
                database = await self.client.retrieve_database(database_id)
            except RemoteUnavailableError as e:
                LOGGER.error(
                    f"Error retrieving {entity_type.value} database {database_id}: {str(e)}",
                    extra={"database_id": database_id, "status_code": e.status_code},
                )
                report.validations[entity_type] = ValidationResult(
                    errors=[f"Unable to retrieve database {database_id}: {str(e)}"]
                )
                continue

            collection = DiscoveredCollection.from_database(database)
            report.collections.append(collection)
            report.validations[entity_type] = self._validate(collection, entity_type)

        if mapping.is_empty:
            report.message = NO_DATABASES_MESSAGE
        elif report.all_valid:
            report.message = "All configured databases are valid"
        else:
            report.message = "Some configured databases do not match their expected schema"
        return report

    def apply_manual_mapping(self, mapping: CollectionMapping) -> CollectionMapping:
        """Persist a mapping supplied by an operator.

        Args:
            mapping: Mapping to store; unspecified types are stored as null

        Returns:
            The stored mapping
        """
        if not isinstance(mapping, CollectionMapping):
            mapping = CollectionMapping.model_validate(mapping)
        self.store.save(mapping)
        LOGGER.info(f"Applied manual database mapping ({mapping.detected_count} configured)")
        return mapping

    def _validate(self, collection: DiscoveredCollection, entity_type: LogicalEntityType) -> ValidationResult:
        result = self.validator.validate(collection, entity_type)
        LOGGER.debug(format_validation_result(result, entity_type.value))
        return result
