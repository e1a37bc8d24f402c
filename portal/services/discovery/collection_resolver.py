"""Heuristic assignment of discovered databases to logical entity types."""

from typing import Dict, Optional, Sequence, Tuple

from portal.models.notion_models import (
    CollectionMapping,
    DiscoveredCollection,
    LogicalEntityType,
    MAPPING_FIELDS,
)
from portal.utils.logging import get_logger

LOGGER = get_logger(__name__)


class CollectionResolver:
    """Maps databases to entity types by title substring.

    A title like "Support Articles" matches more than one vocabulary; the
    declaration order of ``TITLE_VOCABULARY`` decides (categories, articles,
    faqs, support tickets). Each database satisfies at most one type, and each
    type takes the first database that matches it.
    """

    TITLE_VOCABULARY: Dict[LogicalEntityType, Tuple[str, ...]] = {
        LogicalEntityType.CATEGORY: ("category", "categories"),
        LogicalEntityType.ARTICLE: ("article", "articles", "documentation"),
        LogicalEntityType.FAQ: ("faq", "faqs", "question"),
        LogicalEntityType.SUPPORT_TICKET: ("ticket", "tickets", "support"),
    }

    @classmethod
    def match_entity_type(cls, title: str) -> Optional[LogicalEntityType]:
        """Return the entity type a database title points at, if any.

        Args:
            title: Database title

        Returns:
            First matching entity type in vocabulary order, or None
        """
        normalized = (title or "").lower()
        for entity_type, vocabulary in cls.TITLE_VOCABULARY.items():
            if any(term in normalized for term in vocabulary):
                return entity_type
        return None

    @classmethod
    def resolve(cls, collections: Sequence[DiscoveredCollection]) -> CollectionMapping:
        """Build a collection mapping from discovered databases.

        Databases matching no vocabulary stay unmapped; an empty result is not
        an error here.

        Args:
            collections: Databases in discovery order

        Returns:
            Mapping with the first matching database id per entity type
        """
        assigned: Dict[LogicalEntityType, str] = {}

        for collection in collections:
            entity_type = cls.match_entity_type(collection.title)
            if entity_type is None:
                LOGGER.debug(f"Database '{collection.title}' ({collection.id}) matched no entity type")
                continue

            if entity_type in assigned:
                LOGGER.debug(
                    f"Database '{collection.title}' ({collection.id}) also matches "
                    f"{entity_type.value}; keeping {assigned[entity_type]}"
                )
                continue

            assigned[entity_type] = collection.id
            LOGGER.info(f"Mapped {entity_type.value} to database '{collection.title}' ({collection.id})")

        mapping = CollectionMapping(
            **{MAPPING_FIELDS[entity_type]: database_id for entity_type, database_id in assigned.items()}
        )

        if mapping.is_empty:
            LOGGER.warning("Zero databases auto-detected; manual mapping required")

        return mapping
