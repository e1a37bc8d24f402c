"""Repository for portal content stored in Notion databases.

This repository resolves each entity type to its configured database,
queries or writes pages through the Notion client, and converts them with
the entity marshallers. Nothing is cached; every call reflects the current
state of the workspace.
"""

from datetime import datetime, timezone
from typing import Any, Dict, List, Optional, Type, Union

from portal.core.exceptions import RemoteUnavailableError, ValidationError
from portal.core.notion_client import NotionClient
from portal.models.notion_models import LogicalEntityType
from portal.models.records import FAQ, Article, Category, PortalRecord, SupportTicket
from portal.repositories.configuration_store import ConfigurationStore
from portal.services.marshalling.base_marshaller import BaseMarshaller
from portal.services.marshalling.marshallers import (
    ArticleMarshaller,
    CategoryMarshaller,
    FAQMarshaller,
    SupportTicketMarshaller,
)
from portal.utils.logging import get_logger

LOGGER = get_logger(__name__)

NOT_FOUND_STATUS = 404


class PortalRepository:
    """Data access for categories, articles, FAQs and support tickets.

    Attributes:
        client: Notion API client
        store: Configuration store resolving entity types to database ids
    """

    def __init__(self, client: NotionClient, store: ConfigurationStore):
        """Initialize portal repository.

        Args:
            client: Notion API client
            store: Configuration store with the collection mapping
        """
        self.client = client
        self.store = store

    # Categories

    async def get_categories(self) -> List[Category]:
        return await self._list(CategoryMarshaller)

    async def get_category_by_id(self, category_id: str) -> Optional[Category]:
        return await self._get(CategoryMarshaller, category_id)

    # Articles

    async def get_articles(
        self,
        category_id: Optional[str] = None,
        is_popular: Optional[bool] = None,
    ) -> List[Article]:
        """List articles sorted by title.

        Args:
            category_id: Only articles whose CategoryId equals this value
            is_popular: Only articles whose IsPopular flag equals this value

        Returns:
            Matching articles
        """
        conditions: List[Dict[str, Any]] = []
        if category_id:
            conditions.append({"property": "CategoryId", "rich_text": {"equals": category_id}})
        if is_popular is not None:
            conditions.append({"property": "IsPopular", "checkbox": {"equals": is_popular}})

        return await self._list(
            ArticleMarshaller,
            filter=self._combine(conditions),
            sorts=[{"property": "Title", "direction": "ascending"}],
        )

    async def get_article_by_id(self, article_id: str) -> Optional[Article]:
        return await self._get(ArticleMarshaller, article_id)

    # FAQs

    async def get_faqs(self, category_id: Optional[str] = None) -> List[FAQ]:
        """List FAQs, optionally restricted to one category."""
        conditions: List[Dict[str, Any]] = []
        if category_id:
            conditions.append({"property": "CategoryId", "rich_text": {"equals": category_id}})
        return await self._list(FAQMarshaller, filter=self._combine(conditions))

    async def get_faq_by_id(self, faq_id: str) -> Optional[FAQ]:
        return await self._get(FAQMarshaller, faq_id)

    # Support tickets

    async def get_tickets(self) -> List[SupportTicket]:
        """List support tickets, newest submission first."""
        return await self._list(
            SupportTicketMarshaller,
            sorts=[{"property": "submission_date", "direction": "descending"}],
        )

    async def get_ticket_by_id(self, ticket_id: str) -> Optional[SupportTicket]:
        return await self._get(SupportTicketMarshaller, ticket_id)

    async def create_ticket(self, ticket: Union[SupportTicket, Dict[str, Any]]) -> SupportTicket:
        """Create a support ticket page.

        Args:
            ticket: Ticket record or mapping of ticket fields; ``name`` and
                ``email`` are required, ``status`` defaults to ``new`` and
                ``created_at`` to the current time

        Returns:
            SupportTicket: The created ticket as stored in Notion

        Raises:
            ValidationError: If name or email is missing
            ConfigurationError: If no tickets database is configured
            RemoteUnavailableError: If the Notion API call fails
        """
        if not isinstance(ticket, SupportTicket):
            ticket = SupportTicket.model_validate(ticket)

        if not ticket.name or not ticket.email:
            raise ValidationError("Support ticket requires a name and an email")

        ticket = ticket.model_copy(
            update={
                "status": ticket.status or "new",
                "created_at": ticket.created_at or datetime.now(timezone.utc).isoformat(),
            }
        )
        # model_copy does not touch model_fields_set; mark every field for writing
        payload = ticket.model_dump(exclude={"id", "subject", "category"})
        properties = SupportTicketMarshaller.to_remote_properties(payload)

        database_id = self.store.get_database_id(LogicalEntityType.SUPPORT_TICKET)
        page = await self.client.create_page(
            database_id,
            properties,
            children=SupportTicketMarshaller.build_children(ticket),
        )

        created = SupportTicketMarshaller.to_record(page)
        LOGGER.info(
            "Support ticket created",
            extra={"ticket_id": created.id, "database_id": database_id},
        )
        return created

    async def update_ticket_status(self, ticket_id: str, status: str) -> SupportTicket:
        """Set a ticket's status, leaving its other properties untouched.

        Args:
            ticket_id: Ticket page id
            status: New status option name

        Returns:
            SupportTicket: The updated ticket
        """
        if not status:
            raise ValidationError("Support ticket status must not be empty")

        properties = SupportTicketMarshaller.to_remote_properties({"status": status})
        page = await self.client.update_page(ticket_id, properties)

        LOGGER.info(f"Support ticket {ticket_id} status set to {status}")
        return SupportTicketMarshaller.to_record(page)

    async def _list(
        self,
        marshaller: Type[BaseMarshaller],
        filter: Optional[Dict[str, Any]] = None,
        sorts: Optional[List[Dict[str, Any]]] = None,
    ) -> List[PortalRecord]:
        database_id = self.store.get_database_id(marshaller.ENTITY_TYPE)
        pages = await self.client.query_database(database_id, filter=filter, sorts=sorts)

        LOGGER.debug(
            f"Fetched {len(pages)} {marshaller.ENTITY_TYPE.value}",
            extra={"database_id": database_id, "filter": filter},
        )
        return [marshaller.to_record(page) for page in pages]

    async def _get(self, marshaller: Type[BaseMarshaller], page_id: str) -> Optional[PortalRecord]:
        """Fetch one page, returning None when Notion reports it does not exist."""
        try:
            page = await self.client.retrieve_page(page_id)
        except RemoteUnavailableError as e:
            if e.status_code == NOT_FOUND_STATUS:
                LOGGER.debug(f"{marshaller.ENTITY_TYPE.value} page {page_id} not found")
                return None
            raise
        return marshaller.to_record(page)

    @staticmethod
    def _combine(conditions: List[Dict[str, Any]]) -> Optional[Dict[str, Any]]:
        if not conditions:
            return None
        if len(conditions) == 1:
            return conditions[0]
        return {"and": conditions}
