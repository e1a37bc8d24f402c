"""Marshallers for the four portal entity types."""

from typing import Any, Dict, List, Mapping, Type

from portal.models.notion_models import LogicalEntityType
from portal.models.records import FAQ, Article, Category, SupportTicket
from portal.services.marshalling.base_marshaller import BaseMarshaller
from portal.services.marshalling.properties import text_span, text_spans


class CategoryMarshaller(BaseMarshaller):
    ENTITY_TYPE = LogicalEntityType.CATEGORY
    RECORD_TYPE = Category
    FIELD_MAP = {
        "name": "Name",
        "description": "Description",
        "icon": "Icon",
    }


class ArticleMarshaller(BaseMarshaller):
    """Articles carry page timestamps as created_at/updated_at."""

    ENTITY_TYPE = LogicalEntityType.ARTICLE
    RECORD_TYPE = Article
    FIELD_MAP = {
        "title": "Title",
        "content": "Content",
        "category_id": "CategoryId",
        "category_name": "CategoryName",
        "is_popular": "IsPopular",
    }

    @classmethod
    def _metadata(cls, page: Mapping[str, Any], values: Dict[str, Any]) -> Dict[str, Any]:
        return {
            "id": page.get("id"),
            "created_at": page.get("created_time"),
            "updated_at": page.get("last_edited_time"),
        }


class FAQMarshaller(BaseMarshaller):
    """FAQ pages are read leniently, like FAQ databases are validated."""

    ENTITY_TYPE = LogicalEntityType.FAQ
    RECORD_TYPE = FAQ
    FIELD_MAP = {
        "question": "Question",
        "answer": "Answer",
        "category_id": "CategoryId",
        "category_name": "CategoryName",
    }


class SupportTicketMarshaller(BaseMarshaller):
    """Tickets store their creation time in ``submission_date``."""

    ENTITY_TYPE = LogicalEntityType.SUPPORT_TICKET
    RECORD_TYPE = SupportTicket
    FIELD_MAP = {
        "name": "full_name",
        "email": "email",
        "description": "description",
        "status": "status",
        "created_at": "submission_date",
    }

    @classmethod
    def _metadata(cls, page: Mapping[str, Any], values: Dict[str, Any]) -> Dict[str, Any]:
        metadata = {"id": page.get("id")}
        if "created_at" not in values and page.get("created_time"):
            metadata["created_at"] = page["created_time"]
        return metadata

    @staticmethod
    def build_children(ticket: SupportTicket) -> List[Dict[str, Any]]:
        """Page body blocks summarizing a newly submitted ticket."""
        def block(block_type: str, spans: List[Dict[str, Any]]) -> Dict[str, Any]:
            return {"object": "block", "type": block_type, block_type: {"rich_text": spans}}

        return [
            block("heading_2", [text_span("Support Ticket Details")]),
            block("paragraph", [text_span(f"Name: {ticket.name}")]),
            block("paragraph", [text_span(f"Email: {ticket.email}")]),
            block("heading_3", [text_span("Description")]),
            block("paragraph", text_spans(ticket.description)),
        ]


MARSHALLERS: Dict[LogicalEntityType, Type[BaseMarshaller]] = {
    LogicalEntityType.CATEGORY: CategoryMarshaller,
    LogicalEntityType.ARTICLE: ArticleMarshaller,
    LogicalEntityType.FAQ: FAQMarshaller,
    LogicalEntityType.SUPPORT_TICKET: SupportTicketMarshaller,
}


def get_marshaller(entity_type: str) -> Type[BaseMarshaller]:
    """Return the marshaller class for an entity type."""
    return MARSHALLERS[LogicalEntityType(entity_type)]
