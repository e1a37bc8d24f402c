from portal.services.marshalling.base_marshaller import BaseMarshaller
from portal.services.marshalling.marshallers import (
    ArticleMarshaller,
    CategoryMarshaller,
    FAQMarshaller,
    SupportTicketMarshaller,
    get_marshaller,
)

__all__ = [
    "BaseMarshaller",
    "ArticleMarshaller",
    "CategoryMarshaller",
    "FAQMarshaller",
    "SupportTicketMarshaller",
    "get_marshaller",
]
