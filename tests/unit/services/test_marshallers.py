"""Tests for page <-> record marshalling."""

import pytest

from portal.models.notion_models import LogicalEntityType
from portal.models.records import FAQ, Article, Category, SupportTicket
from portal.services.marshalling import (
    ArticleMarshaller,
    CategoryMarshaller,
    FAQMarshaller,
    SupportTicketMarshaller,
    get_marshaller,
)
from portal.services.marshalling.properties import MAX_SPAN_LENGTH, plain_text, text_spans


def as_page(properties: dict, page_id: str = "page-1") -> dict:
    return {"object": "page", "id": page_id, "properties": properties}


class TestPropertyHelpers:

    def test_plain_text_read_and_write_shapes(self):
        spans = [
            {"type": "text", "plain_text": "Hello, "},
            {"type": "text", "text": {"content": "world"}},
        ]
        assert plain_text(spans) == "Hello, world"
        assert plain_text(None) == ""

    def test_long_text_is_chunked(self):
        content = "x" * (MAX_SPAN_LENGTH * 2 + 5)

        spans = text_spans(content)

        assert [len(span["text"]["content"]) for span in spans] == [MAX_SPAN_LENGTH, MAX_SPAN_LENGTH, 5]
        assert plain_text(spans) == content

    def test_empty_text_has_no_spans(self):
        assert text_spans("") == []


class TestReadPath:
    """Pages with missing data still produce complete records."""

    def test_empty_article_defaults(self):
        article = ArticleMarshaller.to_record(as_page({}))

        assert article == Article(id="page-1")
        assert article.title == "Untitled Article"
        assert article.content == ""
        assert article.category_name == "Uncategorized"
        assert article.is_popular is False

    def test_article_metadata(self):
        page = as_page({
            "Title": {"type": "title", "title": [{"plain_text": "Getting started"}]},
            "IsPopular": {"type": "checkbox", "checkbox": True},
        })
        page["created_time"] = "2024-01-01T00:00:00.000Z"
        page["last_edited_time"] = "2024-02-01T00:00:00.000Z"

        article = ArticleMarshaller.to_record(page)

        assert article.title == "Getting started"
        assert article.is_popular is True
        assert article.created_at == "2024-01-01T00:00:00.000Z"
        assert article.updated_at == "2024-02-01T00:00:00.000Z"

    def test_empty_title_uses_default(self):
        category = CategoryMarshaller.to_record(as_page({"Name": {"type": "title", "title": []}}))

        assert category.name == "Untitled Category"

    def test_faq_reads_synonym_properties(self):
        page = as_page({
            "Title": {"type": "title", "title": [{"plain_text": "How do I reset my password?"}]},
            "Description": {"type": "rich_text", "rich_text": [{"plain_text": "Use the reset link."}]},
        })

        faq = FAQMarshaller.to_record(page)

        assert faq.question == "How do I reset my password?"
        assert faq.answer == "Use the reset link."
        assert faq.category_name == "Uncategorized"

    def test_ticket(self, sample_ticket_page):
        ticket = SupportTicketMarshaller.to_record(sample_ticket_page)

        assert ticket.id == "ticket-page-1"
        assert ticket.name == "Ada Lovelace"
        assert ticket.email == "ada@example.com"
        assert ticket.status == "in-progress"
        assert ticket.created_at == "2024-05-01T09:59:00+00:00"
        assert ticket.subject == "Support Request"
        assert ticket.category == "General"

    def test_ticket_falls_back_to_created_time(self, sample_ticket_page):
        del sample_ticket_page["properties"]["submission_date"]
        del sample_ticket_page["properties"]["status"]

        ticket = SupportTicketMarshaller.to_record(sample_ticket_page)

        assert ticket.created_at == "2024-05-01T10:00:00.000Z"
        assert ticket.status == "new"

    def test_ticket_serializes_camel_case(self, sample_ticket_page):
        data = SupportTicketMarshaller.to_record(sample_ticket_page).model_dump(by_alias=True)

        assert data["createdAt"] == "2024-05-01T09:59:00+00:00"
        assert data["subject"] == "Support Request"


class TestWritePath:

    def test_title_and_select_shapes(self):
        properties = SupportTicketMarshaller.to_remote_properties(
            {"name": "Ada", "email": "ada@example.com", "status": "new"}
        )

        assert properties == {
            "full_name": {"title": [{"type": "text", "text": {"content": "Ada"}}]},
            "email": {"email": "ada@example.com"},
            "status": {"select": {"name": "new"}},
        }

    def test_empty_select_clears_option(self):
        properties = SupportTicketMarshaller.to_remote_properties({"status": ""})

        assert properties == {"status": {"select": None}}
        assert SupportTicketMarshaller.to_record(as_page(properties)).status == "new"

    def test_partial_update_only_includes_given_fields(self):
        assert SupportTicketMarshaller.to_remote_properties({"status": "closed"}) == {
            "status": {"select": {"name": "closed"}}
        }

    def test_accepts_camel_case_input(self):
        properties = ArticleMarshaller.to_remote_properties({"categoryId": "cat-1", "isPopular": False})

        assert properties == {
            "CategoryId": {"rich_text": [{"type": "text", "text": {"content": "cat-1"}}]},
            "IsPopular": {"checkbox": False},
        }

    def test_ids_are_never_written(self):
        properties = CategoryMarshaller.to_remote_properties(Category(id="page-1", name="Billing"))

        assert list(properties) == ["Name"]

    def test_ticket_children(self):
        ticket = SupportTicket(name="Ada", email="ada@example.com", description="Cannot log in")

        children = SupportTicketMarshaller.build_children(ticket)

        assert [block["type"] for block in children] == [
            "heading_2", "paragraph", "paragraph", "heading_3", "paragraph",
        ]
        assert children[-1]["paragraph"]["rich_text"][0]["text"]["content"] == "Cannot log in"


class TestRoundTrip:
    """toRecord(toRemoteProperties(record)) keeps every populated field.

    Empty text counts as absent on the read path, so a field set to ""
    comes back as the record default.
    """

    @pytest.mark.parametrize(
        "marshaller,record",
        [
            (CategoryMarshaller, Category(name="Billing", description="Invoices and payments", icon="💳")),
            (
                ArticleMarshaller,
                Article(
                    title="Long read",
                    content="a" * (MAX_SPAN_LENGTH + 10),
                    category_id="cat-1",
                    category_name="Billing",
                    is_popular=True,
                ),
            ),
            (FAQMarshaller, FAQ(question="Can I export?", answer="Yes, as CSV.", category_id="cat-2")),
            (
                SupportTicketMarshaller,
                SupportTicket(
                    name="Ada",
                    email="ada@example.com",
                    description="Cannot log in",
                    status="resolved",
                    created_at="2024-05-01T09:59:00+00:00",
                ),
            ),
        ],
    )
    def test_round_trip(self, marshaller, record):
        restored = marshaller.to_record(as_page(marshaller.to_remote_properties(record)))

        for field_name in record.model_fields_set:
            assert getattr(restored, field_name) == getattr(record, field_name)

    def test_absent_fields_get_defaults(self):
        restored = FAQMarshaller.to_record(as_page(FAQMarshaller.to_remote_properties({"question": "Why?"})))

        assert restored.question == "Why?"
        assert restored.answer == ""
        assert restored.category_name == "Uncategorized"

    def test_empty_strings_read_back_as_defaults(self):
        record = Article(title="Setup", category_name="")

        restored = ArticleMarshaller.to_record(as_page(ArticleMarshaller.to_remote_properties(record)))

        assert restored.title == "Setup"
        assert restored.category_name == "Uncategorized"


def test_get_marshaller():
    assert get_marshaller("supportTickets") is SupportTicketMarshaller
    assert get_marshaller(LogicalEntityType.FAQ) is FAQMarshaller
