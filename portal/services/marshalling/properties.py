"""Readers and writers for the Notion property types the portal uses.

Notion represents each property as ``{<type>: <type-specific payload>}``.
The six types handled here form a closed set; anything else is ignored.
"""

from typing import Any, Callable, Dict, List, Optional

from portal.models.notion_models import RemoteType

# Notion rejects rich text spans longer than this
MAX_SPAN_LENGTH = 2000


def plain_text(spans: Optional[List[Dict[str, Any]]]) -> str:
    """Concatenate the text of rich-text spans.

    Accepts both the read shape (``plain_text``) and the write shape
    (``text.content``).
    """
    return "".join(
        span.get("plain_text") or (span.get("text") or {}).get("content", "")
        for span in spans or []
    )


def text_span(content: str) -> Dict[str, Any]:
    return {"type": "text", "text": {"content": content}}


def text_spans(content: str) -> List[Dict[str, Any]]:
    """Split content into spans no longer than MAX_SPAN_LENGTH."""
    return [
        text_span(content[start:start + MAX_SPAN_LENGTH])
        for start in range(0, len(content), MAX_SPAN_LENGTH)
    ]


def _read_text(payload: Any) -> Optional[str]:
    return plain_text(payload) or None


def _read_select(payload: Any) -> Optional[str]:
    return (payload or {}).get("name")


def _read_email(payload: Any) -> Optional[str]:
    return payload or None


def _read_checkbox(payload: Any) -> Optional[bool]:
    return None if payload is None else bool(payload)


def _read_date(payload: Any) -> Optional[str]:
    return (payload or {}).get("start")


READERS: Dict[RemoteType, Callable[[Any], Any]] = {
    RemoteType.TITLE: _read_text,
    RemoteType.RICH_TEXT: _read_text,
    RemoteType.SELECT: _read_select,
    RemoteType.EMAIL: _read_email,
    RemoteType.CHECKBOX: _read_checkbox,
    RemoteType.DATE: _read_date,
}

WRITERS: Dict[RemoteType, Callable[[Any], Any]] = {
    RemoteType.TITLE: lambda value: [text_span(str(value))],
    RemoteType.RICH_TEXT: lambda value: text_spans(str(value)),
    RemoteType.SELECT: lambda value: {"name": str(value)} if value else None,
    RemoteType.EMAIL: lambda value: value or None,
    RemoteType.CHECKBOX: lambda value: bool(value),
    RemoteType.DATE: lambda value: {"start": str(value)},
}


def read_property(prop: Optional[Dict[str, Any]], remote_type: RemoteType) -> Any:
    """Read a property's value, or None when it is absent or empty.

    Args:
        prop: Property object from a page's ``properties`` bag
        remote_type: Expected Notion type

    Returns:
        Python value (str/bool) or None
    """
    if not prop:
        return None
    return READERS[remote_type](prop.get(remote_type.value))


def write_property(value: Any, remote_type: RemoteType) -> Dict[str, Any]:
    """Build the write shape of a property.

    Args:
        value: Python value
        remote_type: Notion type to write

    Returns:
        ``{<type>: <payload>}`` as the Notion write API expects
    """
    return {remote_type.value: WRITERS[remote_type](value)}
