"""Notion page URL parsing.

Notion hands out at least three URL shapes for the same page depending on
where it was shared from:

- ``https://www.notion.so/{workspace}/{Page-Title}-{id}``
- ``https://www.notion.so/{id}?pvs=4``
- ``https://www.notion.so/{8-4-4-4-12 dashed id}``

All of them resolve to the same bare 32-character hex identifier.
"""

import re

from portal.core.exceptions import MalformedReferenceError
from portal.utils.logging import get_logger

LOGGER = get_logger(__name__)

BARE_ID_PATTERN = re.compile(r"([a-f0-9]{32})(?:[?#]|$)", re.IGNORECASE)
DASHED_ID_PATTERN = re.compile(
    r"([a-f0-9]{8}-[a-f0-9]{4}-[a-f0-9]{4}-[a-f0-9]{4}-[a-f0-9]{12})(?:[?#]|$)",
    re.IGNORECASE,
)
TRAILING_ID_PATTERN = re.compile(r"^[a-f0-9]{32,}$", re.IGNORECASE)


def extract_page_id(page_url: str) -> str:
    """Extract the canonical page id from a Notion page URL.

    Args:
        page_url: Any Notion page URL (or a bare id)

    Returns:
        The id as bare hex, dashes stripped

    Raises:
        MalformedReferenceError: If no identifier can be located
    """
    url = (page_url or "").strip()

    match = BARE_ID_PATTERN.search(url) or DASHED_ID_PATTERN.search(url)
    if match:
        return match.group(1).replace("-", "")

    # Last resort: trailing "-<id>" component of the final path segment
    segments = [segment for segment in url.split("/") if segment]
    if segments:
        candidate = segments[-1].split("-")[-1].split("?")[0]
        if TRAILING_ID_PATTERN.match(candidate):
            return candidate

    LOGGER.error(f"Failed to extract page ID from Notion URL: {page_url}")
    raise MalformedReferenceError(f"Failed to extract page ID from Notion URL: {page_url}")
