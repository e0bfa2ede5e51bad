"""HTML metadata extraction - page title and description."""

import logging
from dataclasses import dataclass

from bs4 import BeautifulSoup

logger = logging.getLogger(__name__)


@dataclass
class PageMetadata:
    """Title and description recovered from a page. Missing values are None."""

    title: str | None = None
    description: str | None = None


def _meta_content(soup: BeautifulSoup, **attrs: str) -> str | None:
    """Return the trimmed content of the first <meta> matching attrs."""
    node = soup.find("meta", attrs=attrs)
    if node is None:
        return None
    content = node.get("content") or ""
    return content.strip() or None


def _extract_title(soup: BeautifulSoup) -> str | None:
    node = soup.find("title")
    if node is not None:
        title = node.get_text().strip()
        if title:
            return title
    return _meta_content(soup, property="og:title")


def _extract_description(soup: BeautifulSoup) -> str | None:
    return _meta_content(soup, name="description") or _meta_content(
        soup, property="og:description"
    )


def extract_metadata(html: str) -> PageMetadata:
    """
    Extract title and description from an HTML document.

    Title comes from <title>, falling back to og:title. Description comes from
    <meta name="description">, falling back to og:description. The first
    matching node wins. Never raises: a document that cannot be parsed gives
    an empty result, and a failure on one field leaves the other intact.
    """
    metadata = PageMetadata()

    try:
        soup = BeautifulSoup(html, "lxml")
    except Exception:
        logger.warning("Could not parse HTML document", exc_info=True)
        return metadata

    try:
        metadata.title = _extract_title(soup)
        logger.debug("Extracted title: %s", metadata.title)
    except Exception:
        logger.warning("Error extracting title from HTML", exc_info=True)

    try:
        metadata.description = _extract_description(soup)
        logger.debug("Extracted description: %s", metadata.description)
    except Exception:
        logger.warning("Error extracting description from HTML", exc_info=True)

    return metadata
