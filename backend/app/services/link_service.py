"""Page link service - persistence and queries for PageLink."""

import logging
from datetime import UTC, datetime, timedelta
from uuid import UUID

from pydantic import HttpUrl, TypeAdapter
from sqlalchemy.ext.asyncio import AsyncSession
from sqlmodel import select

from app.models import LinkStatus, PageLink

logger = logging.getLogger(__name__)

# Fields copied by update(); created_at and is_active are never overwritten
_UPDATABLE_FIELDS = (
    "url",
    "title",
    "description",
    "status",
    "http_status_code",
    "response_time_ms",
    "last_checked_at",
    "error_message",
    "category",
    "notes",
)

_http_url = TypeAdapter(HttpUrl)


def canonical_url(url: str) -> str:
    """Return the form URLs are stored and compared in (e.g. a bare host gains a trailing slash)."""
    return str(_http_url.validate_python(url))


class LinkStoreError(Exception):
    """Base class for page link store errors."""


class LinkAlreadyExistsError(LinkStoreError):
    """An active link already uses the URL."""

    def __init__(self, url: str):
        super().__init__(f"A link with URL {url} already exists")
        self.url = url


class LinkNotFoundError(LinkStoreError):
    """No link with the given id."""

    def __init__(self, link_id: UUID):
        super().__init__(f"Link {link_id} not found")
        self.link_id = link_id


class PageLinkService:
    """Service for storing and querying page links. Soft-deleted links are excluded from every query."""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def get_all(self) -> list[PageLink]:
        """Get all active links, newest first."""
        logger.info("Fetching all links")
        result = await self.session.execute(
            select(PageLink)
            .where(PageLink.is_active == True)  # noqa: E712
            .order_by(PageLink.created_at.desc(), PageLink.id.desc())
        )
        return list(result.scalars().all())

    async def get_by_id(self, link_id: UUID) -> PageLink | None:
        """Get an active link by ID."""
        logger.info("Fetching link %s", link_id)
        result = await self.session.execute(
            select(PageLink).where(PageLink.id == link_id, PageLink.is_active == True)  # noqa: E712
        )
        return result.scalar_one_or_none()

    async def get_by_url(self, url: str) -> PageLink | None:
        """Get the active link for a URL."""
        url = canonical_url(url)
        logger.info("Fetching link with URL %s", url)
        result = await self.session.execute(
            select(PageLink).where(PageLink.url == url, PageLink.is_active == True)  # noqa: E712
        )
        return result.scalars().first()

    async def add(self, link: PageLink) -> PageLink:
        """
        Add a new link.

        Raises LinkAlreadyExistsError, without touching the store, when an
        active link already has the same URL.
        """
        link.url = canonical_url(link.url)
        logger.info("Adding link %s", link.url)

        if await self.get_by_url(link.url) is not None:
            raise LinkAlreadyExistsError(link.url)

        link.created_at = datetime.now(UTC)
        link.is_active = True

        self.session.add(link)
        await self.session.commit()
        await self.session.refresh(link)

        logger.info("Link added with ID %s", link.id)
        return link

    async def update(self, link: PageLink) -> PageLink:
        """
        Overwrite a stored link with the values of link.

        Raises LinkNotFoundError when no row has link.id, and
        LinkAlreadyExistsError when the URL now belongs to another active link.
        """
        logger.info("Updating link %s", link.id)

        existing = await self.session.get(PageLink, link.id)
        if existing is None:
            raise LinkNotFoundError(link.id)

        url = canonical_url(link.url)

        # Pending in-place edits must not reach the database before the check
        with self.session.no_autoflush:
            duplicate = await self.session.execute(
                select(PageLink.id).where(
                    PageLink.url == url,
                    PageLink.is_active == True,  # noqa: E712
                    PageLink.id != link.id,
                )
            )
            if duplicate.first() is not None:
                # Drop the rejected changes so a later commit cannot save them
                await self.session.refresh(existing)
                raise LinkAlreadyExistsError(url)

        link.url = url
        if existing is not link:
            for field in _UPDATABLE_FIELDS:
                setattr(existing, field, getattr(link, field))

        await self.session.commit()
        await self.session.refresh(existing)

        logger.info("Link %s updated", existing.id)
        return existing

    async def delete(self, link_id: UUID) -> None:
        """Soft delete a link: the row stays, marked inactive."""
        logger.info("Deleting link %s", link_id)

        link = await self.session.get(PageLink, link_id)
        if link is None:
            raise LinkNotFoundError(link_id)

        link.is_active = False
        await self.session.commit()

        logger.info("Link %s deleted", link_id)

    async def get_by_category(self, category: str) -> list[PageLink]:
        """Get active links in a category, newest first."""
        logger.info("Fetching links in category %s", category)
        result = await self.session.execute(
            select(PageLink)
            .where(PageLink.is_active == True, PageLink.category == category)  # noqa: E712
            .order_by(PageLink.created_at.desc())
        )
        return list(result.scalars().all())

    async def get_by_status(self, status: LinkStatus | str) -> list[PageLink]:
        """Get active links with a status, most recently checked first."""
        status = LinkStatus(status).value
        logger.info("Fetching links with status %s", status)
        result = await self.session.execute(
            select(PageLink)
            .where(PageLink.is_active == True, PageLink.status == status)  # noqa: E712
            .order_by(PageLink.last_checked_at.desc())
        )
        return list(result.scalars().all())

    async def get_needing_check(self, hours_threshold: int = 24) -> list[PageLink]:
        """Get active links never checked or not checked in the last hours_threshold hours."""
        logger.info("Fetching links needing a check (threshold: %dh)", hours_threshold)
        threshold = datetime.now(UTC) - timedelta(hours=hours_threshold)
        result = await self.session.execute(
            select(PageLink)
            .where(
                PageLink.is_active == True,  # noqa: E712
                (PageLink.last_checked_at == None)  # noqa: E711
                | (PageLink.last_checked_at < threshold),
            )
            .order_by(PageLink.last_checked_at.asc().nulls_first())
        )
        return list(result.scalars().all())
