"""Initial page links inserted on startup."""

import logging

from sqlalchemy.ext.asyncio import AsyncSession

from app.models import LinkStatus, PageLink
from app.services.link_service import PageLinkService

logger = logging.getLogger(__name__)

SEED_LINKS: list[dict[str, str]] = [
    {
        "url": "https://www.google.com",
        "title": "Google",
        "description": "Search engine",
        "category": "Search Engine",
    },
    {
        "url": "https://www.github.com",
        "title": "GitHub",
        "description": "Development platform",
        "category": "Development",
    },
]


async def seed_links(session: AsyncSession) -> list[PageLink]:
    """Add the seed links that are not already stored. Returns the links added."""
    service = PageLinkService(session)
    added = []

    for data in SEED_LINKS:
        if await service.get_by_url(data["url"]) is not None:
            continue
        link = await service.add(PageLink(status=LinkStatus.PENDING.value, **data))
        added.append(link)

    if added:
        logger.info("Seeded %d links", len(added))
    return added
