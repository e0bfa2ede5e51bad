"""Link updater - applies a health check to a stored PageLink."""

import logging

from app.models.page_link import (
    DESCRIPTION_MAX_LENGTH,
    ERROR_MESSAGE_MAX_LENGTH,
    TITLE_MAX_LENGTH,
    PageLink,
)
from app.services.health_checker import HealthChecker
from app.services.status import determine_status

logger = logging.getLogger(__name__)


class LinkUpdater:
    """Runs the health checker against a link and writes the outcome onto it."""

    def __init__(self, checker: HealthChecker):
        self.checker = checker

    async def update_link(self, link: PageLink) -> PageLink:
        """
        Check link.url and update the link's health fields in place.

        Title and description are only replaced by non-empty extracted values,
        so a failed extraction never erases what is already known. Nothing is
        persisted here; the caller saves the returned link.
        """
        result = await self.checker.check_health(link.url)

        link.http_status_code = result.status_code
        link.response_time_ms = result.response_time_ms
        link.last_checked_at = result.checked_at
        link.error_message = (
            result.error_message[:ERROR_MESSAGE_MAX_LENGTH] if result.error_message else None
        )

        if result.title:
            link.title = result.title[:TITLE_MAX_LENGTH]
        if result.description:
            link.description = result.description[:DESCRIPTION_MAX_LENGTH]

        link.status = determine_status(result).value

        logger.info("Link checked: %s - status %s", link.url, link.status)
        return link
