"""Status classification for health check results."""

from app.models.page_link import LinkStatus
from app.services.health_checker import HealthCheckResult, ProbeOutcome


def determine_status(result: HealthCheckResult) -> LinkStatus:
    """
    Map a probe result onto the link status taxonomy.

    Timeouts are told apart from other failures by the result's outcome tag,
    not by its error message.
    """
    if not result.is_healthy:
        if result.outcome is ProbeOutcome.TIMEOUT:
            return LinkStatus.TIMEOUT
        return LinkStatus.OFFLINE

    status_code = result.status_code or 0

    if 200 <= status_code < 300:
        return LinkStatus.ONLINE

    # Unreachable for results built by HealthChecker, which only marks 2xx as
    # healthy; other producers may set is_healthy on their own.
    if status_code >= 400:
        return LinkStatus.ERROR

    return LinkStatus.OFFLINE
