"""Page links API endpoints."""

import logging
from collections import Counter
from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException, Query, Request, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.config import get_settings
from app.db.session import get_session as get_db
from app.models import LinkStatus, PageLink
from app.schemas.page_link import (
    CheckSummaryResponse,
    HealthCheckResponse,
    PageLinkCreate,
    PageLinkListResponse,
    PageLinkResponse,
    PageLinkUpdate,
    ProbeRequest,
)
from app.services.health_checker import HealthChecker
from app.services.link_service import (
    LinkAlreadyExistsError,
    LinkNotFoundError,
    PageLinkService,
)
from app.services.link_updater import LinkUpdater
from app.services.status import determine_status

logger = logging.getLogger(__name__)

router = APIRouter()


def get_health_checker(request: Request) -> HealthChecker:
    """Dependency returning the checker shared by the application."""
    return request.app.state.health_checker


def get_link_service(db: AsyncSession = Depends(get_db)) -> PageLinkService:
    """Dependency returning a link service bound to the request session."""
    return PageLinkService(db)


async def _get_or_404(service: PageLinkService, link_id: UUID) -> PageLink:
    link = await service.get_by_id(link_id)
    if link is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Link {link_id} not found",
        )
    return link


@router.get("", response_model=PageLinkListResponse)
async def list_links(
    category: str | None = None,
    link_status: LinkStatus | None = Query(default=None, alias="status"),
    service: PageLinkService = Depends(get_link_service),
) -> PageLinkListResponse:
    """
    List active links.

    - category: only links in this category
    - status: only links with this status
    """
    if category is not None:
        links = await service.get_by_category(category)
    elif link_status is not None:
        links = await service.get_by_status(link_status)
    else:
        links = await service.get_all()

    if category is not None and link_status is not None:
        links = [link for link in links if link.status == link_status.value]

    return PageLinkListResponse(
        links=[PageLinkResponse.model_validate(link) for link in links],
        total=len(links),
    )


@router.get("/stale", response_model=PageLinkListResponse)
async def list_stale_links(
    hours: int | None = Query(default=None, ge=0),
    service: PageLinkService = Depends(get_link_service),
) -> PageLinkListResponse:
    """List links never checked or not checked within the last `hours` hours."""
    threshold = hours if hours is not None else get_settings().stale_after_hours
    links = await service.get_needing_check(threshold)
    return PageLinkListResponse(
        links=[PageLinkResponse.model_validate(link) for link in links],
        total=len(links),
    )


@router.post("", response_model=PageLinkResponse, status_code=status.HTTP_201_CREATED)
async def create_link(
    link_in: PageLinkCreate,
    service: PageLinkService = Depends(get_link_service),
) -> PageLinkResponse:
    """Add a new link. Fails with 409 if an active link already has the URL."""
    link = PageLink(**link_in.model_dump(exclude={"url"}), url=str(link_in.url))
    try:
        link = await service.add(link)
    except LinkAlreadyExistsError as e:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(e)) from e
    return PageLinkResponse.model_validate(link)


@router.post("/probe", response_model=HealthCheckResponse)
async def probe_url(
    probe_in: ProbeRequest,
    checker: HealthChecker = Depends(get_health_checker),
) -> HealthCheckResponse:
    """Check an arbitrary URL without storing anything."""
    url = str(probe_in.url)
    result = await checker.check_health(url)
    return HealthCheckResponse(
        url=url,
        outcome=result.outcome.value,
        is_healthy=result.is_healthy,
        status=determine_status(result),
        status_code=result.status_code,
        response_time_ms=result.response_time_ms,
        title=result.title,
        description=result.description,
        error_message=result.error_message,
        checked_at=result.checked_at,
    )


@router.post("/check-stale", response_model=CheckSummaryResponse)
async def check_stale_links(
    hours: int | None = Query(default=None, ge=0),
    service: PageLinkService = Depends(get_link_service),
    checker: HealthChecker = Depends(get_health_checker),
) -> CheckSummaryResponse:
    """
    Re-check every link that needs it, one after another.

    Each link is saved as soon as its check completes.
    """
    threshold = hours if hours is not None else get_settings().stale_after_hours
    updater = LinkUpdater(checker)
    checked = []

    for link in await service.get_needing_check(threshold):
        await updater.update_link(link)
        checked.append(await service.update(link))

    logger.info("Checked %d stale links", len(checked))
    return CheckSummaryResponse(
        checked=len(checked),
        statuses=dict(Counter(link.status for link in checked)),
        links=[PageLinkResponse.model_validate(link) for link in checked],
    )


@router.get("/{link_id}", response_model=PageLinkResponse)
async def get_link(
    link_id: UUID,
    service: PageLinkService = Depends(get_link_service),
) -> PageLinkResponse:
    """Get a specific link by ID."""
    return PageLinkResponse.model_validate(await _get_or_404(service, link_id))


@router.patch("/{link_id}", response_model=PageLinkResponse)
async def update_link(
    link_id: UUID,
    link_in: PageLinkUpdate,
    service: PageLinkService = Depends(get_link_service),
) -> PageLinkResponse:
    """Update a link. Only the provided fields are changed."""
    link = await _get_or_404(service, link_id)

    changes = link_in.model_dump(exclude_unset=True)
    if changes.get("url") is not None:
        changes["url"] = str(link_in.url)
    else:
        changes.pop("url", None)

    for field, value in changes.items():
        setattr(link, field, value)

    try:
        link = await service.update(link)
    except LinkAlreadyExistsError as e:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(e)) from e
    return PageLinkResponse.model_validate(link)


@router.delete("/{link_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_link(
    link_id: UUID,
    service: PageLinkService = Depends(get_link_service),
) -> None:
    """Remove a link (soft delete)."""
    try:
        await service.delete(link_id)
    except LinkNotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e)) from e


@router.post("/{link_id}/check", response_model=PageLinkResponse)
async def check_link(
    link_id: UUID,
    service: PageLinkService = Depends(get_link_service),
    checker: HealthChecker = Depends(get_health_checker),
) -> PageLinkResponse:
    """Run a health check on a link and save the outcome."""
    link = await _get_or_404(service, link_id)
    link = await LinkUpdater(checker).update_link(link)
    link = await service.update(link)
    return PageLinkResponse.model_validate(link)
