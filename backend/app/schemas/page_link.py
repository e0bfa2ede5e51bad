"""Page link schemas for API request/response validation."""

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, Field, HttpUrl, field_validator

from app.models.page_link import (
    CATEGORY_MAX_LENGTH,
    DESCRIPTION_MAX_LENGTH,
    NOTES_MAX_LENGTH,
    TITLE_MAX_LENGTH,
    URL_MAX_LENGTH,
    LinkStatus,
)


def _check_url_length(url: HttpUrl | None) -> HttpUrl | None:
    if url is not None and len(str(url)) > URL_MAX_LENGTH:
        raise ValueError(f"URL must be at most {URL_MAX_LENGTH} characters")
    return url


class PageLinkBase(BaseModel):
    """Base page link schema with user-editable fields."""

    url: HttpUrl = Field(..., description="Absolute URL of the page")
    title: str | None = Field(default=None, max_length=TITLE_MAX_LENGTH)
    description: str | None = Field(default=None, max_length=DESCRIPTION_MAX_LENGTH)
    category: str | None = Field(default=None, max_length=CATEGORY_MAX_LENGTH)
    notes: str | None = Field(default=None, max_length=NOTES_MAX_LENGTH)

    @field_validator("url")
    @classmethod
    def check_url_length(cls, url: HttpUrl | None) -> HttpUrl | None:
        return _check_url_length(url)


class PageLinkCreate(PageLinkBase):
    """Schema for adding a link."""

    pass


class PageLinkUpdate(BaseModel):
    """Schema for partial updates. Only the provided keys are applied."""

    url: HttpUrl | None = None
    title: str | None = Field(default=None, max_length=TITLE_MAX_LENGTH)
    description: str | None = Field(default=None, max_length=DESCRIPTION_MAX_LENGTH)
    category: str | None = Field(default=None, max_length=CATEGORY_MAX_LENGTH)
    notes: str | None = Field(default=None, max_length=NOTES_MAX_LENGTH)

    @field_validator("url")
    @classmethod
    def check_url_length(cls, url: HttpUrl | None) -> HttpUrl | None:
        return _check_url_length(url)


class PageLinkResponse(BaseModel):
    """Schema for page link responses."""

    id: UUID
    url: str
    title: str | None = None
    description: str | None = None
    status: LinkStatus
    http_status_code: int | None = None
    response_time_ms: int | None = None
    created_at: datetime
    last_checked_at: datetime | None = None
    error_message: str | None = None
    category: str | None = None
    notes: str | None = None
    is_active: bool = True

    class Config:
        from_attributes = True


class PageLinkListResponse(BaseModel):
    """Schema for page link list response."""

    links: list[PageLinkResponse]
    total: int


class ProbeRequest(BaseModel):
    """Schema for probing a URL without storing it."""

    url: HttpUrl


class HealthCheckResponse(BaseModel):
    """Outcome of a single probe."""

    url: str
    outcome: str
    is_healthy: bool
    status: LinkStatus
    status_code: int | None = None
    response_time_ms: int
    title: str | None = None
    description: str | None = None
    error_message: str | None = None
    checked_at: datetime


class CheckSummaryResponse(BaseModel):
    """Summary of a sequential re-check of stale links."""

    checked: int
    statuses: dict[str, int] = Field(default_factory=dict)
    links: list[PageLinkResponse] = Field(default_factory=list)
