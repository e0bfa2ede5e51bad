"""PageLink model - bookmarked URLs tracked for liveness."""

from datetime import UTC, datetime
from enum import Enum
from uuid import UUID, uuid4

from sqlalchemy import DateTime
from sqlmodel import Field, SQLModel


class LinkStatus(str, Enum):
    """Last known liveness of a page link."""

    PENDING = "Pending"
    ONLINE = "Online"
    OFFLINE = "Offline"
    ERROR = "Error"
    TIMEOUT = "Timeout"


# Column limits, shared with the API schemas and the link updater
URL_MAX_LENGTH = 2000
TITLE_MAX_LENGTH = 500
DESCRIPTION_MAX_LENGTH = 1000
ERROR_MESSAGE_MAX_LENGTH = 1000
CATEGORY_MAX_LENGTH = 100
NOTES_MAX_LENGTH = 2000


class PageLink(SQLModel, table=True):
    """
    A managed bookmark.
    Health fields are written by the link updater; is_active=False marks a soft delete.
    """

    __tablename__ = "page_links"

    id: UUID = Field(default_factory=uuid4, primary_key=True)

    # Page
    url: str = Field(max_length=URL_MAX_LENGTH, index=True)
    title: str | None = Field(default=None, max_length=TITLE_MAX_LENGTH)
    description: str | None = Field(default=None, max_length=DESCRIPTION_MAX_LENGTH)

    # Health
    status: str = Field(default=LinkStatus.PENDING.value, max_length=50, index=True)
    http_status_code: int | None = Field(default=None)
    response_time_ms: int | None = Field(default=None, ge=0)
    last_checked_at: datetime | None = Field(
        default=None, sa_type=DateTime(timezone=True)
    )
    error_message: str | None = Field(default=None, max_length=ERROR_MESSAGE_MAX_LENGTH)

    # User metadata
    category: str | None = Field(default=None, max_length=CATEGORY_MAX_LENGTH, index=True)
    notes: str | None = Field(default=None, max_length=NOTES_MAX_LENGTH)

    # Timestamps
    created_at: datetime = Field(
        default_factory=lambda: datetime.now(UTC),
        sa_type=DateTime(timezone=True),
        index=True,
    )

    # Status
    is_active: bool = Field(default=True)
