"""Models package - SQLModel database models."""

from app.models.page_link import LinkStatus, PageLink

__all__ = ["PageLink", "LinkStatus"]
