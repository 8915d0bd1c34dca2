"""Data models for the episode release notifier."""

from dataclasses import dataclass
from datetime import datetime


@dataclass
class FeedEntry:
    """Represents a single entry as read from the syndication feed."""

    title: str | None = None
    link: str | None = None
    published: str | None = None  # raw pubDate text, parsed by the selector


@dataclass
class SelectedEntry:
    """An entry chosen for notification, with display fallbacks applied."""

    display_title: str
    published_at: datetime
    display_url: str | None = None


@dataclass(frozen=True)
class NotificationMessage:
    """Represents a composed notification ready to be published."""

    subject: str
    body: str
