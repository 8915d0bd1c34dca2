"""Freshness selection: decides which feed entries are worth a notification."""

from collections.abc import Sequence
from datetime import UTC, datetime, timedelta

from dateutil import parser as date_parser

from .composer import TITLE_PLACEHOLDER, URL_PLACEHOLDER
from .config import DEFAULT_LOOKBACK_HOURS, SelectionPolicy
from .logging_config import ExecutionLogger, create_execution_logger
from .models import FeedEntry, SelectedEntry

# Named zones allowed in RFC 822 dates, offsets in seconds
RFC822_TZINFOS = {
    "UT": 0,
    "GMT": 0,
    "EST": -5 * 3600,
    "EDT": -4 * 3600,
    "CST": -6 * 3600,
    "CDT": -5 * 3600,
    "MST": -7 * 3600,
    "MDT": -6 * 3600,
    "PST": -8 * 3600,
    "PDT": -7 * 3600,
}


def parse_published(raw: str | None) -> datetime | None:
    """Parse a raw feed date into an aware UTC datetime.

    Returns None for missing or unparseable input. RFC 822 zone names
    (EST, PDT, ...) are honoured; dates without any zone are taken as UTC.
    """
    if not raw or not raw.strip():
        return None
    try:
        published = date_parser.parse(raw, tzinfos=RFC822_TZINFOS)
        if published.tzinfo is None:
            published = published.replace(tzinfo=UTC)
        return published.astimezone(UTC)
    except (ValueError, OverflowError, TypeError):
        return None


def compute_cutoff(now: datetime, lookback_hours: int = DEFAULT_LOOKBACK_HOURS) -> datetime:
    """Return the start of the freshness window ending at ``now``."""
    if now.tzinfo is None:
        now = now.replace(tzinfo=UTC)
    return now - timedelta(hours=lookback_hours)


def to_selected(entry: FeedEntry, published_at: datetime) -> SelectedEntry:
    """Apply display fallbacks to an entry with a usable timestamp."""
    return SelectedEntry(
        display_title=entry.title or TITLE_PLACEHOLDER,
        display_url=entry.link or URL_PLACEHOLDER,
        published_at=published_at,
    )


def _require_published(
    entry: FeedEntry, label: str, logger: ExecutionLogger
) -> datetime | None:
    if not entry.published:
        logger.info(f"No pubDate found in the {label} item.", position=label)
        return None
    published_at = parse_published(entry.published)
    if published_at is None:
        logger.info(
            f"Invalid pubDate found in the {label} item: {entry.published}",
            position=label,
            raw_published=entry.published,
        )
    return published_at


def select_second_latest(
    entries: Sequence[FeedEntry],
    cutoff: datetime,
    logger: ExecutionLogger | None = None,
) -> SelectedEntry | None:
    """Select the entry preceding the latest one, gated on the latest's age.

    The publisher lists a "coming soon" placeholder as the newest item and
    the released episode right behind it. The latest entry only acts as a
    trigger: it must be newer than ``cutoff``. The second entry is returned
    whatever its own age, as long as its date parses.
    """
    logger = logger or create_execution_logger("selector")

    if not entries:
        logger.info("No items found in the RSS feed.")
        return None

    latest_published = _require_published(entries[0], "latest", logger)
    if latest_published is None:
        return None

    if latest_published <= cutoff:
        logger.info(
            "No new items published since cutoff.",
            cutoff=cutoff.isoformat(),
            latest_published=latest_published.isoformat(),
        )
        return None

    if len(entries) < 2:
        logger.info(
            "Only one item exists; nothing to notify (needs second latest item)."
        )
        return None

    second = entries[1]
    second_published = _require_published(second, "second latest", logger)
    if second_published is None:
        return None

    selected = to_selected(second, second_published)
    logger.log_entry_processing(selected.display_title, "selected")
    return selected


def select_all_fresh(
    entries: Sequence[FeedEntry],
    cutoff: datetime,
    logger: ExecutionLogger | None = None,
) -> list[SelectedEntry]:
    """Select every entry published strictly after ``cutoff``, in feed order.

    Entries without a usable date are skipped. Nothing is remembered between
    runs, so an entry stays selectable until it ages out of the window.
    """
    logger = logger or create_execution_logger("selector")

    selected = []
    for entry in entries:
        published_at = parse_published(entry.published)
        if published_at is None:
            logger.debug(
                "Skipping entry without usable pubDate",
                entry_title=entry.title,
                raw_published=entry.published,
            )
            continue
        if published_at > cutoff:
            item = to_selected(entry, published_at)
            logger.log_entry_processing(item.display_title, "selected")
            selected.append(item)

    if not selected:
        logger.info("No new items published since cutoff.", cutoff=cutoff.isoformat())
    return selected


def select_entries(
    policy: SelectionPolicy,
    entries: Sequence[FeedEntry],
    cutoff: datetime,
    logger: ExecutionLogger | None = None,
) -> list[SelectedEntry]:
    """Run the configured policy and return the entries to notify about."""
    if policy is SelectionPolicy.SECOND_LATEST:
        selected = select_second_latest(entries, cutoff, logger)
        return [selected] if selected else []
    return select_all_fresh(entries, cutoff, logger)
