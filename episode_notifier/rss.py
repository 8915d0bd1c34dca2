"""RSS feed fetching for the episode release notifier."""

from urllib.parse import urlparse

import feedparser
import requests

from .logging_config import create_execution_logger
from .models import FeedEntry


class FeedFetcher:
    """Downloads the episode feed and exposes its entries in feed order."""

    def __init__(self, timeout: int = 30, execution_id: str | None = None):
        """Initialize FeedFetcher with configuration.

        Args:
            timeout: HTTP request timeout in seconds
            execution_id: Execution ID for logging context
        """
        self.timeout = timeout
        self.logger = create_execution_logger("feed_fetcher", execution_id)
        self.session = requests.Session()
        self.session.headers.update(
            {"User-Agent": "Episode-Release-Notifier/1.0 (RSS to SNS)"}
        )

        self.logger.info("FeedFetcher initialized", timeout=timeout)

    def fetch(self, feed_url: str) -> list[FeedEntry]:
        """Fetch and parse a single RSS/Atom feed.

        Entries are returned in the order the feed lists them, which the
        publisher keeps newest first.

        Args:
            feed_url: URL of the RSS/Atom feed

        Returns:
            List of FeedEntry objects from the feed

        Raises:
            ValueError: If feed URL is not HTTPS
            requests.RequestException: If feed download fails
        """
        parsed_url = urlparse(feed_url)
        if parsed_url.scheme != "https":
            error_msg = f"Feed URL must use HTTPS protocol: {feed_url}"
            self.logger.error(error_msg, feed_url=feed_url, scheme=parsed_url.scheme)
            raise ValueError(error_msg)

        try:
            self.logger.info("Downloading feed content", feed_url=feed_url)
            response = self.session.get(feed_url, timeout=self.timeout)
            response.raise_for_status()
            self.logger.info(
                "Feed downloaded successfully",
                feed_url=feed_url,
                status_code=response.status_code,
                content_length=len(response.content),
            )
        except requests.RequestException as e:
            self.logger.error(
                f"Failed to download feed {feed_url}: {e}",
                feed_url=feed_url,
                error=str(e),
            )
            raise

        feed = feedparser.parse(response.content)

        if feed.bozo and hasattr(feed, "bozo_exception"):
            self.logger.warning(
                f"Feed parsing warning for {feed_url}: {feed.bozo_exception}",
                feed_url=feed_url,
                bozo_exception=str(feed.bozo_exception),
            )

        entries = [self.normalize_entry(raw) for raw in feed.entries]

        self.logger.info(
            "Successfully parsed feed",
            feed_url=feed_url,
            items_count=len(entries),
        )
        return entries

    def normalize_entry(self, raw_entry) -> FeedEntry:
        """Convert a feedparser entry into a FeedEntry.

        The publish date is kept as raw text; deciding whether it is usable
        belongs to the selector.
        """
        published = getattr(raw_entry, "published", None) or getattr(
            raw_entry, "updated", None
        )

        return FeedEntry(
            title=getattr(raw_entry, "title", None) or None,
            link=getattr(raw_entry, "link", None) or None,
            published=published or None,
        )
