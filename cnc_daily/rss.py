"""RSS/Atom feed reading for CNC Daily."""

import re
from datetime import UTC, datetime

import feedparser
import requests
from bs4 import BeautifulSoup
from dateutil import parser as date_parser

from .config import HttpConfig
from .exceptions import FetchError
from .logging_config import create_execution_logger
from .models import FeedItem

SNIPPET_MAX_CHARS = 400

# Placeholder for undated items; the sort key ranks them below every dated item.
OLDEST = datetime.min.replace(tzinfo=UTC)

IMG_SRC_RE = re.compile(r'<img[^>]+src="([^"]+)"', re.IGNORECASE)


def parse_published(value: str | None) -> datetime | None:
    """Parse a feed date into an aware UTC datetime, or None if unusable."""
    if not value or not value.strip():
        return None
    try:
        published = date_parser.parse(value)
    except (ValueError, TypeError, OverflowError):
        return None
    if published.tzinfo is None:
        published = published.replace(tzinfo=UTC)
    return published.astimezone(UTC)


def sort_key(item: FeedItem) -> tuple[bool, datetime]:
    return (item.published is not None, item.published or OLDEST)


def sort_newest_first(items: list[FeedItem]) -> list[FeedItem]:
    """Order items by publication time, newest first.

    The sort is stable, so undated items keep their document order at the end.
    """
    return sorted(items, key=sort_key, reverse=True)


class FeedProcessor:
    """Fetches RSS/Atom feeds and normalizes their items."""

    def __init__(
        self,
        http_config: HttpConfig | None = None,
        session: requests.Session | None = None,
        execution_id: str | None = None,
    ):
        """Initialize FeedProcessor.

        Args:
            http_config: User agent and timeout for feed requests
            session: Optional pre-built HTTP session
            execution_id: Execution ID for logging context
        """
        self.http_config = http_config or HttpConfig()
        self.logger = create_execution_logger("feed_reader", execution_id)
        self.session = session or requests.Session()
        self.session.headers.update({"User-Agent": self.http_config.user_agent})

    def fetch(self, url: str) -> bytes:
        """Download a document.

        Raises:
            FetchError: On transport failure or non-success status
        """
        try:
            response = self.session.get(url, timeout=self.http_config.timeout)
        except requests.RequestException as e:
            self.logger.error(f"Failed to download {url}: {e}", feed_url=url, error=str(e))
            raise FetchError(url, str(e)) from e

        if not response.ok:
            self.logger.error(
                f"Download of {url} returned status {response.status_code}",
                feed_url=url,
                status_code=response.status_code,
            )
            raise FetchError(url, str(response.status_code), response.status_code)

        return response.content

    def parse_feed(self, feed_url: str) -> list[FeedItem]:
        """Fetch and parse a single RSS/Atom feed.

        Args:
            feed_url: URL of the RSS/Atom feed

        Returns:
            FeedItem objects, newest first

        Raises:
            FetchError: If the feed cannot be downloaded
        """
        self.logger.info("Starting to parse feed", feed_url=feed_url)
        content = self.fetch(feed_url)
        items = self.parse_document(content, feed_url)
        self.logger.log_feed_processing(feed_url, len(items))
        return items

    def parse_document(self, content: bytes | str, feed_url: str = "") -> list[FeedItem]:
        """Parse a feed document; malformed input yields zero or partial items."""
        feed = feedparser.parse(content)

        if feed.bozo and hasattr(feed, "bozo_exception"):
            self.logger.warning(
                f"Feed parsing warning for {feed_url}: {feed.bozo_exception}",
                feed_url=feed_url,
                bozo_exception=str(feed.bozo_exception),
            )

        items = []
        for entry in feed.entries:
            try:
                items.append(self.normalize_item(entry, feed_url))
            except Exception as e:
                self.logger.warning(
                    f"Failed to normalize entry from {feed_url}: {e}",
                    feed_url=feed_url,
                    error=str(e),
                )
                continue

        return sort_newest_first(items)

    def normalize_item(self, raw_item: dict, feed_url: str = "") -> FeedItem:
        """Normalize a feedparser entry into a FeedItem."""
        # Extract title
        title = (raw_item.get("title") or "").strip() or "Untitled"

        # Extract link
        link = (raw_item.get("link") or "").strip()

        # Extract and parse published date
        published = parse_published(raw_item.get("published") or raw_item.get("updated"))
        if published is None:
            published = self._parsed_struct(raw_item)

        # Extract content, preferring full content over the summary
        raw_content = self._raw_content(raw_item)

        # Extract image: enclosure first, then the first <img> in the content
        image = self._enclosure_url(raw_item)
        if not image:
            match = IMG_SRC_RE.search(raw_content)
            image = match.group(1) if match else ""

        return FeedItem(
            title=title,
            link=link,
            published=published,
            snippet=self.clean_html_content(raw_content)[:SNIPPET_MAX_CHARS],
            image=image,
            feed_url=feed_url,
        )

    @staticmethod
    def _parsed_struct(raw_item: dict) -> datetime | None:
        # feedparser normalizes some dates dateutil rejects
        parsed = raw_item.get("published_parsed") or raw_item.get("updated_parsed")
        if not parsed:
            return None
        try:
            return datetime(*parsed[:6], tzinfo=UTC)
        except (TypeError, ValueError):
            return None

    @staticmethod
    def _raw_content(raw_item: dict) -> str:
        # content:encoded and Atom <content> both land in entry.content
        content = raw_item.get("content")
        if isinstance(content, list):
            for part in content:
                value = part.get("value", "")
                if value:
                    return value
        return raw_item.get("summary") or raw_item.get("description") or ""

    @staticmethod
    def _enclosure_url(raw_item: dict) -> str:
        for enclosure in raw_item.get("enclosures") or []:
            url = enclosure.get("href") or enclosure.get("url")
            if url:
                return url
        return ""

    def clean_html_content(self, content: str | None) -> str:
        """Remove HTML tags from content and normalize whitespace.

        Args:
            content: Raw content that may contain HTML

        Returns:
            Clean text content without HTML tags
        """
        if not content:
            return ""

        if "<" not in content and ">" not in content:
            return " ".join(content.split())

        soup = BeautifulSoup(content, "html.parser")

        for script in soup(["script", "style"]):
            script.decompose()

        text = soup.get_text(separator=" ")

        # Remove any remaining < and > characters (for edge cases like standalone brackets)
        text = text.replace("<", "").replace(">", "")

        return " ".join(text.split())
