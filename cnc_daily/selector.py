"""Pick the newest item for a category from its ordered feed list."""

from collections.abc import Iterable

from .logging_config import create_execution_logger
from .models import FeedItem
from .rss import FeedProcessor


class FeedSelector:
    """Walks a category's feeds in order and stops at the first one with items."""

    def __init__(self, reader: FeedProcessor, execution_id: str | None = None):
        self.reader = reader
        self.logger = create_execution_logger("feed_selector", execution_id)
        self.failures: list[tuple[str, str]] = []

    def select(self, feed_urls: Iterable[str], category: str = "") -> FeedItem | None:
        """Return the newest item of the first feed that yields one.

        Feed errors are logged and the next feed is tried. Returns None
        when every feed fails or is empty.
        """
        self.failures = []
        for feed_url in feed_urls:
            try:
                items = self.reader.parse_feed(feed_url)
            except Exception as e:
                self.logger.warning(
                    f"Feed failed, trying next: {e}",
                    category=category,
                    feed_url=feed_url,
                    error=str(e),
                )
                self.failures.append((feed_url, str(e)))
                continue

            if items:
                self.logger.info(
                    "Selected newest item",
                    category=category,
                    feed_url=feed_url,
                    item_title=items[0].title,
                )
                return items[0]

            self.logger.info("Feed returned no items", category=category, feed_url=feed_url)
            self.failures.append((feed_url, "no items"))

        self.logger.warning("No feed produced an item", category=category)
        return None
