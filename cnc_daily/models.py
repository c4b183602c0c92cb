"""Data models for CNC Daily."""

from dataclasses import dataclass, field
from datetime import date, datetime
from enum import Enum


@dataclass
class FeedItem:
    """Represents a single RSS/Atom feed item."""

    title: str
    link: str
    published: datetime | None  # None when the feed date is missing or unparsable
    snippet: str
    image: str = ""
    feed_url: str = ""


@dataclass
class ExtractedArticle:
    """Readable text and lead image pulled from an article page."""

    text: str = ""
    image: str = ""
    error: str | None = None

    @property
    def ok(self) -> bool:
        return self.error is None


@dataclass
class PublishedPost:
    """A post as it is written to disk."""

    title: str
    date: date
    category: str
    image: str
    source: str
    body: str


class CategoryOutcome(str, Enum):
    """Terminal state of one category in a run."""

    PUBLISHED = "published"
    SKIPPED_NO_FEED = "skipped_no_feed"
    SKIPPED_SUMMARIZE_FAILED = "skipped_summarize_failed"
    SKIPPED_EMPTY_SUMMARY = "skipped_empty_summary"
    SKIPPED_UNSAFE = "skipped_unsafe"
    FAILED = "failed"


@dataclass
class CategoryResult:
    """What happened to one category."""

    category: str
    outcome: CategoryOutcome
    title: str | None = None
    path: str | None = None
    extraction_fallback: bool = False
    error: str | None = None


@dataclass
class RunReport:
    """Summary of a full pipeline run."""

    results: list[CategoryResult] = field(default_factory=list)
    homepage_path: str | None = None

    @property
    def published(self) -> list[dict[str, str]]:
        """Category/title pairs that were written to disk."""
        return [
            {"category": r.category, "title": r.title or ""}
            for r in self.results
            if r.outcome is CategoryOutcome.PUBLISHED
        ]

    def count(self, outcome: CategoryOutcome) -> int:
        return sum(1 for r in self.results if r.outcome is outcome)
