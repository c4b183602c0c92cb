"""Markdown post composition and persistence."""

import re
import unicodedata
from collections.abc import Callable
from datetime import UTC, date, datetime
from pathlib import Path

from .logging_config import create_execution_logger
from .models import FeedItem, PublishedPost

SLUG_MAX_LENGTH = 100

# Symbols spelled out before punctuation is stripped.
SLUG_SYMBOLS = {
    "&": "and",
    "$": "dollar",
    "%": "percent",
    "<": "less",
    ">": "greater",
    "|": "or",
    "€": "euro",
    "£": "pound",
    "¥": "yen",
    "¢": "cent",
    "©": "c",
    "®": "r",
    "™": "tm",
}
SLUG_SYMBOLS_TABLE = str.maketrans(SLUG_SYMBOLS)


def slugify(text: str, max_length: int = SLUG_MAX_LENGTH) -> str:
    """Lowercase ASCII slug with hyphens between words.

    Punctuation inside a word is dropped rather than split on, so
    apostrophes do not introduce extra hyphens.

    >>> slugify("Hello, World! 2024")
    'hello-world-2024'
    >>> slugify("Don't Stop")
    'dont-stop'
    >>> slugify("Rock & Roll")
    'rock-and-roll'
    """
    text = text.translate(SLUG_SYMBOLS_TABLE)
    ascii_text = unicodedata.normalize("NFKD", text).encode("ascii", "ignore").decode()
    # an existing hyphen separates words like whitespace does
    ascii_text = ascii_text.replace("-", " ")
    words = re.sub(r"[^A-Za-z0-9\s]", "", ascii_text).split()
    slug = "-".join(words).lower()[:max_length]
    return slug or "post"


def utc_today() -> date:
    return datetime.now(UTC).date()


def compose_markdown(item: FeedItem, summary: str) -> str:
    """Body of a post: original link, summary, source line."""
    return (
        f"**Original:** [{item.title}]({item.link})\n"
        f"\n"
        f"{summary}\n"
        f"\n"
        f"*Source: {item.link}*"
    )


def _single_line(value: str) -> str:
    return " ".join(str(value).split())


def format_front_matter(post: PublishedPost) -> str:
    title = _single_line(post.title).replace('"', '\\"')
    lines = [
        "---",
        f'title: "{title}"',
        f"date: {post.date.isoformat()}",
        f"category: {_single_line(post.category)}",
        f"image: {_single_line(post.image)}",
        f"source: {_single_line(post.source)}",
        "---",
        "",
    ]
    return "\n".join(lines)


def post_filename(post: PublishedPost) -> str:
    return f"{post.date.isoformat()}-{slugify(post.title)}.md"


class PostWriter:
    """Writes posts as ``{date}-{slug}.md`` files, overwriting same-day duplicates."""

    def __init__(
        self,
        posts_dir: str | Path,
        today: Callable[[], date] = utc_today,
        execution_id: str | None = None,
    ):
        self.posts_dir = Path(posts_dir)
        self.today = today
        self.logger = create_execution_logger("post_writer", execution_id)

    def build_post(
        self, title: str, category: str, source: str, image: str, body: str
    ) -> PublishedPost:
        return PublishedPost(
            title=title,
            date=self.today(),
            category=category,
            image=image,
            source=source,
            body=body,
        )

    def write(self, post: PublishedPost) -> Path:
        """Write a post to disk and return its path."""
        self.posts_dir.mkdir(parents=True, exist_ok=True)
        path = self.posts_dir / post_filename(post)
        existed = path.exists()
        path.write_text(format_front_matter(post) + post.body, encoding="utf-8")
        self.logger.info(
            "Post written",
            category=post.category,
            item_title=post.title,
            path=str(path),
            overwritten=existed,
        )
        return path
