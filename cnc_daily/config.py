"""Configuration management for CNC Daily."""

import json
import os
from dataclasses import dataclass, field
from pathlib import Path

DEFAULT_CATEGORY_FEEDS: dict[str, tuple[str, ...]] = {
    "Board Games": ("https://boardgamegeek.com/rss/news",),
    "Art": ("https://www.thisiscolossal.com/feed/",),
    "Video Games": (
        "https://feeds.ign.com/ign/games-all",
        "https://www.polygon.com/rss/index.xml",
    ),
    "Technology": (
        "https://feeds.arstechnica.com/arstechnica/index",
        "https://techcrunch.com/feed/",
    ),
    "Fiction Books": (
        "https://www.tor.com/fiction/feed/",
        "https://www.goodreads.com/blog/feed",
    ),
}

DEFAULT_FALLBACK_IMAGES: dict[str, str] = {
    "Board Games": "assets/images/board-games.svg",
    "Art": "assets/images/art.svg",
    "Video Games": "assets/images/video-games.svg",
    "Technology": "assets/images/technology.svg",
    "Fiction Books": "assets/images/fiction-books.svg",
}

SAFETY_ATTRIBUTES: tuple[str, ...] = (
    "TOXICITY",
    "INSULT",
    "THREAT",
    "SEXUALLY_EXPLICIT",
    "PROFANITY",
)

DEFAULT_TEMPLATE_PATH = Path(__file__).resolve().parent / "templates" / "index.html"


@dataclass(frozen=True)
class Category:
    """A topical category with its ordered feed list."""

    name: str
    feed_urls: tuple[str, ...]
    fallback_image: str = ""


@dataclass(frozen=True)
class HttpConfig:
    """Configuration shared by feed and article fetches."""

    user_agent: str = "CNC-Daily/1.0"
    timeout: float = 20.0


@dataclass(frozen=True)
class GeminiConfig:
    """Configuration for the Gemini generateContent API."""

    api_key: str = ""
    model: str = "gemini-1.5-flash-latest"
    base_url: str = "https://generativelanguage.googleapis.com"
    timeout: float = 60.0
    max_input_chars: int = 8000


@dataclass(frozen=True)
class PerspectiveConfig:
    """Configuration for the Perspective comment analyzer."""

    api_key: str = ""
    base_url: str = "https://commentanalyzer.googleapis.com"
    timeout: float = 30.0
    threshold: float = 0.5
    attributes: tuple[str, ...] = SAFETY_ATTRIBUTES


@dataclass(frozen=True)
class SiteConfig:
    """Where posts live and where the homepage is rendered."""

    posts_dir: Path = Path("posts")
    output_path: Path = Path("docs/index.html")
    template_path: Path = DEFAULT_TEMPLATE_PATH
    homepage_limit: int = 50
    placeholder: str = "<!-- POSTS_INJECT -->"


def default_categories() -> tuple[Category, ...]:
    """Return the built-in categories in publishing order."""
    return tuple(
        Category(name=name, feed_urls=urls, fallback_image=DEFAULT_FALLBACK_IMAGES[name])
        for name, urls in DEFAULT_CATEGORY_FEEDS.items()
    )


def load_categories(path: str | Path) -> tuple[Category, ...]:
    """Load categories from a JSON file.

    The file holds ``{"categories": [{"name", "feeds", "fallback_image",
    "enabled"}]}``. Entries without a name or feeds are ignored.

    Raises:
        FileNotFoundError: If the file does not exist
        ValueError: If the JSON is invalid or no category is enabled
    """
    categories_file = Path(path)
    if not categories_file.exists():
        raise FileNotFoundError(f"Categories file not found: {categories_file}")

    try:
        with open(categories_file, "r", encoding="utf-8") as f:
            data = json.load(f)
    except json.JSONDecodeError as e:
        raise ValueError(f"Invalid JSON in categories file: {e}") from e

    categories = []
    for entry in data.get("categories", []):
        if not entry.get("enabled", True):
            continue
        name = str(entry.get("name", "")).strip()
        feeds = tuple(str(url).strip() for url in entry.get("feeds", []) if str(url).strip())
        if not name or not feeds:
            continue
        categories.append(
            Category(
                name=name,
                feed_urls=feeds,
                fallback_image=entry.get(
                    "fallback_image", DEFAULT_FALLBACK_IMAGES.get(name, "")
                ),
            )
        )

    if not categories:
        raise ValueError("No enabled categories found in categories file")

    return tuple(categories)


@dataclass(frozen=True)
class Config:
    """Immutable run configuration handed to the pipeline."""

    categories: tuple[Category, ...] = field(default_factory=default_categories)
    gemini: GeminiConfig = field(default_factory=GeminiConfig)
    perspective: PerspectiveConfig = field(default_factory=PerspectiveConfig)
    site: SiteConfig = field(default_factory=SiteConfig)
    http: HttpConfig = field(default_factory=HttpConfig)

    @classmethod
    def from_env(
        cls,
        categories_file: str | Path | None = None,
        environ: dict[str, str] | None = None,
    ) -> "Config":
        """Build configuration from environment variables.

        Missing API keys are left empty; the services report them when
        they are first used.
        """
        env = os.environ if environ is None else environ

        categories = (
            load_categories(categories_file) if categories_file else default_categories()
        )

        gemini = GeminiConfig(
            api_key=env.get("GEMINI_API_KEY", ""),
            model=env.get("GEMINI_MODEL", GeminiConfig.model),
        )
        perspective = PerspectiveConfig(api_key=env.get("PERSPECTIVE_API_KEY", ""))
        site = SiteConfig(
            posts_dir=Path(env.get("CNC_POSTS_DIR", "posts")),
            output_path=Path(env.get("CNC_OUTPUT_PATH", "docs/index.html")),
            template_path=Path(env.get("CNC_TEMPLATE_PATH", str(DEFAULT_TEMPLATE_PATH))),
        )
        http = HttpConfig(timeout=float(env.get("CNC_HTTP_TIMEOUT", HttpConfig.timeout)))

        return cls(
            categories=categories,
            gemini=gemini,
            perspective=perspective,
            site=site,
            http=http,
        )
