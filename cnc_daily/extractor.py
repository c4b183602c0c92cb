"""Article text and image extraction for CNC Daily."""

import re

import requests
from bs4 import BeautifulSoup
from readability import Document

from .config import HttpConfig
from .exceptions import FetchError
from .logging_config import create_execution_logger
from .models import ExtractedArticle

OG_IMAGE_RE = re.compile(
    r"""property=["']og:image["'][^>]*content=["']([^"']+)["']""", re.IGNORECASE
)


class ArticleExtractor:
    """Fetches an article page and pulls out its main text and og:image."""

    def __init__(
        self,
        http_config: HttpConfig | None = None,
        session: requests.Session | None = None,
        execution_id: str | None = None,
    ):
        self.http_config = http_config or HttpConfig()
        self.logger = create_execution_logger("article_extractor", execution_id)
        self.session = session or requests.Session()
        self.session.headers.update({"User-Agent": self.http_config.user_agent})

    def extract(self, url: str) -> ExtractedArticle:
        """Extract readable text and lead image from an article.

        Never raises. On any failure the returned article is empty and
        carries the reason in ``error`` so the caller can fall back to the
        feed snippet and image.
        """
        if not url:
            return ExtractedArticle(error="no article link")

        try:
            html = self.fetch_html(url)
        except FetchError as e:
            self.logger.warning(f"Article fetch failed: {e}", item_url=url, error=str(e))
            return ExtractedArticle(error=str(e))

        try:
            text = self.extract_text(html)
        except Exception as e:
            self.logger.warning(
                f"Readability extraction failed: {e}", item_url=url, error=str(e)
            )
            return ExtractedArticle(error=f"extraction failed: {e}")

        image = self.find_og_image(html)
        self.logger.info(
            "Extracted article",
            item_url=url,
            text_length=len(text),
            has_image=bool(image),
        )
        return ExtractedArticle(text=text, image=image)

    def fetch_html(self, url: str) -> str:
        try:
            response = self.session.get(url, timeout=self.http_config.timeout)
        except requests.RequestException as e:
            raise FetchError(url, str(e)) from e
        if not response.ok:
            raise FetchError(url, str(response.status_code), response.status_code)
        return response.text

    @staticmethod
    def extract_text(html: str) -> str:
        """Run readability over a page and return its main text."""
        summary_html = Document(html).summary(html_partial=True)
        soup = BeautifulSoup(summary_html, "html.parser")
        lines = (line.strip() for line in soup.get_text(separator="\n").splitlines())
        return "\n".join(line for line in lines if line).strip()

    @staticmethod
    def find_og_image(html: str) -> str:
        match = OG_IMAGE_RE.search(html)
        return match.group(1) if match else ""
