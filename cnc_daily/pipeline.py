"""Feed-to-post pipeline orchestration."""

from datetime import UTC, datetime

import requests

from .config import Category, Config
from .exceptions import MissingCredential, SummarizationError
from .extractor import ArticleExtractor
from .homepage import HomepageBuilder
from .logging_config import create_execution_logger
from .models import CategoryOutcome, CategoryResult, RunReport
from .posts import PostWriter, compose_markdown
from .rss import FeedProcessor
from .safety import PerspectiveSafetyFilter
from .selector import FeedSelector
from .summarize import GeminiSummarizer

# Extracted text shorter than this is replaced by the feed snippet.
MIN_EXTRACTED_CHARS = 400


class Pipeline:
    """Runs every category through select, extract, summarize, gate and write.

    Categories are processed one at a time. A failure inside one category
    is recorded and the next category proceeds. A missing credential or a
    local filesystem error aborts the run.

    The HTTP session the pipeline creates is shared by every default
    component and closed by ``close()`` or on leaving a ``with`` block.
    """

    def __init__(
        self,
        config: Config,
        *,
        selector: FeedSelector | None = None,
        extractor: ArticleExtractor | None = None,
        summarizer: GeminiSummarizer | None = None,
        safety_filter: PerspectiveSafetyFilter | None = None,
        writer: PostWriter | None = None,
        homepage: HomepageBuilder | None = None,
        execution_id: str | None = None,
    ):
        self.config = config
        self.execution_id = (
            execution_id or f"run_{datetime.now(UTC).strftime('%Y%m%d_%H%M%S_%f')}"
        )
        self.logger = create_execution_logger("main", self.execution_id)

        self._session = requests.Session()
        session = self._session
        self.selector = selector or FeedSelector(
            FeedProcessor(config.http, session=session, execution_id=self.execution_id),
            execution_id=self.execution_id,
        )
        self.extractor = extractor or ArticleExtractor(
            config.http, session=session, execution_id=self.execution_id
        )
        self.summarizer = summarizer or GeminiSummarizer(
            config.gemini, session=session, execution_id=self.execution_id
        )
        self.safety_filter = safety_filter or PerspectiveSafetyFilter(
            config.perspective, session=session, execution_id=self.execution_id
        )
        self.writer = writer or PostWriter(
            config.site.posts_dir, execution_id=self.execution_id
        )
        self.homepage = homepage or HomepageBuilder(
            config.site, execution_id=self.execution_id
        )

    def close(self) -> None:
        self._session.close()

    def __enter__(self) -> "Pipeline":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()

    def run(self) -> RunReport:
        """Process all categories, then rebuild the homepage.

        Raises:
            MissingCredential: If an API key is not configured
            OSError: If a post cannot be written
        """
        self.logger.log_execution_start(category_count=len(self.config.categories))
        report = RunReport()

        for category in self.config.categories:
            try:
                result = self.process_category(category)
            except requests.RequestException as e:
                result = self._failed(category, e)
            except (MissingCredential, OSError) as e:
                self.logger.error(f"Aborting run: {e}", category=category.name, error=str(e))
                self.logger.log_execution_end(success=False, error=str(e))
                raise
            except Exception as e:
                result = self._failed(category, e)

            self.logger.log_category_outcome(
                result.category, result.outcome.value, item_title=result.title
            )
            report.results.append(result)

        report.homepage_path = str(self.homepage.rebuild())

        metrics = {outcome.value: report.count(outcome) for outcome in CategoryOutcome}
        metrics["categories_processed"] = len(report.results)
        self.logger.log_metrics(metrics)
        self.logger.log_execution_end(success=True, published=report.published)
        return report

    def _failed(self, category: Category, error: Exception) -> CategoryResult:
        self.logger.error(
            f"Category {category.name} failed: {error}",
            category=category.name,
            error=str(error),
        )
        return CategoryResult(
            category=category.name, outcome=CategoryOutcome.FAILED, error=str(error)
        )

    def process_category(self, category: Category) -> CategoryResult:
        """Take one category from feed selection to a written post."""
        item = self.selector.select(category.feed_urls, category=category.name)
        if item is None:
            return CategoryResult(category=category.name, outcome=CategoryOutcome.SKIPPED_NO_FEED)

        extracted = self.extractor.extract(item.link)
        extraction_fallback = len(extracted.text) <= MIN_EXTRACTED_CHARS
        text = item.snippet if extraction_fallback else extracted.text
        image = extracted.image or item.image or category.fallback_image
        if extraction_fallback:
            self.logger.info(
                "Using feed snippet instead of extracted text",
                category=category.name,
                item_title=item.title,
                error=extracted.error,
            )

        def skipped(outcome: CategoryOutcome, error: str | None = None) -> CategoryResult:
            return CategoryResult(
                category=category.name,
                outcome=outcome,
                title=item.title,
                extraction_fallback=extraction_fallback,
                error=error,
            )

        try:
            summary = self.summarizer.summarize(category.name, item.title, item.link, text)
        except SummarizationError as e:
            self.logger.error(
                f"Gemini summarize failed: {e}", category=category.name, item_title=item.title
            )
            return skipped(CategoryOutcome.SKIPPED_SUMMARIZE_FAILED, str(e))

        if not summary.strip():
            return skipped(CategoryOutcome.SKIPPED_EMPTY_SUMMARY, "empty summary")

        if not self.safety_filter.is_safe(summary, category=category.name):
            return skipped(CategoryOutcome.SKIPPED_UNSAFE)

        post = self.writer.build_post(
            title=item.title,
            category=category.name,
            source=item.link,
            image=image,
            body=compose_markdown(item, summary),
        )
        path = self.writer.write(post)

        return CategoryResult(
            category=category.name,
            outcome=CategoryOutcome.PUBLISHED,
            title=item.title,
            path=str(path),
            extraction_fallback=extraction_fallback,
        )
