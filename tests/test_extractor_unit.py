"""Unit tests for article extraction."""

from unittest.mock import Mock, patch

import requests

from cnc_daily.extractor import ArticleExtractor

PARAGRAPH = (
    "The museum unveiled a sweeping retrospective of kinetic sculpture this week, "
    "bringing together more than sixty works that move, hum and shift with the "
    "breeze drifting through the gallery's open courtyard. "
)

ARTICLE_HTML = f"""<html>
<head>
  <title>Kinetic Sculpture Retrospective</title>
  <meta property="og:image" content="https://img.example/kinetic.jpg" />
</head>
<body>
  <nav><a href="/">Home</a> <a href="/art">Art</a></nav>
  <article>
    <h1>Kinetic Sculpture Retrospective</h1>
    <p>{PARAGRAPH * 3}</p>
    <p>{PARAGRAPH * 3}</p>
    <p>{PARAGRAPH * 3}</p>
  </article>
  <footer>Copyright</footer>
</body>
</html>"""


class TestArticleExtractorUnit:
    """Extraction succeeds on real pages and degrades to an empty result."""

    def setup_method(self):
        """Build an extractor around a mock session."""
        self.session = Mock()
        self.extractor = ArticleExtractor(session=self.session)

    def test_extracts_main_text_and_og_image(self, make_response):
        """Test readable text and og:image from a full article page."""
        self.session.get.return_value = make_response(text=ARTICLE_HTML)

        article = self.extractor.extract("https://art.example/kinetic")

        assert article.ok
        assert "kinetic sculpture" in article.text
        assert len(article.text) > 400
        assert article.image == "https://img.example/kinetic.jpg"

    def test_og_image_with_single_quotes(self):
        """Test og:image with single-quoted attributes."""
        html = "<meta property='og:image' content='https://img.example/a.png'>"

        assert ArticleExtractor.find_og_image(html) == "https://img.example/a.png"

    def test_no_og_image_returns_empty(self):
        """Test a page without og:image."""
        assert ArticleExtractor.find_og_image("<html><head></head></html>") == ""

    def test_http_error_returns_empty_result(self, make_response):
        """Test that a non-2xx page yields an empty result with an error."""
        self.session.get.return_value = make_response(status_code=404)

        article = self.extractor.extract("https://art.example/missing")

        assert article.text == ""
        assert article.image == ""
        assert not article.ok
        assert "404" in article.error

    def test_transport_error_returns_empty_result(self):
        """Test that a timeout yields an empty result with an error."""
        self.session.get.side_effect = requests.Timeout("timed out")

        article = self.extractor.extract("https://art.example/slow")

        assert (article.text, article.image) == ("", "")
        assert not article.ok

    def test_readability_failure_returns_empty_result(self, make_response):
        """Test that a readability crash is contained."""
        self.session.get.return_value = make_response(text=ARTICLE_HTML)

        with patch("cnc_daily.extractor.Document", side_effect=ValueError("unparseable")):
            article = self.extractor.extract("https://art.example/kinetic")

        assert article.text == ""
        assert article.image == ""
        assert "unparseable" in article.error

    def test_empty_link_is_not_fetched(self):
        """Test that an item without a link is never requested."""
        article = self.extractor.extract("")

        assert not article.ok
        self.session.get.assert_not_called()
