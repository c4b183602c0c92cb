"""Shared fixtures for CNC Daily tests."""

from datetime import date
from unittest.mock import Mock

import pytest

from cnc_daily.config import Category, Config, GeminiConfig, PerspectiveConfig, SiteConfig


@pytest.fixture
def make_response():
    """Build a stand-in for ``requests.Response``."""

    def _make(status_code=200, content=b"", text="", json_data=None):
        response = Mock()
        response.status_code = status_code
        response.ok = 200 <= status_code < 400
        response.content = content
        response.text = text or content.decode("utf-8", "ignore")
        response.json.return_value = json_data if json_data is not None else {}
        return response

    return _make


@pytest.fixture
def run_date():
    return date(2024, 5, 10)


@pytest.fixture
def test_config(tmp_path):
    template = tmp_path / "template.html"
    template.write_text("<main><!-- POSTS_INJECT --></main>", encoding="utf-8")
    return Config(
        categories=(
            Category("Art", ("https://art.example/feed",), "assets/images/art.svg"),
            Category(
                "Technology",
                ("https://tech.example/feed", "https://tech-backup.example/feed"),
                "assets/images/technology.svg",
            ),
        ),
        gemini=GeminiConfig(api_key="gemini-test-key"),
        perspective=PerspectiveConfig(api_key="perspective-test-key"),
        site=SiteConfig(
            posts_dir=tmp_path / "posts",
            output_path=tmp_path / "docs" / "index.html",
            template_path=template,
        ),
    )
