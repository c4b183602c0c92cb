"""Unit tests for configuration management."""

import dataclasses
import json

import pytest

from cnc_daily.config import (
    DEFAULT_TEMPLATE_PATH,
    Config,
    default_categories,
    load_categories,
)


class TestConfigUnit:
    """Unit tests for Config and category loading."""

    def test_default_categories_in_order(self):
        """Test the built-in category order."""
        names = [c.name for c in default_categories()]

        assert names == ["Board Games", "Art", "Video Games", "Technology", "Fiction Books"]

    def test_default_feeds_and_fallbacks(self):
        """Test the built-in feeds and fallback images."""
        categories = {c.name: c for c in default_categories()}

        assert categories["Video Games"].feed_urls == (
            "https://feeds.ign.com/ign/games-all",
            "https://www.polygon.com/rss/index.xml",
        )
        assert categories["Art"].fallback_image == "assets/images/art.svg"
        for category in categories.values():
            assert category.feed_urls, f"{category.name} has no feeds"
            assert category.fallback_image.startswith("assets/images/")

    def test_config_is_immutable(self):
        """Test that configs are frozen."""
        config = Config()

        with pytest.raises(dataclasses.FrozenInstanceError):
            config.categories = ()

    def test_from_env_reads_keys_and_paths(self, tmp_path):
        """Test keys, model and paths taken from the environment."""
        env = {
            "GEMINI_API_KEY": "g-key",
            "PERSPECTIVE_API_KEY": "p-key",
            "GEMINI_MODEL": "gemini-2.0-flash",
            "CNC_POSTS_DIR": str(tmp_path / "out-posts"),
            "CNC_HTTP_TIMEOUT": "5",
        }

        config = Config.from_env(environ=env)

        assert config.gemini.api_key == "g-key"
        assert config.gemini.model == "gemini-2.0-flash"
        assert config.perspective.api_key == "p-key"
        assert config.site.posts_dir == tmp_path / "out-posts"
        assert config.site.template_path == DEFAULT_TEMPLATE_PATH
        assert config.http.timeout == 5.0

    def test_from_env_without_keys_leaves_them_empty(self):
        """Test that missing keys do not fail at load time."""
        config = Config.from_env(environ={})

        assert config.gemini.api_key == ""
        assert config.perspective.api_key == ""
        assert config.gemini.model == "gemini-1.5-flash-latest"
        assert len(config.categories) == 5

    def test_load_categories_file(self, tmp_path):
        """Test loading categories from JSON with enabled flags."""
        path = tmp_path / "categories.json"
        path.write_text(
            json.dumps(
                {
                    "categories": [
                        {"name": "Art", "feeds": ["https://a.example/feed"]},
                        {"name": "Poetry", "feeds": ["https://p.example/feed"],
                         "fallback_image": "assets/images/poetry.svg"},
                        {"name": "Off", "feeds": ["https://o.example/feed"], "enabled": False},
                    ]
                }
            ),
            encoding="utf-8",
        )

        categories = load_categories(path)

        assert [c.name for c in categories] == ["Art", "Poetry"]
        assert categories[0].fallback_image == "assets/images/art.svg"
        assert categories[1].fallback_image == "assets/images/poetry.svg"

        config = Config.from_env(categories_file=path, environ={})
        assert config.categories == categories

    def test_invalid_json_raises(self, tmp_path):
        """Test that malformed JSON is reported."""
        path = tmp_path / "categories.json"
        path.write_text("{not json", encoding="utf-8")

        with pytest.raises(ValueError, match="Invalid JSON"):
            load_categories(path)

    def test_no_enabled_categories_raises(self, tmp_path):
        """Test that a file with nothing enabled is rejected."""
        path = tmp_path / "categories.json"
        path.write_text(json.dumps({"categories": []}), encoding="utf-8")

        with pytest.raises(ValueError, match="No enabled categories"):
            load_categories(path)

    def test_missing_file_raises(self, tmp_path):
        """Test that a missing categories file raises."""
        with pytest.raises(FileNotFoundError):
            load_categories(tmp_path / "absent.json")
