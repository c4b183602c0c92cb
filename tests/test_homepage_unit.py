"""Unit tests for homepage rendering."""

from datetime import date, timedelta

from cnc_daily.config import DEFAULT_TEMPLATE_PATH, SiteConfig
from cnc_daily.homepage import HomepageBuilder, parse_post
from cnc_daily.models import PublishedPost
from cnc_daily.posts import PostWriter

POST_TEXT = """---
title: "A \\"Quoted\\" Title"
date: 2024-05-10
category: Video Games
image: https://img.example/game.jpg
source: https://games.example/story
---
**Original:** [A story](https://games.example/story)

Summary paragraph.

*Source: https://games.example/story*"""


def _site(tmp_path, **kwargs):
    template = tmp_path / "template.html"
    template.write_text("<main><!-- POSTS_INJECT --></main>", encoding="utf-8")
    return SiteConfig(
        posts_dir=tmp_path / "posts",
        output_path=tmp_path / "docs" / "index.html",
        template_path=template,
        **kwargs,
    )


class TestParsePost:
    """Front-matter parsing of post files."""

    def test_front_matter_fields(self):
        """Test that every front-matter field is read."""
        card = parse_post(POST_TEXT)

        assert card.title == 'A "Quoted" Title'
        assert card.date == "2024-05-10"
        assert card.category == "Video Games"
        assert card.image == "https://img.example/game.jpg"
        assert card.source == "https://games.example/story"
        assert card.body.startswith("**Original:**")
        assert "title:" not in card.body

    def test_missing_fields_use_defaults(self):
        """Test the defaults for a post with empty front matter."""
        card = parse_post("---\n---\nJust a body")

        assert card.title == "Untitled"
        assert card.source == "#"
        assert card.category == ""
        assert card.body == "Just a body"


class TestHomepageBuilderUnit:
    """Homepage output from a posts directory."""

    def test_renders_cards_into_template(self, tmp_path):
        """Test that posts render as cards at the placeholder."""
        site = _site(tmp_path)
        (tmp_path / "posts").mkdir()
        (tmp_path / "posts" / "2024-05-10-a-quoted-title.md").write_text(POST_TEXT, encoding="utf-8")

        output = HomepageBuilder(site).rebuild()

        html = output.read_text(encoding="utf-8")
        assert output == tmp_path / "docs" / "index.html"
        assert html.startswith("<main>") and html.endswith("</main>")
        assert "<!-- POSTS_INJECT -->" not in html
        assert "A &#34;Quoted&#34; Title" in html
        assert '<a href="https://games.example/story" target="_blank" rel="noopener">' in html
        assert "<strong>Original:</strong>" in html
        assert "<p>Summary paragraph.</p>" in html
        assert "<span>Video Games</span>" in html

    def test_no_posts_renders_placeholder_message(self, tmp_path):
        """Test the empty-site message."""
        output = HomepageBuilder(_site(tmp_path)).rebuild()

        assert output.read_text(encoding="utf-8") == "<main><p>No posts yet.</p></main>"

    def test_only_fifty_most_recent_posts_rendered(self, tmp_path):
        """Test the 50-post cap, newest filenames first."""
        site = _site(tmp_path)
        start = date(2024, 1, 1)
        for offset in range(51):
            day = start + timedelta(days=offset)
            writer = PostWriter(site.posts_dir, today=lambda day=day: day)
            writer.write(
                PublishedPost(f"Story {offset}", day, "Art", "", "https://a.example", "Body")
            )

        builder = HomepageBuilder(site)
        html = builder.rebuild().read_text(encoding="utf-8")

        assert html.count("<article>") == 50
        assert "2024-01-01" not in html
        assert "Story 50" in html
        names = [p.name for p in builder.recent_post_files()]
        assert names == sorted(names, reverse=True)
        assert "2024-01-01-story-0.md" not in names

    def test_non_markdown_files_ignored(self, tmp_path):
        """Test that only .md files are listed."""
        site = _site(tmp_path)
        (tmp_path / "posts").mkdir()
        (tmp_path / "posts" / "notes.txt").write_text("ignore me", encoding="utf-8")

        assert HomepageBuilder(site).recent_post_files() == []

    def test_default_template_has_placeholder(self):
        """Test that the bundled template carries the injection marker."""
        assert "<!-- POSTS_INJECT -->" in DEFAULT_TEMPLATE_PATH.read_text(encoding="utf-8")
