"""Static homepage rendering from the posts directory."""

import re
from dataclasses import dataclass
from pathlib import Path

import markdown
from jinja2 import Environment, select_autoescape
from markupsafe import Markup

from .config import SiteConfig
from .logging_config import create_execution_logger

CARD_TEMPLATE = """
      <article>
        <img alt="" src="{{ post.image }}" />
        <div class="pad">
          <div class="meta"><span>{{ post.category }}</span><span>&middot;</span><span>{{ post.date }}</span></div>
          <h2><a href="{{ post.source }}" target="_blank" rel="noopener">{{ post.title }}</a></h2>
          <div>{{ body_html }}</div>
        </div>
      </article>"""

EMPTY_MESSAGE = "<p>No posts yet.</p>"

TITLE_RE = re.compile(r'^title:\s*"((?:[^"\\]|\\.)*)"', re.MULTILINE)
FIELD_RES = {
    "date": re.compile(r"^date:\s*([0-9-]+)", re.MULTILINE),
    "category": re.compile(r"^category:[ \t]*([^\n]*)", re.MULTILINE),
    "image": re.compile(r"^image:[ \t]*([^\n]*)", re.MULTILINE),
    "source": re.compile(r"^source:[ \t]*([^\n]*)", re.MULTILINE),
}
FRONT_MATTER_RE = re.compile(r"\A---\n(?:.*?\n)?---\n", re.DOTALL)


@dataclass
class PostCard:
    title: str
    date: str
    category: str
    image: str
    source: str
    body: str


def parse_post(text: str) -> PostCard:
    """Read front-matter fields and body from a post file."""
    title_match = TITLE_RE.search(text)
    title = title_match.group(1).replace('\\"', '"') if title_match else "Untitled"

    fields = {}
    for name, pattern in FIELD_RES.items():
        match = pattern.search(text)
        fields[name] = match.group(1).strip() if match else ""

    front_matter = FRONT_MATTER_RE.match(text)
    body = text[front_matter.end():] if front_matter else text

    return PostCard(
        title=title or "Untitled",
        date=fields["date"],
        category=fields["category"],
        image=fields["image"],
        source=fields["source"] or "#",
        body=body,
    )


class HomepageBuilder:
    """Renders the newest posts into the site template."""

    def __init__(self, site_config: SiteConfig, execution_id: str | None = None):
        self.config = site_config
        self.logger = create_execution_logger("homepage", execution_id)
        self.env = Environment(autoescape=select_autoescape(default=True))
        self.card_template = self.env.from_string(CARD_TEMPLATE)

    def recent_post_files(self) -> list[Path]:
        """Newest post files first, capped at the display limit."""
        posts_dir = Path(self.config.posts_dir)
        if not posts_dir.is_dir():
            return []
        files = sorted(
            (p for p in posts_dir.iterdir() if p.suffix == ".md" and p.is_file()),
            key=lambda p: p.name,
            reverse=True,
        )
        return files[: self.config.homepage_limit]

    def render_card(self, post: PostCard) -> str:
        body_html = Markup(markdown.markdown(post.body))
        return self.card_template.render(post=post, body_html=body_html)

    def render(self) -> str:
        cards = [
            self.render_card(parse_post(path.read_text(encoding="utf-8")))
            for path in self.recent_post_files()
        ]
        template = Path(self.config.template_path).read_text(encoding="utf-8")
        return template.replace(self.config.placeholder, "\n".join(cards) or EMPTY_MESSAGE, 1)

    def rebuild(self) -> Path:
        """Render the homepage and write it to the configured output path."""
        html = self.render()
        output_path = Path(self.config.output_path)
        output_path.parent.mkdir(parents=True, exist_ok=True)
        output_path.write_text(html, encoding="utf-8")
        self.logger.info("Homepage rebuilt", output_path=str(output_path))
        return output_path
