"""Command-line interface for CNC Daily."""

import dataclasses
from pathlib import Path

import typer
from dotenv import load_dotenv

from .config import Config
from .exceptions import MissingCredential
from .homepage import HomepageBuilder
from .logging_config import create_execution_logger, setup_structured_logging
from .pipeline import Pipeline

app = typer.Typer(add_completion=False, help="Publish one summarized story per category.")


def _load_config(
    categories: Path | None,
    posts_dir: Path | None,
    output: Path | None,
    template: Path | None,
) -> Config:
    load_dotenv()
    config = Config.from_env(categories_file=categories)
    overrides = {
        key: value
        for key, value in {
            "posts_dir": posts_dir,
            "output_path": output,
            "template_path": template,
        }.items()
        if value is not None
    }
    if overrides:
        config = dataclasses.replace(config, site=dataclasses.replace(config.site, **overrides))
    return config


@app.command()
def run(
    categories: Path | None = typer.Option(
        None, "--categories", "-c", exists=True, readable=True, help="Categories JSON file."
    ),
    posts_dir: Path | None = typer.Option(None, "--posts-dir", help="Where posts are written."),
    output: Path | None = typer.Option(None, "--output", "-o", help="Homepage output path."),
    template: Path | None = typer.Option(None, "--template", help="Homepage template."),
    log_level: str = typer.Option("INFO", "--log-level", help="Logging level."),
) -> None:
    """Run the feed-to-post pipeline and rebuild the homepage."""
    setup_structured_logging(log_level)
    logger = create_execution_logger("main")

    try:
        config = _load_config(categories, posts_dir, output, template)
        with Pipeline(config, execution_id=logger.execution_id) as pipeline:
            report = pipeline.run()
    except MissingCredential as e:
        logger.error(f"Configuration error: {e}")
        raise typer.Exit(code=1) from e
    except Exception as e:
        logger.error(f"Run failed: {e}", error=str(e))
        raise typer.Exit(code=1) from e

    logger.info("Published posts", published=report.published)


@app.command()
def homepage(
    posts_dir: Path | None = typer.Option(None, "--posts-dir", help="Where posts are read from."),
    output: Path | None = typer.Option(None, "--output", "-o", help="Homepage output path."),
    template: Path | None = typer.Option(None, "--template", help="Homepage template."),
    log_level: str = typer.Option("INFO", "--log-level", help="Logging level."),
) -> None:
    """Rebuild the homepage from existing posts."""
    setup_structured_logging(log_level)
    config = _load_config(None, posts_dir, output, template)
    HomepageBuilder(config.site).rebuild()


def main() -> None:
    app()
