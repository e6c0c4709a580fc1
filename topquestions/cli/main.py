"""CLI commands for top-questions."""

import logging
import sys
import uuid
from datetime import UTC, datetime

import click
import structlog

from topquestions import __version__
from topquestions.collector.rate_limiter import TokenBucketRateLimiter
from topquestions.collector.runner import TopQuestionsRunner
from topquestions.errors import TopQuestionsError
from topquestions.fetch.client import PageFetcher
from topquestions.fetch.models import SearchParameters
from topquestions.observability.logging import (
    bind_run_context,
    clear_run_context,
    configure_logging,
)
from topquestions.renderer.json_renderer import render_items
from topquestions.settings import get_settings


logger = structlog.get_logger()


@click.group()
@click.version_option(version=__version__)
def cli() -> None:
    """Top unanswered questions CLI."""


@cli.command()
@click.option(
    "--intitle",
    default="git",
    show_default=True,
    help="Substring that must appear in the question title.",
)
@click.option(
    "--tagged",
    default="go",
    show_default=True,
    help="Tag filter; pass an empty string to search all tags.",
)
@click.option(
    "--json-logs/--no-json-logs",
    default=True,
    help="Use JSON format for logs (default: true).",
)
@click.option(
    "--verbose",
    "-v",
    is_flag=True,
    help="Enable verbose logging.",
)
@click.option(
    "--pretty",
    is_flag=True,
    help="Indent the JSON output.",
)
def top(
    intitle: str,
    tagged: str,
    json_logs: bool,
    verbose: bool,
    pretty: bool,
) -> None:
    """Print the five most viewed unanswered questions as JSON.

    Searches questions from the last 365 days whose title contains
    INTITLE, optionally restricted to one tag.
    """
    configure_logging(
        level=logging.DEBUG if verbose else logging.INFO, json_format=json_logs
    )
    run_id = str(uuid.uuid4())
    bind_run_context(run_id)

    settings = get_settings()
    log = logger.bind(component="cli", command="top", run_id=run_id)

    fetch_config = settings.to_fetch_config()
    runner = TopQuestionsRunner(
        fetcher=PageFetcher(config=fetch_config, run_id=run_id),
        rate_limiter=TokenBucketRateLimiter(
            refill_per_second=settings.rate_limit_refill_per_second,
            bucket_capacity=settings.rate_limit_capacity,
        ),
        run_id=run_id,
    )
    params = SearchParameters.for_window(
        intitle=intitle,
        tagged=tagged,
        now=datetime.now(UTC),
        site=fetch_config.site,
    )

    try:
        result = runner.run(params)
    except TopQuestionsError as e:
        log.error("top_failed", error_class=e.error_class.value)
        click.echo(f"Error: {e.message}", err=True)
        sys.exit(1)
    finally:
        clear_run_context()

    click.echo(render_items(result.items, indent=2 if pretty else None))


if __name__ == "__main__":
    cli()
