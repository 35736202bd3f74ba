# ABOUTME: Main CLI application entry point using asyncclick for native async support
# ABOUTME: Provides commands for the homepage feed, entity details, discussions and the version catalog

import json as jsonlib
from typing import Any

import asyncclick as click
from pydantic import BaseModel
from rich.console import Console
from rich.markup import escape

from minebbs_scout.config import get_config
from minebbs_scout.core.service import ScoutService
from minebbs_scout.extraction.base import ExtractionError
from minebbs_scout.extraction.detail import parse_posts, summarize_resource, summarize_thread
from minebbs_scout.models import CanonicalEntity
from minebbs_scout.utils.logging import (
    LoggingMode,
    configure_logging,
    get_logging_status,
    with_entity_context,
    with_pipeline_context,
)
from minebbs_scout.utils.rich_tables import create_logging_status_table, print_rich_table

console = Console()


def _emit(result: BaseModel | dict[str, Any]) -> None:
    """Write a result to stdout as JSON."""
    payload = result.model_dump(mode="json") if isinstance(result, BaseModel) else result
    click.echo(jsonlib.dumps(payload, ensure_ascii=False, indent=2))


def _fail(error: ExtractionError) -> None:
    console.print(f"[red]❌ {escape(str(error))}[/red]")
    raise SystemExit(1)


def _describe_entity(entity: CanonicalEntity, origin: str) -> dict[str, Any]:
    if entity.entity_type == "resource":
        summary = summarize_resource(entity)
        posts = parse_posts(entity.related.get("discussion"), origin)
    else:
        summary = summarize_thread(entity)
        posts = parse_posts(entity.related.get("posts"), origin)

    return {
        "entity": entity.model_dump(mode="json"),
        "summary": summary.model_dump(mode="json"),
        "posts": [post.model_dump(mode="json") for post in posts],
        "missing_related": entity.missing_related,
    }


@click.command()
async def feed():
    """
    🏠 Extract the forum homepage feed.

    Banners, notices, featured items, forum categories, latest topics,
    site statistics and login state.
    """
    with with_pipeline_context("feed") as logger:
        service = ScoutService()
        try:
            bundle = await service.load_feed()
        except ExtractionError as e:
            logger.warning("Feed extraction failed", error=str(e))
            _fail(e)
        finally:
            await service.close()

        logger.info("Feed complete", categories=len(bundle.categories), topics=len(bundle.latest_topics))
        _emit(bundle)


@click.command()
@click.argument("url")
async def detail(url: str):
    """
    🔎 Resolve a resource or thread link and load its details.

    Candidate identifiers from the URL are tried in order until the backend
    accepts one, then statistics, updates, history and discussion are fetched
    together.
    """
    with with_entity_context(url) as logger:
        service = ScoutService()
        try:
            entity = await service.load_detail(url)
        except ExtractionError as e:
            logger.warning("Detail lookup failed", error=str(e))
            _fail(e)
        finally:
            await service.close()

        logger.info("Detail complete", entity_type=entity.entity_type, entity_id=entity.entity_id)
        _emit(_describe_entity(entity, service.config.site_origin))


@click.command()
@click.argument("thread_id")
@click.option("--page", "-p", type=click.IntRange(min=1), default=1, help="Page number, starting at 1")
@click.option("--thread", "is_thread", is_flag=True, help="Read a forum thread instead of a resource discussion")
async def discussion(thread_id: str, page: int, is_thread: bool):
    """
    💬 Load one page of a resource discussion or forum thread.
    """
    with with_pipeline_context("discussion", thread_id=thread_id, page=page) as logger:
        service = ScoutService()
        try:
            if is_thread:
                posts = await service.load_thread_page(thread_id, page)
            else:
                posts = await service.load_discussion_page(thread_id, page)
        finally:
            await service.close()

        logger.info("Discussion page loaded", posts=len(posts.posts))
        _emit(posts)


@click.command()
@click.option("--page", "-p", type=click.IntRange(min=1), default=1, help="Page number, starting at 1")
async def versions(page: int):
    """
    📦 List one page of the game version catalog.
    """
    with with_pipeline_context("versions", page=page) as logger:
        service = ScoutService()
        try:
            catalog = await service.load_versions(page)
        except ExtractionError as e:
            logger.warning("Version catalog failed", error=str(e))
            _fail(e)
        finally:
            await service.close()

        logger.info("Version catalog loaded", versions=len(catalog.versions), total_pages=catalog.total_pages)
        _emit(catalog)


def _initialize_logging(json_output: bool, log_level: str | None = None, log_file: str | None = None) -> None:
    """Initialize logging configuration."""
    try:
        config = get_config()
        mode = LoggingMode.PRODUCTION if json_output else LoggingMode.INTERACTIVE

        # Use config defaults when CLI parameters are not provided
        final_log_level = log_level or config.log_level
        final_log_file = log_file or (str(config.log_file) if config.log_file else None)

        configure_logging(mode=mode, log_level=final_log_level, log_file=final_log_file)
    except (FileNotFoundError, PermissionError, OSError):
        # Fall back to stderr-only logging
        configure_logging(mode=LoggingMode.PRODUCTION, log_level=log_level or "INFO")


@click.command(name="logging-status")
def logging_status():
    """
    📊 Show current logging configuration and status.
    """
    status = get_logging_status()
    logging_table = create_logging_status_table(status)
    print_rich_table(console, logging_table)


@click.group(invoke_without_command=True)
@click.option("--json", is_flag=True, help="Output structured JSON logs instead of log files")
@click.option("--log-level", default=None, help="Logging level (DEBUG, INFO, WARNING, ERROR)")
@click.option("--log-file", help="Custom log file path")
@click.pass_context
def app(ctx, json: bool, log_level: str | None, log_file: str | None):
    """
    ⛏️ MineBBS Scout - Forum feed and resource extraction for MineBBS

    Turns the forum homepage and its JSON backend into typed records,
    printed as JSON.
    """
    ctx.ensure_object(dict)
    ctx.obj["json_output"] = json

    # Initialize logging once here instead of in each command
    _initialize_logging(json, log_level, log_file)

    # Show help if no command provided
    if ctx.invoked_subcommand is None:
        click.echo(ctx.get_help())


# Add commands to the main group
app.add_command(feed)
app.add_command(detail)
app.add_command(discussion)
app.add_command(versions)
app.add_command(logging_status)


if __name__ == "__main__":
    app()
