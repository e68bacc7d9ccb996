"""CLI entry point for Postdesk.

Inspect posts the way the manager editor sees them, straight from the
configured schema and post store.
"""

import asyncio
import sys
from pathlib import Path
from typing import Optional

import click
from rich.console import Console
from rich.table import Table

from postdesk import __version__
from postdesk.config import ConfigManager
from postdesk.factory import DefaultContentFactory
from postdesk.registry import SchemaRegistry
from postdesk.repository import JsonContentRepository
from postdesk.services.exceptions import PostDeskError
from postdesk.services.post_service import PostService
from postdesk.utils.logging import configure_logging


console = Console()


def build_service(config_mgr: ConfigManager) -> PostService:
    """
    Wire a PostService from configuration.

    Args:
        config_mgr: Loaded configuration

    Returns:
        PostService over the configured schema and JSON store
    """
    registry = SchemaRegistry.from_yaml(Path(config_mgr.storage.schema_path))
    repository = JsonContentRepository(Path(config_mgr.storage.store_path))
    return PostService(repository, registry, DefaultContentFactory(registry))


@click.group()
@click.option(
    "--config",
    "config_path",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    help="Path to configuration file (default: ~/.config/postdesk/config.yaml)",
)
@click.version_option(__version__, prog_name="postdesk")
@click.pass_context
def cli(ctx: click.Context, config_path: Optional[Path]):
    """Postdesk - inspect and manage schema-driven posts."""
    ctx.ensure_object(dict)
    ctx.obj["config_path"] = config_path


def get_service(ctx: click.Context) -> PostService:
    """Load configuration, set up logging and build the service (once per run)."""
    if "service" in ctx.obj:
        return ctx.obj["service"]

    config_path = ctx.obj.get("config_path")
    try:
        if config_path is None:
            config_mgr = ConfigManager.load_default()
        else:
            config_mgr = ConfigManager.load_from_path(config_path)

        log_file = config_mgr.logging.log_file
        configure_logging(
            level=config_mgr.logging.level,
            log_file=Path(log_file).expanduser() if log_file else None,
        )
        service = build_service(config_mgr)
    except (FileNotFoundError, ValueError) as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)

    ctx.obj["service"] = service
    return service


@cli.command()
@click.pass_context
def types(ctx: click.Context):
    """List registered content types and their regions."""
    service = get_service(ctx)

    table = Table(title="Content types")
    table.add_column("Id")
    table.add_column("Title")
    table.add_column("Regions")
    table.add_column("Blocks")
    for content_type in service.registry.content_types:
        regions = ", ".join(
            f"{r.id}[]" if r.collection else r.id for r in content_type.regions
        )
        table.add_row(
            content_type.id,
            content_type.title,
            regions,
            "yes" if content_type.use_blocks else "no",
        )
    console.print(table)


@cli.command(name="list")
@click.argument("archive_id")
@click.pass_context
def list_posts(ctx: click.Context, archive_id: str):
    """List the posts of ARCHIVE_ID."""
    service = get_service(ctx)
    model = asyncio.run(service.get_list(archive_id))

    table = Table(title=f"Posts in {archive_id}")
    table.add_column("Id")
    table.add_column("Title")
    table.add_column("Type")
    table.add_column("Category")
    table.add_column("Published")
    table.add_column("Status")
    for post in model.posts:
        status = post.status.value + (" (scheduled)" if post.is_scheduled else "")
        table.add_row(
            post.id,
            post.title,
            post.type_name,
            post.category or "",
            post.published or "",
            status,
        )
    console.print(table)


@cli.command()
@click.argument("post_id")
@click.option("--live", is_flag=True, help="Show the live version even if a draft exists")
@click.pass_context
def show(ctx: click.Context, post_id: str, live: bool):
    """Print the edit model of POST_ID as JSON."""
    service = get_service(ctx)
    try:
        model = asyncio.run(service.get_by_id(post_id, use_draft=not live))
    except PostDeskError as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)

    if model is None:
        click.echo(f"Error: post not found: {post_id}", err=True)
        sys.exit(1)
    console.print_json(model.model_dump_json())


@cli.command()
@click.argument("archive_id")
@click.argument("type_id")
@click.pass_context
def create(ctx: click.Context, archive_id: str, type_id: str):
    """Print a fresh edit model for a TYPE_ID post in ARCHIVE_ID."""
    service = get_service(ctx)
    model = asyncio.run(service.create(archive_id, type_id))
    if model is None:
        click.echo(f"Error: unknown content type: {type_id}", err=True)
        sys.exit(1)
    console.print_json(model.model_dump_json())


@cli.command()
@click.argument("post_id")
@click.confirmation_option(prompt="Delete this post and its draft?")
@click.pass_context
def delete(ctx: click.Context, post_id: str):
    """Delete POST_ID."""
    service = get_service(ctx)
    asyncio.run(service.delete(post_id))
    click.echo(f"✓ Deleted {post_id}")


def main():
    """Entry point for the postdesk command."""
    cli(obj={})


if __name__ == "__main__":
    main()
