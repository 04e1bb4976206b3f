"""Output formatting utilities for CLI commands."""

from datetime import UTC, datetime

import click

from billboard_service.client.models import Post
from billboard_service.features.flags.models import FlagName
from billboard_service.features.flags.schemas import FlagSet


def success(message: str) -> None:
    """Print a success message in green."""
    click.secho(f"✓ {message}", fg="green")


def error(message: str) -> None:
    """Print an error message in red."""
    click.secho(f"✗ {message}", fg="red", err=True)


def warning(message: str) -> None:
    """Print a warning message in yellow."""
    click.secho(f"⚠ {message}", fg="yellow")


def info(message: str) -> None:
    """Print an info message in blue."""
    click.secho(f"ℹ {message}", fg="blue")


def header(message: str) -> None:
    """Print a header message in cyan bold."""
    click.secho(f"\n{message}", fg="cyan", bold=True)


def print_flags(flags: FlagSet) -> None:
    """One line per recognized flag, enabled ones in green."""
    width = max(len(name.value) for name in FlagName)
    for name in FlagName:
        value = flags.get(name)
        click.echo(f"  {name.value:<{width}}  " + click.style(str(value).lower(), fg="green" if value else "white"))


def print_post(post: Post) -> None:
    created = datetime.fromtimestamp(post.timestamp / 1000, tz=UTC).strftime("%Y-%m-%d %H:%M:%S")
    click.secho(f"[{post.type.value}] {post.title}", bold=True)
    click.echo(f"  {post.content}")
    if post.image_url:
        click.echo(f"  image: {post.image_url}")
    click.secho(f"  {created} UTC", dim=True)
