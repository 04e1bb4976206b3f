"""Flag inspection and admin commands."""

import sys

import click

from billboard_service.cli.utils import coro, error, header, print_flags, success
from billboard_service.client import FlagsApiClient
from billboard_service.core.settings import get_client_settings
from billboard_service.features.flags.models import FlagName
from billboard_service.features.flags.schemas import EvaluationContext


@click.group(name="flags")
def flags() -> None:
    """Inspect and change feature flags on the service."""


@flags.command()
@click.option("--code", default=None, help="Evaluate for this 4-digit billboard code")
@coro
async def show(code: str | None) -> None:
    """Print the flag snapshot for a context."""
    try:
        context = EvaluationContext.for_code(code)
    except ValueError:
        error("Please enter a valid 4-digit code")
        sys.exit(1)

    async with FlagsApiClient.from_settings(get_client_settings()) as api:
        result = await api.fetch_flags(context)

    if not result.ok or result.value is None:
        error(f"Could not load flags: {result.error}")
        sys.exit(1)

    header(f"Flags for {context.key}")
    print_flags(result.value)


@flags.command(name="set")
@click.argument("name", type=click.Choice([name.value for name in FlagName]))
@click.argument("value", type=click.BOOL)
@coro
async def set_flag(name: str, value: bool) -> None:
    """Set flag NAME to VALUE (in-memory provider only)."""
    async with FlagsApiClient.from_settings(get_client_settings()) as api:
        result = await api.set_flag(name, value)

    if not result.ok or result.value is None:
        error(f"Could not set {name}: {result.error}")
        sys.exit(1)

    success(f"{name} = {str(value).lower()}")
    print_flags(result.value)
