"""Main CLI entry point for the billboard service and client."""

import click

from billboard_service.cli.commands import board, flags, server, watch
from billboard_service.infra.logging.config import setup_logging


@click.group()
@click.version_option(version="0.1.0", prog_name="billboard")
@click.pass_context
def cli(ctx: click.Context) -> None:
    """Billboard CLI - run the flag service or use a billboard from the terminal.

    \b
    Commands:
      serve      Run the flag service (HTTP + WebSocket)
      watch      Follow live flag updates like a browser client
      flags      Show or set feature flags
      board      Log in to a billboard, post and list content

    \b
    Quick Start:
      billboard serve
      billboard board login 4821
      billboard board post --title Hi --content Hello
      billboard flags set enable-image-uploads true
    """
    ctx.ensure_object(dict)


cli.add_command(server.serve)
cli.add_command(watch.watch)
cli.add_command(flags.flags)
cli.add_command(board.board)


def main() -> None:
    """Entry point for CLI."""
    setup_logging()
    cli(obj={})


if __name__ == "__main__":
    main()
