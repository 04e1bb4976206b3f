"""Follow flag updates the way a running billboard client does."""

import asyncio

import click

from billboard_service.cli.utils import coro, header, info, print_flags, warning
from billboard_service.client import BillboardApp, Notice, UIState
from billboard_service.core.settings import get_client_settings


def _print_notice(notice: Notice) -> None:
    warning(notice.message)


def _print_state(app: BillboardApp, state: UIState) -> None:
    header(f"Flags ({app.sync.state.value})")
    print_flags(app.session.flags)
    if state.flag_info_visible:
        info(state.flag_status)
    offered = ", ".join(kind.value for kind in state.offered_content_types)
    info(f"Content types: {offered} (selected: {state.content_type.value})")


@click.command()
@click.option("--code", default=None, help="Open this billboard code before watching")
@click.option("--interval", default=0.5, show_default=True, help="Seconds between UI checks")
@coro
async def watch(code: str | None, interval: float) -> None:
    """Run the sync agent and print every flag change until interrupted."""
    app = BillboardApp.from_settings(get_client_settings(), notify=_print_notice)
    try:
        await app.start()
        if code:
            result = await app.authenticate(code)
            if not result.ok:
                warning(result.message)
        elif app.saved_code:
            info(f"Last billboard code: {app.saved_code}")

        last: UIState | None = None
        while True:
            state = app.ui_state
            if state != last:
                _print_state(app, state)
                last = state
            await asyncio.sleep(interval)
    finally:
        await app.close()
