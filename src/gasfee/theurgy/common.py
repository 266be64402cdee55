"""Shared plumbing for the command modules."""

from __future__ import annotations

import asyncio
import sys
from typing import Any, Awaitable, Callable, TypeVar

import click

from ..config import Settings, load_settings
from ..pneuma.chains import UnknownChainError
from ..pneuma.rpc import RpcError, describe_error
from ..session import Session, open_session
from ..sigil.eth import AccountConfigError

T = TypeVar("T")


def get_settings(ctx: click.Context) -> Settings:
    """Settings loaded by the group callback, or a fresh load."""
    settings = ctx.find_object(Settings)
    if settings is None:
        settings = load_settings()
    return settings


def run_with_session(
    ctx: click.Context,
    func: Callable[[Session], Awaitable[T]],
) -> T:
    """
    Open a session, run *func* inside it and close it.

    Configuration and RPC failures are printed and exit with status 1.
    """
    settings = get_settings(ctx)

    async def _main() -> T:
        async with open_session(settings) as session:
            return await func(session)

    try:
        return asyncio.run(_main())
    except (UnknownChainError, AccountConfigError) as exc:
        click.secho(f"ERROR: {exc}", fg="red")
        sys.exit(1)
    except RpcError as exc:
        click.secho(f"ERROR: {describe_error(exc)}", fg="red")
        sys.exit(1)


def echo_field(label: str, value: Any, width: int = 26) -> None:
    click.echo(click.style(f"  {label + ':':<{width}}", dim=True) + str(value))
