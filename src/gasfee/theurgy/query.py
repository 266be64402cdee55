"""
Theurgy Query - Read-only lookups.

- balance: native balance of an address (default: own account)
- nonce:   current transaction count of an address
- tx:      transaction details by hash
"""

from __future__ import annotations

from typing import Optional

import click

from ..pneuma.fees import format_ether
from ..session import Session
from .common import echo_field, run_with_session


@click.command()
@click.argument("address", required=False)
@click.pass_context
def balance(ctx: click.Context, address: Optional[str]) -> None:
    """Show the native balance of ADDRESS (default: own account)."""

    async def _balance(session: Session) -> tuple[str, int, str]:
        target = address or session.account.address
        wei = await session.scenarios.check_balance(target)
        return target, wei, session.chain.native_symbol

    target, wei, symbol = run_with_session(ctx, _balance)
    echo_field("Address", target, width=10)
    echo_field("Balance", f"{format_ether(wei)} {symbol} ({wei} wei)", width=10)


@click.command()
@click.argument("address", required=False)
@click.pass_context
def nonce(ctx: click.Context, address: Optional[str]) -> None:
    """Show the current nonce of ADDRESS (default: own account)."""

    async def _nonce(session: Session) -> tuple[str, int]:
        target = address or session.account.address
        return target, await session.scenarios.get_current_nonce(target)

    target, count = run_with_session(ctx, _nonce)
    click.echo(f"Current nonce for address {target}: {count}")


@click.command()
@click.argument("tx_hash")
@click.pass_context
def tx(ctx: click.Context, tx_hash: str) -> None:
    """Show transaction details for TX_HASH."""

    async def _tx(session: Session) -> tuple[dict, str]:
        data = await session.scenarios.get_tx_info(tx_hash)
        return data, session.chain.tx_url(tx_hash)

    data, url = run_with_session(ctx, _tx)
    for key in ("hash", "from", "to", "nonce", "gas", "gasPrice",
                "maxFeePerGas", "maxPriorityFeePerGas", "blockNumber", "type"):
        if data.get(key) is not None:
            echo_field(key, data[key], width=22)
    click.echo(f"  {url}")
