"""
Theurgy Send - Simulate-then-send scenarios for the mint call.

Modes:
- lower:     1 wei tip, 15 wei fee cap (expected to be rejected or stuck)
- estimated: the node's fee estimate as is
- nonce:     estimated fees with a pinned nonce (--nonce)
- gas-price: legacy transaction with a fixed gas price (--gas-price)
- secure:    margin-adjusted fees and gas limit
"""

from __future__ import annotations

import sys
from typing import Optional

import click

from ..pneuma.scenarios import DEFAULT_LEGACY_GAS_PRICE, TxResult
from ..session import Session
from .common import run_with_session

MODES = ("lower", "estimated", "nonce", "gas-price", "secure")


@click.command()
@click.option(
    "--mode",
    type=click.Choice(MODES),
    default="secure",
    show_default=True,
    help="Fee scenario to use",
)
@click.option("--nonce", type=int, default=None, help="Nonce to pin (mode: nonce)")
@click.option(
    "--gas-price",
    type=int,
    default=DEFAULT_LEGACY_GAS_PRICE,
    show_default=True,
    help="Legacy gas price in wei (mode: gas-price)",
)
@click.pass_context
def send(ctx: click.Context, mode: str, nonce: Optional[int], gas_price: int) -> None:
    """
    Simulate the mint call, then send it.

    Nothing is broadcast when the simulation fails.
    """
    if mode == "nonce" and nonce is None:
        raise click.UsageError("--nonce is required with --mode nonce")

    async def _send(session: Session) -> tuple[TxResult, str]:
        click.echo(f"  Sender:  {session.account.address}")
        click.echo(f"  Network: {session.chain.name}")
        click.echo(f"  Mode:    {mode}")
        click.echo("")

        scenarios = session.scenarios
        if mode == "lower":
            result = await scenarios.send_with_lower_fee()
        elif mode == "estimated":
            result = await scenarios.send_with_estimated_fees()
        elif mode == "nonce":
            result = await scenarios.send_with_used_nonce(nonce)
        elif mode == "gas-price":
            result = await scenarios.send_with_gas_price(gas_price)
        else:
            result = await scenarios.send_secure()

        url = session.chain.tx_url(result.tx_hash) if result.ok else ""
        return result, url

    click.echo("=== gasfee Send ===")
    click.echo("")

    result, url = run_with_session(ctx, _send)

    if result.ok:
        click.secho("SUCCESS: Transaction submitted!", fg="green")
        click.echo(f"  TX: {result.tx_hash}")
        click.echo(f"  {url}")
    else:
        click.secho(f"FAILED: {result.error}", fg="red")
        sys.exit(1)
