"""
Theurgy Guard - Check the balance against a threshold before sending.

The worst-case fee (margin-adjusted maxFeePerGas * gas limit) is
subtracted from the balance; warnings are printed when the balance is,
or would end up, below the threshold.
"""

from __future__ import annotations

import sys

import click

from ..pneuma.fees import format_ether, parse_ether
from ..pneuma.scenarios import BalanceCheck
from ..session import Session
from .common import echo_field, run_with_session


@click.command("balance-check")
@click.option(
    "--threshold",
    default="0.3",
    show_default=True,
    help="Low-balance threshold in native units (e.g. ETH)",
)
@click.option(
    "--send",
    "send_tx",
    is_flag=True,
    help="Send the secure transaction if the balance stays above the threshold",
)
@click.pass_context
def balance_check(ctx: click.Context, threshold: str, send_tx: bool) -> None:
    """Check the balance before sending the mint transaction."""
    try:
        threshold_wei = parse_ether(threshold)
    except ArithmeticError:
        raise click.BadParameter(f"not a number: {threshold}", param_hint="--threshold")

    async def _check(session: Session) -> tuple[BalanceCheck, str]:
        check = await session.scenarios.check_balance_before_send(threshold_wei, send=send_tx)
        return check, session.chain.native_symbol

    check, symbol = run_with_session(ctx, _check)

    echo_field("Balance", f"{format_ether(check.balance)} {symbol}", width=14)
    echo_field("Max tx fee", f"{format_ether(check.tx_fee)} {symbol}", width=14)
    echo_field("Threshold", f"{format_ether(check.threshold)} {symbol}", width=14)
    click.echo()

    if check.below_threshold:
        click.secho("Balance is already below the threshold", fg="yellow")
    if check.below_threshold_after_tx:
        click.secho("Balance will be below the threshold after the tx", fg="yellow")
    if not check.below_threshold_after_tx:
        click.secho("Balance OK", fg="green")

    if check.sent is not None:
        if check.sent.ok:
            click.secho("SUCCESS: Transaction submitted!", fg="green")
            click.echo(f"  TX: {check.sent.tx_hash}")
        else:
            click.secho(f"FAILED: {check.sent.error}", fg="red")
            sys.exit(1)
