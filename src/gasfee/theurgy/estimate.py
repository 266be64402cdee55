"""
Theurgy Estimate - Gas and fee estimates for the example contract.

- estimate: raw node estimate (gas units, maxFeePerGas, maxPriorityFeePerGas)
- margin:   the same estimate after the 20 % safety margin and 2 gwei floor
"""

from __future__ import annotations

import click

from ..pneuma.abi import FUNCTION_NAMES
from ..pneuma.fees import DEFAULT_MAX_PRIORITY_FEE, calculate_margin_fees
from ..session import Session
from .common import echo_field, run_with_session


@click.command()
@click.option(
    "--function",
    "function_name",
    type=click.Choice(FUNCTION_NAMES),
    default="mint",
    show_default=True,
    help="Contract function to estimate",
)
@click.pass_context
def estimate(ctx: click.Context, function_name: str) -> None:
    """Show the node's gas and fee estimate."""

    async def _estimate(session: Session):
        return await session.scenarios.get_estimations(function_name)

    result = run_with_session(ctx, _estimate)

    click.echo(f"=== Estimate ({function_name}) ===")
    click.echo()
    echo_field("Estimated gas", result.estimated_gas)
    echo_field("maxFeePerGas", result.max_fee_per_gas)
    echo_field("maxPriorityFeePerGas", result.max_priority_fee_per_gas)


@click.command()
@click.pass_context
def margin(ctx: click.Context) -> None:
    """Show margin-adjusted fees and gas limit for mint."""

    async def _estimate(session: Session):
        return await session.scenarios.get_estimations()

    raw = run_with_session(ctx, _estimate)
    fees = calculate_margin_fees(raw)

    click.echo("=== Margin-adjusted fees (20 %) ===")
    click.echo()
    echo_field("Estimated gas", raw.estimated_gas)
    echo_field("Gas limit", fees.gas_limit)
    click.echo()
    echo_field("Estimated priority fee", raw.max_priority_fee_per_gas)
    echo_field("Default priority fee", DEFAULT_MAX_PRIORITY_FEE)
    echo_field("maxPriorityFeePerGas", fees.max_priority_fee_per_gas)
    click.echo()
    echo_field("Estimated max fee", raw.max_fee_per_gas)
    echo_field("maxFeePerGas", fees.max_fee_per_gas)
