"""
gasfee CLI

Command-line interface for estimating, simulating and sending the
example mint transaction on an EVM network.

Configuration comes from the environment / .env (CHAIN, PRIVATE_KEY,
MNEMONIC, PROVIDER).

Commands:
  estimate       - Node gas and fee estimate
  margin         - Margin-adjusted fee set
  send           - Simulate then send the mint call
  balance        - Native balance
  nonce          - Current nonce
  tx             - Transaction lookup
  balance-check  - Balance threshold check before sending
  networks       - List known networks
  whoami         - Show current wallet address
  info           - Show configuration
"""

from __future__ import annotations

import logging
import sys
from pathlib import Path
from typing import Optional

import click

from .config import load_settings, Settings
from .pneuma.chains import CHAINS, UnknownChainError, select_chain
from .sigil.eth import AccountConfigError, account_from_settings


# ============ Constants ============

VERSION = "0.3.0"


# ============ Banner ============


def _print_banner() -> None:
    """Print the gasfee CLI banner."""
    click.echo(
        click.style("  ◆ ", fg="cyan")
        + click.style("G A S F E E", fg="bright_white", bold=True)
        + click.style(f"  v{VERSION}", dim=True)
    )
    click.echo()


# ============ Main CLI Group ============


@click.group(invoke_without_command=True)
@click.version_option(version=VERSION, prog_name="gasfee")
@click.option(
    "--env-file",
    type=click.Path(dir_okay=False, path_type=Path),
    default=None,
    help="Path to .env file (default: ./.env)",
)
@click.option("-v", "--verbose", count=True, help="Log progress (-vv for debug)")
@click.pass_context
def cli(ctx: click.Context, env_file: Optional[Path], verbose: int) -> None:
    """gasfee: estimate, simulate and send EVM transactions."""
    if verbose:
        logging.basicConfig(
            level=logging.DEBUG if verbose > 1 else logging.INFO,
            format="%(levelname)s %(name)s: %(message)s",
        )
    ctx.obj = load_settings(env_file)

    if ctx.invoked_subcommand is None:
        _print_banner()
        click.echo(ctx.get_help())


# ============ Top-level Commands ============

from .theurgy.estimate import estimate, margin
from .theurgy.send import send
from .theurgy.query import balance, nonce, tx
from .theurgy.guard import balance_check

cli.add_command(estimate)
cli.add_command(margin)
cli.add_command(send)
cli.add_command(balance)
cli.add_command(nonce)
cli.add_command(tx)
cli.add_command(balance_check)


# ============ Identity ============


@cli.command()
@click.pass_obj
def whoami(settings: Settings) -> None:
    """Show current wallet identity."""
    try:
        address = account_from_settings(settings).address
        click.echo(f"Address: {address}")
    except AccountConfigError as exc:
        if settings.private_key or settings.mnemonic:
            click.secho(f"ERROR: {exc}", fg="red")
        else:
            click.echo("No wallet found.")
            click.echo("Set PRIVATE_KEY or MNEMONIC in .env")
        sys.exit(1)


# ============ Networks ============


@cli.command()
def networks() -> None:
    """List known networks."""
    for chain in CHAINS.values():
        click.echo(
            click.style(f"  {chain.network:<10}", fg="bright_white", bold=True)
            + click.style("  ◇  ", fg="cyan")
            + click.style(f"{chain.name} (chain id {chain.chain_id})", dim=True)
        )


# ============ Info ============


@cli.command()
@click.pass_obj
def info(settings: Settings) -> None:
    """Show configuration."""
    _print_banner()

    click.secho("  Status ─────────────────────────────────", fg="cyan")
    click.echo()

    try:
        chain = select_chain(settings.chain)
        network_text = click.style(f"{chain.name} ({chain.network})", fg="bright_white")
        endpoint_text = click.style(settings.endpoint(chain), fg="bright_white")
    except UnknownChainError:
        network_text = click.style(
            f"unknown ({settings.chain or 'CHAIN not set'})", fg="yellow"
        )
        endpoint_text = click.style(settings.provider or "-", dim=True)
    click.echo(click.style("  Network:     ", dim=True) + network_text)
    click.echo(click.style("  Endpoint:    ", dim=True) + endpoint_text)

    try:
        address = account_from_settings(settings).address
        click.echo(
            click.style("  Address:     ", dim=True)
            + click.style(address, fg="bright_white")
        )
    except ValueError:
        click.echo(
            click.style("  Address:     ", dim=True)
            + click.style("not configured", fg="yellow")
            + click.style("  (set PRIVATE_KEY or MNEMONIC)", dim=True)
        )

    click.echo()


# ============ Entry Points ============


def main() -> None:
    """gasfee CLI entry point."""
    # Ensure UTF-8 output on Windows (for Unicode box-drawing / symbols)
    if sys.platform == "win32":
        try:
            sys.stdout.reconfigure(encoding="utf-8")  # type: ignore[union-attr]
            sys.stderr.reconfigure(encoding="utf-8")  # type: ignore[union-attr]
        except (AttributeError, OSError):
            pass  # Fallback: old Python or non-tty
    cli()


if __name__ == "__main__":
    main()
