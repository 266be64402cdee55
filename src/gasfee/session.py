"""
Session wiring: configuration -> account + network -> client pair.

One session owns one HTTP connection pool; leave the ``async with`` block
to close it.
"""

from __future__ import annotations

from contextlib import asynccontextmanager
from dataclasses import dataclass
from typing import AsyncIterator, Optional

import httpx
from eth_account.signers.local import LocalAccount

from .config import Settings
from .pneuma.chains import Chain, select_chain
from .pneuma.rpc import JsonRpc, PublicClient
from .pneuma.scenarios import MintScenarios
from .pneuma.tx import WalletClient
from .sigil.eth import account_from_settings

# Transport override for every session (None = real network)
TRANSPORT: Optional[httpx.AsyncBaseTransport] = None


@dataclass(frozen=True)
class Session:
    chain: Chain
    endpoint: str
    account: LocalAccount
    public: PublicClient
    wallet: WalletClient
    scenarios: MintScenarios


def create_clients(
    chain: Chain,
    endpoint: str,
    account: LocalAccount,
    transport: Optional[httpx.AsyncBaseTransport] = None,
) -> tuple[PublicClient, WalletClient]:
    """Build the read-only and signing clients on one shared transport."""
    rpc = JsonRpc(endpoint, transport=transport)
    return PublicClient(rpc, chain), WalletClient(rpc, chain, account)


@asynccontextmanager
async def open_session(
    settings: Settings,
    transport: Optional[httpx.AsyncBaseTransport] = None,
) -> AsyncIterator[Session]:
    """
    Resolve account and chain from *settings* and open the client pair.

    Raises:
        UnknownChainError: If CHAIN is not a known network
        AccountConfigError: If no key or mnemonic is configured
    """
    chain = select_chain(settings.chain)
    account = account_from_settings(settings)
    endpoint = settings.endpoint(chain)

    public, wallet = create_clients(chain, endpoint, account, transport or TRANSPORT)
    try:
        yield Session(
            chain=chain,
            endpoint=endpoint,
            account=account,
            public=public,
            wallet=wallet,
            scenarios=MintScenarios(public, wallet, account, chain),
        )
    finally:
        await public.rpc.aclose()
