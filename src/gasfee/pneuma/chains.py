"""Chain definitions for the supported EVM networks."""

from __future__ import annotations

import logging
from dataclasses import dataclass

logger = logging.getLogger("gasfee.pneuma.chains")


class UnknownChainError(ValueError):
    """The configured CHAIN does not match any known network."""


@dataclass(frozen=True)
class Chain:
    """An EVM-compatible blockchain network."""

    network: str
    name: str
    chain_id: int
    rpc_url: str
    native_symbol: str
    explorer_url: str

    def tx_url(self, tx_hash: str) -> str:
        """Block explorer link for a transaction hash."""
        return f"{self.explorer_url}/tx/{tx_hash}"


CHAINS: dict[str, Chain] = {
    "homestead": Chain(
        network="homestead",
        name="Ethereum",
        chain_id=1,
        rpc_url="https://cloudflare-eth.com",
        native_symbol="ETH",
        explorer_url="https://etherscan.io",
    ),
    "goerli": Chain(
        network="goerli",
        name="Goerli",
        chain_id=5,
        rpc_url="https://rpc.ankr.com/eth_goerli",
        native_symbol="ETH",
        explorer_url="https://goerli.etherscan.io",
    ),
    "sepolia": Chain(
        network="sepolia",
        name="Sepolia",
        chain_id=11155111,
        rpc_url="https://rpc.sepolia.org",
        native_symbol="SEP",
        explorer_url="https://sepolia.etherscan.io",
    ),
    "maticmum": Chain(
        network="maticmum",
        name="Polygon Mumbai",
        chain_id=80001,
        rpc_url="https://rpc-mumbai.maticvigil.com",
        native_symbol="MATIC",
        explorer_url="https://mumbai.polygonscan.com",
    ),
}


def select_chain(identifier: str) -> Chain:
    """Get a chain by network identifier. Raises ``UnknownChainError`` if not found."""
    chain = CHAINS.get(identifier)
    if chain is None:
        raise UnknownChainError(
            f"{identifier!r} unknown chain envvar. Available: {list_chain_names()}"
        )
    logger.info(f"Network selected: {chain.name}")
    return chain


def list_chain_names() -> list[str]:
    """Return the identifiers of all supported chains."""
    return list(CHAINS.keys())
