"""
Shared fixtures: a fake JSON-RPC node served through ``httpx.MockTransport``.

No network access; every call is recorded on the node so tests can
assert which RPC methods ran (and which did not).
"""

from __future__ import annotations

import asyncio
import json
from typing import Any, Awaitable, Callable, Optional

import httpx
import pytest
from eth_account import Account
from eth_account.signers.local import LocalAccount
from eth_hash.auto import keccak

from gasfee.pneuma.chains import CHAINS, Chain
from gasfee.pneuma.scenarios import MintScenarios
from gasfee.session import create_clients

# Well-known development key (hardhat / anvil account #0)
DEV_PRIVATE_KEY = "ac0974bec39a17e36ba4a6b4d238ff944bacb478cbed5efcae784d7bf4f2ff80"
DEV_ADDRESS = "0xf39Fd6e51aad88F6F4ce6aB8827279cffFb92266"
DEV_MNEMONIC = "test test test test test test test test test test test junk"

NODE_URL = "http://node.test"


class FakeNode:
    """Minimal EVM JSON-RPC node with adjustable canned answers."""

    def __init__(self) -> None:
        self.chain_id = CHAINS["sepolia"].chain_id
        # base 24 * 1.2 = 28, + tip 2 -> maxFeePerGas 30
        self.base_fee: Optional[int] = 24
        self.priority_fee = 2
        self.gas_estimate = 21000
        self.gas_price = 30
        self.balance = 10**18
        self.nonce = 7
        self.call_result = "0x"
        self.errors: dict[str, dict[str, Any]] = {}
        # Raw results returned as is, bypassing the handlers below
        self.results: dict[str, Any] = {}
        self.calls: list[tuple[str, list]] = []
        self.raw_transactions: list[str] = []
        self.transactions: dict[str, dict[str, Any]] = {}

    # -- transport ---------------------------------------------------------

    def handle(self, request: httpx.Request) -> httpx.Response:
        body = json.loads(request.content)
        method = body["method"]
        params = body.get("params", [])
        self.calls.append((method, params))

        if method in self.errors:
            return httpx.Response(
                200,
                json={"jsonrpc": "2.0", "id": body["id"], "error": self.errors[method]},
            )

        if method in self.results:
            return httpx.Response(
                200, json={"jsonrpc": "2.0", "id": body["id"], "result": self.results[method]}
            )

        handler = getattr(self, "_" + method, None)
        if handler is None:
            error = {"code": -32601, "message": f"the method {method} does not exist"}
            return httpx.Response(200, json={"jsonrpc": "2.0", "id": body["id"], "error": error})

        return httpx.Response(
            200, json={"jsonrpc": "2.0", "id": body["id"], "result": handler(params)}
        )

    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self.handle)

    def methods(self) -> list[str]:
        return [method for method, _ in self.calls]

    def params_of(self, method: str) -> list:
        for name, params in self.calls:
            if name == method:
                return params
        raise AssertionError(f"{method} was not called")

    # -- RPC methods -------------------------------------------------------

    def _eth_chainId(self, params: list) -> str:
        return hex(self.chain_id)

    def _eth_getBlockByNumber(self, params: list) -> dict:
        block: dict[str, Any] = {"number": "0x10", "hash": "0x" + "11" * 32}
        if self.base_fee is not None:
            block["baseFeePerGas"] = hex(self.base_fee)
        return block

    def _eth_maxPriorityFeePerGas(self, params: list) -> str:
        return hex(self.priority_fee)

    def _eth_gasPrice(self, params: list) -> str:
        return hex(self.gas_price)

    def _eth_estimateGas(self, params: list) -> str:
        return hex(self.gas_estimate)

    def _eth_call(self, params: list) -> str:
        return self.call_result

    def _eth_getBalance(self, params: list) -> str:
        return hex(self.balance)

    def _eth_getTransactionCount(self, params: list) -> str:
        return hex(self.nonce)

    def _eth_sendRawTransaction(self, params: list) -> str:
        raw = params[0]
        self.raw_transactions.append(raw)
        return "0x" + keccak(bytes.fromhex(raw[2:])).hex()

    def _eth_getTransactionByHash(self, params: list) -> Optional[dict]:
        return self.transactions.get(params[0])


@pytest.fixture()
def node() -> FakeNode:
    return FakeNode()


@pytest.fixture()
def dev_private_key() -> str:
    """Hex key without ``0x``, the way PRIVATE_KEY is usually stored."""
    return DEV_PRIVATE_KEY


@pytest.fixture()
def dev_address() -> str:
    return DEV_ADDRESS


@pytest.fixture()
def dev_mnemonic() -> str:
    return DEV_MNEMONIC


@pytest.fixture()
def account() -> LocalAccount:
    return Account.from_key("0x" + DEV_PRIVATE_KEY)


@pytest.fixture()
def chain() -> Chain:
    return CHAINS["sepolia"]


@pytest.fixture()
def with_scenarios(
    node: FakeNode, account: LocalAccount, chain: Chain
) -> Callable[[Callable[[MintScenarios], Awaitable[Any]]], Any]:
    """Run ``func(scenarios)`` against the fake node inside a fresh event loop."""

    def run(func: Callable[[MintScenarios], Awaitable[Any]]) -> Any:
        async def _main() -> Any:
            public, wallet = create_clients(chain, NODE_URL, account, transport=node.transport())
            try:
                return await func(MintScenarios(public, wallet, account, chain))
            finally:
                await public.rpc.aclose()

        return asyncio.run(_main())

    return run
