"""
Tests for the JSON-RPC layer and the read-only client.

Uses the in-process fake node from conftest; no network access.
"""

from __future__ import annotations

import asyncio
from typing import Any, Awaitable, Callable

import httpx
import pytest

from gasfee.pneuma.abi import MINT_CONTRACT
from gasfee.pneuma.chains import Chain
from gasfee.pneuma.rpc import (
    FeesNotSupportedError,
    JsonRpc,
    PublicClient,
    RpcError,
    TransactionNotFoundError,
    call_object,
    describe_error,
)
from gasfee.pneuma.tx import DynamicFee, TxOverrides, build_params


@pytest.fixture()
def with_public(node, chain: Chain) -> Callable[[Callable[[PublicClient], Awaitable[Any]]], Any]:
    def run(func: Callable[[PublicClient], Awaitable[Any]]) -> Any:
        async def _main() -> Any:
            async with JsonRpc("http://node.test", transport=node.transport()) as rpc:
                return await func(PublicClient(rpc, chain))

        return asyncio.run(_main())

    return run


class TestJsonRpc:
    def test_result(self, with_public, node) -> None:
        assert with_public(lambda public: public.get_chain_id()) == node.chain_id

    def test_error_object(self, with_public, node) -> None:
        node.errors["eth_chainId"] = {"code": -32000, "message": "header not found"}
        with pytest.raises(RpcError) as excinfo:
            with_public(lambda public: public.get_chain_id())
        assert excinfo.value.code == -32000
        assert excinfo.value.details == "header not found"
        assert "eth_chainId failed" in str(excinfo.value)

    def test_http_failure(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(503, text="unavailable")

        async def _main() -> None:
            async with JsonRpc("http://node.test", transport=httpx.MockTransport(handler)) as rpc:
                await rpc.call("eth_chainId")

        with pytest.raises(RpcError):
            asyncio.run(_main())

    def test_connection_failure(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("connection refused", request=request)

        async def _main() -> None:
            async with JsonRpc("http://node.test", transport=httpx.MockTransport(handler)) as rpc:
                await rpc.call("eth_chainId")

        with pytest.raises(RpcError) as excinfo:
            asyncio.run(_main())
        assert describe_error(excinfo.value) == "connection refused"

    @pytest.mark.parametrize(
        "body,details",
        [
            ("<html>bad gateway</html>", "eth_chainId response is not valid JSON"),
            ("[1, 2, 3]", "eth_chainId response is not a JSON-RPC object"),
        ],
    )
    def test_unusable_body(self, body: str, details: str) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(200, text=body)

        async def _main() -> None:
            async with JsonRpc("http://node.test", transport=httpx.MockTransport(handler)) as rpc:
                await rpc.call("eth_chainId")

        with pytest.raises(RpcError) as excinfo:
            asyncio.run(_main())
        assert excinfo.value.details == details

    @pytest.mark.parametrize("result", [None, "", "0x", "lots", 5])
    def test_unusable_quantity(self, with_public, node, result) -> None:
        node.results["eth_getBalance"] = result
        with pytest.raises(RpcError, match="expected a hex quantity"):
            with_public(lambda public: public.get_balance("0x" + "ab" * 20))

    def test_null_gas_estimate(self, with_public, node) -> None:
        node.results["eth_estimateGas"] = None
        with pytest.raises(RpcError):
            with_public(lambda public: public.estimate_gas({"to": "0x" + "ab" * 20}))


class TestDescribeError:
    def test_prefers_details(self) -> None:
        exc = RpcError("eth_call failed: execution reverted", details="execution reverted")
        assert describe_error(exc) == "execution reverted"

    def test_falls_back_to_message(self) -> None:
        assert describe_error(ValueError("bad value")) == "bad value"

    def test_falls_back_to_repr(self) -> None:
        assert describe_error(RuntimeError()) == "RuntimeError()"


class TestFeeEstimation:
    def test_base_fee_scaled_plus_tip(self, with_public, node) -> None:
        fees = with_public(lambda public: public.estimate_fees_per_gas())
        # 24 * 1.2 = 28 (truncated), + 2
        assert fees == {"max_fee_per_gas": 30, "max_priority_fee_per_gas": 2}

    def test_priority_fallback_to_gas_price(self, with_public, node) -> None:
        node.errors["eth_maxPriorityFeePerGas"] = {"code": -32601, "message": "method not found"}
        node.gas_price = 33
        fees = with_public(lambda public: public.estimate_fees_per_gas())
        # tip = 33 - 24 (unscaled base fee); cap = 24 * 1.2 + 9
        assert fees == {"max_fee_per_gas": 37, "max_priority_fee_per_gas": 9}
        assert "eth_gasPrice" in node.methods()

    def test_priority_fallback_never_negative(self, with_public, node) -> None:
        node.errors["eth_maxPriorityFeePerGas"] = {"code": -32601, "message": "method not found"}
        node.gas_price = 20
        fees = with_public(lambda public: public.estimate_fees_per_gas())
        assert fees == {"max_fee_per_gas": 28, "max_priority_fee_per_gas": 0}

    def test_no_base_fee(self, with_public, node) -> None:
        node.base_fee = None
        with pytest.raises(FeesNotSupportedError):
            with_public(lambda public: public.estimate_fees_per_gas())

    def test_contract_gas(self, with_public, node) -> None:
        node.gas_estimate = 46000
        gas = with_public(
            lambda public: public.estimate_contract_gas(
                address=MINT_CONTRACT.address,
                abi=MINT_CONTRACT.abi,
                function_name="mint",
                account="0x" + "ab" * 20,
            )
        )
        assert gas == 46000
        call = node.params_of("eth_estimateGas")[0]
        assert call["data"] == "0x1249c58b"
        assert call["to"] == MINT_CONTRACT.address


class TestQueries:
    def test_balance_and_nonce(self, with_public, node) -> None:
        node.balance = 5 * 10**17
        node.nonce = 12

        async def _query(public: PublicClient) -> tuple[int, int]:
            address = "0x" + "ab" * 20
            return await public.get_balance(address), await public.get_transaction_count(address)

        assert with_public(_query) == (5 * 10**17, 12)
        assert node.params_of("eth_getTransactionCount")[1] == "latest"

    def test_get_transaction(self, with_public, node) -> None:
        tx_hash = "0x" + "cd" * 32
        node.transactions[tx_hash] = {
            "hash": tx_hash,
            "nonce": "0x7",
            "gas": "0x6270",
            "maxFeePerGas": "0x77359401",
            "blockNumber": None,
            "type": "0x2",
        }
        tx = with_public(lambda public: public.get_transaction(tx_hash))
        assert tx["nonce"] == 7
        assert tx["gas"] == 25200
        assert tx["maxFeePerGas"] == 2_000_000_001
        assert tx["blockNumber"] is None
        assert tx["type"] == 2

    def test_transaction_not_found(self, with_public) -> None:
        with pytest.raises(TransactionNotFoundError):
            with_public(lambda public: public.get_transaction("0x" + "00" * 32))


class TestSimulation:
    def test_call_object_carries_overrides(self, account) -> None:
        overrides = TxOverrides(
            gas_limit=25200,
            fee=DynamicFee(max_fee_per_gas=15, max_priority_fee_per_gas=1),
            nonce=0,
        )
        call = call_object(build_params(account, overrides))
        assert call["from"] == account.address
        assert call["gas"] == hex(25200)
        assert call["maxFeePerGas"] == "0xf"
        assert call["maxPriorityFeePerGas"] == "0x1"
        assert call["nonce"] == "0x0"
        assert "gasPrice" not in call

    def test_revert_raises(self, with_public, node, account) -> None:
        node.errors["eth_call"] = {"code": 3, "message": "execution reverted: sold out"}
        with pytest.raises(RpcError) as excinfo:
            with_public(lambda public: public.simulate_contract(build_params(account)))
        assert describe_error(excinfo.value) == "execution reverted: sold out"

    def test_success_returns_request(self, with_public, node, account) -> None:
        params = build_params(account)
        simulation = with_public(lambda public: public.simulate_contract(params))
        assert simulation.request == params
        assert simulation.result is None
        assert node.params_of("eth_call")[1] == "latest"
