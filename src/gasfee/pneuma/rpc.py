"""
Async JSON-RPC client for EVM nodes.

Lightweight alternative to web3.py: uses httpx for HTTP + eth-abi for encoding.
``PublicClient`` covers the read-only side (estimates, simulation,
balances, nonces, transaction lookup). Signing lives in ``pneuma.tx``.
"""

from __future__ import annotations

import itertools
import logging
from dataclasses import dataclass
from typing import Any, Optional

import httpx

from .abi import decode_result, encode_call
from .chains import Chain
from .fees import apply_margin

logger = logging.getLogger("gasfee.pneuma.rpc")

DEFAULT_TIMEOUT = 30.0

# Hex quantity fields converted to int in transaction lookups
_QUANTITY_FIELDS = (
    "blockNumber",
    "chainId",
    "gas",
    "gasPrice",
    "maxFeePerGas",
    "maxPriorityFeePerGas",
    "nonce",
    "transactionIndex",
    "type",
    "value",
    "v",
)


class RpcError(RuntimeError):
    """A JSON-RPC call failed (error object or transport failure)."""

    def __init__(
        self,
        message: str,
        code: Optional[int] = None,
        data: Any = None,
        details: Optional[str] = None,
    ) -> None:
        super().__init__(message)
        self.code = code
        self.data = data
        self.details = details


class TransactionNotFoundError(RpcError):
    """No transaction exists for the requested hash."""


class FeesNotSupportedError(RpcError):
    """The chain does not expose an EIP-1559 base fee."""


def describe_error(exc: BaseException) -> str:
    """
    Reduce an exception to a printable message.

    Prefers the provider-supplied detail, then the exception message,
    then the raw repr.
    """
    details = getattr(exc, "details", None)
    if details:
        return str(details)
    message = str(exc)
    if message:
        return message
    return repr(exc)


def to_quantity(value: int) -> str:
    return hex(value)


def from_quantity(value: str) -> int:
    return int(value, 16)


def call_object(params: dict[str, Any], args: Optional[list] = None) -> dict[str, str]:
    """Translate a parameter set from ``build_params`` into an eth_call object."""
    call: dict[str, str] = {
        "from": params["account"].address,
        "to": params["address"],
        "data": encode_call(params["abi"], params["function_name"], args),
    }
    if params.get("gas") is not None:
        call["gas"] = to_quantity(params["gas"])
    if params.get("max_fee_per_gas") is not None:
        call["maxFeePerGas"] = to_quantity(params["max_fee_per_gas"])
    if params.get("max_priority_fee_per_gas") is not None:
        call["maxPriorityFeePerGas"] = to_quantity(params["max_priority_fee_per_gas"])
    if params.get("gas_price") is not None:
        call["gasPrice"] = to_quantity(params["gas_price"])
    if params.get("nonce") is not None:
        call["nonce"] = to_quantity(params["nonce"])
    return call


class JsonRpc:
    """JSON-RPC 2.0 over a single ``httpx.AsyncClient``."""

    def __init__(
        self,
        url: str,
        timeout: float = DEFAULT_TIMEOUT,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        self.url = url
        self._client = httpx.AsyncClient(timeout=timeout, transport=transport)
        self._ids = itertools.count(1)

    async def call(self, method: str, params: Optional[list] = None) -> Any:
        """
        Make a JSON-RPC call.

        Args:
            method: RPC method name (e.g., "eth_call")
            params: RPC parameters

        Returns:
            Result field from the RPC response

        Raises:
            RpcError: If the transport fails or the node returns an error
        """
        payload = {
            "jsonrpc": "2.0",
            "method": method,
            "params": params or [],
            "id": next(self._ids),
        }

        try:
            response = await self._client.post(self.url, json=payload)
            response.raise_for_status()
        except httpx.HTTPError as exc:
            raise RpcError(
                f"{method} request to {self.url} failed: {exc}",
                details=str(exc) or None,
            ) from exc

        try:
            data = response.json()
        except ValueError as exc:
            raise RpcError(
                f"{method} failed: response from {self.url} is not valid JSON",
                details=f"{method} response is not valid JSON",
            ) from exc
        if not isinstance(data, dict):
            raise RpcError(
                f"{method} failed: expected a JSON-RPC object, got {type(data).__name__}",
                details=f"{method} response is not a JSON-RPC object",
            )

        error = data.get("error")
        if error:
            message = error.get("message", "unknown error")
            raise RpcError(
                f"{method} failed: {message}",
                code=error.get("code"),
                data=error.get("data"),
                details=message,
            )

        return data.get("result")

    async def call_quantity(self, method: str, params: Optional[list] = None) -> int:
        """
        Make a JSON-RPC call whose result is a hex quantity.

        Raises:
            RpcError: If the call fails or the result is missing or not hex
        """
        result = await self.call(method, params)
        try:
            return from_quantity(result)
        except (TypeError, ValueError) as exc:
            raise RpcError(
                f"{method} returned {result!r}, expected a hex quantity",
                details=f"{method} returned no usable value",
            ) from exc

    async def aclose(self) -> None:
        await self._client.aclose()

    async def __aenter__(self) -> "JsonRpc":
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.aclose()


@dataclass(frozen=True)
class Simulation:
    """Outcome of a dry-run ``eth_call``."""

    request: dict[str, Any]
    result: Any


class PublicClient:
    """Read-only queries bound to one chain and endpoint."""

    def __init__(self, rpc: JsonRpc, chain: Chain) -> None:
        self.rpc = rpc
        self.chain = chain

    async def get_chain_id(self) -> int:
        return await self.rpc.call_quantity("eth_chainId")

    async def get_balance(self, address: str, block: str = "latest") -> int:
        """Balance in wei."""
        return await self.rpc.call_quantity("eth_getBalance", [address, block])

    async def get_transaction_count(self, address: str, block: str = "latest") -> int:
        """Transaction count (the next nonce) for an address."""
        return await self.rpc.call_quantity("eth_getTransactionCount", [address, block])

    async def get_gas_price(self) -> int:
        return await self.rpc.call_quantity("eth_gasPrice")

    async def get_block(self, block: str = "latest") -> dict[str, Any]:
        result = await self.rpc.call("eth_getBlockByNumber", [block, False])
        if result is None:
            raise RpcError(f"Block {block} not found")
        return result

    async def estimate_max_priority_fee(self, base_fee: int) -> int:
        """eth_maxPriorityFeePerGas, or gasPrice - baseFee where unsupported."""
        try:
            return await self.rpc.call_quantity("eth_maxPriorityFeePerGas")
        except RpcError as exc:
            logger.debug(f"eth_maxPriorityFeePerGas unavailable ({exc}); using gasPrice")
        gas_price = await self.get_gas_price()
        return max(gas_price - base_fee, 0)

    async def estimate_fees_per_gas(self) -> dict[str, int]:
        """
        Estimate EIP-1559 fee fields.

        maxFeePerGas = latest base fee * 1.2 + maxPriorityFeePerGas. The
        gasPrice fallback for the tip is taken against the unscaled base fee.

        Raises:
            FeesNotSupportedError: If the latest block carries no base fee
        """
        block = await self.get_block("latest")
        if block.get("baseFeePerGas") is None:
            raise FeesNotSupportedError(
                f"{self.chain.name} does not support EIP-1559 fees"
            )
        base_fee = from_quantity(block["baseFeePerGas"])
        max_priority_fee = await self.estimate_max_priority_fee(base_fee)
        return {
            "max_fee_per_gas": apply_margin(base_fee) + max_priority_fee,
            "max_priority_fee_per_gas": max_priority_fee,
        }

    async def estimate_gas(self, call: dict[str, str]) -> int:
        return await self.rpc.call_quantity("eth_estimateGas", [call])

    async def estimate_contract_gas(
        self,
        address: str,
        abi: list,
        function_name: str,
        account: str,
        args: Optional[list] = None,
    ) -> int:
        """Gas units needed to execute a contract function from *account*."""
        call = {
            "from": account,
            "to": address,
            "data": encode_call(abi, function_name, args),
        }
        return await self.estimate_gas(call)

    async def simulate_contract(
        self, params: dict[str, Any], args: Optional[list] = None
    ) -> Simulation:
        """
        Dry-run a contract call against the latest state.

        Raises:
            RpcError: If the call reverts or the node rejects the parameters
        """
        call = call_object(params, args)
        data = await self.rpc.call("eth_call", [call, "latest"])
        result = None
        if data and data != "0x":
            result = decode_result(params["abi"], params["function_name"], data)
        logger.info(f"gas used in simulate operation: {params.get('gas')}")
        return Simulation(request=dict(params), result=result)

    async def get_transaction(self, tx_hash: str) -> dict[str, Any]:
        """
        Look up a transaction by hash.

        Raises:
            TransactionNotFoundError: If the node does not know the hash
        """
        tx = await self.rpc.call("eth_getTransactionByHash", [tx_hash])
        if tx is None:
            raise TransactionNotFoundError(f"Transaction {tx_hash} not found")
        for field in _QUANTITY_FIELDS:
            if isinstance(tx.get(field), str):
                tx[field] = from_quantity(tx[field])
        return tx
