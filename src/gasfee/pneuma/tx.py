"""
Transaction Builder - Build, sign, and send contract calls.

``build_params`` produces the parameter record for one call of the
example contract. Overrides are merged in only when supplied: an absent
field must not show up as zero, because legacy and EIP-1559 fee fields
exclude each other at the protocol level.

``WalletClient`` uses eth-account for signing and the JSON-RPC client for
sending. All gas is paid by the signing EOA.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Optional, Union

from eth_account.signers.local import LocalAccount
from eth_utils import to_checksum_address, to_hex

from .abi import MINT_CONTRACT, Contract, encode_call
from .chains import Chain
from .rpc import JsonRpc, PublicClient, RpcError, call_object

logger = logging.getLogger("gasfee.pneuma.tx")

MINT_FUNCTION = "mint"

REQUIRED_KEYS = ("account", "address", "abi", "function_name")


class FeeModeConflictError(ValueError):
    """Legacy gasPrice was combined with EIP-1559 fee fields."""


class TipAboveFeeCapError(ValueError):
    """maxPriorityFeePerGas is higher than maxFeePerGas."""


@dataclass(frozen=True)
class LegacyFee:
    """Price per gas (wei). Legacy transactions only."""

    gas_price: int


@dataclass(frozen=True)
class DynamicFee:
    """EIP-1559 fee cap and tip (wei).

    max_fee_per_gas is inclusive of the tip and can't be lower than the
    block base fee.
    """

    max_fee_per_gas: int
    max_priority_fee_per_gas: int


Fee = Union[LegacyFee, DynamicFee]


@dataclass(frozen=True)
class TxOverrides:
    """Optional per-submission overrides.

    Passing a gas limit skips the node's gas estimation step.
    """

    gas_limit: Optional[int] = None
    fee: Optional[Fee] = None
    nonce: Optional[int] = None

    @classmethod
    def from_fields(
        cls,
        gas_limit: Optional[int] = None,
        max_fee_per_gas: Optional[int] = None,
        max_priority_fee_per_gas: Optional[int] = None,
        gas_price: Optional[int] = None,
        nonce: Optional[int] = None,
    ) -> "TxOverrides":
        """
        Build overrides from the five flat optional fields.

        Raises:
            FeeModeConflictError: If gas_price is mixed with EIP-1559 fields
            ValueError: If only one of the two EIP-1559 fields is given
        """
        dynamic = (max_fee_per_gas, max_priority_fee_per_gas)
        fee: Optional[Fee] = None

        if gas_price is not None:
            if any(v is not None for v in dynamic):
                raise FeeModeConflictError(
                    "gasPrice can't be combined with maxFeePerGas / maxPriorityFeePerGas"
                )
            fee = LegacyFee(gas_price=gas_price)
        elif all(v is not None for v in dynamic):
            fee = DynamicFee(
                max_fee_per_gas=max_fee_per_gas,
                max_priority_fee_per_gas=max_priority_fee_per_gas,
            )
        elif any(v is not None for v in dynamic):
            raise ValueError(
                "maxFeePerGas and maxPriorityFeePerGas must be given together"
            )

        return cls(gas_limit=gas_limit, fee=fee, nonce=nonce)


def build_params(
    account: LocalAccount,
    overrides: Optional[TxOverrides] = None,
    contract: Contract = MINT_CONTRACT,
    function_name: str = MINT_FUNCTION,
) -> dict[str, Any]:
    """
    Build the parameter set for a contract call.

    Args:
        account: Signing account
        overrides: Optional gas limit, fee and nonce
        contract: Target contract (default: the example mint contract)
        function_name: Function to call

    Returns:
        Dict with account, address, abi, function_name and only the
        supplied optional keys (gas, max_fee_per_gas,
        max_priority_fee_per_gas, gas_price, nonce)
    """
    params: dict[str, Any] = {
        "account": account,
        "address": contract.address,
        "abi": contract.abi,
        "function_name": function_name,
    }
    if overrides is None:
        return params

    if overrides.gas_limit is not None:
        logger.info(f"gasLimit used:             {overrides.gas_limit}")
        params["gas"] = overrides.gas_limit

    fee = overrides.fee
    if isinstance(fee, DynamicFee):
        logger.info(f"maxFeePerGas used:         {fee.max_fee_per_gas}")
        logger.info(f"maxPriorityFeePerGas used: {fee.max_priority_fee_per_gas}")
        params["max_fee_per_gas"] = fee.max_fee_per_gas
        params["max_priority_fee_per_gas"] = fee.max_priority_fee_per_gas
    elif isinstance(fee, LegacyFee):
        logger.info(f"gasPrice used:             {fee.gas_price}")
        params["gas_price"] = fee.gas_price

    if overrides.nonce is not None:
        logger.info(f"nonce used:                {overrides.nonce}")
        params["nonce"] = overrides.nonce

    return params


class WalletClient:
    """Signs contract calls locally and broadcasts them."""

    def __init__(self, rpc: JsonRpc, chain: Chain, account: LocalAccount) -> None:
        self.rpc = rpc
        self.chain = chain
        self.account = account
        self._public = PublicClient(rpc, chain)

    async def prepare(self, params: dict[str, Any], args: Optional[list] = None) -> dict:
        """
        Fill in what the parameter set leaves out.

        Nonce defaults to the pending transaction count, gas to a node
        estimate and fees to the EIP-1559 estimate. A legacy gasPrice is
        used as given.

        Returns:
            Unsigned transaction dict

        Raises:
            TipAboveFeeCapError: If the tip exceeds the fee cap
        """
        account = params.get("account", self.account)
        tx: dict[str, Any] = {
            "to": to_checksum_address(params["address"]),
            "data": encode_call(params["abi"], params["function_name"], args),
            "value": 0,
            "chainId": self.chain.chain_id,
        }

        nonce = params.get("nonce")
        if nonce is None:
            nonce = await self._public.get_transaction_count(account.address, "pending")
        tx["nonce"] = nonce

        if params.get("gas_price") is not None:
            tx["gasPrice"] = params["gas_price"]
        else:
            max_fee = params.get("max_fee_per_gas")
            max_priority_fee = params.get("max_priority_fee_per_gas")
            if max_fee is None or max_priority_fee is None:
                fees = await self._public.estimate_fees_per_gas()
                if max_fee is None:
                    max_fee = fees["max_fee_per_gas"]
                if max_priority_fee is None:
                    max_priority_fee = fees["max_priority_fee_per_gas"]
            if max_priority_fee > max_fee:
                raise TipAboveFeeCapError(
                    f"maxPriorityFeePerGas ({max_priority_fee}) cannot be higher "
                    f"than maxFeePerGas ({max_fee})"
                )
            tx["maxFeePerGas"] = max_fee
            tx["maxPriorityFeePerGas"] = max_priority_fee

        gas = params.get("gas")
        if gas is None:
            gas = await self._public.estimate_gas(call_object(params, args))
        tx["gas"] = gas

        return tx

    async def write_contract(self, params: dict[str, Any], args: Optional[list] = None) -> str:
        """
        Sign and broadcast a contract call.

        Args:
            params: Parameter set from ``build_params``
            args: Function arguments (default: none)

        Returns:
            Transaction hash (0x-prefixed hex)

        Raises:
            RpcError: If the node rejects the transaction or returns no hash
        """
        account = params.get("account", self.account)
        tx = await self.prepare(params, args)
        signed = account.sign_transaction(tx)
        raw_tx = to_hex(signed.raw_transaction)

        tx_hash = await self.rpc.call("eth_sendRawTransaction", [raw_tx])
        if not isinstance(tx_hash, str) or not tx_hash:
            raise RpcError(
                f"eth_sendRawTransaction returned {tx_hash!r}, expected a hash",
                details="eth_sendRawTransaction returned no transaction hash",
            )
        logger.info(f"txHash {tx_hash}")
        logger.info(self.chain.tx_url(tx_hash))
        return tx_hash
