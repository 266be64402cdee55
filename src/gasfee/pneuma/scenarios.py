"""
Transaction scenarios for the example mint contract.

Each send scenario runs the same sequence: estimate, build parameters,
simulate with the read-only client, then submit with the signing client.
A failed simulation stops the sequence before anything is broadcast.
Failures are returned as ``TxResult`` values rather than raised.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Optional

from eth_account.signers.local import LocalAccount

from .abi import MINT_CONTRACT, Contract
from .chains import Chain
from .fees import FeeEstimate, MarginFees, calculate_margin_fees, parse_ether
from .rpc import PublicClient, Simulation, describe_error
from .tx import (
    MINT_FUNCTION,
    DynamicFee,
    LegacyFee,
    TxOverrides,
    WalletClient,
    build_params,
)

logger = logging.getLogger("gasfee.pneuma.scenarios")

LOW_BALANCE_THRESHOLD = parse_ether("0.3")

# Deliberately underpriced fee pair for the lower-fee scenario
LOW_PRIORITY_FEE = 1
LOW_FEE_HEADROOM = 14

DEFAULT_LEGACY_GAS_PRICE = 5


@dataclass(frozen=True)
class TxResult:
    """Outcome of a send scenario: a hash on success, a message on failure."""

    tx_hash: Optional[str] = None
    error: Optional[str] = None
    exception: Optional[BaseException] = None

    @property
    def ok(self) -> bool:
        return self.tx_hash is not None and self.error is None

    @classmethod
    def success(cls, tx_hash: str) -> "TxResult":
        return cls(tx_hash=tx_hash)

    @classmethod
    def failure(cls, exc: BaseException) -> "TxResult":
        return cls(error=describe_error(exc), exception=exc)


@dataclass(frozen=True)
class BalanceCheck:
    """Balance compared against a low-balance threshold before sending."""

    balance: int
    tx_fee: int
    threshold: int
    fees: MarginFees
    sent: Optional[TxResult] = None

    @property
    def below_threshold(self) -> bool:
        return self.balance < self.threshold

    @property
    def below_threshold_after_tx(self) -> bool:
        return self.balance - self.tx_fee < self.threshold


class MintScenarios:
    """Usage scenarios built on an injected client pair and account."""

    def __init__(
        self,
        public: PublicClient,
        wallet: WalletClient,
        account: LocalAccount,
        chain: Chain,
        contract: Contract = MINT_CONTRACT,
    ) -> None:
        self.public = public
        self.wallet = wallet
        self.account = account
        self.chain = chain
        self.contract = contract

    # ------------------------------------------------------------------
    # Building blocks
    # ------------------------------------------------------------------

    def params(self, overrides: Optional[TxOverrides] = None) -> dict[str, Any]:
        return build_params(self.account, overrides, contract=self.contract)

    async def get_estimations(self, function_name: str = MINT_FUNCTION) -> FeeEstimate:
        """Gas units for *function_name* plus the current EIP-1559 fee estimate."""
        estimated_gas = await self.public.estimate_contract_gas(
            address=self.contract.address,
            abi=self.contract.abi,
            function_name=function_name,
            account=self.account.address,
        )
        fees = await self.public.estimate_fees_per_gas()

        logger.info(f"Estimated units of gas for {function_name} function: {estimated_gas}")
        logger.info(f"Estimated maxFeePerGas:         {fees['max_fee_per_gas']}")
        logger.info(f"Estimated maxPriorityFeePerGas: {fees['max_priority_fee_per_gas']}")

        return FeeEstimate(
            estimated_gas=estimated_gas,
            max_fee_per_gas=fees["max_fee_per_gas"],
            max_priority_fee_per_gas=fees["max_priority_fee_per_gas"],
        )

    async def calculate_margin_fee(self) -> MarginFees:
        """Fresh estimate run through the 20 % margin policy."""
        return calculate_margin_fees(await self.get_estimations())

    async def simulate(self, overrides: Optional[TxOverrides] = None) -> Simulation:
        return await self.public.simulate_contract(self.params(overrides))

    async def send(self, overrides: Optional[TxOverrides] = None) -> str:
        return await self.wallet.write_contract(self.params(overrides))

    async def simulate_then_send(
        self,
        simulate_overrides: TxOverrides,
        send_overrides: Optional[TxOverrides] = None,
    ) -> TxResult:
        """
        Simulate, then submit only if the simulation succeeded.

        *send_overrides* defaults to *simulate_overrides*.
        """
        if send_overrides is None:
            send_overrides = simulate_overrides
        try:
            await self.simulate(simulate_overrides)
            tx_hash = await self.send(send_overrides)
        except Exception as exc:
            logger.error(f"Transaction failed: {describe_error(exc)}")
            return TxResult.failure(exc)
        return TxResult.success(tx_hash)

    # ------------------------------------------------------------------
    # Send scenarios
    # ------------------------------------------------------------------

    async def _estimate(self) -> FeeEstimate | TxResult:
        try:
            return await self.get_estimations()
        except Exception as exc:
            logger.error(f"Estimation failed: {describe_error(exc)}")
            return TxResult.failure(exc)

    async def send_with_lower_fee(self) -> TxResult:
        """Submit with a 1 wei tip and a fee cap of 15 wei."""
        fee = DynamicFee(
            max_fee_per_gas=LOW_PRIORITY_FEE + LOW_FEE_HEADROOM,
            max_priority_fee_per_gas=LOW_PRIORITY_FEE,
        )
        estimate = await self._estimate()
        if isinstance(estimate, TxResult):
            return estimate
        return await self.simulate_then_send(
            TxOverrides(gas_limit=estimate.estimated_gas, fee=fee),
            TxOverrides(fee=fee),
        )

    async def send_with_estimated_fees(self) -> TxResult:
        """Submit with the node's fee estimate as is."""
        estimate = await self._estimate()
        if isinstance(estimate, TxResult):
            return estimate
        fee = DynamicFee(
            max_fee_per_gas=estimate.max_fee_per_gas,
            max_priority_fee_per_gas=estimate.max_priority_fee_per_gas,
        )
        return await self.simulate_then_send(
            TxOverrides(gas_limit=estimate.estimated_gas, fee=fee),
            TxOverrides(fee=fee),
        )

    async def send_with_used_nonce(self, nonce: int) -> TxResult:
        """Submit with a pinned nonce (replacement or rejection expected if used)."""
        estimate = await self._estimate()
        if isinstance(estimate, TxResult):
            return estimate
        fee = DynamicFee(
            max_fee_per_gas=estimate.max_fee_per_gas,
            max_priority_fee_per_gas=estimate.max_priority_fee_per_gas,
        )
        return await self.simulate_then_send(
            TxOverrides(gas_limit=estimate.estimated_gas, fee=fee, nonce=nonce),
            TxOverrides(fee=fee, nonce=nonce),
        )

    async def send_with_gas_price(self, gas_price: int = DEFAULT_LEGACY_GAS_PRICE) -> TxResult:
        """Submit a legacy transaction with a fixed gas price."""
        return await self.simulate_then_send(TxOverrides(fee=LegacyFee(gas_price=gas_price)))

    async def send_secure(self) -> TxResult:
        """Submit with margin-adjusted fees and gas limit."""
        try:
            fees = await self.calculate_margin_fee()
        except Exception as exc:
            logger.error(f"Estimation failed: {describe_error(exc)}")
            return TxResult.failure(exc)
        return await self.simulate_then_send(_margin_overrides(fees))

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    async def check_balance(self, address: Optional[str] = None) -> int:
        balance = await self.public.get_balance(address or self.account.address)
        logger.info(f"balance {balance}")
        return balance

    async def get_current_nonce(self, address: Optional[str] = None) -> int:
        address = address or self.account.address
        count = await self.public.get_transaction_count(address)
        logger.info(f"Current nonce for address {address}: {count}")
        return count

    async def get_tx_info(self, tx_hash: str) -> dict[str, Any]:
        tx = await self.public.get_transaction(tx_hash)
        logger.info(f"txData: {tx}")
        logger.info(self.chain.tx_url(tx_hash))
        return tx

    async def check_balance_before_send(
        self,
        threshold: int = LOW_BALANCE_THRESHOLD,
        send: bool = False,
    ) -> BalanceCheck:
        """
        Compare the balance with *threshold* before and after the worst-case fee.

        The worst-case fee is ``maxFeePerGas * gasLimit`` of the margin-adjusted
        set. With ``send=True`` the secure transaction is submitted only when
        the balance stays at or above the threshold afterwards.
        """
        fees = await self.calculate_margin_fee()
        tx_fee = fees.max_fee_per_gas * fees.gas_limit
        balance = await self.check_balance()

        check = BalanceCheck(balance=balance, tx_fee=tx_fee, threshold=threshold, fees=fees)
        if check.below_threshold:
            logger.warning("Balance is already below the threshold")
        if check.below_threshold_after_tx:
            logger.warning("Balance will be below the threshold after the tx")

        if send and not check.below_threshold_after_tx:
            sent = await self.simulate_then_send(_margin_overrides(fees))
            check = BalanceCheck(
                balance=balance, tx_fee=tx_fee, threshold=threshold, fees=fees, sent=sent
            )
        return check


def _margin_overrides(fees: MarginFees) -> TxOverrides:
    return TxOverrides(
        gas_limit=fees.gas_limit,
        fee=DynamicFee(
            max_fee_per_gas=fees.max_fee_per_gas,
            max_priority_fee_per_gas=fees.max_priority_fee_per_gas,
        ),
    )
