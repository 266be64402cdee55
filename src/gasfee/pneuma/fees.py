"""
Fee margin policy.

Raw network estimates are scaled by a fixed 20 % safety margin before
submission. All arithmetic stays in integer wei: the 1.2 multiplier is
expressed as 120 / 100 with truncating division.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from decimal import Decimal

logger = logging.getLogger("gasfee.pneuma.fees")

PRECISION = 100
SAFETY_MARGIN = 120  # 1.2 * PRECISION

GWEI = 10**9
ETHER = 10**18

# Floor for the priority fee (tip)
DEFAULT_MAX_PRIORITY_FEE = 2 * GWEI


@dataclass(frozen=True)
class FeeEstimate:
    """Gas units and EIP-1559 fee fields as estimated by the node."""

    estimated_gas: int
    max_fee_per_gas: int
    max_priority_fee_per_gas: int


@dataclass(frozen=True)
class MarginFees:
    """Submission-ready values derived from a FeeEstimate."""

    max_fee_per_gas: int
    max_priority_fee_per_gas: int
    gas_limit: int


def apply_margin(value: int) -> int:
    """Scale *value* by the safety margin, truncating."""
    if value < 0:
        raise ValueError(f"Fee values must be non-negative, got {value}")
    return value * SAFETY_MARGIN // PRECISION


def calculate_margin_fees(estimate: FeeEstimate) -> MarginFees:
    """
    Compute safe fee / gas-limit values from a raw estimate.

    The priority fee is the larger of the inflated estimate and the
    2 gwei floor. The max fee is the larger of the inflated estimate and
    ``priority + 1``, so it always exceeds the tip. The gas limit is the
    inflated estimate.
    """
    priority_margin = apply_margin(estimate.max_priority_fee_per_gas)
    logger.info(f"Estimated maxPriorityFeePerGas: {estimate.max_priority_fee_per_gas}")
    logger.info(f"Safety margin 20 %:             {priority_margin}")
    logger.info(f"Default maxPriorityFeePerGas:   {DEFAULT_MAX_PRIORITY_FEE}")

    max_priority_fee = max(priority_margin, DEFAULT_MAX_PRIORITY_FEE)
    logger.info(f"MaxPriorityFee selected:        {max_priority_fee}")

    max_fee_default = max_priority_fee + 1
    max_fee_margin = apply_margin(estimate.max_fee_per_gas)
    logger.info(f"Estimated maxFeePerGas: {estimate.max_fee_per_gas}")
    logger.info(f"Safety margin 20 %:     {max_fee_margin}")
    logger.info(f"Default maxFee:         {max_fee_default}")

    max_fee = max(max_fee_margin, max_fee_default)
    logger.info(f"MaxFee selected:        {max_fee}")

    gas_limit = apply_margin(estimate.estimated_gas)
    logger.info(f"Estimated gas:      {estimate.estimated_gas}")
    logger.info(f"Safety margin 20 %: {gas_limit}")

    return MarginFees(
        max_fee_per_gas=max_fee,
        max_priority_fee_per_gas=max_priority_fee,
        gas_limit=gas_limit,
    )


# ---------------------------------------------------------------------------
# Unit helpers
# ---------------------------------------------------------------------------

def parse_gwei(amount: str | int) -> int:
    """Convert a gwei amount ("2", "1.5") to wei."""
    return int(Decimal(str(amount)) * GWEI)


def parse_ether(amount: str | int) -> int:
    """Convert an ether amount ("0.3") to wei."""
    return int(Decimal(str(amount)) * ETHER)


def format_ether(wei: int) -> str:
    """Render wei as a plain decimal ether string."""
    text = format(Decimal(wei) / ETHER, "f")
    if "." in text:
        text = text.rstrip("0").rstrip(".")
    return text
