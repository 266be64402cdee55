"""
Unit tests for the fee margin policy and unit helpers.
"""

from __future__ import annotations

import pytest

from gasfee.pneuma.fees import (
    DEFAULT_MAX_PRIORITY_FEE,
    FeeEstimate,
    MarginFees,
    apply_margin,
    calculate_margin_fees,
    format_ether,
    parse_ether,
    parse_gwei,
)


def _estimate(gas: int = 21000, max_fee: int = 30, priority: int = 2) -> FeeEstimate:
    return FeeEstimate(estimated_gas=gas, max_fee_per_gas=max_fee, max_priority_fee_per_gas=priority)


class TestApplyMargin:
    def test_scales_by_120_percent(self) -> None:
        assert apply_margin(100) == 120
        assert apply_margin(21000) == 25200

    def test_truncates(self) -> None:
        assert apply_margin(1) == 1
        assert apply_margin(4) == 4
        assert apply_margin(5) == 6

    def test_zero(self) -> None:
        assert apply_margin(0) == 0

    def test_negative_rejected(self) -> None:
        with pytest.raises(ValueError):
            apply_margin(-1)


class TestCalculateMarginFees:
    def test_small_estimate_hits_floors(self) -> None:
        fees = calculate_margin_fees(_estimate(21000, 30, 2))
        assert fees == MarginFees(
            max_fee_per_gas=2_000_000_001,
            max_priority_fee_per_gas=2_000_000_000,
            gas_limit=25200,
        )

    def test_zero_priority_uses_default(self) -> None:
        fees = calculate_margin_fees(_estimate(priority=0))
        assert fees.max_priority_fee_per_gas == DEFAULT_MAX_PRIORITY_FEE

    def test_large_priority_scaled(self) -> None:
        fees = calculate_margin_fees(_estimate(priority=10_000_000_000))
        assert fees.max_priority_fee_per_gas == 12_000_000_000

    def test_priority_scaling_is_integer(self) -> None:
        fees = calculate_margin_fees(_estimate(priority=100_000_000_001))
        assert fees.max_priority_fee_per_gas == 120_000_000_001

    def test_max_fee_margin_wins_when_larger(self) -> None:
        fees = calculate_margin_fees(_estimate(max_fee=50 * 10**9, priority=10**9))
        assert fees.max_priority_fee_per_gas == DEFAULT_MAX_PRIORITY_FEE
        assert fees.max_fee_per_gas == 60 * 10**9

    def test_max_fee_follows_large_priority(self) -> None:
        # Fee cap estimate below the inflated tip: cap becomes tip + 1
        fees = calculate_margin_fees(_estimate(max_fee=5 * 10**9, priority=10 * 10**9))
        assert fees.max_fee_per_gas == fees.max_priority_fee_per_gas + 1

    @pytest.mark.parametrize(
        "gas,max_fee,priority",
        [
            (0, 0, 0),
            (1, 1, 1),
            (21000, 30, 2),
            (53_000, 3 * 10**9, 10**9),
            (250_000, 120 * 10**9, 2 * 10**9),
            (10**7, 10**12, 10**12),
            (7, 10**18, 3),
        ],
    )
    def test_output_bounds(self, gas: int, max_fee: int, priority: int) -> None:
        fees = calculate_margin_fees(_estimate(gas, max_fee, priority))
        assert fees.max_priority_fee_per_gas >= DEFAULT_MAX_PRIORITY_FEE
        assert fees.max_priority_fee_per_gas >= priority * 120 // 100
        assert fees.max_fee_per_gas > fees.max_priority_fee_per_gas
        assert fees.max_fee_per_gas >= max_fee * 120 // 100
        assert fees.gas_limit == gas * 120 // 100

    def test_negative_estimate_rejected(self) -> None:
        with pytest.raises(ValueError):
            calculate_margin_fees(_estimate(gas=-1))


class TestUnits:
    def test_parse_gwei(self) -> None:
        assert parse_gwei("2") == 2_000_000_000
        assert parse_gwei("1.5") == 1_500_000_000

    def test_parse_ether(self) -> None:
        assert parse_ether("0.3") == 300_000_000_000_000_000
        assert parse_ether(1) == 10**18

    def test_format_ether(self) -> None:
        assert format_ether(10**18) == "1"
        assert format_ether(3 * 10**17) == "0.3"
        assert format_ether(0) == "0"
        assert format_ether(1) == "0.000000000000000001"
