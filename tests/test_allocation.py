"""
test_allocation.py — Test suite per allocate() / allocate_by_ratios()

L'invariante fondamentale è verificato sia su casi fissi sia con
Hypothesis: la somma delle parti è sempre esattamente l'importo originale.
"""

from decimal import Decimal
from fractions import Fraction

import pytest
from hypothesis import HealthCheck, given, settings
from hypothesis import strategies as st

from moneypattern import (
    EUR,
    JPY,
    MAX_ALLOCATION_PARTS,
    USD,
    DivisionByZeroError,
    InvalidAmountError,
    Money,
    allocate,
    allocate_by_ratios,
    lookup_by_code,
)


def _total(parts, currency):
    return sum(parts, Money.zero(currency))


# ==============================================================================
# UNIT TESTS: Equal shares
# ==============================================================================

class TestAllocateEqually:

    def test_allocate_to_recipients(self):
        parts = Money("0.05").allocate(2)
        assert parts[0].amount == Decimal("0.03")
        assert parts[1].amount == Decimal("0.02")

    def test_parts_keep_currency(self):
        parts = Money("0.05", EUR).allocate(2)
        assert all(p.currency is EUR for p in parts)

    def test_exact_division(self):
        parts = Money(120, EUR).allocate(12)
        assert all(p == Money(10, EUR) for p in parts)

    def test_budget_2026_by_12(self):
        budget = Money(2026, EUR)
        parts = budget.allocate(12)

        assert len(parts) == 12
        assert _total(parts, EUR) == budget

    def test_remainder_goes_to_first_recipients(self):
        parts = Money("1.00").allocate(3)
        assert [p.amount_in_subunits() for p in parts] == [34, 33, 33]

    def test_allocate_one(self):
        m = Money("4.23")
        assert m.allocate(1) == [m]

    def test_more_parts_than_subunits(self):
        m = Money("0.05", EUR)
        parts = m.allocate(10)

        assert len([p for p in parts if not p.is_zero()]) == 5
        assert _total(parts, EUR) == m

    def test_allocate_zero_amount(self):
        parts = Money(currency=EUR).allocate(5)
        assert all(p.is_zero() for p in parts)

    def test_negative_amount_is_mirrored(self):
        parts = Money("-0.05").allocate(2)
        assert parts == [Money("-0.03"), Money("-0.02")]

    def test_zero_exponent_currency(self):
        parts = Money(100, JPY).allocate(3)
        assert parts == [Money(34, JPY), Money(33, JPY), Money(33, JPY)]

    def test_three_decimals_currency(self):
        tnd = lookup_by_code("TND")
        parts = Money("1.000", tnd).allocate(3)
        assert parts == [Money("0.334", tnd), Money("0.333", tnd), Money("0.333", tnd)]

    def test_parts_are_on_the_subunit_grid(self):
        parts = Money(1).allocate([70, 30])
        assert [str(p.amount) for p in parts] == ["0.70", "0.30"]

    def test_module_function(self):
        assert allocate(Money("0.05"), 2) == Money("0.05").allocate(2)

    def test_amount_beyond_default_decimal_precision(self):
        m = Money("123456789012345678901234567.89")
        parts = m.allocate(3)
        assert _total(parts, USD) == m
        assert parts[0] == Money("41152263004115226300411522.63")

    def test_amount_too_large_for_subunits_raises(self):
        with pytest.raises(InvalidAmountError):
            Money("1E+200").allocate(2)

    def test_receiver_is_not_modified(self):
        m = Money("0.05")
        m.allocate(2)
        assert m == Money("0.05")


class TestAllocateEquallyErrors:

    def test_zero_recipients_raises_division_by_zero(self):
        with pytest.raises(DivisionByZeroError):
            Money("0.05").allocate(0)

    def test_division_by_zero_is_zero_division_error(self):
        with pytest.raises(ZeroDivisionError):
            Money("0.05").allocate(0)

    def test_negative_recipients_raises(self):
        with pytest.raises(ValueError):
            Money(1).allocate(-1)

    def test_too_many_recipients_raises(self):
        with pytest.raises(ValueError):
            Money(1).allocate(MAX_ALLOCATION_PARTS + 1)

    def test_non_int_recipients_raises(self):
        with pytest.raises(TypeError):
            allocate(Money(1), 2.0)
        with pytest.raises(TypeError):
            allocate(Money(1), True)


# ==============================================================================
# UNIT TESTS: Ratios
# ==============================================================================

class TestAllocateByRatios:

    def test_allocate_using_ratios(self):
        parts = Money(1).allocate([70, 30])
        assert parts[0].amount == Decimal("0.70")
        assert parts[1].amount == Decimal("0.30")

    def test_equal_ratios_match_equal_shares(self):
        m = Money("1.00", EUR)
        assert m.allocate([1, 1, 1]) == m.allocate(3)

    def test_decimal_and_float_ratios(self):
        m = Money(1000, EUR)
        parts = m.allocate([33.33, Decimal("33.33"), "33.34"])
        assert _total(parts, EUR) == m

    def test_zero_ratio_gets_nothing(self):
        parts = Money("0.05").allocate([0, 1, 1])
        assert parts == [Money(0), Money("0.03"), Money("0.02")]

    def test_remainder_in_index_order(self):
        # quote ideali 0.333.., 0.666..: floor 33 e 66, il resto va al primo
        parts = Money("1.00").allocate([1, 2])
        assert parts == [Money("0.34"), Money("0.66")]

    def test_whole_ideal_share_can_take_the_leftover(self):
        # ideali 3, 1.5, 1.5: floor 3, 1, 1 e il resto va al primo
        parts = Money.of_subunits(6).allocate([2, 1, 1])
        assert [p.amount_in_subunits() for p in parts] == [4, 1, 1]

    def test_accepts_generators(self):
        parts = allocate_by_ratios(Money(1), (r for r in [1, 1]))
        assert parts == [Money("0.5"), Money("0.5")]


class TestAllocateByRatiosErrors:

    def test_empty_ratios_raises_division_by_zero(self):
        with pytest.raises(DivisionByZeroError):
            Money(1).allocate([])

    def test_all_zero_ratios_raise_division_by_zero(self):
        with pytest.raises(DivisionByZeroError):
            Money(1).allocate([0, 0])

    def test_negative_ratio_raises(self):
        with pytest.raises(ValueError):
            Money(1).allocate([70, -30])

    def test_non_numeric_ratio_raises(self):
        with pytest.raises(ValueError):
            Money(1).allocate(["abc", 1])
        with pytest.raises(TypeError):
            Money(1).allocate([None, 1])

    def test_string_is_not_a_ratio_sequence(self):
        with pytest.raises(TypeError):
            allocate_by_ratios(Money(1), "7030")


# ==============================================================================
# PROPERTY-BASED TESTS (Hypothesis)
# ==============================================================================

subunits = st.integers(min_value=-1_000_000_00, max_value=1_000_000_00)
ratios = st.lists(st.integers(min_value=0, max_value=1000), min_size=1, max_size=20).filter(any)


class TestAllocationProperties:

    @given(total=subunits, n=st.integers(min_value=1, max_value=100))
    @settings(max_examples=1000, suppress_health_check=[HealthCheck.too_slow])
    def test_sum_equals_original(self, total: int, n: int):
        money = Money.of_subunits(total, EUR)
        parts = money.allocate(n)
        assert _total(parts, EUR) == money

    @given(total=subunits, n=st.integers(min_value=1, max_value=100))
    @settings(max_examples=500)
    def test_returns_n_parts_in_same_currency(self, total: int, n: int):
        parts = Money.of_subunits(total, USD).allocate(n)
        assert len(parts) == n
        assert all(p.currency is USD for p in parts)

    @given(total=subunits, n=st.integers(min_value=1, max_value=100))
    @settings(max_examples=500)
    def test_equal_parts_differ_by_at_most_one_subunit(self, total: int, n: int):
        values = [p.amount_in_subunits() for p in Money.of_subunits(total).allocate(n)]
        assert max(values) - min(values) <= 1

    @given(total=st.integers(min_value=0, max_value=1_000_000_00), n=st.integers(min_value=1, max_value=100))
    @settings(max_examples=500)
    def test_earlier_recipients_never_get_less(self, total: int, n: int):
        values = [p.amount_in_subunits() for p in Money.of_subunits(total).allocate(n)]
        assert values == sorted(values, reverse=True)

    @given(total=subunits, weights=ratios)
    @settings(max_examples=1000, suppress_health_check=[HealthCheck.too_slow])
    def test_ratio_sum_equals_original(self, total: int, weights: list[int]):
        money = Money.of_subunits(total, EUR)
        parts = money.allocate(weights)
        assert len(parts) == len(weights)
        assert _total(parts, EUR) == money

    @given(total=subunits, weights=ratios)
    @settings(max_examples=1000)
    def test_ratio_parts_at_most_one_subunit_from_ideal(self, total: int, weights: list[int]):
        parts = Money.of_subunits(total).allocate(weights)
        weight_sum = sum(weights)
        for part, w in zip(parts, weights):
            ideal = Fraction(total * w, weight_sum)
            assert abs(part.amount_in_subunits() - ideal) <= 1

    @given(total=subunits, n=st.integers(min_value=1, max_value=50))
    @settings(max_examples=300)
    def test_negative_amount_mirrors_positive(self, total: int, n: int):
        money = Money.of_subunits(total)
        assert (-money).allocate(n) == [-p for p in money.allocate(n)]
