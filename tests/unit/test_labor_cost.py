"""Unit tests for the labor cost calculator."""

from decimal import Decimal
from types import SimpleNamespace

from groundwork.services.labor_cost import LaborCost, LaborCostCalculator


class TestCalculate:
    def test_overtime_and_doubletime_multipliers(self):
        """OT is paid at 1.5x and DT at 2x the base rate, burden on top."""
        cost = LaborCostCalculator(burden_rate=Decimal("0.35")).calculate(
            Decimal("8"), Decimal("2"), Decimal("1"), Decimal("40")
        )
        assert cost.regular_cost == Decimal("320.00")
        assert cost.overtime_cost == Decimal("120.00")
        assert cost.doubletime_cost == Decimal("80.00")
        assert cost.base_wage_cost == Decimal("520.00")
        assert cost.burden_cost == Decimal("182.00")
        assert cost.total_cost == Decimal("702.00")
        assert cost.total_hours == Decimal("11")

    def test_zero_rate_costs_nothing(self):
        cost = LaborCostCalculator(burden_rate=0.35).calculate(Decimal("8"), 0, 0, Decimal("0"))
        assert cost.total_cost == Decimal("0")
        assert cost.regular_hours == Decimal("8")

    def test_burden_rate_defaults_to_settings(self):
        assert LaborCostCalculator().burden_rate == Decimal("0.35")

    def test_costs_round_to_cents(self):
        cost = LaborCostCalculator(burden_rate=0).calculate(Decimal("7.5"), 0, 0, Decimal("33.33"))
        assert cost.regular_cost == Decimal("249.98")


class TestTotals:
    def test_total_is_sum_of_rounded_entries(self):
        """Report totals equal the sum of their per-entry rows."""
        calc = LaborCostCalculator(burden_rate=Decimal("0.35"))
        entries = [
            SimpleNamespace(regular_hours=Decimal("8"), overtime_hours=Decimal("0"), doubletime_hours=Decimal("0")),
            SimpleNamespace(regular_hours=Decimal("4"), overtime_hours=Decimal("1.5"), doubletime_hours=Decimal("0")),
        ]
        pairs = [(entries[0], Decimal("40")), (entries[1], Decimal("25.55"))]
        total = calc.total(pairs)
        per_entry = [calc.for_entry(e, r) for e, r in pairs]
        assert total.total_cost == sum(c.total_cost for c in per_entry)
        assert total.total_hours == Decimal("13.5")

    def test_empty_total(self):
        assert LaborCostCalculator().total([]) == LaborCost()
