"""Labor cost math: wages by hour type plus burden (payroll taxes, insurance, benefits).

Pure Python, no database access. Costs are rounded to cents per entry,
then summed, so report totals always equal the sum of their rows.
"""

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal

from groundwork.core.config import settings
from groundwork.core.money import ZERO as _ZERO, to_cents

OVERTIME_MULTIPLIER = Decimal("1.5")
DOUBLETIME_MULTIPLIER = Decimal("2.0")


@dataclass(frozen=True)
class LaborCost:
    regular_hours: Decimal = _ZERO
    overtime_hours: Decimal = _ZERO
    doubletime_hours: Decimal = _ZERO
    regular_cost: Decimal = _ZERO
    overtime_cost: Decimal = _ZERO
    doubletime_cost: Decimal = _ZERO
    burden_cost: Decimal = _ZERO

    @property
    def total_hours(self) -> Decimal:
        return self.regular_hours + self.overtime_hours + self.doubletime_hours

    @property
    def base_wage_cost(self) -> Decimal:
        return self.regular_cost + self.overtime_cost + self.doubletime_cost

    @property
    def total_cost(self) -> Decimal:
        return self.base_wage_cost + self.burden_cost

    def __add__(self, other: "LaborCost") -> "LaborCost":
        return LaborCost(
            regular_hours=self.regular_hours + other.regular_hours,
            overtime_hours=self.overtime_hours + other.overtime_hours,
            doubletime_hours=self.doubletime_hours + other.doubletime_hours,
            regular_cost=self.regular_cost + other.regular_cost,
            overtime_cost=self.overtime_cost + other.overtime_cost,
            doubletime_cost=self.doubletime_cost + other.doubletime_cost,
            burden_cost=self.burden_cost + other.burden_cost,
        )


class LaborCostCalculator:
    def __init__(self, burden_rate: Decimal | float | None = None):
        rate = settings.labor_burden_rate if burden_rate is None else burden_rate
        self.burden_rate = Decimal(str(rate))

    def calculate(
        self,
        regular_hours: Decimal,
        overtime_hours: Decimal,
        doubletime_hours: Decimal,
        hourly_rate: Decimal,
    ) -> LaborCost:
        rate = Decimal(hourly_rate or 0)
        regular = Decimal(regular_hours or 0)
        overtime = Decimal(overtime_hours or 0)
        doubletime = Decimal(doubletime_hours or 0)

        regular_cost = to_cents(regular * rate)
        overtime_cost = to_cents(overtime * rate * OVERTIME_MULTIPLIER)
        doubletime_cost = to_cents(doubletime * rate * DOUBLETIME_MULTIPLIER)
        burden = to_cents((regular_cost + overtime_cost + doubletime_cost) * self.burden_rate)
        return LaborCost(
            regular_hours=regular,
            overtime_hours=overtime,
            doubletime_hours=doubletime,
            regular_cost=regular_cost,
            overtime_cost=overtime_cost,
            doubletime_cost=doubletime_cost,
            burden_cost=burden,
        )

    def for_entry(self, entry, hourly_rate: Decimal) -> LaborCost:
        """Cost of one time entry (anything with regular/overtime/doubletime_hours)."""
        return self.calculate(
            entry.regular_hours, entry.overtime_hours, entry.doubletime_hours, hourly_rate
        )

    def total(self, entries_with_rates) -> LaborCost:
        """Sum of per-entry costs for an iterable of (entry, hourly_rate) pairs."""
        result = LaborCost()
        for entry, rate in entries_with_rates:
            result = result + self.for_entry(entry, rate)
        return result
