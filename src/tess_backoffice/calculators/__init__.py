"""Payroll calculation."""

from tess_backoffice.calculators.period import (
    ALL_TIME_LABEL,
    PeriodSelector,
    ResolvedPeriod,
    month_label,
    resolve_period,
)
from tess_backoffice.calculators.salary import EmployeeReconciliation, SalaryCalculator

__all__ = [
    "ALL_TIME_LABEL",
    "EmployeeReconciliation",
    "PeriodSelector",
    "ResolvedPeriod",
    "SalaryCalculator",
    "month_label",
    "resolve_period",
]
