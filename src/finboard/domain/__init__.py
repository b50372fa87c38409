"""Domain layer for finboard application."""

from importlib import import_module

_SERVICES = {
    "AccountService": "finboard.domain.account",
    "TransactionService": "finboard.domain.transaction",
    "BudgetService": "finboard.domain.budget",
    "BillService": "finboard.domain.bill",
    "LoanService": "finboard.domain.loan",
    "NetWorthService": "finboard.domain.net_worth",
    "ReportService": "finboard.domain.report",
}

__all__ = list(_SERVICES)


# Services import the database layer, which imports domain entities; load
# them on first access so either package can be imported first.
def __getattr__(name):
    if name in _SERVICES:
        return getattr(import_module(_SERVICES[name]), name)
    raise AttributeError(f"module '{__name__}' has no attribute '{name}'")
