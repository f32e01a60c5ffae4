"""Domain layer for kontor."""

# Services import the database layer, which imports domain.entities; load them lazily
_SERVICES = {
    "ChartOfAccountsService": "kontor.domain.chart_of_accounts",
    "LedgerService": "kontor.domain.ledger",
    "TrialBalanceService": "kontor.domain.trial_balance",
}

__all__ = list(_SERVICES)


def __getattr__(name):
    if name in _SERVICES:
        from importlib import import_module

        return getattr(import_module(_SERVICES[name]), name)
    raise AttributeError(f"module '{__name__}' has no attribute '{name}'")
