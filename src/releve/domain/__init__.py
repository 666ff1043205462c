"""Domain layer for releve application."""

_SERVICES = {
    "TransactionService": "releve.domain.transaction",
    "CategoryService": "releve.domain.category",
    "CategoryRegistry": "releve.domain.category",
    "CSVImportService": "releve.domain.csv_import",
    "RuleService": "releve.domain.rules",
}

__all__ = list(_SERVICES)


# Services import the database layer, which imports domain entities, so they
# are loaded lazily to avoid circular dependencies
def __getattr__(name):
    if name in _SERVICES:
        import importlib

        return getattr(importlib.import_module(_SERVICES[name]), name)
    raise AttributeError(f"module '{__name__}' has no attribute '{name}'")
