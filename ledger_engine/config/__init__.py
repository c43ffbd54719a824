"""Configuration package."""

from ledger_engine.config.settings import (
    DEFAULT_BUDGET_CATEGORIES,
    GENERAL_CATEGORY,
    MAINTENANCE_CATEGORY,
    AppSettings,
    LedgerSettings,
    Settings,
    StorageSettings,
    get_settings,
    validate_all_settings,
)

__all__ = [
    "DEFAULT_BUDGET_CATEGORIES",
    "GENERAL_CATEGORY",
    "MAINTENANCE_CATEGORY",
    "AppSettings",
    "LedgerSettings",
    "Settings",
    "StorageSettings",
    "get_settings",
    "validate_all_settings",
]
