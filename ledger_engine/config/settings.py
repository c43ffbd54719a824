"""
Configuration Management for the Ledger Engine

Uses pydantic-settings for type-safe configuration from environment variables.

DESIGN DECISION: All configuration is centralized here.
Category lists, the budget warning threshold and storage keys are
data, not code, so the surrounding app can change them without
touching the engine.
"""

from decimal import Decimal
from functools import lru_cache
from pathlib import Path
from typing import Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


# The fixed expense items offered by the entry form.
DEFAULT_BUDGET_CATEGORIES = [
    "نفقات ذات طابع خاص",
    "تنقلات داخلية",
    "قرطاسية",
    "اتصالات",
    "مياه",
    "كهرباء",
    "أجور عمال",
    "إيجارات",
    "الورشات الثقافية",
    "صرف المواقع اليومية والمواجهة",
    "مواجهة الاعتماد الشهري",
    "صيانة",
]

GENERAL_CATEGORY = "عام"
MAINTENANCE_CATEGORY = "صيانة"


class LedgerSettings(BaseSettings):
    """Ledger and budget rules."""

    model_config = SettingsConfigDict(
        env_prefix="LEDGER_",
        extra="ignore"
    )

    general_category: str = Field(
        default=GENERAL_CATEGORY,
        min_length=1,
        description="Sentinel category for uncategorized entries (never budget-compared)"
    )
    budget_categories: list[str] = Field(
        default_factory=lambda: list(DEFAULT_BUDGET_CATEGORIES),
        description="Categories that carry an approved budget limit"
    )
    rollup_excluded_categories: list[str] = Field(
        default_factory=lambda: [MAINTENANCE_CATEGORY],
        description="Categories evaluated individually but left out of the grand total"
    )
    approaching_threshold: Decimal = Field(
        default=Decimal("0.8"),
        gt=0,
        le=1,
        description="Usage ratio at which a budget is reported as approaching"
    )
    opening_balance_note: str = Field(
        default="رصيد افتتاحي",
        description="Note recorded on synthetic opening-balance entries"
    )
    minor_units_per_major: int = Field(
        default=100,
        ge=1,
        description="Minor currency units per major unit (100 = two decimal places)"
    )

    @field_validator('budget_categories', 'rollup_excluded_categories')
    @classmethod
    def strip_category_names(cls, v: list[str]) -> list[str]:
        """Drop blanks and duplicates, keep order."""
        seen = []
        for name in v:
            name = name.strip()
            if name and name not in seen:
                seen.append(name)
        return seen

    @property
    def reportable_categories(self) -> list[str]:
        """Budget categories minus the general sentinel."""
        return [c for c in self.budget_categories if c != self.general_category]


class StorageSettings(BaseSettings):
    """Persistence boundary configuration."""

    model_config = SettingsConfigDict(
        env_prefix="LEDGER_STORAGE_",
        extra="ignore"
    )

    key_prefix: str = Field(
        default="sa_",
        description="Prefix for every key written to the key-value store"
    )
    data_dir: Optional[Path] = Field(
        default=None,
        description="Directory for the JSON file store (in-memory when unset)"
    )


class AppSettings(BaseSettings):
    """
    Main application settings.

    Loads configuration from environment variables and .env file.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )

    log_level: str = Field(
        default="INFO",
        pattern="^(DEBUG|INFO|WARNING|ERROR|CRITICAL)$",
        description="Minimum level for engine logs"
    )


class Settings(BaseSettings):
    """
    Root settings container.

    Aggregates all sub-settings for easy access.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )

    @property
    def ledger(self) -> LedgerSettings:
        return LedgerSettings()

    @property
    def storage(self) -> StorageSettings:
        return StorageSettings()

    @property
    def app(self) -> AppSettings:
        return AppSettings()


@lru_cache()
def get_settings() -> Settings:
    """
    Get application settings (cached).

    Call get_settings.cache_clear() to reload if needed.
    """
    return Settings()


def validate_all_settings() -> dict[str, bool]:
    """
    Validate all settings are properly configured.

    Returns a dict of {setting_name: is_valid}.
    Useful for startup checks.
    """
    results = {}
    settings = get_settings()

    for name in ("ledger", "storage", "app"):
        try:
            getattr(settings, name)
            results[name] = True
        except ValueError as e:
            results[name] = False
            results[f"{name}_error"] = str(e)

    return results
