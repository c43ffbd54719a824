"""Entry validation package."""

from ledger_engine.validation.validator import EntryValidator, validate_entry

__all__ = ["EntryValidator", "validate_entry"]
