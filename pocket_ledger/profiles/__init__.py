"""Profile registry package."""

from pocket_ledger.profiles.registry import ProfileRegistry

__all__ = ["ProfileRegistry"]
