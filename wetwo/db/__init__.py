"""Local persistence for WeTwo."""

from wetwo.db.store import LocalStore

__all__ = ["LocalStore"]
