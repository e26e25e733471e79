"""Ledger backend layer for ledgerview."""

from ledgerview.backend.base import LedgerBackend
from ledgerview.backend.factories import create_api_client, create_backend, create_sqlite_ledger

__all__ = ["LedgerBackend", "create_api_client", "create_backend", "create_sqlite_ledger"]
