"""Backend factory functions for creating ledger backend instances."""

import os
from pathlib import Path
from typing import Optional

from ledgerview.backend.base import LedgerBackend
from ledgerview.backend.http_client import LedgerApiClient
from ledgerview.backend.sqlalchemy_backend import SQLAlchemyLedger


def create_sqlite_ledger(database_path: Optional[str] = None) -> SQLAlchemyLedger:
    """Create a SQLite-backed ledger.

    Args:
        database_path: Path to SQLite database file. If None, checks LEDGERVIEW_DB_PATH
            environment variable, then defaults to ~/.ledgerview/ledgerview.db

    Returns:
        SQLAlchemyLedger instance configured for SQLite
    """
    if database_path is None:
        # Check environment variable
        database_path = os.environ.get("LEDGERVIEW_DB_PATH")

    if database_path is None:
        # Default to ~/.ledgerview/ledgerview.db
        home = Path.home()
        db_dir = home / ".ledgerview"
        db_dir.mkdir(exist_ok=True)
        database_path = str(db_dir / "ledgerview.db")

    database_url = f"sqlite:///{database_path}"
    return SQLAlchemyLedger(database_url)


def create_api_client(
    api_url: Optional[str] = None, api_token: Optional[str] = None
) -> LedgerApiClient:
    """Create a REST client for the ledger service.

    Args:
        api_url: Service base URL. If None, uses LEDGERVIEW_API_URL
        api_token: Bearer token. If None, uses LEDGERVIEW_API_TOKEN

    Raises:
        ValueError: If no URL is configured
    """
    api_url = api_url or os.environ.get("LEDGERVIEW_API_URL")
    if not api_url:
        raise ValueError("No ledger service URL configured (set LEDGERVIEW_API_URL)")
    api_token = api_token or os.environ.get("LEDGERVIEW_API_TOKEN")
    return LedgerApiClient(base_url=api_url, api_token=api_token)


def create_backend(
    database_path: Optional[str] = None,
    api_url: Optional[str] = None,
    api_token: Optional[str] = None,
) -> LedgerBackend:
    """Create the REST client when a service URL is given, else the SQLite ledger."""
    if api_url:
        return create_api_client(api_url=api_url, api_token=api_token)
    return create_sqlite_ledger(database_path=database_path)
