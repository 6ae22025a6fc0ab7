from __future__ import annotations

import logging
import os
from collections.abc import Iterator
from contextlib import contextmanager
from typing import Any

import psycopg2

from ..models.config_models import StoreConfig
from .base import CatalogStore, StoreError
from .memory import MemoryCatalogStore
from .postgres import PostgresCatalogStore

"""Catalog Store construction from configuration.

Connection parameters for the postgres backend resolve in this order:
    1. DATABASE_URL / PGDSN environment variables (whole DSN)
    2. the ``dsn`` key of the store config section
    3. PGHOST / PGPORT / PGUSER / PGPASSWORD / PGDATABASE, falling back to the
       individual keys of the store config section
"""

logger = logging.getLogger(__name__)


def connection_params(cfg: StoreConfig) -> dict[str, Any]:
    """Keyword arguments for psycopg2.connect; psycopg2 quotes each value."""
    dsn = os.getenv("DATABASE_URL") or os.getenv("PGDSN") or cfg.dsn
    if dsn:
        return {"dsn": dsn}
    params: dict[str, Any] = {
        "host": os.getenv("PGHOST", cfg.host or "localhost"),
        "port": os.getenv("PGPORT", str(cfg.port) if cfg.port else "5432"),
        "user": os.getenv("PGUSER", cfg.user or "postgres"),
        "dbname": os.getenv("PGDATABASE", cfg.database or "postgres"),
    }
    password = os.getenv("PGPASSWORD", cfg.password or "")
    if password:
        params["password"] = password
    return params


def open_store(cfg: StoreConfig) -> CatalogStore:
    """Create the configured store. The caller owns closing it."""
    if cfg.backend == "memory":
        logger.debug("using in-memory catalog store")
        return MemoryCatalogStore()
    if cfg.backend == "postgres":
        try:
            conn = psycopg2.connect(**connection_params(cfg))
        except psycopg2.Error as e:
            raise StoreError(f"could not connect to catalog database: {e}") from e
        conn.autocommit = False
        store = PostgresCatalogStore(conn, table=cfg.table)
        store.ensure_schema()
        return store
    raise StoreError(f"unknown store backend: {cfg.backend}")


@contextmanager
def store_session(cfg: StoreConfig) -> Iterator[CatalogStore]:
    store = open_store(cfg)
    try:
        yield store
    finally:
        store.close()
