"""Storefront domain — Catalogue, Inventory, Ordering and Notifications elements.

A single Protean domain holds every element so that placing an order and
taking its stock out of the ledger commit in the same Unit of Work. Commands
and events are processed synchronously: the HTTP layer waits for the
handler's result, and notification handlers run right after the commit.

SQLite serialises writers with ``BEGIN IMMEDIATE`` so the conditional stock
UPDATEs see committed rows; PostgreSQL gets the same guarantee from its row
locks under READ COMMITTED.
"""

import sqlite3

import structlog
from protean.domain import Domain
from sqlalchemy import event
from sqlalchemy.engine import Engine

from shared.config import Settings, get_settings

logger = structlog.get_logger(__name__)


def database_config(settings: Settings) -> dict:
    url = settings.database_url
    if url.startswith("sqlite"):
        return {
            "provider": "sqlite",
            "database_uri": url,
            "connect_args": {"check_same_thread": False, "timeout": 30},
            "echo": settings.database_echo,
        }
    return {
        "provider": "postgresql",
        "database_uri": url,
        "pool_pre_ping": True,
        "echo": settings.database_echo,
    }


def domain_config(settings: Settings) -> dict:
    return {
        "env": settings.env,
        "databases": {"default": database_config(settings)},
        "command_processing": "sync",
        "event_processing": "sync",
    }


@event.listens_for(Engine, "connect")
def _sqlite_manual_transactions(dbapi_connection, connection_record):
    # pysqlite's own BEGIN handling would defer the write lock
    if isinstance(dbapi_connection, sqlite3.Connection):
        dbapi_connection.isolation_level = None


@event.listens_for(Engine, "begin")
def _sqlite_begin_immediate(conn):
    if conn.dialect.name == "sqlite":
        conn.exec_driver_sql("BEGIN IMMEDIATE")


storefront = Domain(name="storefront", config=domain_config(get_settings()))
