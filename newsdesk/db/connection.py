"""Shared psycopg connection pools."""

import os
import threading
from contextlib import contextmanager
from typing import Any, Dict, Iterator

import psycopg
from psycopg.conninfo import make_conninfo
from psycopg.rows import dict_row
from psycopg_pool import ConnectionPool

_pools: Dict[str, ConnectionPool] = {}
_pools_lock = threading.Lock()


def build_conninfo(db_config: Dict[str, Any]) -> str:
    """libpq conninfo for Config.get_db_config(); password_env is read if no password is set."""
    password = db_config.get("password")
    if not password and db_config.get("password_env"):
        password = os.environ.get(db_config["password_env"])

    return make_conninfo(
        host=db_config.get("host") or "localhost",
        port=db_config.get("port") or 5432,
        dbname=db_config.get("database") or "newsdesk",
        user=db_config.get("user") or "newsdesk_user",
        password=password or None,
    )


def get_connection_pool(db_config: Dict[str, Any]) -> ConnectionPool:
    """Pool for this database, opened on first use and reused afterwards."""
    conninfo = build_conninfo(db_config)
    with _pools_lock:
        pool = _pools.get(conninfo)
        if pool is None:
            pool = ConnectionPool(
                conninfo,
                min_size=db_config.get("pool_min_size") or 1,
                max_size=db_config.get("pool_max_size") or 10,
                kwargs={"row_factory": dict_row},
                open=True,
            )
            _pools[conninfo] = pool
    return pool


def close_connection_pool() -> None:
    """Close every pool opened by this process."""
    with _pools_lock:
        pools = list(_pools.values())
        _pools.clear()
    for pool in pools:
        pool.close()


@contextmanager
def get_connection(db_config: Dict[str, Any]) -> Iterator[psycopg.Connection]:
    """Borrow a connection; the pool commits on clean exit and rolls back on error."""
    with get_connection_pool(db_config).connection() as conn:
        yield conn
