"""
Employee store - the single database handle used by routes and validators.

The store is constructed explicitly (usually by create_app) and injected into
the Flask app, instead of living as a module-level connection:

    store = Store(Config.DATABASE_URL, engine_options=Config.SQLALCHEMY_ENGINE_OPTIONS)
    store.open()
    ...
    rows = await store.execute("SELECT * FROM employee_data WHERE employee_id = ?", [employee_id])
    ...
    store.close()

Query style:
    Queries use positional `?` placeholders with an ordered argument list.
    They are rewritten to SQLAlchemy bind params (:p0, :p1, ...) so the same
    text runs on PostgreSQL and SQLite. Literal `?` characters inside SQL
    strings are not supported.

Warmup with retry:
    open() checks connectivity with exponential backoff (0.75s, 1.5s, 3s, 6s)
    and fails with the last OperationalError after 4 attempts.
"""

from __future__ import annotations

import asyncio
import logging
import re
import time
from typing import Any, Dict, List, Optional, Sequence, Tuple

from flask import current_app
from sqlalchemy import create_engine, text
from sqlalchemy.engine import Engine
from sqlalchemy.exc import OperationalError, SQLAlchemyError
from sqlalchemy.pool import StaticPool

log = logging.getLogger(__name__)

POSITIONAL_PARAM_PATTERN = re.compile(r"\?")

STORE_EXTENSION_KEY = "store"


class StoreError(Exception):
    """Raised when a query fails inside the store."""

    def __init__(self, message: str, query: str = None):
        super().__init__(message)
        self.query = query


class StoreNotOpenError(StoreError):
    """Raised when the store is used before open() or after close()."""
    pass


def bind_positional(query: str, args: Sequence[Any]) -> Tuple[str, Dict[str, Any]]:
    """
    Rewrite `?` placeholders to numbered bind params.

    Returns:
        (rewritten_sql, params) where params maps p0..pN to args in order

    Raises:
        StoreError: If the placeholder count does not match len(args)
    """
    placeholder_count = len(POSITIONAL_PARAM_PATTERN.findall(query))
    if placeholder_count != len(args):
        raise StoreError(
            f"Query has {placeholder_count} placeholders but {len(args)} args were given",
            query=query,
        )

    counter = iter(range(placeholder_count))
    rewritten = POSITIONAL_PARAM_PATTERN.sub(lambda _match: f":p{next(counter)}", query)
    return rewritten, {f"p{i}": value for i, value in enumerate(args)}


class Store:
    """
    Parameterized-query executor over a SQLAlchemy engine.

    Lifecycle: open() at startup, close() at shutdown. execute() is async and
    runs the blocking DB call in a worker thread so that other in-flight
    requests are not held up by a slow query.
    """

    def __init__(self, database_url: str, engine_options: Optional[Dict[str, Any]] = None):
        self.database_url = database_url
        self.engine_options = dict(engine_options or {})
        self._engine: Optional[Engine] = None

    @property
    def is_open(self) -> bool:
        return self._engine is not None

    def _create_engine(self) -> Engine:
        if self.database_url.startswith("sqlite"):
            # One shared connection so in-memory databases survive across threads
            return create_engine(
                self.database_url,
                poolclass=StaticPool,
                connect_args={"check_same_thread": False},
            )
        return create_engine(self.database_url, **self.engine_options)

    def open(self, attempts: int = 4, base_sleep: float = 0.75) -> "Store":
        """
        Create the engine and verify connectivity.

        Raises:
            OperationalError: If all warmup attempts fail
        """
        if self._engine is not None:
            return self

        engine = self._create_engine()
        last_error: Optional[Exception] = None

        for i in range(attempts):
            try:
                with engine.connect() as conn:
                    conn.execute(text("SELECT 1"))
                log.info("store_open_success attempt=%d", i + 1)
                self._engine = engine
                return self
            except OperationalError as e:
                last_error = e
                sleep_s = base_sleep * (2 ** i)
                log.warning(
                    "store_open_retry attempt=%d/%d sleep_s=%.2f err=%s",
                    i + 1, attempts, sleep_s, str(e)[:100]
                )
                time.sleep(sleep_s)

        engine.dispose()
        log.error("store_open_failed after %d attempts", attempts)
        raise last_error  # type: ignore[misc]

    def close(self) -> None:
        """Dispose the engine. Safe to call more than once."""
        if self._engine is None:
            return
        self._engine.dispose()
        self._engine = None
        log.info("store_closed")

    def _execute_sync(self, query: str, args: Sequence[Any]) -> List[Dict[str, Any]]:
        if self._engine is None:
            raise StoreNotOpenError("Store is not open. Call open() first.", query=query)

        sql, params = bind_positional(query, args)
        try:
            with self._engine.begin() as conn:
                result = conn.execute(text(sql), params)
                if not result.returns_rows:
                    return []
                return [dict(row) for row in result.mappings().all()]
        except (SQLAlchemyError, OverflowError, TypeError, ValueError) as e:
            # Driver conversion errors (e.g. ints past 64 bits) are not wrapped by SQLAlchemy
            raise StoreError(f"Query failed: {e}", query=query) from e

    async def execute(self, query: str, args: Sequence[Any] = ()) -> List[Dict[str, Any]]:
        """
        Execute a parameterized query.

        Args:
            query: SQL text with positional `?` placeholders
            args: Ordered argument list, one per placeholder

        Returns:
            Result rows as dicts (empty list for statements returning no rows)

        Raises:
            StoreError: On any database failure
        """
        return await asyncio.to_thread(self._execute_sync, query, list(args))


def init_store(app, store: Store) -> Store:
    """Attach an opened store to the Flask app."""
    app.extensions[STORE_EXTENSION_KEY] = store
    return store


def get_store() -> Store:
    """Get the store injected into the current Flask app."""
    store = current_app.extensions.get(STORE_EXTENSION_KEY)
    if store is None:
        raise StoreNotOpenError("No store registered on this app")
    return store
