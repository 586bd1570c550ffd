"""Minimal connection manager for database operations."""

import sqlite3
from contextlib import closing, contextmanager
from dataclasses import dataclass
from typing import Any, Callable, Dict, Generator, Tuple, Type

from error_handling import ErrorCategory, ErrorInfo, ErrorSeverity, NoSuitableDriverError
from logging_config import get_logger

logger = get_logger()

JDBC_PREFIX = "jdbc:"


@dataclass(frozen=True)
class Driver:
    """A DB-API driver reachable through a URL scheme."""
    name: str
    connect: Callable[[str, str, str], Any]
    error: Type[Exception]


def split_url(url: str) -> Tuple[str, str]:
    """Split ``[jdbc:]scheme:rest`` into ``(scheme, rest)``."""
    if url.lower().startswith(JDBC_PREFIX):
        url = url[len(JDBC_PREFIX):]
    scheme, sep, rest = url.partition(":")
    if not sep:
        return "", url
    return scheme.lower(), rest


def sqlite_path(url: str) -> str:
    """Database path of a ``sqlite:`` URL (``:memory:`` included)."""
    _, rest = split_url(url)
    if rest.startswith("///"):
        return rest[3:]
    return rest


def _connect_sqlite(url: str, user: str, password: str) -> sqlite3.Connection:
    # SQLite has no accounts; user and password are accepted and ignored
    conn = sqlite3.connect(sqlite_path(url), isolation_level=None)
    conn.row_factory = sqlite3.Row
    return conn


_drivers: Dict[str, Driver] = {
    "sqlite": Driver("sqlite", _connect_sqlite, sqlite3.Error),
}


def register_driver(scheme: str, driver: Driver) -> None:
    """Make ``driver`` available for URLs starting with ``scheme:``."""
    _drivers[scheme.lower()] = driver


def get_driver(url: str) -> Driver:
    """Find the driver for ``url`` or raise NoSuitableDriverError."""
    scheme, _ = split_url(url)
    driver = _drivers.get(scheme)
    if driver is None:
        raise NoSuitableDriverError(
            ErrorInfo(
                category=ErrorCategory.DATABASE,
                severity=ErrorSeverity.HIGH,
                message=f"No suitable driver found for {url}",
                details={'scheme': scheme, 'known_schemes': sorted(_drivers)},
                recoverable=False,
            )
        )
    return driver


def open_connection(url: str, user: str, password: str) -> Any:
    """Open a DB-API connection for the URL/user/password triple."""
    driver = get_driver(url)
    logger.debug(f"Connecting to {url} with the {driver.name} driver")
    return driver.connect(url, user, password)


@contextmanager
def database_session(url: str, user: str, password: str) -> Generator[Tuple[Any, Any], None, None]:
    """Yield ``(connection, cursor)``; the cursor closes before the connection."""
    with closing(open_connection(url, user, password)) as conn:
        with closing(conn.cursor()) as cursor:
            yield conn, cursor
