"""
Template for sending a single request to a database.

The connection and statement (a DB-API cursor) are opened for each
``start()`` call and released before the finalizer runs. Behavior is
supplied either as callables::

    SQLRequestTemplate("sqlite:app.db", "", "", query=lambda st: st.execute(SQL)).start()

or by overriding ``query`` / ``on_exception`` / ``on_finally`` in a subclass.
"""

import sqlite3
from typing import Any, Callable, Optional, Tuple, Type

import messages
from config import config
from connection_manager import database_session, get_driver
from error_handling import (
    DatabaseError,
    DiagnosticSink,
    KitError,
    NoSuitableDriverError,
    get_diagnostic_sink,
    get_error_handler,
)
from logging_config import get_logger

logger = get_logger()


class SQLRequestTemplate:
    """Connection/statement lifecycle around a query body with error and finally hooks."""

    def __init__(
        self,
        url: str,
        user: str,
        password: str,
        query: Optional[Callable[[Any], Any]] = None,
        on_exception: Optional[Callable[[BaseException], Any]] = None,
        on_finally: Optional[Callable[[], Any]] = None,
        sink: Optional[DiagnosticSink] = None,
    ):
        self._url = url
        self._user = user
        self._password = password
        self._query = query
        self._on_exception = on_exception
        self._on_finally = on_finally
        self._sink = sink

    @classmethod
    def from_config(cls, **hooks) -> "SQLRequestTemplate":
        """Build a template from the configured database URL and account."""
        return cls(config.db_url, config.db_user, config.db_password, **hooks)

    @property
    def url(self) -> str:
        return self._url

    @property
    def user(self) -> str:
        return self._user

    @property
    def password(self) -> str:
        return self._password

    def query(self, statement: Any) -> None:
        """Run the actual request against ``statement``."""
        if self._query is None:
            raise NotImplementedError(
                f"{type(self).__name__} needs a query callable or a query() override"
            )
        self._query(statement)

    def on_exception(self, error: BaseException) -> None:
        """Handle a database error raised while connecting or querying."""
        if self._on_exception is not None:
            self._on_exception(error)
            return
        sink = self._sink or get_diagnostic_sink()
        sink.report(messages.SQL_FAILURE, error, context=f"sql_request:{self._url}")

    def on_finally(self) -> None:
        """Called once per start(), after the connection is released."""
        if self._on_finally is not None:
            self._on_finally()

    def _database_errors(self) -> Tuple[Type[BaseException], ...]:
        errors = [DatabaseError, sqlite3.Error]
        try:
            errors.append(get_driver(self._url).error)
        except NoSuitableDriverError:
            pass
        return tuple(errors)

    def start(self) -> Optional[KitError]:
        """
        Open the connection and statement, run ``query`` and release both.

        Database errors go to ``on_exception`` and are returned in
        structured form; ``on_finally`` runs on every path. Other
        exceptions propagate once ``on_finally`` has run.
        """
        error = None
        try:
            with database_session(self._url, self._user, self._password) as (_, statement):
                self.query(statement)
        except self._database_errors() as e:
            logger.warning(f"SQL request to {self._url} failed: {e}")
            error = get_error_handler().to_kit_error(e)
            self.on_exception(e)
        finally:
            self.on_finally()
        return error
