"""
Prepared statement cache

A ``StatementCache`` owns the prepared statements of one table. Its statement
set is fixed at construction and is always prepared as a whole: a lookup miss
re-prepares every statement against a freshly obtained session, and a failure
anywhere in a preparation pass empties the cache for the whole set.

Read / insert / delete accessors are added by mixing ``ReadStatement``,
``InsertStatement`` and ``DeleteStatement`` into a ``StatementCache``::

    class UserStatements(ReadStatement, InsertStatement, StatementCache):
        read_sql = "select id,name from users where id=?;"

    users = UserStatements("users", ["id", "name"], ["id=?"],
                           registry.session_provider("accounts"))
    users.refresh()
    bound = users.read().bind(["42"])
"""

import logging
from typing import Callable, Dict, FrozenSet, Iterable, List, Optional, Tuple

from cassandra.cluster import Session
from cassandra.query import PreparedStatement

from . import sql
from .exceptions import PreparationError, StatementUnavailableError
from .metrics import preparation_passes
from .results import Outcome
from .retry import MISSING, lookup_with_refresh, validate_retry_budget

logger = logging.getLogger(__name__)

SessionProvider = Callable[[], Optional[Session]]


class StatementCache:
    """Prepared statements of one table, keyed by CQL text"""

    def __init__(self,
                 table: str,
                 fields: Iterable[str],
                 keys: Iterable[str],
                 session_provider: SessionProvider,
                 sqls: Iterable[str] = (),
                 connect_retry: int = 1):
        self.table = table
        self.fields: Tuple[str, ...] = tuple(fields)
        self.keys: Tuple[str, ...] = tuple(keys)
        self.connect_retry = validate_retry_budget(connect_retry)
        self._session_provider = session_provider
        self._resolve_capability_sqls()
        self.sqls: FrozenSet[str] = frozenset(sqls) | frozenset(
            getattr(self, capability.sql_attribute) for capability in self._capabilities()
        )
        self._statements: Dict[str, Optional[PreparedStatement]] = {}

    def _capabilities(self) -> List[type]:
        return [capability for capability in _CAPABILITIES if isinstance(self, capability)]

    def _resolve_capability_sqls(self):
        """Fill in the default SQL of every mixed-in capability that does not set its own"""
        for capability in self._capabilities():
            if getattr(self, capability.sql_attribute) is None:
                setattr(self, capability.sql_attribute, capability.default_sql(self))

    @property
    def cached_sqls(self) -> FrozenSet[str]:
        return frozenset(self._statements)

    def prepare_all(self, session: Optional[Session]) -> Outcome[int]:
        """
        Prepare the whole statement set against ``session``

        Previous entries are dropped first. If any statement fails to prepare
        the cache is left empty for the whole set and the error message is
        returned. On success returns the number of cached entries.
        """
        try:
            if session is None:
                raise PreparationError("Session is not available")

            self._clear()
            for sql_text in self.sqls:
                self._statements[sql_text] = session.prepare(sql_text)

        except Exception as e:
            self._clear()
            message = str(e) or e.__class__.__name__
            preparation_passes.labels(table=self.table, outcome="failure").inc()
            logger.error(f"Failed to prepare statements for table '{self.table}': {message}")
            return Outcome.failure(message, PreparationError)

        preparation_passes.labels(table=self.table, outcome="success").inc()
        logger.info(f"Prepared {len(self.sqls)} statement(s) for table '{self.table}'")
        return Outcome.success(len(self._statements))

    def refresh(self) -> Outcome[int]:
        """Prepare the statement set against a session from the session provider"""
        try:
            session = self._session_provider()
        except Exception as e:
            self._clear()
            logger.error(f"Session provider for table '{self.table}' failed: {e}")
            return Outcome.failure(str(e) or e.__class__.__name__, PreparationError)
        return self.prepare_all(session)

    def get_statement(self, sql_text: str) -> Optional[PreparedStatement]:
        """
        Get the prepared statement for ``sql_text``

        On a miss the whole set is re-prepared, up to ``connect_retry`` times.
        Returns None if the statement is still unavailable.
        """
        return lookup_with_refresh(
            lambda text: self._statements.get(text, MISSING),
            sql_text,
            self.refresh,
            self.connect_retry,
            kind="statement",
        )

    def require_statement(self, sql_text: str) -> PreparedStatement:
        statement = self.get_statement(sql_text)
        if statement is None:
            raise StatementUnavailableError(self.table, sql_text)
        return statement

    def _clear(self):
        for sql_text in self.sqls:
            self._statements.pop(sql_text, None)


class ReadStatement:
    """Adds ``read()``; defaults to selecting all fields by all keys"""

    read_sql: Optional[str] = None
    sql_attribute = "read_sql"

    def default_sql(self) -> str:
        return sql.select(self.table, self.fields, self.keys or None)

    def read(self) -> Optional[PreparedStatement]:
        return self.get_statement(self.read_sql)


class InsertStatement:
    """Adds ``insert()``; defaults to inserting all fields"""

    insert_sql: Optional[str] = None
    sql_attribute = "insert_sql"

    def default_sql(self) -> str:
        return sql.insert(self.table, self.fields)

    def insert(self) -> Optional[PreparedStatement]:
        return self.get_statement(self.insert_sql)


class DeleteStatement:
    """Adds ``delete()``; defaults to deleting whole rows by all keys"""

    delete_sql: Optional[str] = None
    sql_attribute = "delete_sql"

    def default_sql(self) -> str:
        return sql.delete(self.table, self.keys)

    def delete(self) -> Optional[PreparedStatement]:
        return self.get_statement(self.delete_sql)


class TableStatements(ReadStatement, InsertStatement, DeleteStatement, StatementCache):
    """Statement cache with read, insert and delete statements for one table"""
    pass


_CAPABILITIES = (ReadStatement, InsertStatement, DeleteStatement)
