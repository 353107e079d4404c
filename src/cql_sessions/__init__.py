"""Cassandra keyspace sessions and prepared statements

Connection lifecycle, per-keyspace sessions with reconnect-on-miss, a
per-table prepared statement cache, CQL text builders and value binders
over the DataStax Cassandra driver.
"""

from .registry import KeyspaceSessionRegistry
from .statements import (
    StatementCache,
    ReadStatement,
    InsertStatement,
    DeleteStatement,
    TableStatements
)
from .bind import (
    ABSENT,
    Absent,
    Present,
    field_value,
    collect_field,
    bind,
    TimestampBinder,
    DoubleBinder,
    IntBinder,
    LongBinder,
    StringBinder,
    UUIDBinder,
    MapBinder,
    SetBinder
)
from .config import CassandraSettings, get_settings
from .results import Outcome
from .exceptions import (
    CqlSessionError,
    ConfigurationError,
    ConnectivityError,
    PreparationError,
    SessionUnavailableError,
    StatementUnavailableError
)
from . import sql

__version__ = "0.1.0"

__all__ = [
    "KeyspaceSessionRegistry",
    "StatementCache",
    "ReadStatement",
    "InsertStatement",
    "DeleteStatement",
    "TableStatements",
    "ABSENT",
    "Absent",
    "Present",
    "field_value",
    "collect_field",
    "bind",
    "TimestampBinder",
    "DoubleBinder",
    "IntBinder",
    "LongBinder",
    "StringBinder",
    "UUIDBinder",
    "MapBinder",
    "SetBinder",
    "CassandraSettings",
    "get_settings",
    "Outcome",
    "CqlSessionError",
    "ConfigurationError",
    "ConnectivityError",
    "PreparationError",
    "SessionUnavailableError",
    "StatementUnavailableError",
    "sql"
]
