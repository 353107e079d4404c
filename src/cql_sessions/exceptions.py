"""Custom exceptions for the keyspace session layer"""


class CqlSessionError(Exception):
    """Base exception for session layer errors"""
    pass


class ConfigurationError(CqlSessionError, ValueError):
    """Raised when a registry or statement cache is constructed with invalid parameters"""
    pass


class ConnectivityError(CqlSessionError):
    """Raised when the cluster connection or a keyspace session cannot be established"""
    pass


class PreparationError(CqlSessionError):
    """Raised when a statement set cannot be prepared"""
    pass


class SessionUnavailableError(CqlSessionError):
    """Raised when no session could be obtained for a keyspace"""
    def __init__(self, keyspace: str, connect_retry: int):
        self.keyspace = keyspace
        self.connect_retry = connect_retry
        super().__init__(
            f"Session for keyspace '{keyspace}' unavailable after {connect_retry} reconnect attempt(s)"
        )


class StatementUnavailableError(CqlSessionError):
    """Raised when a prepared statement could not be obtained"""
    def __init__(self, table: str, sql: str):
        self.table = table
        self.sql = sql
        super().__init__(f"Prepared statement for table '{table}' unavailable: {sql}")
