"""
Keyspace session registry

Owns the single cluster connection of a process and one open session per
configured keyspace. A missing session is treated as a lost cluster link:
lookups that miss trigger a full reconnect, not a single-session repair.

The registry is meant to be built once at application start-up, shared by
reference, and closed at shutdown. It performs no locking of its own, so
``connect`` and ``close`` must not run concurrently on the same instance.
"""

import logging
from functools import partial
from typing import Any, Callable, Dict, FrozenSet, Iterable, Optional, Tuple

from cassandra.auth import PlainTextAuthProvider
from cassandra.cluster import Cluster, Session

from .config import CassandraSettings
from .exceptions import ConfigurationError, ConnectivityError, SessionUnavailableError
from .metrics import connect_attempts
from .results import Outcome
from .retry import MISSING, lookup_with_refresh, validate_retry_budget

logger = logging.getLogger(__name__)


def _as_tuple(values: Iterable[str]) -> Tuple[str, ...]:
    if isinstance(values, str):
        values = [values]
    return tuple(dict.fromkeys(values))


class KeyspaceSessionRegistry:
    """Cluster connection plus a map of open sessions keyed by keyspace name"""

    def __init__(self,
                 hosts: Iterable[str],
                 port: int,
                 keyspaces: Iterable[str],
                 auth_provider: Optional[Any] = None,
                 protocol_version: Optional[int] = None,
                 connect_timeout: Optional[float] = None,
                 connect_retry: int = 1,
                 cluster_factory: Callable[..., Cluster] = Cluster):
        self.hosts = _as_tuple(hosts)
        self.port = port
        self.keyspaces = _as_tuple(keyspaces)

        if not self.hosts:
            raise ConfigurationError("At least one contact host is required")
        if not self.keyspaces:
            raise ConfigurationError("At least one keyspace is required")
        self.connect_retry = validate_retry_budget(connect_retry)

        self._cluster_options: Dict[str, Any] = {}
        if auth_provider is not None:
            self._cluster_options['auth_provider'] = auth_provider
        if protocol_version is not None:
            self._cluster_options['protocol_version'] = protocol_version
        if connect_timeout is not None:
            self._cluster_options['connect_timeout'] = connect_timeout
        self._cluster_factory = cluster_factory

        self._cluster: Optional[Cluster] = None
        self._sessions: Dict[str, Session] = {}

    @classmethod
    def from_settings(cls, settings: CassandraSettings, **kwargs) -> "KeyspaceSessionRegistry":
        """Build a registry from ``CassandraSettings``"""
        if settings.username:
            kwargs.setdefault('auth_provider', PlainTextAuthProvider(
                username=settings.username, password=settings.password
            ))
        return cls(
            hosts=settings.hosts,
            port=settings.port,
            keyspaces=settings.keyspaces,
            protocol_version=settings.protocol_version,
            connect_timeout=settings.connect_timeout,
            connect_retry=settings.connect_retry,
            **kwargs
        )

    @property
    def keyspaces_connected(self) -> FrozenSet[str]:
        return frozenset(self._sessions)

    @property
    def is_connected(self) -> bool:
        return self._cluster is not None and bool(self._sessions)

    def connect(self) -> Outcome[int]:
        """
        (Re)connect to the cluster and open a session for every keyspace

        Existing sessions and the cluster are closed first. Sessions are
        collected in a local map and only published once every keyspace has
        connected, so a failed pass leaves the registry empty.

        Returns the number of sessions created, or the driver's error message.
        """
        self.close()

        sessions: Dict[str, Session] = {}
        try:
            cluster = self._cluster_factory(
                contact_points=list(self.hosts), port=self.port, **self._cluster_options
            )
            if cluster is None:
                raise ConnectivityError(
                    f"Failed to build cluster connection to: {list(self.hosts)}, {self.port}"
                )
            self._cluster = cluster

            for keyspace in self.keyspaces:
                sessions[keyspace] = cluster.connect(keyspace)

        except Exception as e:
            message = str(e) or e.__class__.__name__
            logger.error(f"Failed to connect to Cassandra at {list(self.hosts)}:{self.port}: {message}")
            connect_attempts.labels(outcome="failure").inc()
            for keyspace, session in sessions.items():
                self._shutdown(session, f"session for keyspace '{keyspace}'")
            self.close()
            return Outcome.failure(message, ConnectivityError)

        self._sessions = sessions
        connect_attempts.labels(outcome="success").inc()
        logger.info(f"Connected to Cassandra at {list(self.hosts)}:{self.port} with {len(sessions)} session(s)")
        return Outcome.success(len(sessions))

    def session(self, keyspace: str, connect_retry: Optional[int] = None) -> Optional[Session]:
        """
        Get the open session for a keyspace

        If the keyspace has no session, reconnect the whole cluster and look
        again, up to ``connect_retry`` times (the registry default when not
        given). Returns None when no session could be obtained.
        """
        if connect_retry is None:
            connect_retry = self.connect_retry
        return lookup_with_refresh(
            lambda name: self._sessions.get(name, MISSING),
            keyspace,
            self.connect,
            connect_retry,
            kind="session",
        )

    def require_session(self, keyspace: str, connect_retry: Optional[int] = None) -> Session:
        """Like ``session`` but raises ``SessionUnavailableError`` instead of returning None"""
        if connect_retry is None:
            connect_retry = self.connect_retry
        session = self.session(keyspace, connect_retry)
        if session is None:
            raise SessionUnavailableError(keyspace, connect_retry)
        return session

    def session_provider(self, keyspace: str, connect_retry: Optional[int] = None) -> Callable[[], Optional[Session]]:
        """Zero-argument session accessor for a statement cache"""
        if connect_retry is None:
            connect_retry = self.connect_retry
        validate_retry_budget(connect_retry)
        return partial(self.session, keyspace, connect_retry)

    def close(self):
        """Close all sessions, then the cluster connection. Safe to call repeatedly."""
        sessions, self._sessions = self._sessions, {}
        for keyspace, session in sessions.items():
            self._shutdown(session, f"session for keyspace '{keyspace}'")

        cluster, self._cluster = self._cluster, None
        if cluster is not None:
            self._shutdown(cluster, "cluster connection")
            logger.info(f"Cassandra connection to {list(self.hosts)}:{self.port} closed")

    def _shutdown(self, resource, description: str):
        if getattr(resource, 'is_shutdown', False):
            return
        try:
            resource.shutdown()
        except Exception as e:
            logger.warning(f"Failed to shut down {description}: {e}")

    def __enter__(self) -> "KeyspaceSessionRegistry":
        self.connect().unwrap()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()
