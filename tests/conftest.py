"""
Pytest configuration and in-memory stand-ins for the Cassandra driver
"""

import pytest
from cassandra import InvalidRequest
from cassandra.cluster import NoHostAvailable

from cql_sessions import KeyspaceSessionRegistry


class FakePreparedStatement:
    """Prepared statement that records what it was bound with"""

    def __init__(self, query_string):
        self.query_string = query_string

    def bind(self, values):
        return {"query": self.query_string, "values": values}


class FakeSession:
    """Session bound to one keyspace"""

    def __init__(self, keyspace, fail_prepare=(), fail_shutdown=False):
        self.keyspace = keyspace
        self.is_shutdown = False
        self.prepared = []
        self.fail_prepare = set(fail_prepare)
        self.fail_shutdown = fail_shutdown

    def prepare(self, query):
        if query in self.fail_prepare:
            raise InvalidRequest(f"line 1:0 no viable alternative at input '{query}'")
        self.prepared.append(query)
        return FakePreparedStatement(query)

    def shutdown(self):
        if self.fail_shutdown:
            raise RuntimeError("session shutdown failed")
        self.is_shutdown = True


class FakeCluster:
    """Cluster that knows a fixed set of keyspaces"""

    def __init__(self, contact_points, port, known_keyspaces, fail_shutdown=False, **options):
        self.contact_points = contact_points
        self.port = port
        self.options = options
        self.known_keyspaces = set(known_keyspaces)
        self.fail_shutdown = fail_shutdown
        self.is_shutdown = False
        self.sessions = []

    def connect(self, keyspace=None):
        if keyspace not in self.known_keyspaces:
            raise InvalidRequest(f"Keyspace '{keyspace}' does not exist")
        session = FakeSession(keyspace, fail_shutdown=self.fail_shutdown)
        self.sessions.append(session)
        return session

    def shutdown(self):
        self.is_shutdown = True


class ClusterFactory:
    """Stands in for ``cassandra.cluster.Cluster`` and records every cluster it builds"""

    def __init__(self, known_keyspaces=("ks1",), reachable=True, fail_shutdown=False):
        self.known_keyspaces = known_keyspaces
        self.reachable = reachable
        self.fail_shutdown = fail_shutdown
        self.calls = 0
        self.built = []

    def __call__(self, contact_points, port, **options):
        self.calls += 1
        if not self.reachable:
            raise NoHostAvailable(
                "Unable to connect to any servers",
                {host: ConnectionRefusedError(111, "Connection refused") for host in contact_points}
            )
        cluster = FakeCluster(
            contact_points, port, self.known_keyspaces, fail_shutdown=self.fail_shutdown, **options
        )
        self.built.append(cluster)
        return cluster


@pytest.fixture
def cluster_factory():
    return ClusterFactory(known_keyspaces=("ks1", "ks2"))


@pytest.fixture
def registry(cluster_factory):
    registry = KeyspaceSessionRegistry(
        hosts=["h1", "h2"],
        port=9042,
        keyspaces=["ks1", "ks2"],
        cluster_factory=cluster_factory,
    )
    yield registry
    registry.close()
