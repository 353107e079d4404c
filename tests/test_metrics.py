"""
Tests for the Prometheus counters
"""

import pytest
from prometheus_client import REGISTRY

from cql_sessions import KeyspaceSessionRegistry, TableStatements
from conftest import ClusterFactory, FakeSession


def sample(name, **labels):
    return REGISTRY.get_sample_value(name, labels) or 0.0


def connects(outcome):
    return sample('cql_sessions_connect_attempts_total', outcome=outcome)


def misses(kind):
    return sample('cql_sessions_lookup_misses_total', kind=kind)


def passes(table, outcome):
    return sample('cql_sessions_preparation_passes_total', table=table, outcome=outcome)


class TestConnectMetrics:
    """Test connect attempt counters"""

    def test_failed_connect_counted(self):
        registry = KeyspaceSessionRegistry(["h1"], 9042, ["ks1"], cluster_factory=ClusterFactory(reachable=False))
        failures, successes = connects("failure"), connects("success")

        assert registry.connect().failed

        assert connects("failure") == failures + 1
        assert connects("success") == successes

    def test_successful_connect_counted(self):
        registry = KeyspaceSessionRegistry(["h1"], 9042, ["ks1"], cluster_factory=ClusterFactory())
        failures, successes = connects("failure"), connects("success")

        assert registry.connect().ok

        assert connects("success") == successes + 1
        assert connects("failure") == failures
        registry.close()


class TestLookupMetrics:
    """Test lookup miss counters"""

    def test_session_miss_counted_per_reconnect(self):
        registry = KeyspaceSessionRegistry(["h1"], 9042, ["ks1"], cluster_factory=ClusterFactory())
        registry.connect()
        session_misses, statement_misses = misses("session"), misses("statement")
        successes = connects("success")

        assert registry.session("other", 2) is None

        assert misses("session") == session_misses + 2
        assert misses("statement") == statement_misses
        assert connects("success") == successes + 2
        registry.close()

    def test_session_hit_not_counted(self):
        registry = KeyspaceSessionRegistry(["h1"], 9042, ["ks1"], cluster_factory=ClusterFactory())
        registry.connect()
        session_misses = misses("session")

        assert registry.session("ks1") is not None

        assert misses("session") == session_misses
        registry.close()

    def test_statement_miss_counted_with_preparation(self):
        users = TableStatements("metrics_users", ["id"], ["id=?"], lambda: FakeSession("ks1"))
        statement_misses = misses("statement")
        successes = passes("metrics_users", "success")

        assert users.read() is not None
        assert users.insert() is not None

        assert misses("statement") == statement_misses + 1
        assert passes("metrics_users", "success") == successes + 1


class TestPreparationMetrics:
    """Test preparation pass counters"""

    @pytest.fixture
    def events(self):
        return TableStatements("metrics_events", ["id", "payload"], ["id=?"], lambda: None)

    def test_failed_pass_counted(self, events):
        failures, successes = passes("metrics_events", "failure"), passes("metrics_events", "success")

        assert events.prepare_all(FakeSession("ks1", fail_prepare=[events.insert_sql])).failed
        assert events.prepare_all(None).failed

        assert passes("metrics_events", "failure") == failures + 2
        assert passes("metrics_events", "success") == successes

    def test_successful_pass_counted(self, events):
        failures, successes = passes("metrics_events", "failure"), passes("metrics_events", "success")

        assert events.prepare_all(FakeSession("ks1")).ok

        assert passes("metrics_events", "success") == successes + 1
        assert passes("metrics_events", "failure") == failures
