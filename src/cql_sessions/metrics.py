"""Prometheus metrics for the keyspace session layer"""

from prometheus_client import Counter

connect_attempts = Counter(
    'cql_sessions_connect_attempts_total',
    'Total cluster connect passes',
    ['outcome']
)
lookup_misses = Counter(
    'cql_sessions_lookup_misses_total',
    'Lookups that found no cached session or statement',
    ['kind']
)
preparation_passes = Counter(
    'cql_sessions_preparation_passes_total',
    'Total statement set preparation passes',
    ['table', 'outcome']
)
