"""
Cassandra connection settings

Values are read from ``CASSANDRA_*`` environment variables or a ``.env``
file. List values (hosts, keyspaces) are given as JSON arrays, e.g.
``CASSANDRA_HOSTS='["cassandra-0","cassandra-1"]'``.
"""

from functools import lru_cache
from typing import List, Optional

from pydantic_settings import BaseSettings


class CassandraSettings(BaseSettings):
    hosts: List[str] = ["localhost"]
    port: int = 9042
    keyspaces: List[str] = []
    username: Optional[str] = None
    password: Optional[str] = None
    protocol_version: Optional[int] = None
    connect_timeout: float = 5.0
    connect_retry: int = 1

    class Config:
        env_prefix = "CASSANDRA_"
        env_file = ".env"
        env_file_encoding = 'utf-8'


@lru_cache()
def get_settings() -> CassandraSettings:
    return CassandraSettings()
