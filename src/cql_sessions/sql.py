"""
CQL text builders

Plain string templates: table, field and key names are inserted as given,
without quoting or validation. Each key is a complete predicate such as
``"id=?"``; multiple keys are joined with ``and``. Fields are emitted in the
iteration order of the collection passed in.
"""

from typing import Iterable, Optional


def _where(keys: Optional[Iterable[str]]) -> str:
    if keys is None:
        return ""
    return " where " + " and ".join(keys)


def insert(table: str, fields: Iterable[str]) -> str:
    """Build ``insert into table(f1,f2) values(?,?)``"""
    fields = list(fields)
    placeholders = ",".join("?" for _ in fields)
    return f"insert into {table}({','.join(fields)}) values({placeholders})"


def select(table: str, fields: Iterable[str], keys: Optional[Iterable[str]] = None) -> str:
    """Build ``select f1,f2 from table[ where k1 and k2];``"""
    return f"select {','.join(fields)} from {table}{_where(keys)};"


def select_distinct(table: str, fields: Iterable[str], keys: Optional[Iterable[str]] = None) -> str:
    """Build ``select distinct f1,f2 from table[ where k1 and k2];``"""
    return f"select distinct {','.join(fields)} from {table}{_where(keys)};"


def delete(table: str, keys: Iterable[str], fields: Optional[Iterable[str]] = None) -> str:
    """
    Build ``delete [f1,f2] from table where k1 and k2;``

    Without ``fields`` the whole row is deleted, otherwise only the values
    of the given fields.
    """
    columns = ",".join(fields) if fields is not None else ""
    return f"delete {columns} from {table} where {' and '.join(keys)};"
