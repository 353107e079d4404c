"""
Binding of optional typed values to statement parameters

Each binder maps field names to a value that is either ``Present(value)`` or
``ABSENT``; plain values and ``None`` are accepted and converted through
``field_value``. Absent scalars bind CQL null. Absent maps and sets bind an
empty collection, never null.
"""

import datetime
import uuid
from collections.abc import Mapping as AbcMapping, Set as AbcSet
from dataclasses import dataclass
from typing import Any, Dict, FrozenSet, Generic, Mapping, MutableMapping, Tuple, TypeVar, Union

from cassandra.query import BoundStatement, PreparedStatement

T = TypeVar('T')


@dataclass(frozen=True)
class Present(Generic[T]):
    value: T


@dataclass(frozen=True)
class Absent:
    pass


ABSENT = Absent()

FieldValue = Union[Present[T], Absent]


def field_value(value: Any) -> FieldValue:
    """Wrap a plain value: None becomes ``ABSENT``, anything else ``Present``"""
    if isinstance(value, (Present, Absent)):
        return value
    if value is None:
        return ABSENT
    return Present(value)


def collect_field(field_name: str, fields: MutableMapping[str, FieldValue], value: Any) -> None:
    """Add ``field_name`` to ``fields`` only if ``value`` is present"""
    value = field_value(value)
    if isinstance(value, Present):
        fields[field_name] = value


class Binder(Generic[T]):
    """Base binder for one value category"""

    type_name = "value"
    accepted_types: Tuple[type, ...] = (object,)

    def __init__(self, fields_data: Mapping[str, Any]):
        self.fields_data: Dict[str, FieldValue] = {
            name: field_value(value) for name, value in fields_data.items()
        }

    @property
    def fields(self) -> FrozenSet[str]:
        return frozenset(self.fields_data)

    def to(self, params: MutableMapping[str, Any]) -> MutableMapping[str, Any]:
        """Write every field into ``params`` and return it"""
        for name, value in self.fields_data.items():
            if isinstance(value, Present):
                params[name] = self.convert(name, value.value)
            else:
                params[name] = self.absent()
        return params

    def convert(self, name: str, value: Any) -> Any:
        if isinstance(value, bool) or not isinstance(value, self.accepted_types):
            raise TypeError(
                f"Field '{name}' expects a {self.type_name}, got {type(value).__name__}"
            )
        return value

    def absent(self) -> Any:
        return None


class TimestampBinder(Binder[datetime.datetime]):
    type_name = "timestamp"
    accepted_types = (datetime.datetime,)


class DoubleBinder(Binder[float]):
    type_name = "double"
    accepted_types = (float, int)

    def convert(self, name: str, value: Any) -> float:
        return float(super().convert(name, value))


class _IntegerBinder(Binder[int]):
    accepted_types = (int,)
    bits = 32

    def convert(self, name: str, value: Any) -> int:
        value = super().convert(name, value)
        limit = 2 ** (self.bits - 1)
        if not -limit <= value < limit:
            raise ValueError(f"Field '{name}' value {value} does not fit a {self.type_name}")
        return value


class IntBinder(_IntegerBinder):
    type_name = "int"
    bits = 32


class LongBinder(_IntegerBinder):
    type_name = "bigint"
    bits = 64


class StringBinder(Binder[str]):
    type_name = "string"
    accepted_types = (str,)


class UUIDBinder(Binder[uuid.UUID]):
    type_name = "uuid"
    accepted_types = (uuid.UUID,)


class MapBinder(Binder[Mapping]):
    type_name = "map"
    accepted_types = (AbcMapping,)

    def convert(self, name: str, value: Any) -> dict:
        return dict(super().convert(name, value))

    def absent(self) -> dict:
        return {}


class SetBinder(Binder[AbcSet]):
    type_name = "set"
    accepted_types = (AbcSet,)

    def convert(self, name: str, value: Any) -> set:
        return set(super().convert(name, value))

    def absent(self) -> set:
        return set()


def bind(prepared: PreparedStatement, *binders: Binder) -> BoundStatement:
    """Bind the values of all ``binders`` to ``prepared`` by field name"""
    params: Dict[str, Any] = {}
    for binder in binders:
        binder.to(params)
    return prepared.bind(params)
