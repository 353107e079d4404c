"""Result type returned by operations that report failures instead of raising"""

from dataclasses import dataclass
from typing import Generic, Optional, Type, TypeVar

from .exceptions import CqlSessionError

T = TypeVar('T')


@dataclass(frozen=True)
class Outcome(Generic[T]):
    """Success value or failure message of a connect / prepare pass"""
    value: Optional[T] = None
    error: Optional[str] = None
    error_type: Type[CqlSessionError] = CqlSessionError

    @classmethod
    def success(cls, value: T) -> "Outcome[T]":
        return cls(value=value)

    @classmethod
    def failure(cls, error: str, error_type: Type[CqlSessionError] = CqlSessionError) -> "Outcome[T]":
        return cls(error=error, error_type=error_type)

    @property
    def ok(self) -> bool:
        return self.error is None

    @property
    def failed(self) -> bool:
        return self.error is not None

    def unwrap(self) -> T:
        """Return the success value or raise ``error_type`` with the failure message"""
        if self.failed:
            raise self.error_type(self.error)
        return self.value

    def __bool__(self) -> bool:
        return self.ok
