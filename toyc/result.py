"""
Result type shared by the parser and the code generator.

Every stage returns a `Result` that holds either the produced value or
the diagnostic describing why nothing was produced, so "legitimately
empty" and "failed" are never confused.

Author: xwest
"""

from dataclasses import dataclass
from typing import Generic, Optional, TypeVar

from .lexer.errors import Diagnostic


T = TypeVar("T")


@dataclass(frozen=True)
class Result(Generic[T]):
    """Either a value or an error diagnostic."""
    value: Optional[T] = None
    error: Optional[Diagnostic] = None

    @classmethod
    def ok(cls, value: T) -> "Result[T]":
        return cls(value=value)

    @classmethod
    def fail(cls, error: Diagnostic) -> "Result[T]":
        return cls(error=error)

    @property
    def is_ok(self) -> bool:
        return self.error is None

    def __bool__(self) -> bool:
        return self.is_ok

    def unwrap(self) -> T:
        """Return the value, raising if this result is a failure."""
        if self.error is not None:
            raise ValueError(f"unwrap() on failed result: {self.error.message}")
        return self.value

    def __repr__(self) -> str:
        if self.is_ok:
            return f"Result.ok({self.value!r})"
        return f"Result.fail({self.error.message!r})"
