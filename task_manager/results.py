# PURPOSE: explicit service outcomes (value or error kind) instead of exceptions
# for domain-known failures. Routers translate error kinds to HTTP codes.

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Generic, TypeVar

T = TypeVar("T")


class ErrorKind(str, Enum):
    NOT_FOUND = "not_found"
    CONFLICT = "conflict"
    UNAUTHORIZED = "unauthorized"


@dataclass(frozen=True)
class ServiceResult(Generic[T]):
    value: T | None = None
    error: ErrorKind | None = None
    message: str | None = None

    @property
    def ok(self) -> bool:
        return self.error is None

    @classmethod
    def success(cls, value: T) -> "ServiceResult[T]":
        return cls(value=value)

    @classmethod
    def failure(cls, error: ErrorKind, message: str) -> "ServiceResult[T]":
        return cls(error=error, message=message)

    @classmethod
    def not_found(cls, message: str) -> "ServiceResult[T]":
        return cls.failure(ErrorKind.NOT_FOUND, message)

    @classmethod
    def conflict(cls, message: str) -> "ServiceResult[T]":
        return cls.failure(ErrorKind.CONFLICT, message)
