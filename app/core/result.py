"""Typed success/failure values returned by fallible operations."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING
from typing import Generic
from typing import TypeVar
from typing import Union

if TYPE_CHECKING:
    from app.core.errors import AppError

T = TypeVar("T")


@dataclass(frozen=True)
class Ok(Generic[T]):
    """Successful outcome carrying a value."""

    value: T

    @property
    def is_ok(self) -> bool:
        return True


@dataclass(frozen=True)
class Err:
    """Failed outcome carrying one of the taxonomy error kinds."""

    error: AppError

    @property
    def is_ok(self) -> bool:
        return False


Result = Union[Ok[T], Err]
