"""Tagged extraction results.

Extractors never hand partially-populated objects to callers: they return
``Ok(value)`` once the payload passed validation, or ``Invalid(reason)``.
``hint`` is set when the reason should be shown to the user.
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from typing import Generic, TypeVar, Union

T = TypeVar("T")


@dataclass(frozen=True, slots=True)
class Ok(Generic[T]):
    value: T


@dataclass(frozen=True, slots=True)
class Invalid:
    reason: str
    hint: str = ""


Extraction = Union[Ok[T], Invalid]


def first_ok(primary: Extraction[T], fallback: Callable[[], Extraction[T]]) -> Extraction[T]:
    """Return *primary* when it is ``Ok``, otherwise evaluate *fallback*."""
    if isinstance(primary, Ok):
        return primary
    return fallback()
