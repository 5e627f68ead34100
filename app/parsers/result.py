# app/parsers/result.py

from __future__ import annotations

from dataclasses import dataclass
from typing import Generic, TypeVar, Union

from app.core.exceptions import ParseFailure

T = TypeVar("T")


@dataclass(frozen=True)
class Parsed(Generic[T]):
    value: T
    rule: str

    @property
    def ok(self) -> bool:
        return True

    def value_or_none(self) -> T | None:
        return self.value


@dataclass(frozen=True)
class Unparsed:
    text: str
    reason: str = "no pattern matched"

    @property
    def ok(self) -> bool:
        return False

    def value_or_none(self) -> None:
        return None

    def as_error(self) -> ParseFailure:
        return ParseFailure(f"{self.reason}: {self.text!r}")


ParseResult = Union[Parsed[T], Unparsed]
