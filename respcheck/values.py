"""RESP values and the interface that assertions on them implement."""

from __future__ import annotations

import enum
import json
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Iterable, Optional, Tuple, Union


class RespType(enum.Enum):
    """The kinds of value a RESP reply can hold."""

    SIMPLE_STRING = "SIMPLE_STRING"
    BULK_STRING = "BULK_STRING"
    INTEGER = "INTEGER"
    ERROR = "ERROR"
    ARRAY = "ARRAY"
    NIL = "NIL"
    NIL_ARRAY = "NIL_ARRAY"

    def __str__(self) -> str:
        return self.value

    @property
    def is_string(self) -> bool:
        return self in (RespType.SIMPLE_STRING, RespType.BULK_STRING)


def _quote(text: str) -> str:
    """Double-quote a string, escaping it the way error messages show it."""
    return json.dumps(text, ensure_ascii=False)


Payload = Union[str, int, Tuple["RespValue", ...], None]


@dataclass(frozen=True)
class RespValue:
    """A single decoded RESP value."""

    type: RespType
    data: Payload = None

    @classmethod
    def simple_string(cls, text: str) -> "RespValue":
        if not isinstance(text, str):
            raise TypeError("simple string content must be str")
        return cls(RespType.SIMPLE_STRING, text)

    @classmethod
    def bulk_string(cls, text: str) -> "RespValue":
        if not isinstance(text, str):
            raise TypeError("bulk string content must be str")
        return cls(RespType.BULK_STRING, text)

    @classmethod
    def integer(cls, number: int) -> "RespValue":
        if isinstance(number, bool) or not isinstance(number, int):
            raise TypeError("integer content must be int")
        return cls(RespType.INTEGER, number)

    @classmethod
    def error(cls, message: str) -> "RespValue":
        if not isinstance(message, str):
            raise TypeError("error message must be str")
        return cls(RespType.ERROR, message)

    @classmethod
    def array(cls, elements: Iterable["RespValue"]) -> "RespValue":
        items = tuple(elements)
        if not all(isinstance(item, RespValue) for item in items):
            raise TypeError("array elements must be RespValue instances")
        return cls(RespType.ARRAY, items)

    @classmethod
    def nil(cls) -> "RespValue":
        return cls(RespType.NIL)

    @classmethod
    def nil_array(cls) -> "RespValue":
        return cls(RespType.NIL_ARRAY)

    def _expect(self, *types: RespType) -> None:
        if self.type not in types:
            raise TypeError(f"{self.type} value has no such content")

    @property
    def text(self) -> str:
        """The content of a simple or bulk string."""
        self._expect(RespType.SIMPLE_STRING, RespType.BULK_STRING)
        return self.data  # type: ignore[return-value]

    @property
    def number(self) -> int:
        """The content of an integer."""
        self._expect(RespType.INTEGER)
        return self.data  # type: ignore[return-value]

    @property
    def message(self) -> str:
        """The message of an error."""
        self._expect(RespType.ERROR)
        return self.data  # type: ignore[return-value]

    @property
    def elements(self) -> Tuple["RespValue", ...]:
        """The elements of an array."""
        self._expect(RespType.ARRAY)
        return self.data  # type: ignore[return-value]

    def formatted_string(self) -> str:
        """A readable rendering of the value for messages."""
        if self.type.is_string or self.type is RespType.ERROR:
            return _quote(self.data)  # type: ignore[arg-type]
        if self.type is RespType.INTEGER:
            return str(self.data)
        if self.type is RespType.ARRAY:
            return "[" + ", ".join(e.formatted_string() for e in self.elements) + "]"
        return str(self.type)


class AssertionFailed(Exception):
    """Raised when a value does not meet an assertion."""


class RespAssertion(ABC):
    """A check applied to a received RESP value."""

    @abstractmethod
    def run(self, value: RespValue) -> None:
        """Check the value, raising AssertionFailed when it does not match."""


def _optional_quote(text: Optional[str]) -> str:
    return _quote(text or "")