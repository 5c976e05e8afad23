"""Assertions on RESP arrays: commands, string lists and pub/sub replies."""

from __future__ import annotations

import json
from dataclasses import dataclass
from typing import Sequence, Tuple

from respcheck.scalar_assertions import IntegerAssertion, StringAssertion
from respcheck.values import AssertionFailed, RespAssertion, RespType, RespValue, _quote


def _check_command(value: RespValue, expected_command: str) -> Tuple[RespValue, ...]:
    """Check that the value is an array naming the expected command; return its elements."""
    if value.type is not RespType.ARRAY:
        raise AssertionFailed(f"Expected array type, got {value.type}")
    elements = value.elements
    if not elements:
        raise AssertionFailed(
            f"Expected array with at least 1 element, got {len(elements)} elements"
        )
    first = elements[0]
    if not first.type.is_string:
        raise AssertionFailed(f"Expected first array element to be a string, got {first.type}")
    if first.text.casefold() != expected_command.casefold():
        raise AssertionFailed(
            f"Expected command to be {_quote(expected_command.lower())}, "
            f"got {_quote(first.text.lower())}"
        )
    return elements


def _check_array_length(value: RespValue, expected: int) -> Tuple[RespValue, ...]:
    if value.type is not RespType.ARRAY:
        raise AssertionFailed(f"Expected an array, got {value.type}")
    elements = value.elements
    if len(elements) != expected:
        raise AssertionFailed(
            f"Expected {expected} elements in array, got {len(elements)} "
            f"({value.formatted_string()})"
        )
    return elements


@dataclass(frozen=True)
class CommandAssertion(RespAssertion):
    """Expects an array holding a command name and exactly these arguments."""

    expected_command: str
    expected_args: Sequence[str] = ()

    def __post_init__(self) -> None:
        object.__setattr__(self, "expected_args", tuple(self.expected_args))

    def run(self, value: RespValue) -> None:
        elements = _check_command(value, self.expected_command)
        if len(elements) != len(self.expected_args) + 1:
            raise AssertionFailed(
                f"Expected command to have {len(self.expected_args)} arguments, "
                f"got {len(elements) - 1}"
            )
        for position, (expected, actual) in enumerate(
            zip(self.expected_args, elements[1:]), start=1
        ):
            if not actual.type.is_string:
                raise AssertionFailed(
                    f"Expected argument {position} to be a string, got {actual.type}"
                )
            if actual.text != expected:
                raise AssertionFailed(
                    f"Expected argument #{position} to be {_quote(expected)}, "
                    f"got {_quote(actual.text)}"
                )


@dataclass(frozen=True)
class OnlyCommandAssertion(RespAssertion):
    """Expects an array naming this command, whatever its arguments."""

    expected_command: str

    def run(self, value: RespValue) -> None:
        _check_command(value, self.expected_command)


@dataclass(frozen=True)
class OrderedArrayAssertion(RespAssertion):
    """Runs one assertion per element, in order."""

    expected_value: Sequence[RespAssertion]

    def __post_init__(self) -> None:
        object.__setattr__(self, "expected_value", tuple(self.expected_value))

    def run(self, value: RespValue) -> None:
        elements = _check_array_length(value, len(self.expected_value))
        for assertion, element in zip(self.expected_value, elements):
            assertion.run(element)


@dataclass(frozen=True)
class OrderedStringArrayAssertion(RespAssertion):
    """Expects an array of exactly these strings, in this order."""

    expected_value: Sequence[str]

    def __post_init__(self) -> None:
        object.__setattr__(self, "expected_value", tuple(self.expected_value))

    def run(self, value: RespValue) -> None:
        elements = _check_array_length(value, len(self.expected_value))
        for position, (expected, actual) in enumerate(
            zip(self.expected_value, elements), start=1
        ):
            if not actual.type.is_string:
                raise AssertionFailed(
                    f"Expected element #{position} to be a string, got {actual.type}"
                )
            if actual.text != expected:
                raise AssertionFailed(
                    f"Expected element #{position} to be {_quote(expected)}, "
                    f"got {_quote(actual.text)}"
                )


@dataclass(frozen=True)
class PublishedMessageAssertion(RespAssertion):
    """Expects a pub/sub "message" push for this channel and message."""

    expected_channel: str
    expected_message: str

    def run(self, value: RespValue) -> None:
        OrderedStringArrayAssertion(
            ["message", self.expected_channel, self.expected_message]
        ).run(value)


@dataclass(frozen=True)
class SubscribeResponseAssertion(RespAssertion):
    """Expects the reply to SUBSCRIBE for a channel with a subscription count."""

    expected_channel: str
    expected_subscribed_count: int

    def run(self, value: RespValue) -> None:
        if value.type is not RespType.ARRAY:
            raise AssertionFailed(f"Expected array, got {value.type}")
        OrderedArrayAssertion(
            [
                StringAssertion("subscribe"),
                StringAssertion(self.expected_channel),
                IntegerAssertion(self.expected_subscribed_count),
            ]
        ).run(value)


def _json_list(items: Sequence[str]) -> str:
    text = json.dumps(list(items), separators=(",", ":"), ensure_ascii=False)
    return text.replace("<", "\\u003c").replace(">", "\\u003e").replace("&", "\\u0026")


@dataclass(frozen=True)
class UnorderedStringArrayAssertion(RespAssertion):
    """Expects an array holding exactly these strings, in any order."""

    expected_value: Sequence[str]

    def __post_init__(self) -> None:
        object.__setattr__(self, "expected_value", tuple(self.expected_value))

    def run(self, value: RespValue) -> None:
        elements = _check_array_length(value, len(self.expected_value))
        for position, element in enumerate(elements, start=1):
            if not element.type.is_string:
                raise AssertionFailed(
                    f"Expected element #{position} to be a string, got {element.type}"
                )
        actual = sorted(element.text for element in elements)
        if actual != sorted(self.expected_value):
            raise AssertionFailed(
                f"Expected: {_json_list(self.expected_value)} (in any order), "
                f"got {value.formatted_string()}"
            )