"""Assertions on the replies to the stream commands XRANGE and XREAD."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Sequence

from respcheck.values import AssertionFailed, RespAssertion, RespType, RespValue


@dataclass(frozen=True)
class StreamEntry:
    """One stream entry: its ID and its field/value pairs."""

    id: str
    field_value_pairs: Sequence[Sequence[str]] = ()

    def __post_init__(self) -> None:
        object.__setattr__(
            self, "field_value_pairs", tuple(tuple(pair) for pair in self.field_value_pairs)
        )

    def to_resp_value(self) -> RespValue:
        """The entry as the server encodes it: [id, [field, value, ...]]."""
        fields = [
            RespValue.bulk_string(item) for pair in self.field_value_pairs for item in pair
        ]
        return RespValue.array([RespValue.bulk_string(self.id), RespValue.array(fields)])


@dataclass(frozen=True)
class StreamResponse:
    """The entries read from one stream key."""

    key: str
    entries: Sequence[StreamEntry] = ()

    def __post_init__(self) -> None:
        object.__setattr__(self, "entries", tuple(self.entries))

    def to_resp_value(self) -> RespValue:
        """The stream as the server encodes it: [key, [entry, ...]]."""
        return RespValue.array(
            [
                RespValue.bulk_string(self.key),
                RespValue.array(entry.to_resp_value() for entry in self.entries),
            ]
        )


def _compare(value: RespValue, expected: RespValue, label: str) -> None:
    if value.type is not RespType.ARRAY:
        raise AssertionFailed(f"Expected array, got {value.type}")
    expected_text = expected.formatted_string()
    actual_text = value.formatted_string()
    if expected_text != actual_text:
        raise AssertionFailed(
            f"{label} response mismatch:\nExpected:\n{expected_text}\nGot:\n{actual_text}"
        )


@dataclass(frozen=True)
class XRangeResponseAssertion(RespAssertion):
    """Expects an XRANGE reply holding exactly these entries."""

    expected_stream_responses: Sequence[StreamEntry]

    def __post_init__(self) -> None:
        object.__setattr__(
            self, "expected_stream_responses", tuple(self.expected_stream_responses)
        )

    def run(self, value: RespValue) -> None:
        expected = RespValue.array(
            entry.to_resp_value() for entry in self.expected_stream_responses
        )
        _compare(value, expected, "XRANGE")


@dataclass(frozen=True)
class XReadResponseAssertion(RespAssertion):
    """Expects an XREAD reply holding exactly these streams and entries."""

    expected_stream_responses: Sequence[StreamResponse]

    def __post_init__(self) -> None:
        object.__setattr__(
            self, "expected_stream_responses", tuple(self.expected_stream_responses)
        )

    def run(self, value: RespValue) -> None:
        expected = RespValue.array(
            stream.to_resp_value() for stream in self.expected_stream_responses
        )
        _compare(value, expected, "XREAD")