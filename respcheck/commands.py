"""Single-command test cases: WAIT, REPLCONF GETACK, ZADD and ZRANGE."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import List

from respcheck.array_assertions import CommandAssertion, OrderedStringArrayAssertion
from respcheck.receiving import RespClient
from respcheck.scalar_assertions import IntegerAssertion, _format_fixed
from respcheck.sending import SendCommandTestCase


@dataclass
class WaitTestCase:
    """Sends WAIT and checks the number of acknowledging replicas."""

    replicas: int
    timeout_in_milliseconds: int
    expected_replica_count: int

    def run(self, client: RespClient, logger: logging.Logger) -> None:
        SendCommandTestCase(
            command="WAIT",
            args=[str(self.replicas), str(self.timeout_in_milliseconds)],
            assertion=IntegerAssertion(self.expected_replica_count),
        ).run(client, logger)


@dataclass
class GetAckTestCase:
    """Sends REPLCONF GETACK * and expects REPLCONF ACK with the given offset."""

    def run(self, client: RespClient, logger: logging.Logger, offset: int) -> None:
        SendCommandTestCase(
            command="REPLCONF",
            args=["GETACK", "*"],
            assertion=CommandAssertion("REPLCONF", ["ACK", str(offset)]),
        ).run(client, logger)


@dataclass
class ZaddTestCase:
    """Adds one member to a sorted set and checks how many members were added."""

    key: str
    member_name: str
    score: float
    expected_added_members_count: int

    def run(self, client: RespClient, logger: logging.Logger) -> None:
        SendCommandTestCase(
            command="ZADD",
            args=[self.key, _format_fixed(self.score), self.member_name],
            assertion=IntegerAssertion(self.expected_added_members_count),
        ).run(client, logger)


@dataclass
class ZrangeTestCase:
    """Runs ZRANGE over an index range and checks the member names in order."""

    key: str
    start_index: int
    end_index: int
    expected_member_names: List[str] = field(default_factory=list)

    def run(self, client: RespClient, logger: logging.Logger) -> None:
        SendCommandTestCase(
            command="ZRANGE",
            args=[self.key, str(self.start_index), str(self.end_index)],
            assertion=OrderedStringArrayAssertion(self.expected_member_names),
        ).run(client, logger)