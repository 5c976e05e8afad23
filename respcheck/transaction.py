"""A MULTI/EXEC transaction as a test case."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import List, Sequence

from respcheck.array_assertions import OrderedArrayAssertion
from respcheck.receiving import RespClient
from respcheck.scalar_assertions import StringAssertion
from respcheck.sending import SendCommandTestCase
from respcheck.values import RespAssertion


@dataclass
class TransactionTestCase:
    """Sends MULTI, queues each command expecting QUEUED, then EXEC.

    The EXEC reply is checked element by element against expected_response_array.
    """

    command_queue: List[Sequence[str]] = field(default_factory=list)
    expected_response_array: List[RespAssertion] = field(default_factory=list)

    def run_all(self, client: RespClient, logger: logging.Logger) -> None:
        self.run_multi(client, logger)
        self.run_queue_all(client, logger)
        self.run_exec(client, logger)

    def run_without_exec(self, client: RespClient, logger: logging.Logger) -> None:
        self.run_multi(client, logger)
        self.run_queue_all(client, logger)

    def run_multi(self, client: RespClient, logger: logging.Logger) -> None:
        SendCommandTestCase(command="MULTI", args=[], assertion=StringAssertion("OK")).run(
            client, logger
        )

    def run_queue_all(self, client: RespClient, logger: logging.Logger) -> None:
        total = len(self.command_queue)
        for position, queued in enumerate(self.command_queue, start=1):
            logger.debug("Sending command: %d/%d", position, total)
            name, *args = queued
            SendCommandTestCase(
                command=name, args=args, assertion=StringAssertion("QUEUED")
            ).run(client, logger)

    def run_exec(self, client: RespClient, logger: logging.Logger) -> None:
        SendCommandTestCase(
            command="EXEC",
            args=[],
            assertion=OrderedArrayAssertion(self.expected_response_array),
        ).run(client, logger)