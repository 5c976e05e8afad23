"""A group of clients that issue blocking commands and the replies each should get."""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass
from typing import List, Optional, Sequence

from respcheck.receiving import NoResponseTestCase, ReceiveValueTestCase, RespClient
from respcheck.values import RespAssertion


@dataclass
class _BlockingClient:
    client: RespClient
    command: str
    args: Sequence[str]
    # None means the client is expected to get no reply at all.
    assertion: Optional[RespAssertion]


class BlockingClientGroupTestCase:
    """Sends blocking commands from several clients, then checks who got a reply."""

    def __init__(self, send_interval: float = 0.001) -> None:
        self.send_interval = send_interval
        self._clients: List[_BlockingClient] = []

    def add_client_with_expected_response(
        self,
        client: RespClient,
        command: str,
        args: Sequence[str],
        assertion: RespAssertion,
    ) -> "BlockingClientGroupTestCase":
        self._clients.append(_BlockingClient(client, command, tuple(args), assertion))
        return self

    def add_client_with_no_expected_response(
        self, client: RespClient, command: str, args: Sequence[str]
    ) -> "BlockingClientGroupTestCase":
        self._clients.append(_BlockingClient(client, command, tuple(args), None))
        return self

    def send_blocking_commands(self) -> None:
        """Send every command in the order the clients were added."""
        for entry in self._clients:
            entry.client.send_command(entry.command, *entry.args)
            # Give the server a moment so it receives the commands in order.
            time.sleep(self.send_interval)

    def assert_responses(self, logger: logging.Logger) -> None:
        """Check the replies, most recently added client first."""
        for entry in reversed(self._clients):
            if entry.assertion is None:
                NoResponseTestCase().run(entry.client)
            else:
                entry.client.logger.info("Expecting response of %s command", entry.command)
                ReceiveValueTestCase(assertion=entry.assertion).run(entry.client, logger)