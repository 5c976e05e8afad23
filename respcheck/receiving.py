"""Test cases that read values from a RESP connection."""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Optional

from respcheck.values import AssertionFailed, RespAssertion, RespValue, _quote


def _quote_bytes(data: bytes) -> str:
    return _quote(bytes(data).decode("utf-8", "backslashreplace"))


class RespClient(ABC):
    """A RESP connection that test cases send to and read from."""

    def __init__(self, identifier: str, logger: Optional[logging.Logger] = None) -> None:
        self.identifier = identifier
        self.logger = logger or logging.getLogger(f"respcheck.{identifier}")
        self.unread_buffer = bytearray()

    @abstractmethod
    def send_command(self, command: str, *args: str) -> None:
        """Send a command with its arguments."""

    @abstractmethod
    def send_value(self, value: RespValue) -> None:
        """Send an encoded RESP value."""

    @abstractmethod
    def send_bytes(self, data: bytes) -> None:
        """Send raw bytes."""

    @abstractmethod
    def read_value(self) -> RespValue:
        """Read the next complete value, raising on failure."""

    @abstractmethod
    def read_into_buffer(self) -> None:
        """Read whatever data is waiting into unread_buffer."""


@dataclass
class ReceiveValueTestCase:
    """Reads one value and checks it, optionally making sure nothing else followed."""

    assertion: RespAssertion
    should_skip_unread_data_check: bool = False
    actual_value: Optional[RespValue] = None

    def run(self, client: RespClient, logger: logging.Logger) -> None:
        self.run_without_assert(client)
        self.assert_received(client, logger)

    def run_without_assert(self, client: RespClient) -> None:
        self.actual_value = client.read_value()

    def assert_received(self, client: RespClient, logger: logging.Logger) -> None:
        if self.actual_value is None:
            raise AssertionFailed("No value has been received")
        self.assertion.run(self.actual_value)
        if not self.should_skip_unread_data_check:
            client.read_into_buffer()
            if client.unread_buffer:
                raise AssertionFailed(f"Found extra data: {_quote_bytes(client.unread_buffer)}")
        client.logger.info("✔︎ Received %s", self.actual_value.formatted_string())


@dataclass
class ReceiveCommandTestCase:
    """Reads a command, checks it, and answers it with a fixed response."""

    response: RespValue
    assertion: RespAssertion
    should_skip_unread_data_check: bool = False
    received_value: Optional[RespValue] = None

    def run(self, client: RespClient, logger: logging.Logger) -> None:
        receive = ReceiveValueTestCase(
            assertion=self.assertion,
            should_skip_unread_data_check=self.should_skip_unread_data_check,
        )
        try:
            receive.run(client, logger)
        finally:
            self.received_value = receive.actual_value
        client.send_value(self.response)


@dataclass
class NoResponseTestCase:
    """Checks that nothing has arrived on the connection yet."""

    def run(self, client: RespClient) -> None:
        client.logger.info("Expecting no response")
        client.read_into_buffer()
        if client.unread_buffer:
            raise AssertionFailed(
                f"{client.identifier} received unexpected response: "
                f"{_quote_bytes(client.unread_buffer)}"
            )
        client.logger.info("✔︎ No response received yet")