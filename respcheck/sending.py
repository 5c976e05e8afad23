"""Test cases that send commands and check the replies."""

from __future__ import annotations

import logging
import threading
import time
from dataclasses import dataclass, field
from typing import Callable, List, Optional, Sequence

from respcheck.receiving import ReceiveValueTestCase, RespClient
from respcheck.values import RespAssertion, RespValue


@dataclass
class SendCommandTestCase:
    """Sends one command, reads the reply and checks it, retrying if asked to."""

    command: str
    args: Sequence[str]
    assertion: RespAssertion
    should_skip_unread_data_check: bool = False
    retries: int = 0
    should_retry: Optional[Callable[[RespValue], bool]] = None
    retry_interval: float = 0.5
    received_response: Optional[RespValue] = None
    _read_lock: threading.Lock = field(
        default_factory=threading.Lock, init=False, repr=False, compare=False
    )

    def run(self, client: RespClient, logger: logging.Logger) -> None:
        if self.retries and self.should_retry is None:
            raise ValueError(
                f"Received SendCommand with retries: {self.retries} but no should_retry."
            )
        receive = ReceiveValueTestCase(
            assertion=self.assertion,
            should_skip_unread_data_check=self.should_skip_unread_data_check,
        )
        for attempt in range(self.retries + 1):
            if attempt > 0:
                logger.info("Retrying... (%d/%d attempts)", attempt, self.retries)
            client.send_command(self.command.upper(), *self.args)
            with self._read_lock:
                receive.run_without_assert(client)
            if self.retries == 0:
                break
            assert self.should_retry is not None
            if not self.should_retry(receive.actual_value):
                break
            time.sleep(self.retry_interval)
        self.received_response = receive.actual_value
        receive.assert_received(client, logger)

    def pause_reading_response(self) -> None:
        """Hold back reading the reply until resume_reading_response is called."""
        self._read_lock.acquire()

    def resume_reading_response(self) -> None:
        self._read_lock.release()


@dataclass
class CommandWithAssertion:
    """A command (name followed by arguments) and the check for its reply."""

    command: Sequence[str]
    assertion: RespAssertion


@dataclass
class MultiCommandTestCase:
    """Runs several commands in order, stopping at the first failure."""

    command_with_assertions: List[CommandWithAssertion] = field(default_factory=list)

    def run_all(self, client: RespClient, logger: logging.Logger) -> None:
        for item in self.command_with_assertions:
            name, *args = item.command
            SendCommandTestCase(command=name, args=args, assertion=item.assertion).run(
                client, logger
            )