"""A test case that waits for a server to accept TCP connections."""

from __future__ import annotations

import logging
import socket
import time
from dataclasses import dataclass
from typing import Callable


@dataclass
class BindTestCase:
    """Connects to a port, retrying while the server is still starting up."""

    port: int
    retries: int
    host: str = "localhost"
    retry_interval: float = 1.0

    def run(self, has_exited: Callable[[], bool], logger: logging.Logger) -> None:
        """Connect, raising once retries run out or the server process has exited."""
        logger.info("Connecting to port %d...", self.port)
        attempts = 0
        while True:
            try:
                connection = socket.create_connection((self.host, self.port))
            except OSError:
                if attempts > self.retries:
                    logger.info("All retries failed.")
                    raise
                if has_exited():
                    raise ConnectionError(f"Failed to connect to port {self.port}.") from None
                if attempts > 2:
                    logger.info("Failed to connect to port %d, retrying in 1s", self.port)
                attempts += 1
                time.sleep(self.retry_interval)
            else:
                connection.close()
                break
        logger.debug("Connection successful")