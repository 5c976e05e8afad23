"""The master's side of the replication handshake, played against a replica."""

from __future__ import annotations

import logging
from dataclasses import dataclass

from respcheck.array_assertions import CommandAssertion, OnlyCommandAssertion
from respcheck.receiving import ReceiveCommandTestCase, RespClient
from respcheck.values import AssertionFailed, RespValue, _quote

REPLICATION_ID = "75cd7bc10c49047e0d163660f3b90625b1af31dc"

# An empty RDB file, sent to the replica after FULLRESYNC.
EMPTY_RDB_HEX = (
    "524544495330303131fa0972656469732d76657205372e322e30fa0a72656469732d62697473c040"
    "fa056374696d65c26d08bc65fa08757365642d6d656dc2b0c41000fa08616f662d62617365c000ff"
    "f06e3bfec0ff5aa2"
)


def encode_full_resync_rdb_file(data: bytes) -> bytes:
    """Frame an RDB file the way a master sends it: like a bulk string, without the trailing CRLF."""
    payload = bytes(data)
    return b"$" + str(len(payload)).encode("ascii") + b"\r\n" + payload


@dataclass(frozen=True)
class ReceiveReplicationHandshakeTestCase:
    """Acts as a master while a replica performs the replication handshake.

    run_all performs every step in order; each step can also be run on its own.
    """

    def run_all(self, client: RespClient, logger: logging.Logger) -> None:
        self.run_ping_step(client, logger)
        self.run_replconf_step1(client, logger)
        self.run_replconf_step2(client, logger)
        self.run_psync_step(client, logger)
        self.run_send_rdb_step(client, logger)

    def run_ping_step(self, client: RespClient, logger: logging.Logger) -> None:
        client.logger.info("Waiting for replica to initiate handshake with %s command", _quote("PING"))
        ReceiveCommandTestCase(
            response=RespValue.simple_string("PONG"),
            assertion=CommandAssertion("PING"),
        ).run(client, logger)

    def run_replconf_step1(self, client: RespClient, logger: logging.Logger) -> None:
        client.logger.info(
            "Waiting for replica to send %s command", _quote("REPLCONF listening-port 6380")
        )
        ReceiveCommandTestCase(
            response=RespValue.simple_string("OK"),
            assertion=CommandAssertion("REPLCONF", ["listening-port", "6380"]),
            should_skip_unread_data_check=True,
        ).run(client, logger)

    def run_replconf_step2(self, client: RespClient, logger: logging.Logger) -> None:
        client.logger.info("Waiting for replica to send %s command", _quote("REPLCONF capa"))
        receive = ReceiveCommandTestCase(
            response=RespValue.simple_string("OK"),
            assertion=OnlyCommandAssertion("REPLCONF"),
        )
        receive.run(client, logger)

        received = receive.received_value
        assert received is not None
        elements = received.elements
        if len(elements) < 3:
            raise AssertionFailed(
                f"Expected array with at least 3 element, got {len(elements)} elements"
            )
        _check_capa(elements[1], "first")
        if len(elements) == 5:
            _check_capa(elements[3], "third")

    def run_psync_step(self, client: RespClient, logger: logging.Logger) -> None:
        client.logger.info("Waiting for replica to send %s command", _quote("PSYNC"))
        ReceiveCommandTestCase(
            response=RespValue.simple_string(f"FULLRESYNC {REPLICATION_ID} 0"),
            assertion=CommandAssertion("PSYNC", ["?", "-1"]),
        ).run(client, logger)

    def run_send_rdb_step(self, client: RespClient, logger: logging.Logger) -> None:
        client.logger.debug("Sending RDB file...")
        client.send_bytes(encode_full_resync_rdb_file(bytes.fromhex(EMPTY_RDB_HEX)))
        client.logger.info("Sent RDB file.")


def _check_capa(element: RespValue, ordinal: str) -> None:
    if not element.type.is_string:
        raise AssertionFailed(
            f"Expected {ordinal} replconf argument to be a string, got {element.type}"
        )
    if element.text.casefold() != "capa":
        raise AssertionFailed(
            f"Expected {ordinal} replconf argument to be {_quote('capa')}, "
            f"got {_quote(element.text.lower())}"
        )