import logging
from collections import deque

import pytest

from respcheck.receiving import RespClient
from respcheck.scalar_assertions import ErrorAssertion, IntegerAssertion, NilAssertion, StringAssertion
from respcheck.sending import SendCommandTestCase
from respcheck.transaction import TransactionTestCase
from respcheck.values import AssertionFailed, RespValue

LOGGER = logging.getLogger("tests.transaction")
NOT_INTEGER = "ERR value is not an integer or out of range"


class TransactionalClient(RespClient):
    """A connection to an in-memory store that supports MULTI/EXEC."""

    def __init__(self, store, identifier="client"):
        super().__init__(identifier)
        self.store = store
        self.queue = None
        self.replies = deque()
        self.sent = []

    def _execute(self, command, args):
        if command == "SET":
            self.store[args[0]] = args[1]
            return RespValue.simple_string("OK")
        if command == "GET":
            if args[0] not in self.store:
                return RespValue.nil()
            return RespValue.bulk_string(self.store[args[0]])
        if command == "INCR":
            try:
                number = int(self.store.get(args[0], "0")) + 1
            except ValueError:
                return RespValue.error(NOT_INTEGER)
            self.store[args[0]] = str(number)
            return RespValue.integer(number)
        return RespValue.error(f"ERR unknown command '{command}'")

    def send_command(self, command, *args):
        self.sent.append([command, *args])
        if command == "MULTI":
            self.queue = []
            reply = RespValue.simple_string("OK")
        elif command == "EXEC":
            if self.queue is None:
                reply = RespValue.error("ERR EXEC without MULTI")
            else:
                queued, self.queue = self.queue, None
                reply = RespValue.array(self._execute(c, a) for c, a in queued)
        elif self.queue is not None:
            self.queue.append((command, list(args)))
            reply = RespValue.simple_string("QUEUED")
        else:
            reply = self._execute(command, list(args))
        self.replies.append(reply)

    def send_value(self, value):
        self.sent.append(value)

    def send_bytes(self, data):
        self.sent.append(bytes(data))

    def read_value(self):
        return self.replies.popleft()

    def read_into_buffer(self):
        pass


def test_empty_transaction_then_bare_exec():
    client = TransactionalClient({})
    TransactionTestCase().run_all(client, LOGGER)
    bare_exec = SendCommandTestCase(
        command="EXEC", args=[], assertion=ErrorAssertion("ERR EXEC without MULTI")
    )
    bare_exec.run(client, LOGGER)
    assert client.sent == [["MULTI"], ["EXEC"], ["EXEC"]]
    assert bare_exec.received_response == RespValue.error("ERR EXEC without MULTI")


def test_queued_commands_are_not_visible_to_other_clients():
    store = {}
    first = TransactionalClient(store, "client-1")
    second = TransactionalClient(store, "client-2")
    TransactionTestCase(command_queue=[["SET", "apple", "41"], ["INCR", "apple"]]).run_without_exec(
        first, LOGGER
    )
    get = SendCommandTestCase(command="GET", args=["apple"], assertion=NilAssertion())
    get.run(second, LOGGER)
    assert get.received_response == RespValue.nil()
    assert store == {}


def test_failed_command_inside_transaction():
    store = {}
    first = TransactionalClient(store, "client-1")
    second = TransactionalClient(store, "client-2")
    SendCommandTestCase(command="SET", args=["apple", "banana"], assertion=StringAssertion("OK")).run(first, LOGGER)
    SendCommandTestCase(command="SET", args=["grape", "42"], assertion=StringAssertion("OK")).run(first, LOGGER)
    TransactionTestCase(
        command_queue=[["INCR", "apple"], ["INCR", "grape"]],
        expected_response_array=[ErrorAssertion(NOT_INTEGER), IntegerAssertion(43)],
    ).run_all(first, LOGGER)
    get_grape = SendCommandTestCase(command="GET", args=["grape"], assertion=StringAssertion("43"))
    get_grape.run(second, LOGGER)
    get_apple = SendCommandTestCase(command="GET", args=["apple"], assertion=StringAssertion("banana"))
    get_apple.run(second, LOGGER)
    assert get_grape.received_response == RespValue.bulk_string("43")
    assert get_apple.received_response == RespValue.bulk_string("banana")
    assert store == {"apple": "banana", "grape": "43"}


def test_exec_reply_mismatch_raises():
    client = TransactionalClient({"grape": "1"})
    case = TransactionTestCase(
        command_queue=[["INCR", "grape"]], expected_response_array=[IntegerAssertion(5)]
    )
    with pytest.raises(AssertionFailed, match="Expected 5, got 2"):
        case.run_all(client, LOGGER)