# respcheck

Assertions and scripted test cases for checking a Redis-compatible server
over the RESP protocol.

## Values

`respcheck.values` holds the building blocks:

- `RespType`: the kinds of value (`SIMPLE_STRING`, `BULK_STRING`,
  `INTEGER`, `ERROR`, `ARRAY`, `NIL`, `NIL_ARRAY`).
- `RespValue`: an immutable decoded value, built with the class methods
  `simple_string`, `bulk_string`, `integer`, `error`, `array`, `nil` and
  `nil_array`. Its content is read through `text`, `number`, `message` and
  `elements` (reading the wrong one raises `TypeError`), and
  `formatted_string()` renders it for messages.
- `RespAssertion`: the abstract base of every assertion, with one method,
  `run(value)`.
- `AssertionFailed`: the exception an assertion or test case raises when
  what it received does not match.

## Assertions

- scalars (`respcheck.scalar_assertions`): `StringAssertion`,
  `SimpleStringAssertion`, `IntegerAssertion`, `ErrorAssertion`,
  `RegexStringAssertion`, `RegexErrorAssertion`,
  `FloatingPointBulkStringAssertion` (value within a tolerance),
  `NilAssertion`, `NilArrayAssertion`, `NoopAssertion`
- arrays (`respcheck.array_assertions`): `CommandAssertion`,
  `OnlyCommandAssertion`, `OrderedArrayAssertion`,
  `OrderedStringArrayAssertion`, `UnorderedStringArrayAssertion`,
  `SubscribeResponseAssertion`, `PublishedMessageAssertion`
- streams (`respcheck.stream_assertions`): `XRangeResponseAssertion` and
  `XReadResponseAssertion`, built from `StreamEntry` and `StreamResponse`

```python
from respcheck.values import RespValue, AssertionFailed
from respcheck.scalar_assertions import IntegerAssertion
from respcheck.array_assertions import OrderedStringArrayAssertion

IntegerAssertion(3).run(RespValue.integer(3))

reply = RespValue.array([RespValue.bulk_string("a"), RespValue.bulk_string("b")])
OrderedStringArrayAssertion(["a", "b"]).run(reply)

try:
    IntegerAssertion(1).run(RespValue.integer(2))
except AssertionFailed as exc:
    print(exc)  # Expected 1, got 2
```

## Test cases

Test cases drive a connection given as a subclass of `RespClient`
(`respcheck.receiving`). A subclass has `identifier`, `logger` and
`unread_buffer`, and implements `send_command`, `send_value`,
`send_bytes`, `read_value` and `read_into_buffer`. Test cases send
commands, read replies and run assertions on them, raising
`AssertionFailed` on a mismatch:

- `SendCommandTestCase` and `MultiCommandTestCase` (`respcheck.sending`).
  `SendCommandTestCase` can retry through `retries` and `should_retry`;
  asking for retries without `should_retry` raises `ValueError`.
- `ReceiveValueTestCase`, `ReceiveCommandTestCase` and `NoResponseTestCase`
  (`respcheck.receiving`). Unless told to skip the check, they fail if
  extra data follows the value.
- `TransactionTestCase` (`respcheck.transaction`): MULTI, queued commands
  each expecting QUEUED, then EXEC.
- `BlockingClientGroupTestCase` (`respcheck.blocking`): blocking commands
  such as BLPOP or XREAD BLOCK from several clients, then checks which
  clients got a reply.
- `SubscriberGroupTestCase`, `PublishTestCase` and `UnsubscribeTestCase`
  (`respcheck.pubsub`).
- `WaitTestCase`, `GetAckTestCase`, `ZaddTestCase` and `ZrangeTestCase`
  (`respcheck.commands`).
- `ReceiveReplicationHandshakeTestCase` (`respcheck.handshake`): plays the
  master side of the replication handshake (PING, two REPLCONF, PSYNC) and
  sends an empty RDB file framed by `encode_full_resync_rdb_file`.
- `BindTestCase` (`respcheck.bind`): connects to a TCP port, retrying until
  it succeeds, retries run out (the `OSError` is raised again), or the
  `has_exited` callable reports that the server process has gone
  (`ConnectionError`).

```python
from respcheck.sending import MultiCommandTestCase, CommandWithAssertion
from respcheck.scalar_assertions import IntegerAssertion, StringAssertion

case = MultiCommandTestCase([
    CommandWithAssertion(["RPUSH", "fruits", "apple", "pear"], IntegerAssertion(2)),
    CommandWithAssertion(["LPOP", "fruits"], StringAssertion("apple")),
])
case.run_all(client, logger)
```

## What it does not do

- It has no RESP encoder, decoder or socket client: `RespClient` is
  abstract, and you supply the connection that reads and writes the wire
  format.
- It does not start or stop the server under test; `BindTestCase` only
  waits for one that is already starting.
- It does not parse RDB files; the handshake only sends a fixed empty one.
- It has no command-line tool and no list of stages to run; you compose
  the test cases yourself.

## Installing

```
pip install respcheck
```

The package needs Python 3.10 or later and has no other dependencies.