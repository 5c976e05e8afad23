import logging
from collections import deque

import pytest

from respcheck.pubsub import PublishTestCase, SubscriberGroupTestCase, UnsubscribeTestCase
from respcheck.receiving import RespClient
from respcheck.values import AssertionFailed, RespValue

LOGGER = logging.getLogger("test-pubsub")


def _strings(*items):
    return [RespValue.bulk_string(item) for item in items]


class PubSubServer:
    def __init__(self):
        self.subscriptions = {}
        self.received = []

    def handle(self, client, command, args):
        self.received.append((client.identifier, command, *args))
        channels = self.subscriptions.setdefault(client, [])
        if command == "SUBSCRIBE":
            if args[0] not in channels:
                channels.append(args[0])
            client.inbox.append(
                RespValue.array(_strings("subscribe", args[0]) + [RespValue.integer(len(channels))])
            )
        elif command == "UNSUBSCRIBE":
            if args[0] in channels:
                channels.remove(args[0])
            client.inbox.append(
                RespValue.array(
                    _strings("unsubscribe", args[0]) + [RespValue.integer(len(channels))]
                )
            )
        elif command == "PUBLISH":
            channel, message = args
            receivers = [c for c, chans in self.subscriptions.items() if channel in chans]
            for receiver in receivers:
                receiver.inbox.append(RespValue.array(_strings("message", channel, message)))
            client.inbox.append(RespValue.integer(len(receivers)))


class ServerClient(RespClient):
    def __init__(self, server, identifier):
        super().__init__(identifier)
        self.server = server
        self.inbox = deque()
        self.sent_raw = []

    def send_command(self, command, *args):
        self.server.handle(self, command.upper(), list(args))

    def send_value(self, value):
        self.sent_raw.append(value)

    def send_bytes(self, data):
        self.sent_raw.append(bytes(data))

    def read_value(self):
        if not self.inbox:
            raise TimeoutError("no reply")
        return self.inbox.popleft()

    def read_into_buffer(self):
        while self.inbox:
            self.unread_buffer.extend(self.inbox.popleft().formatted_string().encode())


@pytest.fixture
def server():
    return PubSubServer()


def _spawn(server, count):
    return [ServerClient(server, f"client-{i + 1}") for i in range(count)]


def test_subscribe_two_clients_to_many_channels(server):
    clients = _spawn(server, 2)
    channels = ["foo", "bar", "baz", "qux"]
    group = SubscriberGroupTestCase()
    for channel in channels:
        group.add_subscription(clients[0], channel)
        group.add_subscription(clients[1], channel)
    group.run_subscribe(LOGGER)
    assert server.subscriptions[clients[0]] == channels
    assert server.subscriptions[clients[1]] == channels
    assert group.subscriber_count("bar") == 2


def test_publish_to_two_channels(server):
    clients = _spawn(server, 4)
    group = SubscriberGroupTestCase()
    group.add_subscription(clients[0], "mango").add_subscription(
        clients[1], "mango"
    ).add_subscription(clients[2], "grape")
    group.run_subscribe(LOGGER)

    assert group.subscriber_count("mango") == 2
    PublishTestCase("mango", "hello", group.subscriber_count("mango")).run(clients[3], LOGGER)
    group.run_assertion_for_published_message("mango", "hello", LOGGER)

    assert group.subscriber_count("grape") == 1
    PublishTestCase("grape", "world", group.subscriber_count("grape")).run(clients[3], LOGGER)
    group.run_assertion_for_published_message("grape", "world", LOGGER)


def test_unsubscribe_flow(server):
    clients = _spawn(server, 3)
    group = SubscriberGroupTestCase()
    group.add_subscription(clients[0], "a").add_subscription(clients[0], "b").add_subscription(
        clients[1], "b"
    ).add_subscription(clients[1], "c")
    group.run_subscribe(LOGGER)

    PublishTestCase("b", "first", group.subscriber_count("b")).run(clients[2], LOGGER)
    group.run_assertion_for_published_message("b", "first", LOGGER)

    group.remove_subscription(clients[0], "b")
    assert group.subscriber_count("b") == 1
    UnsubscribeTestCase("b", group.subscriber_count("b")).run(clients[0], LOGGER)

    PublishTestCase("b", "second", group.subscriber_count("b")).run(clients[2], LOGGER)
    group.run_assertion_for_published_message("b", "second", LOGGER)
    assert server.subscriptions[clients[0]] == ["a"]


def test_duplicate_subscription_is_ignored(server):
    clients = _spawn(server, 1)
    group = SubscriberGroupTestCase()
    group.add_subscription(clients[0], "x").add_subscription(clients[0], "x")
    group.run_subscribe(LOGGER)
    assert group.subscriber_count("x") == 1
    assert server.received == [("client-1", "SUBSCRIBE", "x")]


def test_removing_last_channel_drops_subscriber(server):
    clients = _spawn(server, 1)
    group = SubscriberGroupTestCase()
    group.add_subscription(clients[0], "x")
    group.remove_subscription(clients[0], "missing")
    group.remove_subscription(clients[0], "x")
    group.run_subscribe(LOGGER)
    assert group.subscriber_count("x") == 0
    assert server.received == []


def test_wrong_message_fails(server):
    clients = _spawn(server, 2)
    group = SubscriberGroupTestCase().add_subscription(clients[0], "x")
    group.run_subscribe(LOGGER)
    PublishTestCase("x", "actual", 1).run(clients[1], LOGGER)
    with pytest.raises(AssertionFailed, match="actual"):
        group.run_assertion_for_published_message("x", "expected", LOGGER)


def test_non_subscriber_receiving_message_fails(server):
    clients = _spawn(server, 3)
    group = SubscriberGroupTestCase().add_subscription(clients[0], "x").add_subscription(
        clients[1], "y"
    )
    group.run_subscribe(LOGGER)
    # The server knows client-2 as a subscriber of "x" too, unlike the group.
    server.subscriptions[clients[1]].append("x")
    PublishTestCase("x", "hi", 2).run(clients[2], LOGGER)
    with pytest.raises(AssertionFailed, match="client-2 received unexpected response"):
        group.run_assertion_for_published_message("x", "hi", LOGGER)


def test_publish_wrong_count_fails(server):
    clients = _spawn(server, 1)
    with pytest.raises(AssertionFailed, match="Expected 3, got 0"):
        PublishTestCase("nobody", "hi", 3).run(clients[0], LOGGER)


def test_unsubscribe_wrong_count_fails(server):
    clients = _spawn(server, 1)
    with pytest.raises(AssertionFailed, match="Expected 5, got 0"):
        UnsubscribeTestCase("x", 5).run(clients[0], LOGGER)