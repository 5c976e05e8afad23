"""Pub/sub test cases: subscriber groups, PUBLISH and UNSUBSCRIBE."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import List

from respcheck.array_assertions import (
    OrderedArrayAssertion,
    PublishedMessageAssertion,
    SubscribeResponseAssertion,
)
from respcheck.receiving import NoResponseTestCase, ReceiveValueTestCase, RespClient
from respcheck.scalar_assertions import IntegerAssertion, StringAssertion
from respcheck.sending import CommandWithAssertion, MultiCommandTestCase, SendCommandTestCase
from respcheck.values import _quote


@dataclass
class _Subscriber:
    client: RespClient
    channels: List[str] = field(default_factory=list)


class SubscriberGroupTestCase:
    """Tracks which client subscribes to which channels and checks deliveries."""

    def __init__(self) -> None:
        self._subscribers: List[_Subscriber] = []

    def _find(self, client: RespClient) -> int:
        return next(
            (i for i, sub in enumerate(self._subscribers) if sub.client is client), -1
        )

    def add_subscription(self, client: RespClient, channel: str) -> "SubscriberGroupTestCase":
        position = self._find(client)
        if position == -1:
            self._subscribers.append(_Subscriber(client, [channel]))
        elif channel not in self._subscribers[position].channels:
            self._subscribers[position].channels.append(channel)
        return self

    def remove_subscription(
        self, client: RespClient, channel: str
    ) -> "SubscriberGroupTestCase":
        """Drop a subscription; unknown clients or channels are ignored."""
        position = self._find(client)
        if position == -1:
            return self
        subscriber = self._subscribers[position]
        if channel not in subscriber.channels:
            return self
        subscriber.channels.remove(channel)
        if not subscriber.channels:
            del self._subscribers[position]
        return self

    def subscriber_count(self, channel: str) -> int:
        return sum(1 for sub in self._subscribers if channel in sub.channels)

    def run_subscribe(self, logger: logging.Logger) -> None:
        """Have each client subscribe to its channels, checking the running count."""
        for subscriber in self._subscribers:
            MultiCommandTestCase(
                [
                    CommandWithAssertion(
                        command=["SUBSCRIBE", channel],
                        assertion=SubscribeResponseAssertion(channel, count),
                    )
                    for count, channel in enumerate(subscriber.channels, start=1)
                ]
            ).run_all(subscriber.client, logger)

    def run_assertion_for_published_message(
        self, channel: str, message: str, logger: logging.Logger
    ) -> None:
        """Subscribers of the channel must get the message; the others nothing."""
        for subscriber in self._subscribers:
            if channel in subscriber.channels:
                subscriber.client.logger.info(
                    "Expecting published message: %s", _quote(message)
                )
                ReceiveValueTestCase(
                    assertion=PublishedMessageAssertion(channel, message)
                ).run(subscriber.client, logger)
            else:
                NoResponseTestCase().run(subscriber.client)


@dataclass
class PublishTestCase:
    """Publishes a message and checks how many subscribers the server reports."""

    channel: str
    message: str
    expected_subscriber_count: int

    def run(self, client: RespClient, logger: logging.Logger) -> None:
        SendCommandTestCase(
            command="PUBLISH",
            args=[self.channel, self.message],
            assertion=IntegerAssertion(self.expected_subscriber_count),
        ).run(client, logger)


@dataclass
class UnsubscribeTestCase:
    """Unsubscribes from a channel and checks the reply."""

    channel: str
    expected_subscriber_count_after_unsubscribe: int

    def run(self, client: RespClient, logger: logging.Logger) -> None:
        SendCommandTestCase(
            command="UNSUBSCRIBE",
            args=[self.channel],
            assertion=OrderedArrayAssertion(
                [
                    StringAssertion("unsubscribe"),
                    StringAssertion(self.channel),
                    IntegerAssertion(self.expected_subscriber_count_after_unsubscribe),
                ]
            ),
        ).run(client, logger)