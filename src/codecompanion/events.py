"""Event bus used by the in-process host environment.

Handlers subscribe either to an event class or, for :class:`CompanionEvent`,
to a pattern such as ``"CodeCompanionChatOpened"`` or ``"CodeCompanion*"``,
mirroring how editor autocommands select user events by name. Bound methods
are held weakly so a discarded subscriber does not keep itself alive.
"""

from __future__ import annotations

import inspect
import logging
from dataclasses import dataclass, field
from fnmatch import fnmatchcase
from typing import Any, Callable, Union
from weakref import WeakMethod

__all__ = [
    "Event",
    "EventBus",
    "Handler",
    "Topic",
    "CompanionEvent",
    "NoticePosted",
    "BufferOptionChanged",
    "RepeatableRegistered",
]

logger = logging.getLogger(__name__)

Handler = Callable[[Any], None]


@dataclass(slots=True)
class Event:
    """Base class for all events published on an :class:`EventBus`."""


@dataclass(slots=True)
class CompanionEvent(Event):
    """A named plugin event, e.g. ``CodeCompanionChatOpened``.

    Attributes:
        pattern: Full event name including the ``CodeCompanion`` prefix.
        data: Arbitrary payload supplied by the emitter.
    """

    pattern: str
    data: dict[str, Any] = field(default_factory=dict)


@dataclass(slots=True)
class NoticePosted(Event):
    """Emitted when a notification should be shown to the user.

    Attributes:
        message: The notice text.
        level: Numeric severity (see :class:`codecompanion.host.LogLevel`).
        title: Heading shown alongside the message.
    """

    message: str
    level: int
    title: str = "CodeCompanion"


@dataclass(slots=True)
class BufferOptionChanged(Event):
    """Emitted after a buffer-local option is set."""

    buffer_id: int
    name: str
    value: Any


@dataclass(slots=True)
class RepeatableRegistered(Event):
    """Emitted when an action becomes the target of the repeat command."""

    name: str


# An event class, or a glob over CompanionEvent.pattern.
Topic = Union[type[Event], str]


@dataclass(slots=True)
class _Subscription:
    target: Any
    weak: bool

    @classmethod
    def for_handler(cls, handler: Handler) -> _Subscription:
        if inspect.ismethod(handler):
            return cls(WeakMethod(handler), weak=True)
        return cls(handler, weak=False)

    def handler(self) -> Handler | None:
        return self.target() if self.weak else self.target

    def is_for(self, handler: Handler) -> bool:
        current = self.handler()
        return current is not None and current == handler


class EventBus:
    """Synchronous publish/subscribe bus keyed by event class or pattern.

    Handlers run in registration order: class subscribers first, then pattern
    subscribers for :class:`CompanionEvent`. A handler that raises is logged
    and the rest still run. Not thread-safe; use from the host's main thread.
    """

    __slots__ = ("_subscriptions",)

    def __init__(self) -> None:
        self._subscriptions: dict[Topic, list[_Subscription]] = {}

    def subscribe(self, topic: Topic, handler: Handler) -> None:
        """Register ``handler`` for ``topic``; registering twice means two calls."""
        self._subscriptions.setdefault(topic, []).append(_Subscription.for_handler(handler))
        logger.debug("Subscribed %s to %s", _describe(handler), _topic_name(topic))

    def unsubscribe(self, topic: Topic, handler: Handler) -> None:
        """Remove the first registration of ``handler`` for ``topic``, if any."""
        subscriptions = self._subscriptions.get(topic, [])
        for index, subscription in enumerate(subscriptions):
            if subscription.is_for(handler):
                del subscriptions[index]
                return

    def publish(self, event: Event) -> None:
        """Deliver ``event`` to its class subscribers and matching pattern subscribers."""
        topics: list[Topic] = [type(event)]
        if isinstance(event, CompanionEvent):
            topics.extend(
                topic
                for topic in self._subscriptions
                if isinstance(topic, str) and fnmatchcase(event.pattern, topic)
            )
        delivered = 0
        for topic in topics:
            delivered += self._deliver(topic, event)
        if not delivered:
            logger.debug("No handlers for %s", _event_name(event))

    def clear(self) -> None:
        """Remove all registered handlers."""
        self._subscriptions.clear()

    def handler_count(self, topic: Topic | None = None) -> int:
        """Return the number of live handlers for ``topic``, or across all topics."""
        if topic is not None:
            return sum(1 for sub in self._subscriptions.get(topic, []) if sub.handler() is not None)
        return sum(self.handler_count(key) for key in list(self._subscriptions))

    def _deliver(self, topic: Topic, event: Event) -> int:
        subscriptions = self._subscriptions.get(topic)
        if not subscriptions:
            return 0
        live = [sub for sub in subscriptions if sub.handler() is not None]
        if len(live) != len(subscriptions):
            self._subscriptions[topic] = live
        for subscription in live:
            handler = subscription.handler()
            if handler is None:
                continue
            try:
                handler(event)
            except Exception:
                logger.exception("Handler %s failed on %s", _describe(handler), _event_name(event))
        return len(live)


def _describe(handler: Handler) -> str:
    return getattr(handler, "__qualname__", None) or repr(handler)


def _topic_name(topic: Topic) -> str:
    return topic if isinstance(topic, str) else topic.__name__


def _event_name(event: Event) -> str:
    if isinstance(event, CompanionEvent):
        return event.pattern
    return type(event).__name__
