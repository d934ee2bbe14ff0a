"""Host environment abstraction.

The plugin never talks to the editor directly. Everything that needs the
editor (notifications, user events, buffer options, the repeat command) goes
through a :class:`HostEnvironment`, which callers implement for their
platform. :class:`EventBusHost` is an in-process implementation backed by an
:class:`~codecompanion.events.EventBus`, used by the CLI and the tests.
"""

from __future__ import annotations

import logging
import sys
from enum import IntEnum
from typing import Any, Callable, Mapping, Protocol, runtime_checkable

from .config import Settings
from .events import (
    BufferOptionChanged,
    CompanionEvent,
    EventBus,
    NoticePosted,
    RepeatableRegistered,
)

__all__ = [
    "EVENT_PREFIX",
    "LogLevel",
    "HostEnvironment",
    "EventBusHost",
    "fire",
    "notify",
    "detect_operating_system",
    "set_option",
    "set_dot_repeat",
]

LOGGER = logging.getLogger(__name__)
EVENT_PREFIX = "CodeCompanion"
_UNIX_PLATFORMS = ("linux", "freebsd", "openbsd", "netbsd", "dragonfly", "sunos", "aix")


class LogLevel(IntEnum):
    """Notification severities, numbered like the editor's own log levels."""

    TRACE = 0
    DEBUG = 1
    INFO = 2
    WARN = 3
    ERROR = 4
    OFF = 5

    @classmethod
    def coerce(cls, value: "LogLevel | int | str | None") -> "LogLevel":
        if value is None:
            return cls.INFO
        if isinstance(value, cls):
            return value
        if isinstance(value, int):
            return cls(value)
        name = str(value).strip().upper()
        if name == "WARNING":
            name = "WARN"
        try:
            return cls[name]
        except KeyError:
            raise ValueError(f"Unknown log level: {value!r}") from None

    def as_logging_level(self) -> int:
        return _LOGGING_LEVELS[self]


_LOGGING_LEVELS: Mapping[LogLevel, int] = {
    LogLevel.TRACE: logging.DEBUG,
    LogLevel.DEBUG: logging.DEBUG,
    LogLevel.INFO: logging.INFO,
    LogLevel.WARN: logging.WARNING,
    LogLevel.ERROR: logging.ERROR,
    LogLevel.OFF: logging.NOTSET,
}


@runtime_checkable
class HostEnvironment(Protocol):
    """Capabilities the plugin needs from the editor it runs in."""

    def notify(self, message: str, level: LogLevel) -> None:
        ...

    def emit_event(self, name: str, payload: Mapping[str, Any]) -> None:
        ...

    def get_operating_system(self) -> str:
        ...

    def set_buffer_option(self, buffer_id: int, name: str, value: Any) -> None:
        ...

    def register_repeatable(self, name: str, callback: Callable[[], Any]) -> None:
        ...


def fire(host: HostEnvironment, event: str, payload: Mapping[str, Any] | None = None) -> None:
    """Emit the user event ``CodeCompanion<event>`` through ``host``."""

    host.emit_event(EVENT_PREFIX + event, dict(payload or {}))


def notify(host: HostEnvironment, message: str, level: LogLevel | int | str | None = None) -> None:
    """Show ``message`` to the user; ``level`` defaults to INFO."""

    host.notify(message, LogLevel.coerce(level))


def detect_operating_system(platform: str | None = None) -> str:
    """Return ``"Windows"``, ``"macOS"``, ``"Unix"`` or ``"Unknown"``."""

    name = (platform if platform is not None else sys.platform).lower()
    if name.startswith(("win32", "cygwin", "msys")):
        return "Windows"
    if name.startswith("darwin"):
        return "macOS"
    if name.startswith(_UNIX_PLATFORMS):
        return "Unix"
    return "Unknown"


def set_option(host: HostEnvironment, buffer_id: int, name: str, value: Any) -> None:
    """Set a buffer-local option through ``host``."""

    host.set_buffer_option(buffer_id, name, value)


def set_dot_repeat(host: HostEnvironment, name: str, callback: Callable[[], Any]) -> None:
    """Make ``callback`` the action replayed by the host's repeat command."""

    host.register_repeatable(name, callback)


class EventBusHost:
    """In-process host that turns every capability into an event on a bus."""

    def __init__(
        self,
        bus: EventBus | None = None,
        *,
        title: str = "CodeCompanion",
        platform: str | None = None,
    ) -> None:
        self._bus: EventBus = bus or EventBus()
        self._title = title
        self._platform = platform
        self._buffer_options: dict[int, dict[str, Any]] = {}
        self._repeatables: dict[str, Callable[[], Any]] = {}
        self._last_repeatable: str | None = None

    @classmethod
    def from_settings(cls, settings: Settings, bus: EventBus | None = None) -> EventBusHost:
        return cls(bus, title=settings.notification_title)

    @property
    def bus(self) -> EventBus:
        return self._bus

    def notify(self, message: str, level: LogLevel) -> None:
        level = LogLevel.coerce(level)
        if level is LogLevel.OFF:
            return
        LOGGER.log(level.as_logging_level(), "[%s] %s", self._title, message)
        self._bus.publish(NoticePosted(message=message, level=int(level), title=self._title))

    def emit_event(self, name: str, payload: Mapping[str, Any]) -> None:
        self._bus.publish(CompanionEvent(pattern=name, data=dict(payload)))

    def get_operating_system(self) -> str:
        return detect_operating_system(self._platform)

    def set_buffer_option(self, buffer_id: int, name: str, value: Any) -> None:
        self._buffer_options.setdefault(buffer_id, {})[name] = value
        self._bus.publish(BufferOptionChanged(buffer_id=buffer_id, name=name, value=value))

    def buffer_option(self, buffer_id: int, name: str, default: Any = None) -> Any:
        return self._buffer_options.get(buffer_id, {}).get(name, default)

    def register_repeatable(self, name: str, callback: Callable[[], Any]) -> None:
        self._repeatables[name] = callback
        self._last_repeatable = name
        self._bus.publish(RepeatableRegistered(name=name))

    def repeat_last(self) -> Any:
        """Invoke the most recently registered repeatable action, if any."""

        if self._last_repeatable is None:
            LOGGER.debug("Repeat requested with no registered action")
            return None
        return self._repeatables[self._last_repeatable]()
