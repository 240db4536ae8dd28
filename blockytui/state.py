"""Application state types shared by the UI, the update loop and the actions."""

from __future__ import annotations

import enum
from dataclasses import dataclass

from blockytui.port_check import PortState


class ActionState(enum.Enum):
    """Outcome of a long-running request such as a list refresh."""

    SUCCESS = "success"
    FAILURE = "failure"
    WAITING = "waiting"


class ApiQueryResponseState(enum.Enum):
    """Result of a DNS query sent through the blocky API."""

    HEALTHY = "healthy"
    """DNS is properly working."""
    UNHEALTHY = "unhealthy"
    """A wrong or failing DNS response was received."""
    NO_RESPONSE = "no_response"
    """The API did not answer the query."""


@dataclass
class DNSStatus:
    """State of the blocky DNS server: both ports and the API query result."""

    query_response_state: ApiQueryResponseState | None = None
    tcp_port_state: PortState | None = None
    udp_port_state: PortState | None = None


@dataclass
class BlockingState:
    """Blocking status of blocky."""

    is_blocking_enabled: bool
    unblocking_timer: int | None = None
    """Seconds until blocking is enabled again, if temporarily disabled."""
    disabled_groups: str | None = None


class CurrentFocus(enum.IntEnum):
    """The focused tile; the value is the tile's number on screen."""

    DNS_STATUS = 1
    BLOCKING_STATUS = 2
    REFRESH_LISTS = 3
    DELETE_CACHE = 4
    QUERY_DNS = 5

    def next(self) -> CurrentFocus:
        """Return the following tile, wrapping around after the last one."""
        members = list(type(self))
        return members[(members.index(self) + 1) % len(members)]

    def previous(self) -> CurrentFocus:
        """Return the preceding tile, wrapping around before the first one."""
        members = list(type(self))
        return members[(members.index(self) - 1) % len(members)]

    @classmethod
    def from_number(cls, number: int) -> CurrentFocus:
        """Return the tile with the given number, or the first tile if none matches."""
        try:
            return cls(number)
        except ValueError:
            return cls.DNS_STATUS


class CurrentScreen(enum.Enum):
    """The screen currently shown."""

    MAIN = "main"
    SETUP = "setup"
    EXITING = "exiting"


class RunningState(enum.Enum):
    """Whether the application keeps running or should close."""

    RUNNING = "running"
    DONE = "done"