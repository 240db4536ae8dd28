"""Actions that drive application state changes."""

from __future__ import annotations

import enum
from dataclasses import dataclass
from typing import Any

from blockytui.events import KeyEvent
from blockytui.port_check import PortState
from blockytui.state import ActionState, ApiQueryResponseState


class ActionKind(enum.Enum):
    """Kinds of actions the application reacts to."""

    INIT = "init"
    CYCLE_FOCUS_UP = "cycle_focus_up"
    CYCLE_FOCUS_DOWN = "cycle_focus_down"
    JUMP_TO_TILE = "jump_to_tile"
    ENABLE_DNS_BLOCKING = "enable_dns_blocking"
    DISABLE_DNS_BLOCKING = "disable_dns_blocking"
    SUBMIT_DNS_QUERY = "submit_dns_query"
    REFRESH_LISTS = "refresh_lists"
    UPDATE_TILE = "update_tile"
    CLEAR_DNS_CACHE = "clear_dns_cache"
    KEY = "key"
    SET_DNS_STATUS = "set_dns_status"
    SET_UDP_PORT_STATE = "set_udp_port_state"
    SET_TCP_PORT_STATE = "set_tcp_port_state"
    SET_REFRESH_LIST_STATE = "set_refresh_list_state"
    SET_DNS_CACHE_CLEAR_STATE = "set_dns_cache_clear_state"
    RENDER = "render"
    QUIT = "quit"


_PAYLOAD_TYPES: dict[ActionKind, type] = {
    ActionKind.JUMP_TO_TILE: int,
    ActionKind.KEY: KeyEvent,
    ActionKind.SET_DNS_STATUS: ApiQueryResponseState,
    ActionKind.SET_UDP_PORT_STATE: PortState,
    ActionKind.SET_TCP_PORT_STATE: PortState,
    ActionKind.SET_REFRESH_LIST_STATE: ActionState,
    ActionKind.SET_DNS_CACHE_CLEAR_STATE: ActionState,
}


@dataclass(frozen=True)
class Action:
    """An action with the payload its kind requires, if any."""

    kind: ActionKind
    value: Any = None

    def __post_init__(self) -> None:
        expected = _PAYLOAD_TYPES.get(self.kind)
        if expected is None:
            if self.value is not None:
                raise ValueError(f"{self.kind.name} actions carry no value")
            return
        if not isinstance(self.value, expected) or isinstance(self.value, bool):
            raise TypeError(
                f"{self.kind.name} actions need a {expected.__name__}, got {self.value!r}"
            )
        if self.kind is ActionKind.JUMP_TO_TILE and not 0 <= self.value <= 0xFF:
            raise ValueError(f"tile number {self.value} is out of range")