"""The application: state, event handling, updates and the main loop."""

from __future__ import annotations

import argparse
import asyncio
import logging
from collections import deque
from collections.abc import Coroutine
from typing import Any

import dns.exception
import httpx

from blockytui import port_check
from blockytui.action import Action, ActionKind
from blockytui.api import ApiClient, DNSQuery
from blockytui.events import Event, EventKind, KeyCode, KeyEvent, KeyModifiers
from blockytui.logsetup import initialize_logging
from blockytui.port_check import PortState
from blockytui.state import (
    ActionState,
    ApiQueryResponseState,
    BlockingState,
    CurrentFocus,
    CurrentScreen,
    DNSStatus,
    RunningState,
)
from blockytui.tui import Tui
from blockytui.ui import render

log = logging.getLogger(__name__)

DEFAULT_URL = "http://localhost"
DEFAULT_API_PORT = 4000
DEFAULT_DNS_PORT = 1234
FRAME_RATE = 3.0
HEALTH_QUERY = DNSQuery(query="www.wikipedia.org", query_type="A")

_PROBE_ERRORS = (OSError, ValueError, dns.exception.DNSException)


class App:
    """Application state together with the queue of pending actions."""

    def __init__(self, api: ApiClient | None = None) -> None:
        self.api = api if api is not None else ApiClient(
            DEFAULT_URL, DEFAULT_API_PORT, DEFAULT_DNS_PORT
        )
        self.actions: deque[Action] = deque()
        self.tasks: set[asyncio.Task] = set()
        self.running_state = RunningState.RUNNING
        self.current_screen = CurrentScreen.MAIN
        self.current_focus = CurrentFocus.DNS_STATUS
        self.is_currently_editing = False
        self.blocking_status: BlockingState | None = None
        self.dns_status = DNSStatus()
        self.cache_delete_state: ActionState | None = None
        self.blocking_list_refresh_state: ActionState | None = None
        log.debug("created new app")

    def _send(self, kind: ActionKind, value: Any = None) -> None:
        self.actions.append(Action(kind, value))

    def _spawn(self, coro: Coroutine[Any, Any, None]) -> None:
        task = asyncio.get_running_loop().create_task(coro)
        self.tasks.add(task)
        task.add_done_callback(self.tasks.discard)

    def handle_event(self, event: Event) -> None:
        """Turn a terminal event into actions."""
        if event.kind is not EventKind.RENDER:
            log.debug("handling new event: %r", event)
        if event.kind is EventKind.INIT:
            self._send(ActionKind.INIT)
        elif event.kind is EventKind.KEY:
            self._handle_key(event.key)
        elif event.kind is EventKind.QUIT:
            self._send(ActionKind.QUIT)
        elif event.kind is EventKind.RENDER:
            self._send(ActionKind.RENDER)

    def _handle_key(self, key: KeyEvent) -> None:
        editing = self.is_currently_editing
        if key.code is KeyCode.ESC:
            self._send(ActionKind.QUIT)
        elif key.code is KeyCode.CHAR and key.char == "q":
            self._send(ActionKind.KEY, key) if editing else self._send(ActionKind.QUIT)
        elif key.code is KeyCode.CHAR and key.char == "c":
            if key.modifiers == KeyModifiers.CONTROL:
                self._send(ActionKind.QUIT)
            else:
                self._send(ActionKind.KEY, key)
        elif key.code is KeyCode.ENTER:
            if editing:
                self._send(ActionKind.KEY, key)
            elif self.current_focus is CurrentFocus.REFRESH_LISTS:
                self._send(ActionKind.REFRESH_LISTS)
            elif self.current_focus is CurrentFocus.DELETE_CACHE:
                self._send(ActionKind.CLEAR_DNS_CACHE)
            else:
                self._send(ActionKind.UPDATE_TILE)
        elif key.code is KeyCode.CHAR:
            if not editing and key.char.isdecimal():
                self._send(ActionKind.JUMP_TO_TILE, int(key.char))
            else:
                self._send(ActionKind.KEY, key)
        elif key.code is KeyCode.TAB:
            self._send(ActionKind.CYCLE_FOCUS_UP)
        elif key.code is KeyCode.BACKTAB:
            self._send(ActionKind.CYCLE_FOCUS_DOWN)

    def update(self, action: Action) -> None:
        """Apply an action to the state, starting background requests where needed."""
        kind = action.kind
        if kind is not ActionKind.RENDER:
            log.debug("updating on new action: %r", action)
        if kind is ActionKind.QUIT:
            self.change_running_state(RunningState.DONE)
        elif kind is ActionKind.JUMP_TO_TILE:
            self.set_tile_to_num(action.value)
            self._send(ActionKind.RENDER)
        elif kind is ActionKind.CYCLE_FOCUS_UP:
            self.cycle_focus_up()
            self._send(ActionKind.RENDER)
        elif kind is ActionKind.CYCLE_FOCUS_DOWN:
            self.cycle_focus_down()
            self._send(ActionKind.RENDER)
        elif kind is ActionKind.SET_DNS_STATUS:
            self.dns_status.query_response_state = action.value
        elif kind is ActionKind.SET_TCP_PORT_STATE:
            self.dns_status.tcp_port_state = action.value
        elif kind is ActionKind.SET_UDP_PORT_STATE:
            self.dns_status.udp_port_state = action.value
        elif kind is ActionKind.UPDATE_TILE:
            if self.current_focus is CurrentFocus.DNS_STATUS:
                self._update_dns_tile()
        elif kind is ActionKind.REFRESH_LISTS:
            self._spawn(self._refresh_blocking_lists())
        elif kind is ActionKind.SET_REFRESH_LIST_STATE:
            self.blocking_list_refresh_state = action.value
        elif kind is ActionKind.CLEAR_DNS_CACHE:
            self._spawn(self._clear_dns_cache())
        elif kind is ActionKind.SET_DNS_CACHE_CLEAR_STATE:
            self.cache_delete_state = action.value

    async def _clear_dns_cache(self) -> None:
        self._send(ActionKind.SET_DNS_CACHE_CLEAR_STATE, ActionState.WAITING)
        try:
            resp = await self.api.post_clear_dns_cache()
        except httpx.HTTPError as err:
            log.warning("could not issue a DNS cache deletion POST command! %s", err)
            state = ActionState.FAILURE
        else:
            if resp.status_code == 200:
                log.debug("successfully deleted DNS cache! %r", resp)
                state = ActionState.SUCCESS
            else:
                log.warning("deleting DNS cache did not work! %r", resp)
                state = ActionState.FAILURE
        self._send(ActionKind.SET_DNS_CACHE_CLEAR_STATE, state)

    async def _refresh_blocking_lists(self) -> None:
        self._send(ActionKind.SET_REFRESH_LIST_STATE, ActionState.WAITING)
        try:
            resp = await self.api.post_refresh_list_cmd()
        except httpx.HTTPError as err:
            log.warning("could not issue a refresh blocking lists POST command! %s", err)
            state = ActionState.FAILURE
        else:
            if resp.status_code == 200:
                log.debug("refreshing worked! %r", resp)
                state = ActionState.SUCCESS
            elif resp.status_code == 500:
                log.warning("list refresh error %r", resp)
                state = ActionState.FAILURE
            else:
                log.warning("received unknown response code from blocking list refresh command")
                state = ActionState.FAILURE
        self._send(ActionKind.SET_REFRESH_LIST_STATE, state)

    async def _probe_api_query(self) -> None:
        try:
            answer = await self.api.post_dnsquery(HEALTH_QUERY)
        except (httpx.HTTPError, ValueError) as err:
            log.error("%s", err)
            state = ApiQueryResponseState.NO_RESPONSE
        else:
            if answer.return_code == "NOERROR":
                state = ApiQueryResponseState.HEALTHY
            else:
                state = ApiQueryResponseState.UNHEALTHY
        self._send(ActionKind.SET_DNS_STATUS, state)

    async def _probe_tcp_port(self) -> None:
        try:
            state = await port_check.check_tcp_port(self.api.url, self.api.api_port)
        except _PROBE_ERRORS as err:
            log.error("error testing TCP port: %r", err)
            state = PortState.ERROR
        self._send(ActionKind.SET_TCP_PORT_STATE, state)

    async def _probe_udp_port(self) -> None:
        try:
            state = await port_check.check_dns(self.api.url, self.api.dns_port, HEALTH_QUERY)
        except _PROBE_ERRORS as err:
            log.error("error querying UDP port: %r", err)
            state = PortState.ERROR
        self._send(ActionKind.SET_UDP_PORT_STATE, state)

    def _update_dns_tile(self) -> None:
        self._spawn(self._probe_api_query())
        self._spawn(self._probe_tcp_port())
        self._spawn(self._probe_udp_port())

    async def run(self) -> None:
        """Run the main loop until the user quits."""
        tui = Tui(frame_rate=FRAME_RATE)
        tui.enter()
        log.info("starting main app loop")
        try:
            while self.running_state is RunningState.RUNNING:
                self.handle_event(await tui.next())
                while self.actions:
                    action = self.actions.popleft()
                    self.update(action)
                    if action.kind is ActionKind.RENDER:
                        tui.draw(render(self))
        finally:
            tui.exit()
            for task in list(self.tasks):
                task.cancel()
            await self.api.aclose()

    def change_running_state(self, state: RunningState) -> None:
        self.running_state = state

    def cycle_focus_up(self) -> None:
        self.current_focus = self.current_focus.next()

    def cycle_focus_down(self) -> None:
        self.current_focus = self.current_focus.previous()

    def set_tile_to_num(self, num: int) -> None:
        self.current_focus = CurrentFocus.from_number(num)


def main(argv: list[str] | None = None) -> int:
    """Start the dashboard."""
    parser = argparse.ArgumentParser(
        prog="blocky-tui", description="Terminal dashboard for a blocky DNS server."
    )
    parser.parse_args(argv)
    initialize_logging()
    log.info("----------- STARTING BLOCKY TUI -----------")
    app = App()
    log.info("initialization done")
    try:
        asyncio.run(app.run())
    except Exception as err:
        log.error("Main App Error: %s", err)
        raise
    return 0