"""Rendering of the application state as rich renderables."""

from __future__ import annotations

from typing import Any

from rich import box
from rich.console import RenderableType
from rich.layout import Layout
from rich.panel import Panel
from rich.style import Style
from rich.text import Text

from blockytui.port_check import PortState
from blockytui.state import (
    ActionState,
    ApiQueryResponseState,
    BlockingState,
    CurrentFocus,
    DNSStatus,
)

_OK = ("✓", "green")
_FAIL = ("🗙", "red")
_UNKNOWN = ("?", "yellow")

_WHITE = Style(color="white")


def _status_line(prefix: str, mark: tuple[str, str], message: str, bold: bool = False) -> Text:
    symbol, color = mark
    return Text.assemble(prefix, (symbol, Style(color=color, bold=bold)), message)


def dns_status_summary(dns_status: DNSStatus) -> Text:
    """Return the one-word health summary of the DNS server."""
    udp = dns_status.udp_port_state
    tcp = dns_status.tcp_port_state
    query = dns_status.query_response_state
    if (
        udp is PortState.OPEN
        and tcp is PortState.OPEN
        and query is ApiQueryResponseState.HEALTHY
    ):
        label, color = "Healthy", "green"
    elif (
        udp is PortState.CLOSED
        and tcp is PortState.CLOSED
        and query is ApiQueryResponseState.NO_RESPONSE
    ):
        label, color = "No Response", "red"
    elif udp is None and tcp is None and query is None:
        label, color = "Not yet requested", "white"
    else:
        label, color = "Unhealthy", "magenta"
    return Text(label, style=Style(color=color, bold=True), justify="center")


def dns_detail_lines(dns_status: DNSStatus, api_port: int, dns_port: int) -> list[Text]:
    """Return the detail lines for the TCP port, the UDP port and the API query."""
    tcp = {
        PortState.OPEN: (_OK, f"] API port (tcp:{api_port}) is open"),
        PortState.CLOSED: (_FAIL, f"] API port (tcp:{api_port}) is closed"),
        PortState.ERROR: (_FAIL, f"] error when probing API port (tcp:{api_port})"),
        None: (_UNKNOWN, f"] API port (tcp:{api_port}) not yet probed"),
    }[dns_status.tcp_port_state]
    udp = {
        PortState.OPEN: (_OK, f"] DNS port (udp:{dns_port}) is open and responding"),
        PortState.CLOSED: (_FAIL, f"] DNS port (udp:{dns_port}) is not answering"),
        PortState.ERROR: (_FAIL, f"] error when probing DNS port (udp:{dns_port})"),
        None: (_UNKNOWN, f"] DNS port (udp:{dns_port}) not yet probed"),
    }[dns_status.udp_port_state]
    api = {
        ApiQueryResponseState.HEALTHY: (_OK, "] received sucessfull API query response"),
        ApiQueryResponseState.UNHEALTHY: (_FAIL, "] received error from API query response"),
        ApiQueryResponseState.NO_RESPONSE: (_FAIL, "] did not receive an API response"),
        None: (_UNKNOWN, "] API not yet probed"),
    }[dns_status.query_response_state]
    return [_status_line("- [", mark, message) for mark, message in (tcp, udp, api)]


def blocking_status_lines(status: BlockingState | None) -> list[Text]:
    """Return the headline and explanation of the blocking status."""
    if status is None:
        return [
            Text("Not queried", style=Style(color="white", bold=True)),
            Text("Blocking status is not set", style=Style(color="white", italic=True)),
        ]
    if status.is_blocking_enabled:
        return [
            Text("Blocking", style=Style(color="green")),
            Text("DNS server is currently blocking"),
        ]
    return [
        Text("Not Blocking", style=Style(color="green")),
        Text("DNS server is not blocking"),
    ]


def _action_status(state: ActionState | None, messages: dict) -> Text:
    mark = {
        None: _UNKNOWN,
        ActionState.WAITING: _UNKNOWN,
        ActionState.SUCCESS: _OK,
        ActionState.FAILURE: _FAIL,
    }[state]
    line = _status_line("[", mark, messages[state], bold=True)
    line.justify = "center"
    return line


def refresh_list_status(state: ActionState | None) -> Text:
    """Return the status line of the blocking list refresh."""
    return _action_status(
        state,
        {
            None: "] Blocking list update not yet queried",
            ActionState.WAITING: "] Requested list update...",
            ActionState.SUCCESS: "] Successfully updated blocking lists",
            ActionState.FAILURE: "] Failed to update blocking lists",
        },
    )


def cache_delete_status(state: ActionState | None) -> Text:
    """Return the status line of the DNS cache deletion."""
    return _action_status(
        state,
        {
            None: "] Deletion of DNS cache not yet queried",
            ActionState.WAITING: "] Requested DNS cache deletion...",
            ActionState.SUCCESS: "] Successfully deleted DNS cache",
            ActionState.FAILURE: "] Failed to delete DNS cache",
        },
    )


def tile_panel(
    current_focus: CurrentFocus, tile: CurrentFocus, title: str, body: RenderableType
) -> Panel:
    """Wrap ``body`` in the tile's frame, highlighted when the tile has focus."""
    label = f"[{int(tile)}] {title}"
    if current_focus == tile:
        return Panel(
            body,
            title=Text(label, style=Style(bold=True)),
            box=box.HEAVY,
            style=Style(color="yellow"),
            border_style=Style(color="yellow"),
        )
    return Panel(
        body,
        title=Text(label),
        box=box.ROUNDED,
        style=_WHITE,
        border_style=_WHITE,
    )


def _blank() -> Text:
    return Text("")


def _split(pieces: list[tuple[RenderableType | Layout, int]], vertical: bool) -> Layout:
    layout = Layout()
    children = [
        piece if isinstance(piece, Layout) else Layout(piece, ratio=ratio)
        for piece, ratio in pieces
        if ratio > 0
    ]
    for child, (piece, ratio) in zip(children, [p for p in pieces if p[1] > 0]):
        child.ratio = ratio
    if vertical:
        layout.split_column(*children)
    else:
        layout.split_row(*children)
    return layout


def _centered(renderable: RenderableType, percent_x: int, percent_y: int) -> Layout:
    side_x = (100 - percent_x) // 2
    side_y = (100 - percent_y) // 2
    row = _split(
        [(_blank(), side_x), (renderable, percent_x), (_blank(), side_x)], vertical=False
    )
    return _split([(_blank(), side_y), (row, percent_y), (_blank(), side_y)], vertical=True)


def _dns_status_tile(app: Any) -> Panel:
    details = Text("\n").join(
        dns_detail_lines(app.dns_status, app.api.api_port, app.api.dns_port)
    )
    details.style = _WHITE
    details.justify = "left"
    body = _split(
        [
            (_blank(), 10),
            (dns_status_summary(app.dns_status), 30),
            (_centered(details, 70, 99), 60),
        ],
        vertical=True,
    )
    return tile_panel(app.current_focus, CurrentFocus.DNS_STATUS, "DNS Status", body)


def _blocking_status_tile(app: Any) -> Panel:
    body = Text("\n").join(blocking_status_lines(app.blocking_status))
    body.justify = "center"
    return tile_panel(
        app.current_focus, CurrentFocus.BLOCKING_STATUS, "Blocking Status", body
    )


def _action_tile(app: Any, tile: CurrentFocus, title: str, status: Text) -> Panel:
    body = _split([(_blank(), 10), (_centered(status, 90, 50), 90)], vertical=True)
    return tile_panel(app.current_focus, tile, title, body)


def _title_tile() -> Panel:
    return Panel(
        Text("Blocky TUI", style=Style(color="yellow"), justify="center"),
        box=box.ROUNDED,
    )


def render(app: Any) -> Layout:
    """Return the whole screen for the application state ``app``."""
    middle = _split(
        [
            (_dns_status_tile(app), 33),
            (_blocking_status_tile(app), 33),
            (
                _action_tile(
                    app,
                    CurrentFocus.REFRESH_LISTS,
                    "Refresh Blocking Lists",
                    refresh_list_status(app.blocking_list_refresh_state),
                ),
                33,
            ),
        ],
        vertical=False,
    )
    query = tile_panel(
        app.current_focus,
        CurrentFocus.QUERY_DNS,
        "Query DNS",
        Text("Query DNS", justify="center"),
    )
    bottom = _split(
        [
            (query, 50),
            (
                _action_tile(
                    app,
                    CurrentFocus.DELETE_CACHE,
                    "Delete DNS Cache",
                    cache_delete_status(app.cache_delete_state),
                ),
                50,
            ),
        ],
        vertical=False,
    )
    return _split([(_title_tile(), 20), (middle, 45), (bottom, 35)], vertical=True)