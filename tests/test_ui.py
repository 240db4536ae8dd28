import io
from types import SimpleNamespace

import pytest
from rich import box
from rich.color import Color
from rich.console import Console

from blockytui.port_check import PortState
from blockytui.state import (
    ActionState,
    ApiQueryResponseState,
    BlockingState,
    CurrentFocus,
    DNSStatus,
)
from blockytui.ui import (
    blocking_status_lines,
    cache_delete_status,
    dns_detail_lines,
    dns_status_summary,
    refresh_list_status,
    render,
    tile_panel,
)


@pytest.mark.parametrize(
    "status, label, color",
    [
        (
            DNSStatus(ApiQueryResponseState.HEALTHY, PortState.OPEN, PortState.OPEN),
            "Healthy",
            "green",
        ),
        (
            DNSStatus(ApiQueryResponseState.NO_RESPONSE, PortState.CLOSED, PortState.CLOSED),
            "No Response",
            "red",
        ),
        (DNSStatus(), "Not yet requested", "white"),
        (
            DNSStatus(ApiQueryResponseState.HEALTHY, PortState.CLOSED, PortState.OPEN),
            "Unhealthy",
            "magenta",
        ),
        (DNSStatus(tcp_port_state=PortState.OPEN), "Unhealthy", "magenta"),
    ],
)
def test_dns_status_summary(status, label, color):
    summary = dns_status_summary(status)
    assert summary.plain == label
    assert summary.style.color == Color.parse(color)
    assert summary.style.bold is True


def test_dns_detail_lines_open():
    status = DNSStatus(ApiQueryResponseState.HEALTHY, PortState.OPEN, PortState.OPEN)
    lines = [line.plain for line in dns_detail_lines(status, 4000, 1234)]
    assert lines == [
        "- [✓] API port (tcp:4000) is open",
        "- [✓] DNS port (udp:1234) is open and responding",
        "- [✓] received sucessfull API query response",
    ]


def test_dns_detail_lines_errors():
    status = DNSStatus(
        ApiQueryResponseState.UNHEALTHY, PortState.ERROR, PortState.CLOSED
    )
    lines = [line.plain for line in dns_detail_lines(status, 4000, 1234)]
    assert lines == [
        "- [🗙] error when probing API port (tcp:4000)",
        "- [🗙] DNS port (udp:1234) is not answering",
        "- [🗙] received error from API query response",
    ]


def test_dns_detail_lines_unprobed():
    lines = [line.plain for line in dns_detail_lines(DNSStatus(), 4000, 1234)]
    assert lines == [
        "- [?] API port (tcp:4000) not yet probed",
        "- [?] DNS port (udp:1234) not yet probed",
        "- [?] API not yet probed",
    ]


def test_blocking_status_lines():
    assert [t.plain for t in blocking_status_lines(None)] == [
        "Not queried",
        "Blocking status is not set",
    ]
    assert [t.plain for t in blocking_status_lines(BlockingState(True))] == [
        "Blocking",
        "DNS server is currently blocking",
    ]
    assert [t.plain for t in blocking_status_lines(BlockingState(False))] == [
        "Not Blocking",
        "DNS server is not blocking",
    ]


@pytest.mark.parametrize(
    "state, expected",
    [
        (None, "[?] Blocking list update not yet queried"),
        (ActionState.WAITING, "[?] Requested list update..."),
        (ActionState.SUCCESS, "[✓] Successfully updated blocking lists"),
        (ActionState.FAILURE, "[🗙] Failed to update blocking lists"),
    ],
)
def test_refresh_list_status(state, expected):
    assert refresh_list_status(state).plain == expected


@pytest.mark.parametrize(
    "state, expected",
    [
        (None, "[?] Deletion of DNS cache not yet queried"),
        (ActionState.WAITING, "[?] Requested DNS cache deletion..."),
        (ActionState.SUCCESS, "[✓] Successfully deleted DNS cache"),
        (ActionState.FAILURE, "[🗙] Failed to delete DNS cache"),
    ],
)
def test_cache_delete_status(state, expected):
    assert cache_delete_status(state).plain == expected


def test_tile_panel_focused():
    panel = tile_panel(
        CurrentFocus.BLOCKING_STATUS, CurrentFocus.BLOCKING_STATUS, "Blocking Status", "x"
    )
    assert panel.box is box.HEAVY
    assert panel.title.plain == "[2] Blocking Status"
    assert panel.title.style.bold is True


def test_tile_panel_unfocused():
    panel = tile_panel(
        CurrentFocus.DNS_STATUS, CurrentFocus.QUERY_DNS, "Query DNS", "x"
    )
    assert panel.box is box.ROUNDED
    assert panel.title.plain == "[5] Query DNS"


def _app(**overrides):
    fields = dict(
        dns_status=DNSStatus(),
        blocking_status=None,
        current_focus=CurrentFocus.DNS_STATUS,
        api=SimpleNamespace(api_port=4000, dns_port=1234),
        blocking_list_refresh_state=None,
        cache_delete_state=None,
    )
    fields.update(overrides)
    return SimpleNamespace(**fields)


def _render_text(app):
    console = Console(width=200, height=50, record=True, file=io.StringIO())
    console.print(render(app))
    return console.export_text()


def test_render_shows_all_tiles():
    output = _render_text(_app())
    for title in (
        "Blocky TUI",
        "[1] DNS Status",
        "[2] Blocking Status",
        "[3] Refresh Blocking Lists",
        "[4] Delete DNS Cache",
        "[5] Query DNS",
    ):
        assert title in output
    assert "Not yet requested" in output
    assert "Not queried" in output


def test_render_reflects_state():
    app = _app(
        dns_status=DNSStatus(
            ApiQueryResponseState.HEALTHY, PortState.OPEN, PortState.OPEN
        ),
        blocking_status=BlockingState(True),
        current_focus=CurrentFocus.QUERY_DNS,
    )
    output = _render_text(app)
    assert "Healthy" in output
    assert "Not yet requested" not in output
    assert "Blocking" in output
    assert "Not queried" not in output
    assert len(output.splitlines()) == 50