import pytest

from blockytui.port_check import PortState
from blockytui.state import (
    ApiQueryResponseState,
    BlockingState,
    CurrentFocus,
    DNSStatus,
)


@pytest.mark.parametrize("start", list(CurrentFocus))
def test_next_cycles_through_all_tiles(start):
    seen = []
    focus = start
    for _ in CurrentFocus:
        seen.append(focus)
        focus = CurrentFocus.next(focus)
    assert focus is start
    assert sorted(seen) == sorted(CurrentFocus)


@pytest.mark.parametrize("start", list(CurrentFocus))
def test_previous_undoes_next(start):
    assert CurrentFocus.previous(CurrentFocus.next(start)) is start
    assert CurrentFocus.next(CurrentFocus.previous(start)) is start


def test_next_order_follows_tile_numbers():
    assert CurrentFocus.DNS_STATUS.next() is CurrentFocus.BLOCKING_STATUS
    assert CurrentFocus.QUERY_DNS.next() is CurrentFocus.DNS_STATUS
    assert CurrentFocus.DNS_STATUS.previous() is CurrentFocus.QUERY_DNS


@pytest.mark.parametrize("focus", list(CurrentFocus))
def test_from_number_round_trips(focus):
    assert CurrentFocus.from_number(int(focus)) is focus


@pytest.mark.parametrize("number", [0, 6, 9, 255])
def test_from_number_falls_back_to_first_tile(number):
    assert CurrentFocus.from_number(number) is CurrentFocus.DNS_STATUS


def test_dns_status_defaults_are_unset():
    status = DNSStatus()
    assert (status.query_response_state, status.tcp_port_state, status.udp_port_state) == (
        None,
        None,
        None,
    )


def test_dns_status_fields_are_assignable():
    status = DNSStatus()
    status.tcp_port_state = PortState.OPEN
    status.query_response_state = ApiQueryResponseState.HEALTHY
    assert status == DNSStatus(
        query_response_state=ApiQueryResponseState.HEALTHY,
        tcp_port_state=PortState.OPEN,
    )


def test_blocking_state_equality():
    assert BlockingState(True) == BlockingState(is_blocking_enabled=True)
    assert BlockingState(True) != BlockingState(False)