"""Probes for the blocky server's TCP API port and UDP DNS port."""

from __future__ import annotations

import asyncio
import enum
import logging
from typing import TYPE_CHECKING
from urllib.parse import urlsplit

import dns.message
import dns.rdataclass
import dns.rdatatype

if TYPE_CHECKING:
    from blockytui.api import DNSQuery

log = logging.getLogger(__name__)

DNS_TIMEOUT = 5.0
"""Seconds to wait for a DNS answer before the UDP port counts as closed."""


class PortState(enum.Enum):
    """Result of probing a port."""

    OPEN = "open"
    CLOSED = "closed"
    ERROR = "error"


def _host_of(url: str) -> str:
    host = urlsplit(url).hostname
    if not host:
        raise ValueError("could not get host from host string")
    return host


async def check_tcp_port(host: str, tcp_port: int) -> PortState:
    """Try to open a TCP connection to the host of the URL ``host`` on ``tcp_port``."""
    log.debug("checking API server TCP port by manually creating a connection")
    domain = _host_of(host)
    try:
        _, writer = await asyncio.open_connection(domain, tcp_port)
    except OSError as err:
        log.debug("could not create TCP connection: %s", err)
        return PortState.CLOSED
    writer.close()
    try:
        await writer.wait_closed()
    except OSError:
        pass
    return PortState.OPEN


class _ResponseCollector(asyncio.DatagramProtocol):
    def __init__(self) -> None:
        self.response: asyncio.Future[bytes] = asyncio.get_running_loop().create_future()

    def datagram_received(self, data: bytes, addr) -> None:
        if not self.response.done():
            self.response.set_result(data)

    def error_received(self, exc: Exception) -> None:
        if not self.response.done():
            self.response.set_exception(exc)

    def connection_lost(self, exc: Exception | None) -> None:
        if exc is not None and not self.response.done():
            self.response.set_exception(exc)


async def check_dns(host: str, udp_port: int, query: DNSQuery) -> PortState:
    """Send a DNS question for the host of ``host`` over UDP and wait for an answer.

    The port counts as closed only when no answer arrives in time; an answer
    that cannot be parsed raises.
    """
    log.debug("checking DNS by manually querying it")
    domain = _host_of(host)
    rdtype = dns.rdatatype.from_text(query.query_type)
    question = dns.message.make_query(domain, rdtype, dns.rdataclass.IN)

    loop = asyncio.get_running_loop()
    transport, protocol = await loop.create_datagram_endpoint(
        _ResponseCollector, remote_addr=(domain, udp_port)
    )
    try:
        transport.sendto(question.to_wire())
        try:
            data = await asyncio.wait_for(protocol.response, DNS_TIMEOUT)
        except asyncio.TimeoutError:
            log.debug("UDP DNS request timed out")
            return PortState.CLOSED
    finally:
        transport.close()

    answer = dns.message.from_wire(data)
    log.debug("received dns response: %s", answer)
    return PortState.OPEN