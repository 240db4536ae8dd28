"""HTTP client for the blocky REST API."""

from __future__ import annotations

import logging
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any
from urllib.parse import urljoin, urlsplit

import httpx

log = logging.getLogger(__name__)

REQUEST_TIMEOUT = 10.0
_DEFAULT_PORTS = {"http": 80, "https": 443}


@dataclass(frozen=True)
class DNSQuery:
    """A DNS query as accepted by the blocky API."""

    query: str
    query_type: str

    def to_json(self) -> dict[str, str]:
        """Return the request body for the query endpoint."""
        return {"query": self.query, "type": self.query_type}


@dataclass(frozen=True)
class DNSResponse:
    """Answer of the blocky API query endpoint."""

    reason: str
    response: str
    response_type: str
    return_code: str

    @classmethod
    def from_json(cls, data: Any) -> DNSResponse:
        """Build a response from the decoded JSON body; raise ValueError if malformed."""
        if not isinstance(data, Mapping):
            raise ValueError("DNS response is not a JSON object")
        fields = {
            "reason": "reason",
            "response": "response",
            "responseType": "response_type",
            "returnCode": "return_code",
        }
        values = {}
        for key, attr in fields.items():
            if key not in data:
                raise ValueError(f"DNS response is missing field {key!r}")
            if not isinstance(data[key], str):
                raise ValueError(f"DNS response field {key!r} is not a string")
            values[attr] = data[key]
        return cls(**values)


def _check_port(port: int, what: str) -> int:
    if isinstance(port, bool) or not isinstance(port, int) or not 0 <= port <= 0xFFFF:
        raise ValueError(f"{what} {port!r} is not a valid port number")
    return port


def _api_base_url(base_url: str, api_port: int) -> str:
    parts = urlsplit(base_url)
    scheme = parts.scheme.lower()
    if scheme not in _DEFAULT_PORTS:
        message = f"Blocky API URL {base_url} is not http or https"
        log.error(message)
        raise ValueError(message)
    parts.port  # rejects a malformed port in the given URL
    host = parts.hostname
    if not host:
        raise ValueError(f"could not set API port to API URL -> is the URL valid? {base_url}")
    if ":" in host:
        host = f"[{host}]"
    userinfo = ""
    if parts.username is not None:
        userinfo = parts.username
        if parts.password is not None:
            userinfo += f":{parts.password}"
        userinfo += "@"
    port = "" if api_port == _DEFAULT_PORTS[scheme] else f":{api_port}"
    return f"{scheme}://{userinfo}{host}{port}/"


class ApiClient:
    """Client for one blocky instance; the base URL keeps only scheme, host and API port."""

    def __init__(self, base_url: str, api_port: int, dns_port: int) -> None:
        self.api_port = _check_port(api_port, "API port")
        self.dns_port = _check_port(dns_port, "DNS port")
        self.url = _api_base_url(base_url, self.api_port)
        self.client = httpx.AsyncClient(timeout=REQUEST_TIMEOUT)
        log.debug("created new API client for %s", self.url)

    def __repr__(self) -> str:
        return (
            f"ApiClient(url={self.url!r}, api_port={self.api_port}, dns_port={self.dns_port})"
        )

    async def __aenter__(self) -> ApiClient:
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()

    def _endpoint(self, path: str) -> str:
        return urljoin(self.url, path)

    async def post_refresh_list_cmd(self) -> httpx.Response:
        """Ask blocky to refresh its blocking lists."""
        log.debug("posting request to refresh blocking lists")
        return await self.client.post(
            self._endpoint("api/lists/refresh"), headers={"accept": "text/plain"}
        )

    async def post_clear_dns_cache(self) -> httpx.Response:
        """Ask blocky to flush its DNS response cache."""
        log.debug("posting request to flush the DNS cache")
        return await self.client.post(self._endpoint("api/cache/flush"))

    async def post_dnsquery(self, query: DNSQuery) -> DNSResponse:
        """Resolve ``query`` through blocky and return its answer."""
        log.debug("posting DNS query: %r", query)
        resp = await self.client.post(
            self._endpoint("api/query"),
            headers={"Content-Type": "application/json"},
            json=query.to_json(),
        )
        answer = DNSResponse.from_json(resp.json())
        log.debug("received DNS response: %r", answer)
        return answer

    async def aclose(self) -> None:
        """Close the underlying HTTP connections."""
        await self.client.aclose()