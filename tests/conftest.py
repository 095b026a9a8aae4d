"""Shared fakes for the upstream pool services.

``FakeUpstream`` stands in for every HTTP service the table talks to. Routes
are keyed by ``host + path``; unknown routes answer 404.
"""

import socket
from typing import Dict, List, Union

import httpx
import pytest

from pooltable.config import Settings
from pooltable.models.page import MarkdownPage

BLOCKFROST = "cardano-mainnet.blockfrost.io/api/v0"
ADAPOOLS = "js.adapools.org"
IPSTACK = "api.ipstack.com"

Route = Union[httpx.Response, Exception, dict, list]


class FakeUpstream:
    def __init__(self) -> None:
        self.routes: Dict[str, Route] = {}
        self.requests: List[httpx.Request] = []

    def add(self, key: str, route: Route) -> None:
        self.routes[key] = route

    def pool(self, pool_id: str, relays=None, summary=None, metadata_url=None) -> None:
        """Register relays and summary (and optionally a metadata URL) for *pool_id*."""
        self.add(f"{BLOCKFROST}/pools/{pool_id}/relays", relays if relays is not None else [])
        self.add(f"{ADAPOOLS}/pools/{pool_id}/summary.json", summary or make_summary(pool_id))
        if metadata_url:
            self.add(f"{BLOCKFROST}/pools/{pool_id}/metadata", {"url": metadata_url})

    def calls_to(self, host: str) -> List[httpx.Request]:
        return [r for r in self.requests if f"{r.url.host}{r.url.path}".startswith(host)]

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        route = self.routes.get(f"{request.url.host}{request.url.path}")
        if route is None:
            return httpx.Response(404, json={"error": "Not Found"})
        if isinstance(route, Exception):
            raise route
        if isinstance(route, httpx.Response):
            return route
        return httpx.Response(200, json=route)

    @property
    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self.handler)


def make_summary(pool_id: str, **data) -> dict:
    stats = {
        "db_name": f"Pool {pool_id}",
        "db_description": "A test pool",
        "db_ticker": pool_id[:4].upper(),
        "db_url": f"https://{pool_id}.example.com",
        "pool_id_bech32": f"pool1{pool_id}",
        "total_stake": "1000000",
        "blocks_lifetime": "12",
        "delegators": "34",
        "pledge": "500",
        "pledged": "600",
        "tax_ratio": "0.01",
        "roa": "4.2",
        "handles": {},
    }
    stats.update(data)
    return {"created": 1614834367000, "data": stats}


def pool_page(filename: str, **frontmatter) -> MarkdownPage:
    return MarkdownPage(template="PoolDetailPage", params={"filename": filename}, **frontmatter)


@pytest.fixture
def upstream() -> FakeUpstream:
    return FakeUpstream()


@pytest.fixture
def settings() -> Settings:
    return Settings(metadata_api_key="bf-key", geo_api_key="geo-key", _env_file=None)


PUBLIC_IP = "93.184.216.34"


@pytest.fixture(autouse=True)
def resolved_hosts(monkeypatch) -> Dict[str, str]:
    """Resolve hostnames without DNS; unknown hosts get a public address.

    Tests map a hostname to another address by adding it to the returned dict.
    """
    hosts: Dict[str, str] = {}

    def fake_getaddrinfo(host, port, *args, **kwargs):
        ip = hosts.get(host, PUBLIC_IP)
        family = socket.AF_INET6 if ":" in ip else socket.AF_INET
        return [(family, socket.SOCK_STREAM, 6, "", (ip, port or 0))]

    monkeypatch.setattr(socket, "getaddrinfo", fake_getaddrinfo)
    return hosts
