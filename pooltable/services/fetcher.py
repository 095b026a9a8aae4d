import ipaddress
import json
import socket
from typing import Any, Optional
from urllib.parse import urljoin, urlparse

import httpx

from pooltable.config import Settings

MAX_CONTENT_SIZE = 1024 * 1024  # 1 MB, pool metadata documents are small
MAX_REDIRECTS = 10
ALLOWED_SCHEMES = {"http", "https"}


def _is_private_address(hostname: str) -> bool:
    """Return True if *hostname* resolves to a private, loopback, or link-local address."""
    try:
        infos = socket.getaddrinfo(hostname, None)
    except socket.gaierror:
        return False

    for info in infos:
        # Strip IPv6 zone IDs (e.g. "fe80::1%eth0")
        raw_ip = info[4][0].split("%")[0]
        try:
            addr = ipaddress.ip_address(raw_ip)
        except ValueError:
            continue
        if addr.is_private or addr.is_loopback or addr.is_link_local or addr.is_reserved:
            return True
    return False


def _validate_url(url: str) -> None:
    """Raise ValueError if *url* is not a public http(s) URL."""
    parsed = urlparse(url)

    if parsed.scheme not in ALLOWED_SCHEMES:
        raise ValueError(f"Scheme '{parsed.scheme}' is not allowed. Use http or https.")

    hostname = parsed.hostname
    if not hostname:
        raise ValueError("URL must have a valid hostname.")

    if _is_private_address(hostname):
        raise ValueError("Requests to private/internal addresses are not allowed.")


def create_metadata_client(
    settings: Settings, transport: Optional[httpx.AsyncBaseTransport] = None
) -> httpx.AsyncClient:
    """Blockfrost client; authenticates with the ``project_id`` header."""
    return httpx.AsyncClient(
        base_url=settings.blockfrost_base_url,
        headers={"project_id": settings.metadata_api_key},
        timeout=settings.http_timeout,
        transport=transport,
    )


def create_geo_client(
    settings: Settings, transport: Optional[httpx.AsyncBaseTransport] = None
) -> httpx.AsyncClient:
    """ipstack client; authenticates with the ``access_key`` query parameter."""
    return httpx.AsyncClient(
        base_url=settings.ipstack_base_url,
        params={"access_key": settings.geo_api_key},
        timeout=settings.http_timeout,
        transport=transport,
    )


def create_stats_client(
    settings: Settings, transport: Optional[httpx.AsyncBaseTransport] = None
) -> httpx.AsyncClient:
    return httpx.AsyncClient(
        base_url=settings.adapools_base_url,
        follow_redirects=True,
        timeout=settings.http_timeout,
        transport=transport,
    )


def create_public_client(
    settings: Settings, transport: Optional[httpx.AsyncBaseTransport] = None
) -> httpx.AsyncClient:
    """Unauthenticated client for pool-hosted metadata URLs, used with :func:`fetch_json`."""
    return httpx.AsyncClient(
        follow_redirects=False,
        timeout=settings.http_timeout,
        transport=transport,
    )


async def get_json(client: httpx.AsyncClient, path: str) -> Any:
    """GET *path* on a configured API client and decode the JSON body.

    Raises:
        httpx.HTTPError: on network or HTTP errors.
        ValueError: if the body is not valid JSON.
    """
    response = await client.get(path)
    response.raise_for_status()
    return response.json()


async def fetch_json(client: httpx.AsyncClient, url: str) -> Any:
    """Fetch an arbitrary, pool-operator supplied *url* and decode its JSON body.

    Redirects are followed manually so that every hop is validated before
    the next request is made.

    Raises:
        ValueError: if a URL fails scheme or address validation or the body is not JSON.
        httpx.HTTPError: on network or HTTP errors.
        RuntimeError: if the body exceeds MAX_CONTENT_SIZE or redirects loop.
    """
    _validate_url(url)

    current_url = url
    for _ in range(MAX_REDIRECTS + 1):
        async with client.stream("GET", current_url) as response:
            if response.is_redirect:
                location = response.headers.get("location", "")
                next_url = urljoin(current_url, location)
                _validate_url(next_url)
                current_url = next_url
                continue

            response.raise_for_status()

            content_length = response.headers.get("content-length")
            if content_length and int(content_length) > MAX_CONTENT_SIZE:
                raise RuntimeError("Response body exceeds the maximum allowed size.")

            chunks = []
            total = 0
            async for chunk in response.aiter_bytes():
                total += len(chunk)
                if total > MAX_CONTENT_SIZE:
                    raise RuntimeError("Response body exceeds the maximum allowed size.")
                chunks.append(chunk)

            # json.JSONDecodeError is a ValueError subclass
            return json.loads(b"".join(chunks))

    raise RuntimeError("Too many redirects.")
