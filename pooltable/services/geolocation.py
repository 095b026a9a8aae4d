"""Throttled relay geolocation via ipstack."""

import asyncio
import logging
from typing import Dict, Iterable

import httpx

from pooltable.services.cache import LocationCache
from pooltable.services.fetcher import get_json

logger = logging.getLogger(__name__)


async def lookup_address(client: httpx.AsyncClient, address: str) -> dict:
    """Geolocate a single relay *address*.

    ipstack reports some failures (bad key, quota) as a 200 response with
    ``success: false``; those are raised as :class:`ValueError`.
    """
    data = await get_json(client, f"/{address}")
    if not isinstance(data, dict):
        raise ValueError(f"Unexpected geolocation payload for {address}.")
    if data.get("success") is False:
        error = data.get("error") or {}
        raise ValueError(f"Geolocation lookup failed: {error.get('info') or error}")
    return data


async def locate_addresses(
    client: httpx.AsyncClient,
    addresses: Iterable[str],
    cache: LocationCache,
    max_in_progress: int = 1,
) -> Dict[str, dict]:
    """Resolve every address in *addresses* to its geolocation payload.

    Addresses are not de-duplicated up front; each occurrence consults the
    cache first, so repeats hit the entry stored by their first lookup. At
    most *max_in_progress* lookups are in flight. Failed lookups are logged
    and absent from the result.
    """
    result: Dict[str, dict] = {}
    sem = asyncio.Semaphore(max(1, max_in_progress))

    async def worker(address: str) -> None:
        async with sem:
            cached = cache.get(address)
            if cached is not None:
                logger.debug("Location cache hit for %s", address)
                result[address] = cached
                return

            try:
                data = await lookup_address(client, address)
            except (httpx.HTTPError, ValueError) as exc:
                logger.warning("Geolocation failed for %s: %s", address, exc)
                return

            result[address] = data
            cache.set(address, data)

    await asyncio.gather(*(worker(address) for address in addresses))
    return result
