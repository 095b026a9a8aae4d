"""Pool registration data from the Blockfrost metadata service."""

import logging
from typing import List, Optional

import httpx

from pooltable.models.pool import Relay
from pooltable.services.fetcher import fetch_json, get_json

logger = logging.getLogger(__name__)

# Highest priority first; the first truthy field wins, values are never merged.
RELAY_ADDRESS_FIELDS = ("dns", "ipv6", "ipv4", "dns_srv")


def relay_address(raw: dict) -> Optional[str]:
    """Return the preferred address of a raw relay record, or *None*."""
    for field in RELAY_ADDRESS_FIELDS:
        value = raw.get(field)
        if value:
            return value
    return None


async def get_pool_metadata(
    api: httpx.AsyncClient, public: httpx.AsyncClient, pool_id: str
) -> dict:
    """Resolve the metadata URL registered for *pool_id* and fetch the document it points to."""
    registration = await get_json(api, f"/pools/{pool_id}/metadata")
    url = registration.get("url") if isinstance(registration, dict) else None
    if not url:
        raise ValueError(f"Pool {pool_id} has no registered metadata URL.")
    return await fetch_json(public, url)


async def get_extended_metadata(public: httpx.AsyncClient, url: str) -> dict:
    return await fetch_json(public, url)


async def get_pool_relays(api: httpx.AsyncClient, pool_id: str) -> List[Relay]:
    """Fetch the relays of *pool_id* in the order the service returns them."""
    raw_relays = await get_json(api, f"/pools/{pool_id}/relays")
    if not isinstance(raw_relays, list) or not all(isinstance(raw, dict) for raw in raw_relays):
        raise ValueError(f"Unexpected relay list for pool {pool_id}.")
    return [Relay(addr=relay_address(raw), port=raw.get("port")) for raw in raw_relays]
