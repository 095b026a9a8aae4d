"""Location enricher: attaches geolocation data to every relay."""

import logging
from typing import Dict, List

import httpx

from pooltable.models.pool import PoolRecord
from pooltable.services.cache import LocationCache
from pooltable.services.geolocation import locate_addresses

logger = logging.getLogger(__name__)


def relay_addresses(rows: List[PoolRecord]) -> List[str]:
    """All relay addresses across *rows*, in order, duplicates included."""
    return [relay.addr for row in rows for relay in row.relays if relay.addr]


def attach_locations(rows: List[PoolRecord], locations: Dict[str, dict]) -> List[PoolRecord]:
    """Return copies of *rows* whose relays carry ``data`` looked up by address."""
    return [
        row.model_copy(
            update={
                "relays": [
                    relay.model_copy(update={"data": locations.get(relay.addr) if relay.addr else None})
                    for relay in row.relays
                ]
            }
        )
        for row in rows
    ]


async def enrich_relays(
    client: httpx.AsyncClient,
    rows: List[PoolRecord],
    cache: LocationCache,
    max_in_progress: int = 1,
) -> List[PoolRecord]:
    addresses = relay_addresses(rows)
    logger.info("Geolocating %d relay addresses", len(addresses))

    locations = await locate_addresses(client, addresses, cache, max_in_progress)
    logger.info("Resolved %d of %d distinct relay addresses", len(locations), len(set(addresses)))
    return attach_locations(rows, locations)
