"""The ``pools`` table as seen by the site build pipeline."""

import logging
from typing import Any, List, Optional

import httpx

from pooltable.config import Settings
from pooltable.models.pool import PoolRecord
from pooltable.services.builder import BuilderClients, build_records
from pooltable.services.cache import JsonFileLocationCache, LocationCache, MemoryLocationCache
from pooltable.services.enricher import enrich_relays
from pooltable.services.fetcher import (
    create_geo_client,
    create_metadata_client,
    create_public_client,
    create_stats_client,
)
from pooltable.services.pages import PageReader, directory_reader

logger = logging.getLogger(__name__)


def default_cache(settings: Settings) -> LocationCache:
    if settings.cache_path:
        return JsonFileLocationCache(settings.cache_path)
    return MemoryLocationCache()


class PoolsTable:
    """Builds the stake-pool rows in two phases.

    :meth:`create` produces one record per pool detail page and
    :meth:`after_create` geolocates the relays of the finished rows.
    Collaborators default to the ones described by *settings*; *transport*
    replaces the network for every HTTP client the table opens.
    """

    id = "pools"

    def __init__(
        self,
        settings: Settings,
        pages: Optional[PageReader] = None,
        cache: Optional[LocationCache] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        self.settings = settings
        self.pages = pages or directory_reader(settings.pages_dir)
        self.cache = cache if cache is not None else default_cache(settings)
        self.transport = transport

    async def create(self) -> List[PoolRecord]:
        pages = await self.pages()
        async with (
            create_metadata_client(self.settings, self.transport) as metadata,
            create_stats_client(self.settings, self.transport) as stats,
            create_public_client(self.settings, self.transport) as public,
        ):
            return await build_records(
                BuilderClients(metadata=metadata, stats=stats, public=public),
                pages,
                concurrency=self.settings.pool_concurrency,
                skip_failed=self.settings.skip_failed_pools,
                placeholder=self.settings.placeholder_image,
            )

    async def after_create(self, ctx: Any, rows: List[PoolRecord]) -> List[PoolRecord]:
        # ctx is the pipeline context; this table has no use for it
        async with create_geo_client(self.settings, self.transport) as geo:
            return await enrich_relays(
                geo, rows, self.cache, max_in_progress=self.settings.geo_max_in_progress
            )
