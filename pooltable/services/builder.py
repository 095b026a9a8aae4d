"""Record builder: one :class:`PoolRecord` per pool detail page."""

import asyncio
import logging
from dataclasses import dataclass
from typing import List, Optional, Tuple

import httpx

from pooltable.config import PLACEHOLDER_IMAGE
from pooltable.models.page import MarkdownPage
from pooltable.models.pool import PoolLink, PoolRecord, Relay
from pooltable.services.adapools import get_pool_summary, to_iso8601
from pooltable.services.blockfrost import (
    get_extended_metadata,
    get_pool_metadata,
    get_pool_relays,
)

logger = logging.getLogger(__name__)

POOL_PAGE_PREFIX = "/stake-pools/"

# Errors treated as "upstream unavailable" throughout the build
FETCH_ERRORS = (ValueError, httpx.HTTPError, RuntimeError)


class PoolTableError(Exception):
    pass


class PoolFetchError(PoolTableError):
    """Required data (relays or statistics) for a pool could not be fetched."""

    def __init__(self, pool_id: str, cause: Exception) -> None:
        super().__init__(f"Failed to build pool {pool_id}: {cause}")
        self.pool_id = pool_id
        self.cause = cause


@dataclass
class BuilderClients:
    metadata: httpx.AsyncClient
    stats: httpx.AsyncClient
    public: httpx.AsyncClient


async def _optional_metadata(clients: BuilderClients, pool_id: str) -> Optional[dict]:
    try:
        metadata = await get_pool_metadata(clients.metadata, clients.public, pool_id)
    except FETCH_ERRORS as exc:
        logger.warning("No metadata for pool %s: %s", pool_id, exc)
        return None
    if not isinstance(metadata, dict):
        logger.warning("Ignoring metadata for pool %s: not a JSON object", pool_id)
        return None
    return metadata


async def _optional_extended(
    clients: BuilderClients, pool_id: str, metadata: Optional[dict]
) -> Optional[dict]:
    url = metadata.get("extended") if metadata else None
    if not url:
        return None
    if not isinstance(url, str):
        logger.warning("Ignoring extended metadata for pool %s: URL is not a string", pool_id)
        return None
    try:
        extended = await get_extended_metadata(clients.public, url)
    except FETCH_ERRORS as exc:
        logger.warning("No extended metadata for pool %s: %s", pool_id, exc)
        return None
    if not isinstance(extended, dict):
        logger.warning("Ignoring extended metadata for pool %s: not a JSON object", pool_id)
        return None
    return extended


def resolve_image(
    stats: dict, extended: Optional[dict], placeholder: str = PLACEHOLDER_IMAGE
) -> Tuple[str, bool]:
    """Pick the pool image: extended-metadata PNG logo, else stats icon, else *placeholder*.

    The flag reports whether a real image (logo or icon) was found.
    """
    info = extended.get("info") if extended else None
    logo = info.get("url_png_logo") if isinstance(info, dict) else None
    if logo and isinstance(logo, str):
        return logo, True

    handles = stats.get("handles")
    icon = handles.get("icon") if isinstance(handles, dict) else None
    if icon and isinstance(icon, str):
        return icon, True
    return placeholder, False


def assemble_record(
    page: MarkdownPage,
    summary: dict,
    relays: List[Relay],
    metadata: Optional[dict],
    extended: Optional[dict],
    placeholder: str = PLACEHOLDER_IMAGE,
) -> PoolRecord:
    pool_id = page.params.filename
    stats = summary["data"]
    name = stats.get("db_name")
    image, has_image = resolve_image(stats, extended, placeholder)

    registered_at = to_iso8601(summary.get("created"))
    if registered_at is None:
        logger.warning("Pool %s has no usable creation timestamp", pool_id)

    return PoolRecord(
        id=pool_id,
        name=name,
        link=PoolLink(name=name, href=POOL_PAGE_PREFIX + pool_id),
        description=stats.get("db_description"),
        image=image,
        has_image=has_image,
        ticker=stats.get("db_ticker"),
        addr=stats.get("pool_id_bech32"),
        website=stats.get("db_url"),
        total_stake=stats.get("total_stake"),
        blocks_lifetime=stats.get("blocks_lifetime"),
        delegators=stats.get("delegators"),
        pledge=stats.get("pledge"),
        pledged=stats.get("pledged"),
        tax_ratio=stats.get("tax_ratio"),
        roa=stats.get("roa"),
        member_since=page.member_since,
        registered_at=registered_at,
        identities=page.identities,
        relays=relays,
        metadata=metadata,
        extended=extended,
    )


async def build_pool_record(
    clients: BuilderClients, page: MarkdownPage, placeholder: str = PLACEHOLDER_IMAGE
) -> PoolRecord:
    """Fetch everything known about the pool behind *page* and assemble its record.

    Metadata and extended metadata are optional and fall back to ``None``.

    Raises:
        PoolFetchError: if the relay list or the statistics cannot be fetched.
    """
    pool_id = page.params.filename

    metadata = await _optional_metadata(clients, pool_id)
    extended = await _optional_extended(clients, pool_id, metadata)

    try:
        relays = await get_pool_relays(clients.metadata, pool_id)
        summary = await get_pool_summary(clients.stats, pool_id)
    except FETCH_ERRORS as exc:
        raise PoolFetchError(pool_id, exc) from exc

    return assemble_record(page, summary, relays, metadata, extended, placeholder)


async def build_records(
    clients: BuilderClients,
    pages: List[MarkdownPage],
    concurrency: int = 8,
    skip_failed: bool = False,
    placeholder: str = PLACEHOLDER_IMAGE,
) -> List[PoolRecord]:
    """Build records for every pool detail page in *pages*, preserving page order.

    At most *concurrency* pools are fetched at once. With *skip_failed* unset
    the first :class:`PoolFetchError` aborts the build; otherwise failing
    pools are logged and left out.
    """
    pool_pages = [page for page in pages if page.is_pool_page]
    logger.info("Building %d pool records (concurrency %d)", len(pool_pages), concurrency)

    sem = asyncio.Semaphore(max(1, concurrency))

    async def worker(page: MarkdownPage) -> PoolRecord:
        async with sem:
            return await build_pool_record(clients, page, placeholder)

    if not skip_failed:
        tasks = [asyncio.create_task(worker(page)) for page in pool_pages]
        try:
            return list(await asyncio.gather(*tasks))
        except BaseException:
            # Stop sibling fetches before the clients are closed under them
            for task in tasks:
                task.cancel()
            await asyncio.gather(*tasks, return_exceptions=True)
            raise

    outcomes = await asyncio.gather(
        *(worker(page) for page in pool_pages), return_exceptions=True
    )
    records: List[PoolRecord] = []
    for outcome in outcomes:
        if isinstance(outcome, PoolFetchError):
            logger.error("Skipping pool %s: %s", outcome.pool_id, outcome.cause)
            continue
        if isinstance(outcome, BaseException):
            raise outcome
        records.append(outcome)
    return records
