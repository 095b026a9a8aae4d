import logging

from fastapi import APIRouter, HTTPException, Request
from slowapi import Limiter
from slowapi.util import get_remote_address

from pooltable.config import Settings
from pooltable.models.response import TableResponse
from pooltable.pipeline import run_table
from pooltable.services.builder import PoolFetchError
from pooltable.table import PoolsTable

logger = logging.getLogger(__name__)

limiter = Limiter(key_func=get_remote_address)
router = APIRouter()


def get_table() -> PoolsTable:
    """Table used by the endpoint; replaced in tests."""
    return PoolsTable(Settings())


@router.get(
    "/tables/pools",
    response_model=TableResponse,
    summary="Build the stake-pool table",
    description=(
        "Runs both build phases against the upstream services and returns the "
        "rows exactly as the site generator would receive them. Every call "
        "fans out to the metadata, statistics and geolocation APIs, so the "
        "endpoint is tightly rate limited."
    ),
)
@limiter.limit("2/minute")
async def build_pools_table(request: Request) -> TableResponse:
    table = get_table()
    logger.info("Pools table preview requested")

    try:
        rows = await run_table(table)
    except PoolFetchError as exc:
        logger.error("Pools table build failed at pool %s: %s", exc.pool_id, exc.cause)
        raise HTTPException(
            status_code=502, detail=f"Upstream data unavailable for pool {exc.pool_id}."
        )

    return TableResponse(id=table.id, count=len(rows), rows=rows)
