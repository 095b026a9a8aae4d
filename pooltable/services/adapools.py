"""Aggregate pool statistics from the adapools community service."""

import logging
from datetime import datetime, timedelta, timezone
from typing import Any, Optional

import httpx

from pooltable.services.fetcher import get_json

logger = logging.getLogger(__name__)

EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)


async def get_pool_summary(client: httpx.AsyncClient, pool_id: str) -> dict:
    """Return the ``summary.json`` document of *pool_id*.

    Raises:
        httpx.HTTPError: on network or HTTP errors.
        ValueError: if the body is not a JSON object with a ``data`` object.
    """
    summary = await get_json(client, f"/pools/{pool_id}/summary.json")
    if not isinstance(summary, dict) or not isinstance(summary.get("data"), dict):
        raise ValueError(f"Unexpected summary document for pool {pool_id}.")
    return summary


def to_iso8601(created: Any) -> Optional[str]:
    """Normalise the summary ``created`` value to ``YYYY-MM-DDTHH:MM:SS.mmmZ``.

    Numbers are read as epoch milliseconds, strings as ISO dates (naive values
    are taken as UTC). Returns *None* when the value cannot be interpreted.
    """
    if created is None or isinstance(created, bool):
        return None

    try:
        if isinstance(created, (int, float)):
            moment = EPOCH + timedelta(milliseconds=created)
        elif isinstance(created, str) and created.strip():
            text = created.strip()
            if text.isdigit():
                moment = EPOCH + timedelta(milliseconds=int(text))
            else:
                moment = datetime.fromisoformat(text.replace("Z", "+00:00"))
                if moment.tzinfo is None:
                    moment = moment.replace(tzinfo=timezone.utc)
        else:
            return None
    except (ValueError, OverflowError, OSError) as exc:
        logger.warning("Cannot parse creation timestamp %r: %s", created, exc)
        return None

    moment = moment.astimezone(timezone.utc)
    return moment.strftime("%Y-%m-%dT%H:%M:%S.") + f"{moment.microsecond // 1000:03d}Z"
