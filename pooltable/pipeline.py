"""Minimal build pipeline: create → after_create → JSON on disk."""

import json
import logging
import time
from pathlib import Path
from typing import Any, List

from pooltable.models.pool import PoolRecord
from pooltable.table import PoolsTable

logger = logging.getLogger(__name__)


async def run_table(table: PoolsTable, ctx: Any = None) -> List[PoolRecord]:
    """Run both phases of *table* in order and return the final rows."""
    start_time = time.monotonic()
    logger.info("Building table '%s'", table.id)

    rows = await table.create()
    logger.info("Table '%s': %d rows created", table.id, len(rows))

    rows = await table.after_create(ctx, rows)
    logger.info(
        "Table '%s' finished in %.2f seconds", table.id, time.monotonic() - start_time
    )
    return rows


def rows_to_json(rows: List[PoolRecord]) -> List[dict]:
    return [row.model_dump(mode="json", by_alias=True) for row in rows]


def write_rows(rows: List[PoolRecord], path: str | Path) -> Path:
    """Write *rows* as an indented camelCase JSON array to *path*."""
    out = Path(path)
    out.parent.mkdir(parents=True, exist_ok=True)
    with open(out, "w", encoding="utf-8") as f:
        json.dump(rows_to_json(rows), f, ensure_ascii=False, indent=2)
    logger.info("Wrote %d rows to %s", len(rows), out)
    return out
