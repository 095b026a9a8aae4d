"""Command-line entry point: build the pools table into a JSON file.

    python -m pooltable.cli --pages content --out data/pools.json
"""

import argparse
import asyncio
import logging
import sys

from pooltable.config import Settings
from pooltable.logging_config import configure_logging
from pooltable.pipeline import run_table, write_rows
from pooltable.services.builder import PoolTableError
from pooltable.table import PoolsTable

logger = logging.getLogger(__name__)


def parse_args(argv=None) -> argparse.Namespace:
    ap = argparse.ArgumentParser(description="Build the stake-pool table for the website.")
    ap.add_argument("--pages", help="Directory of markdown pages (default: PAGES_DIR or 'content').")
    ap.add_argument("--out", required=True, help="Output JSON file.")
    ap.add_argument("--cache", help="JSON file used to cache relay geolocations.")
    ap.add_argument("--concurrency", type=int, help="Pools fetched at once.")
    ap.add_argument("--skip-failed", action="store_true",
                    help="Leave out pools whose relays or statistics cannot be fetched.")
    ap.add_argument("--log-level", default="INFO")
    return ap.parse_args(argv)


def main(argv=None) -> int:
    args = parse_args(argv)
    configure_logging(args.log_level.upper())

    overrides = {}
    if args.pages:
        overrides["pages_dir"] = args.pages
    if args.cache:
        overrides["cache_path"] = args.cache
    if args.concurrency:
        overrides["pool_concurrency"] = args.concurrency
    if args.skip_failed:
        overrides["skip_failed_pools"] = True
    settings = Settings(**overrides)

    if not settings.metadata_api_key:
        logger.warning("BLOCKFROST_PROJECT_ID is not set; metadata requests will be rejected")
    if not settings.geo_api_key:
        logger.warning("IPSTACK_API_KEY is not set; relays will not be geolocated")

    try:
        rows = asyncio.run(run_table(PoolsTable(settings)))
    except PoolTableError as exc:
        logger.error("Build failed: %s", exc)
        return 1

    write_rows(rows, args.out)
    return 0


if __name__ == "__main__":
    sys.exit(main())
