#!/usr/bin/env python3
"""
Backfill normalized genres from archived snapshots.

Snapshots archived before genres were normalized only carry the genre as text.
This script runs every such snapshot through the genre/category normalizer and
links the materialized review (the one sharing the snapshot's id) to the
resulting genre. Safe to re-run: already-linked reviews are left alone.

Usage:
    python scripts/backfill_genres.py [--dry-run]
"""

import argparse
import asyncio
import sys
from pathlib import Path

# Add project root to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from app.core.database import get_async_session
from app.core.logging import bind_context, configure_logging
from app.services.archive import backfill_snapshot_genres


async def main(dry_run: bool) -> None:
    configure_logging()
    bind_context(script="backfill_genres")

    async with get_async_session() as db:
        stats = await backfill_snapshot_genres(db, dry_run=dry_run)

    print(f"Snapshots scanned: {stats['scanned']}")
    print(f"Genres resolved:   {stats['resolved']}")
    print(f"Reviews linked:    {stats['linked']}")
    print(f"Failures:          {stats['failed']}")
    if dry_run:
        print("\nDry run: nothing was written")


if __name__ == "__main__":
    parser = argparse.ArgumentParser(description=__doc__.split("\n\n")[0])
    parser.add_argument(
        "--dry-run", action="store_true", help="Count snapshots that would be backfilled"
    )
    args = parser.parse_args()
    asyncio.run(main(args.dry_run))
