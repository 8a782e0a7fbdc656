#!/usr/bin/env python3
"""
Stat event CSV import

Standalone script for bulk-loading stat events into the event log from a CSV
file with the header: player,stat,value,timestamp

The timestamp column is epoch milliseconds and may be left empty to use the
import time. Rows with an unknown stat kind or an unreadable player, value or
timestamp are skipped and counted; everything else is written in a single
transaction.
"""

import os
import sys
import csv
import asyncio
import argparse
import logging
from typing import Dict, List, Optional, Tuple
from datetime import datetime
from uuid import UUID

from statboard.config import Config
from statboard.data_models.stat_kind import StatKind
from statboard.data_models.stats import StatEvent
from statboard.database.database import Database
from statboard.operations.stat_operations import StatOperations
from statboard.utils.stats_exceptions import UnknownStatKind
from statboard.utils.time_window import current_millis


def setup_logging() -> logging.Logger:
    """Setup logging for the import script"""
    os.makedirs(Config.LOG_DIR, exist_ok=True)
    logging.basicConfig(
        level=logging.INFO,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        handlers=[
            logging.FileHandler(os.path.join(Config.LOG_DIR, f'csv_import_{datetime.now().strftime("%Y%m%d_%H%M%S")}.log')),
            logging.StreamHandler()
        ]
    )
    return logging.getLogger(__name__)


def parse_event_row(row: Dict[str, str], default_timestamp: int) -> StatEvent:
    """
    Parse one CSV row into a StatEvent.

    Raises:
        UnknownStatKind: If the stat column names no known kind
        ValueError: If player, value or timestamp cannot be read
    """
    kind = StatKind.resolve((row.get('stat') or '').strip())
    player_id = UUID((row.get('player') or '').strip())
    value = int((row.get('value') or '').strip())

    raw_timestamp = (row.get('timestamp') or '').strip()
    timestamp = int(raw_timestamp) if raw_timestamp else default_timestamp

    return StatEvent(
        player_id=player_id,
        kind=kind,
        value=value,
        timestamp=timestamp,
        display_key=kind.display_key
    )


def read_events(csv_path: str, logger: logging.Logger) -> Tuple[List[StatEvent], int]:
    """Read all importable events from the CSV, returning (events, skipped_count)"""
    events = []
    skipped = 0
    default_timestamp = current_millis()

    with open(csv_path, newline='', encoding='utf-8') as csv_file:
        reader = csv.DictReader(csv_file)
        for line_number, row in enumerate(reader, start=2):
            try:
                events.append(parse_event_row(row, default_timestamp))
            except UnknownStatKind as e:
                logger.warning(f"Line {line_number}: unknown stat kind '{e.identifier}', skipping")
                skipped += 1
            except ValueError as e:
                logger.warning(f"Line {line_number}: {e}, skipping")
                skipped += 1

    return events, skipped


async def import_events(csv_path: str, database_url: Optional[str] = None) -> Dict[str, int]:
    """
    Import stat events from a CSV file.

    Returns:
        Dictionary with 'events_imported' and 'rows_skipped' counts
    """
    logger = logging.getLogger(__name__)

    if not os.path.exists(csv_path):
        raise FileNotFoundError(f"CSV file not found: {csv_path}")

    events, skipped = read_events(csv_path, logger)

    db = Database(database_url)
    await db.initialize()
    try:
        imported = await StatOperations(db).record_events(events)
    except Exception as e:
        logger.error(f"Error during CSV import: {e}")
        raise
    finally:
        await db.close()

    results = {
        'events_imported': imported,
        'rows_skipped': skipped
    }

    logger.info(
        f"CSV import completed: "
        f"{results['events_imported']} events imported, "
        f"{results['rows_skipped']} rows skipped"
    )

    return results


async def main():
    """Main entry point for standalone script execution"""
    parser = argparse.ArgumentParser(description="Import stat events from a CSV file")
    parser.add_argument('csv_path', help="CSV file with player,stat,value,timestamp columns")
    parser.add_argument('--database-url', default=None, help="Overrides DATABASE_URL")
    args = parser.parse_args()

    logger = setup_logging()

    try:
        logger.info(f"Starting CSV import from {args.csv_path}...")
        results = await import_events(args.csv_path, args.database_url)

        print("\n" + "="*50)
        print("CSV IMPORT COMPLETED SUCCESSFULLY")
        print("="*50)
        print(f"Events imported: {results['events_imported']}")
        print(f"Rows skipped: {results['rows_skipped']}")
        print("="*50)

    except Exception as e:
        logger.error(f"CSV import failed: {e}")
        print(f"\nERROR: {e}")
        sys.exit(1)


if __name__ == "__main__":
    asyncio.run(main())
