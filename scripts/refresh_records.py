#!/usr/bin/env python3
"""CLI script to inspect or refresh the stored regional records snapshot."""
import argparse
import logging
import sys
from pathlib import Path

# Add project root to path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from src.config.settings import get_settings
from src.records import CorruptStateError, DurableStore, StoreReadError, create_records_store


def show_state(store: DurableStore) -> int:
    """Print a summary of the stored snapshot."""
    try:
        snapshot = store.read()
    except (CorruptStateError, StoreReadError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    if snapshot is None:
        print(f"No stored records at {store.path}")
        return 1

    world = sum(1 for r in snapshot.records if r.record_key == "WR")
    print(f"State file: {store.path}")
    print(f"  Updated at: {snapshot.updated_at.isoformat()}")
    print(f"  Records: {snapshot.record_count}")
    print(f"  World records: {world}")
    print(f"  Regions: {len({r.record_key for r in snapshot.records})}")
    return 0


def main():
    parser = argparse.ArgumentParser(
        description="Fetch WCA regional records and write them to the local state file"
    )
    parser.add_argument(
        "--show", "-s",
        action="store_true",
        help="Only print the stored snapshot, do not fetch",
    )
    parser.add_argument(
        "--verbose", "-v",
        action="store_true",
        help="Enable debug logging",
    )

    args = parser.parse_args()

    settings = get_settings()
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else settings.log_level,
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )

    records_store = create_records_store(settings)

    if args.show:
        sys.exit(show_state(records_store.store))

    print(f"Fetching records from {settings.wca_api_url}")
    if not records_store.refresh():
        print("\nError: records update failed", file=sys.stderr)
        sys.exit(1)

    print(f"\nRefresh complete!")
    sys.exit(show_state(records_store.store))


if __name__ == "__main__":
    main()
