#!/usr/bin/env python
"""Report catalog paths that resolve ambiguously in a dataset export."""

import sys
from pathlib import Path

from tuning_catalog.services.catalog_store import InMemoryCatalogStore
from tuning_catalog.services.resolver import find_duplicate_paths


def main():
    if len(sys.argv) != 2:
        print("Usage: check_catalog.py <export.ndjson|export.json>")
        sys.exit(2)

    export_path = Path(sys.argv[1])
    if not export_path.exists():
        print(f"Error: export not found at {export_path}")
        sys.exit(1)

    store = InMemoryCatalogStore.from_file(export_path)
    duplicates = find_duplicate_paths(store.brands)
    if not duplicates:
        print(f"OK: {len(store.brands)} brands, no ambiguous paths")
        return

    print(f"Found {len(duplicates)} ambiguous paths (only the first entry is reachable):")
    for path, count in duplicates:
        print(f"  {path}  x{count}")
    sys.exit(1)


if __name__ == "__main__":
    main()
