#!/usr/bin/env python3
"""Print the booking and purchase-order collections.

Opens a client from the environment, loads the requested collections
(seeding them from the site snapshot when the local storage is empty)
and prints them.

Usage
-----
::

    export CARBOOK_BASE_URL="http://localhost:8000"
    export CARBOOK_STORAGE_PATH="./carbook-storage.json"
    python scripts/show_records.py

Options::

    --collection {bookings,orders,all}   Collection to print (default: all)
    --set-status ID STATUS               Update one record before printing
    --json                               Output as machine-readable JSON
"""

from __future__ import annotations

import argparse
import asyncio
import json
import logging
import sys
from pathlib import Path
from typing import Any

# Allow running from the repo root without installing the package.
_repo = Path(__file__).resolve().parent.parent
_src = _repo / "src"
if _src.is_dir():
    sys.path.insert(0, str(_src))

from pycarbook import CarbookClient, CarbookConfig, RecordStore  # noqa: E402


def _section(title: str) -> str:
    line = "=" * 60
    return f"\n{line}\n  {title}\n{line}"


def _format_record(record: Any, id_field: str, status_field: str) -> str:
    if not isinstance(record, dict):
        return f"  {record!r}"
    head = f"  {record.get(id_field, '?')}  [{record.get(status_field, '-')}]"
    rest = ", ".join(f"{k}={v}" for k, v in record.items() if k not in (id_field, status_field))
    return f"{head}  {rest}" if rest else head


async def _dump(store: RecordStore, json_mode: bool) -> list[Any]:
    records = await store.list_all()
    if not json_mode:
        print(_section(f"{store.collection.name} ({len(records)})"))
        for record in records:
            print(_format_record(record, store.collection.id_field, store.collection.status_field))
    return records


async def main() -> None:
    parser = argparse.ArgumentParser(description="Print pycarbook record collections.")
    parser.add_argument("--collection", choices=("bookings", "orders", "all"), default="all")
    parser.add_argument("--set-status", nargs=2, metavar=("ID", "STATUS"), help="Update a record's status first")
    parser.add_argument("--json", action="store_true", dest="json_mode", help="Output machine-readable JSON")
    parser.add_argument("--verbose", "-v", action="store_true", help="Enable debug logging")
    args = parser.parse_args()

    if args.verbose:
        logging.basicConfig(level=logging.DEBUG, format="%(levelname)s %(name)s: %(message)s")
    else:
        logging.basicConfig(level=logging.WARNING)

    config = CarbookConfig.from_env()
    result: dict[str, Any] = {}

    async with CarbookClient(config) as client:
        stores = {"bookings": client.bookings, "orders": client.orders}
        selected = list(stores) if args.collection == "all" else [args.collection]

        if args.set_status:
            record_id, status = args.set_status
            for name in selected:
                outcome = await stores[name].update_status(record_id, status)
                print(f"{name}: {outcome.message}", file=sys.stderr)

        for name in selected:
            result[name] = await _dump(stores[name], args.json_mode)

    if args.json_mode:
        print(json.dumps(result, indent=2, default=str, ensure_ascii=False))


if __name__ == "__main__":
    asyncio.run(main())
