#!/usr/bin/env python3
"""Watch the shipping order list from a terminal.

This script starts an :class:`~ordersync.monitor.OrderMonitor` against a
running backend, prints a status summary after every applied refresh and
echoes notifications to stderr.

Usage
-----
Set environment variables and run::

    export ORDERSYNC_BASE_URL="http://localhost:3000/api"
    export ORDERSYNC_TOKEN="<bearer token>"
    python scripts/watch_orders.py

Options::

    --role ROLE          Role of the signed-in user (default: admin)
    --search TEXT        Only list orders matching TEXT
    --duration SECONDS   Stop after SECONDS (default: run until Ctrl-C)
    --verbose            Enable debug logging
"""

from __future__ import annotations

import argparse
import asyncio
import contextlib
import logging
import os
import sys
from pathlib import Path

# Allow running from the repo root without installing the package.
_repo = Path(__file__).resolve().parent.parent
_src = _repo / "src"
if _src.is_dir():
    sys.path.insert(0, str(_src))

from ordersync import (  # noqa: E402
    HeadlessNotificationPlatform,
    MemoryCredentialStore,
    OrderMonitor,
    OrderStatus,
    PermissionState,
    Session,
    Snapshot,
    SyncConfig,
    User,
)


def _print_snapshot(snapshot: Snapshot, search: str | None) -> None:
    refreshed = snapshot.refreshed_at.isoformat() if snapshot.refreshed_at else "-"
    counts = "  ".join(f"{status.value}={snapshot.counts[status]}" for status in OrderStatus)
    print(f"\n[{refreshed}] {snapshot.total} orders  {counts}")
    for order in snapshot.filter(search=search or ""):
        tracking = order.tracking_number or "-"
        print(f"  #{order.id:<6} {order.status_text:<6} {tracking:<16} {order.receiver_name or ''}")


async def main() -> None:
    parser = argparse.ArgumentParser(description="Poll the shipping order list and print changes.")
    parser.add_argument("--role", default="admin", help="Role of the signed-in user")
    parser.add_argument("--search", help="Only list orders matching this text")
    parser.add_argument("--duration", type=float, help="Stop after this many seconds")
    parser.add_argument("--verbose", "-v", action="store_true", help="Enable debug logging")
    args = parser.parse_args()

    if args.verbose:
        logging.basicConfig(level=logging.DEBUG, format="%(levelname)s %(name)s: %(message)s")
    else:
        logging.basicConfig(level=logging.INFO, format="%(levelname)s %(name)s: %(message)s")

    token = os.environ.get("ORDERSYNC_TOKEN")
    if not token:
        print("ORDERSYNC_TOKEN is not set", file=sys.stderr)
        raise SystemExit(2)

    config = SyncConfig.from_env()
    session = Session(
        user=User(id=0, username=os.environ.get("USER", "operator"), role=args.role),
        credentials=MemoryCredentialStore(token),
    )
    platform = HeadlessNotificationPlatform(permission=PermissionState.GRANTED)

    async with OrderMonitor(config, session, platform=platform) as monitor:
        monitor.store.subscribe(lambda snapshot: _print_snapshot(snapshot, args.search))
        _print_snapshot(monitor.store.snapshot, args.search)
        with contextlib.suppress(asyncio.TimeoutError):
            await asyncio.wait_for(asyncio.Event().wait(), timeout=args.duration)


if __name__ == "__main__":
    with contextlib.suppress(KeyboardInterrupt):
        asyncio.run(main())
