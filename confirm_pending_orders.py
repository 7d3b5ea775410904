#!/usr/bin/env python3
"""
Confirm pending orders whose modification deadline has passed.

Runs the same sweep as the server's background task, for deployments that
start the server with --no-sweep (or DEADLINE_SWEEP_ENABLED=false) and
schedule confirmations with cron instead.

Usage:
    # One sweep, e.g. from cron every minute
    python confirm_pending_orders.py --once

    # Keep sweeping every DEADLINE_SWEEP_INTERVAL_SECONDS
    python confirm_pending_orders.py

    # Sweep as if it were a given local time (testing, backfills)
    python confirm_pending_orders.py --once --at 2026-03-02T11:31

Exit codes:
    0  sweep completed (whether or not anything was confirmed)
    1  the sweep could not run (e.g. database unavailable)
"""

import argparse
import logging
import sys
import time
from datetime import datetime

from dotenv import load_dotenv

load_dotenv()

from sandwich_slots import config
from sandwich_slots.db import init_db, session_scope
from sandwich_slots.logging_config import setup_logging
from sandwich_slots.services import run_deadline_sweep

logger = logging.getLogger("sandwich_slots.confirm_pending_orders")


def sweep_once(at: datetime = None) -> int:
    """Run one sweep and return the number of confirmed orders."""
    confirmed = run_deadline_sweep(session_scope, now=at)
    print(f"Confirmed {confirmed} order(s)")
    return confirmed


def main():
    parser = argparse.ArgumentParser(
        description="Confirm pending orders past their modification deadline"
    )
    parser.add_argument(
        "--once",
        action="store_true",
        help="Run a single sweep and exit",
    )
    parser.add_argument(
        "--at",
        type=datetime.fromisoformat,
        help="Local time to sweep at (ISO format, default: now)",
    )
    parser.add_argument(
        "--interval",
        type=int,
        default=config.DEADLINE_SWEEP_INTERVAL_SECONDS,
        help="Seconds between sweeps when looping (default: %(default)s)",
    )
    args = parser.parse_args()

    setup_logging()

    try:
        init_db()
        if args.once or args.at:
            sweep_once(args.at)
            return 0

        logger.info("Sweeping every %d seconds, Ctrl+C to stop", args.interval)
        while True:
            sweep_once()
            time.sleep(args.interval)
    except KeyboardInterrupt:
        return 0
    except Exception:
        logger.exception("Deadline sweep failed")
        return 1


if __name__ == "__main__":
    sys.exit(main())
