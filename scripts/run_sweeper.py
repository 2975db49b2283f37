#!/usr/bin/env python3
"""
Run the GalleryHQ retention sweep
=================================
Permanently erases messages that both the sender and the recipient have
deleted. Meant for cron; use --loop to keep running on an interval instead.

Usage:
    python scripts/run_sweeper.py [--batch-size 500] [--loop] [--interval 3600]
"""

import argparse
import time

from galleryhq.config import get_settings
from galleryhq.logging_config import get_logger
from galleryhq.worker.retention import run_sweep

logger = get_logger("sweeper")


def main():
    settings = get_settings()

    parser = argparse.ArgumentParser(description="Erase messages hidden by both participants")
    parser.add_argument("--batch-size", type=int, default=settings.sweep_batch_size)
    parser.add_argument("--loop", action="store_true", help="Keep sweeping on an interval")
    parser.add_argument("--interval", type=int, default=settings.sweep_interval_seconds,
                        help="Seconds between passes with --loop")
    args = parser.parse_args()

    while True:
        erased = run_sweep(batch_size=args.batch_size)
        logger.info("Sweep pass finished", erased=erased)

        if not args.loop:
            break
        time.sleep(args.interval)


if __name__ == "__main__":
    main()
