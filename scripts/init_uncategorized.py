"""Provision the fallback category for every user and optionally file orphan prompts into it."""

from __future__ import annotations

import argparse
import logging
import sys

from promptscope.db import database
from promptscope.services.uncategorized import assign_orphan_prompts, backfill_uncategorized


logger = logging.getLogger("promptscope.scripts.init_uncategorized")


# Access SessionLocal dynamically so test fixtures that rebind the
# sessionmaker are respected.
SessionLocal = lambda: database.SessionLocal()


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Create missing uncategorized categories")
    parser.add_argument(
        "--assign-orphans",
        action="store_true",
        help="Also move prompts without a category into their owner's uncategorized category",
    )
    return parser.parse_args(argv)


def run(assign_orphans: bool) -> int:
    session = SessionLocal()
    try:
        stats = backfill_uncategorized(session)
        print(
            f"Uncategorized categories: {stats['created']} created, "
            f"{stats['skipped']} already present ({stats['total']} users)."
        )
        if assign_orphans:
            moved = assign_orphan_prompts(session)
            print(f"Moved {moved} prompts into uncategorized categories.")
        return 0
    finally:
        session.close()


def main(argv: list[str] | None = None) -> int:
    if not logging.getLogger().handlers:
        logging.basicConfig(level=logging.INFO, format="%(asctime)s %(levelname)s %(name)s: %(message)s")
    args = parse_args(argv)
    return run(assign_orphans=args.assign_orphans)


if __name__ == "__main__":  # pragma: no cover - manual execution path
    sys.exit(main())
