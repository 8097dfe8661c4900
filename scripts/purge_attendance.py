"""Delete attendance records older than RETENTION_DAYS (or --days)."""

from __future__ import annotations

import argparse
import importlib
import sys
from pathlib import Path

REPO_ROOT = Path(__file__).resolve().parents[1]
if str(REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(REPO_ROOT))

from dotenv import load_dotenv

from config import get_settings_module

from src.ojt_tracker.ojt_tracker.container import build_container
from src.ojt_tracker.ojt_tracker.core.constants import DEFAULT_RETENTION_DAYS
from src.ojt_tracker.ojt_tracker.main import configure_logging


def main(argv: list[str] | None = None) -> None:
    load_dotenv(override=False)
    settings = importlib.import_module(get_settings_module())
    configure_logging(getattr(settings, "LOG_LEVEL", "INFO"))

    parser = argparse.ArgumentParser(description=__doc__)
    parser.add_argument(
        "--days",
        type=int,
        default=int(getattr(settings, "RETENTION_DAYS", DEFAULT_RETENTION_DAYS)),
        help="keep records from the last N days",
    )
    args = parser.parse_args(argv)

    container = build_container(
        db_config=dict(settings.DB_CONFIG),
        timezone=getattr(settings, "TIMEZONE", None),
    )
    try:
        deleted = container.ledger.purge_older_than(args.days)
    finally:
        container.conn.shutdown()
    print(f"OK: Deleted {deleted} attendance record(s) older than {args.days} days")


if __name__ == "__main__":
    main()
