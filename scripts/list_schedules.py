"""List class schedules from the school API as JSON or a table.

Fetches every schedule once, then filters, sorts and paginates locally
with the same engine the dashboard screens use.

Run with: python scripts/list_schedules.py
Table:    python scripts/list_schedules.py --table
Search:   python scripts/list_schedules.py --search "room a" --day monday
Paging:   python scripts/list_schedules.py --sort-by start_time --page 2 --page-size 5
Student:  python scripts/list_schedules.py --student

API location and token come from API_BASE_URL / API_TOKEN (or .env).

Exit codes:
  0 = success (JSON or table on stdout)
  1 = error (message on stderr)
"""

import argparse
import asyncio
import json
import os
import sys

from dotenv import load_dotenv

load_dotenv()

# Add project root to path for src imports
sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

from src.schedule_view.config import get_config  # noqa: E402
from src.schedule_view.display import format_table  # noqa: E402
from src.schedule_view.engine import ScheduleViewEngine  # noqa: E402
from src.schedule_view.logging import setup_logging  # noqa: E402
from src.schedule_view.models import SortKey, SortOrder, ViewerRole  # noqa: E402
from src.schedule_view.paging import page_count  # noqa: E402


def _log(msg: str) -> None:
    """Write diagnostic messages to stderr so stdout stays clean for JSON."""
    print(msg, file=sys.stderr)


def _parse_args() -> argparse.Namespace:
    """Parse CLI arguments using argparse."""
    parser = argparse.ArgumentParser(
        description="List class schedules as JSON or table.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument("--search", type=str, default="", help="Free-text search.")
    parser.add_argument("--room", type=int, default=None, help="Room id.")
    parser.add_argument("--class", dest="class_id", type=int, default=None, help="Class id.")
    parser.add_argument("--day", type=str, default=None, help="Day of week, e.g. monday.")
    parser.add_argument(
        "--sort-by",
        choices=[key.value for key in SortKey],
        default=None,
        help="Sort column (default from config).",
    )
    parser.add_argument(
        "--order",
        choices=[order.value for order in SortOrder],
        default=None,
        help="Sort direction (default from config).",
    )
    parser.add_argument("--page", type=int, default=1, help="1-based page number.")
    parser.add_argument("--page-size", type=int, default=None, help="Rows per page.")
    parser.add_argument(
        "--student",
        action="store_true",
        help="Use the student view (student-facing error messages).",
    )
    parser.add_argument(
        "--table",
        action="store_true",
        help="Output a human-readable table instead of JSON.",
    )
    return parser.parse_args()


async def main(args: argparse.Namespace) -> int:
    config = get_config()
    setup_logging(json_output=config.log_json, log_level=config.log_level)

    role = ViewerRole.STUDENT if args.student else ViewerRole.ADMIN
    # CLI runs shouldn't overwrite the dashboard's saved filters
    config = config.model_copy(update={"persist_filters": False})
    engine = ScheduleViewEngine.from_config(config, role=role)

    _log(f"list_schedules: fetching from {config.api_base_url} ({role.value})")
    if await engine.fetch_all() is None:
        _log("list_schedules: fetch failed")
        return 1

    engine.set_filter("search", args.search)
    engine.set_filter("room_id", args.room)
    engine.set_filter("class_id", args.class_id)
    engine.set_filter("day_of_week", args.day)
    if args.sort_by:
        engine.set_filter("sort_by", args.sort_by)
    if args.order:
        engine.set_filter("sort_order", args.order)
    if args.page_size:
        engine.set_page_size(args.page_size)
    engine.go_to_page(args.page)

    meta = engine.meta
    _log(
        f"  page {meta.page}/{page_count(meta.total, meta.limit)} "
        f"({len(engine.schedules)} of {meta.total} matching)"
    )

    if args.table:
        print(format_table(engine.schedules))
    else:
        output = {
            "schedules": [entity.model_dump(mode="json") for entity in engine.schedules],
            "meta": meta.model_dump(),
        }
        print(json.dumps(output, indent=2))
    return 0


if __name__ == "__main__":
    args = _parse_args()
    try:
        sys.exit(asyncio.run(main(args)))
    except Exception as e:
        print(f"ERROR: {e}", file=sys.stderr)
        sys.exit(1)
