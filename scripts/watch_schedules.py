"""Fetch, diff and cache group timetables from the command line.

Run with: python scripts/watch_schedules.py <command> [options]

Commands:
  show GROUP             Print the cached schedule for a group
  fetch GROUP            Fetch and print a group's schedule (no caching)
  refresh [GROUP ...]    Run one batch refresh (default: TIMETABLE_GROUPS)
  watch [GROUP ...]      Refresh periodically until interrupted

Examples:
  python scripts/watch_schedules.py fetch ИС502.1
  python scripts/watch_schedules.py refresh ИС502.1 ИС502.2 --today-day-id 3
  python scripts/watch_schedules.py watch --interval 3600

Exit codes:
  0 = success
  1 = error (message on stderr)
"""

import argparse
import asyncio
import os
import sys

from dotenv import load_dotenv

load_dotenv()

# Add project root to path for src imports
sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

from src.timetable.cache import open_cache  # noqa: E402
from src.timetable.config import get_config  # noqa: E402
from src.timetable.logging import get_logger, setup_logging  # noqa: E402
from src.timetable.pages.schedule import parse_schedule  # noqa: E402
from src.timetable.refresh import ScheduleRefresher  # noqa: E402
from src.timetable.session import DocumentSession  # noqa: E402
from src.timetable.utils import to_cyrillic  # noqa: E402

log = get_logger("watch_schedules")

NO_DATA = "Нет данных по этой группе, попробуйте позже."


def _parse_args() -> argparse.Namespace:
    """Parse CLI arguments using argparse."""
    parser = argparse.ArgumentParser(
        description="Fetch, diff and cache group timetables.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument(
        "--today-day-id",
        type=int,
        default=None,
        choices=range(0, 6),
        help="Day slot treated as today, 0=Monday..5=Saturday (default: from config).",
    )
    sub = parser.add_subparsers(dest="command", required=True)

    show = sub.add_parser("show", help="Print the cached schedule for a group.")
    show.add_argument("group")

    fetch = sub.add_parser("fetch", help="Fetch and print a schedule without caching.")
    fetch.add_argument("group")

    refresh = sub.add_parser("refresh", help="Run one batch refresh.")
    refresh.add_argument("groups", nargs="*")

    watch = sub.add_parser("watch", help="Refresh periodically until interrupted.")
    watch.add_argument("groups", nargs="*")
    watch.add_argument(
        "--interval",
        type=float,
        default=None,
        help="Seconds between cycles (default: from config).",
    )
    return parser.parse_args()


async def main(args: argparse.Namespace) -> int:
    config = get_config()
    setup_logging(json_output=config.log_json, log_level=config.log_level)
    today_day_id = (
        args.today_day_id if args.today_day_id is not None else config.today_day_id
    )

    if args.command == "fetch":
        group = to_cyrillic(args.group)
        with DocumentSession.from_config(config) as source:
            html = await asyncio.to_thread(source.fetch, group)
        print(parse_schedule(html, today_day_id, group_key=group).render())
        return 0

    async with open_cache(config) as cache:
        if args.command == "show":
            schedule = await cache.get(to_cyrillic(args.group))
            print(schedule.render() if schedule is not None else NO_DATA)
            return 0

        groups = [to_cyrillic(g) for g in (args.groups or config.groups)]
        if not groups:
            print("ERROR: no groups given and TIMETABLE_GROUPS is empty", file=sys.stderr)
            return 1

        with DocumentSession.from_config(config) as source:
            refresher = ScheduleRefresher(
                source,
                cache,
                request_delay=config.request_delay_seconds,
            )
            if args.command == "refresh":
                report = await refresher.refresh_batch(groups, today_day_id)
                for result in report.notices:
                    print(f"[{result.group}] {result.notice}")
                return 1 if len(report.failed) == len(groups) else 0

            interval = args.interval or config.refresh_interval_seconds
            log.info("watch_started", groups=groups, interval=interval)
            await refresher.run_forever(groups, today_day_id, interval)
    return 0


if __name__ == "__main__":
    args = _parse_args()
    try:
        sys.exit(asyncio.run(main(args)))
    except KeyboardInterrupt:
        sys.exit(0)
    except Exception as e:
        print(f"ERROR: {e}", file=sys.stderr)
        sys.exit(1)
