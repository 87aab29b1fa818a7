"""Command line front end for the commitment tracker."""

import argparse
import logging
import sys
from typing import Optional

from ..config import settings
from ..dashboard.renderer import THEMES, DashboardRenderer
from .api import GoalApiClient, GoalApiError
from .state import LocalStorage
from .tracker import CommitmentTracker, Notice

logger = logging.getLogger(__name__)


def _print_notices(notices: list[Notice]) -> None:
    for notice in notices:
        prefix = "!" if notice.variant == "destructive" else "*"
        print(f"{prefix} {notice.title}: {notice.description}")


def _print_status(tracker: CommitmentTracker) -> None:
    state = tracker.state
    if state.mode == "setup":
        print("No active goal. Start one with: commitment start <days>")
        return

    summary = tracker.summary()
    print(f"{summary.goal_days}-day commitment, started {summary.started_on}")
    print(
        f"  Completed: {summary.completed_days}  Remaining: {summary.remaining_days}"
        f"  ({summary.percentage}%)"
    )
    print(f"  Achievement: {summary.achievement}")
    if summary.milestone:
        print(f"  {summary.milestone.title} {summary.milestone.message}")
    strip = "".join(
        {"completed": "#", "today": "T"}.get(slot, ".") for slot in summary.week_progress
    )
    print(f"  Last 7 days: [{strip}]")
    print(f"  Last check-in: {summary.last_check_in}")


def _cmd_start(tracker: CommitmentTracker, args: argparse.Namespace) -> int:
    notices = tracker.start_goal(args.days)
    _print_notices(notices)
    if any(n.variant == "destructive" for n in notices):
        return 1
    _print_status(tracker)
    return 0


def _cmd_checkin(tracker: CommitmentTracker, args: argparse.Namespace) -> int:
    notices = tracker.check_in()
    _print_notices(notices)
    _print_status(tracker)
    return 1 if any(n.variant == "destructive" for n in notices) else 0


def _cmd_status(tracker: CommitmentTracker, args: argparse.Namespace) -> int:
    _print_status(tracker)
    return 0


def _cmd_sync(tracker: CommitmentTracker, args: argparse.Namespace) -> int:
    tracker.sync()
    _print_status(tracker)
    return 0


def _cmd_reset(tracker: CommitmentTracker, args: argparse.Namespace) -> int:
    if not args.yes:
        answer = input(
            "Are you sure you want to start a new goal? "
            "This will reset your current progress. [y/N] "
        )
        if answer.strip().lower() not in ("y", "yes"):
            print("Cancelled.")
            return 0
    _print_notices(tracker.reset())
    return 0


def _cmd_render(tracker: CommitmentTracker, args: argparse.Namespace) -> int:
    renderer = DashboardRenderer(output_dir=args.output_dir, theme=args.theme)
    _, file_path = renderer.render(tracker.summary())
    print(f"Dashboard saved to {file_path}")
    return 0


def _build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(
        prog="commitment",
        description="Track a daily commitment streak.",
    )
    p.add_argument("--api-url", default=settings.api_url, help="Goal API base URL")
    p.add_argument(
        "--state-path",
        default=settings.client_state_path,
        help="Local state file",
    )
    p.add_argument("-v", "--verbose", action="store_true", help="Log progress to stderr")
    sub = p.add_subparsers(dest="cmd", required=True)

    ps = sub.add_parser("start", help="Start a new goal")
    ps.add_argument("days", help="Goal length in days (1-365)")
    ps.set_defaults(func=_cmd_start)

    ps = sub.add_parser("checkin", help="Record today's check-in")
    ps.set_defaults(func=_cmd_checkin)

    ps = sub.add_parser("status", help="Show the locally saved progress")
    ps.set_defaults(func=_cmd_status)

    ps = sub.add_parser("sync", help="Refresh local progress from the server")
    ps.set_defaults(func=_cmd_sync)

    ps = sub.add_parser("reset", help="Abandon the current goal")
    ps.add_argument("-y", "--yes", action="store_true", help="Skip confirmation")
    ps.set_defaults(func=_cmd_reset)

    ps = sub.add_parser("render", help="Render the progress dashboard to PNG")
    ps.add_argument("--theme", choices=sorted(THEMES), default=settings.dashboard_theme)
    ps.add_argument("--output-dir", default=settings.dashboard_output_dir)
    ps.set_defaults(func=_cmd_render)

    return p


def main(argv: Optional[list[str]] = None, session=None) -> int:
    args = _build_parser().parse_args(argv)

    logging.basicConfig(
        level=logging.INFO if args.verbose else logging.WARNING,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )

    api = GoalApiClient(args.api_url, timeout=settings.api_timeout, session=session)
    tracker = CommitmentTracker(api, LocalStorage(args.state_path))

    try:
        return args.func(tracker, args)
    except GoalApiError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())
