#!/usr/bin/env python3
"""
dayblocks Command Line Interface

Main entry point for the `dayblocks` command. Inputs are JSON files holding
the same dicts the models' ``from_dict`` methods accept; every command prints
a JSON result with a ``success`` flag.

Usage:
    dayblocks energy --prefs prefs.json
    dayblocks slots --prefs prefs.json --blocks blocks.json --date 2024-01-15 --energy high --duration 60
    dayblocks notify-at --prefs prefs.json --date 2024-01-15 --start 14:00 --prep 10
    dayblocks preview --blocks blocks.json --proposed proposed.json
    dayblocks goals --prefs prefs.json --goals goals.json --blocks blocks.json
    dayblocks review --prefs prefs.json --goals goals.json --blocks blocks.json [--week 2024-01-15]
    dayblocks --version
"""

from __future__ import annotations

import argparse
import json
import sys
from pathlib import Path
from typing import Any

from dayblocks import __version__
from dayblocks.logging_config import get_logger, setup_logging

logger = get_logger(__name__)


def _load_json(path: str | None, default: Any = None) -> Any:
    if path is None:
        return default
    with open(Path(path)) as f:
        return json.load(f)


def _load_prefs(args):
    from dayblocks.preferences import UserPreferences

    prefs = UserPreferences.from_dict(_load_json(args.prefs, {}))
    prefs.validate()
    return prefs


def _load_blocks(path: str | None):
    from dayblocks.blocks.models import Block

    return [Block.from_dict(item) for item in _load_json(path, [])]


def _load_goals(path: str | None):
    from dayblocks.goals.models import Goal

    return [Goal.from_dict(item) for item in _load_json(path, [])]


# =============================================================================
# Commands
# =============================================================================

def cmd_energy(args) -> dict[str, Any]:
    """Handle energy subcommand."""
    from dayblocks.energy.slots import get_energy_context

    return {"success": True, "data": get_energy_context(_load_prefs(args))}


def cmd_slots(args) -> dict[str, Any]:
    """Handle slots subcommand."""
    from dayblocks.energy.slots import find_optimal_slots

    result = find_optimal_slots(
        date=args.date,
        task_energy=args.energy,
        duration_minutes=args.duration,
        blocks=_load_blocks(args.blocks),
        prefs=_load_prefs(args),
    )
    return {"success": True, "data": result.to_dict()}


def cmd_notify_at(args) -> dict[str, Any]:
    """Handle notify-at subcommand."""
    from dayblocks.blocks.notify import decide_notification

    prefs = _load_prefs(args)
    decision = decide_notification(
        date=args.date,
        start_time=args.start,
        prep_buffer=args.prep,
        sleep_time=prefs.sleep_time,
        wake_time=prefs.wake_time,
        timezone=prefs.timezone,
        estimated_travel_time=args.travel,
    )
    return {"success": True, "data": decision.to_dict()}


def cmd_preview(args) -> dict[str, Any]:
    """Handle preview subcommand."""
    from dayblocks.blocks.conflicts import validate_schedule_preview

    result = validate_schedule_preview(_load_json(args.proposed, []), _load_blocks(args.blocks))
    return {"success": True, "data": result.to_dict()}


def cmd_goals(args) -> dict[str, Any]:
    """Handle goals subcommand."""
    from dayblocks.goals.progress import format_goals_summary, get_goals_progress_for_agent

    prefs = _load_prefs(args)
    goals = _load_goals(args.goals)
    blocks = _load_blocks(args.blocks)

    data = get_goals_progress_for_agent(
        goals, blocks, prefs.timezone, goal_id=args.goal_id, category=args.category
    )
    data["summary"] = format_goals_summary(goals, blocks, prefs.timezone)
    data.pop("success")
    return {"success": True, "data": data}


def cmd_review(args) -> dict[str, Any]:
    """Handle review subcommand."""
    from dayblocks.goals.review import (
        calculate_weekly_review,
        format_weekly_review_summary,
        get_weekly_insights,
        get_weekly_suggestions,
    )

    prefs = _load_prefs(args)
    review = calculate_weekly_review(
        _load_blocks(args.blocks), _load_goals(args.goals), prefs, week_start=args.week
    )
    return {
        "success": True,
        "data": {
            "review": review.to_dict(),
            "insights": [i.to_dict() for i in get_weekly_insights(review)],
            "suggestions": [s.to_dict() for s in get_weekly_suggestions(review, prefs)],
            "summary": format_weekly_review_summary(review),
        },
    }


# =============================================================================
# Entry point
# =============================================================================

def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="dayblocks",
        description="dayblocks - Energy-aware day planning",
    )
    parser.add_argument(
        "--version", "-V", action="store_true", help="Show version and exit"
    )
    parser.add_argument(
        "--log-level", default=None, help="Log level (default: DAYBLOCKS_LOG_LEVEL or INFO)"
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    # Energy subcommand
    energy_parser = subparsers.add_parser("energy", help="Current energy context")
    energy_parser.add_argument("--prefs", required=True, help="Preferences JSON file")
    energy_parser.set_defaults(func=cmd_energy)

    # Slots subcommand
    slots_parser = subparsers.add_parser("slots", help="Best free slots for a task")
    slots_parser.add_argument("--prefs", required=True, help="Preferences JSON file")
    slots_parser.add_argument("--blocks", help="Existing blocks JSON file")
    slots_parser.add_argument("--date", required=True, help="Date (YYYY-MM-DD)")
    slots_parser.add_argument(
        "--energy", default="medium", choices=["low", "medium", "high"],
        help="Energy the task needs (default: medium)",
    )
    slots_parser.add_argument(
        "--duration", type=int, default=60, help="Task length in minutes (default: 60)"
    )
    slots_parser.set_defaults(func=cmd_slots)

    # Notify-at subcommand
    notify_parser = subparsers.add_parser("notify-at", help="When to remind for a block")
    notify_parser.add_argument("--prefs", required=True, help="Preferences JSON file")
    notify_parser.add_argument("--date", required=True, help="Block date (YYYY-MM-DD)")
    notify_parser.add_argument("--start", required=True, help="Block start time (HH:MM)")
    notify_parser.add_argument("--prep", type=int, default=0, help="Prep buffer in minutes")
    notify_parser.add_argument("--travel", type=int, default=None, help="Travel time in minutes")
    notify_parser.set_defaults(func=cmd_notify_at)

    # Preview subcommand
    preview_parser = subparsers.add_parser("preview", help="Check a batch of proposed blocks")
    preview_parser.add_argument("--blocks", help="Existing blocks JSON file")
    preview_parser.add_argument("--proposed", required=True, help="Proposed blocks JSON file")
    preview_parser.set_defaults(func=cmd_preview)

    # Goals subcommand
    goals_parser = subparsers.add_parser("goals", help="This week's goal progress")
    goals_parser.add_argument("--prefs", required=True, help="Preferences JSON file")
    goals_parser.add_argument("--goals", required=True, help="Goals JSON file")
    goals_parser.add_argument("--blocks", help="Blocks JSON file")
    goals_parser.add_argument("--goal-id", default=None, help="Only this goal")
    goals_parser.add_argument("--category", default=None, help="Only this category")
    goals_parser.set_defaults(func=cmd_goals)

    # Review subcommand
    review_parser = subparsers.add_parser("review", help="Weekly review")
    review_parser.add_argument("--prefs", required=True, help="Preferences JSON file")
    review_parser.add_argument("--goals", help="Goals JSON file")
    review_parser.add_argument("--blocks", help="Blocks JSON file")
    review_parser.add_argument("--week", default=None, help="Any date in the week (default: this week)")
    review_parser.set_defaults(func=cmd_review)

    return parser


def main(argv: list[str] | None = None) -> int:
    """Main CLI entry point."""
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.version:
        print(f"dayblocks {__version__}")
        return 0

    if not args.command:
        parser.print_help()
        return 0

    setup_logging(level=args.log_level)

    try:
        result = args.func(args)
    except (OSError, KeyError, TypeError, ValueError) as e:
        logger.error(f"{args.command} failed: {e}")
        result = {"success": False, "error": str(e)}

    print(json.dumps(result, indent=2, default=str))
    return 0 if result["success"] else 1


if __name__ == "__main__":
    sys.exit(main())
