#!/usr/bin/env python3
"""
Pro Fit Agent CLI.

Usage:
    profit-agent serve --port 8000
    profit-agent init-db
    profit-agent refresh ATHLETE_ID
    profit-agent week ATHLETE_ID
    profit-agent pairing-code ATHLETE_ID
    profit-agent message telegram 12345 "log run 45min 7km rpe6"
"""

import argparse
import sys
from datetime import date

from .config import get_settings
from .db.store import TrainingStore
from .exceptions import ProFitAgentError
from .logging_config import configure_logging
from .messaging.dispatcher import MessageDispatcher
from .messaging.pairing import PairingService
from .services.activity import ActivityService
from .services.lifecycle import SessionLifecycleService
from .services.milestones import MilestoneService
from .services.refresh import RefreshPlanner


class Colors:
    RED = "\033[91m"
    GREEN = "\033[92m"
    CYAN = "\033[96m"
    BOLD = "\033[1m"
    RESET = "\033[0m"


def _parse_date(value: str) -> date:
    try:
        return date.fromisoformat(value)
    except ValueError:
        raise argparse.ArgumentTypeError(f"not an ISO date: {value}")


def cmd_serve(args, store: TrainingStore):
    """Run the HTTP API."""
    import uvicorn

    uvicorn.run(
        "profit_agent.main:app",
        host=args.host,
        port=args.port,
        reload=args.reload,
        log_level=get_settings().log_level.lower(),
    )


def cmd_init_db(args, store: TrainingStore):
    """Tables are created when the store opens; just report where."""
    print(f"{Colors.GREEN}Database ready:{Colors.RESET} {get_settings().database_path}")


def cmd_refresh(args, store: TrainingStore):
    planner = RefreshPlanner(store, horizon_days=get_settings().session_horizon_days)
    result = planner.refresh(args.athlete_id, args.today)
    print()
    print(f"{Colors.BOLD}Refreshed sessions for {args.athlete_id}{Colors.RESET}")
    print(f"  Kept:     {result.kept}")
    print(f"  Deleted:  {result.deleted}")
    print(f"  Inserted: {result.inserted}")
    if result.skipped_collisions:
        print(f"  Slots held by history: {result.skipped_collisions}")
    print()


def cmd_week(args, store: TrainingStore):
    """Show this week's compliance and volume."""
    stats = SessionLifecycleService(store).week_stats(args.athlete_id, args.today)
    print()
    print(f"{Colors.BOLD}Week {stats.week_start} to {stats.week_end}{Colors.RESET}")
    print("=" * 40)
    print(f"  Sessions:   {stats.completed}/{stats.total} ({stats.compliance_percent}%)")
    print(f"  Skipped:    {stats.skipped}")
    print(f"  Cancelled:  {stats.cancelled}")
    print(f"  Swim:       {stats.swim_distance_m:g} m")
    print(f"  Bike:       {stats.bike_distance_km:g} km")
    print(f"  Run:        {stats.run_distance_km:g} km")
    print(f"  Time:       {stats.total_minutes} min")
    print()


def cmd_pairing_code(args, store: TrainingStore):
    service = PairingService(store, ttl_minutes=get_settings().pairing_code_ttl_minutes)
    code = service.issue_code(args.athlete_id)
    print(f"{Colors.CYAN}{Colors.BOLD}{code.code}{Colors.RESET} (expires {code.expires_at:%H:%M})")


def cmd_message(args, store: TrainingStore):
    """Feed one chat message through the dispatcher and print the reply."""
    lifecycle = SessionLifecycleService(store)
    settings = get_settings()
    dispatcher = MessageDispatcher(
        store,
        PairingService(store, ttl_minutes=settings.pairing_code_ttl_minutes),
        ActivityService(store, lifecycle, MilestoneService(store)),
        lifecycle,
    )
    print(dispatcher.handle(args.channel, args.identifier, args.text, today=args.today))


COMMANDS = {
    "serve": cmd_serve,
    "init-db": cmd_init_db,
    "refresh": cmd_refresh,
    "week": cmd_week,
    "pairing-code": cmd_pairing_code,
    "message": cmd_message,
}


def main():
    """Main CLI entry point."""
    parser = argparse.ArgumentParser(
        description="Pro Fit Agent - 70.3 training plans with a coach",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  profit-agent serve --port 8000
  profit-agent refresh athlete-1
  profit-agent pairing-code athlete-1
  profit-agent message telegram 12345 "today"
        """,
    )
    parser.add_argument("--log-level", help="Override LOG_LEVEL")

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    serve_p = subparsers.add_parser("serve", help="Run the HTTP API")
    serve_p.add_argument("--host", default=get_settings().api_host)
    serve_p.add_argument("--port", type=int, default=get_settings().api_port)
    serve_p.add_argument("--reload", action="store_true", help="Reload on code changes")

    subparsers.add_parser("init-db", help="Create the database tables")

    refresh_p = subparsers.add_parser("refresh", help="Regenerate upcoming sessions")
    refresh_p.add_argument("athlete_id")
    refresh_p.add_argument("--today", type=_parse_date, help="Treat this date as today")

    week_p = subparsers.add_parser("week", help="Show weekly stats")
    week_p.add_argument("athlete_id")
    week_p.add_argument("--today", type=_parse_date)

    code_p = subparsers.add_parser("pairing-code", help="Issue a chat pairing code")
    code_p.add_argument("athlete_id")

    message_p = subparsers.add_parser("message", help="Simulate an inbound chat message")
    message_p.add_argument("channel", help="telegram, whatsapp, ...")
    message_p.add_argument("identifier", help="Chat id or phone number")
    message_p.add_argument("text")
    message_p.add_argument("--today", type=_parse_date)

    args = parser.parse_args()
    handler = COMMANDS.get(args.command)
    if handler is None:
        parser.print_help()
        return

    configure_logging(args.log_level)
    store = TrainingStore.open(get_settings().database_path)
    try:
        handler(args, store)
    except ProFitAgentError as e:
        print(f"{Colors.RED}Error:{Colors.RESET} {e.message}", file=sys.stderr)
        sys.exit(1)


if __name__ == "__main__":
    main()
