"""Argument Parser - argv -> (Command, GlobalOptions).

Invariants:
    - Every subcommand maps to exactly one Command variant
    - Global --config/--local-test must precede the subcommand
    - start's own --config is kept separate (dest=start_config) so the global one
      can override it at dispatch time
    - Retired subcommands accept and keep any trailing arguments
"""

import argparse
from pathlib import Path

from validator.core.commands import (
    Command, Connect, Database, DatabaseCleanup, DatabaseInit, DatabaseStatus,
    GenConfig, GlobalOptions, Rental, RentalList, RentalStatus, RentalStop,
    Start, Status, Stop, Verify, VerifyLegacy,
)
from validator.core.domain_types import RentalState

_RETIRED = {"connect": Connect, "verify": Verify, "verify-legacy": VerifyLegacy}


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="validator", description="Validator node operator CLI",
    )
    parser.add_argument(
        "--config", type=Path, default=None,
        help="configuration file (overrides per-command --config)",
    )
    parser.add_argument(
        "--local-test", action="store_true",
        help="run against a local test setup (start only)",
    )
    sub = parser.add_subparsers(dest="command", required=True)

    start = sub.add_parser("start", help="start the validator service")
    start.add_argument("--config", dest="start_config", type=Path, default=None)

    sub.add_parser("stop", help="stop the running validator service")
    sub.add_parser("status", help="report validator service status")

    gen = sub.add_parser("gen-config", help="write a configuration template")
    gen.add_argument("--output", "-o", type=Path, default=Path("validator.toml"))

    for name in _RETIRED:
        retired = sub.add_parser(name, help="(removed)")
        retired.add_argument("args", nargs="*")

    database = sub.add_parser("database", help="database administration")
    db_sub = database.add_subparsers(dest="db_action", required=True)
    db_sub.add_parser("init", help="create tables")
    db_sub.add_parser("status", help="connectivity and row counts")
    cleanup = db_sub.add_parser("cleanup", help="purge finished rentals")
    cleanup.add_argument("--days", type=int, default=30)

    rental = sub.add_parser("rental", help="rental management (needs --config)")
    rental_sub = rental.add_subparsers(dest="rental_action", required=True)
    listing = rental_sub.add_parser("list", help="list rentals")
    listing.add_argument(
        "--status", dest="state", choices=[s.value for s in RentalState], default=None,
    )
    status = rental_sub.add_parser("status", help="show one rental")
    status.add_argument("rental_id")
    stop = rental_sub.add_parser("stop", help="stop one rental")
    stop.add_argument("rental_id")

    return parser


def _database_action(args: argparse.Namespace):
    if args.db_action == "init":
        return DatabaseInit()
    if args.db_action == "status":
        return DatabaseStatus()
    return DatabaseCleanup(older_than_days=args.days)


def _rental_action(args: argparse.Namespace):
    if args.rental_action == "list":
        return RentalList(state=RentalState(args.state) if args.state else None)
    if args.rental_action == "status":
        return RentalStatus(rental_id=args.rental_id)
    return RentalStop(rental_id=args.rental_id)


def parse_args(argv: list[str] | None = None) -> tuple[Command, GlobalOptions]:
    parser = build_parser()
    # Retired commands swallow unknown flags; everything else stays strict
    args, extras = parser.parse_known_args(argv)
    if extras and args.command not in _RETIRED:
        parser.error(f"unrecognized arguments: {' '.join(extras)}")
    options = GlobalOptions(config=args.config, local_test=args.local_test)

    if args.command == "start":
        command = Start(config=args.start_config)
    elif args.command == "stop":
        command = Stop()
    elif args.command == "status":
        command = Status()
    elif args.command == "gen-config":
        command = GenConfig(output=args.output)
    elif args.command in _RETIRED:
        command = _RETIRED[args.command](args=tuple(args.args) + tuple(extras))
    elif args.command == "database":
        command = Database(action=_database_action(args))
    else:
        command = Rental(action=_rental_action(args))
    return command, options
