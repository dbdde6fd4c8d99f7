"""Administrative command line for the finance tracker backend."""

from __future__ import annotations

import argparse
from collections.abc import Sequence
from datetime import date

from . import crud, database, dates, models
from .config import load_settings
from .logging import configure_logging, level_number

DESCRIPTION = "Finance Tracker administration"


def _parse_date(value: str) -> date:
    try:
        return dates.parse_date(value)
    except dates.InvalidDateFormat as exc:
        raise argparse.ArgumentTypeError(str(exc)) from exc


def _log_level(value: str) -> str:
    try:
        level_number(value)
    except ValueError as exc:
        raise argparse.ArgumentTypeError(str(exc)) from exc
    return value.upper()


def _format_row(expense: models.Expense) -> str:
    return "\t".join(
        [
            str(expense.id),
            expense.date.isoformat(),
            expense.entry_type.value,
            expense.category,
            f"{expense.amount}",
            expense.owner.username,
        ]
    )


def build_parser() -> argparse.ArgumentParser:
    settings = load_settings()
    parser = argparse.ArgumentParser(prog="finance-tracker", description=DESCRIPTION)
    parser.add_argument(
        "--database-url",
        default=settings.database_url,
        help="SQLAlchemy URL of the database (default: FINANCE_DATABASE_URL or the bundled SQLite file)",
    )
    parser.add_argument(
        "--json-logs",
        action="store_true",
        default=None,
        help="Write JSON log lines (default: FINANCE_JSON_LOGS)",
    )
    parser.add_argument("--log-level", type=_log_level, help="Logging level (default: FINANCE_LOG_LEVEL or INFO)")

    subparsers = parser.add_subparsers(dest="command", required=True)

    subparsers.add_parser("init-db", help="Create the database tables")

    add_user = subparsers.add_parser("add-user", help="Register a user account")
    add_user.add_argument("username")

    list_expenses = subparsers.add_parser(
        "list-expenses",
        help="List entries across all users, or for one user with --user",
    )
    list_expenses.add_argument("--user", help="Restrict the listing to this username")
    list_expenses.add_argument("--start", type=_parse_date, help="First day of the range (inclusive)")
    list_expenses.add_argument("--end", type=_parse_date, help="Last day of the range (inclusive)")

    serve = subparsers.add_parser("serve", help="Run the HTTP API with uvicorn")
    serve.add_argument("--host", default="127.0.0.1")
    serve.add_argument("--port", type=int, default=8000)
    return parser


def _list_expenses(args: argparse.Namespace, session) -> int:
    start = args.start or date.min
    end = args.end or date.max
    ranged = args.start is not None or args.end is not None
    try:
        if args.user:
            user = crud.get_user_by_username(session, args.user)
            if user is None:
                print(f"Unknown user: {args.user}")
                return 1
            if ranged:
                rows = crud.list_expenses_by_owner_and_range(session, user.id, start, end)
            else:
                rows = crud.list_expenses_by_owner(session, user.id)
        elif ranged:
            rows = crud.list_expenses_by_range(session, start, end)
        else:
            rows = crud.list_all_expenses(session)
    except crud.InvalidRange as exc:
        print(str(exc))
        return 2
    for expense in rows:
        print(_format_row(expense))
    return 0


def main(argv: Sequence[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    log = configure_logging(load_settings(), level=args.log_level, json_logs=args.json_logs)

    if args.command == "serve":
        import uvicorn

        uvicorn.run("finance_tracker.server:app", host=args.host, port=args.port)
        return 0

    engine = database.make_engine(args.database_url)
    database.init_db(engine)
    factory = database.make_sessionmaker(engine)

    if args.command == "init-db":
        log.info("Database ready at %s", engine.url.render_as_string(hide_password=True))
        return 0

    if args.command == "add-user":
        try:
            with database.session_scope(factory) as session:
                user = crud.create_user(session, args.username)
                print(f"Created user {user.username} (id={user.id})")
        except crud.EntityConflictError as exc:
            print(str(exc))
            return 1
        return 0

    with database.session_scope(factory) as session:
        return _list_expenses(args, session)


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())
