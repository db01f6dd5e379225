"""CLI entry point — ``python -m user_store``."""

from __future__ import annotations

import argparse
import asyncio
import sys
import time

from dotenv import load_dotenv

load_dotenv()

from user_store import console
from user_store.errors import UserStoreError
from user_store.registry import list_registered
from user_store.service import SEARCH_FIELDS, UserStoreService, configure_logging


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="user-store",
        description="Generate synthetic users and store or search them in a SQL table.",
    )
    parser.add_argument(
        "-c", "--config",
        help="Path to the store YAML config file (defaults are used without one).",
    )
    parser.add_argument(
        "-l", "--list-strategies",
        action="store_true",
        default=False,
        help="List all registered insertion strategies, then exit.",
    )

    sub = parser.add_subparsers(dest="command")
    sub.add_parser("check", help="Test the database connection.")
    sub.add_parser("init", help="Create the users table if it is missing.")
    sub.add_parser("count", help="Print the number of stored users.")

    gen = sub.add_parser("generate", help="Generate and store COUNT users.")
    gen.add_argument("count", type=int)
    gen.add_argument(
        "--bulk",
        action="store_true",
        default=False,
        help=(
            "Use bulk loading. Only honoured when COUNT reaches the configured "
            "bulk_insert.recommend_threshold."
        ),
    )

    lst = sub.add_parser("list", help="List users ordered by id.")
    lst.add_argument("--limit", type=int, default=100)
    lst.add_argument("--offset", type=int, default=0)

    get = sub.add_parser("get", help="Show the user with the given id.")
    get.add_argument("id", type=int)

    search = sub.add_parser("search", help="Case-insensitive substring search.")
    search.add_argument("term")
    search.add_argument("--field", choices=SEARCH_FIELDS, default="any")

    return parser


def _elapsed_ms(started: float) -> float:
    return (time.perf_counter() - started) * 1000


async def _run(args: argparse.Namespace) -> int:
    service = UserStoreService.from_config_file(args.config)
    configure_logging(service.config.settings.log_level)
    try:
        if args.command == "check":
            if await service.repository.test_connection():
                print(console.format_success("Database connection succeeded."))
                return 0
            print(console.format_error("Database connection failed."), file=sys.stderr)
            return 1

        await service.start()

        if args.command == "init":
            print(console.format_success("Table users is ready."))
        elif args.command == "count":
            print(await service.repository.count_users())
        elif args.command == "generate":
            print(console.format_info(f"Generating {args.count} users..."))
            report = await service.add_users(args.count, bulk=args.bulk)
            print(console.format_statistics(report))
        elif args.command == "list":
            started = time.perf_counter()
            users = await service.repository.list_users(args.limit, args.offset)
            print(console.format_users(users, _elapsed_ms(started)))
        elif args.command == "get":
            started = time.perf_counter()
            user = await service.repository.get_user_by_id(args.id)
            print(console.format_user(user, _elapsed_ms(started)))
        elif args.command == "search":
            started = time.perf_counter()
            users = await service.search(args.term, args.field)
            print(console.format_users(users, _elapsed_ms(started)))
        return 0
    finally:
        await service.close()


def main(argv: list[str] | None = None) -> None:
    parser = _build_parser()
    args = parser.parse_args(argv)

    if args.list_strategies:
        print(console.format_strategies(list_registered()))
        return

    if args.command is None:
        parser.error("a command is required (check, init, count, generate, list, get, search)")

    try:
        code = asyncio.run(_run(args))
    except UserStoreError as exc:
        print(console.format_error(str(exc)), file=sys.stderr)
        code = 1
    if code:
        sys.exit(code)


if __name__ == "__main__":
    main()
