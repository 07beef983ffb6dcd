from __future__ import annotations

import argparse
import asyncio
import sys

import structlog

from migraplan.config import settings
from migraplan.db import get_engine
from migraplan.errors import DataLossError
from migraplan.loader import DirectorySource
from migraplan.logging import configure_logging
from migraplan.migrator import Migrator
from migraplan.planner import Target

log = structlog.get_logger(__name__)


def _target(args: argparse.Namespace) -> Target:
    if getattr(args, "steps", None) is not None:
        return args.steps
    return getattr(args, "to", None)


def build_parser() -> argparse.ArgumentParser:
    ap = argparse.ArgumentParser(prog=settings.app_name)
    ap.add_argument("--dir", default=settings.migrations_dir, help="migrations directory")
    ap.add_argument("--app", default=settings.application, help="bookkeeping namespace")
    sub = ap.add_subparsers(dest="command", required=True)

    sub.add_parser("status", help="show the current version and whether migration is needed")

    for name in ("plan", "up", "down"):
        p = sub.add_parser(name)
        group = p.add_mutually_exclusive_group()
        group.add_argument("--to", help="target migration identifier")
        group.add_argument("--steps", type=int, help="number of steps relative to the latest applied")
        if name == "up":
            p.add_argument("--force", action="store_true", help="allow reverting applied migrations")
        if name == "plan":
            p.add_argument("--down", action="store_true", help="show the downgrade plan")

    return ap


async def run(args: argparse.Namespace) -> int:
    engine = get_engine()
    migrator = Migrator(engine, DirectorySource(args.dir), args.app, meta_table=settings.meta_table)
    try:
        if args.command == "status":
            print(f"current: {await migrator.current()}")
            print(f"requires migration: {await migrator.requires_migration()}")
        elif args.command == "plan":
            list_fn = migrator.list_down if args.down else migrator.list_up
            for action in await list_fn(_target(args)):
                print(action)
        elif args.command == "up":
            done = await migrator.up(_target(args), force=args.force)
            log.info("migrate_up_done", steps=len(done), current=await migrator.current())
        elif args.command == "down":
            done = await migrator.down(_target(args))
            log.info("migrate_down_done", steps=len(done), current=await migrator.current())
    except DataLossError as e:
        log.error("migrate_refused", error=str(e), downs=e.downs)
        return 2
    finally:
        await engine.dispose()
    return 0


def main(argv: list[str] | None = None) -> None:
    args = build_parser().parse_args(argv)
    configure_logging()
    sys.exit(asyncio.run(run(args)))


if __name__ == "__main__":
    main()
