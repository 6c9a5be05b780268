#!/usr/bin/env python3
"""Command line access to the link store.

Usage:
    nanolink shorten https://example.com/page [--code mycode]
    nanolink get abc123
    nanolink list [--limit 20]
    nanolink stats
    nanolink sweep [--max-age-days 30]

Every command prints JSON on stdout. Logs and errors go to stderr; errors exit 1.
"""

import argparse
import asyncio
import json
import sys
from datetime import timedelta
from typing import Any, List, Optional

from config import Config, load_config
from app import build_store
from nanolink import ShortCodeGenerator, ShortLinkService
from nanolink.common.logging_config import setup_logging
from nanolink.errors import ShortLinkError


async def cmd_shorten(service: ShortLinkService, args: argparse.Namespace) -> Any:
    link = await service.create_short_url(args.url, args.code)
    return link.to_dict()


async def cmd_get(service: ShortLinkService, args: argparse.Namespace) -> Any:
    link = await service.get_url(args.code)
    return link.to_dict()


async def cmd_list(service: ShortLinkService, args: argparse.Namespace) -> Any:
    links = await service.get_recent_urls(args.limit)
    return [link.to_dict() for link in links]


async def cmd_stats(service: ShortLinkService, args: argparse.Namespace) -> Any:
    stats = await service.get_stats()
    return stats.to_dict()


async def cmd_sweep(service: ShortLinkService, args: argparse.Namespace) -> Any:
    deleted = await service.store.delete_older_than(timedelta(days=args.max_age_days))
    return {"deleted": deleted}


def build_parser(config: Config) -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(prog="nanolink", description="nanolink URL shortener")
    sub = p.add_subparsers(dest="cmd", required=True)

    ps = sub.add_parser("shorten", help="Create a short link")
    ps.add_argument("url")
    ps.add_argument("--code", default=None, help="Custom short code (4-12 of A-Z a-z 0-9 _ -)")
    ps.set_defaults(func=cmd_shorten)

    pg = sub.add_parser("get", help="Show a short link and its visit count")
    pg.add_argument("code")
    pg.set_defaults(func=cmd_get)

    pl = sub.add_parser("list", help="List recently created links")
    pl.add_argument("--limit", type=int, default=10)
    pl.set_defaults(func=cmd_list)

    pst = sub.add_parser("stats", help="Show totals")
    pst.set_defaults(func=cmd_stats)

    psw = sub.add_parser("sweep", help="Delete links older than the retention age")
    psw.add_argument("--max-age-days", dest="max_age_days", type=float, default=config.max_url_age_days)
    psw.set_defaults(func=cmd_sweep)

    return p


async def run_command(args: argparse.Namespace, config: Config) -> Any:
    logger = setup_logging(
        level=config.log_level,
        log_file=config.log_file,
        json_format=config.log_json,
        stream=sys.stderr,
    )
    store = build_store(config, logger)
    await store.initialize()
    service = ShortLinkService(
        store=store,
        short_code_generator=ShortCodeGenerator(default_length=config.short_code_length),
        logger=logger,
    )
    try:
        return await args.func(service, args)
    finally:
        await service.close()


def main(argv: Optional[List[str]] = None, config: Optional[Config] = None) -> int:
    config = config or load_config()
    parser = build_parser(config)
    args = parser.parse_args(argv)

    try:
        result = asyncio.run(run_command(args, config))
    except ShortLinkError as e:
        print(json.dumps({"error": e.message, "kind": e.kind.value}), file=sys.stderr)
        return 1

    print(json.dumps(result, indent=2, default=str))
    return 0


def run():
    sys.exit(main())


if __name__ == "__main__":
    run()
