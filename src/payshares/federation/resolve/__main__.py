from typing import List, Optional
import argparse
import asyncio
import json
import logging

import aiohttp
import sentry_sdk

from payshares.federation.app.cli import configure_logging, configure_sentry
from payshares.federation.app.config import Settings
from payshares.federation.errors import FederationException
from payshares.federation.resolve.address import resolve_address
from payshares.federation.resolve.server import (
    FederationRecord,
    FederationServer,
    QueryType,
)

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="payshares-federation",
        description="Resolve Payshares addresses, account IDs and transaction IDs",
    )
    parser.add_argument("value", nargs="+", help="The value(s) to resolve.")
    parser.add_argument(
        "--allow-http",
        action="store_true",
        default=None,
        help="Allow connecting to http servers. Never use in production.",
    )
    parser.add_argument(
        "--server",
        help="Query this federation server directly instead of discovering it.",
    )
    parser.add_argument(
        "--domain",
        help="Domain of --server, used to qualify bare usernames.",
    )
    parser.add_argument(
        "--type",
        choices=[query_type.value for query_type in QueryType],
        default=QueryType.name.value,
        help="Query type when --server is given.",
    )
    return parser


async def resolve_one(
    session: aiohttp.ClientSession,
    settings: Settings,
    value: str,
    server: Optional[FederationServer],
    query_type: QueryType,
) -> FederationRecord:
    if server is None:
        return await resolve_address(session, settings, value)
    if query_type == QueryType.id:
        return await server.resolve_account_id(value)
    if query_type == QueryType.txid:
        return await server.resolve_transaction_id(value)
    return await server.resolve_address(value)


async def realMain(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)

    settings = Settings()
    if args.allow_http is not None:
        settings = settings.model_copy(update={"allow_http": args.allow_http})

    configure_logging(settings)
    configure_sentry(settings)

    values: List[str] = args.value
    query_type = QueryType(args.type)
    failures = 0

    timeout = aiohttp.ClientTimeout(total=settings.http_timeout)
    async with aiohttp.ClientSession(timeout=timeout) as session:
        server: Optional[FederationServer] = None
        if args.server is not None:
            try:
                server = FederationServer(
                    session, args.server, domain=args.domain, settings=settings
                )
            except FederationException:
                logging.exception("Invalid federation server %s", args.server)
                return 2

        for value in values:
            try:
                record = await resolve_one(session, settings, value, server, query_type)
                print(json.dumps(record.as_dict()))
            except Exception as e:
                failures += 1
                sentry_sdk.capture_exception(e)
                logging.exception("Exception resolving %s", value)

    return 1 if failures > 0 else 0


def main() -> None:
    raise SystemExit(asyncio.run(realMain()))


if __name__ == "__main__":
    main()
