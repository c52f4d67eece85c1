#!/usr/bin/env python3
"""
Facebook Catalog Fetcher

Fetches businesses, catalogs, products or product sets from the Graph API
using CatalogClient and prints them as a table or JSON.

Usage:
    fb-catalog [--token TOKEN] [--format {table,json}] [--verbose] COMMAND ID

Commands:
    businesses USER_ID        Businesses the user can manage
    catalogs BUSINESS_ID      Catalogs owned by a business
    products CATALOG_ID       First page of a catalog's products
    product-sets CATALOG_ID   Product sets of a catalog with their members

The access token is read from --token or FACEBOOK_ACCESS_TOKEN.
"""

import argparse
import asyncio
import json
import logging
import os
import sys
from typing import Any, Dict, List, Optional, Sequence

from fb_catalog.core.logging_config import setup_logging
from fb_catalog.services.catalog_client import CatalogClient
from fb_catalog.utils.error_handler import AppException

logger = logging.getLogger(__name__)

TABLE_COLUMNS = {
    "businesses": ["id", "name"],
    "catalogs": ["id", "name"],
    "products": ["id", "name", "price", "currency", "link"],
    "product-sets": ["id", "name", "count"],
}


def format_table(items: List[Dict[str, Any]], columns: List[str]) -> str:
    """Format items as a simple fixed-width table."""
    if not items:
        return "No results found."

    widths = {column: min(max(len(column), *(len(str(item.get(column, ""))) for item in items)), 40) for column in columns}

    header = " | ".join(f"{column:<{widths[column]}}" for column in columns)
    lines = [header, "-" * len(header)]
    for item in items:
        cells = []
        for column in columns:
            value = str(item.get(column, ""))
            if len(value) > widths[column]:
                value = value[: widths[column] - 3] + "..."
            cells.append(f"{value:<{widths[column]}}")
        lines.append(" | ".join(cells))

    return "\n".join(lines)


async def fetch(client: CatalogClient, command: str, object_id: str, token: str) -> List[Dict[str, Any]]:
    if command == "businesses":
        return await client.list_businesses(object_id, token)
    if command == "catalogs":
        return await client.list_catalogs(object_id, token)
    if command == "products":
        return await client.list_products(object_id, token)
    return await client.list_product_sets(object_id, token)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Fetch Facebook catalog data using the Graph API",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  %(prog)s businesses 1234567890            # Businesses of a user
  %(prog)s --format json products 99887766  # Catalog products as JSON
        """,
    )
    parser.add_argument("command", choices=sorted(TABLE_COLUMNS), help="What to fetch")
    parser.add_argument("object_id", metavar="ID", help="User, business or catalog id")
    parser.add_argument("--token", help="User access token (default: FACEBOOK_ACCESS_TOKEN)")
    parser.add_argument("--format", choices=["table", "json"], default="table", help="Output format (default: table)")
    parser.add_argument("--verbose", action="store_true", help="Enable verbose logging")
    return parser


async def run(argv: Optional[Sequence[str]] = None) -> int:
    args = build_parser().parse_args(argv)

    setup_logging()
    if args.verbose:
        logging.getLogger().setLevel(logging.DEBUG)

    token = args.token or os.environ.get("FACEBOOK_ACCESS_TOKEN")
    if not token:
        print("An access token is required (--token or FACEBOOK_ACCESS_TOKEN).", file=sys.stderr)
        return 2

    try:
        async with CatalogClient() as client:
            items = await fetch(client, args.command, args.object_id, token)
    except AppException as e:
        logger.error(f"Graph API request failed: {e.message}")
        return 1
    except KeyboardInterrupt:
        logger.info("Operation cancelled by user")
        return 130

    if args.format == "json":
        print(json.dumps(items, indent=2, ensure_ascii=False, default=str))
    else:
        print(format_table(items, TABLE_COLUMNS[args.command]))

    return 0


def main() -> None:
    sys.exit(asyncio.run(run()))


if __name__ == "__main__":
    main()
