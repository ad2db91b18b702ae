#!/usr/bin/env python3
"""
Catalog Variant Merger

Fetches every product of one vendor, groups products that are size/colour
variants of the same item, and (optionally) re-creates each group in
Shopify as a single draft product with variants.

Requirements:
    pip install -e .

Usage:
    # Preview only: write grouped products to JSON
    python3 scripts/merge_catalog.py --vendor Lifestyle --output preview.json

    # Ignore the product cache and fetch again
    python3 scripts/merge_catalog.py --vendor Lifestyle --refresh-cache

    # Create the first 5 merged products in Shopify
    python3 scripts/merge_catalog.py --vendor Lifestyle --merge --limit 5

Credentials (in order of precedence):
    1. --shop / --token flags
    2. SHOPIFY_SHOP / SHOPIFY_ACCESS_TOKEN environment variables (or .env)
"""

import argparse
import json
import logging
import os
import sys

# Add project root to path for imports
sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

from catalog_merge.common import ShopifySettings, setup_logging
from catalog_merge.reconcile import reconcile
from catalog_merge.shopify import (
    ProductCache,
    ProductMerger,
    ShopifyAPIClient,
    ShopifyAPIError,
    fetch_product_nodes,
    parse_product_nodes,
)

logger = logging.getLogger("catalog_merge.scripts.merge_catalog")


def parse_args(argv=None):
    parser = argparse.ArgumentParser(
        description="Merge per-variant Shopify products into products with variants"
    )
    parser.add_argument("--shop", "-s", help="Shopify shop name (default: SHOPIFY_SHOP)")
    parser.add_argument("--token", "-t", help="Admin API access token (default: SHOPIFY_ACCESS_TOKEN)")
    parser.add_argument("--vendor", "-v", help="Vendor to reconcile (default: CATALOG_VENDOR)")
    parser.add_argument(
        "--output", "-o",
        help="Write original/combined/unmatched products to this JSON file"
    )
    parser.add_argument(
        "--refresh-cache",
        action="store_true",
        help="Fetch products from Shopify even if the cache is fresh"
    )
    parser.add_argument(
        "--merge",
        action="store_true",
        help="Create merged products in Shopify (default: preview only)"
    )
    parser.add_argument(
        "--limit",
        type=int,
        default=0,
        help="Merge at most N products (default: all)"
    )
    parser.add_argument(
        "--max-workers",
        type=int,
        help="Products merged concurrently (default: CATALOG_MAX_WORKERS or 4)"
    )
    parser.add_argument(
        "--location-id",
        help="Location gid that receives variant stock (default: CATALOG_LOCATION_ID; unset: no stock)"
    )
    parser.add_argument(
        "--no-alt-tags",
        action="store_true",
        help="Don't prefix colour image alt text with the colour name"
    )
    parser.add_argument(
        "--verbose",
        action="store_true",
        help="Enable verbose (debug) logging"
    )
    parser.add_argument(
        "--quiet",
        action="store_true",
        help="Suppress info messages, show only warnings and errors"
    )
    return parser.parse_args(argv)


def print_preview(result) -> None:
    print("\n" + "=" * 60)
    print("RECONCILIATION PREVIEW")
    print("=" * 60)
    print(f"  Products fetched: {len(result.original_products)}")
    print(f"  Merged products:  {len(result.combined_products)}")
    print(f"  Unmatched:        {len(result.unmatched_products)}")

    for combined in result.combined_products[:20]:
        options = ", ".join(f"{o.name}: {'/'.join(o.values)}" for o in combined.options)
        print(f"    - {combined.base_title} [{combined.strategy}] {options}")
    if len(result.combined_products) > 20:
        print(f"    ... and {len(result.combined_products) - 20} more")
    print("=" * 60)


def print_merge_summary(run) -> None:
    print("\n" + "=" * 60)
    print("MERGE SUMMARY")
    print("=" * 60)
    print(f"  Created: {len(run.successful_updates)}")
    print(f"  Failed:  {len(run.failed_updates)}")

    if run.failed_updates:
        print("\n  Failed products:")
        for failed in run.failed_updates[:10]:
            print(f"    - {failed.title}: {failed.error or ''}")
            for error in failed.user_errors:
                print(f"        {error.get('field')}: {error.get('message')}")
    print("=" * 60)


def run(args, settings) -> int:
    print("=" * 60)
    print("Catalog Variant Merger")
    print("=" * 60)
    print(f"  Shop: {settings.shop}")
    print(f"  Vendor: {settings.vendor}")
    print(f"  Merge: {args.merge}")

    with ShopifyAPIClient.from_settings(settings) as client:
        cache = ProductCache(settings.cache_path, ttl_seconds=settings.cache_ttl)
        nodes = cache.get_or_fetch(
            lambda: fetch_product_nodes(client, settings.vendor),
            refresh=args.refresh_cache,
        )

        result = reconcile(parse_product_nodes(nodes))
        print_preview(result)

        if args.output:
            with open(args.output, "w", encoding="utf-8") as f:
                json.dump(result.to_dict(), f, indent=2, ensure_ascii=False)
            logger.info("Wrote preview to %s", args.output)

        if not args.merge:
            return 0

        products = result.combined_products
        if args.limit > 0:
            products = products[:args.limit]

        merger = ProductMerger(
            client,
            tag_image_alts=not args.no_alt_tags,
            max_workers=settings.max_workers,
            location_id=settings.location_id,
        )
        merge_run = merger.merge_all(products)
        print_merge_summary(merge_run)
        return 1 if merge_run.failed_updates else 0


def main(argv=None) -> int:
    args = parse_args(argv)
    setup_logging(verbose=args.verbose, quiet=args.quiet)

    try:
        settings = ShopifySettings.from_env(
            shop=args.shop,
            access_token=args.token,
            vendor=args.vendor,
            max_workers=args.max_workers,
            location_id=args.location_id,
        )
    except ValueError as e:
        print(f"Configuration error: {e}")
        return 2

    try:
        return run(args, settings)
    except ShopifyAPIError as e:
        logger.error("Shopify request failed (status %s): %s", e.status_code, e)
        return 1
    except Exception:
        logger.exception("Catalog merge failed")
        return 1


if __name__ == "__main__":
    sys.exit(main())
