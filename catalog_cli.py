#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Product Catalog (SQLite) - read-only command line

Commands:
  init                Create the catalog tables from schema.sql (idempotent, no seed data)
  recent              Show the four most recent products (oldest of the four first)
  search TERM         Show products whose name contains TERM
  count               Print the total number of products
  subset START END    Show catalog positions START..END (1-based, inclusive)
  all                 Show every product ordered by sku
  show SKU            Show one product with its ordered sizes
  export              Export all products (with sizes) to CSV

Notes:
- Products are maintained elsewhere; this tool never writes product rows.
- The database path comes from --config (db_path), CATALOG_DB_PATH overrides it.
"""

import argparse
import logging
import os
import sqlite3
import sys
from functools import partial

import pandas as pd

from catalog.config import read_config
from catalog.db import apply_schema, get_conn, get_db_path, snapshot
from catalog.errors import DataAccessError
from catalog.repository import product_repo
from catalog.services.catalog_svc import CatalogService

logger = logging.getLogger("catalog.cli")

COLUMNS = ["sku", "name", "price", "img", "paypal"]

# ---------------- CFG helpers ----------------

def setup_logging(cfg: dict, verbose: bool = False):
    level = logging.DEBUG if verbose else cfg["log_level"]
    logging.basicConfig(
        level=level,
        format="%(asctime)s | %(levelname)-8s | %(name)s | %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )


def make_service(args) -> CatalogService:
    db_path = get_db_path(args.config)
    return CatalogService(partial(get_conn, db_path))


def print_products(rows: list[dict]):
    pd.set_option("display.max_rows", 200)
    pd.set_option("display.width", 160)
    if not rows:
        print("(empty)")
        return
    df = pd.DataFrame(rows)
    print(df[[c for c in COLUMNS if c in df.columns]].to_string(index=False))


# ---------------- Commands ----------------

def cmd_init(args):
    try:
        with get_conn(get_db_path(args.config), readonly=False) as conn:
            apply_schema(conn)
    except sqlite3.Error as e:
        raise DataAccessError("INIT", str(e)) from e
    print("Catalog schema ready.")


def cmd_recent(args):
    print_products(make_service(args).list_recent())


def cmd_search(args):
    print_products(make_service(args).search(args.term))


def cmd_count(args):
    print(make_service(args).count())


def cmd_subset(args):
    print_products(make_service(args).subset(args.start, args.end))


def cmd_all(args):
    print_products(make_service(args).list_all())


def cmd_show(args):
    product = make_service(args).get_by_sku(args.sku)
    if product is None:
        raise LookupError(f"product_not_found: {args.sku}")
    sizes = product.pop("sizes", [])
    print_products([product])
    print("sizes:", ", ".join(sizes) if sizes else "(none)")


def cmd_export(args):
    # 商品与尺码在同一连接、同一读事务内取出，CSV 是一致的快照
    try:
        with get_conn(get_db_path(args.config)) as conn, snapshot(conn):
            products = [dict(r) for r in product_repo.list_all(conn)]
            sizes = product_repo.sizes_map_for(conn, [p["sku"] for p in products])
    except sqlite3.Error as e:
        raise DataAccessError("EXPORT", str(e)) from e

    df = pd.DataFrame(products, columns=COLUMNS)
    df["sizes"] = ["|".join(sizes.get(p["sku"], [])) for p in products]

    out_dir = args.out or os.path.join(os.path.dirname(os.path.abspath(__file__)), "exports")
    os.makedirs(out_dir, exist_ok=True)
    out_file = os.path.join(out_dir, "products.csv")
    df.to_csv(out_file, index=False, encoding="utf-8-sig")
    logger.info("exported %d products to %s", len(df), out_file)
    print(f"CSV exported to {out_file}")


# ---------------- Entry ----------------

def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Product catalog (SQLite, read-only)")
    parser.add_argument("--config", default="config.yaml")
    parser.add_argument("--verbose", action="store_true")
    sub = parser.add_subparsers()

    p_init = sub.add_parser("init", help="create catalog tables")
    p_init.set_defaults(func=cmd_init)

    p_recent = sub.add_parser("recent", help="four most recent products")
    p_recent.set_defaults(func=cmd_recent)

    p_search = sub.add_parser("search", help="search product names")
    p_search.add_argument("term")
    p_search.set_defaults(func=cmd_search)

    p_count = sub.add_parser("count", help="total number of products")
    p_count.set_defaults(func=cmd_count)

    p_subset = sub.add_parser("subset", help="products at positions START..END")
    p_subset.add_argument("start", type=int)
    p_subset.add_argument("end", type=int)
    p_subset.set_defaults(func=cmd_subset)

    p_all = sub.add_parser("all", help="every product")
    p_all.set_defaults(func=cmd_all)

    p_show = sub.add_parser("show", help="one product with sizes")
    p_show.add_argument("sku", type=int)
    p_show.set_defaults(func=cmd_show)

    p_exp = sub.add_parser("export", help="export products to CSV")
    p_exp.add_argument("--out", required=False, help="output directory (default ./exports)")
    p_exp.set_defaults(func=cmd_export)
    return parser


def main(argv=None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    setup_logging(read_config(args.config), args.verbose)
    if not hasattr(args, "func"):
        parser.print_help()
        return 0
    try:
        args.func(args)
    except (DataAccessError, LookupError, ValueError) as e:
        print(str(e), file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
