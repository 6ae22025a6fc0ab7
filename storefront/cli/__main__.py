from __future__ import annotations

import argparse
import sys
from dataclasses import replace
from pathlib import Path

from dotenv import load_dotenv

from storefront.config.loader import DEFAULT_CONFIG_PATH, ConfigError, load_config
from storefront.importer.field_mapper import FIELD_SYNONYMS
from storefront.logging.init import log_summary, set_debug, setup_logging
from storefront.services.categories import (
    CategoryError,
    delete_category,
    force_delete_category_with_reassignment,
    update_all_category_product_counts,
    update_category_product_count,
)
from storefront.services.orchestrator import ImportProcessingError, run_import
from storefront.services.products import get_product_by_id
from storefront.services.quality import calculate_quality_score
from storefront.services.summary import render_summary_line
from storefront.store.base import StoreError
from storefront.store.factory import store_session

"""Admin command line for the storefront catalog.

    python -m storefront.cli import products.csv --map "Item Name=title" [--errors-out bad.csv]
    python -m storefront.cli score <product-id>
    python -m storefront.cli delete-category <id> [--force [--reassign-to <id>]]
    python -m storefront.cli refresh-counts [<category-id>]

Exit codes: 0 success, 2 import finished with invalid rows or failed
creates, 1 fatal (config, parse, store or category rule error).
"""

EXIT_SUCCESS = 0
EXIT_FATAL = 1
EXIT_PARTIAL_FAILURE = 2


def _parse_mapping_overrides(pairs: list[str]) -> dict[str, str]:
    overrides: dict[str, str] = {}
    for pair in pairs:
        if "=" not in pair:
            raise ValueError(f"--map expects COLUMN=FIELD, got: {pair}")
        column, target = pair.rsplit("=", 1)
        overrides[column] = target.strip()
    return overrides


def _parse_args(argv: list[str]) -> argparse.Namespace:
    p = argparse.ArgumentParser(prog="storefront", description="Storefront catalog admin tools")
    p.add_argument("--debug", action="store_true", help="Enable debug logging")
    p.add_argument("--config", type=Path, default=DEFAULT_CONFIG_PATH, help="YAML config path")
    sub = p.add_subparsers(dest="command", required=True)

    imp = sub.add_parser("import", help="Bulk import products from a CSV or XLSX file")
    imp.add_argument("file", type=Path)
    fields = ", ".join(FIELD_SYNONYMS)
    imp.add_argument(
        "--map", action="append", default=[], metavar="COLUMN=FIELD",
        help=f"Override the suggested mapping (fields: {fields}; empty field skips the column)",
    )
    imp.add_argument("--errors-out", type=Path, default=None, metavar="PATH", help="Write the error CSV here")
    imp.add_argument("--no-refresh", action="store_true", help="Skip refreshing category product counts")

    score = sub.add_parser("score", help="Print the listing quality score of a product")
    score.add_argument("product_id")

    delete = sub.add_parser("delete-category", help="Delete a category")
    delete.add_argument("category_id")
    delete.add_argument("--force", action="store_true", help="Delete even if products reference it")
    delete.add_argument("--reassign-to", default=None, help="With --force: move products to this category")

    refresh = sub.add_parser("refresh-counts", help="Recompute cached category product counts")
    refresh.add_argument("category_id", nargs="?", default=None)
    return p.parse_args(argv)


def _cmd_import(args: argparse.Namespace, cfg, store) -> int:
    logger = setup_logging()
    try:
        overrides = _parse_mapping_overrides(args.map)
    except ValueError as e:
        logger.error(str(e))
        return EXIT_FATAL
    if args.no_refresh:
        cfg = replace(cfg, import_settings=replace(cfg.import_settings, refresh_counts=False))

    try:
        result = run_import(args.file, store, cfg, mapping_overrides=overrides, error_csv_path=args.errors_out)
    except ImportProcessingError as e:
        logger.error(f"import: {e}")
        return EXIT_FATAL

    for failure in result.import_result.errors:
        logger.error(f"create failed: {failure.product}: {failure.error}")
    if result.error_log_path is not None:
        logger.info(f"error log: {result.error_log_path}")
    log_summary(render_summary_line(result)[len("SUMMARY "):])
    return EXIT_PARTIAL_FAILURE if result.is_partial_failure else EXIT_SUCCESS


def _cmd_score(args: argparse.Namespace, store) -> int:
    logger = setup_logging()
    product = get_product_by_id(store, args.product_id)
    if product is None:
        logger.error(f"product not found: {args.product_id}")
        return EXIT_FATAL
    score = calculate_quality_score(product)
    print(f"{product.title}: {score.total}/100 ({score.grade.value})")
    b = score.breakdown
    print(
        f"  title={b.title} brand={b.brand} description={b.description} "
        f"images={b.images} specs={b.specs} proscons={b.proscons}"
    )
    for s in score.suggestions:
        print(f"  - {s}")
    return EXIT_SUCCESS


def _cmd_delete_category(args: argparse.Namespace, store) -> int:
    logger = setup_logging()
    if args.reassign_to and not args.force:
        logger.error("--reassign-to requires --force")
        return EXIT_FATAL
    try:
        if args.force:
            moved = force_delete_category_with_reassignment(store, args.category_id, args.reassign_to)
            logger.info(f"category {args.category_id} deleted; {moved} products updated")
        else:
            delete_category(store, args.category_id)
            logger.info(f"category {args.category_id} deleted")
    except CategoryError as e:
        logger.error(str(e))
        return EXIT_FATAL
    return EXIT_SUCCESS


def _cmd_refresh_counts(args: argparse.Namespace, store) -> int:
    logger = setup_logging()
    if args.category_id:
        count = update_category_product_count(store, args.category_id)
        logger.info(f"category {args.category_id}: {count} products")
    else:
        for category_id, count in update_all_category_product_counts(store).items():
            logger.info(f"category {category_id}: {count} products")
    return EXIT_SUCCESS


def main(argv: list[str] | None = None) -> int:
    logger = setup_logging()

    # only read sys.argv when no explicit list is passed (tests call main([...]))
    if argv is None:
        argv = sys.argv[1:]
    args = _parse_args(argv)
    load_dotenv(dotenv_path=Path(".env"), override=True)

    if args.debug:
        set_debug()
        logger.debug("debug mode enabled")

    try:
        cfg = load_config(args.config)
    except ConfigError as e:
        logger.error(f"config: {e}")
        return EXIT_FATAL

    try:
        with store_session(cfg.store) as store:
            if args.command == "import":
                return _cmd_import(args, cfg, store)
            if args.command == "score":
                return _cmd_score(args, store)
            if args.command == "delete-category":
                return _cmd_delete_category(args, store)
            return _cmd_refresh_counts(args, store)
    except StoreError as e:
        logger.error(f"store: {e}")
        return EXIT_FATAL


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())
