#!/usr/bin/env python3
"""Seed the default storefront categories.

Categories whose slug already exists are skipped, so the script can be re-run.

    python scripts/seed_categories.py --config config/storefront.yml
"""
from __future__ import annotations

import argparse
import sys
from pathlib import Path

from dotenv import load_dotenv

from storefront.config.loader import DEFAULT_CONFIG_PATH, ConfigError, load_config
from storefront.logging.init import log_summary, setup_logging
from storefront.services.categories import CategoryError, create_category, get_category_by_slug
from storefront.store.base import StoreError
from storefront.store.factory import store_session

DEFAULT_CATEGORIES = [
    {"name": "Smartphones", "slug": "smartphones", "icon": "📱",
     "description": "Latest mobile phones, accessories, and smartphone deals from top brands",
     "featured": True, "order": 1},
    {"name": "Laptops", "slug": "laptops", "icon": "💻",
     "description": "Notebooks, ultrabooks, gaming laptops, and portable computers",
     "featured": True, "order": 2},
    {"name": "Audio & Headphones", "slug": "audio-headphones", "icon": "🎧",
     "description": "Headphones, earbuds, speakers, and premium audio equipment",
     "featured": True, "order": 3},
    {"name": "Cameras & Photography", "slug": "cameras-photography", "icon": "📷",
     "description": "Digital cameras, DSLRs, mirrorless cameras, and photography gear",
     "featured": True, "order": 4},
    {"name": "Smartwatches & Wearables", "slug": "smartwatches-wearables", "icon": "⌚",
     "description": "Smart watches, fitness trackers, and wearable technology",
     "featured": False, "order": 5},
    {"name": "Gaming", "slug": "gaming", "icon": "🎮",
     "description": "Gaming consoles, accessories, controllers, and gaming gear",
     "featured": True, "order": 6},
    {"name": "Tablets & E-Readers", "slug": "tablets-readers", "icon": "📱",
     "description": "iPads, Android tablets, e-readers, and tablet accessories",
     "featured": False, "order": 7},
    {"name": "Monitors & Displays", "slug": "monitors-displays", "icon": "🖥️",
     "description": "Computer monitors, displays, and screen accessories",
     "featured": False, "order": 8},
    {"name": "PC Components", "slug": "pc-components", "icon": "⌨️",
     "description": "Keyboards, mice, graphics cards, RAM, and computer parts",
     "featured": True, "order": 9},
    {"name": "Home Appliances", "slug": "home-appliances", "icon": "🏠",
     "description": "Smart home devices, appliances, and home automation",
     "featured": False, "order": 10},
]


def seed_categories(store) -> tuple[int, int, int]:
    """Create missing default categories. Returns (created, skipped, failed)."""
    logger = setup_logging()
    created = skipped = failed = 0
    for data in DEFAULT_CATEGORIES:
        if get_category_by_slug(store, data["slug"]) is not None:
            logger.info(f"category {data['slug']} already exists, skipping")
            skipped += 1
            continue
        try:
            category_id = create_category(store, data)
        except (CategoryError, StoreError) as e:
            logger.error(f"failed to create {data['slug']}: {e}")
            failed += 1
            continue
        logger.info(f"created {data['name']} ({category_id})")
        created += 1
    return created, skipped, failed


def main() -> int:
    parser = argparse.ArgumentParser(description="Seed default storefront categories")
    parser.add_argument("--config", type=Path, default=DEFAULT_CONFIG_PATH)
    args = parser.parse_args()

    logger = setup_logging()
    load_dotenv(dotenv_path=Path(".env"), override=True)
    try:
        cfg = load_config(args.config)
    except ConfigError as e:
        logger.error(f"config: {e}")
        return 1

    try:
        with store_session(cfg.store) as store:
            created, skipped, failed = seed_categories(store)
    except StoreError as e:
        logger.error(f"store: {e}")
        return 1

    log_summary(f"created={created} skipped={skipped} failed={failed}")
    return 1 if failed else 0


if __name__ == "__main__":
    sys.exit(main())
