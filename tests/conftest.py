# Shared pytest fixtures
from __future__ import annotations
import logging
import tempfile
from pathlib import Path
import pytest

from storefront.logging.init import LOGGER_NAME, reset_logging
from storefront.store.memory import MemoryCatalogStore


@pytest.fixture()
def temp_workdir(monkeypatch) -> Path:
    with tempfile.TemporaryDirectory() as d:
        p = Path(d)
        (p / "config").mkdir()
        (p / "data").mkdir()
        (p / "logs").mkdir()
        monkeypatch.chdir(p)
        yield p


@pytest.fixture()
def sample_config_yaml() -> str:
    return """store:
  backend: memory
import:
  auto_accept_confidence: 50
  refresh_counts: true
  detect_duplicates: true
  error_csv_directory: ./logs
logs_directory: ./logs
"""


@pytest.fixture()
def write_config(temp_workdir: Path, sample_config_yaml: str) -> Path:
    cfg = temp_workdir / "config" / "storefront.yml"
    cfg.write_text(sample_config_yaml, encoding="utf-8")
    return cfg


@pytest.fixture()
def catalog_seed() -> dict:
    # three phones, one pair of headphones, an empty laptops category
    return {
        "categories": {
            "cat-phones": {"name": "Smartphones", "slug": "smartphones", "featured": True,
                           "order": 1, "product_count": 3},
            "cat-laptops": {"name": "Laptops", "slug": "laptops", "featured": True,
                            "order": 2, "product_count": 0},
            "cat-audio": {"name": "Audio & Headphones", "slug": "audio-headphones", "featured": False,
                          "order": 3, "product_count": 1},
        },
        "products": {
            "p1": {"title": "Galaxy S24", "brand": "Samsung", "description": "Flagship phone",
                   "category_id": "cat-phones", "category_name": "Smartphones",
                   "category_slug": "smartphones", "seo": {"slug": "galaxy-s24"},
                   "created_at": "2024-01-01T00:00:00Z"},
            "p2": {"title": "iPhone 15", "brand": "Apple", "description": "Apple phone",
                   "category_id": "cat-phones", "category_name": "Smartphones",
                   "category_slug": "smartphones", "seo": {"slug": "iphone-15"},
                   "created_at": "2024-01-02T00:00:00Z"},
            "p3": {"title": "Pixel 8", "brand": "Google", "description": "Android phone",
                   "category_id": "cat-phones", "category_name": "Smartphones",
                   "category_slug": "smartphones", "seo": {"slug": "pixel-8"},
                   "created_at": "2024-01-03T00:00:00Z"},
            "p4": {"title": "WH-1000XM5", "brand": "Sony", "description": "Noise cancelling headphones",
                   "category_id": "cat-audio", "seo": {"slug": "wh-1000xm5"},
                   "created_at": "2024-01-04T00:00:00Z"},
        },
    }


@pytest.fixture()
def seeded_store(catalog_seed: dict) -> MemoryCatalogStore:
    return MemoryCatalogStore(seed=catalog_seed)


@pytest.fixture()
def clean_logging():
    reset_logging()
    yield
    # drop handlers bound to this test's captured stdout
    logger = logging.getLogger(LOGGER_NAME)
    for handler in logger.handlers[:]:
        logger.removeHandler(handler)
    reset_logging()
