from __future__ import annotations

import json
from pathlib import Path

import pytest

from storefront.models.config_models import AppConfig, ImportSettings
from storefront.services.orchestrator import ImportProcessingError, build_column_mapping, run_import
from storefront.store.base import StoreError
from storefront.store.memory import MemoryCatalogStore


def _config(root: Path, **settings) -> AppConfig:
    logs = str(root / "logs")
    return AppConfig(
        import_settings=ImportSettings(error_csv_directory=logs, **settings),
        logs_directory=logs,
    )


def test_build_column_mapping_auto_accepts_and_skips():
    mapping = build_column_mapping(["Product_Name", "Manufacturer", "xyz", "Category"], 50)
    assert mapping == {"Product_Name": "title", "Manufacturer": "brand", "Category": "category_id"}


def test_build_column_mapping_overrides():
    mapping = build_column_mapping(
        ["Product_Name", "Manufacturer", "Group"], 50, {"Group": "category_id", "Manufacturer": ""}
    )
    assert mapping == {"Product_Name": "title", "Manufacturer": "", "Group": "category_id"}


def test_build_column_mapping_rejects_unknown_column():
    with pytest.raises(ImportProcessingError, match="unknown column"):
        build_column_mapping(["title"], 50, {"Nope": "title"})


def test_build_column_mapping_rejects_unknown_field():
    with pytest.raises(ImportProcessingError, match="unknown field"):
        build_column_mapping(["title"], 50, {"title": "price"})


def test_run_import_success(temp_workdir: Path, seeded_store):
    src = temp_workdir / "data" / "products.csv"
    src.write_text(
        "Product_Name,Manufacturer,Category\nThinkPad X1,Lenovo,cat-laptops\nMacBook Air,Apple,cat-laptops\n",
        encoding="utf-8",
    )
    result = run_import(src, seeded_store, _config(temp_workdir))

    assert result.total_rows == 2
    assert result.valid_rows == 2
    assert result.invalid_rows == 0
    assert result.imported == 2
    assert result.failed == 0
    assert not result.is_partial_failure
    assert result.error_csv_path is None
    assert result.error_log_path is None
    assert result.refreshed_counts["cat-laptops"] == 2
    assert seeded_store.get("categories", "cat-laptops")["product_count"] == 2


def test_run_import_invalid_rows_write_artifacts(temp_workdir: Path):
    store = MemoryCatalogStore()
    src = temp_workdir / "data" / "products.csv"
    src.write_text("title,category\nA,c1\n,c1\nB,\n", encoding="utf-8")
    result = run_import(src, store, _config(temp_workdir))

    assert (result.valid_rows, result.invalid_rows, result.imported) == (1, 2, 1)
    assert result.is_partial_failure
    assert result.error_csv_path == temp_workdir / "logs" / "products-errors.csv"
    assert result.error_csv_path.read_text(encoding="utf-8").splitlines()[1:] == [
        "2,Title is missing or empty,,c1",
        "3,Category is missing or empty,B,",
    ]
    records = [json.loads(line) for line in result.error_log_path.read_text(encoding="utf-8").splitlines()]
    assert [(r["row"], r["error_type"]) for r in records] == [(2, "VALIDATION_FAILED"), (3, "VALIDATION_FAILED")]


def test_run_import_explicit_error_csv_path(temp_workdir: Path):
    src = temp_workdir / "data" / "products.csv"
    src.write_text("title,category\n,c1\n", encoding="utf-8")
    target = temp_workdir / "reports" / "bad-rows.csv"
    result = run_import(src, MemoryCatalogStore(), _config(temp_workdir), error_csv_path=target)
    assert result.error_csv_path == target
    assert target.exists()


def test_run_import_reports_duplicates_but_creates(temp_workdir: Path, seeded_store):
    src = temp_workdir / "data" / "products.csv"
    src.write_text("title,category\nGalaxy S24,cat-phones\n", encoding="utf-8")
    result = run_import(src, seeded_store, _config(temp_workdir))
    assert [d.existing_product_id for d in result.duplicates] == ["p1"]
    assert result.duplicates[0].row_number == 1
    assert result.imported == 1


def test_run_import_settings_disable_duplicates_and_refresh(temp_workdir: Path, seeded_store):
    src = temp_workdir / "data" / "products.csv"
    src.write_text("title,category\nGalaxy S24,cat-phones\n", encoding="utf-8")
    cfg = _config(temp_workdir, detect_duplicates=False, refresh_counts=False)
    result = run_import(src, seeded_store, cfg)
    assert result.duplicates == []
    assert result.refreshed_counts is None
    assert seeded_store.get("categories", "cat-phones")["product_count"] == 3


class CountRefreshFailsStore(MemoryCatalogStore):
    def update(self, collection, doc_id, partial):
        raise StoreError("db went away")


def test_run_import_store_failure_still_writes_error_log(temp_workdir: Path, catalog_seed):
    store = CountRefreshFailsStore(seed=catalog_seed)
    src = temp_workdir / "data" / "products.csv"
    src.write_text("title,category\nA,cat-audio\n,cat-audio\n", encoding="utf-8")
    with pytest.raises(StoreError, match="db went away"):
        run_import(src, store, _config(temp_workdir))

    logs = list((temp_workdir / "logs").glob("import-errors-*.log"))
    assert len(logs) == 1
    records = [json.loads(line) for line in logs[0].read_text(encoding="utf-8").splitlines()]
    assert [(r["row"], r["error_type"]) for r in records] == [(2, "VALIDATION_FAILED")]
    # the product created before the failure is kept
    assert len(store.list("products", filters=[("title", "A")])) == 1


def test_run_import_parse_failure_is_fatal(temp_workdir: Path):
    src = temp_workdir / "data" / "broken.csv"
    src.write_text('title,category\n"unterminated,c\n', encoding="utf-8")
    with pytest.raises(ImportProcessingError, match="CSV parsing failed"):
        run_import(src, MemoryCatalogStore(), _config(temp_workdir))
    logs = list((temp_workdir / "logs").glob("import-errors-*.log"))
    assert len(logs) == 1
    record = json.loads(logs[0].read_text(encoding="utf-8").strip())
    assert record["row"] == -1
    assert record["error_type"] == "PARSE_FAILED"


def test_run_import_missing_file(temp_workdir: Path):
    with pytest.raises(ImportProcessingError, match="cannot read"):
        run_import(temp_workdir / "data" / "missing.csv", MemoryCatalogStore(), _config(temp_workdir))
