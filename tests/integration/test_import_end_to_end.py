from __future__ import annotations

import json
from pathlib import Path

import pandas as pd
import pytest

from storefront import (
    batch_create_products,
    calculate_quality_score,
    force_delete_category_with_reassignment,
    generate_error_csv,
    parse_csv_text,
    suggest_field_mapping,
    update_all_category_product_counts,
    validate_products,
)
from storefront.config.loader import load_config
from storefront.importer.field_mapper import invert_mapping
from storefront.services.orchestrator import run_import
from storefront.store.memory import MemoryCatalogStore

"""End-to-end import runs against the in-memory Catalog Store.

Covers the full path a storefront admin takes: parse -> suggest mapping ->
validate -> error CSV -> batch create -> count refresh, plus the category
clean-up that follows a bad import.
"""

pytestmark = pytest.mark.integration

CSV_TEXT = (
    "title,brand,description,category\n"
    "Galaxy S24,Samsung,A great phone,smartphones\n"
    ",Unknown brand,,electronics\n"
)


def test_step_by_step_import():
    rows = parse_csv_text(CSV_TEXT)
    assert len(rows) == 2

    suggestions = {c: suggest_field_mapping(c) for c in rows[0].columns}
    assert {c: (m.target_field, m.confidence) for c, m in suggestions.items()} == {
        "title": ("title", 100),
        "brand": ("brand", 100),
        "description": ("description", 100),
        "category": ("category_id", 100),
    }

    field_mapping = invert_mapping({c: m.target_field for c, m in suggestions.items()})
    results = validate_products(rows, field_mapping)

    valid, invalid = results
    assert valid.valid and valid.row_number == 1
    assert valid.data.seo.slug == "galaxy-s24"
    assert valid.data.brand == "Samsung"
    assert not invalid.valid and invalid.row_number == 2
    assert invalid.errors == ("Title is missing or empty",)

    error_csv = generate_error_csv([invalid], rows)
    assert error_csv.splitlines() == [
        "Row,Errors,title,brand,description,category",
        "2,Title is missing or empty,,Unknown brand,,electronics",
    ]

    store = MemoryCatalogStore()
    outcome = batch_create_products(store, [valid.data])
    assert len(outcome.success) == 1
    assert outcome.errors == []

    created = store.get("products", outcome.success[0])
    score = calculate_quality_score(created)
    assert score.breakdown.title == 10
    assert score.breakdown.brand == 10
    assert score.breakdown.description == 5


def test_run_import_then_force_delete(write_config: Path, temp_workdir: Path, seeded_store):
    cfg = load_config(write_config)
    src = temp_workdir / "data" / "supplier_feed.xlsx"
    pd.DataFrame(
        {
            "Product_Name": ["ThinkPad X1", "MacBook Air", "", "Galaxy S24"],
            "Manufacturer": ["Lenovo", "Apple", "Dell", "Samsung"],
            "Product Description": ["Business laptop", "", "", "Duplicate of p1"],
            "Category": ["cat-laptops", "cat-laptops", "cat-laptops", "cat-phones"],
            "Image URL": ["a.jpg", "b.jpg", "c.jpg", "d.jpg"],
        }
    ).to_excel(src, index=False, engine="openpyxl")

    result = run_import(src, seeded_store, cfg)

    assert result.mapping == {
        "Product_Name": "title",
        "Manufacturer": "brand",
        "Product Description": "description",
        "Category": "category_id",
        "Image URL": "images",
    }
    assert (result.total_rows, result.valid_rows, result.invalid_rows) == (4, 3, 1)
    assert result.imported == 3
    assert result.is_partial_failure
    assert [d.existing_product_id for d in result.duplicates] == ["p1"]
    assert result.refreshed_counts == {"cat-phones": 4, "cat-laptops": 2, "cat-audio": 1}

    # images are never carried over from the file
    for product_id in result.import_result.success:
        assert seeded_store.get("products", product_id)["images"] == []

    error_lines = result.error_csv_path.read_text(encoding="utf-8").splitlines()
    assert error_lines[1].startswith("3,Title is missing or empty,")
    log_record = json.loads(result.error_log_path.read_text(encoding="utf-8").splitlines()[0])
    assert log_record["file"] == "supplier_feed.xlsx"
    assert log_record["row"] == 3

    moved = force_delete_category_with_reassignment(seeded_store, "cat-phones", reassign_to="cat-laptops")
    assert moved == 4
    assert update_all_category_product_counts(seeded_store) == {"cat-laptops": 6, "cat-audio": 1}
