from __future__ import annotations
from pathlib import Path

import pytest

from storefront.config.loader import ConfigError, load_config


def test_load_config_ok(write_config: Path):
    cfg = load_config(write_config)
    assert cfg.store.backend == "memory"
    assert cfg.store.table == "catalog_documents"
    assert cfg.import_settings.auto_accept_confidence == 50
    assert cfg.import_settings.refresh_counts is True
    assert cfg.logs_directory == "./logs"


def test_defaults_for_optional_sections(temp_workdir: Path):
    p = temp_workdir / "config" / "storefront.yml"
    p.write_text("store:\n  backend: postgres\n  host: db\n  port: 5433\n", encoding="utf-8")
    cfg = load_config(p)
    assert cfg.store.host == "db"
    assert cfg.store.port == 5433
    assert cfg.store.dsn is None
    assert cfg.import_settings.auto_accept_confidence == 50
    assert cfg.import_settings.detect_duplicates is True
    assert cfg.import_settings.error_csv_directory == "./logs"


def test_missing_file(temp_workdir: Path):
    with pytest.raises(ConfigError, match="config file not found"):
        load_config(temp_workdir / "config" / "nope.yml")


def test_invalid_yaml(temp_workdir: Path):
    p = temp_workdir / "config" / "storefront.yml"
    p.write_text("store: [unclosed\n", encoding="utf-8")
    with pytest.raises(ConfigError, match="invalid yaml"):
        load_config(p)


def test_root_must_be_mapping(temp_workdir: Path):
    p = temp_workdir / "config" / "storefront.yml"
    p.write_text("- a\n- b\n", encoding="utf-8")
    with pytest.raises(ConfigError, match="mapping"):
        load_config(p)


@pytest.mark.parametrize(
    "text",
    [
        "import:\n  refresh_counts: true\n",  # store missing
        "store:\n  backend: sqlite\n",  # unknown backend
        "store:\n  backend: memory\nunknown_key: 1\n",  # additionalProperties
        "store:\n  backend: memory\nimport:\n  auto_accept_confidence: 150\n",  # out of range
        "store:\n  backend: memory\n  table: \"bad-name\"\n",  # table pattern
    ],
)
def test_schema_violations(temp_workdir: Path, text: str):
    p = temp_workdir / "config" / "storefront.yml"
    p.write_text(text, encoding="utf-8")
    with pytest.raises(ConfigError, match="config validation failed"):
        load_config(p)
