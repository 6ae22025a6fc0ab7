from __future__ import annotations

"""Config JSON schema contract: the packaged schema accepts the shipped sample
config and rejects malformed store sections."""
import json
from pathlib import Path

import jsonschema
import pytest
import yaml

from storefront.config.loader import SCHEMA_PATH

PROJECT_ROOT = Path(__file__).resolve().parents[2]


def _schema() -> dict:
    return json.loads(SCHEMA_PATH.read_text(encoding="utf-8"))


def test_schema_is_valid_draft7():
    jsonschema.Draft7Validator.check_schema(_schema())


def test_sample_config_is_valid():
    data = yaml.safe_load((PROJECT_ROOT / "config" / "storefront.yml").read_text(encoding="utf-8"))
    jsonschema.validate(data, _schema())


def test_minimal_config_is_valid():
    jsonschema.validate({"store": {"backend": "memory"}}, _schema())


@pytest.mark.parametrize(
    "data",
    [
        {},
        {"store": {}},
        {"store": {"backend": "memory", "port": 0}},
        {"store": {"backend": "memory", "extra": True}},
        {"store": {"backend": "memory"}, "import": {"refresh_counts": "yes"}},
    ],
)
def test_invalid_configs_rejected(data: dict):
    with pytest.raises(jsonschema.ValidationError):
        jsonschema.validate(data, _schema())
