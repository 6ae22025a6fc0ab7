from __future__ import annotations

from dataclasses import dataclass, field

"""Config dataclasses for the storefront catalog tooling.

These are the typed result of ``storefront.config.loader.load_config``; the
loader owns YAML parsing, schema validation and environment overrides.
"""


@dataclass(frozen=True)
class StoreConfig:
    """Catalog Store connection settings.

    For the postgres backend, environment variables (DATABASE_URL / PGDSN /
    PG*) take precedence over these values.
    """
    backend: str = "memory"  # "memory" | "postgres"
    dsn: str | None = None
    host: str | None = None
    port: int | None = None
    user: str | None = None
    password: str | None = None
    database: str | None = None
    table: str = "catalog_documents"  # JSONB documents table


@dataclass(frozen=True)
class ImportSettings:
    """Bulk import behaviour."""
    auto_accept_confidence: int = 50  # suggestions below this stay unmapped
    refresh_counts: bool = True  # recompute category product_count after import
    detect_duplicates: bool = True  # report (not skip) slugs already in the catalog
    error_csv_directory: str = "./logs"


@dataclass(frozen=True)
class AppConfig:
    """Root configuration object."""
    store: StoreConfig = field(default_factory=StoreConfig)
    import_settings: ImportSettings = field(default_factory=ImportSettings)
    logs_directory: str = "./logs"
