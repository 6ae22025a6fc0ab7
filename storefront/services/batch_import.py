from __future__ import annotations

import logging
from collections.abc import Callable, Sequence

from ..models.catalog import NormalizedProduct
from ..models.import_models import BatchImportResult, DuplicateMatch, ImportFailure
from ..store.base import PRODUCTS, CatalogStore, StoreError, utc_now_iso

"""Best-effort batch creation of imported products.

Records are created one at a time, in input order. A store failure on one
record is recorded and the loop moves on; nothing already created is rolled
back. The import is therefore at-least-once: re-running a partially failed
import creates duplicates of the rows that made it the first time. There is
no idempotency key. ``find_duplicates`` reports slug collisions so the
operator can see them, but does not skip anything.
"""

__all__ = [
    "batch_create_products",
    "find_duplicates",
]

logger = logging.getLogger(__name__)

ProgressCallback = Callable[[int, int], None]


def batch_create_products(
    store: CatalogStore,
    records: Sequence[NormalizedProduct],
    on_progress: ProgressCallback | None = None,
) -> BatchImportResult:
    """Create every record, collecting ids of successes and per-record failures.

    Parameters
    ----------
    store: Catalog Store to write into
    records: already-validated products (invalid rows are filtered out by the caller)
    on_progress: called with (done, total) after each record

    Returns
    -------
    BatchImportResult: ``success`` holds the new ids in input order, ``errors``
    holds ``ImportFailure(product=title, error=message)`` entries
    """
    result = BatchImportResult()
    total = len(records)
    for index, record in enumerate(records, start=1):
        now = utc_now_iso()
        doc = record.to_document()
        doc["created_at"] = now
        doc["updated_at"] = now
        try:
            product_id = store.create(PRODUCTS, doc)
        except StoreError as e:
            logger.warning(f"create failed for '{record.title}': {e}")
            result.errors.append(ImportFailure(product=record.title, error=str(e)))
        else:
            result.success.append(product_id)
        if on_progress is not None:
            on_progress(index, total)

    logger.info(f"batch create finished: {len(result.success)} created, {len(result.errors)} failed")
    return result


def find_duplicates(
    store: CatalogStore,
    records: Sequence[NormalizedProduct],
    row_numbers: Sequence[int] | None = None,
) -> list[DuplicateMatch]:
    """Report incoming records whose slug already exists in the catalog.

    ``row_numbers`` (parallel to ``records``) lets the report point back at
    the source CSV rows.
    """
    matches: list[DuplicateMatch] = []
    for index, record in enumerate(records):
        slug = record.seo.slug
        if not slug:
            continue
        existing = store.list(PRODUCTS, filters=[("seo.slug", slug)], limit=1)
        if existing:
            matches.append(
                DuplicateMatch(
                    existing_product_id=existing[0].id,
                    incoming_title=record.title,
                    row_number=row_numbers[index] if row_numbers is not None else None,
                    match_reason=f"slug '{slug}' already exists",
                )
            )
    return matches
