from __future__ import annotations

import re
from collections.abc import Iterable

from ..models.import_models import FieldMapping, TargetField

"""Column -> catalog field suggestions for the bulk import.

Each raw column name is normalized (lowercase, trimmed, every run of
underscores, whitespace or hyphens removed) and compared with a fixed table
of known synonyms per field:

- an exact normalized match returns that field at confidence 100 straight
  away (table order breaks ties);
- otherwise each synonym is scored: containment in either direction counts
  0.85, anything else uses normalized Levenshtein similarity
  ``(len(longer) - distance) / len(longer)``;
- the best candidate above 0.7 wins with ``round(similarity * 100)``; with
  nothing above 0.7 the column stays unmapped ("" / 0).
"""

__all__ = [
    "FIELD_SYNONYMS",
    "SIMILARITY_THRESHOLD",
    "CONTAINMENT_SIMILARITY",
    "normalize_column",
    "levenshtein_distance",
    "calculate_similarity",
    "suggest_field_mapping",
    "suggest_mappings",
    "invert_mapping",
]

SIMILARITY_THRESHOLD = 0.7
CONTAINMENT_SIMILARITY = 0.85

# iteration order matters: first exact match wins
FIELD_SYNONYMS: dict[str, tuple[str, ...]] = {
    TargetField.TITLE.value: ("title", "product_name", "prod_name", "name", "product_title", "item_name"),
    TargetField.BRAND.value: ("brand", "manufacturer", "make", "vendor", "supplier"),
    TargetField.DESCRIPTION.value: (
        "description", "desc", "details", "product_description", "product_details",
    ),
    TargetField.CATEGORY_ID.value: ("category", "cat", "type", "product_type", "product_category"),
    TargetField.IMAGES.value: ("images", "image", "img", "photo", "picture", "image_url"),
    TargetField.SPECS.value: ("specs", "specifications", "spec", "attributes", "features"),
}

_SEPARATORS = re.compile(r"[_\s-]+")


def normalize_column(name: str) -> str:
    return _SEPARATORS.sub("", name.lower().strip())


def levenshtein_distance(a: str, b: str) -> int:
    """Classic edit distance (insert / delete / substitute, all cost 1)."""
    if len(a) < len(b):
        a, b = b, a
    previous = list(range(len(b) + 1))
    for i, ca in enumerate(a, start=1):
        current = [i]
        for j, cb in enumerate(b, start=1):
            if ca == cb:
                current.append(previous[j - 1])
            else:
                current.append(min(previous[j - 1], previous[j], current[j - 1]) + 1)
        previous = current
    return previous[-1]


def calculate_similarity(a: str, b: str) -> float:
    """Similarity in [0, 1] between two already-normalized strings."""
    if a == b:
        return 1.0
    if not a or not b:
        return 0.0
    if a in b or b in a:
        return CONTAINMENT_SIMILARITY
    longer = max(len(a), len(b))
    return (longer - levenshtein_distance(a, b)) / longer


def suggest_field_mapping(column_name: str) -> FieldMapping:
    """Suggest the catalog field for one CSV column. Never raises."""
    clean = normalize_column(column_name)
    best_field = TargetField.SKIP.value
    best_confidence = 0
    found = False

    for target, synonyms in FIELD_SYNONYMS.items():
        for synonym in synonyms:
            clean_synonym = normalize_column(synonym)
            if clean == clean_synonym:
                return FieldMapping(source_column=column_name, target_field=target, confidence=100)

            similarity = calculate_similarity(clean, clean_synonym)
            if similarity > SIMILARITY_THRESHOLD and (not found or similarity * 100 > best_confidence):
                best_field = target
                # round half up; builtin round() would send 0.725 style ties to even
                best_confidence = int(similarity * 100 + 0.5)
                found = True

    return FieldMapping(source_column=column_name, target_field=best_field, confidence=best_confidence)


def suggest_mappings(columns: Iterable[str], min_confidence: int = 50) -> dict[str, str]:
    """Auto-accepted ``{column: field}`` for every column at or above ``min_confidence``.

    Columns below the threshold are left out, i.e. skipped until a person
    maps them.
    """
    accepted: dict[str, str] = {}
    for column in columns:
        suggestion = suggest_field_mapping(column)
        if suggestion.is_mapped and suggestion.confidence >= min_confidence:
            accepted[column] = suggestion.target_field
    return accepted


def invert_mapping(column_to_field: dict[str, str]) -> dict[str, str]:
    """``{column: field}`` -> ``{field: column}`` for the row validator.

    Skipped columns ("" field) are dropped. When two columns claim the same
    field the later one wins.
    """
    inverted: dict[str, str] = {}
    for column, target in column_to_field.items():
        if target:
            inverted[target] = column
    return inverted
