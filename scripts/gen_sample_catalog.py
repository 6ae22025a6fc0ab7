#!/usr/bin/env python3
"""Sample product CSV generator for trying out the bulk import.

Generates a CSV (or XLSX) with the column names a typical supplier feed uses,
so the field mapper has something realistic to suggest against:
- Product_Name, Manufacturer, Product Description, Category
- an Image URL column (mapped, but discarded on import)
- optionally a share of deliberately broken rows (blank title / category)
"""
from __future__ import annotations

import argparse
import sys
from pathlib import Path

import numpy as np
import pandas as pd

BRANDS = ["Samsung", "Apple", "Sony", "Lenovo", "Xiaomi", "Huawei", "Dell", "Canon"]
CATEGORIES = ["smartphones", "laptops", "audio-headphones", "cameras-photography", "gaming"]
NOUNS = ["Phone", "Laptop", "Headphones", "Camera", "Console", "Tablet", "Speaker"]


def generate_sample_products(rows: int, broken_ratio: float = 0.0, seed: int = 42) -> pd.DataFrame:
    """Build a DataFrame of synthetic products.

    Args:
        rows: Number of product rows
        broken_ratio: Share of rows (0..1) with a blank title or category
        seed: Random seed for reproducible data

    Returns:
        DataFrame whose columns need mapping before import
    """
    rng = np.random.default_rng(seed)
    brands = rng.choice(BRANDS, rows)
    nouns = rng.choice(NOUNS, rows)
    models = rng.integers(10, 999, rows)

    titles = [f"{b} {n} {m}" for b, n, m in zip(brands, nouns, models, strict=True)]
    descriptions = [
        f"The {t} with {rng.integers(2, 16)} GB memory and a {rng.integers(1, 3)} year warranty."
        for t in titles
    ]
    categories = rng.choice(CATEGORIES, rows).tolist()

    broken = rng.random(rows) < broken_ratio
    for i in np.flatnonzero(broken):
        if i % 2 == 0:
            titles[i] = ""
        else:
            categories[i] = ""

    return pd.DataFrame(
        {
            "Product_Name": titles,
            "Manufacturer": brands.tolist(),
            "Product Description": descriptions,
            "Category": categories,
            "Image URL": [f"https://img.example.com/{i}.jpg" for i in range(rows)],
        }
    )


def main() -> int:
    parser = argparse.ArgumentParser(
        description="Generate a sample product file for the bulk import",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  %(prog)s sample.csv
  %(prog)s big.csv --rows 20000 --broken 0.05
  %(prog)s sample.xlsx --rows 200
        """,
    )
    parser.add_argument("output", type=Path, help="Output .csv or .xlsx path")
    parser.add_argument("--rows", type=int, default=100, help="Number of product rows (default: 100)")
    parser.add_argument("--broken", type=float, default=0.0, help="Share of invalid rows, 0..1 (default: 0)")
    parser.add_argument("--seed", type=int, default=42, help="Random seed (default: 42)")
    args = parser.parse_args()

    if args.rows <= 0:
        print("Error: --rows must be positive", file=sys.stderr)
        return 1
    if not 0.0 <= args.broken <= 1.0:
        print("Error: --broken must be between 0 and 1", file=sys.stderr)
        return 1

    df = generate_sample_products(args.rows, args.broken, args.seed)
    args.output.parent.mkdir(parents=True, exist_ok=True)
    if args.output.suffix.lower() == ".xlsx":
        df.to_excel(args.output, index=False, engine="openpyxl")
    else:
        df.to_csv(args.output, index=False)
    print(f"Created {args.output} ({args.rows} rows, {int(round(args.rows * args.broken))} broken approx.)")
    return 0


if __name__ == "__main__":
    sys.exit(main())
