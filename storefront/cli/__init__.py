"""Command line entry point (``python -m storefront.cli``)."""
