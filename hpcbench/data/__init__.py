"""Bundled Matrix Market datasets."""
