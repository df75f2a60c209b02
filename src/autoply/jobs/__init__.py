"""Extraction and submission pipelines."""
