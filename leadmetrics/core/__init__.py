"""Extraction pipeline: validation, calculators, scoring, flattening."""
