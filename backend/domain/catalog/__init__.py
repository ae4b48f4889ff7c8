"""Catalog bounded context (read-only reference data for the kitchen)."""
