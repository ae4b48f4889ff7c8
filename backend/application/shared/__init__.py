"""Cross-cutting application helpers."""
