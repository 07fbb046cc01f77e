"""Packaged data files (bundled fallback catalog)."""
