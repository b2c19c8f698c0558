"""Waterfall flow definitions (data) and their loader."""
