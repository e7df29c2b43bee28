"""In-memory index of normalized, enriched vault records per chain."""

__version__ = "0.1.0"
