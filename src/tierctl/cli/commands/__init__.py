"""CLI command modules."""

from .tiers import cleanup, install, summary, validate

__all__ = ["cleanup", "install", "summary", "validate"]
