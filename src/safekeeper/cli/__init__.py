"""Command-line interface for safekeeper."""
