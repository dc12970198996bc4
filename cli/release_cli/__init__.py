"""Command-line interface for release-impact analysis."""
