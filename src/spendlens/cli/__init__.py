"""Command line interface for spendlens."""
