"""Command-line interface for audit-sieve."""
