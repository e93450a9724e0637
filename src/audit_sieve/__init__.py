"""audit-sieve: policy filter for `yarn audit` findings."""

__version__ = "0.1.0"
