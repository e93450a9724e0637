"""structlog setup for command-line runs."""

import logging

import structlog


def configure_logging(debug: bool = False) -> None:
    """Show warnings by default, everything in debug mode."""
    level = logging.DEBUG if debug else logging.WARNING
    structlog.configure(wrapper_class=structlog.make_filtering_bound_logger(level))
