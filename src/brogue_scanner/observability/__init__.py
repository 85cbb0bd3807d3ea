"""Logging setup for the scanner CLI."""

from brogue_scanner.observability.logging import JsonFormatter, configure_logging


__all__ = ["JsonFormatter", "configure_logging"]
