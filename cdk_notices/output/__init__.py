"""Output formatters for cdk-notices."""

from .formatters import ConsoleFormatter, format_notices, format_overview

__all__ = [
    "ConsoleFormatter",
    "format_notices",
    "format_overview",
]
