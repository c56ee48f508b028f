# src/domsift/errors.py
"""Error taxonomy for the query engine."""
from typing import Any, Dict, Optional


class DomSiftError(Exception):
    """Base class for all errors raised by domsift."""

    def __init__(self, message: str, context: Optional[Dict[str, Any]] = None):
        super().__init__(message)
        self.context = context or {}


class ConfigurationError(DomSiftError):
    """Raised when search criteria are built (or evaluated) with an invalid setup."""


class MarkupError(DomSiftError):
    """Raised when the markup handed to the builder contains no element at all."""
