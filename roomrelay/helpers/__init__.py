"""Helper utilities for startup checks."""

from .validation import validate_env

__all__ = ["validate_env"]
