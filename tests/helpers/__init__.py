"""Shared fakes and token helpers for the test suite."""

__all__ = [
    "cli",
    "fakes",
    "tokens",
]
