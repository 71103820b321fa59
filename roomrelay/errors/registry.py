"""Room registry contract violations.

These should not surface when the connection handler drives the registry
correctly; the handler treats them as internal failures and closes.
"""


class RegistryError(Exception):
    """Base class for registry contract violations."""


class NotRegistered(RegistryError):
    """The handle is not (or no longer) registered in this room."""


class InvalidName(RegistryError):
    """A display name is empty after trimming whitespace."""


__all__ = ["RegistryError", "NotRegistered", "InvalidName"]
