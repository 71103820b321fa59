"""Connection state machine misuse."""


class InvalidTransition(RuntimeError):
    """Raised when a lifecycle step is attempted from the wrong state."""

    def __init__(self, current: str, target: str) -> None:
        super().__init__(f"Cannot move connection from {current} to {target}.")
        self.current = current
        self.target = target


__all__ = ["InvalidTransition"]
