"""Exception types for emospine."""


class EmospineError(Exception):
    """Base class for emospine errors."""


class GateError(EmospineError):
    """A ready gate was resolved with an unknown or already-resolved name."""


class SceneNotFoundError(EmospineError, ValueError):
    """No scene with the requested ordinal is loaded."""

    def __init__(self, ordinal: int) -> None:
        super().__init__(f"Scene {ordinal} not found")
        self.ordinal = ordinal


class SessionClosedError(EmospineError):
    """The session was used after close()."""
