"""Exceptions for t4ed-locator: layout faults and pick-to-light I/O errors.

Operator input never raises; validation failures are returned as values
(see ``types.OutOfRange`` and ``types.NotANumber``).
"""


class RackLocatorError(Exception):
    """Base exception for t4ed-locator."""

    pass


class LayoutError(RackLocatorError):
    """Raised when a layout profile is malformed or a position lies outside it."""

    def __init__(self, message: str, *, profile: str | None = None) -> None:
        self.profile = profile
        super().__init__(message)


class PickLightIOError(RackLocatorError):
    """Raised when a pick-to-light Modbus write fails (wraps pymodbus or connection errors)."""

    def __init__(
        self,
        message: str,
        *,
        target: str | None = None,
        offset: int | None = None,
        cause: BaseException | None = None,
    ) -> None:
        self.target = target
        self.offset = offset
        self.cause = cause
        super().__init__(message)
