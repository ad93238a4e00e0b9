"""ErrorStateTracker: ordered, kind-de-duplicated set of active validation errors."""

import logging
from typing import Any, Iterator, Protocol

from .types import ErrorKind, RackError, error_kind

logger = logging.getLogger(__name__)


class ErrorDisplay(Protocol):
    """Shows and hides error messages. The handle returned by show is passed back to release."""

    def show(self, error: RackError) -> Any: ...

    def release(self, handle: Any) -> None: ...


class _MessageDisplay:
    """Fallback display: the message text is the handle; nothing to release."""

    def show(self, error: RackError) -> Any:
        return error.message

    def release(self, handle: Any) -> None:
        pass


class ErrorStateTracker:
    """
    Active validation errors in the order they were raised.

    At most one error per ErrorKind. add() of a kind that is already active is
    a no-op even when the payload differs, so the first OutOfRange bounds stay
    on display until the error is cleared.
    """

    def __init__(self, display: ErrorDisplay | None = None) -> None:
        self._display: ErrorDisplay = display if display is not None else _MessageDisplay()
        self._entries: list[tuple[RackError, Any]] = []

    def _find(self, kind: ErrorKind) -> int | None:
        for i, (error, _handle) in enumerate(self._entries):
            if error.kind == kind:
                return i
        return None

    def add(self, error: RackError) -> bool:
        """Activate error unless its kind is already active. Returns True if it was added."""
        if self._find(error.kind) is not None:
            return False
        handle = self._display.show(error)
        self._entries.append((error, handle))
        logger.debug("error added: %s", error.kind.value)
        return True

    def clear(self, error: RackError | ErrorKind) -> bool:
        """Deactivate the active error of this kind, payload ignored. Returns True if one was removed."""
        i = self._find(error_kind(error))
        if i is None:
            return False
        removed, handle = self._entries.pop(i)
        self._display.release(handle)
        logger.debug("error cleared: %s", removed.kind.value)
        return True

    def clear_all(self) -> int:
        """Deactivate every error, releasing handles in insertion order. Returns the count removed."""
        entries, self._entries = self._entries, []
        for _error, handle in entries:
            self._display.release(handle)
        return len(entries)

    def is_active(self, error: RackError | ErrorKind) -> bool:
        return self._find(error_kind(error)) is not None

    @property
    def active(self) -> list[RackError]:
        """Active errors in insertion order."""
        return [error for error, _handle in self._entries]

    @property
    def messages(self) -> list[str]:
        return [error.message for error, _handle in self._entries]

    def __len__(self) -> int:
        return len(self._entries)

    def __iter__(self) -> Iterator[RackError]:
        return iter(self.active)

    def __contains__(self, error: object) -> bool:
        if isinstance(error, (RackError, ErrorKind)):
            return self.is_active(error)
        return False
