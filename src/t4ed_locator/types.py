"""Core data model: coordinates, validation errors, outcomes, and input sources."""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from enum import Enum
from typing import ClassVar


class ErrorKind(str, Enum):
    """Validation error categories; errors are de-duplicated by kind, never by payload."""

    OUT_OF_RANGE = "out_of_range"
    NOT_A_NUMBER = "not_a_number"


class OutcomeKind(str, Enum):
    """Result categories of RackAddressEngine.evaluate."""

    VALID = "valid"
    OUT_OF_RANGE = "out_of_range"
    INVALID = "invalid"
    EMPTY = "empty"


class InputSource(str, Enum):
    """Where a raw sequence came from. Dispatch is identical for all of them."""

    TYPED = "typed"
    CLICK = "click"
    HOVER = "hover"
    DRAG = "drag"
    RESET = "reset"

    @property
    def is_pointer(self) -> bool:
        return self in (InputSource.CLICK, InputSource.HOVER, InputSource.DRAG)


class RackError(ABC):
    """Base for validation errors shown to the operator."""

    kind: ClassVar[ErrorKind]

    @property
    @abstractmethod
    def message(self) -> str:
        """Operator-facing text of the error."""

    def __str__(self) -> str:
        return self.message


@dataclass(frozen=True)
class OutOfRange(RackError):
    """Sequence parsed but lies outside [min, max]."""

    min: int
    max: int

    kind: ClassVar[ErrorKind] = ErrorKind.OUT_OF_RANGE

    @property
    def message(self) -> str:
        return f"Sequence must be between {self.min} and {self.max}."


@dataclass(frozen=True)
class NotANumber(RackError):
    """Sequence is non-empty and not a base-10 non-negative integer."""

    kind: ClassVar[ErrorKind] = ErrorKind.NOT_A_NUMBER

    @property
    def message(self) -> str:
        return "Sequence must be a positive integer."


def error_kind(error: "RackError | ErrorKind") -> ErrorKind:
    """Return the kind tag of an error (or the kind itself), ignoring any payload."""
    if isinstance(error, ErrorKind):
        return error
    return error.kind


@dataclass(frozen=True)
class Coordinate:
    """Resolved address of a cell: rack number (1-based) and 0-based index within the rack."""

    rack: int
    index: int

    def __post_init__(self) -> None:
        if self.rack < 1:
            raise ValueError(f"rack must be >= 1, got {self.rack}")
        if self.index < 0:
            raise ValueError(f"index must be >= 0, got {self.index}")

    @property
    def local_sequence(self) -> int:
        """Rack-local sequence printed on the cell (1-based)."""
        return self.index + 1


@dataclass(frozen=True)
class CellPosition:
    """Where a cell is drawn: row counted from the top, column counted from the left."""

    row: int
    column: int


@dataclass(frozen=True)
class Outcome:
    """Result of evaluating one raw input string. Exactly one of coordinate/error is set unless EMPTY."""

    kind: OutcomeKind
    raw: str
    coordinate: Coordinate | None = None
    error: RackError | None = None

    def __post_init__(self) -> None:
        if (self.kind == OutcomeKind.VALID) != (self.coordinate is not None):
            raise ValueError(f"coordinate must be set exactly for VALID outcomes, got {self.kind.value}")
        if self.kind in (OutcomeKind.OUT_OF_RANGE, OutcomeKind.INVALID) and self.error is None:
            raise ValueError(f"error is required for {self.kind.value} outcomes")

    @classmethod
    def valid(cls, raw: str, coordinate: Coordinate) -> "Outcome":
        return cls(OutcomeKind.VALID, raw, coordinate=coordinate)

    @classmethod
    def out_of_range(cls, raw: str, lo: int, hi: int) -> "Outcome":
        return cls(OutcomeKind.OUT_OF_RANGE, raw, error=OutOfRange(lo, hi))

    @classmethod
    def invalid(cls, raw: str) -> "Outcome":
        return cls(OutcomeKind.INVALID, raw, error=NotANumber())

    @classmethod
    def empty(cls) -> "Outcome":
        return cls(OutcomeKind.EMPTY, "")

    @property
    def is_valid(self) -> bool:
        return self.kind == OutcomeKind.VALID

    @property
    def rack_number(self) -> int | None:
        """Rack to show in the pagination indicator; None blanks it."""
        return self.coordinate.rack if self.coordinate is not None else None
