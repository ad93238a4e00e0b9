"""RackAddressEngine: raw operator input -> Outcome, plus the exclusive highlight state."""

import logging

from .layout import RackLayout, get_default_layout
from .sequence import parse_sequence
from .types import Coordinate, Outcome

logger = logging.getLogger(__name__)


class RackAddressEngine:
    """
    Translate raw sequence strings into rack coordinates and track the single
    highlighted cell. Never raises for operator input: every failure is an
    Outcome (INVALID, OUT_OF_RANGE or EMPTY).
    """

    def __init__(self, layout: RackLayout | None = None) -> None:
        self._layout = layout if layout is not None else get_default_layout()
        self._highlighted: Coordinate | None = None

    @property
    def layout(self) -> RackLayout:
        return self._layout

    @property
    def highlighted(self) -> Coordinate | None:
        """Currently highlighted cell, or None."""
        return self._highlighted

    def clear(self) -> None:
        """Blank the highlight without evaluating any input."""
        self._highlighted = None

    def evaluate(self, raw: str) -> Outcome:
        """
        Evaluate one raw input string.

        - "" -> EMPTY (not an error)
        - malformed -> INVALID(NotANumber)
        - 0 or past the last cell -> OUT_OF_RANGE(min, max)
        - otherwise VALID with the coordinate; the highlight moves to it
        """
        outcome = self._classify(raw)
        # Replace, never accumulate: the previous highlight is always dropped
        self._highlighted = outcome.coordinate
        logger.debug("evaluate(%r) -> %s %s", raw, outcome.kind.value, outcome.coordinate or outcome.error)
        return outcome

    def _classify(self, raw: str) -> Outcome:
        layout = self._layout
        if raw == "":
            return Outcome.empty()
        try:
            seq = parse_sequence(raw)
        except OverflowError:
            return Outcome.out_of_range(raw, layout.min_sequence, layout.max_sequence)
        except ValueError:
            return Outcome.invalid(raw)
        if not layout.contains(seq):
            return Outcome.out_of_range(raw, layout.min_sequence, layout.max_sequence)
        return Outcome.valid(raw, layout.locate(seq))
