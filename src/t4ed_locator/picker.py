"""LocationPicker: the single dispatch pipeline shared by every input source."""

import logging
from typing import Protocol

from .engine import RackAddressEngine
from .layout import RackLayout
from .tracker import ErrorDisplay, ErrorStateTracker
from .types import Coordinate, ErrorKind, InputSource, Outcome, OutcomeKind

logger = logging.getLogger(__name__)


class RackRenderer(Protocol):
    """Presentation side of the picker (grid highlight, rack indicator, input box)."""

    def select_cell(self, coordinate: Coordinate) -> None:
        """Select exactly this cell; no other cell may stay selected."""
        ...

    def clear_selection(self) -> None: ...

    def set_rack_number(self, rack: int | None) -> None:
        """Update the pagination indicator; None blanks it."""
        ...

    def set_input_text(self, raw: str) -> None:
        """Mirror a pointer-picked value into the text input."""
        ...

    def scroll_into_view(self) -> None: ...


class NullRenderer:
    """Renderer that draws nothing; used when only the state is of interest."""

    def select_cell(self, coordinate: Coordinate) -> None:
        pass

    def clear_selection(self) -> None:
        pass

    def set_rack_number(self, rack: int | None) -> None:
        pass

    def set_input_text(self, raw: str) -> None:
        pass

    def scroll_into_view(self) -> None:
        pass


class LocationPicker:
    """
    Owns one RackAddressEngine, one ErrorStateTracker and one renderer, and
    applies the same outcome table whichever input produced the value:

        VALID         clear NotANumber, clear OutOfRange, show rack, select cell
        OUT_OF_RANGE  clear NotANumber, add OutOfRange,   blank rack, clear cell
        INVALID       add NotANumber,   clear OutOfRange, blank rack, clear cell
        EMPTY         clear NotANumber, clear OutOfRange, blank rack, clear cell
    """

    def __init__(
        self,
        layout: RackLayout | None = None,
        renderer: RackRenderer | None = None,
        display: ErrorDisplay | None = None,
    ) -> None:
        self.engine = RackAddressEngine(layout)
        self.errors = ErrorStateTracker(display)
        self._renderer: RackRenderer = renderer if renderer is not None else NullRenderer()
        self._last: Outcome | None = None

    @property
    def layout(self) -> RackLayout:
        return self.engine.layout

    @property
    def last_outcome(self) -> Outcome | None:
        return self._last

    def dispatch(self, raw: str, source: InputSource = InputSource.TYPED) -> Outcome:
        """Run one event through the pipeline and return its outcome."""
        if source.is_pointer:
            self._renderer.set_input_text(raw)

        outcome = self.engine.evaluate(raw)
        errors = self.errors
        if outcome.kind == OutcomeKind.VALID:
            errors.clear(ErrorKind.NOT_A_NUMBER)
            errors.clear(ErrorKind.OUT_OF_RANGE)
        elif outcome.kind == OutcomeKind.OUT_OF_RANGE:
            errors.add(outcome.error)
            errors.clear(ErrorKind.NOT_A_NUMBER)
        elif outcome.kind == OutcomeKind.INVALID:
            errors.add(outcome.error)
            errors.clear(ErrorKind.OUT_OF_RANGE)
        else:
            errors.clear(ErrorKind.NOT_A_NUMBER)
            errors.clear(ErrorKind.OUT_OF_RANGE)

        if outcome.coordinate is not None:
            self._renderer.select_cell(outcome.coordinate)
        else:
            self._renderer.clear_selection()
        self._renderer.set_rack_number(outcome.rack_number)

        # Typed numbers bring the rack into view; pointer events already point at it
        if source in (InputSource.TYPED, InputSource.RESET) and outcome.kind in (
            OutcomeKind.VALID,
            OutcomeKind.OUT_OF_RANGE,
        ):
            self._renderer.scroll_into_view()

        logger.debug("dispatch %s %r -> %s", source.value, raw, outcome.kind.value)
        self._last = outcome
        return outcome

    def on_input(self, value: str) -> Outcome:
        """Text input changed."""
        return self.dispatch(value, InputSource.TYPED)

    def _on_pointer(self, seq: str | None, source: InputSource) -> Outcome | None:
        # Pointer not over a cell: nothing to evaluate
        if seq is None:
            return None
        return self.dispatch(seq, source)

    def on_click(self, seq: str | None) -> Outcome | None:
        return self._on_pointer(seq, InputSource.CLICK)

    def on_hover(self, seq: str | None) -> Outcome | None:
        return self._on_pointer(seq, InputSource.HOVER)

    def on_drag(self, seq: str | None) -> Outcome | None:
        return self._on_pointer(seq, InputSource.DRAG)

    def reset(self, value: str = "") -> Outcome:
        """Re-evaluate whatever the input box holds at start-up (e.g. left over after a reload)."""
        return self.dispatch(value, InputSource.RESET)

    def clear(self) -> None:
        """Blank highlight, rack indicator and errors without evaluating input."""
        self.engine.clear()
        self.errors.clear_all()
        self._renderer.clear_selection()
        self._renderer.set_rack_number(None)
        self._last = None
