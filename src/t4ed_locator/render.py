"""TextRackRenderer: draw a rack, the selected cell and active errors as plain text."""

import logging
from typing import Any

from .layout import RackLayout, get_default_layout
from .types import Coordinate, RackError

logger = logging.getLogger(__name__)


class TextRackRenderer:
    """
    Terminal counterpart of the rack grid widget. Implements both the
    renderer and the error display interfaces used by LocationPicker.

    Cells are labelled with their global sequence; the selected one is
    bracketed. Only the rack of the selection (or rack 1) is drawn.
    """

    def __init__(self, layout: RackLayout | None = None) -> None:
        self._layout = layout if layout is not None else get_default_layout()
        self.selected: Coordinate | None = None
        self.rack_number: int | None = None
        self.input_text = ""
        self.scroll_requests = 0
        self._messages: dict[int, str] = {}
        self._next_handle = 0

    # Renderer

    def select_cell(self, coordinate: Coordinate) -> None:
        self.selected = coordinate

    def clear_selection(self) -> None:
        self.selected = None

    def set_rack_number(self, rack: int | None) -> None:
        self.rack_number = rack

    def set_input_text(self, raw: str) -> None:
        self.input_text = raw

    def scroll_into_view(self) -> None:
        self.scroll_requests += 1

    # Error display

    def show(self, error: RackError) -> Any:
        handle = self._next_handle
        self._next_handle += 1
        self._messages[handle] = error.message
        return handle

    def release(self, handle: Any) -> None:
        if self._messages.pop(handle, None) is None:
            logger.warning("Release of unknown error handle %r", handle)

    @property
    def messages(self) -> list[str]:
        """Displayed error messages, oldest first."""
        return list(self._messages.values())

    def render(self, rack: int | None = None) -> str:
        """Return the rack drawing: pagination line, grid rows top to bottom, then errors."""
        layout = self._layout
        if rack is None:
            rack = self.selected.rack if self.selected is not None else 1
        width = len(str(layout.max_sequence)) + 2
        selected_seq = layout.sequence_of(self.selected) if self.selected is not None else None

        lines = [f"Rack: {self.rack_number if self.rack_number is not None else '-'}"]
        for row in layout.grid(rack):
            cells = []
            for seq in row:
                label = f"[{seq}]" if seq == selected_seq else f" {seq} "
                cells.append(label.rjust(width))
            lines.append(" ".join(cells).rstrip())
        for message in self.messages:
            lines.append(f"! {message}")
        return "\n".join(lines)
