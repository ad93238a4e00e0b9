"""t4ed-locator: resolve operator-entered sequences to T4ED rack cells, with de-duplicated validation errors."""

__version__ = "0.1.0"

from .engine import RackAddressEngine
from .errors import LayoutError, PickLightIOError, RackLocatorError
from .layout import RackLayout, get_default_layout
from .picker import LocationPicker, NullRenderer, RackRenderer
from .picklight import PickLightRenderer
from .render import TextRackRenderer
from .sequence import parse_sequence
from .tracker import ErrorDisplay, ErrorStateTracker
from .types import (
    CellPosition,
    Coordinate,
    ErrorKind,
    InputSource,
    NotANumber,
    Outcome,
    OutcomeKind,
    OutOfRange,
    RackError,
)

__all__ = [
    "__version__",
    "RackAddressEngine",
    "LayoutError",
    "PickLightIOError",
    "RackLocatorError",
    "RackLayout",
    "get_default_layout",
    "LocationPicker",
    "NullRenderer",
    "RackRenderer",
    "PickLightRenderer",
    "TextRackRenderer",
    "parse_sequence",
    "ErrorDisplay",
    "ErrorStateTracker",
    "CellPosition",
    "Coordinate",
    "ErrorKind",
    "InputSource",
    "NotANumber",
    "Outcome",
    "OutcomeKind",
    "OutOfRange",
    "RackError",
]
