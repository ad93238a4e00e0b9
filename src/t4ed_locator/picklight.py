"""PickLightRenderer: drive per-cell pick-to-light lamps on a rack PLC over Modbus TCP (pymodbus)."""

import logging
from typing import Any

from pymodbus.client import ModbusTcpClient
from pymodbus.exceptions import ModbusException as PymodbusException

from .errors import LayoutError, PickLightIOError
from .layout import RackLayout, get_default_layout
from .types import Coordinate, RackError

logger = logging.getLogger(__name__)


class PickLightRenderer:
    """
    Renderer that lights the lamp of the selected cell on the rack PLC.

    Lamps are coils: cell (rack, index) is coil ``coil_base + (rack - 1) * rack_size + index``.
    The rack indicator is a holding register (0 = blank). With ``error_coil``
    set, that coil is on while any validation error is displayed.

    The first connection of a session switches every lamp off, so lamps left
    on by an earlier session never stay lit next to the selected one.
    """

    def __init__(
        self,
        host: str,
        port: int = 502,
        unit_id: int = 1,
        layout: RackLayout | None = None,
        coil_base: int = 0,
        rack_register: int = 0,
        error_coil: int | None = None,
        timeout: float = 3.0,
        retries: int = 3,
    ) -> None:
        if coil_base < 0 or rack_register < 0 or (error_coil is not None and error_coil < 0):
            raise ValueError("Modbus offsets must be >= 0")
        self._host = host
        self._port = port
        self._unit_id = unit_id
        self._timeout = timeout
        self._retries = retries
        self._layout = layout if layout is not None else get_default_layout()
        self._coil_base = coil_base
        self._rack_register = rack_register
        self._error_coil = error_coil
        self._client: ModbusTcpClient | None = None
        self._lit: Coordinate | None = None
        self._shown_errors = 0
        self._next_handle = 0

    def _get_client(self) -> ModbusTcpClient:
        if self._client is None:
            client = ModbusTcpClient(
                host=self._host,
                port=self._port,
                timeout=self._timeout,
                retries=self._retries,
            )
            if not client.connect():
                raise PickLightIOError(
                    f"Failed to connect to {self._host}:{self._port}",
                    cause=None,
                )
            self._client = client
            # Lamps may still be lit by an earlier session; start from all off
            try:
                self.all_off()
            except PickLightIOError:
                self.close()
                raise
        return self._client

    def lamp_offset(self, coordinate: Coordinate) -> int:
        """Coil offset of the lamp for a cell."""
        if coordinate.rack > self._layout.racks or coordinate.index >= self._layout.rack_size:
            raise LayoutError(f"{coordinate} is outside {self._layout}", profile=self._layout.profile)
        return self._coil_base + (coordinate.rack - 1) * self._layout.rack_size + coordinate.index

    def _write_coil(self, offset: int, value: bool, target: str) -> None:
        client = self._get_client()
        try:
            rr = client.write_coil(offset, value, device_id=self._unit_id)
        except PymodbusException as e:
            raise PickLightIOError(str(e), target=target, offset=offset, cause=e) from e
        if rr.isError():
            raise PickLightIOError(
                str(rr),
                target=target,
                offset=offset,
                cause=getattr(rr, "exception", None),
            )

    def _write_register(self, offset: int, value: int, target: str) -> None:
        client = self._get_client()
        try:
            rr = client.write_register(offset, value, device_id=self._unit_id)
        except PymodbusException as e:
            raise PickLightIOError(str(e), target=target, offset=offset, cause=e) from e
        if rr.isError():
            raise PickLightIOError(
                str(rr),
                target=target,
                offset=offset,
                cause=getattr(rr, "exception", None),
            )

    def connect(self) -> None:
        """Establish TCP connection to the rack PLC."""
        self._get_client()

    def close(self) -> None:
        """Close the TCP connection. Lamps keep their last state."""
        if self._client is not None:
            try:
                self._client.close()
            except Exception as e:
                logger.warning("Error closing Modbus client: %s", e)
            self._client = None

    def __enter__(self) -> "PickLightRenderer":
        self.connect()
        return self

    def __exit__(self, *args: Any) -> None:
        self.close()

    @property
    def lit(self) -> Coordinate | None:
        return self._lit

    def all_off(self) -> None:
        """Switch off every lamp of every rack and the error lamp, and blank the rack indicator.

        Runs automatically on the first connection of a session.
        """
        client = self._get_client()
        count = self._layout.racks * self._layout.rack_size
        try:
            rr = client.write_coils(self._coil_base, [False] * count, device_id=self._unit_id)
        except PymodbusException as e:
            raise PickLightIOError(str(e), target="lamps", offset=self._coil_base, cause=e) from e
        if rr.isError():
            raise PickLightIOError(str(rr), target="lamps", offset=self._coil_base)
        self._lit = None
        self.set_rack_number(None)
        if self._error_coil is not None:
            self._write_coil(self._error_coil, False, target="error lamp")
        self._shown_errors = 0

    # Renderer

    def select_cell(self, coordinate: Coordinate) -> None:
        if coordinate == self._lit:
            return
        # Old lamp goes off before the new one comes on
        self.clear_selection()
        offset = self.lamp_offset(coordinate)
        self._write_coil(offset, True, target=f"lamp {coordinate.rack}/{coordinate.index}")
        self._lit = coordinate
        logger.debug("lamp on: rack=%d index=%d coil=%d", coordinate.rack, coordinate.index, offset)

    def clear_selection(self) -> None:
        if self._lit is None:
            return
        lit = self._lit
        self._write_coil(self.lamp_offset(lit), False, target=f"lamp {lit.rack}/{lit.index}")
        self._lit = None

    def set_rack_number(self, rack: int | None) -> None:
        self._write_register(self._rack_register, rack or 0, target="rack indicator")

    def set_input_text(self, raw: str) -> None:
        pass

    def scroll_into_view(self) -> None:
        pass

    # Error display

    def show(self, error: RackError) -> Any:
        if self._error_coil is not None and self._shown_errors == 0:
            self._write_coil(self._error_coil, True, target="error lamp")
        self._shown_errors += 1
        handle = self._next_handle
        self._next_handle += 1
        return handle

    def release(self, handle: Any) -> None:
        if self._shown_errors == 0:
            return
        self._shown_errors -= 1
        if self._error_coil is not None and self._shown_errors == 0:
            self._write_coil(self._error_coil, False, target="error lamp")
