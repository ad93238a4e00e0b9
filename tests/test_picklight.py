"""Tests for pick-to-light Modbus writes (mocked pymodbus client)."""

from unittest.mock import MagicMock, call, patch

import pytest
from pymodbus.exceptions import ModbusException

from t4ed_locator import LayoutError, LocationPicker, PickLightIOError, PickLightRenderer
from t4ed_locator.types import Coordinate


@pytest.fixture
def mock_modbus_client() -> MagicMock:
    client = MagicMock()
    client.connect.return_value = True
    client.write_coil.return_value = MagicMock(isError=lambda: False)
    client.write_coils.return_value = MagicMock(isError=lambda: False)
    client.write_register.return_value = MagicMock(isError=lambda: False)
    return client


@pytest.fixture
def lights(mock_modbus_client: MagicMock) -> PickLightRenderer:
    r = PickLightRenderer(host="127.0.0.1", coil_base=100, rack_register=7, error_coil=5)
    r._client = mock_modbus_client
    return r


def test_lamp_offset(lights: PickLightRenderer) -> None:
    assert lights.lamp_offset(Coordinate(1, 0)) == 100
    assert lights.lamp_offset(Coordinate(1, 79)) == 179
    assert lights.lamp_offset(Coordinate(2, 0)) == 180
    with pytest.raises(LayoutError):
        lights.lamp_offset(Coordinate(3, 0))


def test_select_switches_previous_lamp_off_first(lights: PickLightRenderer, mock_modbus_client: MagicMock) -> None:
    lights.select_cell(Coordinate(1, 4))
    lights.select_cell(Coordinate(2, 9))
    assert mock_modbus_client.write_coil.call_args_list == [
        call(104, True, device_id=1),
        call(104, False, device_id=1),
        call(189, True, device_id=1),
    ]
    assert lights.lit == Coordinate(2, 9)


def test_select_same_cell_writes_nothing(lights: PickLightRenderer, mock_modbus_client: MagicMock) -> None:
    lights.select_cell(Coordinate(1, 4))
    lights.select_cell(Coordinate(1, 4))
    assert mock_modbus_client.write_coil.call_count == 1


def test_rack_indicator_register(lights: PickLightRenderer, mock_modbus_client: MagicMock) -> None:
    lights.set_rack_number(2)
    lights.set_rack_number(None)
    assert mock_modbus_client.write_register.call_args_list == [
        call(7, 2, device_id=1),
        call(7, 0, device_id=1),
    ]


def test_error_lamp_follows_displayed_errors(lights: PickLightRenderer, mock_modbus_client: MagicMock) -> None:
    h1 = lights.show(MagicMock())
    h2 = lights.show(MagicMock())
    lights.release(h1)
    lights.release(h2)
    assert mock_modbus_client.write_coil.call_args_list == [
        call(5, True, device_id=1),
        call(5, False, device_id=1),
    ]


def test_picker_drives_lamps(lights: PickLightRenderer, mock_modbus_client: MagicMock) -> None:
    picker = LocationPicker(renderer=lights, display=lights)
    picker.on_input("42")
    picker.on_input("abc")
    assert mock_modbus_client.write_coil.call_args_list == [
        call(141, True, device_id=1),
        call(5, True, device_id=1),
        call(141, False, device_id=1),
    ]
    assert mock_modbus_client.write_register.call_args_list == [
        call(7, 1, device_id=1),
        call(7, 0, device_id=1),
    ]
    assert lights.lit is None


def test_all_off(lights: PickLightRenderer, mock_modbus_client: MagicMock) -> None:
    lights.all_off()
    mock_modbus_client.write_coils.assert_called_once_with(100, [False] * 160, device_id=1)
    mock_modbus_client.write_register.assert_called_once_with(7, 0, device_id=1)
    mock_modbus_client.write_coil.assert_called_once_with(5, False, device_id=1)


def test_write_error_raises(lights: PickLightRenderer, mock_modbus_client: MagicMock) -> None:
    mock_modbus_client.write_coil.return_value = MagicMock(isError=lambda: True)
    with pytest.raises(PickLightIOError) as exc_info:
        lights.select_cell(Coordinate(1, 0))
    assert exc_info.value.offset == 100
    assert lights.lit is None


def test_pymodbus_exception_is_wrapped(lights: PickLightRenderer, mock_modbus_client: MagicMock) -> None:
    mock_modbus_client.write_register.side_effect = ModbusException("timeout")
    with pytest.raises(PickLightIOError) as exc_info:
        lights.set_rack_number(1)
    assert isinstance(exc_info.value.cause, ModbusException)
    assert exc_info.value.target == "rack indicator"


def test_connect_failure_raises(mock_modbus_client: MagicMock) -> None:
    mock_modbus_client.connect.return_value = False
    with patch("t4ed_locator.picklight.ModbusTcpClient", return_value=mock_modbus_client):
        with pytest.raises(PickLightIOError, match="Failed to connect"):
            with PickLightRenderer(host="10.0.0.9"):
                pass


def test_context_manager_closes(mock_modbus_client: MagicMock) -> None:
    with patch("t4ed_locator.picklight.ModbusTcpClient", return_value=mock_modbus_client):
        with PickLightRenderer(host="10.0.0.9", port=5020) as lights:
            lights.select_cell(Coordinate(1, 0))
    mock_modbus_client.close.assert_called_once()


def test_first_connection_switches_stale_lamps_off(mock_modbus_client: MagicMock) -> None:
    manager = MagicMock()
    manager.attach_mock(mock_modbus_client.write_coils, "write_coils")
    manager.attach_mock(mock_modbus_client.write_register, "write_register")
    manager.attach_mock(mock_modbus_client.write_coil, "write_coil")
    with patch("t4ed_locator.picklight.ModbusTcpClient", return_value=mock_modbus_client):
        with PickLightRenderer(host="10.0.0.9", coil_base=100, rack_register=7, error_coil=5) as lights:
            lights.select_cell(Coordinate(1, 3))
    assert manager.mock_calls == [
        call.write_coils(100, [False] * 160, device_id=1),
        call.write_register(7, 0, device_id=1),
        call.write_coil(5, False, device_id=1),
        call.write_coil(103, True, device_id=1),
    ]


def test_failed_lamp_sync_closes_connection(mock_modbus_client: MagicMock) -> None:
    mock_modbus_client.write_coils.return_value = MagicMock(isError=lambda: True)
    with patch("t4ed_locator.picklight.ModbusTcpClient", return_value=mock_modbus_client):
        lights = PickLightRenderer(host="10.0.0.9")
        with pytest.raises(PickLightIOError) as exc_info:
            lights.connect()
    assert exc_info.value.target == "lamps"
    mock_modbus_client.close.assert_called_once()
    mock_modbus_client.write_coil.assert_not_called()


def test_negative_offsets_rejected() -> None:
    with pytest.raises(ValueError):
        PickLightRenderer(host="10.0.0.9", coil_base=-1)
