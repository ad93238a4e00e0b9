#!/usr/bin/env python3
"""Example: light the pick-to-light lamp for a few sequences on a rack PLC."""

import sys
import time

from t4ed_locator import LocationPicker, PickLightRenderer
from t4ed_locator.errors import PickLightIOError


def main() -> None:
    host = "192.168.1.20"  # change to your rack PLC IP
    port = 502
    unit_id = 1

    try:
        with PickLightRenderer(host=host, port=port, unit_id=unit_id, coil_base=0, rack_register=0, error_coil=200) as lights:
            picker = LocationPicker(renderer=lights, display=lights)
            for raw in ["12", "95", "abc", "160"]:
                outcome = picker.on_input(raw)
                print(f"{raw!r}: {outcome.kind.value} {outcome.coordinate or outcome.error or ''}")
                time.sleep(1.0)
            picker.clear()
    except PickLightIOError as e:
        print(f"Modbus/connection error: {e}", file=sys.stderr)
        sys.exit(1)


if __name__ == "__main__":
    main()
