#!/usr/bin/env python3
"""Example: interactive picker in the terminal; type a sequence, Ctrl+C to stop."""

from t4ed_locator import LocationPicker, TextRackRenderer


def main() -> None:
    renderer = TextRackRenderer()
    picker = LocationPicker(renderer=renderer, display=renderer)
    picker.reset()
    print(renderer.render())
    try:
        while True:
            raw = input("Sequence> ")
            picker.on_input(raw)
            print(renderer.render())
    except (KeyboardInterrupt, EOFError):
        print("\nStopped.")


if __name__ == "__main__":
    main()
