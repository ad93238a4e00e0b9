"""Parse operator-entered sequence strings."""

import re

# Optional '+' and ASCII digits only; no whitespace, sign '-', decimal point or radix prefix
_SEQUENCE_PATTERN = re.compile(r"\+?([0-9]+)", re.ASCII)

# Far beyond any rack; keeps int() away from the interpreter's digit limit
_MAX_DIGITS = 18


def parse_sequence(raw: str) -> int:
    """
    Parse a sequence as a base-10 non-negative integer.

    Accepts what a strict unsigned decimal parser accepts: an optional leading
    '+' followed by digits. Leading zeros are allowed ("007" -> 7). Range is
    not checked here.

    Raises ValueError for empty or malformed input and OverflowError for
    well-formed numbers too long to be any sequence.
    """
    m = _SEQUENCE_PATTERN.fullmatch(raw)
    if not m:
        raise ValueError(f"Not a base-10 non-negative integer: {raw!r}")
    digits = m.group(1).lstrip("0") or "0"
    if len(digits) > _MAX_DIGITS:
        raise OverflowError(f"Sequence too large: {raw!r}")
    return int(digits)
