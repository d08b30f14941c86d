from __future__ import annotations

import re

U64_MAX = (1 << 64) - 1

_SIZE_RE = re.compile(r"([0-9]+)([kKmMgG]?)")

_MULTIPLIERS: dict[str, int] = {
    "": 1,
    "k": 1024,
    "m": 1024 * 1024,
    "g": 1024 * 1024 * 1024,
}


def parse_size(text: str) -> int:
    """
    Parse a byte count such as "4096", "32k", "8M" or "1g".

    The unit suffix is case-insensitive and binary (k=1024). Results must fit
    in an unsigned 64-bit integer.
    """
    if not isinstance(text, str):
        raise ValueError(f"size must be a string, got {type(text).__name__}")
    m = _SIZE_RE.fullmatch(text)
    if m is None:
        raise ValueError(f"invalid size: {text!r} (expected digits with optional k/m/g suffix)")
    num = int(m.group(1))
    if num > U64_MAX:
        raise ValueError(f"size too large: {text!r}")
    total = num * _MULTIPLIERS[m.group(2).lower()]
    if total > U64_MAX:
        raise ValueError(f"size too large: {text!r}")
    return total
