"""A small printf-style formatter with the conversions %c %s %p %d %i %u %x %X %%."""

from __future__ import annotations

import sys
from typing import Any

_UINT_MASK = 0xFFFFFFFF
_INT_MIN = -(2**31)
_INT_MAX = 2**31 - 1


def _as_int32(value: int) -> int:
    value = int(value) & _UINT_MASK
    return value - 2**32 if value > _INT_MAX else value


def format_int(value: int) -> str:
    """Render a signed 32-bit integer in decimal."""
    return str(_as_int32(value))


def format_unsigned(value: int) -> str:
    """Render a value as an unsigned 32-bit integer in decimal."""
    return str(int(value) & _UINT_MASK)


def format_hex(value: int, upper: bool = False) -> str:
    """Render a value as an unsigned 32-bit integer in hexadecimal."""
    text = format(int(value) & _UINT_MASK, "x")
    return text.upper() if upper else text


def format_pointer(value: int | None) -> str:
    """Render an address as ``0x...``; a null address becomes ``(nil)``."""
    if not value:
        return "(nil)"
    return "0x" + format(int(value), "x")


def _format_char(value: Any) -> str:
    if isinstance(value, str):
        if len(value) != 1:
            raise TypeError("%c requires a single character")
        return value
    return chr(int(value) & 0xFF)


def _format_str(value: Any) -> str:
    return "(null)" if value is None else str(value)


_CONVERSIONS = {
    "c": _format_char,
    "s": _format_str,
    "p": format_pointer,
    "d": format_int,
    "i": format_int,
    "u": format_unsigned,
    "x": lambda v: format_hex(v, False),
    "X": lambda v: format_hex(v, True),
}


def format_string(fmt: str, *args: Any) -> str:
    """Expand ``fmt`` with ``args``; unknown conversions produce nothing."""
    if fmt is None:
        raise ValueError("format must not be None")
    remaining = iter(args)
    parts: list[str] = []
    chars = iter(fmt)
    for ch in chars:
        if ch != "%":
            parts.append(ch)
            continue
        spec = next(chars, "")
        if spec == "%":
            parts.append("%")
            continue
        converter = _CONVERSIONS.get(spec)
        if converter is None:
            continue
        try:
            arg = next(remaining)
        except StopIteration:
            raise TypeError(f"not enough arguments for %{spec}") from None
        parts.append(converter(arg))
    return "".join(parts)


def ft_printf(fmt: str, *args: Any) -> int:
    """Format and write to standard output; return the number of characters written."""
    text = format_string(fmt, *args)
    sys.stdout.write(text)
    sys.stdout.flush()
    return len(text)