"""Bit-level message encoding over SIGUSR1 (one) and SIGUSR2 (zero)."""

from __future__ import annotations

import logging
import os
import signal
import time
from dataclasses import dataclass, field
from typing import Iterable, Sequence

log = logging.getLogger(__name__)

EOT = 0x04
WAIT_TIME = 0.1
BITS_PER_CHAR = 8


class SigtalkError(Exception):
    """Raised when a message cannot be sent or parsed."""


def _byte_value(c: int | str | bytes) -> int:
    if isinstance(c, (str, bytes)):
        if len(c) != 1:
            raise ValueError("expected a single character")
        value = ord(c)
        if value > 0xFF:
            raise ValueError("character does not fit in one byte")
        return value
    return int(c) & 0xFF


def to_char(bits: Sequence[int]) -> int:
    """Turn eight bits, most significant first, into a byte value."""
    if len(bits) != BITS_PER_CHAR:
        raise ValueError(f"expected {BITS_PER_CHAR} bits, got {len(bits)}")
    value = 0
    for bit in bits:
        value = (value << 1) | (1 if bit else 0)
    return value


def to_binary(c: int | str | bytes) -> tuple[int, ...]:
    """Split one byte into eight bits, most significant first."""
    value = _byte_value(c)
    bits = tuple((value >> shift) & 1 for shift in range(BITS_PER_CHAR - 1, -1, -1))
    log.debug("%s", "".join(map(str, bits)))
    return bits


def send_char(pid: int, c: int | str | bytes, delay: float = WAIT_TIME) -> None:
    """Send one byte to ``pid`` as eight signals, pausing ``delay`` seconds after each."""
    for bit in to_binary(c):
        try:
            os.kill(pid, signal.SIGUSR1 if bit else signal.SIGUSR2)
        except OSError as exc:
            raise SigtalkError(f"cannot signal process {pid}: {exc}") from exc
        time.sleep(delay)


def _message_bytes(message: str | bytes | Iterable[int]) -> bytes:
    if isinstance(message, str):
        return message.encode("utf-8")
    return bytes(message)


def send_message(pid: int, message: str | bytes, delay: float = WAIT_TIME) -> None:
    """Send every byte of ``message`` followed by the end-of-transmission byte."""
    for byte in _message_bytes(message):
        send_char(pid, byte, delay)
    send_char(pid, EOT, delay)


@dataclass
class Session:
    """Bits and text collected from one sending process."""

    pid: int
    bits: list[int] = field(default_factory=list)
    buffer: bytearray = field(default_factory=bytearray)
    received: bool = False

    @property
    def message(self) -> str:
        return self.buffer.decode("utf-8", errors="replace")

    @property
    def length(self) -> int:
        return len(self.buffer)

    def push_bit(self, bit: int) -> str | None:
        """Add one bit; return the collected text once end-of-transmission arrives."""
        self.bits.append(1 if bit else 0)
        if len(self.bits) < BITS_PER_CHAR:
            return None
        value = to_char(self.bits)
        self.bits.clear()
        log.debug("byte %r from pid %d", value, self.pid)
        if value == EOT:
            self.received = True
            return self.message
        self.buffer.append(value)
        return None

    def reset(self) -> None:
        """Forget all collected bits and text."""
        self.bits.clear()
        self.buffer.clear()
        self.received = False