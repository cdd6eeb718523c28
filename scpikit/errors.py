"""SCPI error queue, error texts and the status bits errors raise."""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from enum import IntFlag

from .fifo import Fifo, FifoFullError


class EsrBit(IntFlag):
    """Bits of the IEEE 488.2 standard event status register."""

    OPC = 0x01
    REQ = 0x02
    QER = 0x04
    DER = 0x08
    EER = 0x10
    CER = 0x20
    URQ = 0x40
    PON = 0x80


class StbBit(IntFlag):
    """Bits of the IEEE 488.2 status byte."""

    R01 = 0x01
    PRO = 0x02
    QMA = 0x04
    QES = 0x08
    MAV = 0x10
    ESR = 0x20
    SRQ = 0x40
    OPS = 0x80


NO_ERROR = 0
QUEUE_OVERFLOW = -350
WARMUP_NOT_FINISHED = 101
INTERLOCK_OPEN = 102

_STANDARD_ERRORS: dict[int, str] = {
    0: "No error",
    -100: "Command error",
    -101: "Invalid character",
    -102: "Syntax error",
    -103: "Invalid separator",
    -104: "Data type error",
    -105: "GET not allowed",
    -108: "Parameter not allowed",
    -109: "Missing parameter",
    -110: "Command header error",
    -111: "Header separator error",
    -112: "Program mnemonic too long",
    -113: "Undefined header",
    -114: "Header suffix out of range",
    -115: "Unexpected number of parameters",
    -120: "Numeric data error",
    -121: "Invalid character in number",
    -123: "Exponent too large",
    -124: "Too many digits",
    -128: "Numeric data not allowed",
    -130: "Suffix error",
    -131: "Invalid suffix",
    -134: "Suffix too long",
    -138: "Suffix not allowed",
    -140: "Character data error",
    -141: "Invalid character data",
    -144: "Character data too long",
    -148: "Character data not allowed",
    -150: "String data error",
    -151: "Invalid string data",
    -158: "String data not allowed",
    -160: "Block data error",
    -161: "Invalid block data",
    -168: "Block data not allowed",
    -170: "Expression error",
    -171: "Invalid expression",
    -178: "Expression data not allowed",
    -200: "Execution error",
    -220: "Parameter error",
    -221: "Settings conflict",
    -222: "Data out of range",
    -223: "Too much data",
    -224: "Illegal parameter value",
    -230: "Data corrupt or stale",
    -240: "Hardware error",
    -300: "Device specific error",
    -310: "System error",
    -350: "Queue overflow",
    -363: "Input buffer overrun",
    -400: "Query error",
    -410: "Query INTERRUPTED",
    -420: "Query UNTERMINATED",
    -430: "Query DEADLOCKED",
    -440: "Query UNTERMINATED after indefinite response",
}

_USER_ERRORS: dict[int, str] = {
    WARMUP_NOT_FINISHED: "The device has not finished the warm up process yet",
    INTERLOCK_OPEN: "Switching output to on is not allowed when interlock is open",
}

# (high, low, bit): codes with low <= code <= high set the bit.
_ESR_RANGES: tuple[tuple[int, int, EsrBit], ...] = (
    (-100, -199, EsrBit.CER),
    (-200, -299, EsrBit.EER),
    (-300, -399, EsrBit.DER),
    (32767, 1, EsrBit.DER),
    (-400, -499, EsrBit.QER),
    (-500, -599, EsrBit.PON),
    (-600, -699, EsrBit.URQ),
    (-700, -799, EsrBit.REQ),
    (-800, -899, EsrBit.OPC),
)


def esr_bits_for(code: int) -> EsrBit:
    """Return the event status bits that an error code sets."""
    bits = EsrBit(0)
    for high, low, bit in _ESR_RANGES:
        if low <= code <= high:
            bits |= bit
    return bits


def translate(code: int) -> str:
    """Return the text describing an error code."""
    return _STANDARD_ERRORS.get(code) or _USER_ERRORS.get(code) or "Unknown error"


@dataclass(frozen=True)
class ScpiError:
    """One queued error: its code and optional device-dependent text."""

    code: int
    info: str | None = None

    @property
    def message(self) -> str:
        return translate(self.code)


class ErrorQueue:
    """Error/event queue with the status bits it drives.

    ``on_error`` is called with each pushed code, and with 0 once the
    queue has been emptied after holding errors.
    """

    def __init__(self, size: int, on_error: Callable[[int], object] | None = None) -> None:
        self._fifo: Fifo[ScpiError] = Fifo(size)
        self.on_error = on_error
        self.esr = EsrBit(0)
        self.stb = StbBit(0)
        self.cmd_error = False

    def __len__(self) -> int:
        return len(self._fifo)

    def _emit(self, code: int) -> None:
        self.stb |= StbBit.QMA
        if self.on_error is not None:
            self.on_error(code)

    def _emit_empty(self) -> None:
        if len(self._fifo) == 0 and self.stb & StbBit.QMA:
            self.stb &= ~StbBit.QMA
            if self.on_error is not None:
                self.on_error(NO_ERROR)

    def _add(self, error: ScpiError) -> bool:
        try:
            self._fifo.add(error)
        except FifoFullError:
            self._fifo.remove_last()
            self._fifo.add(ScpiError(QUEUE_OVERFLOW))
            return False
        return True

    def push(self, code: int, info: str | None = None) -> bool:
        """Queue an error; return False if the queue overflowed."""
        stored = self._add(ScpiError(code, info))
        self.esr |= esr_bits_for(code)
        self._emit(code)
        if not stored:
            self._emit(QUEUE_OVERFLOW)
        self.cmd_error = True
        return stored

    def pop(self) -> ScpiError:
        """Remove the oldest error, or return a "no error" entry if empty."""
        error = ScpiError(NO_ERROR) if self._fifo.is_empty() else self._fifo.remove()
        self._emit_empty()
        return error

    def clear(self) -> None:
        """Drop every queued error."""
        self._fifo.clear()
        self._emit_empty()