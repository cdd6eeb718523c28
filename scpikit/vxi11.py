"""A VXI-11 instrument endpoint that feeds an SCPI command handler.

The device collects the handler's output in a bounded buffer. The
buffer is released to the client by ``device_read`` once it has been
flushed, and the status byte's MAV bit says that a reply is waiting.
"""

from __future__ import annotations

from collections.abc import Callable
from enum import IntEnum, IntFlag
from typing import Any

from .errors import ErrorQueue, StbBit
from .xdr import (
    CreateLinkParms,
    CreateLinkResp,
    DeviceError,
    DeviceGenericParms,
    DeviceReadParms,
    DeviceReadResp,
    DeviceReadStbResp,
    DeviceWriteParms,
    DeviceWriteResp,
)

QUERY_INTERRUPTED = -410
DEFAULT_ERROR_QUEUE_SIZE = 17
DEFAULT_BUFFER_SIZE = 256
DEFAULT_MAX_RECV_SIZE = 512


class CoreError(IntEnum):
    """Error codes returned by the VXI-11 core channel."""

    NO_ERROR = 0
    SYNTAX_ERROR = 1
    DEVICE_NOT_ACCESSIBLE = 3
    INVALID_ID = 4
    PARAMETER_ERROR = 5
    CHANNEL_NOT_ESTABLISHED = 6
    OPERATION_NOT_SUPPORTED = 8
    OUT_OF_RESOURCES = 9
    DEVICE_LOCKED = 11
    NO_LOCK_HELD = 12
    IO_TIMEOUT = 15
    IO_ERROR = 17
    INVALID_ADDRESS = 21
    ABORT = 23
    CHANNEL_ALREADY_ESTABLISHED = 29


class Reason(IntFlag):
    """Why a device_read reply ended."""

    REQCNT = 1
    CHR = 2
    END = 4


class Vxi11Device:
    """Serves VXI-11 core calls on top of an SCPI command handler.

    ``execute`` receives the bytes of each device_write; the handler is
    expected to answer through ``write_output`` and ``flush_output``.
    """

    def __init__(
        self,
        execute: Callable[[bytes], Any],
        errors: ErrorQueue | None = None,
        buffer_size: int = DEFAULT_BUFFER_SIZE,
        max_recv_size: int = DEFAULT_MAX_RECV_SIZE,
    ) -> None:
        if buffer_size < 1:
            raise ValueError(f"buffer size must be at least 1, got {buffer_size}")
        self.execute = execute
        self.errors = errors if errors is not None else ErrorQueue(DEFAULT_ERROR_QUEUE_SIZE)
        self.buffer_size = buffer_size
        self.max_recv_size = max_recv_size
        self._output = bytearray()
        self._read_pos = 0

    @property
    def pending(self) -> bytes:
        """Output not yet handed to the client."""
        return bytes(self._output[self._read_pos:])

    def _reset_output(self) -> None:
        self._output.clear()
        self._read_pos = 0

    def write_output(self, data: bytes) -> int:
        """Append handler output; return how many bytes were kept.

        Writing while an earlier reply is still unread discards that
        reply and queues a "Query INTERRUPTED" error. Output beyond the
        buffer's capacity is dropped.
        """
        if self.errors.stb & StbBit.MAV:
            self.errors.stb &= ~StbBit.MAV
            self.errors.push(QUERY_INTERRUPTED)
            self._reset_output()
        room = max(0, self.buffer_size - 1 - len(self._output))
        kept = bytes(data[:room])
        self._output += kept
        return len(kept)

    def flush_output(self) -> None:
        """Mark the collected output as a complete reply."""
        self.errors.stb |= StbBit.MAV
        self._read_pos = 0

    def create_link(self, parms: CreateLinkParms, abort_port: int = 0) -> CreateLinkResp:
        """Open a link; every link gets id 0."""
        return CreateLinkResp(
            error=CoreError.NO_ERROR,
            lid=0,
            abort_port=abort_port,
            max_recv_size=self.max_recv_size,
        )

    def device_write(self, parms: DeviceWriteParms) -> DeviceWriteResp:
        """Pass the written bytes to the command handler."""
        self.execute(bytes(parms.data))
        return DeviceWriteResp(error=CoreError.NO_ERROR, size=len(parms.data))

    def device_read(self, parms: DeviceReadParms) -> DeviceReadResp:
        """Hand out up to ``request_size`` bytes of the waiting reply."""
        if not self.errors.stb & StbBit.MAV:
            return DeviceReadResp(error=CoreError.IO_TIMEOUT, reason=0, data=b"")
        available = len(self._output) - self._read_pos
        count = min(parms.request_size, available)
        data = bytes(self._output[self._read_pos:self._read_pos + count])
        self._read_pos += count
        reason = Reason.REQCNT if count == parms.request_size else Reason(0)
        if self._read_pos == len(self._output):
            self.errors.stb &= ~StbBit.MAV
            self._reset_output()
            reason |= Reason.END
        return DeviceReadResp(error=CoreError.NO_ERROR, reason=int(reason), data=data)

    def device_readstb(self, parms: DeviceGenericParms) -> DeviceReadStbResp:
        """Return the status byte."""
        return DeviceReadStbResp(error=CoreError.NO_ERROR, stb=int(self.errors.stb) & 0xFF)

    def generic(self, parms: Any = None) -> DeviceError:
        """Accept a call that needs no work (trigger, clear, lock, ...)."""
        return DeviceError(error=CoreError.NO_ERROR)