"""XDR encoding of the VXI-11 core, abort and interrupt channel messages.

Every message is a dataclass whose fields carry their XDR kind in the
field metadata; ``encode`` and ``decode`` walk the fields in order.
All scalar items take four bytes on the wire, big-endian, and
variable-length opaque data and strings are padded to a multiple of four.
"""

from __future__ import annotations

import dataclasses
import struct
from dataclasses import dataclass, field
from typing import Any, TypeVar

_INT_MIN = -(2**31)
_INT_MAX = 2**31 - 1
_UINT_MAX = 2**32 - 1

M = TypeVar("M")


class XdrError(ValueError):
    """Raised when a value cannot be encoded or the data cannot be decoded."""


def _padding(length: int) -> int:
    return (4 - length % 4) % 4


class XdrPacker:
    """Builds an XDR byte stream item by item."""

    def __init__(self) -> None:
        self._parts: list[bytes] = []

    def pack_int(self, value: int) -> None:
        """Append a signed 32-bit integer."""
        if not _INT_MIN <= value <= _INT_MAX:
            raise XdrError(f"{value} does not fit a signed 32-bit integer")
        self._parts.append(struct.pack(">i", value))

    def pack_uint(self, value: int) -> None:
        """Append an unsigned 32-bit integer."""
        if not 0 <= value <= _UINT_MAX:
            raise XdrError(f"{value} does not fit an unsigned 32-bit integer")
        self._parts.append(struct.pack(">I", value))

    def pack_bool(self, value: bool) -> None:
        """Append a boolean as 0 or 1."""
        self._parts.append(struct.pack(">i", 1 if value else 0))

    def pack_char(self, value: int) -> None:
        """Append one character code (-128..255), sign-extended to four bytes."""
        if not -128 <= value <= 255:
            raise XdrError(f"{value} is not a character code")
        self.pack_int(value - 256 if value > 127 else value)

    def pack_bytes(self, data: bytes, max_length: int | None = None) -> None:
        """Append variable-length opaque data with its length and padding."""
        data = bytes(data)
        if max_length is not None and len(data) > max_length:
            raise XdrError(f"{len(data)} bytes exceed the limit of {max_length}")
        self.pack_uint(len(data))
        self._parts.append(data + b"\x00" * _padding(len(data)))

    def pack_string(self, text: str, max_length: int | None = None) -> None:
        """Append a string, one byte per character."""
        try:
            raw = text.encode("latin-1")
        except UnicodeEncodeError as exc:
            raise XdrError(f"string {text!r} is not byte-encodable") from exc
        self.pack_bytes(raw, max_length)

    def getvalue(self) -> bytes:
        """Return everything packed so far."""
        return b"".join(self._parts)


class XdrUnpacker:
    """Reads items back from an XDR byte stream."""

    def __init__(self, data: bytes) -> None:
        self._data = bytes(data)
        self._pos = 0

    def _take(self, count: int) -> bytes:
        end = self._pos + count
        if end > len(self._data):
            raise XdrError(
                f"need {count} bytes at offset {self._pos}, "
                f"only {len(self._data) - self._pos} left"
            )
        chunk = self._data[self._pos:end]
        self._pos = end
        return chunk

    def unpack_int(self) -> int:
        """Read a signed 32-bit integer."""
        return struct.unpack(">i", self._take(4))[0]

    def unpack_uint(self) -> int:
        """Read an unsigned 32-bit integer."""
        return struct.unpack(">I", self._take(4))[0]

    def unpack_bool(self) -> bool:
        """Read a boolean; any non-zero value is true."""
        return self.unpack_int() != 0

    def unpack_char(self) -> int:
        """Read one character and return its byte value (0..255)."""
        value = self.unpack_int()
        if not -128 <= value <= 255:
            raise XdrError(f"{value} is not a character code")
        return value & 0xFF

    def unpack_bytes(self, max_length: int | None = None) -> bytes:
        """Read variable-length opaque data."""
        length = self.unpack_uint()
        if max_length is not None and length > max_length:
            raise XdrError(f"{length} bytes exceed the limit of {max_length}")
        data = self._take(length)
        self._take(_padding(length))
        return data

    def unpack_string(self, max_length: int | None = None) -> str:
        """Read a string, one character per byte."""
        return self.unpack_bytes(max_length).decode("latin-1")

    def done(self) -> None:
        """Raise XdrError if any data is left unread."""
        if self._pos != len(self._data):
            raise XdrError(f"{len(self._data) - self._pos} bytes left unread")


def _xdr(kind: str, default: Any = 0, max_length: int | None = None) -> Any:
    return field(default=default, metadata={"xdr": kind, "max": max_length})


def _pack_field(packer: XdrPacker, kind: str, value: Any, max_length: int | None) -> None:
    if kind == "int":
        packer.pack_int(value)
    elif kind == "uint":
        packer.pack_uint(value)
    elif kind == "ushort":
        if not 0 <= value <= 0xFFFF:
            raise XdrError(f"{value} does not fit an unsigned short")
        packer.pack_uint(value)
    elif kind == "uchar":
        if not 0 <= value <= 0xFF:
            raise XdrError(f"{value} does not fit an unsigned char")
        packer.pack_uint(value)
    elif kind == "bool":
        packer.pack_bool(value)
    elif kind == "char":
        packer.pack_char(value)
    elif kind == "bytes":
        packer.pack_bytes(value, max_length)
    elif kind == "string":
        packer.pack_string(value, max_length)
    else:
        raise XdrError(f"unknown field kind {kind!r}")


def _unpack_field(unpacker: XdrUnpacker, kind: str, max_length: int | None) -> Any:
    if kind == "int":
        return unpacker.unpack_int()
    if kind == "uint":
        return unpacker.unpack_uint()
    if kind in ("ushort", "uchar"):
        value = unpacker.unpack_uint()
        limit = 0xFFFF if kind == "ushort" else 0xFF
        if value > limit:
            raise XdrError(f"{value} does not fit an unsigned {kind[1:]}")
        return value
    if kind == "bool":
        return unpacker.unpack_bool()
    if kind == "char":
        return unpacker.unpack_char()
    if kind == "bytes":
        return unpacker.unpack_bytes(max_length)
    if kind == "string":
        return unpacker.unpack_string(max_length)
    raise XdrError(f"unknown field kind {kind!r}")


def _xdr_fields(cls: type) -> tuple[dataclasses.Field, ...]:
    if not dataclasses.is_dataclass(cls):
        raise TypeError(f"{cls!r} is not an XDR message type")
    fields = tuple(f for f in dataclasses.fields(cls) if "xdr" in f.metadata)
    if not fields:
        raise TypeError(f"{cls!r} has no XDR fields")
    return fields


def encode(message: Any) -> bytes:
    """Encode a message dataclass instance to XDR bytes."""
    packer = XdrPacker()
    for f in _xdr_fields(type(message)):
        _pack_field(packer, f.metadata["xdr"], getattr(message, f.name), f.metadata["max"])
    return packer.getvalue()


def decode(cls: type[M], data: bytes) -> M:
    """Decode XDR bytes into an instance of the message type ``cls``."""
    unpacker = XdrUnpacker(data)
    values = {
        f.name: _unpack_field(unpacker, f.metadata["xdr"], f.metadata["max"])
        for f in _xdr_fields(cls)
    }
    unpacker.done()
    return cls(**values)


@dataclass
class DeviceError:
    error: int = _xdr("int")


@dataclass
class CreateLinkParms:
    client_id: int = _xdr("int")
    lock_device: bool = _xdr("bool", False)
    lock_timeout: int = _xdr("uint")
    device: str = _xdr("string", "")


@dataclass
class CreateLinkResp:
    error: int = _xdr("int")
    lid: int = _xdr("int")
    abort_port: int = _xdr("ushort")
    max_recv_size: int = _xdr("uint")


@dataclass
class DeviceWriteParms:
    lid: int = _xdr("int")
    io_timeout: int = _xdr("uint")
    lock_timeout: int = _xdr("uint")
    flags: int = _xdr("int")
    data: bytes = _xdr("bytes", b"")


@dataclass
class DeviceWriteResp:
    error: int = _xdr("int")
    size: int = _xdr("uint")


@dataclass
class DeviceReadParms:
    lid: int = _xdr("int")
    request_size: int = _xdr("uint")
    io_timeout: int = _xdr("uint")
    lock_timeout: int = _xdr("uint")
    flags: int = _xdr("int")
    term_char: int = _xdr("char")


@dataclass
class DeviceReadResp:
    error: int = _xdr("int")
    reason: int = _xdr("int")
    data: bytes = _xdr("bytes", b"")


@dataclass
class DeviceReadStbResp:
    error: int = _xdr("int")
    stb: int = _xdr("uchar")


@dataclass
class DeviceGenericParms:
    lid: int = _xdr("int")
    flags: int = _xdr("int")
    lock_timeout: int = _xdr("uint")
    io_timeout: int = _xdr("uint")


@dataclass
class DeviceRemoteFunc:
    host_addr: int = _xdr("uint")
    host_port: int = _xdr("uint")
    prog_num: int = _xdr("uint")
    prog_vers: int = _xdr("uint")
    prog_family: int = _xdr("int")


@dataclass
class DeviceEnableSrqParms:
    lid: int = _xdr("int")
    enable: bool = _xdr("bool", False)
    handle: bytes = _xdr("bytes", b"", 40)


@dataclass
class DeviceLockParms:
    lid: int = _xdr("int")
    flags: int = _xdr("int")
    lock_timeout: int = _xdr("uint")


@dataclass
class DeviceDocmdParms:
    lid: int = _xdr("int")
    flags: int = _xdr("int")
    io_timeout: int = _xdr("uint")
    lock_timeout: int = _xdr("uint")
    cmd: int = _xdr("int")
    network_order: bool = _xdr("bool", False)
    datasize: int = _xdr("int")
    data_in: bytes = _xdr("bytes", b"")


@dataclass
class DeviceDocmdResp:
    error: int = _xdr("int")
    data_out: bytes = _xdr("bytes", b"")


@dataclass
class DeviceSrqParms:
    handle: bytes = _xdr("bytes", b"")