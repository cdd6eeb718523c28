# scpikit

scpikit provides building blocks for instruments that speak SCPI, the IEEE 488.2 style command sets. It uses only the standard library.

## Modules

### `scpikit.fifo`

`Fifo(size)` is a bounded first-in, first-out queue.

- `add`, `remove` and `remove_last` put items in and take them out.
- `is_empty`, `is_full` and `clear` report on and reset the queue.
- `len()` and iteration work on it.
- `add` raises `FifoFullError` when the queue is full.
- `remove` and `remove_last` raise `FifoEmptyError` when the queue is empty.

### `scpikit.errors`

`ErrorQueue(size, on_error=None)` is the SCPI error/event queue.

- **`push(code, info=None)`** does the following:
  - queues a `ScpiError`;
  - sets the matching standard event status bits (`EsrBit`) in `esr`;
  - sets `StbBit.QMA` in `stb`;
  - calls `on_error(code)`.
- **Overflow:** when the queue is full, the newest entry is replaced by `-350` "Queue overflow", and `push` returns `False`.
- **`pop()`** returns the oldest error. If the queue is empty it returns a code-0 entry.
- **`clear()`** drops every queued error.
- **When the queue empties:** once the queue becomes empty while `QMA` is set, the bit is cleared and `on_error(0)` is called.

Related functions:

- `translate(code)` returns an error's message. It covers the standard codes plus two device codes (101 and 102). Any other code gives "Unknown error".
- `esr_bits_for(code)` returns the event status bits that a code sets.

### `scpikit.expression`

This module parses SCPI expression parameters.

- `numeric_list` and `numeric_list_entry` handle numeric lists such as `(1,3:5)`. Each entry is returned as a `NumericEntry`.
- `channel_list` and `channel_list_entry` handle channel lists such as `(@1!2:3!4,5)`. Each entry is returned as a `ChannelEntry`.
- The `*_entry` functions return `None` past the last entry.
- Malformed input raises `ExpressionError`. Its `code` is either -104 (not an expression) or -170 (parsing error).

### `scpikit.channels`

`expand_channel_list(expression, max_entries=12)` expands a channel list into `Channel(row, col)` values.

- Ranges are expanded row by row, counting down where a range runs backwards.
- One-dimensional channels get `col` 0.
- `ChannelListOverflow` is raised as soon as the expansion reaches `max_entries` channels.

`format_channels` renders channels as `row!col, ` items.

### `scpikit.xdr`

`XdrPacker` and `XdrUnpacker` read and write XDR items. Each raises `XdrError` when it cannot carry on.

The module also defines the VXI-11 message dataclasses:

- `DeviceError`
- `CreateLinkParms` and `CreateLinkResp`
- `DeviceWriteParms` and `DeviceWriteResp`
- `DeviceReadParms` and `DeviceReadResp`
- `DeviceReadStbResp`
- `DeviceGenericParms`
- `DeviceRemoteFunc`
- `DeviceEnableSrqParms`
- `DeviceLockParms`
- `DeviceDocmdParms` and `DeviceDocmdResp`
- `DeviceSrqParms`

`encode(message)` turns a message into bytes, and `decode(cls, data)` turns bytes back into a message.

### `scpikit.vxi11`

`Vxi11Device(execute, errors=None, buffer_size=256, max_recv_size=512)` answers VXI-11 core calls.

- **`device_write`** passes the written bytes to `execute`.
- **`write_output`** collects the handler's replies into a bounded buffer. Writing while a reply is still unread discards that reply and queues error -410.
- **`flush_output`** marks the collected reply as ready by setting `StbBit.MAV`.
- **`device_read`** hands the reply out. It sets the `Reason` flags in the response. When no reply is waiting it returns `CoreError.IO_TIMEOUT`.
- **`create_link`, `device_readstb` and `generic`** answer the remaining calls.

## Example

```python
from scpikit.errors import ErrorQueue, translate
from scpikit.channels import expand_channel_list, format_channels

queue = ErrorQueue(17, on_error=lambda code: print(code, translate(code)))
queue.push(-113)          # prints: -113 Undefined header
error = queue.pop()       # prints: 0 No error  (the queue is now empty)
print(error.code, error.message)   # -113 Undefined header

channels = expand_channel_list("(@1!1:2!2)", 12)
print(format_channels(channels))   # 1!1, 1!2, 2!1, 2!2,
```

## What it does not do

scpikit has no SCPI command parser or dispatcher. You supply the `execute` callable that acts on written bytes.

It also has no network layer:

- no TCP socket server;
- no ONC RPC or portmapper handling.

`Vxi11Device` and the XDR messages must be wired to a transport by the caller. There is no command-line program.

## Running the tests

```
pip install -e .[test]
pytest
```