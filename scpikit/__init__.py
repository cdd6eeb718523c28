"""SCPI error queue, expression parsing, channel-list expansion, VXI-11 XDR messages and device core."""

__version__ = "2.0.0"
__all__ = ["fifo", "errors", "expression", "channels", "xdr", "vxi11"]