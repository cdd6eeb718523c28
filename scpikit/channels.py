"""Expansion of SCPI channel lists into individual row/column channels."""

from __future__ import annotations

from collections.abc import Iterable, Iterator
from dataclasses import dataclass

from .expression import ChannelEntry, channel_list

MAX_ROWS = 2
MAX_COLUMNS = 6
DEFAULT_MAX_ENTRIES = MAX_ROWS * MAX_COLUMNS


@dataclass(frozen=True)
class Channel:
    """One addressed channel. One-dimensional channels have ``col`` 0."""

    row: int
    col: int

    def __str__(self) -> str:
        return f"{self.row}!{self.col}"


class ChannelListOverflow(ValueError):
    """Raised when a channel list expands to too many channels."""

    def __init__(self, max_entries: int) -> None:
        super().__init__(f"channel list expands to {max_entries} or more channels")
        self.max_entries = max_entries


def _span(start: int, stop: int) -> range:
    step = -1 if start > stop else 1
    return range(start, stop + step, step)


def _expand_entry(entry: ChannelEntry) -> Iterator[Channel]:
    if not entry.is_range:
        if entry.dimensions == 1:
            yield Channel(entry.start[0], 0)
        elif entry.dimensions == 2:
            yield Channel(entry.start[0], entry.start[1])
        else:
            raise ValueError(
                f"channel has {entry.dimensions} dimensions, at most 2 are supported"
            )
        return
    for row in _span(entry.start[0], entry.stop[0]):
        if entry.dimensions == 2:
            for col in _span(entry.start[1], entry.stop[1]):
                yield Channel(row, col)
        elif entry.dimensions == 1:
            yield Channel(row, 0)


def expand_channel_list(
    expression: str, max_entries: int = DEFAULT_MAX_ENTRIES
) -> list[Channel]:
    """Expand a channel list such as ``(@1!1:3!2)`` into its channels.

    Ranges run row by row, each row across its columns, counting down
    where the range end is below its start. Raises ChannelListOverflow
    once ``max_entries`` channels would be held.
    """
    channels: list[Channel] = []
    for entry in channel_list(expression):
        for channel in _expand_entry(entry):
            channels.append(channel)
            if len(channels) >= max_entries:
                raise ChannelListOverflow(max_entries)
    return channels


def format_channels(channels: Iterable[Channel]) -> str:
    """Render channels as ``row!col, `` items, one after another."""
    return "".join(f"{channel}, " for channel in channels)