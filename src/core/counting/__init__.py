"""Streamed counting of bytes, lines, words and characters."""

from .counter import StreamCounter
from .reducers import Reducer, char_reducer, fold, tally_reducer
from .stream import iter_file_chunks, open_for_read, stream_of

__all__ = [
    "StreamCounter",
    "Reducer",
    "char_reducer",
    "fold",
    "tally_reducer",
    "iter_file_chunks",
    "open_for_read",
    "stream_of",
]
