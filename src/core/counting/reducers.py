"""Pure per-chunk reducers for byte, line, word and character counts.

Each reducer is a triple ``initial() -> state``, ``step(state, chunk) ->
state`` and ``finish(state) -> result``. States are frozen dataclasses, so a
step never alters the state it was handed; folding the same chunks twice
gives the same answer. Every reducer carries whatever it needs across chunk
boundaries (the in-word flag, pending UTF-8 bytes), so splitting a stream at
any byte offset yields the same count as delivering it whole.
"""
from __future__ import annotations

import codecs
import functools
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Callable, Dict, Generic, Iterable, Optional, TypeVar

from common.errors import DecodeError
from common.models import (
    ByteState,
    CharMode,
    CountMode,
    FileChunk,
    LineState,
    PrintableState,
    TallyState,
    Utf8State,
    WordState,
)

S = TypeVar("S")
R = TypeVar("R")

LINE_FEED = 0x0A
WHITESPACE_BYTES = bytes(range(1, 33))
PRINTABLE_BYTES = bytes(range(32, 127))

# Every whitespace byte folds to a space so bytes.split() sees exactly [1, 32].
_WHITESPACE_TO_SPACE = bytes.maketrans(WHITESPACE_BYTES, b" " * len(WHITESPACE_BYTES))
_NON_PRINTABLE = bytes(b for b in range(256) if b not in PRINTABLE_BYTES)
_UTF8_DECODER = codecs.getincrementaldecoder("utf-8")


@dataclass(frozen=True)
class Reducer(Generic[S, R]):
    """Fold description for one counting mode."""

    mode: Optional[CountMode]
    initial: Callable[[], S]
    step: Callable[[S, FileChunk], S]
    finish: Callable[[S], R]


def fold(reducer: Reducer[S, R], chunks: Iterable[FileChunk]) -> R:
    """Apply ``reducer`` over ``chunks`` in order and return the final result."""

    state = functools.reduce(reducer.step, chunks, reducer.initial())
    return reducer.finish(state)


# ---------------------------------------------------------------------------
# Bytes and lines


def step_bytes(state: ByteState, chunk: FileChunk) -> ByteState:
    return ByteState(count=state.count + len(chunk))


def step_lines(state: LineState, chunk: FileChunk) -> LineState:
    return LineState(count=state.count + chunk.count(LINE_FEED))


# ---------------------------------------------------------------------------
# Words


def step_words(state: WordState, chunk: FileChunk) -> WordState:
    """Count word starts; a run that began in an earlier chunk is not recounted."""

    if not chunk:
        return state
    folded = chunk.translate(_WHITESPACE_TO_SPACE)
    runs = len(folded.split())
    if state.in_word and folded[0] != 0x20:
        runs -= 1
    return WordState(count=state.count + runs, in_word=folded[-1] != 0x20)


# ---------------------------------------------------------------------------
# Characters


def step_printable(state: PrintableState, chunk: FileChunk) -> PrintableState:
    return PrintableState(count=state.count + len(chunk.translate(None, _NON_PRINTABLE)))


def _utf8_initial(errors: str) -> Callable[[], Utf8State]:
    def initial() -> Utf8State:
        return Utf8State(decoder=_UTF8_DECODER(errors=errors))

    return initial


def _utf8_advance(state: Utf8State, chunk: FileChunk, *, final: bool, path: Optional[Path]) -> Utf8State:
    decoder = _UTF8_DECODER(errors=state.decoder.errors)
    decoder.setstate(state.decoder.getstate())
    pending = len(decoder.getstate()[0])
    try:
        text = decoder.decode(chunk, final=final)
    except UnicodeDecodeError as exc:
        raise DecodeError(path, state.offset - pending + exc.start, exc.reason) from exc
    return Utf8State(decoder=decoder, count=state.count + len(text), offset=state.offset + len(chunk))


def char_reducer(
    char_mode: CharMode = CharMode.UTF8,
    *,
    errors: str = "replace",
    path: Optional[Path] = None,
) -> Reducer[Any, int]:
    """Build the character reducer for the configured interpretation.

    ``utf-8`` counts decoded code points; a sequence split across chunks is
    held by the decoder until completed. Malformed input counts one U+FFFD per
    bad sequence under ``errors="replace"`` and raises :class:`DecodeError`
    under ``errors="strict"``. ``printable`` counts raw bytes in [32, 126].
    """

    if char_mode is CharMode.PRINTABLE:
        return Reducer(CountMode.CHARS, PrintableState, step_printable, _count_of)

    def step(state: Utf8State, chunk: FileChunk) -> Utf8State:
        return _utf8_advance(state, chunk, final=False, path=path)

    def finish(state: Utf8State) -> int:
        return _utf8_advance(state, b"", final=True, path=path).count

    return Reducer(CountMode.CHARS, _utf8_initial(errors), step, finish)


def _count_of(state: Any) -> int:
    return state.count


BYTES_REDUCER: Reducer[ByteState, int] = Reducer(CountMode.BYTES, ByteState, step_bytes, _count_of)
LINES_REDUCER: Reducer[LineState, int] = Reducer(CountMode.LINES, LineState, step_lines, _count_of)
WORDS_REDUCER: Reducer[WordState, int] = Reducer(CountMode.WORDS, WordState, step_words, _count_of)


# ---------------------------------------------------------------------------
# Single pass over all metrics


def tally_reducer(chars: Optional[Reducer[Any, int]] = None) -> Reducer[TallyState, Dict[CountMode, int]]:
    """Combine the counters so one pass over the stream yields every metric.

    Without ``chars`` no character state is kept and the result has no
    ``CountMode.CHARS`` entry, so undecodable input cannot fail a pass that
    never asked for characters.
    """

    def initial() -> TallyState:
        return TallyState(
            byte=ByteState(),
            line=LineState(),
            word=WordState(),
            char=chars.initial() if chars is not None else None,
        )

    def step(state: TallyState, chunk: FileChunk) -> TallyState:
        return TallyState(
            byte=step_bytes(state.byte, chunk),
            line=step_lines(state.line, chunk),
            word=step_words(state.word, chunk),
            char=chars.step(state.char, chunk) if chars is not None else None,
        )

    def finish(state: TallyState) -> Dict[CountMode, int]:
        counts = {
            CountMode.BYTES: state.byte.count,
            CountMode.LINES: state.line.count,
            CountMode.WORDS: state.word.count,
        }
        if chars is not None:
            counts[CountMode.CHARS] = chars.finish(state.char)
        return counts

    # Carries several modes, so it has no single mode of its own.
    return Reducer(None, initial, step, finish)
