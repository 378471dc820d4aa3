from __future__ import annotations

import pytest

from common.errors import DecodeError, ErrorCode
from common.models import CharMode, CountMode, WordState
from core.counting.reducers import (
    BYTES_REDUCER,
    LINES_REDUCER,
    WORDS_REDUCER,
    char_reducer,
    fold,
    step_words,
    tally_reducer,
)


def _every_split(data: bytes):
    """Yield the payload as two chunks at every offset, plus one byte per chunk."""

    for index in range(len(data) + 1):
        yield [data[:index], data[index:]]
    yield [data[i : i + 1] for i in range(len(data))]


def test_lines_count_line_feeds_only() -> None:
    assert fold(LINES_REDUCER, [b"a\nb\nc"]) == 2
    assert fold(LINES_REDUCER, [b"a\r\nb\r\n"]) == 2
    assert fold(LINES_REDUCER, [b"no newline"]) == 0


def test_words_treat_bytes_1_to_32_as_whitespace() -> None:
    assert fold(WORDS_REDUCER, [b"  hello   world  "]) == 2
    assert fold(WORDS_REDUCER, [b""]) == 0
    assert fold(WORDS_REDUCER, []) == 0
    assert fold(WORDS_REDUCER, [b"\x00abc"]) == 1
    assert fold(WORDS_REDUCER, [b"a\x1fb\x01c"]) == 3
    assert fold(WORDS_REDUCER, [b"\x00 \x00"]) == 2
    assert fold(WORDS_REDUCER, [b"caf\xc3\xa9\xa0bar"]) == 1


def test_word_step_leaves_previous_state_untouched() -> None:
    before = WordState()
    after = step_words(before, b"abc")
    assert before == WordState(count=0, in_word=False)
    assert after == WordState(count=1, in_word=True)
    assert step_words(after, b"") is after


@pytest.mark.parametrize("payload", [b"foo bar\nbaz\n", b"  hello   world  ", b"one\n\ntwo three\nfour"])
def test_chunk_boundaries_do_not_change_counts(payload: bytes) -> None:
    expected_words = fold(WORDS_REDUCER, [payload])
    expected_lines = fold(LINES_REDUCER, [payload])
    for chunks in _every_split(payload):
        assert fold(WORDS_REDUCER, chunks) == expected_words
        assert fold(LINES_REDUCER, chunks) == expected_lines
        assert fold(BYTES_REDUCER, chunks) == len(payload)


def test_utf8_chars_count_code_points_across_splits() -> None:
    payload = "héllo wörld €\U0001f600".encode("utf-8")
    reducer = char_reducer(CharMode.UTF8)
    for chunks in _every_split(payload):
        assert fold(reducer, chunks) == 14


def test_printable_chars_exclude_control_and_high_bytes() -> None:
    reducer = char_reducer(CharMode.PRINTABLE)
    assert fold(reducer, [b"hello"]) == 5
    assert fold(reducer, [b"a\x01b\x7fc\x80 ~\x1f\xff"]) == 5
    assert fold(reducer, [bytes(range(32))]) == 0
    assert fold(reducer, [bytes(range(127, 256))]) == 0
    assert fold(reducer, ["héllo".encode("utf-8")]) == 4


def test_ascii_input_agrees_under_both_interpretations() -> None:
    assert fold(char_reducer(CharMode.UTF8), [b"hel", b"lo"]) == 5
    assert fold(char_reducer(CharMode.PRINTABLE), [b"hel", b"lo"]) == 5


def test_malformed_utf8_counts_replacement_characters() -> None:
    reducer = char_reducer(CharMode.UTF8, errors="replace")
    assert fold(reducer, [b"ab\xffcd"]) == 5
    assert fold(reducer, [b"ab\xc3"]) == 3


def test_malformed_utf8_fails_fast_with_offset() -> None:
    reducer = char_reducer(CharMode.UTF8, errors="strict")
    with pytest.raises(DecodeError) as exc:
        fold(reducer, [b"ab", b"\xffcd"])
    assert exc.value.code == ErrorCode.DECODE_ERROR
    assert exc.value.offset == 2

    with pytest.raises(DecodeError) as exc:
        fold(reducer, [b"ab\xc3"])
    assert exc.value.offset == 2


def test_utf8_step_is_repeatable_from_the_same_state() -> None:
    reducer = char_reducer(CharMode.UTF8)
    state = reducer.step(reducer.initial(), b"\xc3")
    first = reducer.finish(reducer.step(state, b"\xa9x"))
    second = reducer.finish(reducer.step(state, b"\xa9x"))
    assert first == second == 2


def test_tally_matches_individual_reducers() -> None:
    payload = "foo bar\nbaz\né".encode("utf-8")
    reducer = tally_reducer(char_reducer(CharMode.UTF8))
    for chunks in _every_split(payload):
        assert fold(reducer, chunks) == {
            CountMode.BYTES: 14,
            CountMode.LINES: 2,
            CountMode.WORDS: 4,
            CountMode.CHARS: 13,
        }


def test_tally_without_chars_ignores_undecodable_bytes() -> None:
    reducer = tally_reducer()
    assert fold(reducer, [b"a\n\xff", b"\xfe\n"]) == {
        CountMode.BYTES: 5,
        CountMode.LINES: 2,
        CountMode.WORDS: 2,
    }
