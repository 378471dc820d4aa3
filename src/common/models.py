"""Data models shared across the CLI, counting core, and config loader."""
from __future__ import annotations

import codecs
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Dict, Optional, Sequence

FileChunk = bytes


class CountMode(str, Enum):
    BYTES = "bytes"
    LINES = "lines"
    WORDS = "words"
    CHARS = "chars"


class CharMode(str, Enum):
    """How character counting interprets the byte stream."""

    UTF8 = "utf-8"  # decoded Unicode code points
    PRINTABLE = "printable"  # raw bytes in [32, 126]


class Strategy(str, Enum):
    PER_METRIC = "per-metric"
    SINGLE_PASS = "single-pass"


DEFAULT_MODES: tuple[CountMode, ...] = (CountMode.LINES, CountMode.WORDS, CountMode.BYTES)


# ---------------------------------------------------------------------------
# Accumulators threaded through a single counting pass


@dataclass(frozen=True, slots=True)
class ByteState:
    count: int = 0


@dataclass(frozen=True, slots=True)
class LineState:
    count: int = 0


@dataclass(frozen=True, slots=True)
class WordState:
    count: int = 0
    in_word: bool = False


@dataclass(frozen=True, slots=True)
class PrintableState:
    count: int = 0


@dataclass(frozen=True, slots=True)
class Utf8State:
    """Decoded character count plus the decoder holding any split sequence."""

    decoder: codecs.IncrementalDecoder
    count: int = 0
    offset: int = 0


@dataclass(frozen=True, slots=True)
class TallyState:
    """All four accumulators advanced together for single-pass counting."""

    byte: ByteState
    line: LineState
    word: WordState
    char: PrintableState | Utf8State | None = None


# ---------------------------------------------------------------------------
# Settings


@dataclass(slots=True)
class GlobalSettings:
    """Settings shared by every profile."""

    char_mode: CharMode = CharMode.UTF8
    error_policy: str = "replace"  # fail-fast | replace


@dataclass(slots=True)
class ProfileSettings:
    """Tunable reading behaviour for a named profile."""

    description: str
    chunk_size: int = 65_536
    strategy: Strategy = Strategy.PER_METRIC


@dataclass(slots=True)
class RuntimeConfig:
    """Resolved configuration for one invocation."""

    global_settings: GlobalSettings = field(default_factory=GlobalSettings)
    profile: ProfileSettings = field(default_factory=lambda: ProfileSettings(description="built-in defaults"))


# ---------------------------------------------------------------------------
# Results


@dataclass(slots=True)
class CountProgress:
    """Progress event emitted when a counting pass finishes."""

    file_path: Path
    mode: str
    chunks: int
    bytes_read: int
    elapsed_seconds: float
    phase: str = "count-complete"


@dataclass(slots=True)
class CountReport:
    """Counts gathered for one file, keyed by mode.

    ``file_path`` keeps the path exactly as the caller spelled it.
    """

    file_path: str
    counts: Dict[CountMode, int] = field(default_factory=dict)

    def render(self, modes: Optional[Sequence[CountMode]] = None) -> str:
        selected = modes if modes is not None else tuple(self.counts)
        parts = [str(self.counts[mode]) for mode in selected]
        parts.append(str(self.file_path))
        return " ".join(parts)
