"""StreamCounter: counts bytes, lines, words or characters of one file."""
from __future__ import annotations

import os
import time
from pathlib import Path
from typing import Any, Callable, Dict, Iterator, Optional, Sequence

from common.config import error_mode_from_policy
from common.models import CountMode, CountProgress, CountReport, FileChunk, RuntimeConfig, Strategy
from common.progress import ProgressLogger
from .reducers import BYTES_REDUCER, LINES_REDUCER, WORDS_REDUCER, Reducer, char_reducer, fold, tally_reducer
from .stream import PathLike, open_for_read, stream_of

ProgressCallback = Optional[Callable[[CountProgress], None]]


class StreamCounter:
    """Runs counting passes over a file, one fresh stream per pass."""

    def __init__(
        self,
        config: Optional[RuntimeConfig] = None,
        *,
        progress_log: Optional[Path] = None,
        progress_callback: ProgressCallback = None,
    ) -> None:
        self.config = config or RuntimeConfig()
        self.chunk_size = self.config.profile.chunk_size
        self.char_mode = self.config.global_settings.char_mode
        self.errors = error_mode_from_policy(self.config.global_settings.error_policy)
        self.progress_logger = ProgressLogger(progress_log) if progress_log else None
        self.progress_callback = progress_callback

    def count_bytes(self, path: PathLike) -> int:
        return self._run(path, BYTES_REDUCER)

    def count_lines(self, path: PathLike) -> int:
        return self._run(path, LINES_REDUCER)

    def count_words(self, path: PathLike) -> int:
        return self._run(path, WORDS_REDUCER)

    def count_chars(self, path: PathLike) -> int:
        reducer = char_reducer(self.char_mode, errors=self.errors, path=Path(path))
        return self._run(path, reducer)

    def count_all(self, path: PathLike, modes: Optional[Sequence[CountMode]] = None) -> Dict[CountMode, int]:
        """Every metric from a single pass over the file.

        Characters are only decoded when ``modes`` is omitted or includes
        ``CountMode.CHARS``.
        """

        chars = None
        if modes is None or CountMode.CHARS in modes:
            chars = char_reducer(self.char_mode, errors=self.errors, path=Path(path))
        return self._run(path, tally_reducer(chars))

    def report(self, path: PathLike, modes: Sequence[CountMode]) -> CountReport:
        """Gather ``modes`` for ``path`` using the configured strategy.

        ``per-metric`` reopens and rereads the file for each mode, in order.
        ``single-pass`` reads it once and selects the requested values.
        """

        result = CountReport(file_path=os.fspath(path))
        if self.config.profile.strategy is Strategy.SINGLE_PASS:
            counts = self.count_all(path, modes)
            result.counts = {mode: counts[mode] for mode in modes}
            return result

        dispatch = {
            CountMode.BYTES: self.count_bytes,
            CountMode.LINES: self.count_lines,
            CountMode.WORDS: self.count_words,
            CountMode.CHARS: self.count_chars,
        }
        for mode in modes:
            result.counts[mode] = dispatch[mode](path)
        return result

    # ------------------------------------------------------------------

    def _run(self, path: PathLike, reducer: Reducer[Any, Any]) -> Any:
        start = time.perf_counter()
        with open_for_read(path) as handle:
            tracker = _ChunkTracker(stream_of(handle, chunk_size=self.chunk_size, path=path))
            result = fold(reducer, tracker)
        self._emit_progress(
            CountProgress(
                file_path=Path(path),
                mode=reducer.mode.value if reducer.mode else "all",
                chunks=tracker.chunks,
                bytes_read=tracker.bytes_read,
                elapsed_seconds=time.perf_counter() - start,
            )
        )
        return result

    def _emit_progress(self, progress: CountProgress) -> None:
        if self.progress_callback:
            self.progress_callback(progress)
        if self.progress_logger:
            self.progress_logger.emit(progress)


class _ChunkTracker:
    """Passes chunks through while recording how many were seen."""

    def __init__(self, chunks: Iterator[FileChunk]) -> None:
        self._chunks = chunks
        self.chunks = 0
        self.bytes_read = 0

    def __iter__(self) -> Iterator[FileChunk]:
        for chunk in self._chunks:
            self.chunks += 1
            self.bytes_read += len(chunk)
            yield chunk
