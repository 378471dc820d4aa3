"""File access collaborator: open a path and stream it as byte chunks."""
from __future__ import annotations

import os
from pathlib import Path
from typing import BinaryIO, Iterator, Optional, Union

from common.errors import FileAccessError, StreamReadError
from common.models import FileChunk

PathLike = Union[str, "os.PathLike[str]"]

DEFAULT_CHUNK_SIZE = 65_536


def open_for_read(path: PathLike) -> BinaryIO:
    """Open ``path`` for binary reading or raise :class:`FileAccessError`."""

    target = Path(path)
    try:
        return target.open("rb")
    except OSError as exc:
        raise FileAccessError(target, exc) from exc


def stream_of(
    handle: BinaryIO,
    *,
    chunk_size: int = DEFAULT_CHUNK_SIZE,
    path: Optional[PathLike] = None,
) -> Iterator[FileChunk]:
    """Yield chunks from ``handle`` in file order until it is exhausted.

    The handle is closed once the generator finishes, fails, or is closed
    by its consumer. Read failures surface as :class:`StreamReadError`.
    """

    size = max(1, chunk_size)
    label = Path(path) if path is not None else Path(getattr(handle, "name", "<stream>"))
    bytes_read = 0
    try:
        while True:
            try:
                chunk = handle.read(size)
            except OSError as exc:
                raise StreamReadError(label, exc, bytes_read=bytes_read) from exc
            if not chunk:
                return
            bytes_read += len(chunk)
            yield chunk
    finally:
        handle.close()


def iter_file_chunks(path: PathLike, *, chunk_size: int = DEFAULT_CHUNK_SIZE) -> Iterator[FileChunk]:
    """Open ``path`` and stream its chunks; opening happens on first iteration."""

    handle = open_for_read(path)
    yield from stream_of(handle, chunk_size=chunk_size, path=path)
