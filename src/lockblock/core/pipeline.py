"""Convenience helpers composing the Splitter and Merger with file-like objects."""

from __future__ import annotations

import io
import logging
from typing import BinaryIO, Iterable, List

from .merge import Merger, PairLike
from .models import Pair
from .services import KeyService
from .split import Splitter
from .exceptions import BlockIOError, ConfigurationError


logger = logging.getLogger(__name__)

DEFAULT_BLOCK_SIZE = 64 * 1024
DEFAULT_READ_SIZE = 64 * 1024


def split_all(keys: KeyService, source: BinaryIO, block_size: int = DEFAULT_BLOCK_SIZE) -> List[Pair]:
    """Collect every pair of ``source``; the first error propagates."""
    splitter = Splitter(keys, source, block_size)
    pairs = list(splitter)
    logger.info("split %d bytes into %d blocks", splitter.bytes_read, len(pairs))
    return pairs


def _write_all(sink: BinaryIO, data: memoryview) -> None:
    # Raw sinks may accept fewer bytes than offered; None counts as all of them.
    offset = 0
    while offset < len(data):
        written = sink.write(data[offset:])
        if written is None:
            return
        if written <= 0:
            raise BlockIOError(f"sink accepted no bytes after {offset} of {len(data)}")
        offset += written


def merge_into(
    keys: KeyService,
    pairs: Iterable[PairLike],
    sink: BinaryIO,
    read_size: int = DEFAULT_READ_SIZE,
) -> int:
    """Decrypt ``pairs`` into ``sink`` and return the number of bytes written."""
    if read_size <= 0:
        raise ConfigurationError(f"read_size must be positive, got {read_size!r}")

    merger = Merger(keys, pairs)
    buf = bytearray(read_size)
    view = memoryview(buf)
    total = 0
    while True:
        n = merger.readinto(view)
        if not n:
            break
        _write_all(sink, view[:n])
        total += n
    logger.info("merged %d blocks into %d bytes", merger.blocks_read, total)
    return total


def split_bytes(keys: KeyService, data: bytes, block_size: int = DEFAULT_BLOCK_SIZE) -> List[Pair]:
    return split_all(keys, io.BytesIO(data), block_size)


def merge_bytes(keys: KeyService, pairs: Iterable[PairLike]) -> bytes:
    out = io.BytesIO()
    merge_into(keys, pairs, out)
    return out.getvalue()
