"""Splitter: turns a pull-based byte source into a lazy sequence of pairs.

Each block of at most ``block_size`` bytes is hashed into its context and
encrypted by the key service under a key derived from that context. The
sequence is fused: once the source is exhausted, or once any error has been
raised, it stays exhausted.
"""

from __future__ import annotations

import logging
from typing import BinaryIO, Iterator, Optional

from .exceptions import BlockIOError, ConfigurationError, EncryptionError
from .hashing import block_context, context_hex
from .models import Pair
from .services import Hasher, KeyService


logger = logging.getLogger(__name__)


class Splitter:
    """Lazy iterator of :class:`Pair` over ``source``."""

    def __init__(
        self,
        keys: KeyService,
        source: BinaryIO,
        block_size: int,
        hasher: Hasher = block_context,
    ):
        invalid = isinstance(block_size, bool) or not isinstance(block_size, int)
        if invalid or block_size <= 0:
            raise ConfigurationError(f"block_size must be a positive integer, got {block_size!r}")
        self.keys = keys
        self.source = source
        self.block_size = block_size
        self.hasher = hasher
        self.blocks_read = 0
        self.bytes_read = 0
        self._exhausted = False

    @staticmethod
    def encrypt_block(keys: KeyService, data: bytes, hasher: Hasher = block_context) -> Pair:
        """Hash ``data`` and encrypt it under the key derived from that hash."""
        try:
            context = hasher(data)
        except Exception as e:
            raise EncryptionError("could not hash block") from e
        try:
            cachet = keys.derive_and_encrypt(context, data)
        except Exception as e:
            raise EncryptionError(f"could not encrypt block {context_hex(context)}") from e
        return Pair(context, cachet)

    def _read_block(self) -> bytes:
        # A short read is not end-of-data: keep reading until full or b"".
        buffer = bytearray()
        while len(buffer) < self.block_size:
            try:
                chunk = self.source.read(self.block_size - len(buffer))
            except (OSError, ValueError) as e:
                # ValueError: read on a closed file
                raise BlockIOError(f"source read failed: {e}") from e
            if not chunk:
                break
            buffer += chunk
        return bytes(buffer)

    def next_pair(self) -> Optional[Pair]:
        """Return the next pair, or ``None`` once the source is exhausted."""
        if self._exhausted:
            return None

        try:
            block = self._read_block()
            if not block:
                self._exhausted = True
                logger.debug("source exhausted after %d blocks", self.blocks_read)
                return None
            pair = self.encrypt_block(self.keys, block, self.hasher)
        except Exception as e:
            self._exhausted = True
            logger.warning("splitter stopped at block %d: %s", self.blocks_read, e)
            raise

        self.blocks_read += 1
        self.bytes_read += len(block)
        logger.debug("split block %d (%d bytes) %s", self.blocks_read, len(block), context_hex(pair.context))
        return pair

    @property
    def exhausted(self) -> bool:
        return self._exhausted

    def __iter__(self) -> Iterator[Pair]:
        return self

    def __next__(self) -> Pair:
        pair = self.next_pair()
        if pair is None:
            raise StopIteration
        return pair
