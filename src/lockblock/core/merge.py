"""Merger: decrypts an ordered pair sequence back into one byte stream.

The Merger is an :class:`io.RawIOBase`, so it can be read directly, wrapped in
:class:`io.BufferedReader`, or handed to anything that expects a binary file.
Pairs are pulled from the iterable only when the current block is drained.
"""

from __future__ import annotations

import io
import logging
from typing import Iterable, Tuple, Union

from .exceptions import DecryptionError
from .hashing import context_hex
from .models import Cachet, Pair
from .services import KeyService


logger = logging.getLogger(__name__)

PairLike = Union[Pair, Tuple[bytes, Cachet]]


class Merger(io.RawIOBase):
    """Pull-based byte source over decrypted pairs."""

    def __init__(self, keys: KeyService, pairs: Iterable[PairLike]):
        super().__init__()
        self.keys = keys
        self._pairs = iter(pairs)
        self._current = b""
        self._cursor = 0
        self._exhausted = False
        self._failed = False
        self.blocks_read = 0

    @staticmethod
    def decrypt_one(keys: KeyService, context: bytes, cachet: Union[Cachet, bytes]) -> bytes:
        """Decrypt a single out-of-band pair without building a Merger."""
        try:
            return keys.derive_and_decrypt(context, cachet)
        except Exception as e:
            raise DecryptionError(f"could not decrypt block {context_hex(context)}") from e

    def readable(self) -> bool:
        return True

    def _pull(self) -> bool:
        # Load the next decrypted block; False once the pairs run out.
        try:
            pair = next(self._pairs, None)
        except Exception as e:
            # later reads raise instead of reporting end of stream
            self._failed = True
            self._current = b""
            logger.warning("pair stream failed at block %d: %s", self.blocks_read, e)
            raise
        if pair is None:
            self._exhausted = True
            logger.debug("pair stream exhausted after %d blocks", self.blocks_read)
            return False
        try:
            context, cachet = pair
        except (TypeError, ValueError) as e:
            self._failed = True
            self._current = b""
            raise DecryptionError(f"malformed pair at block {self.blocks_read}") from e
        try:
            self._current = self.decrypt_one(self.keys, context, cachet)
        except DecryptionError as e:
            self._failed = True
            self._current = b""
            logger.warning("merge failed at block %d: %s", self.blocks_read, e)
            raise
        self._cursor = 0
        self.blocks_read += 1
        return True

    def readinto(self, buffer) -> int:
        if self.closed:
            raise ValueError("I/O operation on closed merger")
        if self._failed:
            raise DecryptionError("merged stream already failed; it cannot be trusted")

        dest = memoryview(buffer).cast("B")
        written = 0
        while written < len(dest):
            if self._cursor == len(self._current):
                if self._exhausted or not self._pull():
                    break
                continue
            count = min(len(self._current) - self._cursor, len(dest) - written)
            dest[written:written + count] = self._current[self._cursor:self._cursor + count]
            self._cursor += count
            written += count
        return written

    @property
    def exhausted(self) -> bool:
        return self._exhausted and self._cursor == len(self._current)
