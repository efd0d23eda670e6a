"""
Base data models exchanged between the Splitter and the Merger
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import NamedTuple


NONCE_SIZE = 12  # 96-bit AEAD nonce


@dataclass(frozen=True)
class Cachet:
    """Authenticated ciphertext of one block.

    The serialized form is ``nonce || ciphertext`` (the tag is part of the
    ciphertext), which callers may persist or transport as an opaque blob.
    """

    nonce: bytes
    ciphertext: bytes

    def to_bytes(self) -> bytes:
        return self.nonce + self.ciphertext

    @classmethod
    def from_bytes(cls, blob: bytes) -> "Cachet":
        if len(blob) < NONCE_SIZE:
            raise ValueError("Cachet too short to contain nonce")
        blob = bytes(blob)
        return cls(nonce=blob[:NONCE_SIZE], ciphertext=blob[NONCE_SIZE:])

    def __len__(self) -> int:
        return len(self.nonce) + len(self.ciphertext)


class Pair(NamedTuple):
    # (context, cachet); order sensitive, carries no sequence number
    context: bytes
    cachet: Cachet
