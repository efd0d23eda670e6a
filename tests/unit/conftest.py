"""Shared fixtures and fakes for the lockblock unit tests."""

import hashlib
import hmac

import pytest

from lockblock.core.models import Cachet
from lockblock.core.services import KeyService
from lockblock.security.keytree import KeyTree


class FakeKeyService(KeyService):
    """Deterministic, non-cryptographic key service for exercising the core."""

    def __init__(self, secret: bytes = b"fake-secret"):
        self.secret = secret
        self.encrypt_calls = 0
        self.decrypt_calls = 0

    def _pad(self, context: bytes, length: int) -> bytes:
        out = b""
        counter = 0
        while len(out) < length:
            out += hashlib.sha256(self.secret + context + counter.to_bytes(4, "big")).digest()
            counter += 1
        return out[:length]

    def _tag(self, context: bytes, data: bytes) -> bytes:
        return hmac.new(self.secret, context + data, hashlib.sha256).digest()[:4]

    def derive_and_encrypt(self, context, plaintext):
        self.encrypt_calls += 1
        pad = self._pad(context, len(plaintext))
        body = bytes(a ^ b for a, b in zip(plaintext, pad))
        return Cachet(nonce=b"\x00" * 12, ciphertext=body + self._tag(context, body))

    def derive_and_decrypt(self, context, cachet):
        self.decrypt_calls += 1
        body, tag = cachet.ciphertext[:-4], cachet.ciphertext[-4:]
        if not hmac.compare_digest(tag, self._tag(context, body)):
            raise ValueError("fake tag mismatch")
        pad = self._pad(context, len(body))
        return bytes(a ^ b for a, b in zip(body, pad))


class FailingKeyService(FakeKeyService):
    """Encrypts ``ok_blocks`` blocks, then fails on every call."""

    def __init__(self, ok_blocks: int = 0):
        super().__init__()
        self.ok_blocks = ok_blocks

    def derive_and_encrypt(self, context, plaintext):
        if self.encrypt_calls >= self.ok_blocks:
            self.encrypt_calls += 1
            raise RuntimeError("key service unavailable")
        return super().derive_and_encrypt(context, plaintext)


class ShortReadSource:
    """Byte source that never returns more than ``max_chunk`` bytes per read."""

    def __init__(self, data: bytes, max_chunk: int = 1):
        self.data = data
        self.pos = 0
        self.max_chunk = max_chunk
        self.reads = 0

    def read(self, n: int = -1) -> bytes:
        self.reads += 1
        if n < 0:
            n = len(self.data)
        n = min(n, self.max_chunk)
        chunk = self.data[self.pos:self.pos + n]
        self.pos += len(chunk)
        return chunk


class FailingSource:
    """Byte source that serves ``data`` then raises OSError."""

    def __init__(self, data: bytes = b""):
        self.data = data
        self.pos = 0

    def read(self, n: int = -1) -> bytes:
        if self.pos >= len(self.data):
            raise OSError("disk on fire")
        chunk = self.data[self.pos:self.pos + n]
        self.pos += len(chunk)
        return chunk


@pytest.fixture
def keytree():
    """Fresh KeyTree with a random root key."""
    return KeyTree.generate()


@pytest.fixture
def fake_keys():
    return FakeKeyService()
