"""Key service backed by a single root secret.

Every block key is derived from the root key with HKDF-SHA256 using the
block's context as the ``info`` parameter, so the same context always yields
the same key. Blocks are sealed with AES-256-GCM and a fresh random nonce; the
context is bound as associated data, so a cachet only opens under the
context it was produced for.
"""

from __future__ import annotations

import hashlib
import os
from typing import Union

from argon2.exceptions import HashingError
from argon2.low_level import Type, hash_secret_raw
from cryptography.exceptions import InvalidTag
from cryptography.hazmat.primitives import hashes
from cryptography.hazmat.primitives.ciphers.aead import AESGCM
from cryptography.hazmat.primitives.kdf.hkdf import HKDF

from lockblock.core.exceptions import ConfigurationError, KeyTreeError
from lockblock.core.hashing import CONTEXT_SIZE
from lockblock.core.models import Cachet, NONCE_SIZE
from lockblock.core.services import KeyService


ROOT_KEY_SIZE = 32
BLOCK_KEY_INFO = b"lockblock-block-key:"
FINGERPRINT_INFO = b"lockblock-fingerprint"
MIN_SALT_SIZE = 16


def _hkdf(root: bytes, info: bytes) -> bytes:
    hkdf = HKDF(algorithm=hashes.SHA256(), length=32, salt=None, info=info)
    return hkdf.derive(root)


class KeyTree(KeyService):
    """Derives per-context AES-256-GCM keys from a 32-byte root key.

    Instances are immutable after construction and may be shared between
    threads; each call builds its own :class:`AESGCM` object.
    """

    def __init__(self, root_key: bytes):
        if len(root_key) != ROOT_KEY_SIZE:
            raise ConfigurationError(f"root key must be {ROOT_KEY_SIZE} bytes, got {len(root_key)}")
        self._root = bytes(root_key)

    @classmethod
    def generate(cls) -> "KeyTree":
        return cls(os.urandom(ROOT_KEY_SIZE))

    @staticmethod
    def generate_salt() -> bytes:
        """Random salt for :meth:`from_password`; store it beside the pairs."""
        return os.urandom(MIN_SALT_SIZE)

    @classmethod
    def from_password(
        cls,
        password: Union[bytes, str],
        salt: bytes,
        time_cost: int = 3,
        memory_cost: int = 65536,
        parallelism: int = 1,
    ) -> "KeyTree":
        """
        Build a tree whose root key is stretched from ``password`` with Argon2id.

        The same password, salt and costs always rebuild the same root, so a
        Merger can be keyed from the password that fed the Splitter. Invalid
        costs or a short salt raise ``ConfigurationError``.
        """
        if isinstance(password, str):
            password = password.encode("utf-8")
        if len(salt) < MIN_SALT_SIZE:
            raise ConfigurationError(f"salt must be at least {MIN_SALT_SIZE} bytes, got {len(salt)}")
        if time_cost < 1 or parallelism < 1:
            raise ConfigurationError("time_cost and parallelism must be at least 1")
        if memory_cost < 8 * parallelism:
            raise ConfigurationError(f"memory_cost must be at least {8 * parallelism} KiB")

        try:
            root = hash_secret_raw(
                secret=password,
                salt=bytes(salt),
                time_cost=time_cost,
                memory_cost=memory_cost,
                parallelism=parallelism,
                hash_len=ROOT_KEY_SIZE,
                type=Type.ID,
            )
        except HashingError as e:
            raise ConfigurationError(f"argon2id could not derive a root key: {e}") from e
        return cls(root)

    @property
    def root_key(self) -> bytes:
        return self._root

    def root_fingerprint(self) -> str:
        # safe to log: one-way and domain separated from block keys
        return hashlib.sha256(_hkdf(self._root, FINGERPRINT_INFO)).hexdigest()[:16]

    def derive(self, context: bytes) -> bytes:
        if len(context) != CONTEXT_SIZE:
            raise KeyTreeError(f"context must be {CONTEXT_SIZE} bytes, got {len(context)}")
        return _hkdf(self._root, BLOCK_KEY_INFO + bytes(context))

    def derive_and_encrypt(self, context: bytes, plaintext: bytes) -> Cachet:
        key = self.derive(context)
        nonce = os.urandom(NONCE_SIZE)
        ct = AESGCM(key).encrypt(nonce, bytes(plaintext), bytes(context))
        return Cachet(nonce=nonce, ciphertext=ct)

    def derive_and_decrypt(self, context: bytes, cachet: Union[Cachet, bytes]) -> bytes:
        if not isinstance(cachet, Cachet):
            try:
                cachet = Cachet.from_bytes(cachet)
            except ValueError as e:
                raise KeyTreeError(str(e)) from e
        if len(cachet.nonce) != NONCE_SIZE:
            raise KeyTreeError(f"nonce must be {NONCE_SIZE} bytes, got {len(cachet.nonce)}")

        key = self.derive(context)
        try:
            return AESGCM(key).decrypt(cachet.nonce, cachet.ciphertext, bytes(context))
        except InvalidTag as e:
            raise KeyTreeError("block authentication failed (wrong key or tampered cachet)") from e
