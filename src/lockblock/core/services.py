"""Capability interfaces the core depends on.

The core never binds to a cryptographic library: it hashes through a plain
callable (see :mod:`lockblock.core.hashing`) and encrypts through a
:class:`KeyService`. The bundled implementation is
:class:`lockblock.security.keytree.KeyTree`; tests may plug in fakes.
"""

from __future__ import annotations

from typing import Callable, Union

from .models import Cachet


Hasher = Callable[[bytes], bytes]


class KeyService:
    """Derives per-context keys from a root secret and runs the AEAD.

    Implementations must be immutable for the duration of an operation so a
    Splitter and a Merger holding the same instance derive the same keys.
    """

    def derive_and_encrypt(self, context: bytes, plaintext: bytes) -> Cachet:
        raise NotImplementedError

    def derive_and_decrypt(self, context: bytes, cachet: Union[Cachet, bytes]) -> bytes:
        raise NotImplementedError
