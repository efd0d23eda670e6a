""" Utility for block hashing operations. """

import hashlib


CONTEXT_SIZE = 32  # sha256 digest length

def block_context(data: bytes) -> bytes:

    # Computes the context (raw SHA-256 digest) of a plaintext block.

    return hashlib.sha256(data).digest()


def context_hex(context) -> str:
    # Short printable form of a context, used in log lines; never raises.
    if isinstance(context, (bytes, bytearray, memoryview)):
        return bytes(context).hex()[:16]
    return repr(context)[:40]
