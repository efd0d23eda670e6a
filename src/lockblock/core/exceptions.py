"""
Exceptions for the lockblock core module
Every failure surfaced by the split/merge pipeline derives from LockBlockError
"""


class LockBlockError(Exception):
    # general container for errors
    pass


class BlockIOError(LockBlockError):
    # raised when the underlying byte source fails; never retried
    pass


class EncryptionError(LockBlockError):
    # raised when the key service could not encrypt a block
    pass


class DecryptionError(LockBlockError):
    # raised on a wrong key, a tampered cachet or a malformed context
    pass


class ConfigurationError(LockBlockError):
    # raised on an invalid construction parameter (e.g. zero block size)
    pass


class KeyTreeError(LockBlockError):
    # raised by the bundled key service when derivation or AEAD fails
    pass
