"""lockblock: content-addressed, chunk-level encryption for byte streams.

- :class:`Splitter` turns a byte source into ``(context, cachet)`` pairs
- :class:`Merger` turns an ordered pair iterable back into a byte source
- :class:`KeyTree` is the bundled key service (HKDF + AES-GCM)
"""

from .core.exceptions import (
    LockBlockError,
    BlockIOError,
    EncryptionError,
    DecryptionError,
    ConfigurationError,
    KeyTreeError,
)
from .core.models import Cachet, Pair
from .core.services import KeyService
from .core.split import Splitter
from .core.merge import Merger
from .core.pipeline import split_all, merge_into, split_bytes, merge_bytes
from .security.keytree import KeyTree

__version__ = "0.1.0"

__all__ = [
    "LockBlockError",
    "BlockIOError",
    "EncryptionError",
    "DecryptionError",
    "ConfigurationError",
    "KeyTreeError",
    "Cachet",
    "Pair",
    "KeyService",
    "Splitter",
    "Merger",
    "split_all",
    "merge_into",
    "split_bytes",
    "merge_bytes",
    "KeyTree",
]
