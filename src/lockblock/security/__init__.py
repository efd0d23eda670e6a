"""Key service for lockblock: the root-key KeyTree and optional keyring storage.

The core (:mod:`lockblock.core`) only talks to the KeyService interface; this
package is the bundled implementation on top of `cryptography` and
`argon2-cffi`.
"""

from .keytree import KeyTree
from .keystore import save_keytree, load_keytree, delete_keytree

__all__ = [
    "KeyTree",
    "save_keytree",
    "load_keytree",
    "delete_keytree",
]
