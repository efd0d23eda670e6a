"""Optional OS keyring storage for KeyTree root keys.

Root keys are stored base64-encoded under a (service, account) pair using the
`keyring` package. Whatever backend keyring selects is used as-is; it is not
guaranteed to be hardware-backed.
"""
import base64
import binascii
from typing import Optional

try:
    import keyring
    from keyring.errors import PasswordDeleteError
except ImportError:
    keyring = None
    PasswordDeleteError = None

from lockblock.core.exceptions import ConfigurationError
from .keytree import KeyTree


DEFAULT_SERVICE = "lockblock"


def _require_keyring():
    if keyring is None:
        raise RuntimeError("keyring package is not available; install keyring to store root keys")


def save_keytree(tree: KeyTree, account: str, service: str = DEFAULT_SERVICE) -> None:
    """Persist the root key of ``tree`` under (service, account)."""
    _require_keyring()
    secret = base64.b64encode(tree.root_key).decode("ascii")
    keyring.set_password(service, account, secret)


def load_keytree(account: str, service: str = DEFAULT_SERVICE) -> Optional[KeyTree]:
    """Rebuild a KeyTree from the keyring; None when nothing is stored.

    A stored value that is not a valid root key raises ConfigurationError.
    """
    _require_keyring()
    secret = keyring.get_password(service, account)
    if secret is None:
        return None
    try:
        root = base64.b64decode(secret, validate=True)
    except (binascii.Error, ValueError) as e:
        raise ConfigurationError(f"stored root key for {account!r} is not valid base64") from e
    return KeyTree(root)


def delete_keytree(account: str, service: str = DEFAULT_SERVICE) -> None:
    """Remove the stored root key; a missing entry is not an error."""
    _require_keyring()
    try:
        keyring.delete_password(service, account)
    except PasswordDeleteError:
        pass
