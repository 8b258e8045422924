"""
masterpw - Stateless Site Password Derivation

Derives site passwords with the Master Password algorithm
(https://masterpasswordapp.com/): the same user name, master password,
site name, counter and password type always give the same password, so
nothing ever has to be stored.

Components:
- templates.py: character classes and the password template catalog
- crypto.py: scrypt master key, HMAC-SHA256 site seed, template rendering
- session.py: caches one master key to derive many site passwords
- config.py: MPW_* environment defaults for the command line
- cli.py: command-line interface (argparse)

Usage:
    mpw -u "Robert Lee Mitchell" -t x twitter.com
    python -m masterpw.cli -c 2 github.com

    >>> from masterpw import derive_password
    >>> derive_password("user", "example.com", 1, "l", b"master password")
"""

from .crypto import DEFAULT_COUNTER, derive_password
from .exceptions import (
    KeyDerivationFailed,
    MasterPasswordError,
    SessionLocked,
    UnknownPasswordType,
)
from .session import MasterPasswordSession
from .templates import DEFAULT_PASSWORD_TYPE, password_types

__version__ = "1.0.0"

__all__ = [
    "DEFAULT_COUNTER",
    "DEFAULT_PASSWORD_TYPE",
    "derive_password",
    "password_types",
    "MasterPasswordSession",
    "MasterPasswordError",
    "UnknownPasswordType",
    "KeyDerivationFailed",
    "SessionLocked",
]
