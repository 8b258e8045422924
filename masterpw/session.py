"""
masterpw - Session (cached master key)

Stretching the master key is the slow part of every derivation, and it
depends only on (username, master password). A session stretches it once
and then derives any number of site passwords from the cached key.

The key only exists while the session is unlocked; lock() zeroes it.
Nothing is ever written to disk.
"""

import logging
from typing import Optional

from . import crypto
from .exceptions import SessionLocked
from .templates import DEFAULT_PASSWORD_TYPE, get_password_type

logger = logging.getLogger("masterpw")


class MasterPasswordSession:
    """
    Master key holder for one user.

    Usage:
        session = MasterPasswordSession("Robert Lee Mitchell")
        session.unlock("banana colored duckling")
        session.password("twitter.com")
        session.password("github.com", counter=2, password_type="x")
        session.lock()

        # or, locking automatically:
        with MasterPasswordSession(name).unlock(master_password) as session:
            ...
    """

    def __init__(self, username: crypto.Secret):
        """
        Args:
            username: User's full name (part of the master key salt)
        """
        self.username = username

        # Only present when unlocked
        self._master_key: Optional[bytearray] = None

    @property
    def unlocked(self) -> bool:
        return self._master_key is not None

    def unlock(self, master_password: crypto.Secret) -> "MasterPasswordSession":
        """
        Stretch the master password into the cached master key.

        Unlocking an unlocked session replaces (and wipes) the old key.

        Raises:
            KeyDerivationFailed: If scrypt fails; the session is left unchanged
        """
        key = bytearray(crypto.derive_master_key(self.username, master_password))
        self.lock()
        self._master_key = key
        logger.debug("Master key derived, session unlocked")
        return self

    def lock(self) -> None:
        """Wipe the master key from memory."""
        if self._master_key is not None:
            crypto.wipe(self._master_key)
            self._master_key = None
            logger.debug("Session locked")

    def password(self, site_name: crypto.Secret, counter: int = crypto.DEFAULT_COUNTER,
                 password_type: str = DEFAULT_PASSWORD_TYPE) -> str:
        """
        Derive the password for one site from the cached key.

        Raises:
            UnknownPasswordType: If password_type is not in the catalog
            SessionLocked: If the session is not unlocked
        """
        get_password_type(password_type)
        self._require_unlocked()
        logger.debug("Deriving type %r password, counter %d", password_type, counter)
        return crypto.site_password(self._master_key, site_name, counter, password_type)

    def _require_unlocked(self) -> None:
        if self._master_key is None:
            raise SessionLocked("Session is locked, call unlock() first")

    def __enter__(self) -> "MasterPasswordSession":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.lock()

    def __repr__(self) -> str:
        state = "unlocked" if self.unlocked else "locked"
        return f"<MasterPasswordSession {state}>"
