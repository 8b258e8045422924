"""
masterpw - Exceptions

Every error the derivation pipeline can report. The CLI maps these to
exit codes; nothing in the core prints them.
"""


class MasterPasswordError(Exception):
    """Base class for all masterpw errors."""


class UnknownPasswordType(MasterPasswordError, ValueError):
    """Password type code is not in the template catalog."""

    def __init__(self, password_type: str):
        self.password_type = password_type
        super().__init__(f"unknown password type: {password_type}")


class KeyDerivationFailed(MasterPasswordError):
    """The scrypt primitive rejected its parameters or could not run."""


class SessionLocked(MasterPasswordError):
    """A session was asked for a password without a master key."""
