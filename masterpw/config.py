"""
masterpw - Configuration

Defaults for the command line come from the environment:

    MPW_FULLNAME        user's full name
    MPW_SITE            site name
    MPW_SITECOUNTER     site counter (decimal, 0x.., 0o.. or 0b..)
    MPW_PWTYPE          password type code
    MPW_MASTERPASSWORD  master password (visible to other local users, avoid)

The algorithm parameters themselves are constants in masterpw.crypto and
cannot be configured.
"""

import os
from typing import Optional

from .crypto import DEFAULT_COUNTER
from .templates import DEFAULT_PASSWORD_TYPE

ENV_FULLNAME = "MPW_FULLNAME"
ENV_SITE = "MPW_SITE"
ENV_SITECOUNTER = "MPW_SITECOUNTER"
ENV_PWTYPE = "MPW_PWTYPE"
ENV_MASTERPASSWORD = "MPW_MASTERPASSWORD"


def _env(name: str) -> Optional[str]:
    """Unset and empty variables both count as missing."""
    return os.environ.get(name) or None


def default_username() -> Optional[str]:
    return _env(ENV_FULLNAME)


def default_site() -> Optional[str]:
    return _env(ENV_SITE)


def default_counter() -> int:
    """
    Site counter from MPW_SITECOUNTER.

    Base prefixes are honoured ("0x1f", "0o17"). Anything unparsable falls
    back to DEFAULT_COUNTER.
    """
    raw = _env(ENV_SITECOUNTER)
    if raw is None:
        return DEFAULT_COUNTER
    try:
        return int(raw.strip(), 0)
    except ValueError:
        return DEFAULT_COUNTER


def default_password_type() -> str:
    return _env(ENV_PWTYPE) or DEFAULT_PASSWORD_TYPE


def env_master_password() -> Optional[str]:
    return _env(ENV_MASTERPASSWORD)
