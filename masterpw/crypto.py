"""
masterpw - Derivation Pipeline

All cryptographic operations of the Master Password algorithm live here.
Nothing is stored, printed or logged: every function is a pure computation
over its arguments.

Pipeline:
    1. (username, master password) -> scrypt -> Master Key (64 bytes)
    2. Master Key + (site name, counter) -> HMAC-SHA256 -> Site Seed (32 bytes)
    3. seed[0] picks a template of the requested password type
    4. seed[1..] pick one character per template position

Byte layouts (all integers are 4-byte unsigned big-endian):
    master salt = SCOPE | len(username) | username
    site info   = SCOPE | len(site_name) | site_name | counter

The layouts and cost parameters are fixed by the published algorithm;
changing any of them changes every password ever derived.
"""

import hmac
import hashlib
import struct
from typing import Optional, Union

from cryptography.exceptions import UnsupportedAlgorithm
from cryptography.hazmat.primitives.kdf.scrypt import Scrypt

from .exceptions import KeyDerivationFailed
from .templates import CHARACTER_CLASSES, LITERAL_SPACE, get_password_type


# =============================================================================
# Configuration
# =============================================================================

SCOPE = b"com.lyndir.masterpassword"

MASTER_KEY_SIZE = 64     # 512-bit master key
SITE_SEED_SIZE = 32      # HMAC-SHA256 output

# scrypt parameters (fixed by the algorithm, ~32 MB RAM per derivation)
SCRYPT_N = 32768
SCRYPT_R = 8
SCRYPT_P = 2

DEFAULT_COUNTER = 1
UINT32_MAX = 0xFFFFFFFF

Secret = Union[bytes, bytearray, memoryview, str]


# =============================================================================
# Encoding Helpers
# =============================================================================

def _encode(value: Secret) -> bytes:
    """Text is UTF-8 encoded; byte-like values pass through."""
    if isinstance(value, str):
        return value.encode('utf-8')
    return bytes(value)


def _uint32(value: int, name: str) -> bytes:
    if not 0 <= value <= UINT32_MAX:
        raise ValueError(f"{name} must be between 0 and {UINT32_MAX}, got {value}")
    return struct.pack("!I", value)


def _length_prefixed(data: bytes, name: str) -> bytes:
    return _uint32(len(data), f"length of {name}") + data


def _secret_buffer(value: Secret) -> bytearray:
    """Copy a secret into a mutable buffer that wipe() can clear."""
    if isinstance(value, str):
        return bytearray(value, 'utf-8')
    return bytearray(value)


def wipe(buffer: bytearray) -> None:
    """Overwrite a buffer with zeros (best effort, CPython may hold copies)."""
    for i in range(len(buffer)):
        buffer[i] = 0


# =============================================================================
# Key Derivation
# =============================================================================

def derive_master_key(username: Secret, master_password: Secret) -> bytes:
    """
    Stretch (username, master password) into the 64-byte master key.

    The master key depends on nothing else: it can be computed once and
    reused for every site of the same user (see masterpw.session).

    This is the only slow step of the pipeline (scrypt, ~32 MB of RAM).

    Args:
        username: User's full name (str is UTF-8 encoded)
        master_password: User's master password (not validated for emptiness)

    Returns:
        64-byte master key

    Raises:
        KeyDerivationFailed: If scrypt rejects its parameters or cannot run
        ValueError: If username is longer than 2**32 - 1 bytes
    """
    salt = SCOPE + _length_prefixed(_encode(username), "username")
    password = _secret_buffer(master_password)
    try:
        kdf = Scrypt(
            salt=salt,
            length=MASTER_KEY_SIZE,
            n=SCRYPT_N,
            r=SCRYPT_R,
            p=SCRYPT_P,
        )
        return kdf.derive(password)
    except (ValueError, MemoryError, UnsupportedAlgorithm) as e:
        raise KeyDerivationFailed(f"scrypt key derivation failed: {e}") from e
    finally:
        wipe(password)


def derive_site_seed(master_key: Union[bytes, bytearray], site_name: Secret,
                     counter: int = DEFAULT_COUNTER) -> bytes:
    """
    Derive the 32-byte seed for one (site name, counter) pair.

    Args:
        master_key: From derive_master_key()
        site_name: Site the password is for (str is UTF-8 encoded)
        counter: Unsigned 32-bit counter, bump it to rotate a site's password

    Returns:
        32-byte HMAC-SHA256(master_key, site info)
    """
    info = SCOPE + _length_prefixed(_encode(site_name), "site name") + _uint32(counter, "counter")
    return hmac.new(master_key, info, hashlib.sha256).digest()


# =============================================================================
# Templates
# =============================================================================

def select_template(password_type: str, seed: Union[bytes, bytearray]) -> str:
    """Pick templates[seed[0] % len(templates)] for the given password type."""
    templates = get_password_type(password_type).templates
    return templates[seed[0] % len(templates)]


def render_password(template: str, seed: Union[bytes, bytearray]) -> str:
    """
    Render a template into a password.

    Position i of the template consumes seed[i + 1]; seed[0] belongs to
    select_template(). Spaces are copied, every other symbol is replaced by
    CHARACTER_CLASSES[symbol][seed[i + 1] % len(class)].

    Raises:
        ValueError: If the template needs more bytes than the seed holds
        KeyError: If the template holds a symbol with no character class
    """
    if len(template) >= len(seed):
        raise ValueError(
            f"template of {len(template)} symbols needs more than {len(seed)} seed bytes"
        )

    password = []
    for i, symbol in enumerate(template):
        if symbol == LITERAL_SPACE:
            password.append(symbol)
            continue
        characters = CHARACTER_CLASSES[symbol]
        password.append(characters[seed[i + 1] % len(characters)])
    return ''.join(password)


# =============================================================================
# Password Derivation
# =============================================================================

def site_password(master_key: Union[bytes, bytearray], site_name: Secret,
                  counter: int, password_type: str) -> str:
    """
    Derive a site password from an already stretched master key.

    Returns:
        The rendered password

    Raises:
        UnknownPasswordType: If password_type is not in the catalog
    """
    get_password_type(password_type)

    seed = bytearray(derive_site_seed(master_key, site_name, counter))
    try:
        return render_password(select_template(password_type, seed), seed)
    finally:
        wipe(seed)


def derive_password(username: Secret, site_name: Secret, counter: Optional[int],
                    password_type: str, master_password: Secret) -> str:
    """
    Derive the password for one site from all five inputs.

    Same inputs always give the same password. The password type and the
    counter are validated before the master key is stretched, so invalid
    input fails fast.

    Args:
        username: User's full name
        site_name: Site the password is for
        counter: Site counter (None means DEFAULT_COUNTER)
        password_type: Catalog code, one of x, l, m, s, b, i, n, p
        master_password: User's master password

    Returns:
        The site password

    Raises:
        UnknownPasswordType: Unknown password_type (no key is derived)
        KeyDerivationFailed: scrypt failed
        ValueError: counter or a name length outside the 32-bit range
    """
    get_password_type(password_type)
    if counter is None:
        counter = DEFAULT_COUNTER
    _uint32(counter, "counter")

    master_key = bytearray(derive_master_key(username, master_password))
    try:
        return site_password(master_key, site_name, counter, password_type)
    finally:
        wipe(master_key)
