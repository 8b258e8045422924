"""
masterpw - Templates and Character Classes

Static tables of the Master Password algorithm:

    CHARACTER_CLASSES:  symbol -> ordered alphabet
    TEMPLATES:          password type code -> PasswordType(templates, description)

Both tables are read-only (MappingProxyType over tuples). Ordering of the
alphabets and of the template tuples is part of the algorithm: the seed
bytes index into them with a modulus, so any change here changes every
derived password.
"""

from types import MappingProxyType
from typing import Mapping, NamedTuple, Tuple

from .exceptions import UnknownPasswordType


# =============================================================================
# Character Classes
# =============================================================================

CHARACTER_CLASSES: Mapping[str, str] = MappingProxyType({
    'V': "AEIOU",
    'C': "BCDFGHJKLMNPQRSTVWXYZ",
    'A': "AEIOUBCDFGHJKLMNPQRSTVWXYZ",
    'v': "aeiou",
    'c': "bcdfghjklmnpqrstvwxyz",
    'a': "AEIOUaeiouBCDFGHJKLMNPQRSTVWXYZbcdfghjklmnpqrstvwxyz",
    'n': "0123456789",
    'o': "@&%?,=[]_:-+*$#!'^~;()/.",
    'x': "AEIOUaeiouBCDFGHJKLMNPQRSTVWXYZbcdfghjklmnpqrstvwxyz0123456789!@#$%^&*()",
})

# Template positions holding this character are copied to the output as-is
LITERAL_SPACE = ' '


# =============================================================================
# Template Catalog
# =============================================================================

class PasswordType(NamedTuple):
    """One catalog entry: candidate templates plus a human description."""
    templates: Tuple[str, ...]
    description: str


TEMPLATES: Mapping[str, PasswordType] = MappingProxyType({
    'x': PasswordType(
        ("anoxxxxxxxxxxxxxxxxx", "axxxxxxxxxxxxxxxxxno"),
        "20 characters, contains symbols",
    ),
    'l': PasswordType(
        ("CvcvnoCvcvCvcv", "CvcvCvcvnoCvcv", "CvcvCvcvCvcvno", "CvccnoCvcvCvcv",
         "CvccCvcvnoCvcv", "CvccCvcvCvcvno", "CvcvnoCvccCvcv", "CvcvCvccnoCvcv",
         "CvcvCvccCvcvno", "CvcvnoCvcvCvcc", "CvcvCvcvnoCvcc", "CvcvCvcvCvccno",
         "CvccnoCvccCvcv", "CvccCvccnoCvcv", "CvccCvccCvcvno", "CvcvnoCvccCvcc",
         "CvcvCvccnoCvcc", "CvcvCvccCvccno", "CvccnoCvcvCvcc", "CvccCvcvnoCvcc",
         "CvccCvcvCvccno"),
        "Copy-friendly, 14 characters, symbols",
    ),
    'm': PasswordType(
        ("CvcnoCvc", "CvcCvcno"),
        "Copy-friendly, 8 characters, symbols",
    ),
    's': PasswordType(
        ("Cvcn",),
        "Copy-friendly, 4 characters, no symbols",
    ),
    'b': PasswordType(
        ("aaanaaan", "aannaaan", "aaannaaa"),
        "8 characters, no symbols",
    ),
    'i': PasswordType(
        ("nnnn",),
        "4 numbers",
    ),
    'n': PasswordType(
        ("cvccvcvcv",),
        "9 letter name",
    ),
    'p': PasswordType(
        ("cvcc cvc cvccvcv cvc", "cvc cvccvcvcv cvcv", "cv cvccv cvc cvcvccv"),
        "20 character sentence",
    ),
})

DEFAULT_PASSWORD_TYPE = 'l'


def get_password_type(code: str) -> PasswordType:
    """
    Look up a catalog entry by its code.

    Raises:
        UnknownPasswordType: If code is not one of the catalog keys
    """
    try:
        return TEMPLATES[code]
    except (KeyError, TypeError):
        raise UnknownPasswordType(code) from None


def password_types() -> Mapping[str, str]:
    """Return a read-only mapping of password type code -> description."""
    return MappingProxyType({code: entry.description for code, entry in TEMPLATES.items()})
