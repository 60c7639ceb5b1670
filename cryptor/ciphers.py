"""
Cipher registry for envelope encryption.
"""
from typing import NamedTuple

from cryptor.exceptions import UnsupportedCipher

DEFAULT_CIPHER = "aes-256-gcm"

# AEAD tag length used by every registered AEAD cipher
TAG_SIZE = 16


class CipherSpec(NamedTuple):
    name: str
    family: str
    key_size: int
    iv_size: int
    aead: bool


CIPHERS = {
    "aes-128-gcm": CipherSpec("aes-128-gcm", "aes-gcm", 16, 12, True),
    "aes-192-gcm": CipherSpec("aes-192-gcm", "aes-gcm", 24, 12, True),
    "aes-256-gcm": CipherSpec("aes-256-gcm", "aes-gcm", 32, 12, True),
    "chacha20-poly1305": CipherSpec("chacha20-poly1305", "chacha20-poly1305", 32, 12, True),
    "aes-128-cbc": CipherSpec("aes-128-cbc", "aes-cbc", 16, 16, False),
    "aes-192-cbc": CipherSpec("aes-192-cbc", "aes-cbc", 24, 16, False),
    "aes-256-cbc": CipherSpec("aes-256-cbc", "aes-cbc", 32, 16, False),
}

SUPPORTED_CIPHERS = set(CIPHERS.keys())


def get_cipher(name: str) -> CipherSpec:
    """Look up a cipher by name.

    Args:
        name (str): Cipher name, case-insensitive (e.g. ``AES-256-GCM``).

    Returns:
        CipherSpec: Key size, IV size and AEAD flag of the cipher.

    Raises:
        UnsupportedCipher: If the name is not registered or the cipher
            reports a non-positive IV length.
    """
    if not isinstance(name, str):
        raise UnsupportedCipher(repr(name))

    spec = CIPHERS.get(name.strip().lower())
    if spec is None or spec.iv_size <= 0:
        raise UnsupportedCipher(name)
    return spec


def iv_length(name: str) -> int:
    """Return the IV length in bytes for the named cipher."""
    return get_cipher(name).iv_size
