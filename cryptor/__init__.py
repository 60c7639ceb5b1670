"""
Authenticated-encryption envelopes keyed by an application secret.
Implements AES-GCM (and other named ciphers) using cryptography.
"""

from cryptor.codec import Cryptor, derive_key
from cryptor.ciphers import DEFAULT_CIPHER, SUPPORTED_CIPHERS, get_cipher, iv_length
from cryptor.envelope import Envelope
from cryptor.exceptions import (
    AuthenticationFailed,
    CryptorError,
    EncryptionFailed,
    KeyDisposed,
    MalformedEnvelope,
    MissingKey,
    UnsupportedCipher,
)

__version__ = "0.1.0"

__all__ = [
    'Cryptor',
    'Envelope',
    'derive_key',
    'get_cipher',
    'iv_length',
    'DEFAULT_CIPHER',
    'SUPPORTED_CIPHERS',
    'CryptorError',
    'MissingKey',
    'UnsupportedCipher',
    'EncryptionFailed',
    'MalformedEnvelope',
    'AuthenticationFailed',
    'KeyDisposed',
]
