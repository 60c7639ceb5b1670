"""
Exceptions raised by the envelope codec.
"""


class CryptorError(Exception):
    """Base class for every error raised by this package."""


class MissingKey(CryptorError):
    """No secret could be resolved when constructing a codec."""


class UnsupportedCipher(CryptorError, ValueError):
    """The cipher name is unknown or has no usable IV length."""

    def __init__(self, cipher: str):
        self.cipher = cipher
        super().__init__(f"Unsupported cipher: {cipher!r}")


class EncryptionFailed(CryptorError):
    """The underlying provider failed while encrypting."""


class MalformedEnvelope(CryptorError):
    """The envelope text is not valid Base64/JSON or lacks required fields."""


class AuthenticationFailed(CryptorError):
    """The ciphertext did not authenticate under the key, IV and AAD."""


class KeyDisposed(CryptorError):
    """The codec was closed and its key has been wiped."""
