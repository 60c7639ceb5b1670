"""
Authenticated envelope encryption keyed by an application secret.

The secret is hashed with SHA-256 into a 32-byte key once, at construction.
Each call to :meth:`Cryptor.encrypt` draws a fresh random IV and produces a
self-describing envelope token (see :mod:`cryptor.envelope`).
"""
import hashlib
import hmac
import logging
import secrets
from typing import Optional, Union

from cryptor.ciphers import DEFAULT_CIPHER, get_cipher
from cryptor.config import DEFAULT_ENV_VAR, resolve_secret
from cryptor.encryption import decrypt_raw, encrypt_raw
from cryptor.envelope import Envelope
from cryptor.exceptions import (
    AuthenticationFailed,
    EncryptionFailed,
    KeyDisposed,
    MalformedEnvelope,
    MissingKey,
    UnsupportedCipher,
)

logger = logging.getLogger(__name__)

BytesLike = Union[bytes, bytearray, str]


def derive_key(secret: BytesLike) -> bytes:
    """Derive the 32-byte key for a secret (SHA-256 digest)."""
    return hashlib.sha256(_to_bytes(secret, "secret")).digest()


def _to_bytes(data: BytesLike, name: str) -> bytes:
    if isinstance(data, str):
        return data.encode("utf-8")
    if isinstance(data, (bytes, bytearray, memoryview)):
        return bytes(data)
    raise TypeError(f"{name} must be bytes or str, not {type(data).__name__}")


class Cryptor:
    """
    Encrypt, decrypt and verify envelopes with a key derived from a secret.

    Args:
        key: The application secret. When omitted it is read from the
            ``env_var`` environment variable or a ``.env`` file.
        env_var: Variable consulted when ``key`` is not given.
        dotenv_path: Explicit ``.env`` file to read the secret from.

    Raises:
        MissingKey: If no non-empty secret can be resolved.

    The derived key lives in a mutable buffer that :meth:`close` overwrites
    with zeros. Use the codec as a context manager to scope the key::

        with Cryptor("my-secret-key") as cryptor:
            token = cryptor.encrypt(b"Hello World!")
    """

    def __init__(self, key: Optional[BytesLike] = None, *,
                 env_var: str = DEFAULT_ENV_VAR,
                 dotenv_path: Optional[str] = None):
        raw = key if key is not None else resolve_secret(env_var, dotenv_path)
        if raw is None or len(raw) == 0:
            raise MissingKey(f"Encryption key [{env_var}] not found in environment.")

        self._key = bytearray(derive_key(raw))

    @property
    def closed(self) -> bool:
        return self._key is None

    def _require_key(self) -> bytes:
        if self._key is None:
            raise KeyDisposed("Cryptor has been closed")
        return bytes(self._key)

    def encrypt_or_raise(self, plaintext: BytesLike, cipher: Optional[str] = None,
                         aad: BytesLike = b"") -> str:
        """
        Encrypt plaintext into an envelope token.

        Args:
            plaintext: Data to encrypt (``str`` is UTF-8 encoded)
            cipher: Cipher name, ``aes-256-gcm`` by default
            aad: Additional authenticated data, required again to decrypt

        Returns:
            str: The envelope token

        Raises:
            UnsupportedCipher: If the cipher is not supported
            EncryptionFailed: If the cryptographic provider fails
        """
        spec = get_cipher(DEFAULT_CIPHER if cipher is None else cipher)
        key = self._require_key()
        plaintext = _to_bytes(plaintext, "plaintext")
        aad = _to_bytes(aad, "aad")

        iv = secrets.token_bytes(spec.iv_size)
        try:
            value, tag = encrypt_raw(spec, key, iv, plaintext, aad)
        except Exception as e:
            raise EncryptionFailed(f"{spec.name} encryption failed") from e

        return Envelope(iv=iv, value=value, cipher=spec.name, tag=tag).encode()

    def encrypt(self, plaintext: BytesLike, cipher: Optional[str] = None,
                aad: BytesLike = b"") -> Optional[str]:
        """Encrypt plaintext; return the envelope token, or None if encryption failed."""
        try:
            return self.encrypt_or_raise(plaintext, cipher, aad)
        except EncryptionFailed as e:
            logger.error("%s: %s", e, e.__cause__)
            return None

    def decrypt_or_raise(self, envelope: str, aad: BytesLike = b"") -> bytes:
        """
        Decrypt an envelope token.

        Raises:
            MalformedEnvelope: If the token cannot be parsed
            UnsupportedCipher: If the envelope names an unknown cipher
            AuthenticationFailed: If the key, AAD, IV, ciphertext or tag
                does not authenticate
        """
        key = self._require_key()
        aad = _to_bytes(aad, "aad")
        parsed = Envelope.decode(envelope)
        spec = get_cipher(parsed.cipher)
        return decrypt_raw(spec, key, parsed.iv, parsed.value, parsed.tag, aad)

    def decrypt(self, envelope: str, aad: BytesLike = b"") -> Optional[bytes]:
        """Decrypt an envelope token; return the plaintext, or None on any failure."""
        try:
            return self.decrypt_or_raise(envelope, aad)
        except MalformedEnvelope as e:
            logger.debug("Rejected malformed envelope: %s", e)
        except UnsupportedCipher as e:
            logger.debug("Rejected envelope: %s", e)
        except AuthenticationFailed:
            logger.warning("Envelope failed authentication (tampered data, wrong key or wrong AAD)")
        return None

    def verify(self, plain: BytesLike, envelope: str, aad: BytesLike = b"") -> bool:
        """Check in constant time that the envelope decrypts to ``plain``."""
        data = self.decrypt(envelope, aad)
        return data is not None and hmac.compare_digest(data, _to_bytes(plain, "plain"))

    def close(self) -> None:
        """Overwrite the derived key with zeros and release it."""
        key = getattr(self, "_key", None)
        if key is not None:
            key[:] = bytes(len(key))
            self._key = None

    def __enter__(self) -> "Cryptor":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    def __del__(self):
        self.close()

    def __repr__(self) -> str:
        state = "closed" if self.closed else "key=<hidden>"
        return f"<{type(self).__name__} {state}>"

    def __reduce_ex__(self, protocol):
        raise TypeError(f"{type(self).__name__} holds key material and cannot be serialized")

    def __copy__(self):
        raise TypeError(f"{type(self).__name__} cannot be copied")

    def __deepcopy__(self, memo):
        raise TypeError(f"{type(self).__name__} cannot be copied")
