"""
Symmetric transforms used by the envelope codec.

AEAD ciphers (AES-GCM, ChaCha20-Poly1305) return the ciphertext and the
authentication tag separately. AES-CBC is supported for interoperability
only: it pads with PKCS#7, produces an empty tag and ignores AAD.
"""
import logging
from typing import Tuple

from cryptography.exceptions import InvalidTag
from cryptography.hazmat.primitives import padding
from cryptography.hazmat.primitives.ciphers import Cipher, algorithms, modes
from cryptography.hazmat.primitives.ciphers.aead import AESGCM, ChaCha20Poly1305

from cryptor.ciphers import CipherSpec, TAG_SIZE
from cryptor.exceptions import AuthenticationFailed

logger = logging.getLogger(__name__)

AEAD_PRIMITIVES = {
    "aes-gcm": AESGCM,
    "chacha20-poly1305": ChaCha20Poly1305,
}


def _cipher_key(spec: CipherSpec, key: bytes) -> bytes:
    # Shorter ciphers take the leading bytes of the key, as OpenSSL does
    if len(key) < spec.key_size:
        raise ValueError(f"{spec.name} requires a {spec.key_size}-byte key")
    return bytes(key[:spec.key_size])


def encrypt_raw(spec: CipherSpec, key: bytes, iv: bytes, plaintext: bytes,
                aad: bytes = b"") -> Tuple[bytes, bytes]:
    """
    Encrypt plaintext under the given cipher.

    Args:
        spec: Cipher to use
        key: Derived key (at least ``spec.key_size`` bytes)
        iv: Nonce of ``spec.iv_size`` bytes, never reused with the same key
        plaintext: Message bytes to encrypt
        aad: Additional authenticated data (ignored by non-AEAD ciphers)

    Returns:
        Tuple[bytes, bytes]: (ciphertext, tag); the tag is empty for CBC

    Raises:
        ValueError: If the key or IV does not fit the cipher
    """
    if len(iv) != spec.iv_size:
        raise ValueError(f"{spec.name} requires a {spec.iv_size}-byte IV")
    cipher_key = _cipher_key(spec, key)

    if spec.aead:
        primitive = AEAD_PRIMITIVES[spec.family](cipher_key)
        sealed = primitive.encrypt(iv, plaintext, aad or None)
        return sealed[:-TAG_SIZE], sealed[-TAG_SIZE:]

    if aad:
        logger.debug("AAD is not authenticated by %s and was ignored", spec.name)

    padder = padding.PKCS7(algorithms.AES.block_size).padder()
    padded = padder.update(plaintext) + padder.finalize()
    encryptor = Cipher(algorithms.AES(cipher_key), modes.CBC(iv)).encryptor()
    return encryptor.update(padded) + encryptor.finalize(), b""


def decrypt_raw(spec: CipherSpec, key: bytes, iv: bytes, ciphertext: bytes,
                tag: bytes = b"", aad: bytes = b"") -> bytes:
    """
    Decrypt and authenticate ciphertext produced by :func:`encrypt_raw`.

    Plaintext is only released once the tag has been verified.

    Raises:
        AuthenticationFailed: If the tag, IV or padding does not check out
    """
    cipher_key = _cipher_key(spec, key)

    if spec.aead:
        if len(tag) != TAG_SIZE:
            raise AuthenticationFailed(f"{spec.name} tag must be {TAG_SIZE} bytes")
        if len(iv) != spec.iv_size:
            raise AuthenticationFailed(f"{spec.name} IV must be {spec.iv_size} bytes")
        primitive = AEAD_PRIMITIVES[spec.family](cipher_key)
        try:
            return primitive.decrypt(iv, ciphertext + tag, aad or None)
        except InvalidTag as e:
            raise AuthenticationFailed("Authentication tag mismatch") from e

    if len(iv) != spec.iv_size or not ciphertext or len(ciphertext) % 16:
        raise AuthenticationFailed(f"Invalid {spec.name} IV or ciphertext length")

    decryptor = Cipher(algorithms.AES(cipher_key), modes.CBC(iv)).decryptor()
    padded = decryptor.update(ciphertext) + decryptor.finalize()
    unpadder = padding.PKCS7(algorithms.AES.block_size).unpadder()
    try:
        return unpadder.update(padded) + unpadder.finalize()
    except ValueError as e:
        raise AuthenticationFailed("Invalid padding") from e
