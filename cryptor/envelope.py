"""
Envelope wire format.

An envelope is the Base64 encoding of a compact JSON object whose four
fields are themselves Base64 encoded::

    base64({"iv":b64(iv),"value":b64(ciphertext),"cipher":b64(name),"tag":b64(tag)})
"""
import base64
import binascii
import json
from dataclasses import dataclass
from typing import Dict

from cryptor.exceptions import MalformedEnvelope

REQUIRED_FIELDS = ("iv", "value", "cipher")


def _b64encode(data: bytes) -> str:
    return base64.b64encode(data).decode("ascii")


def _b64decode(text: str, field: str) -> bytes:
    if not isinstance(text, str):
        raise MalformedEnvelope(f"Field {field!r} must be a string")
    try:
        return base64.b64decode(text, validate=True)
    except (binascii.Error, ValueError) as e:
        raise MalformedEnvelope(f"Field {field!r} is not valid Base64") from e


@dataclass(frozen=True)
class Envelope:
    """One encryption result: IV, ciphertext, cipher name and tag."""

    iv: bytes
    value: bytes
    cipher: str
    tag: bytes = b""

    def to_dict(self) -> Dict[str, str]:
        """Return the record with every field Base64 encoded."""
        return {
            "iv": _b64encode(self.iv),
            "value": _b64encode(self.value),
            "cipher": _b64encode(self.cipher.encode("ascii")),
            "tag": _b64encode(self.tag),
        }

    def encode(self) -> str:
        """Serialize the envelope to its opaque token."""
        record = json.dumps(self.to_dict(), separators=(",", ":"))
        # Escaped slashes keep tokens identical to those of PHP/OpenSSL producers
        record = record.replace("/", "\\/")
        return _b64encode(record.encode("utf-8"))

    @classmethod
    def decode(cls, text: str) -> "Envelope":
        """
        Parse an envelope token.

        Args:
            text: Token produced by :meth:`encode`

        Returns:
            Envelope: The decoded envelope. A missing ``tag`` decodes to
            empty bytes.

        Raises:
            MalformedEnvelope: If the token is not Base64, not a JSON
                object, or lacks ``iv``, ``value`` or ``cipher``
        """
        if isinstance(text, (bytes, bytearray)):
            text = bytes(text).decode("ascii", errors="replace")
        if not isinstance(text, str) or not text:
            raise MalformedEnvelope("Envelope must be a non-empty string")

        try:
            raw = base64.b64decode(text.strip(), validate=True)
            record = json.loads(raw.decode("utf-8"))
        except (binascii.Error, ValueError, RecursionError) as e:
            raise MalformedEnvelope("Envelope is not Base64-encoded JSON") from e

        if not isinstance(record, dict):
            raise MalformedEnvelope("Envelope must be a JSON object")
        missing = [field for field in REQUIRED_FIELDS if record.get(field) is None]
        if missing:
            raise MalformedEnvelope(f"Envelope is missing fields: {', '.join(missing)}")

        tag = record.get("tag")
        cipher = _b64decode(record["cipher"], "cipher")
        try:
            cipher_name = cipher.decode("ascii")
        except UnicodeDecodeError as e:
            raise MalformedEnvelope("Cipher name is not ASCII") from e

        return cls(
            iv=_b64decode(record["iv"], "iv"),
            value=_b64decode(record["value"], "value"),
            cipher=cipher_name,
            tag=_b64decode(tag, "tag") if tag is not None else b"",
        )
