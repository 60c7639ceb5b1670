import dataclasses

import pytest

from cryptor import Cryptor, Envelope

SECRET = "my-secret-key"


@pytest.fixture(autouse=True)
def _no_ambient_key(monkeypatch):
    monkeypatch.delenv("APP_KEY", raising=False)


@pytest.fixture
def cryptor():
    with Cryptor(SECRET) as c:
        yield c


def flip_bit(token: str, field: str, bit: int = 0) -> str:
    """Return a copy of the envelope with one bit of ``field`` inverted."""
    envelope = Envelope.decode(token)
    data = bytearray(getattr(envelope, field))
    data[bit // 8] ^= 1 << (bit % 8)
    return dataclasses.replace(envelope, **{field: bytes(data)}).encode()
