"""Network Identity - SS58-validated hotkey address.

Invariants:
    - A Hotkey instance always holds a well-formed SS58 address (checked in __init__)
    - Decoded payload = prefix (1 or 2 bytes) + 32-byte public key + 2-byte checksum
    - Checksum = first 2 bytes of blake2b-512(b"SS58PRE" + prefix + public key)
    - str(hotkey) is the canonical form used by persistence and rental handlers

Design Decisions:
    - Validate on construction: downstream code never re-checks the address
    - base58 library for the alphabet decode; blake2b from hashlib
"""

import hashlib

import base58

SS58_PREFIX = b"SS58PRE"
PUBLIC_KEY_LENGTH = 32
CHECKSUM_LENGTH = 2


class InvalidHotkey(ValueError):
    """Raised when an address is not a valid SS58 hotkey."""


def _ss58_checksum(payload: bytes) -> bytes:
    return hashlib.blake2b(SS58_PREFIX + payload, digest_size=64).digest()[:CHECKSUM_LENGTH]


def decode_ss58(address: str) -> tuple[int, bytes]:
    """Decode an SS58 address into (network prefix, public key).

    Raises InvalidHotkey on bad alphabet, bad length, or checksum mismatch.
    """
    if not address:
        raise InvalidHotkey("address is empty")
    try:
        raw = base58.b58decode(address)
    except ValueError as e:
        raise InvalidHotkey(f"invalid base58 encoding: {e}") from e

    if not raw:
        raise InvalidHotkey("address decodes to no bytes")
    if raw[0] >= 128:
        raise InvalidHotkey(f"reserved address type byte {raw[0]}")
    prefix_length = 1 if raw[0] < 64 else 2
    expected = prefix_length + PUBLIC_KEY_LENGTH + CHECKSUM_LENGTH
    if len(raw) != expected:
        raise InvalidHotkey(f"decoded length {len(raw)}, expected {expected}")

    body, checksum = raw[:-CHECKSUM_LENGTH], raw[-CHECKSUM_LENGTH:]
    if _ss58_checksum(body) != checksum:
        raise InvalidHotkey("checksum mismatch")

    if prefix_length == 1:
        prefix = raw[0]
    else:
        # Two-byte "full" prefix encoding
        prefix = ((raw[0] & 0x3F) << 2) | (raw[1] >> 6) | ((raw[1] & 0x3F) << 8)
    return prefix, body[prefix_length:]


class Hotkey:
    """Validated, immutable hotkey address."""

    __slots__ = ("_address", "_network_prefix", "_public_key")

    def __init__(self, address: str):
        address = address.strip() if isinstance(address, str) else address
        if not isinstance(address, str):
            raise InvalidHotkey(f"expected str, got {type(address).__name__}")
        prefix, public_key = decode_ss58(address)
        object.__setattr__(self, "_address", address)
        object.__setattr__(self, "_network_prefix", prefix)
        object.__setattr__(self, "_public_key", public_key)

    def __setattr__(self, name, value):
        raise AttributeError("Hotkey is immutable")

    @property
    def network_prefix(self) -> int:
        return self._network_prefix

    @property
    def public_key(self) -> bytes:
        return self._public_key

    def __str__(self) -> str:
        return self._address

    def __repr__(self) -> str:
        return f"Hotkey({self._address!r})"

    def __eq__(self, other: object) -> bool:
        if isinstance(other, Hotkey):
            return self._address == other._address
        return NotImplemented

    def __hash__(self) -> int:
        return hash(self._address)
