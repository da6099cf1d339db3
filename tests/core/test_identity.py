"""Hotkey Identity - SS58 validation on construction.

Tests cover:
    - Well-known dev addresses accepted, canonical str() preserved
    - Checksum, alphabet, length and reserved type-byte failures rejected with InvalidHotkey
    - Immutability, equality, hashing
"""

import hashlib

import base58
import pytest

from validator.core.identity import Hotkey, InvalidHotkey, decode_ss58

from tests.helpers import ALICE, BOB


def test_valid_address_accepted():
    hotkey = Hotkey(ALICE)
    assert str(hotkey) == ALICE
    assert hotkey.network_prefix == 42
    assert len(hotkey.public_key) == 32


def test_decode_returns_generic_substrate_prefix():
    prefix, public_key = decode_ss58(BOB)
    assert prefix == 42
    assert len(public_key) == 32


def test_surrounding_whitespace_stripped():
    assert str(Hotkey(f"  {ALICE}\n")) == ALICE


def test_checksum_mismatch_rejected():
    tampered = ALICE[:-1] + ("Z" if ALICE[-1] != "Z" else "Y")
    with pytest.raises(InvalidHotkey):
        Hotkey(tampered)


@pytest.mark.parametrize("address", [
    "",
    "not-an-address",
    "0OIl" * 12,
    "abc",
    ALICE + "A",
])
def test_malformed_addresses_rejected(address):
    with pytest.raises(InvalidHotkey):
        Hotkey(address)


def test_invalid_hotkey_is_value_error():
    with pytest.raises(ValueError):
        Hotkey("abc")


def test_hotkey_is_immutable():
    hotkey = Hotkey(ALICE)
    with pytest.raises(AttributeError):
        hotkey._address = BOB


def test_equality_and_hash():
    assert Hotkey(ALICE) == Hotkey(ALICE)
    assert Hotkey(ALICE) != Hotkey(BOB)
    assert len({Hotkey(ALICE), Hotkey(ALICE), Hotkey(BOB)}) == 2


def _encode(body: bytes) -> str:
    checksum = hashlib.blake2b(b"SS58PRE" + body, digest_size=64).digest()[:2]
    return base58.b58encode(body + checksum).decode()


def test_two_byte_prefix_with_valid_checksum_accepted():
    prefix, public_key = decode_ss58(_encode(bytes([0x40, 0x00]) + bytes(32)))
    assert prefix == 0
    assert public_key == bytes(32)


@pytest.mark.parametrize("first_byte", [0x80, 0xC0, 0xFF])
def test_reserved_type_byte_rejected_despite_valid_checksum(first_byte):
    with pytest.raises(InvalidHotkey, match="reserved"):
        Hotkey(_encode(bytes([first_byte, 0x00]) + bytes(32)))
