# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Tsar Studio
# Part of ScriptAuth - see LICENSE and REFERENCES.md
# Refs: BIP173; BLAKE2
"""
Address derivation for single-key and multi-signature ownership.

Layout
------
    hash_address(data, prefix) = blake2b-160( prefix || sha3_256(data) )

    single   = hash_address(pubkey)
    multisig = hash_address(h_0 || h_1 || ... || h_{T-1}, prefix = [n, T])

where h_i = address_of(key at roster position i) and n is the number of
signatures the roster requires. The threshold is part of the address, so an
unlock proof must supply exactly n signing keys; the other T-n members are
supplied as their 20-byte hashes.

Multi-signature entries carry a 1-byte roster position in front of the key
or hash. The position is what lets the verifier rebuild h_0..h_{T-1} in
order from a mix of signing keys and hash stand-ins.
"""
from __future__ import annotations

from typing import Optional, Sequence

from bech32 import bech32_decode, bech32_encode, convertbits

from ..utils import config as CFG
from ..utils.helpers import blake2b, expect_len, sha3_256, to_bytes

# ---------------- Logger ----------------
from ..utils.script_logging import get_ctx_logger
log = get_ctx_logger("scriptauth.core.address")


class RosterError(ValueError):
    """Multi-signature roster entries cannot be turned into an address."""

class AddressError(ValueError):
    pass


# -----------------------------
# HASHING
# -----------------------------

def hash_address(data: bytes, prefix: bytes = b"") -> bytes:
    return blake2b(bytes(prefix) + sha3_256(bytes(data)), CFG.ADDRESS_SIZE)

def address_of(pubkey: bytes) -> bytes:
    pubkey = expect_len(to_bytes(pubkey, "public key"), CFG.ED25519_PUBKEY_SIZE, "public key")
    return hash_address(pubkey)

def prefix_entry(index: int, data: bytes) -> bytes:
    if not 0 <= index <= 0xFF:
        raise ValueError(f"roster position out of range: {index}")
    return bytes([index]) + to_bytes(data, "roster entry")

def _roster_prefix(required: int, total: int) -> bytes:
    return bytes([required, total])

def multi_address(pubkeys: Sequence[bytes], threshold: int) -> bytes:
    """Committed address of an ordered roster of raw public keys."""
    total = len(pubkeys)
    if not CFG.MULTISIG_MIN_ROSTER <= total <= CFG.MULTISIG_MAX_ROSTER:
        raise RosterError(f"roster size {total} outside {CFG.MULTISIG_MIN_ROSTER}..{CFG.MULTISIG_MAX_ROSTER}")
    if not 1 <= threshold <= total:
        raise RosterError(f"threshold {threshold} invalid for roster of {total}")
    hashes = b"".join(address_of(pk) for pk in pubkeys)
    return hash_address(hashes, _roster_prefix(threshold, total))


def multi_address_of(prefixed_pubkeys: Sequence[bytes],
                     prefixed_hashes: Sequence[bytes]) -> tuple[Optional[bytes], Optional[RosterError]]:
    """
    Rebuild a multi-signature address from an unlock proof.

    prefixed_pubkeys are the signing members (position + 32-byte key),
    prefixed_hashes the non-signing ones (position + 20-byte key hash).
    Returns (address, None) or (None, RosterError) when the roster is malformed.
    """
    keys = [to_bytes(e, "roster key") for e in prefixed_pubkeys]
    hashes = [to_bytes(e, "roster hash") for e in prefixed_hashes]
    required = len(keys)
    total = required + len(hashes)

    if required == 0:
        return None, RosterError("multi-signature unlock carries no signing keys")
    if not CFG.MULTISIG_MIN_ROSTER <= total <= CFG.MULTISIG_MAX_ROSTER:
        return None, RosterError(f"roster size {total} outside {CFG.MULTISIG_MIN_ROSTER}..{CFG.MULTISIG_MAX_ROSTER}")

    slots: list[Optional[bytes]] = [None] * total
    key_entry = CFG.ROSTER_INDEX_SIZE + CFG.ED25519_PUBKEY_SIZE
    hash_entry = CFG.ROSTER_INDEX_SIZE + CFG.ADDRESS_SIZE

    for entries, size, is_key in ((keys, key_entry, True), (hashes, hash_entry, False)):
        for entry in entries:
            if len(entry) != size:
                return None, RosterError(f"roster entry must be {size} bytes, got {len(entry)}")
            pos = entry[0]
            if pos >= total:
                return None, RosterError(f"roster position {pos} out of range for roster of {total}")
            if slots[pos] is not None:
                return None, RosterError(f"duplicate roster position {pos}")
            body = entry[CFG.ROSTER_INDEX_SIZE:]
            slots[pos] = hash_address(body) if is_key else body

    log.trace("[multi_address_of] rebuilt %d-of-%d roster", required, total)
    return hash_address(b"".join(slots), _roster_prefix(required, total)), None


# -----------------------------
# TEXT FORM (bech32)
# -----------------------------

def encode_address(addr: bytes, hrp: str = CFG.ADDRESS_PREFIX) -> str:
    addr = to_bytes(addr, "address")
    if len(addr) != CFG.ADDRESS_SIZE:
        raise AddressError(f"address must be {CFG.ADDRESS_SIZE} bytes, got {len(addr)}")
    text = bech32_encode(hrp, convertbits(addr, 8, 5))
    if text is None:
        raise AddressError(f"cannot encode address with prefix {hrp!r}")
    return text

def decode_address(text: str, hrp: str = CFG.ADDRESS_PREFIX) -> bytes:
    got_hrp, data = bech32_decode(text)
    if got_hrp is None or data is None:
        raise AddressError("invalid bech32 address")
    if got_hrp != hrp:
        raise AddressError(f"Invalid address prefix: expected '{hrp}', got '{got_hrp}'")
    decoded = convertbits(data, 5, 8, False)
    if decoded is None or len(decoded) != CFG.ADDRESS_SIZE:
        raise AddressError(f"address payload must be {CFG.ADDRESS_SIZE} bytes")
    return bytes(decoded)
