# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Tsar Studio
# Part of ScriptAuth - see LICENSE and REFERENCES.md
# Refs: RFC8032-Ed25519
"""
Built-in unlock checks for script outputs.

Both checks bind the proof to the committed address first and only then run
signature math. A wrong address or a bad signature is a plain False. A roster
that cannot be rebuilt into an address is returned as an error, and a version,
size or count violation raises before any address work.

Single signer unlock data:
    version, pubkey, message (script id, 4+4+2 bytes), signature, payer address

Multi signer unlock data (key and hash entries carry a 1-byte roster position):
    version, message, signatures, signing pubkeys (paired with signatures),
    non-signing key hashes, payer multi-sig address
"""
from __future__ import annotations

from typing import Callable, Optional, Sequence

# ---------------- Local Project ----------------
from ..core.address import address_of as _address_of
from ..core.address import multi_address_of as _multi_address_of
from ..utils import config as CFG
from ..utils.helpers import CountMismatchError, LengthError, bytes_equal, expect_len, to_bytes
from .sigcheck import check_sig, check_sigs, get_scheme

# ---------------- Logger ----------------
from ..utils.script_logging import get_ctx_logger
log = get_ctx_logger("scriptauth.consensus.authorize")

AddressOf = Callable[[bytes], bytes]
MultiAddressOf = Callable[[Sequence[bytes], Sequence[bytes]], tuple[Optional[bytes], Optional[Exception]]]


def strip_index_prefix(entries: Sequence[bytes]) -> list[bytes]:
    out = []
    for i, entry in enumerate(entries):
        entry = to_bytes(entry, "roster entry")
        if len(entry) <= CFG.ROSTER_INDEX_SIZE:
            raise LengthError(f"roster entry {i} has no key after its position tag")
        # bytes() copies, so a shared memoryview/bytearray buffer is never aliased
        out.append(bytes(entry[CFG.ROSTER_INDEX_SIZE:]))
    return out


def _message(message) -> bytes:
    return expect_len(to_bytes(message, "message"), CFG.SCRIPT_ID_SIZE, "message (script id)")

def _signature_sizes(scheme, signatures: Sequence[bytes]) -> None:
    for sig in signatures:
        expect_len(to_bytes(sig, "signature"), scheme.sig_size, "signature")

def _prefixed_key_sizes(scheme, prefixed_pubkeys: Sequence[bytes]) -> None:
    for entry in prefixed_pubkeys:
        expect_len(to_bytes(entry, "signing key entry"), CFG.ROSTER_INDEX_SIZE + scheme.pubkey_size,
                   "signing key entry")


def single_check(version: int, pubkey: bytes, message: bytes, signature: bytes, claimed_address: bytes,
                 address_of: AddressOf = _address_of) -> bool:
    scheme = get_scheme(version)
    msg = _message(message)
    _signature_sizes(scheme, [signature])
    expect_len(to_bytes(pubkey, "public key"), scheme.pubkey_size, "public key")
    claimed = to_bytes(claimed_address, "claimed address")

    computed = address_of(pubkey)
    if not bytes_equal(computed, claimed):
        log.debug("[single_check] address mismatch, signature not checked")
        return False
    return check_sig(version, pubkey, msg, signature)


def multi_check(version: int, message: bytes, signatures: Sequence[bytes], prefixed_pubkeys: Sequence[bytes],
                prefixed_address_hashes: Sequence[bytes], claimed_address: bytes,
                multi_address_of: MultiAddressOf = _multi_address_of) -> tuple[bool, Optional[Exception]]:
    scheme = get_scheme(version)
    msg = _message(message)
    if len(signatures) != len(prefixed_pubkeys):
        raise CountMismatchError(len(prefixed_pubkeys), len(signatures))
    _signature_sizes(scheme, signatures)
    _prefixed_key_sizes(scheme, prefixed_pubkeys)
    claimed = to_bytes(claimed_address, "claimed address")

    computed, err = multi_address_of(prefixed_pubkeys, prefixed_address_hashes)
    if err is not None:
        log.debug("[multi_check] roster rejected: %s", err)
        return False, err
    # n/T is folded into the address, so this also checks the threshold
    if not bytes_equal(computed, claimed):
        log.debug("[multi_check] address mismatch, signatures not checked")
        return False, None
    return check_sigs(version, strip_index_prefix(prefixed_pubkeys), msg, signatures), None
