# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Tsar Studio
# Part of ScriptAuth - see LICENSE and REFERENCES.md
# Refs: RFC8032-Ed25519; BLAKE2
from __future__ import annotations
import hashlib, hmac, math

from ..utils import config as CFG


# -----------------------------
# ERRORS
# -----------------------------

class SigCheckError(ValueError):
    """Caller broke the contract of a verification call (not an auth failure)."""

class UnsupportedVersionError(SigCheckError):
    def __init__(self, version):
        super().__init__(f"unsupported signature scheme version: {version!r}")
        self.version = version

class LengthError(SigCheckError):
    pass

class CountMismatchError(SigCheckError):
    def __init__(self, pubkeys: int, signatures: int):
        super().__init__(f"{pubkeys} public key(s) for {signatures} signature(s)")
        self.pubkeys = pubkeys
        self.signatures = signatures


# -----------------------------
# BYTES
# -----------------------------

def to_bytes(x, what: str = "value") -> bytes:
    if isinstance(x, bytes):
        return x
    if isinstance(x, (bytearray, memoryview)):
        return bytes(x)
    raise TypeError(f"{what} must be bytes-like, got {type(x).__name__}")

def expect_len(b: bytes, size: int, what: str) -> bytes:
    if len(b) != size:
        raise LengthError(f"{what} must be {size} bytes, got {len(b)}")
    return b

def bytes_equal(a: bytes, b: bytes) -> bool:
    return hmac.compare_digest(a, b)


# -----------------------------
# HASHING
# -----------------------------

def sha3_256(b: bytes) -> bytes:
    return hashlib.sha3_256(b).digest()

def blake2b(b: bytes, digest_size: int = CFG.ADDRESS_SIZE) -> bytes:
    return hashlib.blake2b(b, digest_size=digest_size).digest()


# -----------------------------
# NUMBERS
# -----------------------------

def float_equal(x: float, y: float, d: float = 0.0) -> bool:
    # d == 0 means strict equality
    return math.fabs(x - y) <= d
