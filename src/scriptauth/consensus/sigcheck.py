# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Tsar Studio
# Part of ScriptAuth - see LICENSE and REFERENCES.md
# Refs: RFC8032-Ed25519
from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Sequence

from nacl.exceptions import CryptoError
from nacl.signing import VerifyKey

# ---------------- Local Project ----------------
from ..utils import config as CFG
from ..utils.helpers import (CountMismatchError, LengthError, SigCheckError, UnsupportedVersionError,
                             expect_len, to_bytes)

# ---------------- Logger ----------------
from ..utils.script_logging import get_ctx_logger
log = get_ctx_logger("scriptauth.consensus.sigcheck")

__all__ = [
    "SigScheme", "register_scheme", "get_scheme", "check_sig", "check_sigs",
    "SigCheckError", "UnsupportedVersionError", "LengthError", "CountMismatchError",
]


@dataclass(frozen=True)
class SigScheme:
    version: int
    name: str
    pubkey_size: int
    sig_size: int
    verify: Callable[[bytes, bytes, bytes], bool]  # (pubkey, message, signature) -> bool


# -----------------------------
# SCHEME BACKENDS
# -----------------------------

def _ed25519_verify(pubkey: bytes, message: bytes, signature: bytes) -> bool:
    try:
        VerifyKey(pubkey).verify(message, signature)
        return True
    except CryptoError:
        # also covers keys that are not valid curve points
        log.trace("[_ed25519_verify] bad signature")
        return False


# -----------------------------
# VERSION REGISTRY
# -----------------------------

_SCHEMES: dict[int, SigScheme] = {}

def register_scheme(scheme: SigScheme, *, replace: bool = False) -> SigScheme:
    if scheme.version in _SCHEMES and not replace:
        raise ValueError(f"signature scheme version {scheme.version} already registered")
    _SCHEMES[scheme.version] = scheme
    log.debug("[register_scheme] v%d -> %s", scheme.version, scheme.name)
    return scheme

def get_scheme(version: int) -> SigScheme:
    scheme = _SCHEMES.get(version)
    if scheme is None:
        raise UnsupportedVersionError(version)
    return scheme

register_scheme(SigScheme(
    version=CFG.SIG_VERSION_ED25519,
    name="ed25519",
    pubkey_size=CFG.ED25519_PUBKEY_SIZE,
    sig_size=CFG.ED25519_SIG_SIZE,
    verify=_ed25519_verify,))


# -----------------------------
# CHECKS
# -----------------------------

def _prepare(scheme: SigScheme, pubkey, signature) -> tuple[bytes, bytes]:
    pub = expect_len(to_bytes(pubkey, "public key"), scheme.pubkey_size, "public key")
    sig = expect_len(to_bytes(signature, "signature"), scheme.sig_size, "signature")
    return pub, sig

def check_sig(version: int, pubkey: bytes, message: bytes, signature: bytes) -> bool:
    """
    Verify one detached signature under the scheme registered for `version`.

    A signature that does not verify is False. Unknown versions and keys or
    signatures of the wrong size raise SigCheckError subclasses.
    """
    scheme = get_scheme(version)
    pub, sig = _prepare(scheme, pubkey, signature)
    return bool(scheme.verify(pub, to_bytes(message, "message"), sig))

def check_sigs(version: int, pubkeys: Sequence[bytes], message: bytes, signatures: Sequence[bytes]) -> bool:
    """All-or-nothing: every pubkeys[i] must have signed `message` as signatures[i]."""
    scheme = get_scheme(version)
    if len(pubkeys) != len(signatures):
        raise CountMismatchError(len(pubkeys), len(signatures))
    msg = to_bytes(message, "message")
    # sizes of every pair are checked before the first verify
    pairs = [_prepare(scheme, pk, sig) for pk, sig in zip(pubkeys, signatures)]
    for i, (pub, sig) in enumerate(pairs):
        if not scheme.verify(pub, msg, sig):
            log.trace("[check_sigs] pair %d/%d failed", i + 1, len(pairs))
            return False
    return True
