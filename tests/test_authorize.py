# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Tsar Studio
# Part of ScriptAuth - see LICENSE and REFERENCES.md
# Refs: RFC8032-Ed25519

import os
import sys

import pytest
from nacl.signing import SigningKey

PROJECT_ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))
SRC_ROOT = os.path.join(PROJECT_ROOT, "src")
for path in (PROJECT_ROOT, SRC_ROOT):
    if path not in sys.path:
        sys.path.append(path)

from scriptauth.consensus import authorize  # noqa: E402
from scriptauth.consensus.authorize import multi_check, single_check, strip_index_prefix  # noqa: E402
from scriptauth.core.address import RosterError, address_of, multi_address, prefix_entry  # noqa: E402
from scriptauth.core.script_id import script_id  # noqa: E402
from scriptauth.utils.helpers import (CountMismatchError, LengthError,  # noqa: E402
                                      UnsupportedVersionError)

MSG = script_id(2024, 17, 1)


def _keys(n, start=70):
    return [SigningKey(bytes([start + i]) * 32) for i in range(n)]

def _pub(sk):
    return sk.verify_key.encode()


# -----------------------------
# strip_index_prefix
# -----------------------------

def test_strip_keeps_order_and_drops_first_byte():
    assert strip_index_prefix([b"\x02abc", b"\x00de", b"\x01f"]) == [b"abc", b"de", b"f"]


def test_strip_does_not_touch_caller_buffer():
    buf = bytearray(b"\x05" + b"k" * 32)
    view = memoryview(buf)
    out = strip_index_prefix([view])[0]
    assert isinstance(out, bytes)
    buf[1] = 0
    assert out == b"k" * 32
    assert buf[0] == 5


@pytest.mark.parametrize("entry", [b"", b"\x00"])
def test_strip_rejects_entries_without_key(entry):
    with pytest.raises(LengthError):
        strip_index_prefix([b"\x00abc", entry])


# -----------------------------
# single_check
# -----------------------------

def test_single_check_accepts_owner():
    sk = _keys(1)[0]
    sig = sk.sign(MSG).signature
    assert single_check(1, _pub(sk), MSG, sig, address_of(_pub(sk))) is True


def test_single_check_rejects_bad_signature():
    sk = _keys(1)[0]
    sig = bytearray(sk.sign(MSG).signature)
    sig[0] ^= 0x80
    assert single_check(1, _pub(sk), MSG, bytes(sig), address_of(_pub(sk))) is False


def test_single_check_address_dominates_valid_signature(monkeypatch):
    owner, intruder = _keys(2)
    sig = intruder.sign(MSG).signature
    calls = []
    monkeypatch.setattr(authorize, "check_sig", lambda *a: calls.append(a) or True)
    assert single_check(1, _pub(intruder), MSG, sig, address_of(_pub(owner))) is False
    assert calls == []


def test_single_check_uses_injected_address_function():
    sk = _keys(1)[0]
    sig = sk.sign(MSG).signature
    assert single_check(1, _pub(sk), MSG, sig, b"fixed", address_of=lambda pk: b"fixed") is True


def test_single_check_contract_errors():
    sk = _keys(1)[0]
    sig = sk.sign(MSG).signature
    addr = address_of(_pub(sk))
    with pytest.raises(UnsupportedVersionError):
        single_check(2, _pub(sk), MSG, sig, addr)
    with pytest.raises(LengthError):
        single_check(1, _pub(sk), MSG + b"\x00", sig, addr)
    with pytest.raises(LengthError):
        single_check(1, _pub(sk)[:16], MSG, sig, addr)
    with pytest.raises(LengthError):
        single_check(1, _pub(sk), MSG, sig[:63], addr)


# -----------------------------
# multi_check
# -----------------------------

@pytest.fixture
def roster():
    """3 members, 2 signatures required; members 0 and 1 sign, member 2 only hashes."""
    keys = _keys(3)
    pubs = [_pub(k) for k in keys]
    committed = multi_address(pubs, 2)
    signers = [prefix_entry(0, pubs[0]), prefix_entry(1, pubs[1])]
    others = [prefix_entry(2, address_of(pubs[2]))]
    sigs = [keys[0].sign(MSG).signature, keys[1].sign(MSG).signature]
    return keys, committed, signers, others, sigs


def test_multi_check_two_of_three(roster):
    _, committed, signers, others, sigs = roster
    assert multi_check(1, MSG, sigs, signers, others, committed) == (True, None)


def test_multi_check_one_bad_signature(roster):
    keys, committed, signers, others, sigs = roster
    sigs = [sigs[0], keys[2].sign(MSG).signature]
    assert multi_check(1, MSG, sigs, signers, others, committed) == (False, None)


def test_multi_check_signature_over_other_message(roster):
    keys, committed, signers, others, sigs = roster
    other = script_id(2024, 17, 2)
    sigs = [sigs[0], keys[1].sign(other).signature]
    assert multi_check(1, MSG, sigs, signers, others, committed) == (False, None)


def test_multi_check_address_mismatch_is_clean_negative(roster, monkeypatch):
    _, _, signers, others, sigs = roster
    calls = []
    monkeypatch.setattr(authorize, "check_sigs", lambda *a: calls.append(a) or True)
    assert multi_check(1, MSG, sigs, signers, others, b"\x00" * 20) == (False, None)
    assert calls == []


def test_multi_check_threshold_mismatch_is_negative(roster):
    keys, _, signers, others, sigs = roster
    pubs = [_pub(k) for k in keys]
    three_of_three = multi_address(pubs, 3)
    assert multi_check(1, MSG, sigs, signers, others, three_of_three) == (False, None)


def test_multi_check_propagates_roster_error(roster):
    _, committed, signers, others, sigs = roster
    dup = [signers[0], signers[0][:1] + signers[1][1:]]
    ok, err = multi_check(1, MSG, sigs, dup, others, committed)
    assert ok is False
    assert isinstance(err, RosterError)


def test_multi_check_roster_error_independent_of_address(roster):
    _, _, signers, others, sigs = roster
    dup = [signers[0], signers[0][:1] + signers[1][1:]]
    ok, err = multi_check(1, MSG, sigs, dup, others, b"\x00" * 20)
    assert ok is False and isinstance(err, RosterError)


def test_multi_check_error_passed_through_verbatim(roster):
    _, committed, signers, others, sigs = roster
    sentinel = RosterError("custom")
    result = multi_check(1, MSG, sigs, signers, others, committed,
                         multi_address_of=lambda pks, pkhs: (None, sentinel))
    assert result[0] is False and result[1] is sentinel


def test_multi_check_signature_count_mismatch(roster):
    _, committed, signers, others, sigs = roster
    with pytest.raises(CountMismatchError):
        multi_check(1, MSG, sigs[:1], signers, others, committed)


def test_multi_check_contract_errors(roster):
    _, committed, signers, others, sigs = roster
    with pytest.raises(UnsupportedVersionError):
        multi_check(7, MSG, sigs, signers, others, committed)
    with pytest.raises(LengthError):
        multi_check(1, MSG[:9], sigs, signers, others, committed)


def test_multi_check_leaves_entries_untouched(roster):
    _, committed, signers, others, sigs = roster
    before = [bytes(s) for s in signers]
    assert multi_check(1, MSG, sigs, signers, others, committed) == (True, None)
    assert signers == before


def test_contract_errors_raise_even_on_address_mismatch(roster):
    keys, _, signers, others, sigs = roster
    with pytest.raises(LengthError):
        single_check(1, _pub(keys[0]), MSG, sigs[0][:32], b"\x00" * 20)
    with pytest.raises(LengthError):
        multi_check(1, MSG, [sigs[0], sigs[1] + b"\x00"], signers, others, b"\x00" * 20)
    with pytest.raises(CountMismatchError):
        multi_check(1, MSG, sigs + [sigs[0]], signers, others, b"\x00" * 20)


def test_single_check_key_size_checked_before_injected_address_function():
    sk = _keys(1)[0]
    sig = sk.sign(MSG).signature
    seen = []
    with pytest.raises(LengthError):
        single_check(1, b"\x00" * 5, MSG, sig, b"A" * 20,
                     address_of=lambda pk: seen.append(pk) or b"B" * 20)
    assert seen == []


@pytest.mark.parametrize("entry", [b"\x00abc", b"\x00" * 32, b"\x00" * 34])
def test_multi_check_key_entry_size_checked_before_injected_roster(roster, entry):
    _, _, _, _, sigs = roster
    seen = []

    def rebuild(pks, pkhs):
        seen.append(pks)
        return b"B" * 20, None

    with pytest.raises(LengthError):
        multi_check(1, MSG, sigs[:1], [entry], [], b"A" * 20, multi_address_of=rebuild)
    assert seen == []
