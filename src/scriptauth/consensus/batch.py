# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Tsar Studio
# Part of ScriptAuth - see LICENSE and REFERENCES.md
# Refs: see REFERENCES.md
from __future__ import annotations

from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from typing import Iterable, Optional, Union

# ---------------- Local Project ----------------
from ..utils import config as CFG
from ..utils.helpers import SigCheckError
from .authorize import multi_check, single_check

# ---------------- Logger ----------------
from ..utils.script_logging import get_ctx_logger
log = get_ctx_logger("scriptauth.consensus.batch")


@dataclass(frozen=True)
class SingleUnlock:
    version: int
    pubkey: bytes
    message: bytes
    signature: bytes
    address: bytes

@dataclass(frozen=True)
class MultiUnlock:
    version: int
    message: bytes
    signatures: tuple = field(default_factory=tuple)
    pubkeys: tuple = field(default_factory=tuple)
    key_hashes: tuple = field(default_factory=tuple)
    address: bytes = b""

UnlockJob = Union[SingleUnlock, MultiUnlock]

@dataclass(frozen=True)
class UnlockResult:
    index: int
    ok: bool
    error: Optional[Exception] = None


def _run(index: int, job: UnlockJob) -> UnlockResult:
    try:
        if isinstance(job, SingleUnlock):
            ok = single_check(job.version, job.pubkey, job.message, job.signature, job.address)
            return UnlockResult(index, ok)
        if isinstance(job, MultiUnlock):
            ok, err = multi_check(job.version, job.message, job.signatures, job.pubkeys, job.key_hashes, job.address)
            return UnlockResult(index, ok, err)
        raise TypeError(f"unsupported unlock job: {type(job).__name__}")
    except (SigCheckError, TypeError) as e:
        log.debug("[verify_batch] job %d rejected: %s", index, e)
        return UnlockResult(index, False, e)


def verify_batch(jobs: Iterable[UnlockJob], max_workers: Optional[int] = None) -> list[UnlockResult]:
    """
    Verify independent unlock proofs in parallel, one call per script.
    Results come back in job order; contract and roster errors travel in
    UnlockResult.error instead of aborting the whole batch.
    """
    jobs = list(jobs)
    if not jobs:
        return []
    workers = max(1, int(max_workers or CFG.BATCH_MAX_WORKERS))
    with ThreadPoolExecutor(max_workers=min(workers, len(jobs)), thread_name_prefix="unlock") as pool:
        results = list(pool.map(_run, range(len(jobs)), jobs))
    failed = sum(1 for r in results if not r.ok)
    log.debug("[verify_batch] %d job(s), %d not authorized", len(results), failed)
    return results
