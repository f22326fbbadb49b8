# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Tsar Studio
# Part of ScriptAuth - see LICENSE and REFERENCES.md
# Refs: RFC8032-Ed25519; BIP173

'''
=============================================================================
 -------- !!! CONSENSUS-CRITICAL REMINDER - READ BEFORE EDITING !!! --------
=============================================================================

The values below **MUST BE IDENTICAL** across all nodes.
Changing them changes which unlock proofs are accepted (hard fork).

  1) SCRIPT IDENTIFIER LAYOUT
   - SCRIPT_ID_HEIGHT_BYTES, SCRIPT_ID_TX_BYTES, SCRIPT_ID_INDEX_BYTES
   - SCRIPT_ID_SIZE

  2) SIGNATURE SCHEMES
   - SIG_VERSION_ED25519, ED25519_PUBKEY_SIZE, ED25519_SIG_SIZE

  3) ADDRESSES & ROSTERS
   - ADDRESS_SIZE, ROSTER_INDEX_SIZE, MULTISIG_MIN_ROSTER, MULTISIG_MAX_ROSTER

NOT CONSENSUS (safe to differ between nodes):
   ADDRESS_PREFIX (text form only), batch workers, emission report, logging/path.

=============================================================================
'''

import os
import appdirs


# =============================================================================
# 1. MODE & APPLICATION
# =============================================================================
# ---- RUNTIME PROFILE ----
MODE   = "dev"  # default runtime profile, switch to "prod" for live nodes
IS_DEV = (MODE.lower() == "dev")  # cached boolean to simplify dev/prod toggles

# ---- APP METADATA ----
APP_NAME   = "ScriptAuth"  # display name used for user data directories
APP_AUTHOR = "TsarStudio"  # vendor string passed into platform dir helpers
DATA_DIR   = appdirs.user_data_dir(APP_NAME, APP_AUTHOR)  # OS-specific data folder resolved via appdirs


# =============================================================================
# 2. SCRIPT IDENTIFIER
# =============================================================================
SCRIPT_ID_HEIGHT_BYTES = 4  # big-endian block height
SCRIPT_ID_TX_BYTES     = 4  # big-endian tx position inside the block
SCRIPT_ID_INDEX_BYTES  = 2  # big-endian script position inside the tx
SCRIPT_ID_SIZE         = SCRIPT_ID_HEIGHT_BYTES + SCRIPT_ID_TX_BYTES + SCRIPT_ID_INDEX_BYTES  # signed message length


# =============================================================================
# 3. SIGNATURE SCHEMES
# =============================================================================
SIG_VERSION_ED25519 = 1  # protocol tag for Ed25519 unlock proofs
ED25519_PUBKEY_SIZE = 32  # raw Ed25519 public key length
ED25519_SIG_SIZE    = 64  # detached Ed25519 signature length


# =============================================================================
# 4. ADDRESSES & ROSTERS
# =============================================================================
ADDRESS_SIZE        = 20  # blake2b digest size of every address
ADDRESS_PREFIX      = "sa"  # bech32 human readable part for text addresses
ROSTER_INDEX_SIZE   = 1  # position tag in front of each multi-sig entry
MULTISIG_MIN_ROSTER = 2  # smallest roster accepted for multi-sig addresses
MULTISIG_MAX_ROSTER = 255  # roster size must fit in the one-byte position tag


# =============================================================================
# 5. BATCH VERIFICATION
# =============================================================================
BATCH_MAX_WORKERS = min(32, (os.cpu_count() or 1) + 4)  # thread pool size for verify_batch


# =============================================================================
# 6. EMISSION REPORT
# =============================================================================
UNIT            = 100_000_000  # atomic units per coin
BLOCKS_PER_YEAR = 87_661  # sidereal year at one block every 6 minutes
MINT_END_LINE   = 3 * UNIT  # minting stops once the block award drops below 3 coins
DEFAULT_BASE    = 40  # default initial award per block (coins) for the report CLI
DEFAULT_RATE    = 900  # default yearly decay in per-mille (900 = keep 90%)


# =============================================================================
# 7. LOGGING
# =============================================================================
# ---- BASE OUTPUT ----
LOG_DIR              = os.path.join(DATA_DIR, "logging")  # per-user log folder
LOG_PATH             = os.path.join(LOG_DIR, "scriptauth.log")  # canonical log file path before format-specific override
LOG_SHOW_PROCESS     = False  # include process metadata in log context when True
LOG_PROC_PLACEHOLDER = "-"  # value used when process info is hidden

# ---- MODE PROFILES ----
if IS_DEV:
    # ---- DEV PROFILE ----
    LOG_LEVEL                   = "TRACE"  # very verbose logging for development
    LOG_FORMAT                  = "plain"  # plain text logs ease local debugging
    LOG_TO_CONSOLE              = True  # mirror logs to stdout for dev loops
    LOG_RATE_LIMIT_SECONDS      = 0.0  # disable console throttling in dev
    LOG_FILE_RATE_LIMIT_SECONDS = 0.0  # disable file throttling in dev
    LOG_ROTATE_MAX_BYTES        = 5_000_000  # rollover log files after ~5MB in dev
    LOG_BACKUP_COUNT            = 3  # retain a few rotated dev log files
else:
    # ---- PROD PROFILE ----
    LOG_LEVEL                   = "INFO"  # balanced verbosity for production
    LOG_FORMAT                  = "json"  # JSON logs simplify ingestion in prod
    LOG_TO_CONSOLE              = False  # suppress console spam for daemons
    LOG_RATE_LIMIT_SECONDS      = 2.0  # throttle console spam in prod
    LOG_FILE_RATE_LIMIT_SECONDS = 1.0  # throttle file spam in prod
    LOG_ROTATE_MAX_BYTES        = 10_000_000  # rollover log files after ~10MB in prod
    LOG_BACKUP_COUNT            = 7  # keep more history on production nodes

# ---- LOG PATH NORMALIZATION ----
_LOG_BASE = os.path.join(LOG_DIR, "scriptauth")  # base path used to pick extension
if str(LOG_FORMAT).lower().strip() == "json":
    LOG_PATH = _LOG_BASE + ".jsonl"  # JSON lines extension to aid parsing
else:
    LOG_PATH = _LOG_BASE + ".log"  # plain-text log extension
