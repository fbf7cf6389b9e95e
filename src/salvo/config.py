"""Central configuration for runtime-tunable parameters.

Constants can be overridden via environment variables so that the engine runs
with production-strength settings by default, while the automated test-suite
and the simulation CLI can dial specific costs down when needed.
"""

from __future__ import annotations

import os

# ===========================================================================
# Game Constants
# ===========================================================================
# The board is always 10x10; coordinates run 0..9 on both axes.
BOARD_SIZE: int = 10

# Required fleet: (class tag, length, count). Both players must submit exactly
# this multiset of ships.
FLEET_COMPOSITION = [
    ("huge", 4, 1),
    ("large", 3, 2),
    ("medium", 2, 3),
    ("small", 1, 4),
]


# ===========================================================================
# Password Hashing
# ===========================================================================
# SALVO_SCRYPT_N: scrypt CPU/memory cost. Must be a power of two above 1.
#   Defaults to 2**14. Tests use a much smaller value.
#   Example: export SALVO_SCRYPT_N=1024
SCRYPT_N: int = int(os.getenv("SALVO_SCRYPT_N", str(2**14)))

# SALVO_SCRYPT_R: scrypt block size. Defaults to 8.
SCRYPT_R: int = int(os.getenv("SALVO_SCRYPT_R", "8"))

# SALVO_SCRYPT_P: scrypt parallelisation factor. Defaults to 1.
SCRYPT_P: int = int(os.getenv("SALVO_SCRYPT_P", "1"))


# ===========================================================================
# Simulation CLI
# ===========================================================================
# SALVO_SIM_GAMES: number of self-play games `salvo-sim` runs when --games is
#   not given. Defaults to 1.
SIM_GAMES: int = int(os.getenv("SALVO_SIM_GAMES", "1"))

# SALVO_SEED: seed for the simulation's random source. Empty means unseeded.
#   Example: export SALVO_SEED=42
SEED: int | None = int(os.environ["SALVO_SEED"]) if os.getenv("SALVO_SEED") else None


# ===========================================================================
# Debugging and Logging
# ===========================================================================
# SALVO_DEBUG: If "1", the CLI logs at DEBUG level (per-attack detail).
#   Defaults to "0" (disabled).
#   Example: export SALVO_DEBUG=1
DEBUG: bool = os.getenv("SALVO_DEBUG", "0") == "1"
