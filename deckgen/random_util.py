"""Seeded RNG helpers for reproducible generation runs.

Each call returns an independent random.Random, so concurrent generation
requests never share a stream.
"""
from __future__ import annotations

import hashlib
import random
from typing import Union

SeedLike = Union[int, str]


def derive_seed_from_string(seed: SeedLike) -> int:
    """Stable non-negative 63-bit seed from an int or any string.

    Strings are hashed with SHA-256 so the same text seeds the same run on
    every platform.
    """
    if isinstance(seed, int):
        return abs(int(seed)) & ((1 << 63) - 1)
    digest = hashlib.sha256(str(seed).encode("utf-8", errors="ignore")).digest()
    return int.from_bytes(digest[:8], byteorder="big", signed=False) & ((1 << 63) - 1)


def set_seed(seed: SeedLike) -> random.Random:
    """Return a new Random instance seeded from `seed`."""
    rng = random.Random()
    rng.seed(derive_seed_from_string(seed))
    return rng
