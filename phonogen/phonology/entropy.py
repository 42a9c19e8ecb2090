#!/usr/bin/env python3
"""
Random Sources
==============
Each engine owns its random source. Seeded engines use ``random.Random`` so a
run can be replayed; unseeded engines draw from the operating system's entropy
pool through ``TrueRandom``.

Anything with ``random()``, ``randrange(n)``, ``randint(a, b)`` and
``choice(seq)`` can stand in for either, e.g. a test double that always picks
the first candidate.
"""

import hashlib
import os
import random
import secrets
import time
from typing import Any, Optional, Sequence


class TrueRandom:
    """
    Random source backed by hardware entropy.

    Mixes ``os.urandom()`` with the clock and process id into a fingerprint
    (``entropy_id``) for logging, and draws every value from
    ``secrets.SystemRandom``. It cannot be seeded or replayed.
    """

    def __init__(self):
        self._rng = secrets.SystemRandom()
        self.entropy_id = self._fingerprint()

    @staticmethod
    def _fingerprint() -> str:
        hw_entropy = int.from_bytes(os.urandom(8), 'big')
        combined = hw_entropy ^ time.time_ns() ^ (os.getpid() << 48)
        digest = hashlib.sha256(combined.to_bytes(32, 'big')).hexdigest()
        return digest[:12]

    def random(self) -> float:
        """Return random float in [0.0, 1.0)."""
        return self._rng.random()

    def randrange(self, stop: int) -> int:
        """Return random integer N such that 0 <= N < stop."""
        return self._rng.randrange(stop)

    def randint(self, a: int, b: int) -> int:
        """Return random integer N such that a <= N <= b."""
        return self._rng.randint(a, b)

    def choice(self, seq: Sequence[Any]) -> Any:
        """Return a random element from non-empty sequence."""
        if not seq:
            raise IndexError("Cannot choose from empty sequence")
        return self._rng.choice(seq)


def make_rng(seed: Optional[int] = None):
    """A replayable ``random.Random`` for a seed, or a ``TrueRandom`` without one."""
    if seed is None:
        return TrueRandom()
    return random.Random(seed)


def time_seed() -> int:
    """A seed derived from the clock, for callers that want to log and replay a run."""
    return time.time_ns() & 0xFFFFFFFF
