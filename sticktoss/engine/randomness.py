"""
Randomization policy shared by the team generator.

The generator consults randomness at three points only:
- shuffling unconstrained players before the weight sort
- choosing which teams a separate group lands on
- breaking ties between equally loaded teams

A RandomSource is passed into generate_teams() explicitly so tests can pin
a seed. The process-wide default is guarded by a lock so concurrent request
threads can share it; no ordering between calls is promised.
"""

import random
import threading
from typing import List, MutableSequence, Optional

from sticktoss.config.settings import get_settings


class RandomSource:
    def __init__(self, seed: Optional[int] = None):
        self._rng = random.Random(seed)
        self._lock = threading.Lock()

    def shuffle(self, seq: MutableSequence) -> None:
        """Shuffle seq in place."""
        with self._lock:
            self._rng.shuffle(seq)

    def permutation(self, n: int) -> List[int]:
        """Uniformly shuffled list of 0..n-1."""
        indices = list(range(n))
        self.shuffle(indices)
        return indices

    def choice_index(self, n: int) -> int:
        """Uniform index in [0, n)."""
        if n <= 0:
            raise ValueError("choice_index requires n >= 1")
        with self._lock:
            return self._rng.randrange(n)


_default_source: Optional[RandomSource] = None
_default_lock = threading.Lock()


def default_random_source() -> RandomSource:
    global _default_source
    with _default_lock:
        if _default_source is None:
            _default_source = RandomSource(get_settings().random_seed)
        return _default_source
