"""
Prime Generation

Draws a random prime from a bounded range by sampling candidates uniformly and
testing them with Miller-Rabin. The search is always bounded:

- Small ranges (no more candidates than the attempt budget) are walked in a
  random order, each candidate tested once, so a range without primes fails
  on the first call and every time after.
- Larger ranges draw at most `max_attempts` samples.

Either way an unsuccessful search raises PrimeRangeExhausted.
"""

import random
from typing import Optional

from .number_theory import is_probably_prime, MILLER_RABIN_ROUNDS
from ..errors import PrimeRangeExhausted


DEFAULT_MAX_ATTEMPTS = 1000


def get_prime(low: int, high: int, rng: Optional[random.Random] = None,
              max_attempts: int = DEFAULT_MAX_ATTEMPTS,
              rounds: int = MILLER_RABIN_ROUNDS) -> int:
    """
    Return a random prime in [low, high].

    Args:
        low: Inclusive lower bound
        high: Inclusive upper bound
        rng: Random source (a fresh one if omitted)
        max_attempts: Upper bound on candidates tested
        rounds: Miller-Rabin rounds per candidate

    Returns:
        A prime p with low <= p <= high

    Raises:
        PrimeRangeExhausted: If no prime was found
    """
    rng = rng or random.Random()

    if low > high:
        raise PrimeRangeExhausted(low, high, 0)

    size = high - low + 1

    if size <= max_attempts:
        candidates = rng.sample(range(low, high + 1), size)
        for candidate in candidates:
            if is_probably_prime(candidate, rounds, rng):
                return candidate
        raise PrimeRangeExhausted(low, high, size)

    for _ in range(max_attempts):
        candidate = rng.randint(low, high)
        if is_probably_prime(candidate, rounds, rng):
            return candidate

    raise PrimeRangeExhausted(low, high, max_attempts)


class PrimeGenerator:
    """
    Prime source bound to one random generator and attempt budget.

    Example:
        >>> gen = PrimeGenerator(random.Random(7))
        >>> p = gen.get_prime(100, 200)
        >>> 100 <= p <= 200
        True
    """

    def __init__(self, rng: Optional[random.Random] = None,
                 max_attempts: int = DEFAULT_MAX_ATTEMPTS):
        self._rng = rng or random.Random()
        self._max_attempts = max_attempts

    @property
    def rng(self) -> random.Random:
        """Random source used for sampling and witnesses."""
        return self._rng

    @property
    def max_attempts(self) -> int:
        return self._max_attempts

    def get_prime(self, low: int, high: int) -> int:
        """Random prime in [low, high]; raises PrimeRangeExhausted."""
        return get_prime(low, high, self._rng, self._max_attempts)

    def is_prime(self, n: int) -> bool:
        return is_probably_prime(n, MILLER_RABIN_ROUNDS, self._rng)

    def __repr__(self) -> str:
        return f"PrimeGenerator(max_attempts={self._max_attempts})"
