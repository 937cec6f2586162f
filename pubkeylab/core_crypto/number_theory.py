"""
Number Theory Helpers

Modular arithmetic shared by RSA, ElGamal and Knapsack, on plain Python
ints: square-and-multiply exponentiation, gcd and its extended form,
modular inverses and a seedable Miller-Rabin test.
"""

import random
from typing import Optional, Tuple


MILLER_RABIN_ROUNDS = 20
SMALL_PRIMES = (2, 3, 5, 7, 11, 13, 17, 19, 23, 29, 31, 37, 41, 43, 47)


def mod_exp(base: int, exponent: int, modulus: int) -> int:
    """
    Compute base^exponent mod modulus by left-to-right square-and-multiply.

    Used for every block transform (RSA c = m^e, ElGamal c1 = g^k and
    s = c1^(p-2)) and inside Miller-Rabin.

    Raises:
        ValueError: If exponent < 0 or modulus <= 0
    """
    if exponent < 0:
        raise ValueError("Exponent must be non-negative")
    if modulus <= 0:
        raise ValueError("Modulus must be positive")

    base %= modulus
    result = 1 % modulus

    for bit in bin(exponent)[2:]:
        result = (result * result) % modulus
        if bit == "1":
            result = (result * base) % modulus

    return result


def gcd(a: int, b: int) -> int:
    a, b = abs(a), abs(b)
    while b:
        a, b = b, a % b
    return a


def extended_gcd(a: int, b: int) -> Tuple[int, int, int]:
    """
    Extended Euclidean Algorithm.

    Finds integers x, y such that: a*x + b*y = gcd(a, b)

    Iterative so that key material of any size stays clear of the
    recursion limit.

    Returns:
        Tuple (gcd, x, y) where a*x + b*y = gcd
    """
    old_r, r = a, b
    old_x, x = 1, 0
    old_y, y = 0, 1

    while r:
        quotient = old_r // r
        old_r, r = r, old_r - quotient * r
        old_x, x = x, old_x - quotient * x
        old_y, y = y, old_y - quotient * y

    return old_r, old_x, old_y


def mod_inverse(a: int, m: int) -> int:
    """
    Return z with (a * z) % m == 1, e.g. RSA d from e or Knapsack z from a.

    Raises:
        ValueError: If m <= 0 or gcd(a, m) != 1
    """
    if m <= 0:
        raise ValueError("Modulus must be positive")

    divisor, coefficient, _ = extended_gcd(a % m, m)
    if divisor != 1:
        raise ValueError(f"{a} has no inverse modulo {m} (gcd is {divisor})")
    return coefficient % m


def is_probably_prime(n: int, rounds: int = MILLER_RABIN_ROUNDS,
                      rng: Optional[random.Random] = None) -> bool:
    """
    Miller-Rabin test after trial division by SMALL_PRIMES.

    Witnesses come from rng so a seeded PrimeGenerator repeats its
    choices; a composite survives with probability at most 4^-rounds.
    """
    if n < 2:
        return False

    for p in SMALL_PRIMES:
        if n == p:
            return True
        if n % p == 0:
            return False

    rng = rng or random.Random()

    # Write n-1 as 2^r * d
    r, d = 0, n - 1
    while d % 2 == 0:
        r += 1
        d //= 2

    for _ in range(rounds):
        a = rng.randint(2, n - 2)
        x = mod_exp(a, d, n)

        if x == 1 or x == n - 1:
            continue

        composite = True
        for _ in range(r - 1):
            x = mod_exp(x, 2, n)
            if x == n - 1:
                composite = False
                break

        if composite:
            return False

    return True
