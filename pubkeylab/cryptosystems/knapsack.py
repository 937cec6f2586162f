"""
Knapsack (Merkle-Hellman) Cryptosystem

Private key (S, m, a), public key W:

- S   superincreasing sequence: every term exceeds the sum of those before it
- m   modulus, larger than sum(S)
- a   prime multiplier with gcd(a, m) = 1
- W   W[i] = S[i] * a mod m, the disguised sequence
- z   a^-1 mod m, recomputed from a and m on every decryption

One character per block: its code is written as weight_count bits (most
significant bit first, matching W[0]) and the cipher value is the sum of
the W terms whose bit is set. Decryption maps the value back with z and
recovers the bits greedily from the largest S term down.

The default weight count is 6 so all 36 codes (0-35) fit; with 5 weights
only codes 0-31 can be encrypted and 'W'..'Z' are rejected.
"""

from dataclasses import dataclass, replace
from typing import Dict, List, Sequence, Tuple

from ..core_crypto.encoding import (
    bits_to_char, char_to_bits, normalize_message, parse_cipher_tokens,
    tokenize_cipher_text,
)
from ..core_crypto.number_theory import gcd, mod_inverse
from ..core_crypto.primes import DEFAULT_MAX_ATTEMPTS, PrimeGenerator
from ..errors import (
    FormatError, InputError, KeyGenerationError, KeyParseError, NoModularInverse,
)
from .base import Cryptosystem, format_key_list, parse_key_int, parse_key_list


DEFAULT_WEIGHT_COUNT = 6


def is_superincreasing(sequence: Sequence[int]) -> bool:
    """True if every term is strictly greater than the sum of the preceding terms."""
    total = 0
    for term in sequence:
        if term <= total:
            return False
        total += term
    return True


@dataclass(frozen=True)
class KnapsackKeys:
    """Immutable Knapsack key set."""
    s: Tuple[int, ...] = ()
    m: int = 0
    a: int = 0
    w: Tuple[int, ...] = ()

    @property
    def weight_count(self) -> int:
        return len(self.w)

    @property
    def z(self) -> int:
        """a^-1 mod m; ValueError if a and m share a factor."""
        return mod_inverse(self.a, self.m)

    @property
    def ready(self) -> bool:
        return bool(self.w)

    def export(self) -> Dict[str, str]:
        has_inverse = self.m > 0 and gcd(self.a, self.m) == 1
        return {
            'S': format_key_list(self.s),
            'm': str(self.m),
            'a': str(self.a),
            'W': format_key_list(self.w),
            'z': str(self.z) if has_inverse else "",
        }


def generate_superincreasing(max_value: int, weight_count: int, rng,
                             max_attempts: int = DEFAULT_MAX_ATTEMPTS) -> Tuple[int, ...]:
    """
    Build a superincreasing sequence of weight_count terms.

    Each raw value is sampled from max_value.bit_length() random bits and
    accepted when it lies in [1, max_value // weight_count]. The term is the
    value plus a running total, and the total then doubles, so every term is
    at least twice the previous one.

    Raises:
        KeyGenerationError: If the gap is empty or sampling runs out of attempts
    """
    gap = max_value // weight_count
    if gap < 1:
        raise KeyGenerationError(
            f"max_value {max_value} is too small for {weight_count} weights"
        )

    bit_length = max_value.bit_length()
    sequence = []
    total = 0

    for _ in range(weight_count):
        for _ in range(max_attempts):
            value = rng.getrandbits(bit_length)
            if 1 <= value <= gap:
                break
        else:
            raise KeyGenerationError(
                f"No superincreasing term found in [1, {gap}] after {max_attempts} attempts"
            )

        sequence.append(value + total)
        total = 2 * (total + value)

    return tuple(sequence)


def generate_knapsack_keys(max_value: int, weight_count: int, primes: PrimeGenerator,
                           max_attempts: int = DEFAULT_MAX_ATTEMPTS) -> KnapsackKeys:
    """
    Generate a Knapsack key set in the order S, m, a, W.

    Raises:
        KeyGenerationError: If S or a cannot be found within the attempt budget
    """
    rng = primes.rng

    s = generate_superincreasing(max_value, weight_count, rng, max_attempts)

    # m > sum(S)
    m = sum(s) + 1 + rng.getrandbits(weight_count + 1)

    for _ in range(max_attempts):
        a = primes.get_prime(2, max_value)
        if gcd(a, m) == 1:
            break
    else:
        raise NoModularInverse(
            f"No multiplier coprime to {m} after {max_attempts} attempts"
        )

    w = tuple((term * a) % m for term in s)

    return KnapsackKeys(s=s, m=m, a=a, w=w)


class Knapsack(Cryptosystem):
    """
    Merkle-Hellman knapsack over single characters.

    Example:
        >>> knapsack = Knapsack(generate=False)
        >>> knapsack.set_private_keys("120", "53", "2, 3, 7, 14, 30, 57")
        >>> knapsack.set_public_keys("106, 39, 11, 22, 30, 21")
        >>> knapsack.encrypt("A").text
        '41'
    """

    algorithm = "Knapsack"

    def __init__(self, *args, weight_count: int = DEFAULT_WEIGHT_COUNT, **kwargs):
        """
        Args:
            weight_count: Number of terms in S and W (bits per character)
            *args, **kwargs: See Cryptosystem
        """
        if weight_count < 1:
            raise ValueError("weight_count must be at least 1")
        self._weight_count = weight_count
        super().__init__(*args, **kwargs)

    @property
    def weight_count(self) -> int:
        """Weight count used by the next generate_keys()."""
        return self._weight_count

    @weight_count.setter
    def weight_count(self, value: int) -> None:
        if value < 1:
            raise ValueError("weight_count must be at least 1")
        self._weight_count = value

    def _generate(self) -> KnapsackKeys:
        return generate_knapsack_keys(
            self.max_value, self._weight_count, self._primes, self._max_attempts
        )

    # ========================================================================
    # Key Import
    # ========================================================================

    def set_private_keys(self, m, a, S) -> None:
        """
        Import the private keys m, a and the superincreasing set S.

        Raises:
            KeyParseError: If a value is malformed, S is not superincreasing,
                m does not exceed sum(S), or a has no inverse mod m
        """
        m = parse_key_int(m, "m")
        a = parse_key_int(a, "a")
        s = tuple(parse_key_list(S, "S"))

        if not is_superincreasing(s):
            raise KeyParseError("Key S must be a superincreasing sequence", field="S")
        if m <= sum(s):
            raise KeyParseError(f"Key m must be greater than sum(S) = {sum(s)}", field="m")
        if gcd(a, m) != 1:
            raise KeyParseError(f"Key a must be coprime to m = {m}", field="a")

        keys = replace(self._keys or KnapsackKeys(), s=s, m=m, a=a)
        self._install_keys(keys, "private", ["m", "a", "S"])

    def set_public_keys(self, W) -> None:
        """
        Import the public key W.

        Raises:
            KeyParseError: If any term is malformed
        """
        keys = replace(self._keys or KnapsackKeys(), w=tuple(parse_key_list(W, "W")))
        self._install_keys(keys, "public", ["W"])

    # ========================================================================
    # Block Operations
    # ========================================================================

    def encrypt_bits(self, bits: Sequence[int]) -> int:
        """Sum of W[i] for every set bit i."""
        return sum(weight for weight, bit in zip(self._keys.w, bits) if bit)

    def decrypt_value(self, value: int, z: int) -> Tuple[Tuple[int, ...], int]:
        """
        Recover the bit tuple of one cipher value.

        Returns:
            (bits, remainder); remainder is 0 for a genuine cipher value
        """
        keys = self._keys
        total = (value * z) % keys.m
        bits = [0] * len(keys.s)

        for i in range(len(keys.s) - 1, -1, -1):
            if total >= keys.s[i]:
                bits[i] = 1
                total -= keys.s[i]

        return tuple(bits), total

    def _check_weights(self) -> None:
        keys = self._keys
        if keys.s and len(keys.s) != len(keys.w):
            raise FormatError(
                f"Weight of S key ({len(keys.s)}) and weight of W key "
                f"({len(keys.w)}) are different"
            )

    def _encrypt_blocks(self, message: str) -> List[str]:
        self._check_weights()
        width = self._keys.weight_count
        result = []

        for position, ch in enumerate(normalize_message(message)):
            try:
                bits = char_to_bits(ch, width)
            except InputError as exc:
                raise InputError(str(exc), token=ch, position=position) from exc
            result.append(str(self.encrypt_bits(bits)))

        return result

    def _decrypt_blocks(self, cipher_text: str) -> List[str]:
        if not self._keys.s or not self._keys.m:
            raise RuntimeError("Private keys S, m and a are required to decrypt.")
        self._check_weights()
        z = self._keys.z
        tokens = tokenize_cipher_text(cipher_text)
        values = parse_cipher_tokens(tokens)
        result = []

        for position, value in enumerate(values):
            token = tokens[position]
            bits, remainder = self.decrypt_value(value, z)
            if remainder:
                raise InputError(
                    f"Cipher token {token} is not a sum of public key weights",
                    token=token, position=position
                )
            try:
                result.append(bits_to_char(bits))
            except InputError as exc:
                raise InputError(
                    f"Cipher token {token} does not decrypt to a character",
                    token=token, position=position
                ) from exc

        return result
