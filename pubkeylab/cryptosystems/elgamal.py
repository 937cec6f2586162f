"""
ElGamal Cryptosystem

Public key (p, g, r), private key (a, k):

- a   secret exponent in [1, max_value)
- p   prime in [1296, max_value], so every two-character block is below p
- k   ephemeral key in [1, p); when unset a fresh k is drawn for every block
- g   base in [1, p)
- r   g^a mod p

Each block is encrypted to the pair

    c1 = g^k mod p
    c2 = (r^k mod p) * block mod p

written as one line "c1, c2". Decryption inverts c1 with Fermat's little
theorem, s = c1^(p-2) mod p, then block = c2 * s^a mod p. Only a is needed
to decrypt, whichever k encrypted the block.
"""

from dataclasses import dataclass, replace
from typing import Dict, List, Optional, Tuple

from ..core_crypto.encoding import (
    MAX_BLOCK_VALUE, chars_to_number, normalize_message, parse_cipher_tokens,
    split_blocks, tokenize_cipher_text,
)
from ..core_crypto.number_theory import mod_exp
from ..core_crypto.primes import PrimeGenerator
from ..errors import FormatError, InputError, KeyParseError, PrimeRangeExhausted
from .base import Cryptosystem, decode_pair, parse_key_int


MIN_MODULUS = MAX_BLOCK_VALUE + 1


@dataclass(frozen=True)
class ElGamalKeys:
    """Immutable ElGamal key set. k is None in random-per-block mode."""
    a: int = 0
    p: int = 0
    g: int = 0
    r: int = 0
    k: Optional[int] = None

    @property
    def random_k(self) -> bool:
        return self.k is None

    @property
    def ready(self) -> bool:
        return self.p > 2

    def export(self) -> Dict[str, str]:
        return {
            'a': str(self.a),
            'k': "" if self.k is None else str(self.k),
            'p': str(self.p),
            'g': str(self.g),
            'r': str(self.r),
        }


def generate_elgamal_keys(max_value: int, primes: PrimeGenerator) -> ElGamalKeys:
    """
    Generate an ElGamal key set in the order a, p, k, g, r.

    Args:
        max_value: Upper bound for a and p
        primes: Prime source (carries the random generator)

    Returns:
        New ElGamalKeys with a fixed ephemeral key k

    Raises:
        PrimeRangeExhausted: If no prime p fits in [1296, max_value]
    """
    if max_value < MIN_MODULUS:
        raise PrimeRangeExhausted(MIN_MODULUS, max_value, 0)

    rng = primes.rng

    a = rng.randrange(1, max_value)
    p = primes.get_prime(MIN_MODULUS, max_value)
    k = rng.randrange(1, p)
    g = rng.randrange(1, p)
    r = mod_exp(g, a, p)

    return ElGamalKeys(a=a, p=p, g=g, r=r, k=k)


class ElGamal(Cryptosystem):
    """
    ElGamal over two-character blocks.

    Example:
        >>> elgamal = ElGamal(generate=False)
        >>> elgamal.set_public_keys("2579", "2", "949")
        >>> elgamal.set_private_keys("765", "853")
        >>> elgamal.encrypt_block(1000)[0]
        435
    """

    algorithm = "ElGamal"

    def _generate(self) -> ElGamalKeys:
        return generate_elgamal_keys(self.max_value, self._primes)

    # ========================================================================
    # Key Import
    # ========================================================================

    def set_private_keys(self, a, k="") -> None:
        """
        Import the private keys a and k.

        A blank k switches to random-per-block mode.

        Raises:
            KeyParseError: If a value is not a non-negative decimal integer,
                or k is outside [1, p) for the p currently held
        """
        if k is None or (isinstance(k, str) and not k.strip()):
            ephemeral = None
        else:
            ephemeral = parse_key_int(k, "k")
            p = self._keys.p if self._keys else 0
            if ephemeral < 1 or (p and ephemeral >= p):
                bound = f"p = {p}" if p else "p"
                raise KeyParseError(f"Key k must satisfy 1 <= k < {bound}", field="k")

        keys = replace(
            self._keys or ElGamalKeys(),
            a=parse_key_int(a, "a"),
            k=ephemeral,
        )
        self._install_keys(keys, "private", ["a", "k"])

    def set_public_keys(self, p, g, r) -> None:
        """
        Import the public keys p, g and r.

        Raises:
            KeyParseError: If any value is not a non-negative decimal integer
        """
        keys = replace(
            self._keys or ElGamalKeys(),
            p=parse_key_int(p, "p"),
            g=parse_key_int(g, "g"),
            r=parse_key_int(r, "r"),
        )
        self._install_keys(keys, "public", ["p", "g", "r"])

    # ========================================================================
    # Block Operations
    # ========================================================================

    def encrypt_block(self, value: int, k: Optional[int] = None) -> Tuple[int, int]:
        """
        Encrypt one block value.

        Args:
            value: Block value, smaller than p
            k: Ephemeral key; defaults to the fixed k, or a fresh random one

        Returns:
            (c1, c2)
        """
        keys = self._keys
        if k is None:
            k = keys.k if keys.k is not None else self._rng.randrange(1, keys.p)

        c1 = mod_exp(keys.g, k, keys.p)
        c2 = (mod_exp(keys.r, k, keys.p) * value) % keys.p
        return c1, c2

    def decrypt_block(self, c1: int, c2: int) -> int:
        """block = c2 * (c1^(p-2))^a mod p"""
        keys = self._keys
        s = mod_exp(c1, keys.p - 2, keys.p)
        plain = mod_exp(s, keys.a, keys.p)
        return (c2 * plain) % keys.p

    def _encrypt_blocks(self, message: str) -> List[str]:
        p = self._keys.p
        result = []

        for position, block in enumerate(split_blocks(normalize_message(message))):
            value = chars_to_number(block[0], block[1])
            if value >= p:
                raise InputError(
                    f"Block {block!r} (value {value}) is not smaller than the modulus {p}",
                    token=block, position=position
                )
            c1, c2 = self.encrypt_block(value)
            result.append(f"{c1}, {c2}")

        return result

    def _decrypt_blocks(self, cipher_text: str) -> List[str]:
        tokens = tokenize_cipher_text(cipher_text)

        if len(tokens) % 2:
            raise FormatError(
                "Invalid cipher text format. Each block must be a pair: 1234, 5678",
                token=tokens[-1], position=len(tokens) - 1
            )

        values = parse_cipher_tokens(tokens)
        result = []

        for i in range(0, len(values), 2):
            plain = self.decrypt_block(values[i], values[i + 1])
            result.append(decode_pair(plain, f"{tokens[i]}, {tokens[i + 1]}", i // 2))

        return result
