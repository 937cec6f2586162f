"""
RSA Cryptosystem

Public key (n, e), private key (p, q, d):

- p, q   distinct primes drawn from [2, max_value]
- n      p * q, larger than any two-character block (1295)
- m      (p-1)(q-1), derived, never exported
- e      prime in [3, n-1] with gcd(e, m) = 1
- d      e^-1 mod m

Messages are encrypted two characters at a time (radix-36 block values),
padding an odd-length message with 'X'. Cipher text is one decimal number
per line.
"""

from dataclasses import dataclass, replace
from typing import Dict, List

from ..core_crypto.encoding import (
    MAX_BLOCK_VALUE, chars_to_number, normalize_message, parse_cipher_tokens,
    split_blocks, tokenize_cipher_text,
)
from ..core_crypto.number_theory import gcd, mod_exp, mod_inverse
from ..core_crypto.primes import DEFAULT_MAX_ATTEMPTS, PrimeGenerator
from ..errors import InputError, KeyGenerationError, KeyParseError, NoModularInverse
from .base import Cryptosystem, decode_pair, parse_key_int


@dataclass(frozen=True)
class RSAKeys:
    """Immutable RSA key set."""
    p: int = 0
    q: int = 0
    n: int = 0
    e: int = 0
    d: int = 0

    @property
    def m(self) -> int:
        """Euler's totient (p-1)(q-1)."""
        return (self.p - 1) * (self.q - 1)

    @property
    def public_key(self):
        return self.e, self.n

    @property
    def private_key(self):
        return self.d, self.n

    @property
    def ready(self) -> bool:
        return self.n > 1

    def export(self) -> Dict[str, str]:
        return {
            'p': str(self.p),
            'q': str(self.q),
            'n': str(self.n),
            'e': str(self.e),
            'd': str(self.d),
        }


def generate_rsa_keys(max_value: int, primes: PrimeGenerator,
                      max_attempts: int = DEFAULT_MAX_ATTEMPTS) -> RSAKeys:
    """
    Generate an RSA key set.

    Args:
        max_value: Upper bound for p and q
        primes: Prime source (carries the random generator)
        max_attempts: Retry budget for the p, q and e searches

    Returns:
        New RSAKeys

    Raises:
        KeyGenerationError: If no suitable p, q were found
        NoModularInverse: If no e coprime to m was found
    """
    if max_value * max_value <= MAX_BLOCK_VALUE:
        raise KeyGenerationError(
            f"max_value {max_value} is too small: p*q must exceed {MAX_BLOCK_VALUE}"
        )

    for _ in range(max_attempts):
        p = primes.get_prime(2, max_value)
        q = primes.get_prime(2, max_value)
        if p != q and p * q > MAX_BLOCK_VALUE:
            break
    else:
        raise KeyGenerationError(
            f"No distinct primes p, q <= {max_value} with p*q > {MAX_BLOCK_VALUE} "
            f"after {max_attempts} attempts"
        )

    n = p * q
    m = (p - 1) * (q - 1)

    for _ in range(max_attempts):
        e = primes.get_prime(3, n - 1)
        if gcd(e, m) == 1:
            break
    else:
        raise NoModularInverse(
            f"No public exponent coprime to {m} after {max_attempts} attempts"
        )

    d = mod_inverse(e, m)

    return RSAKeys(p=p, q=q, n=n, e=e, d=d)


class RSA(Cryptosystem):
    """
    RSA over two-character blocks.

    Example:
        >>> rsa = RSA(generate=False)
        >>> rsa.set_private_keys("61", "53", "2753")
        >>> rsa.set_public_keys("3233", "17")
        >>> rsa.encrypt_block(65)
        2790
        >>> rsa.decrypt_block(2790)
        65
    """

    algorithm = "RSA"

    def _generate(self) -> RSAKeys:
        return generate_rsa_keys(self.max_value, self._primes, self._max_attempts)

    # ========================================================================
    # Key Import
    # ========================================================================

    def set_private_keys(self, p, q, d) -> None:
        """
        Import the private keys p, q and d.

        Raises:
            KeyParseError: If any value is not a non-negative decimal integer
        """
        keys = replace(
            self._keys or RSAKeys(),
            p=parse_key_int(p, "p"),
            q=parse_key_int(q, "q"),
            d=parse_key_int(d, "d"),
        )
        self._install_keys(keys, "private", ["p", "q", "d"])

    def set_public_keys(self, n, e) -> None:
        """
        Import the public keys n and e.

        Raises:
            KeyParseError: If any value is not a non-negative decimal integer,
                or e is outside 1 < e < n
        """
        n = parse_key_int(n, "n")
        e = parse_key_int(e, "e")
        if not 1 < e < n:
            raise KeyParseError(f"Key e must satisfy 1 < e < n = {n}", field="e")

        keys = replace(self._keys or RSAKeys(), n=n, e=e)
        self._install_keys(keys, "public", ["n", "e"])

    # ========================================================================
    # Block Operations
    # ========================================================================

    def encrypt_block(self, value: int) -> int:
        """cipher = value^e mod n"""
        return mod_exp(value, self._keys.e, self._keys.n)

    def decrypt_block(self, cipher: int) -> int:
        """value = cipher^d mod n"""
        return mod_exp(cipher, self._keys.d, self._keys.n)

    def _encrypt_blocks(self, message: str) -> List[str]:
        n = self._keys.n
        result = []

        for position, block in enumerate(split_blocks(normalize_message(message))):
            value = chars_to_number(block[0], block[1])
            if value >= n:
                raise InputError(
                    f"Block {block!r} (value {value}) is not smaller than the modulus {n}",
                    token=block, position=position
                )
            result.append(str(self.encrypt_block(value)))

        return result

    def _decrypt_blocks(self, cipher_text: str) -> List[str]:
        tokens = tokenize_cipher_text(cipher_text)
        values = parse_cipher_tokens(tokens)

        return [
            decode_pair(self.decrypt_block(value), tokens[position], position)
            for position, value in enumerate(values)
        ]
