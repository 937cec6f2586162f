"""
Unit tests for Core Crypto modules.

Tests:
- Number theory (mod_exp, gcd, inverse, Miller-Rabin)
- Prime generation
- Encoding
"""

import random

import pytest
from sympy import isprime

from pubkeylab.core_crypto.number_theory import (
    mod_exp, gcd, extended_gcd, mod_inverse, is_probably_prime
)
from pubkeylab.core_crypto.primes import get_prime, PrimeGenerator
from pubkeylab.core_crypto.encoding import (
    ALPHABET, Encoder, char_to_code, code_to_char, chars_to_number,
    number_to_chars, char_to_bits, bits_to_char, normalize_message,
    split_blocks, tokenize_cipher_text, parse_cipher_tokens,
)
from pubkeylab.errors import InputError, KeyGenerationError, PrimeRangeExhausted


class TestNumberTheory:
    """Unit tests for modular arithmetic helpers."""

    @pytest.mark.parametrize("base,exp,mod,expected", [
        (2, 10, 1000, 24),
        (3, 7, 13, 3),
        (5, 117, 19, 1),
        (7, 0, 13, 1),
        (0, 5, 13, 0),
    ])
    def test_mod_exp(self, base, exp, mod, expected):
        """Square-and-multiply matches known values."""
        assert mod_exp(base, exp, mod) == expected

    def test_mod_exp_textbook_rsa(self):
        """65^17 mod 3233 = 2790 and back with d = 2753."""
        assert mod_exp(65, 17, 3233) == 2790
        assert mod_exp(2790, 2753, 3233) == 65

    def test_mod_exp_matches_builtin(self):
        """Large operands agree with pow()."""
        rng = random.Random(1)
        for _ in range(20):
            b, e, m = rng.getrandbits(200), rng.getrandbits(100), rng.getrandbits(150) | 1
            assert mod_exp(b, e, m) == pow(b, e, m)

    def test_mod_exp_modulus_one(self):
        assert mod_exp(5, 3, 1) == 0

    def test_mod_exp_rejects_negative_exponent(self):
        with pytest.raises(ValueError):
            mod_exp(2, -1, 7)

    def test_mod_exp_rejects_bad_modulus(self):
        with pytest.raises(ValueError):
            mod_exp(2, 3, 0)

    def test_gcd(self):
        assert gcd(48, 18) == 6
        assert gcd(17, 3120) == 1
        assert gcd(-12, 8) == 4

    def test_extended_gcd_identity(self):
        """a*x + b*y equals gcd(a, b)."""
        for a, b in [(240, 46), (17, 3120), (99, 78), (5, 0)]:
            g, x, y = extended_gcd(a, b)
            assert g == gcd(a, b)
            assert a * x + b * y == g

    def test_mod_inverse(self):
        assert mod_inverse(17, 3120) == 2753
        assert mod_inverse(53, 120) == 77
        assert (17 * mod_inverse(17, 43)) % 43 == 1

    def test_mod_inverse_missing(self):
        """No inverse when gcd != 1."""
        with pytest.raises(ValueError):
            mod_inverse(6, 9)

    def test_miller_rabin_against_sympy(self):
        """Agrees with sympy on every n below 3000."""
        rng = random.Random(5)
        for n in range(3000):
            assert is_probably_prime(n, rng=rng) == isprime(n), n

    def test_miller_rabin_carmichael(self):
        """Carmichael numbers are composite."""
        for n in (561, 1105, 1729, 2465, 2821, 6601, 8911):
            assert not is_probably_prime(n, rng=random.Random(0))


class TestPrimeGenerator:
    """Unit tests for bounded prime generation."""

    def test_prime_in_range(self):
        rng = random.Random(11)
        for _ in range(20):
            p = get_prime(100, 200, rng)
            assert 100 <= p <= 200
            assert isprime(p)

    def test_large_range(self):
        p = get_prime(10 ** 6, 10 ** 7, random.Random(3))
        assert 10 ** 6 <= p <= 10 ** 7
        assert isprime(p)

    def test_single_prime_range(self):
        assert get_prime(2, 2) == 2
        assert get_prime(13, 13) == 13

    @pytest.mark.parametrize("low,high", [(4, 4), (1, 1), (24, 28), (10, 5)])
    def test_empty_range_fails(self, low, high):
        """Ranges without primes fail instead of looping."""
        with pytest.raises(PrimeRangeExhausted):
            get_prime(low, high, random.Random(0))

    def test_exhaustion_is_key_generation_error(self):
        with pytest.raises(KeyGenerationError):
            get_prime(4, 4)

    def test_attempt_budget(self):
        """A tiny budget over a prime-free range gives up after sampling."""
        with pytest.raises(PrimeRangeExhausted) as exc_info:
            get_prime(24, 28, random.Random(0), max_attempts=2)
        assert exc_info.value.attempts == 2

    def test_seeded_reproducible(self):
        a = get_prime(1, 10000, random.Random(42))
        b = get_prime(1, 10000, random.Random(42))
        assert a == b

    def test_generator_object(self):
        gen = PrimeGenerator(random.Random(9), max_attempts=500)
        p = gen.get_prime(1000, 2000)
        assert 1000 <= p <= 2000
        assert gen.is_prime(p)
        assert gen.max_attempts == 500


class TestEncoding:
    """Unit tests for the radix-36 encoder."""

    def test_char_codes(self):
        assert char_to_code("0") == 0
        assert char_to_code("9") == 9
        assert char_to_code("A") == 10
        assert char_to_code("Z") == 35

    def test_case_insensitive(self):
        assert char_to_code("z") == char_to_code("Z")

    @pytest.mark.parametrize("ch", ["!", " ", "", "AB", "é"])
    def test_invalid_character(self, ch):
        with pytest.raises(InputError) as exc_info:
            char_to_code(ch)
        assert exc_info.value.token == ch

    def test_code_to_char(self):
        assert code_to_char(10) == "A"
        with pytest.raises(InputError):
            code_to_char(36)

    def test_chars_to_number(self):
        assert chars_to_number("A", "B") == 10 * 36 + 11
        assert chars_to_number("1", "T") == 65
        assert chars_to_number("Z", "Z") == 1295

    def test_number_to_chars(self):
        assert number_to_chars(371) == ("A", "B")
        assert number_to_chars(0) == ("0", "0")

    def test_number_to_chars_out_of_range(self):
        with pytest.raises(InputError):
            number_to_chars(1296)

    def test_char_to_bits_msb_first(self):
        assert char_to_bits("A", 6) == (0, 0, 1, 0, 1, 0)
        assert char_to_bits("Z", 6) == (1, 0, 0, 0, 1, 1)

    def test_bits_to_char(self):
        assert bits_to_char((0, 0, 1, 0, 1, 0)) == "A"

    def test_bits_do_not_fit(self):
        """Codes 32-35 need six bits."""
        assert char_to_bits("V", 5) == (1, 1, 1, 1, 1)
        with pytest.raises(InputError):
            char_to_bits("W", 5)

    def test_bits_out_of_alphabet(self):
        with pytest.raises(InputError):
            bits_to_char((1, 1, 1, 1, 1, 1))

    def test_normalize_message(self):
        assert normalize_message("Hello, World! 42") == "HELLOWORLD42"
        assert normalize_message("...") == ""

    def test_split_blocks_pads(self):
        assert split_blocks("HELLO") == ["HE", "LL", "OX"]
        assert split_blocks("HEY1") == ["HE", "Y1"]
        assert split_blocks("") == []

    def test_tokenize(self):
        assert tokenize_cipher_text(" 12, 34\n56 ") == ["12", "34", "56"]
        assert tokenize_cipher_text("(12, 34)") == ["12", "34"]
        assert tokenize_cipher_text("") == []

    def test_parse_tokens(self):
        assert parse_cipher_tokens(["12", "0034"]) == [12, 34]

    def test_parse_tokens_rejects_letters(self):
        with pytest.raises(InputError) as exc_info:
            parse_cipher_tokens(["12", "ab"])
        assert exc_info.value.token == "ab"
        assert exc_info.value.position == 1

    def test_encoder_object(self):
        enc = Encoder()
        assert enc.radix == 36
        assert enc.alphabet == ALPHABET
        assert enc.number_to_chars(enc.chars_to_number("Q", "7")) == ("Q", "7")
