"""
Character Encoding

Maps the alphabet 0-9, A-Z (case-insensitive) onto radix-36 codes:

    '0'..'9' -> 0..9
    'A'..'Z' -> 10..35

Block codecs:
- Two characters <-> one integer (code1 * 36 + code2), used by RSA and ElGamal
- One character <-> fixed-width bit tuple, used by Knapsack

Also holds the text normalization shared by every cryptosystem. Anything
outside the alphabet raises InputError before it reaches the arithmetic.
"""

import re
from typing import List, Optional, Sequence, Tuple

from ..errors import InputError


ALPHABET = "0123456789ABCDEFGHIJKLMNOPQRSTUVWXYZ"
RADIX = len(ALPHABET)
BLOCK_SIZE = 2
MAX_BLOCK_VALUE = RADIX ** BLOCK_SIZE - 1  # 1295, largest two-character block
PAD_CHARACTER = "X"

_CODES = {ch: code for code, ch in enumerate(ALPHABET)}
_NON_ALPHANUMERIC = re.compile(r"[^A-Za-z0-9]")
_NON_CIPHER = re.compile(r"[^A-Za-z0-9,\s]")
_DECIMAL = re.compile(r"[0-9]+")


def char_to_code(ch: str, position: Optional[int] = None) -> int:
    """Radix-36 code of a single character."""
    code = _CODES.get(ch.upper()) if len(ch) == 1 else None
    if code is None:
        raise InputError(
            f"Invalid character {ch!r}: message must contain only letters and digits",
            token=ch, position=position
        )
    return code


def code_to_char(code: int) -> str:
    """Character for a radix-36 code."""
    if not 0 <= code < RADIX:
        raise InputError(
            f"Value {code} does not map to a character",
            token=str(code)
        )
    return ALPHABET[code]


def chars_to_number(c1: str, c2: str) -> int:
    """Combine two characters into one block value: code(c1) * 36 + code(c2)."""
    return char_to_code(c1) * RADIX + char_to_code(c2)


def number_to_chars(n: int) -> Tuple[str, str]:
    """Split a block value back into its two characters."""
    if not 0 <= n <= MAX_BLOCK_VALUE:
        raise InputError(
            f"Value {n} does not decode to two characters",
            token=str(n)
        )
    high, low = divmod(n, RADIX)
    return ALPHABET[high], ALPHABET[low]


def char_to_bits(ch: str, width: int) -> Tuple[int, ...]:
    """
    Write a character's code as `width` binary digits, most significant first.

    Raises:
        InputError: If the code needs more than `width` bits
    """
    code = char_to_code(ch)
    if code >= 1 << width:
        raise InputError(
            f"Character {ch!r} (value {code}) does not fit in {width} bits",
            token=ch
        )
    return tuple((code >> shift) & 1 for shift in range(width - 1, -1, -1))


def bits_to_char(bits: Sequence[int]) -> str:
    """Inverse of char_to_bits."""
    code = 0
    for bit in bits:
        code = (code << 1) | (1 if bit else 0)
    return code_to_char(code)


def normalize_message(message: str) -> str:
    """Drop every non-alphanumeric character and uppercase the rest."""
    return _NON_ALPHANUMERIC.sub("", message).upper()


def split_blocks(message: str, size: int = BLOCK_SIZE,
                 pad: str = PAD_CHARACTER) -> List[str]:
    """
    Split a message into blocks of `size` characters, padding the last block.

    Example:
        >>> split_blocks("HELLO")
        ['HE', 'LL', 'OX']
    """
    remainder = len(message) % size
    if remainder:
        message += pad * (size - remainder)
    return [message[i:i + size] for i in range(0, len(message), size)]


def tokenize_cipher_text(cipher_text: str) -> List[str]:
    """
    Split cipher text on commas and whitespace.

    Characters other than letters, digits, commas and whitespace are dropped
    first; tokens are returned unvalidated.
    """
    cleaned = _NON_CIPHER.sub("", cipher_text.strip()).replace(",", " ")
    return cleaned.split()


def parse_cipher_tokens(tokens: Sequence[str]) -> List[int]:
    """
    Convert cipher tokens to non-negative integers.

    Raises:
        InputError: On the first token that is not a decimal integer
    """
    values = []
    for position, token in enumerate(tokens):
        if not _DECIMAL.fullmatch(token):
            raise InputError(
                f"Invalid cipher text token {token!r}: "
                f"cipher text must contain only numbers",
                token=token, position=position
            )
        try:
            values.append(int(token))
        except ValueError as exc:
            raise InputError(
                f"Cipher text token at position {position} is too long to convert",
                token=token, position=position
            ) from exc
    return values


class Encoder:
    """
    Object form of the codec functions, for callers that pass an encoder around.

    Example:
        >>> enc = Encoder()
        >>> enc.chars_to_number("A", "B")
        371
        >>> enc.number_to_chars(371)
        ('A', 'B')
    """

    alphabet = ALPHABET
    radix = RADIX

    @staticmethod
    def char_to_code(ch: str) -> int:
        return char_to_code(ch)

    @staticmethod
    def code_to_char(code: int) -> str:
        return code_to_char(code)

    @staticmethod
    def chars_to_number(c1: str, c2: str) -> int:
        return chars_to_number(c1, c2)

    @staticmethod
    def number_to_chars(n: int) -> Tuple[str, str]:
        return number_to_chars(n)

    @staticmethod
    def char_to_bits(ch: str, width: int) -> Tuple[int, ...]:
        return char_to_bits(ch, width)

    @staticmethod
    def bits_to_char(bits: Sequence[int]) -> str:
        return bits_to_char(bits)
