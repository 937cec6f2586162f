"""
Exception hierarchy shared by the encoder, the prime generator and the
cryptosystems.

InputError and FormatError describe bad message or cipher text and are turned
into OperationResult values at the encrypt/decrypt boundary. KeyGenerationError
and KeyParseError abort key setup or key import.
"""

from typing import Optional


class CryptosystemError(Exception):
    """Base class for all pubkeylab errors."""
    pass


class TextError(CryptosystemError):
    """Base for errors tied to a token of a message or cipher text."""

    def __init__(self, message: str, token: Optional[str] = None,
                 position: Optional[int] = None):
        super().__init__(message)
        self.token = token
        self.position = position


class InputError(TextError):
    """
    Raised when a message or cipher text holds characters or tokens outside
    the expected alphabet.
    """
    pass


class FormatError(TextError):
    """Raised when cipher text is structurally wrong (e.g. odd token count)."""
    pass


class KeyGenerationError(CryptosystemError):
    """Raised when key generation runs out of attempts."""
    pass


class PrimeRangeExhausted(KeyGenerationError):
    """Raised when no prime was found in the requested range."""

    def __init__(self, low: int, high: int, attempts: int):
        super().__init__(
            f"No prime found in [{low}, {high}] after {attempts} attempts"
        )
        self.low = low
        self.high = high
        self.attempts = attempts


class NoModularInverse(KeyGenerationError):
    """Raised when no candidate key with a modular inverse could be found."""
    pass


class KeyParseError(CryptosystemError, ValueError):
    """Raised when an imported key string is malformed or inconsistent."""

    def __init__(self, message: str, field: Optional[str] = None):
        super().__init__(message)
        self.field = field
