"""
Cryptosystem Capability Interface

Every scheme (RSA, ElGamal, Knapsack) exposes the same surface:

- generate_keys()                       -> None (KeyGenerationError)
- encrypt(message)                      -> OperationResult
- decrypt(cipher_text)                  -> OperationResult
- set_private_keys(...) / set_public_keys(...)   (KeyParseError)
- export_keys() / get_key(name)         -> decimal strings
- max_value                             -> bound on generated key magnitudes

Key material lives in an immutable dataclass. Generating or importing keys
builds a new value and swaps it in; encrypt/decrypt only read it.
"""

import random
import re
from abc import ABC, abstractmethod
from typing import Any, Dict, List, Optional, Sequence, Union

from ..core_crypto.encoding import number_to_chars
from ..core_crypto.primes import DEFAULT_MAX_ATTEMPTS, PrimeGenerator
from ..errors import InputError, KeyParseError, TextError
from ..integration.event_logger import EventLogger
from .results import OperationResult


DEFAULT_MAX_VALUE = 10000

_KEY_INTEGER = re.compile(r"[0-9]+")
_LIST_SEPARATORS = re.compile(r"[,\s]+")


# ============================================================================
# Key Parsing / Formatting
# ============================================================================

def parse_key_int(value: Union[str, int], field: str) -> int:
    """
    Parse one key field from its decimal-string form.

    Args:
        value: Decimal string (surrounding whitespace allowed) or int
        field: Field name, reported in the error

    Raises:
        KeyParseError: If the value is not a non-negative integer
    """
    if isinstance(value, bool):
        raise KeyParseError(f"Key {field} must be an integer", field=field)
    if isinstance(value, int):
        if value < 0:
            raise KeyParseError(f"Key {field} must be non-negative", field=field)
        return value

    text = str(value).strip()
    if not _KEY_INTEGER.fullmatch(text):
        raise KeyParseError(
            f"Key {field} must be a non-negative decimal integer, got {value!r}",
            field=field
        )
    try:
        return int(text)
    except ValueError as exc:
        raise KeyParseError(f"Key {field} has too many digits", field=field) from exc


def parse_key_list(value: Union[str, Sequence[int]], field: str) -> List[int]:
    """
    Parse a key list such as "2, 5, 9, 21" (commas and/or whitespace).

    Raises:
        KeyParseError: If the list is empty or any term is malformed
    """
    if isinstance(value, str):
        terms = [t for t in _LIST_SEPARATORS.split(value.strip()) if t]
    else:
        terms = list(value)

    if not terms:
        raise KeyParseError(f"Key {field} must list at least one value", field=field)

    return [parse_key_int(term, field) for term in terms]


def format_key_list(values: Sequence[int]) -> str:
    """Render a key list as "123, 234, 345"."""
    return ", ".join(str(v) for v in values)


def decode_pair(value: int, token: str, position: int) -> str:
    """
    Decode a decrypted block value to its two characters.

    Raises:
        InputError: Naming the cipher token when the value is out of range
    """
    try:
        return "".join(number_to_chars(value))
    except InputError as exc:
        raise InputError(
            f"Cipher token {token} does not decrypt to a valid block",
            token=token, position=position
        ) from exc


# ============================================================================
# Base Class
# ============================================================================

class Cryptosystem(ABC):
    """
    Base class holding the shared state and the encrypt/decrypt boundary.

    Subclasses implement key generation, key import and the per-block
    transforms; this class turns InputError / FormatError raised by those
    transforms into OperationResult values and records audit events.
    """

    algorithm = "abstract"

    def __init__(
        self,
        max_value: Union[int, str] = DEFAULT_MAX_VALUE,
        rng: Optional[random.Random] = None,
        max_attempts: int = DEFAULT_MAX_ATTEMPTS,
        event_logger: Optional[EventLogger] = None,
        generate: bool = True
    ):
        """
        Initialize the cryptosystem.

        Args:
            max_value: Bound on generated key magnitudes
            rng: Random source for all key material (seed it for repeatable keys)
            max_attempts: Retry budget for prime and inverse searches
            event_logger: Optional audit log
            generate: If True, generate a key set immediately
        """
        self._rng = rng or random.Random()
        self._max_attempts = max_attempts
        self._primes = PrimeGenerator(self._rng, max_attempts)
        self._event_logger = event_logger
        self._max_value = DEFAULT_MAX_VALUE
        self._keys: Any = None

        self.max_value = max_value

        if generate:
            self.generate_keys()

    # ========================================================================
    # Configuration
    # ========================================================================

    @property
    def max_value(self) -> int:
        """Bound on generated key magnitudes (a tuning knob, not security)."""
        return self._max_value

    @max_value.setter
    def max_value(self, value: Union[int, str]) -> None:
        parsed = parse_key_int(value, "max_value")
        if parsed < 1:
            raise KeyParseError("max_value must be positive", field="max_value")
        self._max_value = parsed

    @property
    def rng(self) -> random.Random:
        return self._rng

    @property
    def keys(self):
        """The current immutable key set."""
        return self._keys

    # ========================================================================
    # Key Lifecycle
    # ========================================================================

    def generate_keys(self) -> None:
        """
        Replace the key set with a freshly generated one.

        Raises:
            KeyGenerationError: If a bounded search runs out of attempts
        """
        self._keys = self._generate()
        if self._event_logger:
            self._event_logger.log_keys_generated(self.algorithm, list(self.export_keys()))

    def export_keys(self) -> Dict[str, str]:
        """Every key field in decimal-string form."""
        if self._keys is None:
            return {}
        return self._keys.export()

    def get_key(self, name: str) -> str:
        """
        One key field in decimal-string form.

        Raises:
            KeyError: If the scheme has no such field
        """
        return self.export_keys()[name]

    def _install_keys(self, keys, group: str, fields: List[str]) -> None:
        self._keys = keys
        if self._event_logger:
            self._event_logger.log_keys_imported(self.algorithm, group, fields)

    @abstractmethod
    def _generate(self):
        """Build a new key set from the current configuration."""

    @abstractmethod
    def set_private_keys(self, *values) -> None:
        """Import the private key group from decimal strings."""

    @abstractmethod
    def set_public_keys(self, *values) -> None:
        """Import the public key group from decimal strings."""

    # ========================================================================
    # Encrypt / Decrypt
    # ========================================================================

    def _require_keys(self) -> None:
        if self._keys is None or not self._keys.ready:
            raise RuntimeError("No keys available. Call generate_keys() or import keys first.")

    def encrypt(self, message: str) -> OperationResult:
        """
        Encrypt a message.

        Non-alphanumeric characters are dropped first.

        Returns:
            OperationResult with one cipher block per line, or an input error
        """
        self._require_keys()
        try:
            blocks = self._encrypt_blocks(message)
        except TextError as exc:
            return self._failed("encrypt", exc)

        if self._event_logger:
            self._event_logger.log_encrypt(self.algorithm, message, len(blocks))
        return OperationResult.ok(blocks)

    def decrypt(self, cipher_text: str) -> OperationResult:
        """
        Decrypt cipher text made of decimal tokens separated by commas or
        whitespace.

        Returns:
            OperationResult with one plaintext block per line, or an
            input/format error
        """
        self._require_keys()
        try:
            blocks = self._decrypt_blocks(cipher_text)
        except TextError as exc:
            return self._failed("decrypt", exc)

        if self._event_logger:
            self._event_logger.log_decrypt(self.algorithm, cipher_text, len(blocks))
        return OperationResult.ok(blocks)

    def _failed(self, operation: str, exc: TextError) -> OperationResult:
        result = OperationResult.failed(exc)
        if self._event_logger:
            self._event_logger.log_failure(
                self.algorithm, operation, result.error.kind.value, exc.position
            )
        return result

    @abstractmethod
    def _encrypt_blocks(self, message: str) -> List[str]:
        """Encrypt into output lines; raise InputError/FormatError on bad input."""

    @abstractmethod
    def _decrypt_blocks(self, cipher_text: str) -> List[str]:
        """Decrypt into output lines; raise InputError/FormatError on bad input."""

    def __repr__(self) -> str:
        return f"{type(self).__name__}(max_value={self._max_value})"
