"""
Tagged results for encrypt/decrypt.

A failed operation is an ordinary return value carrying its error kind and the
offending token, so callers (the GUI shell among them) handle failure without
exception plumbing. `unwrap()` converts back to the exception form.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Optional, Tuple

from ..errors import FormatError, InputError, TextError


class ErrorKind(Enum):
    """Classification of a failed encrypt/decrypt call."""
    INPUT = "input_error"
    FORMAT = "format_error"


@dataclass(frozen=True)
class OperationError:
    """What went wrong, and where."""
    kind: ErrorKind
    message: str
    token: Optional[str] = None
    position: Optional[int] = None

    @classmethod
    def from_exception(cls, exc: TextError) -> 'OperationError':
        kind = ErrorKind.FORMAT if isinstance(exc, FormatError) else ErrorKind.INPUT
        return cls(kind=kind, message=str(exc), token=exc.token, position=exc.position)

    def to_exception(self) -> TextError:
        exc_type = FormatError if self.kind is ErrorKind.FORMAT else InputError
        return exc_type(self.message, token=self.token, position=self.position)

    def __str__(self) -> str:
        return self.message


@dataclass(frozen=True)
class OperationResult:
    """
    Outcome of encrypt() or decrypt().

    On success `blocks` holds one entry per output line and `text` is those
    lines joined by newlines. On failure `error` is set, `blocks` is empty
    and `text` is the error message, ready to be shown verbatim.

    Example:
        >>> result = OperationResult.ok(["2790", "1234"])
        >>> result.text
        '2790\\n1234'
        >>> result.success
        True
    """
    blocks: Tuple[str, ...] = ()
    error: Optional[OperationError] = None

    @classmethod
    def ok(cls, blocks) -> 'OperationResult':
        return cls(blocks=tuple(blocks))

    @classmethod
    def failed(cls, exc: TextError) -> 'OperationResult':
        return cls(error=OperationError.from_exception(exc))

    @property
    def success(self) -> bool:
        return self.error is None

    @property
    def text(self) -> str:
        """Newline-separated output, or the error message on failure."""
        if self.error is not None:
            return self.error.message
        return "\n".join(self.blocks)

    def unwrap(self) -> str:
        """
        Return the output text, raising InputError or FormatError on failure.
        """
        if self.error is not None:
            raise self.error.to_exception()
        return "\n".join(self.blocks)

    def __str__(self) -> str:
        return self.text
