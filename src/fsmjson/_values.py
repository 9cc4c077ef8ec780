"""
Decoded value model and the error taxonomy of the decoder.

Decoded documents use plain Python objects. The error classes follow the
standard library's ``json.JSONDecodeError`` contract (a ``ValueError`` with
``msg``, ``pos``, ``lineno`` and ``colno``) and add one subclass per failure
kind so callers can dispatch on the class or on ``kind``.
"""

from __future__ import annotations

from enum import Enum
from typing import Any
from typing import TypeAlias

# Recursive value model: Null, Bool, Int, Float, String, List, Object
JsonValue: TypeAlias = (
    "str | int | float | bool | None | dict[str, JsonValue] | list[JsonValue]"
)
Position: TypeAlias = int

# Parse hooks may substitute arbitrary objects for scalars
JsonValueOrTransformed: TypeAlias = "JsonValue | Any"


class ErrorKind(Enum):
    """The closed set of ways a decode can fail."""

    TRUNCATED = "truncated"
    NO_DOCUMENT = "no_document"
    MULTIPLE_DOCUMENTS = "multiple_documents"
    SYNTAX = "syntax"
    INVALID_ESCAPE = "invalid_escape"
    IO_FAILURE = "io_failure"


class JSONDecodeError(ValueError):
    """
    Reports why a byte stream could not be decoded, and where.

    ``pos`` is the offset of the offending byte (or character, for text
    documents passed to ``loads``). Failures detected at end of input point
    one past the last byte.
    """

    kind: ErrorKind = ErrorKind.SYNTAX

    def __init__(
        self,
        msg: str,
        pos: Position = 0,
        lineno: int = 1,
        colno: int | None = None,
    ) -> None:
        if not isinstance(msg, str):
            raise TypeError("msg must be a string")
        if not isinstance(pos, int) or pos < 0:
            raise ValueError("pos must be a non-negative integer")

        self.msg = msg
        self.pos = pos
        self.lineno = lineno
        self.colno = pos + 1 if colno is None else colno
        super().__init__(self._format())

    def _format(self) -> str:
        return f"{self.msg} at line {self.lineno}, column {self.colno}"

    def relocate(self, pos: Position, colno: int) -> None:
        """Moves the reported position, e.g. from bytes to characters."""
        self.pos = pos
        self.colno = colno
        self.args = (self._format(),)

    def __reduce__(self) -> tuple[Any, ...]:
        return _rebuild_error, (type(self), self.__dict__.copy())


def _rebuild_error(
    cls: type[JSONDecodeError], state: dict[str, Any]
) -> JSONDecodeError:
    error = cls.__new__(cls)
    error.__dict__.update(state)
    error.args = (error._format(),)
    return error


class TruncatedError(JSONDecodeError):
    """Input ended in the middle of a construct."""

    kind = ErrorKind.TRUNCATED


class NoDocumentError(JSONDecodeError):
    """Input was empty or held only whitespace."""

    kind = ErrorKind.NO_DOCUMENT


class MultipleDocumentsError(JSONDecodeError):
    """More than one top-level value was present."""

    kind = ErrorKind.MULTIPLE_DOCUMENTS


class JSONSyntaxError(JSONDecodeError):
    """A byte is not valid at its position in the grammar."""

    kind = ErrorKind.SYNTAX


class InvalidEscapeError(JSONDecodeError):
    """
    A backslash escape is malformed or names an invalid code point.

    ``escape`` holds the raw escape text, for example ``"\\q"`` or
    ``"\\ud800"``.
    """

    kind = ErrorKind.INVALID_ESCAPE

    def __init__(
        self,
        msg: str,
        pos: Position = 0,
        lineno: int = 1,
        colno: int | None = None,
        *,
        escape: str = "",
    ) -> None:
        self.escape = escape
        super().__init__(msg, pos, lineno, colno)


class SourceReadError(JSONDecodeError):
    """The byte source raised while being read. The cause is chained."""

    kind = ErrorKind.IO_FAILURE


class DecoderDefect(RuntimeError):
    """
    Internal contract violation in the tables or the action executor.

    Never raised for any input when the shipped tables are used; it means
    the automaton reached a state its tables promise cannot happen.
    """
