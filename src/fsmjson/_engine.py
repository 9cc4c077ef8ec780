"""
Table-driven automaton that lexes, parses and builds values in one pass.

``StreamDecoder`` consumes bytes one at a time. Each byte is classified
through ``CATEGORIES`` and run through ``TRANSITIONS``; chained reductions
are resolved by popping the explicit control stack, so nesting depth is
bounded by memory rather than by the interpreter's recursion limit.
Semantic actions build the result on a value stack with two scratch
buffers for literal text and ``\\u`` escape digits.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from typing import TypeVar

from ._config import DecodeConfig
from ._tables import CATEGORIES
from ._tables import CLAMP
from ._tables import DESCEND
from ._tables import ERROR
from ._tables import GOTOS
from ._tables import POP
from ._tables import TRANSITIONS
from ._tables import Category
from ._tables import State
from ._tables import describe_state
from ._values import DecoderDefect
from ._values import InvalidEscapeError
from ._values import JSONDecodeError
from ._values import JsonValueOrTransformed
from ._values import JSONSyntaxError
from ._values import MultipleDocumentsError
from ._values import NoDocumentError
from ._values import TruncatedError

logger = logging.getLogger(__name__)

E = TypeVar("E", bound=JSONDecodeError)

# Byte fed with the END category once the source is exhausted. No action
# reachable on END reads it.
SENTINEL_BYTE = 0x20
NEWLINE = 0x0A

SHORT_ESCAPES = {
    ord("b"): 0x08,
    ord("t"): 0x09,
    ord("n"): 0x0A,
    ord("f"): 0x0C,
    ord("r"): 0x0D,
}
SURROGATES = range(0xD800, 0xE000)
UNICODE_ESCAPE_DIGITS = 4


def _describe_byte(byte: int) -> str:
    if 0x20 < byte < 0x7F:
        return repr(chr(byte))
    return f"byte {byte:#04x}"


def _log_failure(exc: JSONDecodeError) -> None:
    logger.debug(
        "Decoding failed (%s) at position %d: %s",
        exc.kind.value,
        exc.pos,
        exc.msg,
    )


class StreamDecoder:
    """
    Incremental decoder for a single JSON document.

    Feed the document in chunks of any size with ``feed`` and finish with
    ``close``, which returns the decoded value. A decoder is single-use:
    once ``close`` has run, or any error has been raised, it accepts no
    more input.
    """

    def __init__(self, config: DecodeConfig | None = None) -> None:
        self.config = config if config is not None else DecodeConfig()
        self._parse_int: Callable[[str], object] = self.config.parse_int or int
        self._parse_float: Callable[[str], object] = (
            self.config.parse_float or float
        )

        self._state: int = State.START
        self._control: list[int] = []
        self._values: list[JsonValueOrTransformed] = []
        self._raw = bytearray()
        self._escape = bytearray()

        self._pos = 0
        self._lineno = 1
        self._line_start = 0
        self._second_document: tuple[int, int, int] | None = None
        self._top_level_count = 0
        self._finished = False

        # Indexed by action identifier
        self._handlers: tuple[Callable[[int], None] | None, ...] = (
            None,
            self._open_list,
            self._open_object,
            self._append_item,
            self._set_item,
            self._push_null,
            self._push_true,
            self._push_false,
            self._push_string,
            self._push_int,
            self._push_float,
            self._append_raw,
            self._append_escape,
            self._short_escape,
            self._unicode_escape,
        )

    @property
    def state(self) -> int:
        """Current automaton state."""
        return self._state

    @property
    def depth(self) -> int:
        """Number of suspended grammar contexts on the control stack."""
        return len(self._control)

    @property
    def position(self) -> int:
        """Number of input bytes consumed so far."""
        return self._pos

    def feed(self, data: bytes | bytearray | memoryview) -> None:
        """Runs every byte of ``data`` through the automaton, in order."""
        if self._finished:
            raise RuntimeError("decoder is finished; create a new one")

        categories = CATEGORIES
        other = categories[CLAMP]
        step = self._step
        state = self._state
        try:
            for byte in data:
                state = step(
                    state, byte, categories[byte] if byte < CLAMP else other
                )
                self._pos += 1
                if byte == NEWLINE:
                    self._lineno += 1
                    self._line_start = self._pos
        except JSONDecodeError as exc:
            self._finished = True
            _log_failure(exc)
            raise
        except Exception:
            self._finished = True
            raise
        self._state = state

    def close(self) -> JsonValueOrTransformed:
        """
        Flushes pending literals and returns the single decoded document.

        Raises:
            TruncatedError: input ended inside a value
            NoDocumentError: input held no value at all
            MultipleDocumentsError: input held more than one top-level value
        """
        if self._finished:
            raise RuntimeError("decoder is finished; create a new one")
        self._finished = True

        try:
            self._state = self._step(self._state, SENTINEL_BYTE, Category.END)
            if self._state != State.START:
                raise self._error(TruncatedError, "Unexpected end of input")
            if not self._values:
                raise self._error(NoDocumentError, "Expecting value")
            if len(self._values) > 1:
                raise self._error_at(
                    MultipleDocumentsError,
                    f"Extra data: {len(self._values)} top-level documents",
                    self._second_document,
                )
        except JSONDecodeError as exc:
            _log_failure(exc)
            raise

        document = self._values.pop()
        logger.debug(
            "Decoded %d bytes into %s", self._pos, type(document).__name__
        )
        return document

    def _step(self, state: int, byte: int, category: int) -> int:
        """
        Applies transitions until one consumes ``byte``.

        Reductions pop the control stack and retry the same byte, so one
        byte may close several constructs before it is shifted.
        """
        control = self._control
        while True:
            code = TRANSITIONS[state][category]
            if code == ERROR:
                raise self._error(
                    JSONSyntaxError,
                    f"{describe_state(state)}, found {_describe_byte(byte)}",
                )
            action = code >> 8
            target = code & 0xFF
            if action & DESCEND:
                if state == State.START:
                    self._note_top_level()
                control.append(GOTOS[state])
                action &= ~DESCEND
            if action:
                self._execute(action, byte)
            if target != POP:
                return target
            if not control:
                raise DecoderDefect(
                    f"control stack underflow leaving state {state}"
                )
            state = control.pop()

    def _execute(self, action: int, byte: int) -> None:
        handler = (
            self._handlers[action] if action < len(self._handlers) else None
        )
        if handler is None:
            raise DecoderDefect(f"JSON decoder bug: unknown action {action}")
        handler(byte)

    def _note_top_level(self) -> None:
        self._top_level_count += 1
        if self._top_level_count == 2:
            self._second_document = (
                self._pos,
                self._lineno,
                self._pos - self._line_start + 1,
            )

    def _error(self, cls: type[E], msg: str) -> E:
        return cls(
            msg, self._pos, self._lineno, self._pos - self._line_start + 1
        )

    def _error_at(
        self, cls: type[E], msg: str, where: tuple[int, int, int] | None
    ) -> E:
        if where is None:
            return self._error(cls, msg)
        pos, lineno, colno = where
        return cls(msg, pos, lineno, colno)

    def _container(self, expected: type) -> object:
        if not self._values:
            raise DecoderDefect(
                f"wrong type - expected {expected.__name__}, stack is empty"
            )
        container = self._values[-1]
        if not isinstance(container, expected):
            raise DecoderDefect(
                f"wrong type - expected {expected.__name__}, "
                f"got {type(container).__name__}"
            )
        return container

    def _pop(self) -> JsonValueOrTransformed:
        if not self._values:
            raise DecoderDefect("value stack underflow")
        return self._values.pop()

    # Actions, in identifier order

    def _open_list(self, byte: int) -> None:
        self._values.append([])

    def _open_object(self, byte: int) -> None:
        self._values.append({})

    def _append_item(self, byte: int) -> None:
        value = self._pop()
        items = self._container(list)
        items.append(value)  # type: ignore[attr-defined]

    def _set_item(self, byte: int) -> None:
        value = self._pop()
        key = self._pop()
        if not isinstance(key, str):
            raise DecoderDefect(
                f"wrong type - expected str key, got {type(key).__name__}"
            )
        members = self._container(dict)
        members[key] = value  # type: ignore[index]

    def _push_null(self, byte: int) -> None:
        self._values.append(None)

    def _push_true(self, byte: int) -> None:
        self._values.append(True)

    def _push_false(self, byte: int) -> None:
        self._values.append(False)

    def _push_string(self, byte: int) -> None:
        self._values.append(self._raw.decode("utf-8", "surrogateescape"))
        self._raw.clear()
        self._escape.clear()

    def _push_int(self, byte: int) -> None:
        text = self._raw.decode("ascii")
        self._raw.clear()
        self._values.append(self._parse_int(text))

    def _push_float(self, byte: int) -> None:
        text = self._raw.decode("ascii")
        self._raw.clear()
        self._values.append(self._parse_float(text))

    def _append_raw(self, byte: int) -> None:
        self._raw.append(byte)

    def _append_escape(self, byte: int) -> None:
        self._escape.append(byte)

    def _short_escape(self, byte: int) -> None:
        resolved = SHORT_ESCAPES.get(byte)
        if resolved is None:
            escape = "\\" + chr(byte)
            raise self._invalid_escape(escape)
        self._raw.append(resolved)
        self._escape.clear()

    def _unicode_escape(self, byte: int) -> None:
        digits = self._escape.decode("ascii")
        escape = "\\u" + digits
        if len(digits) != UNICODE_ESCAPE_DIGITS:
            raise self._invalid_escape(escape)
        codepoint = int(digits, 16)
        if codepoint in SURROGATES:
            raise self._invalid_escape(escape)
        self._raw += chr(codepoint).encode("utf-8")
        self._escape.clear()

    def _invalid_escape(self, escape: str) -> InvalidEscapeError:
        self._escape.clear()
        return InvalidEscapeError(
            f"Invalid escape sequence {escape!r}",
            self._pos,
            self._lineno,
            self._pos - self._line_start + 1,
            escape=escape,
        )
