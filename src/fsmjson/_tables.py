"""
Static decoding tables for the JSON automaton.

Three immutable tables drive the decoder:

- ``CATEGORIES`` maps an input byte to a character category. Bytes above
  printable ASCII are clamped to the category of ``~``.
- ``TRANSITIONS[state][category]`` holds a packed 16-bit code: the high byte
  is an action identifier (bit ``DESCEND`` set means "push ``GOTOS[state]``
  on the control stack first"), the low byte is the next state, or ``POP``
  to return to the state on top of the control stack without consuming the
  byte. ``ERROR`` marks a byte that is not valid in that state.
- ``GOTOS[state]`` is the return state pushed when a transition descends.

The transition rows are declared per state below and packed once at import
time. Nothing mutates them afterwards.
"""

from __future__ import annotations

from collections.abc import Iterable
from enum import IntEnum
from typing import TypeAlias

POP = 0xFF
DESCEND = 0x80
ERROR = 0xFFFF

# Bytes at or above this value share the category of "~"
CLAMP = 0x7E


class Action(IntEnum):
    """Semantic actions executed while a transition fires."""

    NONE = 0
    OPEN_LIST = 1
    OPEN_OBJECT = 2
    APPEND_ITEM = 3
    SET_ITEM = 4
    PUSH_NULL = 5
    PUSH_TRUE = 6
    PUSH_FALSE = 7
    PUSH_STRING = 8
    PUSH_INT = 9
    PUSH_FLOAT = 10
    APPEND_RAW = 11
    APPEND_ESCAPE = 12
    SHORT_ESCAPE = 13
    UNICODE_ESCAPE = 14


_ACTION_IDS = frozenset(int(action) for action in Action)


class Category(IntEnum):
    """Equivalence classes of input bytes."""

    SPACE = 0
    WHITESPACE = 1  # tab, line feed, carriage return
    OPEN_BRACE = 2
    CLOSE_BRACE = 3
    OPEN_BRACKET = 4
    CLOSE_BRACKET = 5
    COLON = 6
    COMMA = 7
    QUOTE = 8
    BACKSLASH = 9
    SLASH = 10
    PLUS = 11
    MINUS = 12
    DOT = 13
    ZERO = 14
    DIGIT = 15  # 1-9
    LETTER_A = 16
    LETTER_B = 17
    LETTER_E = 18
    LETTER_F = 19
    LETTER_L = 20
    LETTER_N = 21
    LETTER_R = 22
    LETTER_S = 23
    LETTER_T = 24
    LETTER_U = 25
    EXPONENT = 26  # "E"
    HEX_LETTER = 27  # c d A B C D F
    OTHER = 28
    CONTROL = 29
    END = 30  # end-of-input sentinel, never produced by a real byte


class State(IntEnum):
    """Grammar positions. ``START`` is also the accept state."""

    START = 0
    DONE = 1
    ARRAY_OPEN = 2
    ARRAY_VALUE = 3
    ARRAY_SEP = 4
    ARRAY_NEXT = 5
    OBJECT_OPEN = 6
    OBJECT_KEY = 7
    OBJECT_COLON = 8
    OBJECT_VALUE = 9
    OBJECT_SEP = 10
    OBJECT_NEXT = 11
    STRING = 12
    STRING_ESCAPE = 13
    UNICODE_0 = 14
    UNICODE_1 = 15
    UNICODE_2 = 16
    UNICODE_3 = 17
    UNICODE_4 = 18
    NUMBER_MINUS = 19
    NUMBER_ZERO = 20
    NUMBER_INT = 21
    FRACTION_START = 22
    FRACTION = 23
    EXPONENT_START = 24
    EXPONENT_SIGN = 25
    EXPONENT = 26
    TRUE_R = 27
    TRUE_U = 28
    TRUE_E = 29
    FALSE_A = 30
    FALSE_L = 31
    FALSE_S = 32
    FALSE_E = 33
    NULL_U = 34
    NULL_L = 35
    NULL_L2 = 36


def shift(state: int, action: int = Action.NONE) -> int:
    """Run ``action``, consume the byte and move to ``state``."""
    return action << 8 | state


def descend(state: int, action: int = Action.NONE) -> int:
    """Like ``shift`` but first push the current state's return address."""
    return (action | DESCEND) << 8 | state


def reduce(action: int = Action.NONE) -> int:
    """Run ``action`` and pop the control stack, keeping the byte."""
    return action << 8 | POP


def unpack(code: int) -> tuple[int, int]:
    """Splits a packed code into ``(action, target)``."""
    return code >> 8, code & 0xFF


# Category groups used by several rows
BLANK = (Category.SPACE, Category.WHITESPACE, Category.END)
DIGITS = (Category.ZERO, Category.DIGIT)
EXPONENT_MARK = (Category.LETTER_E, Category.EXPONENT)
SIGNS = (Category.PLUS, Category.MINUS)
HEX_DIGITS = (
    Category.ZERO,
    Category.DIGIT,
    Category.LETTER_A,
    Category.LETTER_B,
    Category.LETTER_E,
    Category.LETTER_F,
    Category.EXPONENT,
    Category.HEX_LETTER,
)

CellKey: TypeAlias = Category | tuple[Category, ...]


def _build_categories() -> tuple[int, ...]:
    table = [Category.OTHER] * (CLAMP + 1)
    for byte in range(0x20):
        table[byte] = Category.CONTROL

    singles = {
        " ": Category.SPACE,
        "\t": Category.WHITESPACE,
        "\n": Category.WHITESPACE,
        "\r": Category.WHITESPACE,
        "{": Category.OPEN_BRACE,
        "}": Category.CLOSE_BRACE,
        "[": Category.OPEN_BRACKET,
        "]": Category.CLOSE_BRACKET,
        ":": Category.COLON,
        ",": Category.COMMA,
        '"': Category.QUOTE,
        "\\": Category.BACKSLASH,
        "/": Category.SLASH,
        "+": Category.PLUS,
        "-": Category.MINUS,
        ".": Category.DOT,
        "0": Category.ZERO,
        "a": Category.LETTER_A,
        "b": Category.LETTER_B,
        "e": Category.LETTER_E,
        "f": Category.LETTER_F,
        "l": Category.LETTER_L,
        "n": Category.LETTER_N,
        "r": Category.LETTER_R,
        "s": Category.LETTER_S,
        "t": Category.LETTER_T,
        "u": Category.LETTER_U,
        "E": Category.EXPONENT,
    }
    for char in "123456789":
        singles[char] = Category.DIGIT
    for char in "cdABCDF":
        singles[char] = Category.HEX_LETTER

    for char, category in singles.items():
        table[ord(char)] = category
    return tuple(int(category) for category in table)


def _row(
    state: State, cells: dict[CellKey, int], default: int = ERROR
) -> tuple[int, ...]:
    """
    Packs one transition row.

    Later keys override earlier ones. When the row has no explicit entry
    for the end-of-input sentinel and its default is an error, the sentinel
    leaves the automaton where it is, so unfinished input reports as
    truncated rather than as a syntax error.
    """
    row = [default] * len(Category)
    if default == ERROR:
        row[Category.END] = shift(state)
    for key, code in cells.items():
        for category in key if isinstance(key, tuple) else (key,):
            row[category] = code
    return tuple(row)


def _value_start() -> dict[CellKey, int]:
    """Cells shared by every state that expects a value."""
    return {
        Category.OPEN_BRACKET: descend(State.ARRAY_OPEN, Action.OPEN_LIST),
        Category.OPEN_BRACE: descend(State.OBJECT_OPEN, Action.OPEN_OBJECT),
        Category.QUOTE: descend(State.STRING),
        Category.LETTER_T: descend(State.TRUE_R),
        Category.LETTER_F: descend(State.FALSE_A),
        Category.LETTER_N: descend(State.NULL_U),
        Category.MINUS: descend(State.NUMBER_MINUS, Action.APPEND_RAW),
        Category.ZERO: descend(State.NUMBER_ZERO, Action.APPEND_RAW),
        Category.DIGIT: descend(State.NUMBER_INT, Action.APPEND_RAW),
    }


def _number_tail(
    state: State, on_end: Action, *, integer: bool
) -> tuple[int, ...]:
    cells: dict[CellKey, int] = {
        DIGITS: shift(state, Action.APPEND_RAW),
        EXPONENT_MARK: shift(State.EXPONENT_START, Action.APPEND_RAW),
    }
    if integer:
        cells[Category.DOT] = shift(State.FRACTION_START, Action.APPEND_RAW)
    return _row(state, cells, default=reduce(on_end))


def _literal_rows() -> dict[State, tuple[int, ...]]:
    """Spells out ``true``, ``false`` and ``null`` after their first letter."""
    spellings = (
        ("rue", (State.TRUE_R, State.TRUE_U, State.TRUE_E), Action.PUSH_TRUE),
        (
            "alse",
            (State.FALSE_A, State.FALSE_L, State.FALSE_S, State.FALSE_E),
            Action.PUSH_FALSE,
        ),
        ("ull", (State.NULL_U, State.NULL_L, State.NULL_L2), Action.PUSH_NULL),
    )
    rows: dict[State, tuple[int, ...]] = {}
    for letters, states, action in spellings:
        targets = [shift(state) for state in states[1:]]
        targets.append(shift(State.DONE, action))
        for letter, state, target in zip(letters, states, targets, strict=True):
            category = Category(CATEGORIES[ord(letter)])
            rows[state] = _row(state, {category: target})
    return rows


def _hex_digit(state: State, following: State) -> tuple[int, ...]:
    return _row(
        state,
        {
            HEX_DIGITS: shift(following, Action.APPEND_ESCAPE),
            Category.END: shift(state),
        },
        default=reduce(Action.UNICODE_ESCAPE),
    )


def _build_transitions() -> tuple[tuple[int, ...], ...]:
    rows: dict[State, tuple[int, ...]] = {
        State.START: _row(
            State.START, {BLANK: shift(State.START), **_value_start()}
        ),
        State.DONE: _row(State.DONE, {}, default=reduce()),
        # Arrays
        State.ARRAY_OPEN: _row(
            State.ARRAY_OPEN,
            {
                BLANK: shift(State.ARRAY_OPEN),
                Category.CLOSE_BRACKET: shift(State.DONE),
                **_value_start(),
            },
        ),
        State.ARRAY_VALUE: _row(
            State.ARRAY_VALUE,
            {
                BLANK: shift(State.ARRAY_SEP, Action.APPEND_ITEM),
                Category.COMMA: shift(State.ARRAY_NEXT, Action.APPEND_ITEM),
                Category.CLOSE_BRACKET: shift(State.DONE, Action.APPEND_ITEM),
            },
        ),
        State.ARRAY_SEP: _row(
            State.ARRAY_SEP,
            {
                BLANK: shift(State.ARRAY_SEP),
                Category.COMMA: shift(State.ARRAY_NEXT),
                Category.CLOSE_BRACKET: shift(State.DONE),
            },
        ),
        State.ARRAY_NEXT: _row(
            State.ARRAY_NEXT,
            {BLANK: shift(State.ARRAY_NEXT), **_value_start()},
        ),
        # Objects
        State.OBJECT_OPEN: _row(
            State.OBJECT_OPEN,
            {
                BLANK: shift(State.OBJECT_OPEN),
                Category.CLOSE_BRACE: shift(State.DONE),
                Category.QUOTE: descend(State.STRING),
            },
        ),
        State.OBJECT_KEY: _row(
            State.OBJECT_KEY,
            {
                BLANK: shift(State.OBJECT_KEY),
                Category.COLON: shift(State.OBJECT_COLON),
            },
        ),
        State.OBJECT_COLON: _row(
            State.OBJECT_COLON,
            {BLANK: shift(State.OBJECT_COLON), **_value_start()},
        ),
        State.OBJECT_VALUE: _row(
            State.OBJECT_VALUE,
            {
                BLANK: shift(State.OBJECT_SEP, Action.SET_ITEM),
                Category.COMMA: shift(State.OBJECT_NEXT, Action.SET_ITEM),
                Category.CLOSE_BRACE: shift(State.DONE, Action.SET_ITEM),
            },
        ),
        State.OBJECT_SEP: _row(
            State.OBJECT_SEP,
            {
                BLANK: shift(State.OBJECT_SEP),
                Category.COMMA: shift(State.OBJECT_NEXT),
                Category.CLOSE_BRACE: shift(State.DONE),
            },
        ),
        State.OBJECT_NEXT: _row(
            State.OBJECT_NEXT,
            {
                BLANK: shift(State.OBJECT_NEXT),
                Category.QUOTE: descend(State.STRING),
            },
        ),
        # Strings
        State.STRING: _row(
            State.STRING,
            {
                Category.QUOTE: shift(State.DONE, Action.PUSH_STRING),
                Category.BACKSLASH: shift(State.STRING_ESCAPE),
                Category.WHITESPACE: ERROR,
                Category.CONTROL: ERROR,
                Category.END: shift(State.STRING),
            },
            default=shift(State.STRING, Action.APPEND_RAW),
        ),
        State.STRING_ESCAPE: _row(
            State.STRING_ESCAPE,
            {
                (
                    Category.QUOTE,
                    Category.BACKSLASH,
                    Category.SLASH,
                ): shift(State.STRING, Action.APPEND_RAW),
                Category.LETTER_U: descend(State.UNICODE_0),
                Category.END: shift(State.STRING_ESCAPE),
            },
            default=shift(State.STRING, Action.SHORT_ESCAPE),
        ),
        State.UNICODE_0: _hex_digit(State.UNICODE_0, State.UNICODE_1),
        State.UNICODE_1: _hex_digit(State.UNICODE_1, State.UNICODE_2),
        State.UNICODE_2: _hex_digit(State.UNICODE_2, State.UNICODE_3),
        State.UNICODE_3: _hex_digit(State.UNICODE_3, State.UNICODE_4),
        State.UNICODE_4: _row(
            State.UNICODE_4, {}, default=reduce(Action.UNICODE_ESCAPE)
        ),
        # Numbers
        State.NUMBER_MINUS: _row(
            State.NUMBER_MINUS,
            {
                Category.ZERO: shift(State.NUMBER_ZERO, Action.APPEND_RAW),
                Category.DIGIT: shift(State.NUMBER_INT, Action.APPEND_RAW),
            },
        ),
        State.NUMBER_ZERO: _row(
            State.NUMBER_ZERO,
            {
                DIGITS: ERROR,
                Category.DOT: shift(State.FRACTION_START, Action.APPEND_RAW),
                EXPONENT_MARK: shift(State.EXPONENT_START, Action.APPEND_RAW),
            },
            default=reduce(Action.PUSH_INT),
        ),
        State.NUMBER_INT: _number_tail(
            State.NUMBER_INT, Action.PUSH_INT, integer=True
        ),
        State.FRACTION_START: _row(
            State.FRACTION_START,
            {DIGITS: shift(State.FRACTION, Action.APPEND_RAW)},
        ),
        State.FRACTION: _number_tail(
            State.FRACTION, Action.PUSH_FLOAT, integer=False
        ),
        State.EXPONENT_START: _row(
            State.EXPONENT_START,
            {
                SIGNS: shift(State.EXPONENT_SIGN, Action.APPEND_RAW),
                DIGITS: shift(State.EXPONENT, Action.APPEND_RAW),
            },
        ),
        State.EXPONENT_SIGN: _row(
            State.EXPONENT_SIGN,
            {DIGITS: shift(State.EXPONENT, Action.APPEND_RAW)},
        ),
        State.EXPONENT: _row(
            State.EXPONENT,
            {DIGITS: shift(State.EXPONENT, Action.APPEND_RAW)},
            default=reduce(Action.PUSH_FLOAT),
        ),
        **_literal_rows(),
    }
    return tuple(rows[state] for state in State)


def _build_gotos() -> tuple[int, ...]:
    # Only states holding a descending transition need a real entry
    returns = {
        State.START: State.START,
        State.ARRAY_OPEN: State.ARRAY_VALUE,
        State.ARRAY_NEXT: State.ARRAY_VALUE,
        State.OBJECT_OPEN: State.OBJECT_KEY,
        State.OBJECT_NEXT: State.OBJECT_KEY,
        State.OBJECT_COLON: State.OBJECT_VALUE,
        State.STRING_ESCAPE: State.STRING,
    }
    return tuple(int(returns.get(state, State.START)) for state in State)


CATEGORIES: tuple[int, ...] = _build_categories()
TRANSITIONS: tuple[tuple[int, ...], ...] = _build_transitions()
GOTOS: tuple[int, ...] = _build_gotos()

# What each state was waiting for, used in syntax error messages
EXPECTING: dict[int, str] = {
    State.START: "Expecting value",
    State.ARRAY_OPEN: "Expecting value or ']'",
    State.ARRAY_VALUE: "Expecting ',' delimiter",
    State.ARRAY_SEP: "Expecting ',' delimiter",
    State.ARRAY_NEXT: "Expecting value",
    State.OBJECT_OPEN: "Expecting property name enclosed in double quotes",
    State.OBJECT_KEY: "Expecting ':' delimiter",
    State.OBJECT_COLON: "Expecting value",
    State.OBJECT_VALUE: "Expecting ',' delimiter",
    State.OBJECT_SEP: "Expecting ',' delimiter",
    State.OBJECT_NEXT: "Expecting property name enclosed in double quotes",
    State.STRING: "Invalid control character in string",
    State.NUMBER_MINUS: "Expecting digit after '-'",
    State.NUMBER_ZERO: "Numbers cannot have leading zeroes",
    State.FRACTION_START: "Expecting digit after '.'",
    State.EXPONENT_START: "Expecting exponent digits",
    State.EXPONENT_SIGN: "Expecting exponent digits",
}


def describe_state(state: int) -> str:
    """Human readable expectation for a state, used for syntax errors."""
    if state in EXPECTING:
        return EXPECTING[state]
    if State.TRUE_R <= state <= State.NULL_L2:
        return "Invalid literal"
    return "Invalid syntax"


def _reduction_cycles(
    transitions: tuple[tuple[int, ...], ...], gotos: tuple[int, ...]
) -> Iterable[str]:
    """
    Finds chains of non-consuming transitions that never shrink the stack.

    A transition that both descends and pops moves to ``gotos[state]``
    without consuming the byte or changing the stack depth. Following such
    moves for a fixed category must reach a consuming transition; a cycle
    would make the driver spin forever.
    """
    for category in range(len(Category)):
        for origin in range(len(transitions)):
            seen = {origin}
            state = origin
            while True:
                code = transitions[state][category]
                if code == ERROR:
                    break
                action, target = unpack(code)
                if target != POP or not action & DESCEND:
                    break
                state = gotos[state]
                if state in seen:
                    yield (
                        f"reduction cycle from state {origin} "
                        f"on category {category}"
                    )
                    break
                seen.add(state)


def check_tables(
    categories: tuple[int, ...] = CATEGORIES,
    transitions: tuple[tuple[int, ...], ...] = TRANSITIONS,
    gotos: tuple[int, ...] = GOTOS,
) -> list[str]:
    """
    Verifies the shape and consistency of a set of decoding tables.

    The driver trusts its tables completely, so hand-built tables should be
    run through this first.

    Returns:
        A list of problems found; empty when the tables are usable.
    """
    problems: list[str] = []
    state_count = len(transitions)
    category_count = len(Category)

    if len(categories) != CLAMP + 1:
        problems.append(
            f"category table has {len(categories)} entries, "
            f"expected {CLAMP + 1}"
        )
    problems.extend(
        f"byte {byte:#04x} maps to unknown category {category}"
        for byte, category in enumerate(categories)
        if not 0 <= category < category_count
    )
    if len(gotos) != state_count:
        problems.append(
            f"goto table has {len(gotos)} entries for {state_count} states"
        )
    problems.extend(
        f"goto for state {state} names unknown state {target}"
        for state, target in enumerate(gotos)
        if not 0 <= target < state_count
    )

    for state, row in enumerate(transitions):
        if len(row) != category_count:
            problems.append(
                f"state {state} has {len(row)} cells, "
                f"expected {category_count}"
            )
            continue
        for category, code in enumerate(row):
            if code == ERROR:
                continue
            action, target = unpack(code)
            if action & ~DESCEND not in _ACTION_IDS:
                problems.append(
                    f"state {state} category {category}: "
                    f"unknown action {action & ~DESCEND}"
                )
            if target != POP and target >= state_count:
                problems.append(
                    f"state {state} category {category}: "
                    f"unknown target {target}"
                )

    if not problems:
        problems.extend(_reduction_cycles(transitions, gotos))
    return problems
