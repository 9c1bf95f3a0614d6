"""
Streaming tokenizer for ink story data (JSON).

The tokenizer never copies the input: value-bearing tokens hold a
``memoryview`` slice of the buffer handed to it, quotes included for strings.
Escape sequences are left untouched; decoding them is the caller's job.
"""
import re
import string
from dataclasses import dataclass
from enum import Enum, auto
from typing import Iterator, Optional, Union

Buffer = Union[bytes, bytearray, memoryview]

_WHITESPACE = frozenset(" \t\r\n")
_DIGITS = frozenset(string.digits)
_ALNUM = frozenset(string.ascii_letters + string.digits)
_LEADING_INTEGER = re.compile(rb"-?\d+")


class TokenKind(Enum):
    OBJECT_START = auto()
    OBJECT_END = auto()
    ARRAY_START = auto()
    ARRAY_END = auto()
    FIELD_NAME = auto()
    STRING = auto()
    INTEGER = auto()
    FLOAT = auto()
    TRUE = auto()
    FALSE = auto()
    NULL = auto()
    END = auto()
    ERROR = auto()


class ErrorKind(Enum):
    """Lexical error kinds, valued by their human-readable message."""
    UNEXPECTED_COMMA = "Unexpected comma"
    UNEXPECTED_TRAILING_COMMA = "Unexpected trailing comma"
    INVALID_BYTE = "Invalid input byte"
    PREMATURE_END_OF_INPUT = "Premature end of input"
    MALFORMED_UNICODE_ESCAPE_SEQUENCE = "Malformed Unicode escape sequence"
    MALFORMED_NUMBER_LITERAL = "Malformed number literal"
    UNTERMINATED_STRING = "Unterminated string"
    SYNTAX_ERROR = "Illegal JSON (syntax error)"
    UNSPECIFIED_ERROR = "Unspecified error"

    @property
    def message(self) -> str:
        return self.value


# Canonical text of tokens that carry no lexeme
CANONICAL_TEXT = {
    TokenKind.OBJECT_START: "{",
    TokenKind.OBJECT_END: "}",
    TokenKind.ARRAY_START: "[",
    TokenKind.ARRAY_END: "]",
    TokenKind.TRUE: "true",
    TokenKind.FALSE: "false",
    TokenKind.NULL: "null",
    TokenKind.END: "",
}

VALUE_KINDS = frozenset({
    TokenKind.FIELD_NAME,
    TokenKind.STRING,
    TokenKind.INTEGER,
    TokenKind.FLOAT,
})

# Tokens after which a comma may appear
_COMPLETED_VALUES = frozenset({
    TokenKind.STRING,
    TokenKind.INTEGER,
    TokenKind.FLOAT,
    TokenKind.TRUE,
    TokenKind.FALSE,
    TokenKind.NULL,
    TokenKind.OBJECT_END,
    TokenKind.ARRAY_END,
})


@dataclass(frozen=True)
class Token:
    """A single lexical unit; ``value`` aliases the tokenizer's input."""
    kind: TokenKind
    value: Optional[memoryview] = None
    error: Optional[ErrorKind] = None
    offset: int = 0

    @property
    def text(self) -> str:
        """Raw lexeme, or the canonical text of a value-less token."""
        if self.value is not None:
            return bytes(self.value).decode("utf-8", errors="replace")
        if self.kind is TokenKind.ERROR:
            return (self.error or ErrorKind.UNSPECIFIED_ERROR).message
        return CANONICAL_TEXT.get(self.kind, "")


class Tokenizer:
    """
    Single-pass tokenizer over an in-memory buffer.

    Tokens are produced one at a time by :meth:`next`. A token is only
    meaningful until the following call to :meth:`next`; callers that need a
    value afterwards must copy it out first. Once an ERROR token has been
    produced the tokenizer stays on it and no further input is consumed.
    """

    def __init__(self, data: Buffer = b""):
        self.reset(data)

    def reset(self, data: Buffer) -> None:
        """
        Start over on a new buffer, discarding any error state.

        Args:
            data: The buffer to tokenize; it must not change while in use
        """
        view = memoryview(data)
        if view.format != "B" or view.ndim != 1:
            view = view.cast("B")
        self._input = view
        self._offset = 0
        self._token = Token(TokenKind.END)
        self._after_comma = False

    def __iter__(self) -> Iterator[Token]:
        while True:
            token = self.next()
            if token.kind is TokenKind.END:
                return
            yield token
            if token.kind is TokenKind.ERROR:
                return

    @property
    def offset(self) -> int:
        return self._offset

    @property
    def error(self) -> Optional[ErrorKind]:
        return self._token.error

    def available_input(self) -> int:
        return len(self._input) - self._offset

    def end_of_input(self) -> bool:
        return self._offset >= len(self._input)

    def has_value(self) -> bool:
        return self._token.kind in VALUE_KINDS

    def current(self) -> Token:
        """Return the last token produced without advancing."""
        return self._token

    def next(self) -> Token:
        """
        Scan and return the next token.

        Returns:
            The new current token; END once the input is exhausted
        """
        if self._token.kind is TokenKind.ERROR:
            return self._token

        self._skip_whitespace()
        while not self.end_of_input():
            start = self._offset
            char = chr(self._input[self._offset])
            self._offset += 1

            if char == "{":
                return self._set_token(TokenKind.OBJECT_START, start)
            elif char == "}":
                return self._read_end_bracket(TokenKind.OBJECT_END, start)
            elif char == "[":
                return self._set_token(TokenKind.ARRAY_START, start)
            elif char == "]":
                return self._read_end_bracket(TokenKind.ARRAY_END, start)
            elif char == "n":
                return self._read_atom(b"ull", TokenKind.NULL, start)
            elif char == "t":
                return self._read_atom(b"rue", TokenKind.TRUE, start)
            elif char == "f":
                return self._read_atom(b"alse", TokenKind.FALSE, start)
            elif char == '"':
                return self._read_string(start)
            elif char == ",":
                if not self._read_comma():
                    return self._set_error(ErrorKind.UNEXPECTED_COMMA, start)
                self._skip_whitespace()
            else:
                # A lone number is a valid document, so end of input right
                # after it must still yield the number.
                return self._read_number(char, start)

        if self._after_comma:
            return self._set_error(ErrorKind.PREMATURE_END_OF_INPUT, self._offset)
        return self._set_token(TokenKind.END, self._offset)

    def error_message(self) -> str:
        """Human-readable message for the current error, or an empty string."""
        if self._token.kind is not TokenKind.ERROR:
            return ""
        return self._token.text

    def data_value(self) -> str:
        return self._token.text

    def float_value(self) -> float:
        """
        Numeric value of the current token as a float.

        TRUE and FALSE read as 1.0 and 0.0; any other token without a numeric
        lexeme reads as 0.0.
        """
        token = self._token
        if token.kind is TokenKind.TRUE:
            return 1.0
        if token.kind not in (TokenKind.INTEGER, TokenKind.FLOAT):
            return 0.0
        # float() needs an owned copy; the view itself stays on the input
        return float(bytes(token.value))

    def int_value(self) -> int:
        """
        Numeric value of the current token as an integer.

        FLOAT tokens yield their leading integer part (``-12.5e3`` -> -12).
        """
        token = self._token
        if token.kind is TokenKind.TRUE:
            return 1
        if token.kind not in (TokenKind.INTEGER, TokenKind.FLOAT):
            return 0
        match = _LEADING_INTEGER.match(bytes(token.value))
        return int(match.group(0)) if match else 0

    def _set_token(self, kind: TokenKind, start: int, end: Optional[int] = None) -> Token:
        value = self._input[start:end] if end is not None else None
        self._after_comma = False
        self._token = Token(kind, value, None, start)
        return self._token

    def _set_error(self, error: ErrorKind, offset: int) -> Token:
        self._token = Token(TokenKind.ERROR, None, error, offset)
        return self._token

    def _peek(self) -> str:
        if self.end_of_input():
            return ""
        return chr(self._input[self._offset])

    def _skip_whitespace(self) -> None:
        while not self.end_of_input() and self._peek() in _WHITESPACE:
            self._offset += 1

    def _read_atom(self, rest: bytes, kind: TokenKind, start: int) -> Token:
        """Match the remainder of ``null``/``true``/``false``."""
        if self.available_input() < len(rest):
            return self._set_error(ErrorKind.PREMATURE_END_OF_INPUT, self._offset)

        for index, expected in enumerate(rest):
            actual = self._input[self._offset + index]
            if actual != expected:
                # A digit here means an identifier-like word, not a bad byte
                if chr(actual) in _DIGITS:
                    return self._set_error(ErrorKind.SYNTAX_ERROR, self._offset + index)
                return self._set_error(ErrorKind.INVALID_BYTE, self._offset + index)

        self._offset += len(rest)
        if self._peek() in _ALNUM:
            return self._set_error(ErrorKind.SYNTAX_ERROR, self._offset)
        return self._set_token(kind, start)

    def _read_digits(self, count: int) -> bool:
        while self._peek() in _DIGITS:
            self._offset += 1
            count += 1
        return count > 0

    def _read_number(self, char: str, start: int) -> Token:
        have_digit = char in _DIGITS
        if not have_digit and char != "-":
            return self._set_error(ErrorKind.INVALID_BYTE, start)

        kind = TokenKind.INTEGER
        if not self._read_digits(1 if have_digit else 0):
            return self._set_error(ErrorKind.MALFORMED_NUMBER_LITERAL, start)

        if self._peek() == ".":
            kind = TokenKind.FLOAT
            self._offset += 1
            if not self._read_digits(0):
                return self._set_error(ErrorKind.MALFORMED_NUMBER_LITERAL, start)

        if self._peek() in ("e", "E"):
            kind = TokenKind.FLOAT
            self._offset += 1
            if self._peek() in ("+", "-"):
                self._offset += 1
            if not self._read_digits(0):
                return self._set_error(ErrorKind.MALFORMED_NUMBER_LITERAL, start)

        return self._set_token(kind, start, self._offset)

    def _read_string(self, start: int) -> Token:
        closed = False
        while not self.end_of_input():
            char = chr(self._input[self._offset])
            self._offset += 1
            if char == "\\":
                if self.end_of_input():
                    return self._set_error(ErrorKind.PREMATURE_END_OF_INPUT, self._offset)
                self._offset += 1
            elif char == '"':
                closed = True
                break
            elif char == "\0":
                return self._set_error(ErrorKind.INVALID_BYTE, self._offset - 1)

        if not closed:
            return self._set_error(ErrorKind.UNTERMINATED_STRING, start)

        end = self._offset
        self._skip_whitespace()
        if self.end_of_input():
            return self._set_token(TokenKind.STRING, start, end)

        char = chr(self._input[self._offset])
        self._offset += 1
        if char == ":":
            return self._set_token(TokenKind.FIELD_NAME, start, end)
        if char in (",", "]", "}"):
            self._offset -= 1
            return self._set_token(TokenKind.STRING, start, end)
        if char == "\0":
            return self._set_error(ErrorKind.INVALID_BYTE, self._offset - 1)
        return self._set_error(ErrorKind.SYNTAX_ERROR, self._offset - 1)

    def _read_comma(self) -> bool:
        """Accept a comma only right after a completed value."""
        if self._after_comma or self._token.kind not in _COMPLETED_VALUES:
            return False
        self._after_comma = True
        return True

    def _read_end_bracket(self, kind: TokenKind, start: int) -> Token:
        if self._after_comma:
            return self._set_error(ErrorKind.UNEXPECTED_TRAILING_COMMA, start)
        return self._set_token(kind, start)
