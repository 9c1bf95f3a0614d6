"""
Deferred decoding of JSON string escapes.

The tokenizer hands string lexemes upward untouched; this is where their
escape sequences are finally interpreted.
"""
from ..decoder.tokenizer import ErrorKind
from ..exceptions import TokenizerError

SIMPLE_ESCAPES = {
    '"': '"',
    "\\": "\\",
    "/": "/",
    "b": "\b",
    "f": "\f",
    "n": "\n",
    "r": "\r",
    "t": "\t",
}

_HEX_DIGITS = frozenset("0123456789abcdefABCDEF")


def _read_hex4(raw: str, index: int, offset: int) -> int:
    digits = raw[index:index + 4]
    if len(digits) != 4 or any(ch not in _HEX_DIGITS for ch in digits):
        raise TokenizerError(
            ErrorKind.MALFORMED_UNICODE_ESCAPE_SEQUENCE,
            offset,
            f"\\u{digits}",
        )
    return int(digits, 16)


def decode_string(raw: str, offset: int = 0) -> str:
    """
    Decode the escape sequences of a string lexeme body.

    Args:
        raw: Lexeme text without its surrounding quotes
        offset: Input offset of the lexeme, used for error reporting

    Returns:
        The decoded text

    Raises:
        TokenizerError: On a malformed or unpaired ``\\u`` escape
    """
    if "\\" not in raw:
        return raw

    result = []
    index = 0
    length = len(raw)
    while index < length:
        char = raw[index]
        if char != "\\" or index + 1 >= length:
            result.append(char)
            index += 1
            continue

        escape = raw[index + 1]
        if escape != "u":
            # Unknown escapes keep the escaped character
            result.append(SIMPLE_ESCAPES.get(escape, escape))
            index += 2
            continue

        code = _read_hex4(raw, index + 2, offset)
        index += 6
        if 0xD800 <= code <= 0xDBFF:
            if not raw.startswith("\\u", index):
                raise TokenizerError(
                    ErrorKind.MALFORMED_UNICODE_ESCAPE_SEQUENCE,
                    offset,
                    "unpaired high surrogate",
                )
            low = _read_hex4(raw, index + 2, offset)
            if not 0xDC00 <= low <= 0xDFFF:
                raise TokenizerError(
                    ErrorKind.MALFORMED_UNICODE_ESCAPE_SEQUENCE,
                    offset,
                    "invalid low surrogate",
                )
            code = 0x10000 + ((code - 0xD800) << 10) + (low - 0xDC00)
            index += 6
        elif 0xDC00 <= code <= 0xDFFF:
            raise TokenizerError(
                ErrorKind.MALFORMED_UNICODE_ESCAPE_SEQUENCE,
                offset,
                "unpaired low surrogate",
            )
        result.append(chr(code))

    return "".join(result)
