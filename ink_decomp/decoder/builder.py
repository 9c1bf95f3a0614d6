"""
Value builder on top of the tokenizer.

Turns a complete JSON document into plain Python values. String escapes are
decoded here, at the point where a value has to outlive its token.
"""
import logging
from typing import IO, Any, Dict, List, Union

from .tokenizer import Buffer, ErrorKind, Token, TokenKind, Tokenizer
from ..exceptions import TokenizerError
from ..utils.escapes import decode_string

LOG = logging.getLogger(__name__)

UTF8_BOM = b"\xef\xbb\xbf"


def _raise_for(token: Token) -> None:
    if token.kind is TokenKind.ERROR:
        raise TokenizerError(token.error or ErrorKind.UNSPECIFIED_ERROR, token.offset)
    if token.kind is TokenKind.END:
        raise TokenizerError(ErrorKind.PREMATURE_END_OF_INPUT, token.offset)
    raise TokenizerError(
        ErrorKind.SYNTAX_ERROR,
        token.offset,
        f"unexpected {token.text!r}",
    )


def decode_token_string(token: Token) -> str:
    """Decode a STRING or FIELD_NAME token into text, quotes removed."""
    return decode_string(token.text[1:-1], token.offset)


def read_value(tokenizer: Tokenizer, token: Token) -> Any:
    """
    Build the value starting at ``token``, pulling more tokens as needed.

    Args:
        tokenizer: The tokenizer ``token`` came from
        token: The current token of ``tokenizer``

    Returns:
        A dict, list, str, int, float, bool or None
    """
    kind = token.kind
    if kind is TokenKind.OBJECT_START:
        return _read_object(tokenizer)
    if kind is TokenKind.ARRAY_START:
        return _read_array(tokenizer)
    if kind is TokenKind.STRING:
        return decode_token_string(token)
    if kind is TokenKind.INTEGER:
        return tokenizer.int_value()
    if kind is TokenKind.FLOAT:
        return tokenizer.float_value()
    if kind is TokenKind.TRUE:
        return True
    if kind is TokenKind.FALSE:
        return False
    if kind is TokenKind.NULL:
        return None
    _raise_for(token)


def _read_object(tokenizer: Tokenizer) -> Dict[str, Any]:
    result: Dict[str, Any] = {}
    while True:
        token = tokenizer.next()
        if token.kind is TokenKind.OBJECT_END:
            return result
        if token.kind is not TokenKind.FIELD_NAME:
            _raise_for(token)
        key = decode_token_string(token)
        if key in result:
            LOG.debug("Duplicate key %r at offset %d, keeping the last value", key, token.offset)
        result[key] = read_value(tokenizer, tokenizer.next())


def _read_array(tokenizer: Tokenizer) -> List[Any]:
    result: List[Any] = []
    while True:
        token = tokenizer.next()
        if token.kind is TokenKind.ARRAY_END:
            return result
        result.append(read_value(tokenizer, token))


def loads(data: Union[Buffer, str]) -> Any:
    """
    Parse a complete document.

    Args:
        data: Document bytes (a leading UTF-8 BOM is skipped) or text

    Returns:
        The document as Python values

    Raises:
        TokenizerError: If the document is malformed
    """
    if isinstance(data, str):
        data = data.encode("utf-8")

    view = memoryview(data)
    if bytes(view[:len(UTF8_BOM)]) == UTF8_BOM:
        LOG.debug("Skipping UTF-8 byte order mark")
        view = view[len(UTF8_BOM):]

    tokenizer = Tokenizer(view)
    value = read_value(tokenizer, tokenizer.next())

    trailing = tokenizer.next()
    if trailing.kind is not TokenKind.END:
        if trailing.kind is TokenKind.ERROR:
            _raise_for(trailing)
        raise TokenizerError(
            ErrorKind.SYNTAX_ERROR,
            trailing.offset,
            "trailing data after document",
        )
    return value


def load(fp: IO[bytes]) -> Any:
    """Parse a complete document from a binary file object."""
    return loads(fp.read())
