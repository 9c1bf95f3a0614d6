"""
Token writer for dumping the token stream of story data.
"""
from collections import Counter
from typing import Any, Dict, List, Optional, Union

from .base_writer import BaseWriter
from ..decoder.tokenizer import Buffer, Token, TokenKind, Tokenizer

_OPENERS = (TokenKind.OBJECT_START, TokenKind.ARRAY_START)
_STOPPERS = (TokenKind.END, TokenKind.ERROR, TokenKind.OBJECT_END, TokenKind.ARRAY_END)


class TokenWriter:
    """
    Writes one line per token, indented by container nesting.
    Shows token kinds, raw lexemes and, optionally, input offsets.
    """

    def __init__(self, options: Optional[Dict[str, Any]] = None):
        """
        Initialize the token writer.

        Args:
            options: Writer options (showOffsets, showKinds)
        """
        self.writer = BaseWriter()
        self.options = options or {}
        self.token_count = 0
        self.kind_counts: Counter = Counter()
        self.error: Optional[Token] = None

    def write_token_node(self, token: Token) -> None:
        """Write a single token."""
        self.token_count += 1
        self.kind_counts[token.kind] += 1

        if self.options.get('showOffsets', False):
            self.writer.write(f"[{self.token_count:4d}] @{token.offset:6d} ")
        self.writer.write(self.writer.indentation())

        if token.kind is TokenKind.ERROR:
            self.error = token
            self.writer.write(f"ERROR {token.text}")
            space = " " * max(1, 50 - self.writer.line_length())
            self.writer.write(f"{space}// at offset {token.offset}")
        elif self.options.get('showKinds', True):
            self.writer.write(f"{token.kind.name} {token.text}".rstrip())
        else:
            self.writer.write(token.text)
        self.writer.new_line()

    def write_level(self, tokenizer: Tokenizer) -> Token:
        """
        Write tokens until the current container level ends.

        Returns:
            The token that ended the level: a closing bracket, END or ERROR
        """
        while True:
            token = tokenizer.next()
            if token.kind in _STOPPERS:
                return token
            self.write_token_node(token)
            if token.kind in _OPENERS:
                closing = self._write_nested(tokenizer)
                if closing.kind in (TokenKind.END, TokenKind.ERROR):
                    return closing
                self.write_token_node(closing)

    def _write_nested(self, tokenizer: Tokenizer) -> Token:
        result: List[Token] = []
        self.writer.indent(lambda: result.append(self.write_level(tokenizer)))
        return result[0]

    def write_stream(self, tokenizer: Tokenizer) -> None:
        """Write every token up to the end of input or the first error."""
        while True:
            token = self.write_level(tokenizer)
            if token.kind is TokenKind.END:
                return
            # An error, or a closing bracket without a matching opener
            self.write_token_node(token)
            if token.kind is TokenKind.ERROR:
                return

    def output(self) -> str:
        """Get the final output."""
        return self.writer.end()

    @staticmethod
    def write(
        source: Union[Tokenizer, Buffer],
        options: Optional[Dict[str, Any]] = None
    ) -> str:
        """
        Write the token stream of story data.

        Args:
            source: A tokenizer, or the raw bytes to tokenize
            options: Writer options

        Returns:
            The token listing as string
        """
        tokenizer = source if isinstance(source, Tokenizer) else Tokenizer(source)
        writer = TokenWriter(options)
        writer.write_stream(tokenizer)
        return writer.output()
