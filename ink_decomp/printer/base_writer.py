"""
Base writer for generating formatted text output.
"""
from typing import Callable, List

from ..ast.ast import INDENT_WIDTH, indentation


class BaseWriter:
    """
    A text buffer that tracks indentation and the current line.

    It is the output handle statements render into: :meth:`write` returns
    the writer itself so calls can be chained.
    """

    def __init__(self):
        self.chunks: List[str] = []
        self.indent_level: int = 0
        self.current_line_length: int = 0

    def indent(self, handler: Callable[[], None]) -> None:
        """
        Execute handler with increased indentation level.

        Args:
            handler: Function to execute with indentation
        """
        self.indent_level += 1
        try:
            handler()
        finally:
            self.indent_level -= 1

    def indentation(self, extra: int = 0) -> str:
        """Spaces for the current indentation level plus ``extra`` spaces."""
        return indentation(self.indent_level * INDENT_WIDTH + extra)

    def write(self, src: str) -> "BaseWriter":
        """
        Append text verbatim.

        Args:
            src: Text to append, possibly spanning several lines
        """
        if not src:
            return self
        self.chunks.append(src)
        newline = src.rfind("\n")
        if newline < 0:
            self.current_line_length += len(src)
        else:
            self.current_line_length = len(src) - newline - 1
        return self

    def new_line(self) -> "BaseWriter":
        """Finish the current line."""
        return self.write("\n")

    def write_line(self, src: str) -> "BaseWriter":
        """
        Write an indented line and finish it.

        Args:
            src: Text of the line
        """
        return self.write(f"{self.indentation()}{src}\n")

    def end(self) -> str:
        """
        Finish writing and return the complete text.

        Returns:
            Everything written so far
        """
        return "".join(self.chunks)

    def line_length(self) -> int:
        """
        Get the current line length.

        Returns:
            Length of the line being written
        """
        return self.current_line_length
