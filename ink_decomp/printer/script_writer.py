"""
Script writer for converting a statement tree to ink source.
"""
from typing import Any, Dict, Iterable, Optional, Union

from .base_writer import BaseWriter
from ..ast.ast import (
    INDENT_WIDTH,
    GlobalVariableStatement,
    KnotStatement,
    Statement,
    TopLevelStatement,
)

HEADER = "// Decompiled by pyinkdec"


class ScriptWriter:
    """
    Writes decompiled statements as ink script.
    """

    def __init__(self, options: Optional[Dict[str, Any]] = None):
        """
        Initialize the script writer.

        Args:
            options: Writer options (withoutHeader, blankLineAfterGlobals)
        """
        self.writer = BaseWriter()
        self.options = options or {}
        self.global_count = 0
        self.knot_count = 0
        self.section_count = 0

    def write_header(self) -> None:
        if not self.options.get('withoutHeader', True):
            self.writer.write_line(HEADER)
            self.writer.new_line()

    def write_global_node(self, node: GlobalVariableStatement) -> None:
        self.global_count += 1
        node.render(self.writer, self.writer.indent_level * INDENT_WIDTH)

    def write_section_node(self, node: TopLevelStatement) -> None:
        self.section_count += 1
        if isinstance(node, KnotStatement):
            self.knot_count += 1
            self.section_count += len(node.stitches)
        node.render(self.writer, self.writer.indent_level * INDENT_WIDTH)

    def write_node(self, node: Statement) -> None:
        """Write any statement."""
        if isinstance(node, GlobalVariableStatement):
            self.write_global_node(node)
        elif isinstance(node, TopLevelStatement):
            self.write_section_node(node)
        else:
            node.render(self.writer, self.writer.indent_level * INDENT_WIDTH)

    def write_nodes(self, nodes: Iterable[Statement]) -> None:
        """Write a story: globals first, separated from what follows."""
        self.write_header()
        after_globals = False
        for node in nodes:
            is_global = isinstance(node, GlobalVariableStatement)
            if after_globals and not is_global and self.options.get('blankLineAfterGlobals', True):
                self.writer.new_line()
            after_globals = is_global
            self.write_node(node)

    def output(self) -> str:
        """Get the final output."""
        return self.writer.end()

    @staticmethod
    def write(
        nodes: Union[Statement, Iterable[Statement]],
        options: Optional[Dict[str, Any]] = None
    ) -> str:
        """
        Write statements to ink script.

        Args:
            nodes: A statement or a sequence of top-level statements
            options: Writer options

        Returns:
            Ink script as string
        """
        writer = ScriptWriter(options)
        if isinstance(nodes, Statement):
            nodes = [nodes]
        writer.write_nodes(nodes)
        return writer.output()
