"""
Statement tree for reconstructed ink script.

Every statement renders itself into an output handle (any object with a
``write(str)`` method) starting at a given indentation, and can be deep-copied
with :meth:`Statement.clone`. Clones never share child nodes with the
original; only the decompilation context is shared.
"""
import io
import logging
from abc import ABC, abstractmethod
from typing import Any, Dict, List, Optional

from .context import DecompileContext, GlobalRegistry
from .expression import Expression

LOG = logging.getLogger(__name__)

# Spaces added per nesting level
INDENT_WIDTH = 4


def indentation(indent: int) -> str:
    return " " * indent


class Statement(ABC):
    """Base class of all statements."""

    @abstractmethod
    def render(self, out: Any, indent: int = 0) -> Any:
        """
        Write the statement to ``out``.

        Args:
            out: Output handle with a ``write(str)`` method
            indent: Number of spaces the statement starts at

        Returns:
            ``out``, for chaining
        """

    @abstractmethod
    def clone(self) -> "Statement":
        """Return a fully independent copy of this statement."""

    def is_simple(self) -> bool:
        """Whether the statement is a single inline construct."""
        return True

    def to_text(self, indent: int = 0) -> str:
        return self.render(io.StringIO(), indent).getvalue()


class SetStatement(Statement):
    """Variable assignment directive; the assigned value follows inline."""

    def __init__(self, name: str):
        self.name = name

    def render(self, out: Any, indent: int = 0) -> Any:
        out.write(f"{indentation(indent)}~ {self.name}")
        return out

    def clone(self) -> "SetStatement":
        return SetStatement(self.name)


class ExpressionStatement(Statement):
    """A bare expression directive."""

    def __init__(self, expression: Expression):
        self.expression = expression

    def render(self, out: Any, indent: int = 0) -> Any:
        out.write(f"{indentation(indent)}~ ")
        self.expression.render(out)
        out.write("\n")
        return out

    def clone(self) -> "ExpressionStatement":
        return ExpressionStatement(self.expression.clone())


class BlockStatement(Statement):
    """An ordered sequence of statements, rendered one after another."""

    def __init__(self, statements: Optional[List[Statement]] = None):
        self.statements: List[Statement] = list(statements) if statements else []

    def __len__(self) -> int:
        return len(self.statements)

    def add_statement(self, statement: Statement) -> None:
        self.statements.append(statement)

    def steal_statements(self, donor: "BlockStatement") -> None:
        """
        Move all of ``donor``'s statements to the end of this block.

        The statements are transferred, not copied; ``donor`` is left empty.
        """
        if donor is self:
            return
        self.statements.extend(donor.statements)
        donor.statements.clear()

    def render_body(self, out: Any, indent: int) -> Any:
        for statement in self.statements:
            statement.render(out, indent)
        return out

    def render(self, out: Any, indent: int = 0) -> Any:
        return self.render_body(out, indent)

    def clone_statements(self) -> List[Statement]:
        return [statement.clone() for statement in self.statements]

    def clone(self) -> "BlockStatement":
        return BlockStatement(self.clone_statements())


class ElseStatement(BlockStatement):
    """The ``else`` branch of a conditional."""

    def render(self, out: Any, indent: int = 0) -> Any:
        out.write(f"{indentation(indent)}- else:\n")
        return self.render_body(out, indent + INDENT_WIDTH)

    def clone(self) -> "ElseStatement":
        return ElseStatement(self.clone_statements())


class IfStatement(Statement):
    """
    A conditional.

    The else branch is any statement: a plain :class:`ElseStatement`, or
    another :class:`IfStatement` for an else-if chain.
    """

    def __init__(
        self,
        condition: Expression,
        then: Statement,
        else_: Optional[Statement] = None
    ):
        self.condition = condition
        self.then = then
        self.else_ = else_

    def render(self, out: Any, indent: int = 0) -> Any:
        out.write(f"{indentation(indent)}- ")
        self.condition.render(out)
        out.write("\n")
        self.then.render(out, indent + INDENT_WIDTH)
        if self.else_ is not None:
            self.else_.render(out, indent)
            out.write("\n")
        return out

    def clone(self) -> "IfStatement":
        return IfStatement(
            self.condition.clone(),
            self.then.clone(),
            self.else_.clone() if self.else_ is not None else None,
        )


class GlobalVariableStatement(Statement):
    """
    A global variable declaration.

    Constructing one with a registry registers its name there; ``declared``
    tells whether the name was new. The value is pre-rendered text.
    """

    def __init__(self, name: str, value: str, registry: Optional[GlobalRegistry] = None):
        self.name = name
        self.value = value
        self.declared = registry.add(name) if registry is not None else True

    def render(self, out: Any, indent: int = 0) -> Any:
        out.write(f"{indentation(indent)}VAR {self.name} = {self.value}\n")
        return out

    def clone(self) -> "GlobalVariableStatement":
        # A copy is not a new declaration, so it is not registered again
        copy = GlobalVariableStatement(self.name, self.value)
        copy.declared = self.declared
        return copy


class TopLevelStatement(BlockStatement):
    """
    Base for knots, stitches and functions.

    Holds the section name and its parameters, in declaration order, mapped
    to whether they are passed by reference.
    """

    def __init__(
        self,
        name: str,
        context: DecompileContext,
        statements: Optional[List[Statement]] = None
    ):
        super().__init__(statements)
        self.name = name
        self.context = context
        self.parameters: Dict[str, bool] = {}

    def add_parameter(self, name: str, by_reference: bool = False) -> None:
        if self.context is not None and name in self.context.registry:
            LOG.warning("Parameter %r of %r shadows a global variable", name, self.name)
        self.parameters[name] = by_reference

    def write_header_base(self, out: Any) -> Any:
        out.write(self.name)
        if self.parameters:
            params = ", ".join(
                f"ref {name}" if by_reference else name
                for name, by_reference in self.parameters.items()
            )
            out.write(f"({params})")
        return out

    def write_header(self, out: Any, indent: int) -> Any:
        return out

    def render(self, out: Any, indent: int = 0) -> Any:
        self.write_header(out, indent)
        self.render_body(out, indent)
        out.write("\n")
        return out

    def copy_section(self, copy: "TopLevelStatement") -> "TopLevelStatement":
        copy.parameters = dict(self.parameters)
        copy.statements = self.clone_statements()
        return copy

    def clone(self) -> "TopLevelStatement":
        return self.copy_section(TopLevelStatement(self.name, self.context))


class StitchStatement(TopLevelStatement):
    """A stitch: a named sub-section of a knot."""

    def write_header(self, out: Any, indent: int) -> Any:
        out.write(f"{indentation(indent)}= ")
        self.write_header_base(out)
        out.write("\n")
        return out

    def clone(self) -> "StitchStatement":
        return self.copy_section(StitchStatement(self.name, self.context))


class FunctionStatement(TopLevelStatement):
    """A knot used as a function."""

    def write_header(self, out: Any, indent: int) -> Any:
        out.write(f"{indentation(indent)}=== function ")
        self.write_header_base(out)
        out.write(" ===\n")
        return out

    def clone(self) -> "FunctionStatement":
        return self.copy_section(FunctionStatement(self.name, self.context))


class KnotStatement(TopLevelStatement):
    """A knot with its own statements followed by its stitches."""

    def __init__(
        self,
        name: str,
        context: DecompileContext,
        statements: Optional[List[Statement]] = None
    ):
        super().__init__(name, context, statements)
        self.stitches: List[StitchStatement] = []

    def add_stitch(self, stitch: StitchStatement) -> None:
        """
        Add a stitch to the knot.

        A stitch named like the knot is the knot's own entry content: its
        statements are moved into the knot's body and the stitch is dropped.
        """
        if stitch.name == self.name:
            LOG.debug("Merging stitch %r into its knot", stitch.name)
            self.steal_statements(stitch)
        else:
            self.stitches.append(stitch)

    def write_header(self, out: Any, indent: int) -> Any:
        out.write(f"{indentation(indent)}=== ")
        self.write_header_base(out)
        out.write(" ===\n")
        return out

    def render(self, out: Any, indent: int = 0) -> Any:
        super().render(out, indent)
        out.write("\n")
        for stitch in self.stitches:
            stitch.render(out, indent)
        return out

    def clone(self) -> "KnotStatement":
        copy = self.copy_section(KnotStatement(self.name, self.context))
        copy.stitches = [stitch.clone() for stitch in self.stitches]
        return copy
