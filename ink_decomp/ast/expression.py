"""
Expressions used by statements.

Statements only rely on the :class:`Expression` capability: cloning and
rendering into an output handle.
"""
import io
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any


class Expression(ABC):
    """An expression of the ink condition/value language."""

    @abstractmethod
    def render(self, out: Any) -> Any:
        """Write the expression to ``out`` and return ``out``."""

    @abstractmethod
    def clone(self) -> "Expression":
        """Return an independent copy of this expression."""

    def to_text(self) -> str:
        return self.render(io.StringIO()).getvalue()


@dataclass
class LiteralExpression(Expression):
    """Pre-rendered expression text."""
    text: str

    def render(self, out: Any) -> Any:
        out.write(self.text)
        return out

    def clone(self) -> "LiteralExpression":
        return LiteralExpression(self.text)


@dataclass
class AssignmentExpression(Expression):
    """Assignment to a variable; temporaries are declared with ``temp``."""
    name: str
    value: Expression
    temporary: bool = False

    def render(self, out: Any) -> Any:
        if self.temporary:
            out.write("temp ")
        out.write(f"{self.name} = ")
        return self.value.render(out)

    def clone(self) -> "AssignmentExpression":
        return AssignmentExpression(self.name, self.value.clone(), self.temporary)
