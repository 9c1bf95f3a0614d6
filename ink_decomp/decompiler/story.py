"""
Story driver: rebuilds the statement tree from compiled ink JSON.

Only what the statement tree can express is recovered: global variable
declarations, the knot/stitch/function skeleton with parameters, and
assignments of literal values. Everything else in the story content is
skipped.
"""
import logging
import re
from typing import Any, Dict, List, Optional, Set, Tuple

from ..ast.ast import (
    BlockStatement,
    ExpressionStatement,
    FunctionStatement,
    GlobalVariableStatement,
    KnotStatement,
    Statement,
    StitchStatement,
    TopLevelStatement,
)
from ..ast.context import DecompileContext
from ..ast.expression import AssignmentExpression, LiteralExpression
from ..decoder.builder import loads
from ..decoder.tokenizer import Buffer
from ..exceptions import StoryFormatError
from ..printer.script_writer import ScriptWriter

LOG = logging.getLogger(__name__)

SUPPORTED_INK_VERSIONS = range(19, 22)
GLOBAL_DECL = "global decl"

# Containers the ink compiler names by itself: choices, gathers, branches
_INTERNAL_NAME = re.compile(r"^(?:[cg]-\d+|s|b)$")

Container = List[Any]


def split_container(container: Container) -> Tuple[Container, Dict[str, Any]]:
    """
    Split a container into its content and its named sub-containers.

    The last element of an ink container is either null or a dict holding
    named sub-containers and ``#``-prefixed metadata, which is dropped.
    """
    if container and (container[-1] is None or isinstance(container[-1], dict)):
        named = container[-1] or {}
        return (
            list(container[:-1]),
            {key: value for key, value in named.items() if not key.startswith("#")},
        )
    return list(container), {}


def is_internal_name(name: str) -> bool:
    return bool(_INTERNAL_NAME.match(name))


def flatten(content: Container, named: Dict[str, Any]) -> List[Any]:
    """Content of a container and all its nested containers, in order."""
    flat: List[Any] = []
    for item in content:
        if isinstance(item, list):
            flat.extend(flatten(*split_container(item)))
        else:
            flat.append(item)
    for value in named.values():
        if isinstance(value, list):
            flat.extend(flatten(*split_container(value)))
    return flat


def collect_function_calls(node: Any, found: Set[str]) -> Set[str]:
    """Collect the knots targeted by function calls (``{"f()": path}``)."""
    if isinstance(node, list):
        for item in node:
            collect_function_calls(item, found)
    elif isinstance(node, dict):
        target = node.get("f()")
        if isinstance(target, str) and not target.startswith("."):
            found.add(target.split(".")[0])
        for value in node.values():
            if isinstance(value, (list, dict)):
                collect_function_calls(value, found)
    return found


def scalar_text(item: Any) -> Optional[str]:
    """Ink source text of a single evaluation-stack literal."""
    if isinstance(item, bool):
        return "true" if item else "false"
    if isinstance(item, (int, float)):
        return repr(item)
    if isinstance(item, dict):
        if "^->" in item:
            return f"-> {item['^->']}"
        if isinstance(item.get("list"), dict):
            names = [key.rsplit(".", 1)[-1] for key in item["list"]]
            return f"({', '.join(names)})"
    return None


def literal_text(items: List[Any]) -> Optional[str]:
    """
    Ink source text of an evaluated literal, or None if it is not one.

    Args:
        items: Evaluation items between ``ev`` and ``/ev`` (or the part of
            them that computes one value)
    """
    if len(items) == 1:
        return scalar_text(items[0])
    if len(items) == 2 and items == ["str", "/str"]:
        return '""'
    if (
        len(items) == 3
        and items[0] == "str"
        and items[2] == "/str"
        and isinstance(items[1], str)
        and items[1].startswith("^")
    ):
        return f'"{items[1][1:]}"'
    return None


class StoryDecompiler:
    """
    Builds statements from a loaded ink story.

    Each call to :meth:`decompile` is one run: the context is reset first, so
    a single decompiler can process several stories.
    """

    def __init__(self, context: Optional[DecompileContext] = None):
        self.context = context if context is not None else DecompileContext()

    def decompile(self, story: Any) -> List[Statement]:
        """
        Decompile a story document.

        Args:
            story: The story JSON as Python values

        Returns:
            Global declarations, top-level statements, then sections

        Raises:
            StoryFormatError: If the document has no root container
        """
        if not isinstance(story, dict) or not isinstance(story.get("root"), list):
            raise StoryFormatError("Story data has no root container")

        version = story.get("inkVersion")
        if version not in SUPPORTED_INK_VERSIONS:
            LOG.warning("Unsupported inkVersion %r, output may be incomplete", version)

        self.context.reset()
        collect_function_calls(story["root"], self.context.functions)
        LOG.debug("Functions: %s", sorted(self.context.functions))

        content, named = split_container(story["root"])
        statements: List[Statement] = []

        declarations = named.get(GLOBAL_DECL)
        if isinstance(declarations, list):
            statements.extend(self.read_globals(declarations))

        internal = {key: value for key, value in named.items() if is_internal_name(key)}
        top = BlockStatement()
        self.read_body(flatten(content, internal), top)
        statements.extend(top.statements)

        for name, container in named.items():
            if name == GLOBAL_DECL or is_internal_name(name) or not isinstance(container, list):
                continue
            statements.append(self.build_section(name, container))

        return statements

    def read_globals(self, container: Container) -> List[GlobalVariableStatement]:
        """Read the ``global decl`` container into declarations."""
        content, _ = split_container(container)
        declarations: List[GlobalVariableStatement] = []
        pending: List[Any] = []
        evaluating = False

        for item in content:
            if item == "ev":
                evaluating = True
                pending = []
            elif item == "/ev":
                evaluating = False
            elif evaluating and isinstance(item, dict) and "VAR=" in item:
                name = item["VAR="]
                value = literal_text(pending)
                pending = []
                if value is None:
                    LOG.warning("Skipping global %r: initial value is not a literal", name)
                    continue
                declaration = GlobalVariableStatement(name, value, self.context.registry)
                if not declaration.declared:
                    LOG.warning("Global variable %r is declared more than once", name)
                declarations.append(declaration)
            elif evaluating:
                pending.append(item)

        return declarations

    def read_parameters(self, section: TopLevelStatement, content: Container) -> Container:
        """
        Read the leading parameter assignments of a section.

        Arguments are popped off the evaluation stack, so parameters are
        stored last to first.

        Returns:
            The content following the parameters
        """
        count = 0
        while (
            count < len(content)
            and isinstance(content[count], dict)
            and set(content[count]) == {"temp="}
        ):
            count += 1
        for item in reversed(content[:count]):
            section.add_parameter(item["temp="])
        return content[count:]

    def read_body(self, items: List[Any], block: BlockStatement) -> None:
        """Add the literal assignments found in ``items`` to ``block``."""
        index = 0
        while index < len(items):
            if items[index] != "ev":
                index += 1
                continue
            try:
                end = items.index("/ev", index + 1)
            except ValueError:
                return
            target = items[end + 1] if end + 1 < len(items) else None
            value = literal_text(items[index + 1:end])
            if isinstance(target, dict) and value is not None:
                assignment = self._assignment(target, value)
                if assignment is not None:
                    block.add_statement(ExpressionStatement(assignment))
                    index = end + 2
                    continue
            index = end + 1

    @staticmethod
    def _assignment(target: Dict[str, Any], value: str) -> Optional[AssignmentExpression]:
        if "temp=" in target:
            return AssignmentExpression(
                target["temp="],
                LiteralExpression(value),
                temporary=not target.get("re", False),
            )
        if "VAR=" in target:
            return AssignmentExpression(target["VAR="], LiteralExpression(value))
        return None

    def build_stitch(self, name: str, container: Container) -> StitchStatement:
        content, named = split_container(container)
        stitch = StitchStatement(name, self.context)
        body = self.read_parameters(stitch, content)
        self.read_body(flatten(body, named), stitch)
        return stitch

    def build_section(self, name: str, container: Container) -> TopLevelStatement:
        """
        Build a knot, or a function when the knot is ever called as one.

        The knot's own content becomes a stitch named after the knot, which
        :meth:`KnotStatement.add_stitch` merges back into the knot's body.
        """
        content, named = split_container(container)
        internal = {key: value for key, value in named.items() if is_internal_name(key)}

        if self.context.is_function(name):
            function = FunctionStatement(name, self.context)
            body = self.read_parameters(function, content)
            self.read_body(flatten(body, named), function)
            return function

        knot = KnotStatement(name, self.context)
        entry = StitchStatement(name, self.context)
        body = self.read_parameters(knot, content)
        self.read_body(flatten(body, internal), entry)
        knot.add_stitch(entry)

        for stitch_name, stitch_container in named.items():
            if is_internal_name(stitch_name) or not isinstance(stitch_container, list):
                continue
            knot.add_stitch(self.build_stitch(stitch_name, stitch_container))

        LOG.debug("Knot %r: %d statements, %d stitches", name, len(knot), len(knot.stitches))
        return knot


def decompile_story(
    data: Buffer,
    context: Optional[DecompileContext] = None,
    options: Optional[Dict[str, Any]] = None
) -> str:
    """
    Decompile compiled ink JSON into ink script.

    Args:
        data: The story JSON bytes
        context: Context for the run; a fresh one if omitted
        options: ScriptWriter options

    Returns:
        The reconstructed ink script
    """
    story = loads(data)
    statements = StoryDecompiler(context).decompile(story)
    return ScriptWriter.write(statements, options)
