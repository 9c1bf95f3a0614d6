import io
import logging

import pytest

from ink_decomp.ast import (
    AssignmentExpression,
    BlockStatement,
    DecompileContext,
    ElseStatement,
    ExpressionStatement,
    FunctionStatement,
    GlobalRegistry,
    GlobalVariableStatement,
    IfStatement,
    KnotStatement,
    LiteralExpression,
    SetStatement,
    StitchStatement,
    TopLevelStatement,
)
from ink_decomp.printer import BaseWriter


def expr(text):
    return ExpressionStatement(LiteralExpression(text))


def test_set_statement():
    assert SetStatement("done").to_text() == "~ done"
    assert SetStatement("done").to_text(4) == "    ~ done"


def test_expression_statement():
    assert expr("x > 1").to_text() == "~ x > 1\n"
    assert expr("x > 1").to_text(8) == "        ~ x > 1\n"


def test_assignment_expression():
    statement = ExpressionStatement(AssignmentExpression("x", LiteralExpression("5"), temporary=True))
    assert statement.to_text() == "~ temp x = 5\n"
    statement = ExpressionStatement(AssignmentExpression("x", LiteralExpression("5")))
    assert statement.to_text() == "~ x = 5\n"


def test_render_returns_the_output_handle():
    out = io.StringIO()
    assert expr("a").render(out, 0) is out
    writer = BaseWriter()
    assert SetStatement("b").render(writer, 0) is writer
    assert writer.end() == "~ b"


def test_block_renders_children_in_order():
    block = BlockStatement()
    block.add_statement(expr("a"))
    block.add_statement(expr("b"))
    block.add_statement(expr("c"))
    assert block.to_text(4) == "    ~ a\n    ~ b\n    ~ c\n"


def test_steal_statements_moves_and_empties_donor():
    first, second, third = expr("a"), expr("b"), expr("c")
    block = BlockStatement([first])
    donor = BlockStatement([second, third])
    block.steal_statements(donor)
    assert block.statements == [first, second, third]
    assert block.statements[1] is second
    assert donor.statements == []
    assert len(donor) == 0


def test_steal_from_self_is_a_no_op():
    block = BlockStatement([expr("a")])
    block.steal_statements(block)
    assert len(block) == 1


def test_else_statement():
    branch = ElseStatement([expr("y = 2")])
    assert branch.to_text() == "- else:\n    ~ y = 2\n"


def test_if_statement_without_else():
    statement = IfStatement(LiteralExpression("x > 1"), BlockStatement([expr("y = 1")]))
    assert statement.to_text() == "- x > 1\n    ~ y = 1\n"


def test_if_statement_with_else():
    statement = IfStatement(
        LiteralExpression("x > 1"),
        BlockStatement([expr("y = 1")]),
        ElseStatement([expr("y = 2")]),
    )
    assert statement.to_text() == "- x > 1\n    ~ y = 1\n- else:\n    ~ y = 2\n\n"


def test_else_if_chain():
    statement = IfStatement(
        LiteralExpression("x > 1"),
        expr("y = 1"),
        IfStatement(LiteralExpression("x < 0"), expr("y = 2")),
    )
    assert statement.to_text(4) == (
        "    - x > 1\n"
        "        ~ y = 1\n"
        "    - x < 0\n"
        "        ~ y = 2\n"
        "\n"
    )


def test_global_variable_statement():
    registry = GlobalRegistry()
    statement = GlobalVariableStatement("score", "0", registry)
    assert statement.to_text() == "VAR score = 0\n"
    assert statement.declared
    assert registry.is_global("score")
    assert "score" in registry


def test_global_registry_reports_duplicates():
    registry = GlobalRegistry()
    assert registry.add("x")
    assert not registry.add("x")
    duplicate = GlobalVariableStatement("x", "1", registry)
    assert not duplicate.declared
    assert len(registry) == 1


def test_global_registry_reset():
    registry = GlobalRegistry()
    registry.add("b")
    registry.add("a")
    assert list(registry) == ["a", "b"]
    registry.reset()
    assert len(registry) == 0
    assert not registry.is_global("a")


def test_registries_are_independent():
    first, second = DecompileContext(), DecompileContext()
    GlobalVariableStatement("x", "1", first.registry)
    assert "x" in first.registry
    assert "x" not in second.registry


def test_cloning_a_global_does_not_register_again():
    registry = GlobalRegistry()
    original = GlobalVariableStatement("x", "1", registry)
    registry.reset()
    copy = original.clone()
    assert copy.to_text() == "VAR x = 1\n"
    assert copy.declared
    assert len(registry) == 0


def test_top_level_header_parameters(context):
    function = FunctionStatement("add", context)
    function.add_parameter("a")
    function.add_parameter("b", by_reference=True)
    function.add_statement(expr("return a + b"))
    assert function.to_text() == "=== function add(a, ref b) ===\n~ return a + b\n\n"


def test_parameters_keep_insertion_order(context):
    stitch = StitchStatement("walk", context)
    for name in ("z", "a", "m"):
        stitch.add_parameter(name)
    assert stitch.to_text() == "= walk(z, a, m)\n\n"


def test_stitch_statement(context):
    stitch = StitchStatement("after", context, [expr("x")])
    assert stitch.to_text() == "= after\n~ x\n\n"


def test_plain_top_level_statement_has_no_header(context):
    section = TopLevelStatement("root", context, [expr("x")])
    assert section.to_text() == "~ x\n\n"


def test_knot_with_stitch_renders_end_to_end(context):
    knot = KnotStatement("start", context)
    knot.add_statement(SetStatement("done"))
    stitch = StitchStatement("after", context)
    stitch.add_statement(expr("<rendered expression>"))
    knot.add_stitch(stitch)
    assert knot.to_text() == (
        "=== start ===\n"
        "~ done\n"
        "\n"
        "= after\n"
        "~ <rendered expression>\n"
        "\n"
    )


def test_knot_header_with_parameters(context):
    knot = KnotStatement("meet", context)
    knot.add_parameter("who", by_reference=True)
    assert knot.to_text().startswith("=== meet(ref who) ===\n")


def test_add_stitch_merges_stitch_named_like_knot(context):
    knot = KnotStatement("chapter1", context)
    own = expr("own")
    knot.add_statement(own)
    stitch = StitchStatement("chapter1", context)
    first, second = expr("first"), expr("second")
    stitch.add_statement(first)
    stitch.add_statement(second)

    knot.add_stitch(stitch)

    assert knot.stitches == []
    assert knot.statements == [own, first, second]
    assert stitch.statements == []


def test_add_stitch_keeps_other_stitches_in_order(context):
    knot = KnotStatement("k", context)
    a, b = StitchStatement("a", context), StitchStatement("b", context)
    knot.add_stitch(a)
    knot.add_stitch(b)
    assert knot.stitches == [a, b]


def build_knot(context):
    knot = KnotStatement("start", context)
    knot.add_parameter("n")
    knot.add_statement(
        IfStatement(
            LiteralExpression("n > 0"),
            BlockStatement([expr("n = n - 1")]),
            ElseStatement([expr("n = 0")]),
        )
    )
    knot.add_stitch(StitchStatement("after", context, [expr("done")]))
    return knot


def test_clone_produces_an_independent_tree(context):
    original = build_knot(context)
    before = original.to_text()

    copy = original.clone()
    assert copy.to_text() == before

    copy.statements[0].else_.add_statement(expr("changed"))
    copy.statements[0].then.add_statement(expr("changed"))
    copy.stitches[0].add_statement(expr("changed"))
    copy.add_stitch(StitchStatement("extra", context))
    copy.add_parameter("m")
    copy.add_statement(SetStatement("more"))

    assert original.to_text() == before
    assert copy.to_text() != before


def test_clone_shares_no_children(context):
    original = build_knot(context)
    copy = original.clone()

    assert type(copy) is KnotStatement
    assert copy.statements[0] is not original.statements[0]
    assert copy.statements[0].condition is not original.statements[0].condition
    assert copy.statements[0].else_ is not original.statements[0].else_
    assert type(copy.statements[0].else_) is ElseStatement
    assert copy.stitches[0] is not original.stitches[0]
    assert type(copy.stitches[0]) is StitchStatement
    assert copy.parameters is not original.parameters
    assert copy.context is original.context


@pytest.mark.parametrize("cls", [StitchStatement, FunctionStatement, TopLevelStatement])
def test_section_clone_keeps_its_type(context, cls):
    section = cls("s", context, [expr("x")])
    section.add_parameter("p", by_reference=True)
    copy = section.clone()
    assert type(copy) is cls
    assert copy.to_text() == section.to_text()
    assert copy.statements[0] is not section.statements[0]


def test_statements_are_simple_by_default(context):
    statements = [
        SetStatement("x"),
        expr("x"),
        BlockStatement(),
        ElseStatement(),
        IfStatement(LiteralExpression("c"), expr("x")),
        GlobalVariableStatement("g", "1"),
        KnotStatement("k", context),
    ]
    assert all(statement.is_simple() for statement in statements)


def test_parameter_shadowing_a_global_is_logged(context, caplog):
    GlobalVariableStatement("score", "0", context.registry)
    function = FunctionStatement("add", context)
    with caplog.at_level(logging.WARNING, logger="ink_decomp.ast.ast"):
        function.add_parameter("score")
    assert "shadows a global variable" in caplog.text
    assert function.parameters == {"score": False}
