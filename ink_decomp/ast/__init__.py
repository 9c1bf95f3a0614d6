from .ast import *
from .context import DecompileContext, GlobalRegistry
from .expression import AssignmentExpression, Expression, LiteralExpression

__all__ = [
    'INDENT_WIDTH',
    'Statement',
    'SetStatement',
    'ExpressionStatement',
    'BlockStatement',
    'ElseStatement',
    'IfStatement',
    'GlobalVariableStatement',
    'TopLevelStatement',
    'StitchStatement',
    'KnotStatement',
    'FunctionStatement',
    'Expression',
    'LiteralExpression',
    'AssignmentExpression',
    'DecompileContext',
    'GlobalRegistry',
]
