"""
Ink Decompiler - reconstructs ink script source from compiled story data.

This package provides a zero-copy tokenizer for the story JSON, a statement
tree that renders back to ink syntax, and a driver tying the two together.
"""

from .decoder import (
    Token,
    TokenKind,
    ErrorKind,
    Tokenizer,
    load,
    loads,
)
from .ast import *
from .decompiler import StoryDecompiler, decompile_story
from .printer import BaseWriter, ScriptWriter, TokenWriter
from .exceptions import InkDecompError, TokenizerError, StoryFormatError

__version__ = "0.1.0"

__all__ = [
    # Decoder
    'Token',
    'TokenKind',
    'ErrorKind',
    'Tokenizer',
    'load',
    'loads',

    # Driver
    'StoryDecompiler',
    'decompile_story',

    # Writers
    'BaseWriter',
    'ScriptWriter',
    'TokenWriter',

    # Statements
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

    # Expressions and context
    'Expression',
    'LiteralExpression',
    'AssignmentExpression',
    'DecompileContext',
    'GlobalRegistry',

    # Errors
    'InkDecompError',
    'TokenizerError',
    'StoryFormatError',
]
