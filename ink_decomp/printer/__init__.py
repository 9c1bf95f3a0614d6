from .base_writer import BaseWriter
from .script_writer import ScriptWriter
from .token_writer import TokenWriter

__all__ = [
    'BaseWriter',
    'ScriptWriter',
    'TokenWriter',
]
