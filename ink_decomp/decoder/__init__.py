from .tokenizer import Token, TokenKind, ErrorKind, Tokenizer
from .builder import load, loads, read_value

__all__ = [
    'Token',
    'TokenKind',
    'ErrorKind',
    'Tokenizer',
    'load',
    'loads',
    'read_value',
]
