from .escapes import decode_string

__all__ = [
    'decode_string',
]
