from .story import StoryDecompiler, decompile_story

__all__ = [
    'StoryDecompiler',
    'decompile_story',
]
