"""Language-specific text processing.

Only Russian is supported; the dictionary dump and the tokenizer are both
Cyrillic-specific.
"""
from .russian.maps import WordClass
from .russian.text import normalize, tokenize, split_sentences

__all__ = [
    "WordClass",
    "normalize",
    "tokenize",
    "split_sentences",
]
