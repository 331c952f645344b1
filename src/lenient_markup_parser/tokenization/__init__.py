"""Tokenization layer for lenient markup parsing.

Key Components:
    MarkupTokenizer: Scans markup strings into token sequences
    Token: A single token (type, value, source offset)
    TokenType: Enumeration of the token kinds
    VOID_ELEMENTS: Tag names that are always self-closing
"""

from .tokenizer import (
    VOID_ELEMENTS,
    MarkupTokenizer,
    Token,
    TokenType,
    tokenize,
)

__all__ = [
    "VOID_ELEMENTS",
    "MarkupTokenizer",
    "Token",
    "TokenType",
    "tokenize",
]
