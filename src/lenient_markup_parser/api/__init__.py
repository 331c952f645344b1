"""Public parsing API for lenient markup parsing."""

from .parser import (
    HTMLParser,
    ParseResult,
    parse,
    parse_with_metrics,
)

__all__ = [
    "HTMLParser",
    "ParseResult",
    "parse",
    "parse_with_metrics",
]
