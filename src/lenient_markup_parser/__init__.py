"""Lenient Markup Parser.

Parses permissive, HTML-like markup into a forest of element trees. It is not
a validating or spec-compliant HTML parser: malformed nesting is never
reported, and nodes left unclosed at end of input are silently dropped.

Progressive API Disclosure:
- Level 1: Simple functions - parse(), parse_with_metrics()
- Level 2: Configured parser - HTMLParser class
- Level 3: Pipeline stages - tokenize(), build()
"""

__version__ = "0.1.0"
__author__ = "Lenient Markup Parser Team"

# Level 1 and 2: parsing entry points
from .api import HTMLParser, ParseResult, parse, parse_with_metrics

# Configuration classes for advanced usage
from .shared.config import ConfigError, ConfigValidationError, ParserConfig

# Level 3: pipeline stages and data model
from .tokenization import VOID_ELEMENTS, Token, TokenType, tokenize
from .tree import HTMLNode, TreeBuilder, build

__all__ = [
    # Version and metadata
    "__author__",
    "__version__",

    # Level 1: Simple parsing functions
    "parse",
    "parse_with_metrics",

    # Level 2: Configured parser
    "HTMLParser",
    "ParseResult",

    # Level 3: Pipeline stages
    "tokenize",
    "build",
    "TreeBuilder",
    "Token",
    "TokenType",
    "VOID_ELEMENTS",

    # Data model
    "HTMLNode",

    # Configuration
    "ParserConfig",
    "ConfigError",
    "ConfigValidationError",
]
