"""Markup tokenization with a single forward-scanning cursor.

This module linearizes permissive, HTML-like markup into a flat sequence of
typed tokens. Attribute tokens are tied to the most recently opened tag purely
by position in the sequence. Scanning never raises on malformed input: a
truncated tag or an unterminated attribute value simply ends the sequence.
"""

import logging
from dataclasses import dataclass, field
from enum import Enum, auto
from typing import List, Optional

from lenient_markup_parser.shared import TokenizationConfig, get_logger

# Tags that are always self-closing, regardless of trailing-slash syntax
VOID_ELEMENTS = frozenset({
    "area", "base", "br", "col", "embed", "hr", "img", "input",
    "link", "meta", "source", "track", "wbr",
})

_TAG_NAME_TERMINATORS = frozenset(" >/")
_ATTR_NAME_TERMINATORS = frozenset("= >/")


class TokenType(Enum):
    """Token types produced by the tokenizer."""

    TEXT = auto()               # Character run between tags, verbatim
    TAG_OPEN = auto()           # <name ...>, name as scanned
    TAG_CLOSE = auto()          # </name>, name trimmed
    ATTRIBUTE_NAME = auto()     # Lower-cased attribute name
    ATTRIBUTE_VALUE = auto()    # Raw attribute value, quotes stripped
    SELF_CLOSING_TAG = auto()   # Void element terminated by >


@dataclass(frozen=True)
class Token:
    """A single markup token.

    ``offset`` points at the first input character the token was scanned
    from and is excluded from equality so tokens compare by type and value.
    """

    type: TokenType
    value: str
    offset: int = field(default=0, compare=False)

    def __repr__(self) -> str:
        return f"Token({self.type.name}, {self.value!r})"


class MarkupTokenizer:
    """Converts markup strings into token sequences.

    The tokenizer holds only configuration; all scanning state is local to a
    call, so one instance may be shared between threads.
    """

    def __init__(
        self,
        config: Optional[TokenizationConfig] = None,
        correlation_id: Optional[str] = None,
    ) -> None:
        """Initialize the markup tokenizer.

        Args:
            config: Tokenization configuration (defaults to TokenizationConfig())
            correlation_id: Optional correlation ID for tracking requests
        """
        self.config = config or TokenizationConfig()
        self.correlation_id = correlation_id
        self.logger = get_logger(__name__, correlation_id, "markup_tokenizer")

    def tokenize(self, markup: str) -> List[Token]:
        """Scan ``markup`` left to right and return its tokens.

        Args:
            markup: Markup text to tokenize

        Returns:
            Ordered list of tokens

        Raises:
            TypeError: If markup is not a string
        """
        if not isinstance(markup, str):
            raise TypeError(
                f"markup must be a str, not {type(markup).__name__}"
            )

        tokens: List[Token] = []
        length = len(markup)
        position = 0

        while position < length:
            if markup[position] != "<":
                position = self._scan_text(markup, position, tokens)
            elif position + 1 < length and markup[position + 1] == "/":
                position = self._scan_closing_tag(markup, position, tokens)
            else:
                position = self._scan_opening_tag(markup, position, tokens)

        self.logger.debug(
            "Tokenization completed",
            extra={"token_count": len(tokens), "input_length": length}
        )
        if self.config.log_token_stream and self.logger.is_enabled_for(logging.DEBUG):
            self.logger.debug(f"Token stream: {tokens!r}")

        return tokens

    def _scan_text(self, markup: str, start: int, tokens: List[Token]) -> int:
        """Emit everything up to the next ``<`` as one TEXT token."""
        end = markup.find("<", start)
        if end == -1:
            end = len(markup)
        tokens.append(Token(TokenType.TEXT, markup[start:end], start))
        return end

    def _scan_closing_tag(
        self, markup: str, start: int, tokens: List[Token]
    ) -> int:
        """Emit a TAG_CLOSE for ``</name>`` and return the index after ``>``."""
        end = markup.find(">", start + 2)
        if end == -1:
            end = len(markup)
        tokens.append(
            Token(TokenType.TAG_CLOSE, markup[start + 2:end].strip(), start)
        )
        return end + 1

    def _scan_opening_tag(
        self, markup: str, start: int, tokens: List[Token]
    ) -> int:
        """Emit TAG_OPEN, its attribute tokens and, for void elements, a
        SELF_CLOSING_TAG.
        """
        length = len(markup)
        position = start + 1
        while position < length and markup[position] not in _TAG_NAME_TERMINATORS:
            position += 1

        tag_name = markup[start + 1:position].strip()
        tokens.append(Token(TokenType.TAG_OPEN, tag_name, start))

        position = self._scan_attributes(markup, position, tokens)

        terminated = position < length and markup[position] == ">"
        if terminated and tag_name.lower() in VOID_ELEMENTS:
            tokens.append(Token(TokenType.SELF_CLOSING_TAG, tag_name, start))
        if terminated:
            position += 1

        return position

    def _scan_attributes(
        self, markup: str, position: int, tokens: List[Token]
    ) -> int:
        """Scan the tag body up to ``>`` and return the index of ``>``.

        An attribute starts after a space. Its value is delimited by whatever
        character follows ``=`` and runs to the next occurrence of that same
        character; there is no escaping.
        """
        length = len(markup)
        while position < length and markup[position] != ">":
            if markup[position] != " ":
                position += 1
                continue

            position += 1
            name_start = position
            while position < length and markup[position] not in _ATTR_NAME_TERMINATORS:
                position += 1

            attribute_name = markup[name_start:position]
            if attribute_name:
                tokens.append(Token(
                    TokenType.ATTRIBUTE_NAME,
                    attribute_name.strip().lower(),
                    name_start,
                ))

            if position < length and markup[position] == "=":
                position += 1
                value_start = position + 1
                if position < length:
                    value_end = markup.find(markup[position], value_start)
                    if value_end == -1:
                        value_end = length
                else:
                    value_end = value_start
                tokens.append(Token(
                    TokenType.ATTRIBUTE_VALUE,
                    markup[value_start:value_end],
                    value_start,
                ))
                position = value_end + 1

        return position


def tokenize(markup: str) -> List[Token]:
    """Tokenize ``markup`` with a default-configured tokenizer.

    Examples:
        >>> [t.type.name for t in tokenize('<br>')]
        ['TAG_OPEN', 'SELF_CLOSING_TAG']
    """
    return MarkupTokenizer().tokenize(markup)

