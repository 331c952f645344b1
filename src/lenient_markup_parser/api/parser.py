"""Core parser API for lenient markup parsing.

Progressive disclosure from simple module-level functions to a reusable,
configured parser object:

- ``parse(markup)`` returns the root forest directly.
- ``parse_with_metrics(markup)`` returns a ``ParseResult`` with tokens and
  performance metrics.
- ``HTMLParser`` keeps its tokenizer and builder between calls and tracks
  usage statistics.
"""

import time
from dataclasses import dataclass, field
from typing import Any, Dict, Iterator, List, Optional

from lenient_markup_parser.shared import (
    ParserConfig,
    PerformanceMetrics,
    get_logger,
)
from lenient_markup_parser.tokenization import MarkupTokenizer, Token
from lenient_markup_parser.tree import HTMLNode, TreeBuilder

MS_PER_SECOND = 1000  # Milliseconds per second conversion


@dataclass
class ParseResult:
    """Root forest of a parse together with its tokens and metrics.

    Forest-level helpers apply the node operations to each root in order.
    """

    roots: List[HTMLNode] = field(default_factory=list)
    tokens: List[Token] = field(default_factory=list)
    performance: PerformanceMetrics = field(default_factory=PerformanceMetrics)
    correlation_id: Optional[str] = None

    @property
    def root(self) -> Optional[HTMLNode]:
        """First root node, or None for an empty forest."""
        return self.roots[0] if self.roots else None

    @property
    def node_count(self) -> int:
        """Number of nodes in the forest, removed nodes included."""
        return sum(1 for _ in self.iter_nodes())

    def iter_nodes(self) -> Iterator[HTMLNode]:
        """Yield every node in document order, ignoring tombstones."""
        stack = list(reversed(self.roots))
        while stack:
            node = stack.pop()
            yield node
            stack.extend(reversed(node.children))

    def html(self) -> str:
        """Serialize the whole forest."""
        return "".join(root.html() for root in self.roots)

    def get_element_by_id(self, element_id: str) -> Optional[HTMLNode]:
        """First node across all roots whose ``id`` equals ``element_id``."""
        for root in self.roots:
            found = root.get_element_by_id(element_id)
            if found is not None:
                return found
        return None

    def get_elements_by_class(self, class_name: str) -> List[HTMLNode]:
        """All nodes across all roots carrying ``class_name``."""
        results: List[HTMLNode] = []
        for root in self.roots:
            results.extend(root.get_elements_by_class(class_name))
        return results

    def to_dict(self) -> Dict[str, Any]:
        """Convert the result to a JSON-friendly dictionary."""
        return {
            "correlation_id": self.correlation_id,
            "roots": [root.to_dict() for root in self.roots],
            "performance": {
                "processing_time_ms": self.performance.processing_time_ms,
                "characters_processed": self.performance.characters_processed,
                "tokens_generated": self.performance.tokens_generated,
                "nodes_created": self.performance.nodes_created,
                "nodes_dropped": self.performance.nodes_dropped,
            },
        }


def parse(markup: str, config: Optional[ParserConfig] = None) -> List[HTMLNode]:
    """Tokenize and build ``markup`` in one step.

    Args:
        markup: Markup text
        config: Optional parser configuration

    Returns:
        Root nodes in document order

    Examples:
        >>> roots = parse('<div><p>Hello, world!</p></div>')
        >>> roots[0].children[0].content
        'Hello, world!'

        Misnested markup loses its nodes:
        >>> parse('<div><p>Misnested <div>tags</p></div>')
        []
    """
    return HTMLParser(config).parse(markup).roots


def parse_with_metrics(
    markup: str, config: Optional[ParserConfig] = None
) -> ParseResult:
    """Parse ``markup`` and return tokens, forest and metrics.

    Args:
        markup: Markup text
        config: Optional parser configuration

    Returns:
        ParseResult for the markup
    """
    return HTMLParser(config).parse(markup)


class HTMLParser:
    """Reusable, configured markup parser.

    Holds a tokenizer and a tree builder for reuse across calls and keeps
    usage statistics. Tokenizer and builder are stateless between calls; the
    statistics counters are not synchronized.

    Examples:
        >>> parser = HTMLParser()
        >>> result = parser.parse('<ul><li>One</li><li>Two</li></ul>')
        >>> [li.text() for li in result.root.children]
        ['One', 'Two']
        >>> parser.statistics["total_parses"]
        1
    """

    def __init__(self, config: Optional[ParserConfig] = None) -> None:
        """Initialize parser.

        Args:
            config: Parser configuration (defaults to ParserConfig())
        """
        self._configure(config or ParserConfig())
        self.reset_statistics()

        self.logger.debug(
            "HTMLParser initialized",
            extra={"config_name": self.config.name}
        )

    def _configure(self, config: ParserConfig) -> None:
        self.config = config
        self.correlation_id = config.correlation_id
        self.logger = get_logger(__name__, self.correlation_id, "html_parser")
        self._tokenizer = MarkupTokenizer(
            config=config.tokenization, correlation_id=self.correlation_id
        )
        self._tree_builder = TreeBuilder(
            config=config.tree, correlation_id=self.correlation_id
        )

    def parse(
        self,
        markup: str,
        correlation_id_override: Optional[str] = None
    ) -> ParseResult:
        """Parse markup into a ParseResult.

        Args:
            markup: Markup text
            correlation_id_override: Optional correlation ID for this call

        Returns:
            ParseResult with roots, tokens and metrics

        Raises:
            TypeError: If markup is not a string
        """
        if not isinstance(markup, str):
            raise TypeError(
                f"markup must be a str, not {type(markup).__name__}"
            )

        start_time = time.perf_counter()
        correlation_id = self.correlation_id
        tokenizer = self._tokenizer
        tree_builder = self._tree_builder
        logger = self.logger

        if correlation_id_override and self.config.global_.enable_correlation_tracking:
            correlation_id = correlation_id_override
            tokenizer = MarkupTokenizer(
                config=self.config.tokenization, correlation_id=correlation_id
            )
            tree_builder = TreeBuilder(
                config=self.config.tree, correlation_id=correlation_id
            )
            logger = get_logger(__name__, correlation_id, "html_parser")

        preview_length = self.config.tokenization.preview_length
        logger.info(
            "Starting parse operation",
            extra={
                "content_length": len(markup),
                "preview": (
                    markup[:preview_length] + "..."
                    if len(markup) > preview_length else markup
                ),
            }
        )

        tokens = tokenizer.tokenize(markup)
        build_result = tree_builder.build_result(tokens)

        result = ParseResult(
            roots=build_result.roots,
            tokens=tokens,
            correlation_id=correlation_id,
        )

        if self.config.api.collect_metrics:
            processing_time = (time.perf_counter() - start_time) * MS_PER_SECOND
            result.performance = PerformanceMetrics(
                processing_time_ms=processing_time,
                characters_processed=len(markup),
                tokens_generated=len(tokens),
                nodes_created=build_result.nodes_created,
                nodes_dropped=build_result.nodes_dropped,
            )

        self._parse_count += 1
        self._total_processing_time += result.performance.processing_time_ms
        self._total_nodes_created += build_result.nodes_created
        self._total_nodes_dropped += build_result.nodes_dropped

        logger.info(
            "Parse completed",
            extra={
                "root_count": len(result.roots),
                "processing_time_ms": result.performance.processing_time_ms,
                "characters_per_second": result.performance.characters_per_second,
                "nodes_dropped": build_result.nodes_dropped,
                "total_parses": self._parse_count,
            }
        )

        return result

    def reconfigure(self, config: ParserConfig) -> None:
        """Replace the configuration and rebuild the tokenizer and builder.

        Statistics are kept.
        """
        self._configure(config)
        self.logger.info(
            "Parser reconfigured",
            extra={"config_name": config.name}
        )

    @property
    def statistics(self) -> Dict[str, Any]:
        """Parser usage statistics."""
        return {
            "total_parses": self._parse_count,
            "total_processing_time_ms": self._total_processing_time,
            "average_processing_time_ms": (
                self._total_processing_time / self._parse_count
                if self._parse_count > 0 else 0.0
            ),
            "total_nodes_created": self._total_nodes_created,
            "total_nodes_dropped": self._total_nodes_dropped,
            "correlation_id": self.correlation_id,
        }

    def reset_statistics(self) -> None:
        """Reset parser usage statistics."""
        self._parse_count = 0
        self._total_processing_time = 0.0
        self._total_nodes_created = 0
        self._total_nodes_dropped = 0
