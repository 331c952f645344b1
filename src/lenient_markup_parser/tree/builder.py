"""Tree building from flat token sequences.

This module implements the stack-based builder that turns a token sequence
into a forest of ``HTMLNode`` trees. Attributes and text are accumulated and
only assigned to a node at the next structural boundary: when a child opens
or when the node itself closes.

Close tokens are never matched against tag names. Any close finalizes
whichever node is current, so misnested markup silently reshapes the tree,
and nodes still open at end of input are dropped from the result.
"""

from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Optional

from lenient_markup_parser.shared import TreeConfig, get_logger
from lenient_markup_parser.tokenization import Token, TokenType

from .node import HTMLNode


@dataclass
class BuildResult:
    """Forest produced by a build together with node accounting."""

    roots: List[HTMLNode] = field(default_factory=list)
    nodes_created: int = 0
    nodes_dropped: int = 0


@dataclass
class _BuildState:
    """Mutable state owned by a single ``build`` call."""

    roots: List[HTMLNode] = field(default_factory=list)
    stack: List[HTMLNode] = field(default_factory=list)
    current: Optional[HTMLNode] = None
    attributes: Dict[str, str] = field(default_factory=dict)
    text_buffer: List[str] = field(default_factory=list)
    nodes_created: int = 0

    def take_attributes(self) -> Dict[str, str]:
        attributes = self.attributes
        self.attributes = {}
        return attributes

    def take_text(self) -> str:
        text = "".join(self.text_buffer)
        self.text_buffer = []
        return text


class TreeBuilder:
    """Builds node forests from token sequences with an explicit stack.

    Nesting depth is bounded by memory, not by the interpreter's recursion
    limit. All per-build state lives in a fresh ``_BuildState``, so one
    builder may be shared between threads.
    """

    def __init__(
        self,
        config: Optional[TreeConfig] = None,
        correlation_id: Optional[str] = None,
    ) -> None:
        """Initialize tree builder.

        Args:
            config: Tree configuration (defaults to TreeConfig())
            correlation_id: Optional correlation ID for request tracking
        """
        self.config = config or TreeConfig()
        self.correlation_id = correlation_id
        self.logger = get_logger(__name__, correlation_id, "tree_builder")

    def build(self, tokens: Iterable[Token]) -> List[HTMLNode]:
        """Build the root forest from ``tokens``.

        Args:
            tokens: Token sequence, consumed once left to right

        Returns:
            Root nodes in document order
        """
        return self.build_result(tokens).roots

    def build_result(self, tokens: Iterable[Token]) -> BuildResult:
        """Build the root forest and report how many nodes were dropped.

        Args:
            tokens: Token sequence, consumed once left to right

        Returns:
            BuildResult with the forest and node counts
        """
        state = _BuildState()

        for token in tokens:
            self._process_token(token, state)

        # No end-of-input flush: anything still open is lost
        nodes_dropped = len(state.stack) + (1 if state.current is not None else 0)

        if nodes_dropped and self.config.log_dropped_nodes:
            self.logger.debug(
                "Unclosed nodes dropped at end of input",
                extra={
                    "nodes_dropped": nodes_dropped,
                    "open_tags": [node.tag_name for node in state.stack]
                    + ([state.current.tag_name] if state.current else []),
                }
            )

        self.logger.debug(
            "Tree building completed",
            extra={
                "root_count": len(state.roots),
                "nodes_created": state.nodes_created,
                "nodes_dropped": nodes_dropped,
            }
        )

        return BuildResult(
            roots=state.roots,
            nodes_created=state.nodes_created,
            nodes_dropped=nodes_dropped,
        )

    def _process_token(self, token: Token, state: _BuildState) -> None:
        """Dispatch a single token."""
        if token.type == TokenType.TAG_OPEN:
            self._handle_tag_open(token, state)
        elif token.type == TokenType.ATTRIBUTE_NAME:
            state.attributes[token.value] = ""
        elif token.type == TokenType.ATTRIBUTE_VALUE:
            self._handle_attribute_value(token, state)
        elif token.type in (TokenType.TAG_CLOSE, TokenType.SELF_CLOSING_TAG):
            self._handle_tag_close(token, state)
        elif token.type == TokenType.TEXT:
            if state.current is not None:
                state.text_buffer.append(token.value)

    def _handle_tag_open(self, token: Token, state: _BuildState) -> None:
        """Suspend the current node onto the stack and start a new one."""
        parent = state.current
        if parent is not None:
            attributes = state.take_attributes()
            if not parent.attributes:
                parent.attributes = attributes
            parent.content = state.take_text().strip()
            state.stack.append(parent)

        state.current = HTMLNode(token.value)
        state.nodes_created += 1

    def _handle_attribute_value(self, token: Token, state: _BuildState) -> None:
        """Overwrite the placeholder of the most recently inserted attribute."""
        if not state.attributes:
            return
        last_name = next(reversed(state.attributes))
        state.attributes[last_name] = token.value

    def _handle_tag_close(self, token: Token, state: _BuildState) -> None:
        """Finalize the current node, whatever its name, and attach it."""
        node = state.current
        if node is None:
            return

        node.is_self_closing = token.type == TokenType.SELF_CLOSING_TAG

        attributes = state.take_attributes()
        if not node.attributes:
            node.attributes = attributes

        text = state.take_text()
        if not node.content:
            node.content = text
        else:
            node.content += " " + text

        if state.stack:
            state.stack[-1].children.append(node)
        else:
            state.roots.append(node)

        state.current = state.stack.pop() if state.stack else None


def build(tokens: Iterable[Token]) -> List[HTMLNode]:
    """Build a root forest with a default-configured builder."""
    return TreeBuilder().build(tokens)
