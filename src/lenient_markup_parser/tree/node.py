"""Element nodes produced by the tree builder.

An ``HTMLNode`` owns its children exclusively and carries a soft-delete
tombstone (``is_removed``). Removing a node hides it and its whole subtree
from serialization and queries without detaching anything, so the removal can
be undone with ``unremove``.
"""

import re
from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, List, Optional

WILDCARD = "*"

_HIDDEN_STYLE_SUFFIX = "; display: none;"
_DISPLAY_NONE_PATTERN = re.compile(r"display:\s*none;?")


@dataclass(eq=False)
class HTMLNode:
    """A single element in a parsed markup forest.

    ``content`` holds only the node's own direct text as assembled by the
    tree builder. ``None`` (never assigned) is distinct from ``""``.
    """

    tag_name: str
    attributes: Dict[str, str] = field(default_factory=dict)
    children: List["HTMLNode"] = field(default_factory=list)
    content: Optional[str] = None
    is_self_closing: bool = False
    is_removed: bool = False

    def __repr__(self) -> str:
        return (
            f"<HTMLNode {self.tag_name!r} attributes={len(self.attributes)} "
            f"children={len(self.children)}>"
        )

    def html(self) -> str:
        """Serialize this node and its subtree back to markup.

        Removed nodes serialize to an empty string. Self-closing nodes drop
        their content and children.
        """
        if self.is_removed:
            return ""

        attributes = self._attributes_string()
        if self.is_self_closing:
            return f"<{self.tag_name}{attributes} />"

        inner_html = (self.content or "") + "".join(
            child.html() for child in self.children
        )
        return f"<{self.tag_name}{attributes}>{inner_html}</{self.tag_name}>"

    def text(self) -> str:
        """Return this node's direct text, without descending into children."""
        if self.is_removed:
            return ""
        return self.content or ""

    def get_element_by_id(self, element_id: str) -> Optional["HTMLNode"]:
        """Find the first node in document order whose ``id`` equals ``element_id``.

        A removed node hides its whole subtree from the search.
        """
        if self.is_removed:
            return None

        if self.attributes.get("id") == element_id:
            return self

        for child in self.children:
            result = child.get_element_by_id(element_id)
            if result is not None:
                return result

        return None

    def get_elements_by_class(self, class_name: str) -> List["HTMLNode"]:
        """Collect nodes whose space-separated ``class`` list contains ``class_name``."""
        if self.is_removed:
            return []

        results: List[HTMLNode] = []

        class_attribute = self.attributes.get("class")
        if class_attribute and class_name in class_attribute.split(" "):
            results.append(self)

        for child in self.children:
            results.extend(child.get_elements_by_class(class_name))

        return results

    def remove(self) -> None:
        """Mark this node as removed. Children keep their own flags."""
        self.is_removed = True

    def unremove(self) -> None:
        """Clear the removal tombstone."""
        self.is_removed = False

    def hidden(self) -> None:
        """Append ``display: none`` to the inline style.

        Not idempotent: each call appends another declaration.
        """
        if self.is_removed:
            return

        self.attributes["style"] = (
            self.attributes.get("style", "") + _HIDDEN_STYLE_SUFFIX
        )

    def show(self) -> None:
        """Strip the first ``display: none`` declaration from the inline style.

        The ``style`` attribute is deleted when nothing else remains in it.
        """
        if self.is_removed:
            return

        style = self.attributes.get("style")
        if not style:
            return

        style = _DISPLAY_NONE_PATTERN.sub("", style, count=1).strip()
        if style:
            self.attributes["style"] = style
        else:
            del self.attributes["style"]

    def filter_attributes(self, whitelist: Iterable[str]) -> None:
        """Keep only whitelisted attributes on this node and every descendant.

        A whitelist containing ``"*"`` leaves the whole subtree untouched.
        Removed descendants are filtered too.
        """
        allowed = set(whitelist)
        if WILDCARD in allowed:
            return

        self._filter_subtree(allowed)

    def _filter_subtree(self, allowed: set) -> None:
        self.attributes = {
            key: value
            for key, value in self.attributes.items()
            if key in allowed
        }
        for child in self.children:
            child._filter_subtree(allowed)

    def to_dict(self) -> Dict[str, Any]:
        """Convert the subtree to plain dictionaries (tombstones included)."""
        return {
            "tag_name": self.tag_name,
            "attributes": dict(self.attributes),
            "content": self.content,
            "is_self_closing": self.is_self_closing,
            "is_removed": self.is_removed,
            "children": [child.to_dict() for child in self.children],
        }

    def _attributes_string(self) -> str:
        return "".join(
            f' {key}="{value}"' for key, value in self.attributes.items()
        )
