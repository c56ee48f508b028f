# src/domsift/dom/models.py
from typing import Any, Dict, Iterator, List, Optional

from pydantic import BaseModel, Field

from .core import ElementNode

DOCUMENT_TAG = "#document"


class DOMTree(BaseModel):
    """
    Represents a parsed markup document as an arena of ElementNodes.

    The root is a synthetic '#document' node whose children are the top-level
    elements. Nodes reference each other by arena index only. The tree is
    treated as read-only while queries run against it.
    """
    raw_url: str = ""
    nodes: List[ElementNode] = Field(default_factory=list)
    root: Optional[int] = None

    def model_post_init(self, __context: Any) -> None:
        for node in self.nodes:
            node._tree = self

    @property
    def root_node(self) -> Optional[ElementNode]:
        """The document node, or None for an empty tree."""
        if self.root is None:
            return None
        return self.nodes[self.root]

    def get(self, index: int) -> ElementNode:
        return self.nodes[index]

    def append(
            self,
            tag: str,
            attrs: Optional[Dict[str, Any]] = None,
            inner_html: Optional[str] = None,
            parent: Optional[int] = None,
            source: Any = None
    ) -> ElementNode:
        """
        Adds a node to the arena and links it under `parent`.
        The first node appended without a parent becomes the root.

        Inner markup is either given as `inner_html` or serialised lazily from
        `source`, the parsed bs4 element (or soup) the node was copied from.
        """
        node = ElementNode(
            index=len(self.nodes),
            tag=tag,
            attrs=attrs or {},
            source_html=inner_html,
            parent=parent,
        )
        node._tree = self
        node._source = source
        self.nodes.append(node)

        if parent is not None:
            self.nodes[parent].children.append(node.index)
        elif self.root is None:
            self.root = node.index
        return node

    def __len__(self) -> int:
        return len(self.nodes)

    def iter_nodes(self) -> Iterator[ElementNode]:
        """Yields every node in arena (document) order."""
        return iter(self.nodes)
