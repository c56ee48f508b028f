# src/domsift/dom/core.py
from typing import Any, Dict, Iterator, List, Optional

from pydantic import BaseModel, Field, PrivateAttr, field_validator

from domsift.utils.text_cleaner import strip_tags


class ElementNode(BaseModel):
    """
    A single element of the parsed markup tree.

    Nodes live in the arena of a DOMTree. Children are stored as arena indices
    in document order; `parent` is a back-reference index and never owns anything.
    """
    index: int
    tag: str
    attrs: Dict[str, str] = Field(default_factory=dict)
    source_html: Optional[str] = None
    children: List[int] = Field(default_factory=list)
    parent: Optional[int] = None

    # Set by the owning DOMTree
    _tree: Any = PrivateAttr(default=None)
    # Parsed element (bs4 Tag) the inner markup is serialised from on first access
    _source: Any = PrivateAttr(default=None)

    @field_validator("tag")
    @classmethod
    def _lower_tag(cls, value: str) -> str:
        return value.lower()

    @field_validator("attrs", mode="before")
    @classmethod
    def _normalize_attrs(cls, value: Any) -> Dict[str, str]:
        """Lower-cases attribute names and flattens multi-valued attributes (e.g. class)."""
        if not value:
            return {}
        normalized: Dict[str, str] = {}
        for key, val in dict(value).items():
            if isinstance(val, (list, tuple)):
                val = " ".join(val)
            normalized[str(key).lower()] = "" if val is None else str(val)
        return normalized

    @property
    def id(self) -> Optional[str]:
        """The element identifier (the `id` attribute), or None if absent."""
        return self.attrs.get("id")

    @property
    def inner_html(self) -> str:
        """
        The markup between the element's start and end tag.

        Built from the parsed element on first access and then kept, so only the
        nodes a query actually reads pay for serialisation.
        """
        if self.source_html is None and self._source is not None:
            self.source_html = self._source.decode_contents()
        return self.source_html or ""

    @property
    def text(self) -> str:
        """Visible text of the inner content."""
        return strip_tags(self.inner_html).strip()

    @property
    def parent_node(self) -> Optional["ElementNode"]:
        if self.parent is None or self._tree is None:
            return None
        return self._tree.get(self.parent)

    def get_attribute(self, name: str, default: Optional[str] = None) -> Optional[str]:
        """
        Case-insensitive attribute lookup.
        A missing attribute yields `default` (None), which is distinct from an empty value.
        """
        return self.attrs.get(name.lower(), default)

    def has_attribute(self, name: str) -> bool:
        return name.lower() in self.attrs

    def iter_children(self) -> Iterator["ElementNode"]:
        """Yields the child elements in document order."""
        if self._tree is None:
            return
        for child_index in self.children:
            yield self._tree.get(child_index)

    def __eq__(self, other: object) -> bool:
        # Identity within the arena; comparing the owning trees field by field would recurse.
        if not isinstance(other, ElementNode):
            return NotImplemented
        return self._tree is other._tree and self.index == other.index and self.tag == other.tag

    def __hash__(self) -> int:
        return hash((id(self._tree), self.index))

    def __repr__(self) -> str:
        return f"ElementNode(index={self.index}, tag={self.tag!r}, id={self.id!r})"
