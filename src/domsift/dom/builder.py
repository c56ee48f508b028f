# src/domsift/dom/builder.py
import logging
from typing import List, Optional

from bs4 import BeautifulSoup, Tag

from domsift.core.managers.config_manager import config_manager
from domsift.errors import MarkupError

from .models import DOCUMENT_TAG, DOMTree

logger = logging.getLogger(__name__)


class DOMBuilder:
    """
    Builder responsible for parsing raw markup into a DOMTree.

    BeautifulSoup does the actual parsing; the builder only copies the element
    structure (tags, attributes, inner markup) into the arena.
    """

    def __init__(self, features: Optional[str] = None):
        """
        Args:
            features (Optional[str]): The bs4 parser to use. Defaults to the
                                      'parser.features' setting ("html.parser").
        """
        self.features = features or config_manager.get_nested("parser.features", "html.parser")

    def parse_doc(self, html: str, url: str = "") -> DOMTree:
        """
        Parses raw markup into a DOMTree.

        Args:
            html (str): The raw markup string.
            url (str): The URL the markup was retrieved from, kept for reference.

        Returns:
            DOMTree: The arena tree; its root is a '#document' node.

        Raises:
            MarkupError: If the markup is empty.
        """
        if not html:
            raise MarkupError("Markup cannot be empty.", context={"url": url})

        # Basic cleanup of potentially dirty markup (e.g., BOM)
        clean_html = html.replace('\ufeff', '')
        soup = BeautifulSoup(clean_html, self.features, multi_valued_attributes=None)

        tree = DOMTree(raw_url=url)
        document = tree.append(DOCUMENT_TAG, source=soup)

        # Explicit stack of (tag, parent index); children are pushed reversed to keep document order
        stack = [(child, document.index) for child in reversed(self._element_children(soup))]
        while stack:
            tag, parent = stack.pop()
            node = tree.append(tag.name, attrs=tag.attrs, parent=parent, source=tag)
            stack.extend((child, node.index) for child in reversed(self._element_children(tag)))

        if len(tree) == 1:
            logger.warning("No elements found in markup for '%s'.", url or "<string>")
        logger.debug("Built tree with %d nodes for '%s'.", len(tree), url or "<string>")
        return tree

    @staticmethod
    def _element_children(tag: Tag) -> List[Tag]:
        return [child for child in tag.children if isinstance(child, Tag)]


def parse_html(html: str, url: str = "") -> DOMTree:
    """Convenience wrapper around DOMBuilder().parse_doc()."""
    return DOMBuilder().parse_doc(html, url)
