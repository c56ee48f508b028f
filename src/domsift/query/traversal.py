# src/domsift/query/traversal.py
"""
Depth-first enumeration of element trees and criteria-filtered lookups.

All enumerations are lazy generators over the read-only tree; calling again
walks the tree again.
"""
import logging
from itertools import islice
from typing import Iterable, Iterator, List, Optional

from domsift.dom.core import ElementNode

from .criteria import SearchCriteria

logger = logging.getLogger(__name__)

UNLIMITED = -1


def descendants(node: ElementNode, include_self: bool = False) -> Iterator[ElementNode]:
    """
    Yields the descendants of `node` in depth-first pre-order.

    Args:
        node (ElementNode): The node to start from.
        include_self (bool): If True, `node` itself is yielded first.
    """
    if include_self:
        yield node

    # Explicit stack of child iterators, so deep documents don't hit the recursion limit
    stack = [node.iter_children()]
    while stack:
        child = next(stack[-1], None)
        if child is None:
            stack.pop()
            continue
        yield child
        stack.append(child.iter_children())


def filter_nodes(
        nodes: Iterable[ElementNode],
        criteria: SearchCriteria,
        limit: int = UNLIMITED
) -> Iterator[ElementNode]:
    """
    Yields the nodes accepted by `criteria`, in input order.

    Stops as soon as `limit` matches were produced; a negative limit means unlimited.
    """
    if limit == 0:
        return iter(())
    matches = (n for n in nodes if criteria.is_acceptable(n))
    if limit < 0:
        return matches
    return islice(matches, limit)


def find_all(
        node: ElementNode,
        criteria: SearchCriteria,
        limit: int = UNLIMITED,
        include_self: bool = True
) -> List[ElementNode]:
    """Returns all matching nodes at or below `node` (up to `limit`)."""
    found = list(filter_nodes(descendants(node, include_self), criteria, limit))
    logger.debug("find_all %r under <%s>: %d match(es).", criteria, node.tag, len(found))
    return found


def find_first(
        node: ElementNode,
        criteria: SearchCriteria,
        include_self: bool = False
) -> Optional[ElementNode]:
    """Returns the first matching descendant of `node`, or None."""
    return next(filter_nodes(descendants(node, include_self), criteria, 1), None)


def find_first_in(nodes: Iterable[ElementNode], criteria: SearchCriteria) -> Optional[ElementNode]:
    """Returns the first node of an explicit collection that matches, or None."""
    return next(filter_nodes(nodes, criteria, 1), None)
