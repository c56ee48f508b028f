# src/domsift/forms/reconciler.py
import logging
from typing import Iterable, NamedTuple
from urllib.parse import quote_plus, unquote_plus

from domsift.dom.core import ElementNode
from domsift.query.criteria import SearchCriteria
from domsift.query.matching import FieldSelector, MatchMode
from domsift.query.traversal import descendants, filter_nodes, find_first_in

logger = logging.getLogger(__name__)


class ReconcileResult(NamedTuple):
    new_body: str
    replaced_count: int


class FormDataReconciler:
    """
    Rewrites a URL-encoded form body so its values follow the current state of
    the matching form-field nodes (matched on their `name` attribute).
    """

    def reconcile(
            self,
            nodes: Iterable[ElementNode],
            encoded_body: str,
            only_if_node_has_value: bool = True
    ) -> ReconcileResult:
        """
        Replaces body values with the `value` attribute of the node whose name matches the key.

        Args:
            nodes: Candidate field nodes, searched in order; the first match wins.
            encoded_body (str): application/x-www-form-urlencoded body.
            only_if_node_has_value (bool): Leave an entry alone when the node's value is absent or empty.

        Returns:
            ReconcileResult: The rebuilt body and the number of replaced entries.
            Entry order and count are preserved; untouched entries are kept byte-for-byte.

        Note:
            Replacement values are encoded with `urllib.parse.quote_plus`: spaces become '+',
            '~' is left as is and '!', '*', '(' and ')' are percent-encoded. .NET's
            WebUtility.UrlEncode does the reverse for those characters, so a body produced
            there and reconciled here can differ on them while decoding to the same values.
        """
        candidates = list(nodes)
        entries = encoded_body.split("&")
        replaced = 0

        for index, entry in enumerate(entries):
            raw_key, sep, _ = entry.partition("=")
            if not sep:
                # Not a key=value pair; pass it through
                continue

            key = unquote_plus(raw_key)
            criteria = SearchCriteria(match_all=True, default_mode=MatchMode.EQUALS)
            criteria.add_predicate(FieldSelector.HTML_ATTRIBUTE_NAME, key)
            node = find_first_in(candidates, criteria)
            if node is None:
                continue

            node_value = node.get_attribute("value")
            if not node_value and only_if_node_has_value:
                continue

            entries[index] = f"{raw_key}={quote_plus(node_value or '')}"
            replaced += 1
            logger.debug("Form entry '%s' set from <%s> value.", key, node.tag)

        logger.debug("Reconciled form body: %d of %d entries replaced.", replaced, len(entries))
        return ReconcileResult("&".join(entries), replaced)

    def reconcile_form(
            self,
            form_node: ElementNode,
            encoded_body: str,
            only_if_node_has_value: bool = True
    ) -> ReconcileResult:
        """Reconciles against the field elements found inside `form_node`."""
        fields = filter_nodes(descendants(form_node, include_self=True), SearchCriteria.form_fields())
        return self.reconcile(fields, encoded_body, only_if_node_has_value)
