# src/domsift/tables/extractor.py
import logging
from typing import List, Optional

import pandas as pd

from domsift.core.managers.config_manager import config_manager
from domsift.dom.core import ElementNode
from domsift.query.criteria import SearchCriteria
from domsift.query.matching import FieldSelector, MatchMode
from domsift.query.traversal import find_all
from domsift.utils.text_cleaner import strip_tags

logger = logging.getLogger(__name__)

Rows = List[List[str]]


class TableExtractor:
    """
    Reads a table-like node as rows of cell texts.

    Every <tr> below the node is a row and every <td> below a row is a column.
    colspan/rowspan are not followed, so rows can differ in width; nested
    tables contribute their cells to the enclosing row as well.
    """

    def __init__(self, include_headers: Optional[bool] = None):
        """
        Args:
            include_headers (Optional[bool]): Also collect <th> cells.
                Defaults to the 'tables.include_headers' setting (off).
        """
        if include_headers is None:
            include_headers = bool(config_manager.get_nested("tables.include_headers", False))
        self.include_headers = include_headers

    def _cell_criteria(self) -> SearchCriteria:
        if not self.include_headers:
            return SearchCriteria.by(FieldSelector.NAME, "td")
        return (
            SearchCriteria(match_all=False, default_mode=MatchMode.EQUALS)
            .add_predicate(FieldSelector.NAME, "td")
            .add_predicate(FieldSelector.NAME, "th")
        )

    def extract_rows(self, table_node: ElementNode) -> Rows:
        """Returns the rows below `table_node`, each as a list of stripped cell texts."""
        row_nodes = find_all(table_node, SearchCriteria.by(FieldSelector.NAME, "tr"))
        cell_criteria = self._cell_criteria()

        rows: Rows = []
        for row_node in row_nodes:
            cells = find_all(row_node, cell_criteria)
            rows.append([strip_tags(cell.inner_html).strip() for cell in cells])

        logger.debug("Extracted %d row(s) from <%s>.", len(rows), table_node.tag)
        return rows

    @staticmethod
    def to_dataframe(rows: Rows, header: bool = False) -> pd.DataFrame:
        """
        Converts extracted rows into a DataFrame, padding short rows with empty strings.

        Args:
            rows (Rows): Output of extract_rows().
            header (bool): Use the first row as column labels.
        """
        if not rows:
            return pd.DataFrame()

        width = max(len(r) for r in rows)
        padded = [r + [""] * (width - len(r)) for r in rows]

        if header:
            columns = [c or f"column_{i}" for i, c in enumerate(padded[0])]
            return pd.DataFrame(padded[1:], columns=columns)
        return pd.DataFrame(padded)
