# tests/tables/test_extractor.py
import pandas as pd
import pytest

from domsift.core.managers.config_manager import config_manager
from domsift.dom.builder import DOMBuilder
from domsift.query.criteria import SearchCriteria
from domsift.query.matching import FieldSelector
from domsift.query.traversal import find_first
from domsift.tables.extractor import TableExtractor


def _table(html):
    tree = DOMBuilder().parse_doc(html)
    return find_first(tree.root_node, SearchCriteria.by(FieldSelector.NAME, "table"))


def test_rows_and_columns_keep_document_order():
    """Het standaardscenario: twee rijen van verschillende breedte."""
    table = _table("<table><tr><td>A</td><td>B</td></tr><tr><td>C</td></tr></table>")
    assert TableExtractor().extract_rows(table) == [["A", "B"], ["C"]]


def test_cells_are_stripped_of_markup():
    table = _table("""
        <table>
          <tbody>
            <tr><td>  <b>x</b> &amp; y  </td><td><a href="#">link</a><br>text</td></tr>
          </tbody>
        </table>
    """)
    assert TableExtractor().extract_rows(table) == [["x & y", "link text"]]


def test_header_cells_are_ignored_by_default():
    html = "<table><tr><th>H1</th><th>H2</th></tr><tr><td>1</td><td>2</td></tr></table>"
    assert TableExtractor().extract_rows(_table(html)) == [[], ["1", "2"]]
    assert TableExtractor(include_headers=True).extract_rows(_table(html)) == [["H1", "H2"], ["1", "2"]]


@pytest.fixture
def headers_enabled():
    with config_manager.override("tables.include_headers", True):
        yield


def test_header_setting_comes_from_settings(headers_enabled):
    assert TableExtractor().include_headers is True


def test_table_without_rows():
    assert TableExtractor().extract_rows(_table("<table></table>")) == []


def test_row_node_itself_can_be_passed():
    """De startnode telt mee: een losse <tr> levert één rij op."""
    tree = DOMBuilder().parse_doc("<table><tr><td>only</td></tr></table>")
    row = find_first(tree.root_node, SearchCriteria.by(FieldSelector.NAME, "tr"))
    assert TableExtractor().extract_rows(row) == [["only"]]


def test_spans_are_not_normalised():
    table = _table('<table><tr><td colspan="2">wide</td></tr><tr><td>a</td><td>b</td></tr></table>')
    assert TableExtractor().extract_rows(table) == [["wide"], ["a", "b"]]


def test_to_dataframe_pads_short_rows():
    df = TableExtractor.to_dataframe([["A", "B"], ["C"]])
    assert df.shape == (2, 2)
    assert df.iloc[1, 1] == ""


def test_to_dataframe_with_header_row():
    df = TableExtractor.to_dataframe([["name", ""], ["bob", "42"]], header=True)
    assert list(df.columns) == ["name", "column_1"]
    assert df.iloc[0]["name"] == "bob"


def test_to_dataframe_of_nothing():
    assert TableExtractor.to_dataframe([]).empty
    assert isinstance(TableExtractor.to_dataframe([]), pd.DataFrame)
