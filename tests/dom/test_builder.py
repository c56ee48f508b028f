# tests/dom/test_builder.py
import logging

import pytest

from domsift.dom.builder import DOMBuilder, parse_html
from domsift.dom.core import ElementNode
from domsift.dom.models import DOCUMENT_TAG, DOMTree
from domsift.errors import ConfigurationError, DomSiftError, MarkupError

HTML = """<!DOCTYPE html>
<html>
  <body>
    <DIV ID="main" Class="card wide" data-Extra="1">
      Hello <b>world</b> &amp; friends<br>again
      <input name="q" value="">
    </DIV>
  </body>
</html>
"""


@pytest.fixture
def tree():
    return DOMBuilder().parse_doc(HTML, url="https://example.com/")


def _first(tree, tag):
    return next(n for n in tree.iter_nodes() if n.tag == tag)


def test_root_is_document_node(tree):
    root = tree.root_node
    assert root.tag == DOCUMENT_TAG
    assert root.parent is None
    assert [c.tag for c in root.iter_children()] == ["html"]
    assert tree.raw_url == "https://example.com/"


def test_arena_order_is_document_order(tree):
    assert [n.tag for n in tree.iter_nodes()] == [DOCUMENT_TAG, "html", "body", "div", "b", "br", "input"]
    assert [n.index for n in tree.iter_nodes()] == list(range(len(tree)))


def test_parent_is_a_back_reference(tree):
    b = _first(tree, "b")
    assert b.parent_node.tag == "div"
    assert b.parent_node.parent_node.tag == "body"
    assert b.index in b.parent_node.children


def test_tag_and_attribute_names_are_lowercase(tree):
    div = _first(tree, "div")
    assert div.id == "main"
    assert div.attrs["class"] == "card wide"
    assert div.get_attribute("DATA-EXTRA") == "1"
    assert div.has_attribute("Data-Extra")


def test_missing_attribute_is_none_not_empty(tree):
    """Een ontbrekend attribuut geeft None, een leeg attribuut een lege string."""
    field = _first(tree, "input")
    assert field.get_attribute("value") == ""
    assert field.get_attribute("type") is None
    assert field.get_attribute("type", "text") == "text"
    assert field.id is None


def test_inner_html_and_text(tree):
    div = _first(tree, "div")
    assert "<b>world</b>" in div.inner_html
    assert div.text == "Hello world & friends again"


def test_empty_markup_raises():
    with pytest.raises(MarkupError) as exc_info:
        DOMBuilder().parse_doc("", url="https://example.com/empty")
    assert exc_info.value.context["url"] == "https://example.com/empty"
    assert isinstance(exc_info.value, DomSiftError)
    assert not isinstance(exc_info.value, ConfigurationError)


def test_text_only_markup_gives_lone_document(caplog):
    with caplog.at_level(logging.WARNING, logger="domsift.dom.builder"):
        tree = parse_html("just some text")

    assert len(tree) == 1
    assert tree.root_node.inner_html == "just some text"
    assert "No elements found" in caplog.text


def test_bom_is_stripped():
    tree = parse_html("\ufeff<p>x</p>")
    assert not tree.root_node.inner_html.startswith("\ufeff")
    assert _first(tree, "p").text == "x"


def test_manual_tree_building():
    tree = DOMTree(raw_url="memory")
    root = tree.append("#document")
    form = tree.append("FORM", {"Action": "/go"}, parent=root.index)
    tree.append("input", {"name": "a", "class": ["x", "y"]}, parent=form.index)

    assert tree.root_node is root
    assert form.tag == "form"
    assert form.get_attribute("action") == "/go"
    assert [c.get_attribute("class") for c in form.iter_children()] == ["x y"]


def test_nodes_compare_by_arena_position(tree):
    other = parse_html(HTML)
    assert tree.get(3) == tree.get(3)
    assert tree.get(3) != other.get(3)
    assert len({tree.get(3), tree.get(3), tree.get(4)}) == 2


def test_detached_node_has_no_children():
    node = ElementNode(index=0, tag="div", children=[1, 2])
    assert list(node.iter_children()) == []
    assert node.parent_node is None


def test_deeply_nested_markup_is_built_without_recursion():
    """1500 geneste divs: dieper dan de standaard recursielimiet van Python."""
    depth = 1500
    tree = parse_html("<div>" * depth + "x" + "</div>" * depth)

    assert len(tree) == depth + 1
    deepest = tree.get(depth)
    assert deepest.tag == "div"
    assert deepest.parent == depth - 1
    assert deepest.children == []
    assert deepest.text == "x"
    assert [n.index for n in tree.iter_nodes()] == list(range(depth + 1))


def test_inner_html_is_serialised_on_first_access(tree):
    div = _first(tree, "div")
    assert div.source_html is None

    markup = div.inner_html
    assert "<b>world</b>" in markup
    assert div.source_html == markup
    # Nodes that were never read stay unserialised
    assert _first(tree, "b").source_html is None
