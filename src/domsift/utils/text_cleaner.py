# src/domsift/utils/text_cleaner.py
import re

from bs4 import BeautifulSoup

from domsift.core.managers.config_manager import config_manager

_WHITESPACE = re.compile(r"\s+")

# Tags whose content is never visible text
_NOISE_TAGS = ["script", "style", "noscript", "template"]


def strip_tags(markup: str, collapse_whitespace: bool = True) -> str:
    """
    Returns the visible text of a markup fragment.

    Tags are removed and entities decoded by BeautifulSoup; <br> becomes a space.
    With collapse_whitespace, runs of whitespace are folded into a single space.
    """
    if not markup:
        return ""

    soup = BeautifulSoup(markup, config_manager.get_nested("parser.features", "html.parser"))
    for noise in soup.find_all(_NOISE_TAGS):
        noise.decompose()
    for br in soup.find_all("br"):
        br.replace_with(" ")

    text = soup.get_text()
    if collapse_whitespace:
        text = _WHITESPACE.sub(" ", text)
    return text
