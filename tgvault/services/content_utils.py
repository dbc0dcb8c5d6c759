"""Content processing utilities for note bodies.

Note content is the rich-text editor's HTML. Search and previews work on
the visible text only, so tag and attribute names never match a query.
"""

from html.parser import HTMLParser
from typing import List, Optional

# Elements whose text is not shown to the reader.
_HIDDEN_TAGS = frozenset({"script", "style", "template"})

# Elements that break words apart: "<p>a</p><p>b</p>" reads as "a b".
_BLOCK_TAGS = frozenset({
    "address", "article", "blockquote", "br", "dd", "div", "dl", "dt",
    "figcaption", "h1", "h2", "h3", "h4", "h5", "h6", "hr", "li", "ol",
    "p", "pre", "section", "table", "td", "th", "tr", "ul",
})


class _TextExtractor(HTMLParser):
    """Collects character data outside hidden elements."""

    def __init__(self):
        super().__init__(convert_charrefs=True)
        self.parts: List[str] = []
        self._hidden_depth = 0

    def handle_starttag(self, tag, attrs):
        if tag in _HIDDEN_TAGS:
            self._hidden_depth += 1
        elif tag in _BLOCK_TAGS:
            self.parts.append(" ")

    def handle_endtag(self, tag):
        if tag in _HIDDEN_TAGS:
            self._hidden_depth = max(0, self._hidden_depth - 1)
        elif tag in _BLOCK_TAGS:
            self.parts.append(" ")

    def handle_data(self, data):
        if not self._hidden_depth:
            self.parts.append(data)


def html_to_text(content: Optional[str]) -> str:
    """Visible text of an HTML fragment, whitespace collapsed.

    Plain text without markup passes through unchanged apart from
    whitespace collapsing; ``None`` becomes ``""``.
    """
    if not content:
        return ""
    parser = _TextExtractor()
    parser.feed(content)
    parser.close()
    return " ".join("".join(parser.parts).split())
