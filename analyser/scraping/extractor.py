"""Visible-text extraction from HTML documents."""

import re
from html.parser import HTMLParser

# Elements whose content is never part of the page's own copy
SKIPPED_TAGS = frozenset({"script", "style", "nav", "header", "footer", "title"})


class _VisibleTextParser(HTMLParser):
    def __init__(self, skipped_tags: frozenset[str]):
        super().__init__(convert_charrefs=True)
        self.skipped_tags = skipped_tags
        self._skip_depth = 0
        self._parts: list[str] = []

    def handle_starttag(self, tag, attrs):
        if tag.lower() in self.skipped_tags:
            self._skip_depth += 1

    def handle_startendtag(self, tag, attrs):
        # Self-closing elements carry no text and never open a skipped region
        pass

    def handle_endtag(self, tag):
        if tag.lower() in self.skipped_tags and self._skip_depth:
            self._skip_depth -= 1

    def handle_data(self, data):
        if not self._skip_depth and data.strip():
            self._parts.append(data)

    @property
    def text(self) -> str:
        return re.sub(r"\s+", " ", " ".join(self._parts)).strip()


def extract_visible_text(html: str, skipped_tags: frozenset[str] = SKIPPED_TAGS) -> str:
    """Return the whitespace-normalized text of ``html`` outside skipped elements."""
    parser = _VisibleTextParser(skipped_tags)
    parser.feed(html or "")
    parser.close()
    return parser.text
