"""Queryable view over a fetched HTML page.

Thin wrapper around BeautifulSoup. Lookups that miss return empty values;
nothing here raises on malformed markup.
"""

from bs4 import BeautifulSoup, Tag

from company_analyzer.services.analyzer.constants import ANALYSIS_WINDOW

_INVISIBLE_TAGS = ("script", "style", "noscript", "template")


def _clean(text: str) -> str:
    return " ".join(text.split())


class DocumentView:
    """Parsed HTML document with the lookups used by the extractors."""

    def __init__(self, html: str) -> None:
        self.soup = BeautifulSoup(html or "", "lxml")
        for tag in self.soup.find_all(_INVISIBLE_TAGS):
            tag.decompose()
        self._body_text: str | None = None

    def title(self) -> str:
        if self.soup.title is None:
            return ""
        return _clean(self.soup.title.get_text())

    def meta(self, name: str) -> str:
        tag = self.soup.find("meta", attrs={"name": name})
        if not isinstance(tag, Tag):
            return ""
        content = tag.get("content") or ""
        return content.strip() if isinstance(content, str) else ""

    def select(self, selector: str) -> list[Tag]:
        """All elements matching a CSS selector, in document order."""
        return self.soup.select(selector)

    def has(self, selector: str) -> bool:
        return self.soup.select_one(selector) is not None

    def texts(self, selector: str) -> list[str]:
        """Trimmed text of every matching element, empties dropped."""
        return [t for t in (_clean(el.get_text(" ")) for el in self.select(selector)) if t]

    def first_text(self, selector: str, limit: int | None = None) -> str:
        el = self.soup.select_one(selector)
        if el is None:
            return ""
        text = _clean(el.get_text(" "))
        return text[:limit] if limit is not None else text

    @staticmethod
    def element_text(element: Tag) -> str:
        return _clean(element.get_text(" "))

    @staticmethod
    def next_sibling_text(element: Tag) -> str:
        """Text of the element's next sibling element, or ``""``."""
        sibling = element.find_next_sibling()
        if sibling is None:
            return ""
        return _clean(sibling.get_text(" "))

    def links(self) -> list[str]:
        """Every anchor ``href`` in document order."""
        hrefs = []
        for a in self.soup.find_all("a", href=True):
            href = a.get("href")
            if isinstance(href, str):
                hrefs.append(href)
        return hrefs

    def body_text(self) -> str:
        """Visible body text with whitespace collapsed."""
        if self._body_text is None:
            root = self.soup.body or self.soup
            self._body_text = _clean(root.get_text(" "))
        return self._body_text

    @property
    def analysis_text(self) -> str:
        """Body text truncated to the analysis window."""
        return self.body_text()[:ANALYSIS_WINDOW]
