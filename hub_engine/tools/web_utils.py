from __future__ import annotations

import re

from bs4 import BeautifulSoup

NOISE_TAGS = ("script", "style", "noscript", "svg", "nav", "footer", "header", "form", "iframe")


def collapse_whitespace(text: str) -> str:
    return re.sub(r"\s+", " ", text).strip()


def html_to_text(html: str) -> str:
    """Reduce an HTML page to readable paragraph text.

    Paragraph text is preferred; pages without ``<p>`` content fall back to the
    whole body text with boilerplate tags removed.
    """
    if not html:
        return ""
    soup = BeautifulSoup(html, "html.parser")
    for tag in soup(NOISE_TAGS):
        tag.decompose()

    paragraphs = [collapse_whitespace(p.get_text(" ")) for p in soup.find_all("p")]
    paragraphs = [p for p in paragraphs if p]
    if paragraphs:
        return "\n".join(paragraphs)
    return collapse_whitespace(soup.get_text(" "))
