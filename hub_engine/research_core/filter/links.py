from __future__ import annotations

from typing import Iterable


def is_denied(url: str, denylist: Iterable[str]) -> bool:
    lowered = url.lower()
    return any(term and term.lower() in lowered for term in denylist)


def filter_links(urls: Iterable[str], denylist: Iterable[str]) -> list[str]:
    """Drop denylisted URLs and exact duplicates, keeping first-seen order.

    Matching is a case-insensitive substring test against the whole URL, so a
    denylist entry such as ``instagram.com`` also removes subdomains and any
    URL that merely mentions the host in its path or query string.
    """
    terms = [term.lower() for term in denylist if term]
    seen: set[str] = set()
    candidates: list[str] = []
    for url in urls:
        if not url or url in seen:
            continue
        if is_denied(url, terms):
            continue
        seen.add(url)
        candidates.append(url)
    return candidates
