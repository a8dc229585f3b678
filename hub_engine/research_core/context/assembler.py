from __future__ import annotations

from typing import Sequence

from hub_engine.research_core.models.interfaces import FetchedDocument

SEPARATOR = "\n"


def char_budget(max_tokens: int, chars_per_token: int = 4) -> int:
    return max(int(max_tokens), 0) * max(int(chars_per_token), 1)


def truncate_to_tokens(text: str, max_tokens: int, chars_per_token: int = 4) -> str:
    # Character slice; prompt budgets downstream assume this approximation.
    return text[: char_budget(max_tokens, chars_per_token)]


def assemble_context(
    documents: Sequence[FetchedDocument],
    *,
    max_tokens_per_doc: int,
    chars_per_token: int = 4,
) -> str:
    """Join per-document truncated content in input order."""
    return SEPARATOR.join(
        truncate_to_tokens(doc.content, max_tokens_per_doc, chars_per_token)
        for doc in documents
    )
