"""Search-query construction for the backend's mail search."""

from __future__ import annotations

import urllib.parse
from dataclasses import dataclass

# Characters encodeURIComponent leaves untouched besides alphanumerics.
URI_COMPONENT_SAFE = "-_.!~*'()"


@dataclass(frozen=True)
class SearchFilter:
    """Free-text filters as typed by the user."""

    sender: str = ""
    title: str = ""

    def to_query(self) -> str:
        return build_query(self.sender, self.title)


def build_clauses(sender: str, title: str) -> list[str]:
    clauses: list[str] = []
    sender = (sender or "").strip()
    if sender:
        clauses.append(f"from:{sender}")
    for token in (title or "").split():
        clauses.append(f"subject:{token}")
    return clauses


def build_query(sender: str, title: str) -> str:
    """
    Build the percent-encoded search query for the given filters.

    The sender becomes a single ``from:`` clause, while the title is split on
    whitespace into one ``subject:`` clause per word. Returns ``""`` when both
    filters are blank.
    """
    clauses = build_clauses(sender, title)
    if not clauses:
        return ""
    return urllib.parse.quote(" ".join(clauses), safe=URI_COMPONENT_SAFE)
