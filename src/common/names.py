# ABOUTME: Display-name helpers for initials, surnames, and roster ordering.
# ABOUTME: Sort order here drives class statistics and student pickers.

from __future__ import annotations

import unicodedata
from typing import Any, List, Optional, Sequence

MISSING_NAME = "—"


def initials(name: str) -> str:
    return "".join(word[0] for word in name.split()).upper()[:2]


def surname(name: Optional[str]) -> str:
    if not name or name == MISSING_NAME:
        return MISSING_NAME
    parts = name.strip().split()
    return parts[-1] if parts else MISSING_NAME


def collation_key(text: str) -> str:
    """Case- and accent-insensitive key, so "Èrcoli" sorts next to "Ercoli"."""

    decomposed = unicodedata.normalize("NFKD", text)
    return "".join(ch for ch in decomposed if not unicodedata.combining(ch)).casefold()


def surname_key(name: str) -> str:
    parts = name.split()
    return collation_key(parts[-1]) if parts else ""


def sort_by_surname(items: Sequence[Any], name_attr: str = "name") -> List[Any]:
    """
    Order people by surname without mutating the input.

    Records that carry both ``last_name`` and ``first_name`` are ordered by
    those fields; anything else falls back to the last word of its display
    name. Plain strings are treated as display names.
    """

    def key(item: Any):
        last = getattr(item, "last_name", "")
        if last:
            return (collation_key(last), collation_key(getattr(item, "first_name", "") or ""))
        name = item if isinstance(item, str) else (getattr(item, name_attr, "") or "")
        return (surname_key(name), "")

    return sorted(items, key=key)
