from __future__ import annotations

import re
import unicodedata
from typing import FrozenSet, Iterable

# NOTE: Skill comparison across scoring and ingestion goes through this module
# so that "Deep  Cleaning" from a profile and "deep cleaning" from a listing
# compare equal. Matching is exact after normalization; no fuzzy matching.


def normalize_text(text: str) -> str:
    """
    Deterministic normalization before comparison.

    - stable across platforms
    - remove unicode quirks (smart quotes, non-breaking spaces)
    - collapse whitespace
    """
    if not text:
        return ""
    t = unicodedata.normalize("NFKC", text)
    # Common whitespace normalization (NBSP)
    t = t.replace("\u00a0", " ")
    # Normalize common unicode dashes to '-'
    t = re.sub(r"[\u2010-\u2015]", "-", t)
    return " ".join(t.split())


def normalize_whitespace(text: str) -> str:
    return " ".join((text or "").split()).strip()


def normalize_skill(skill: str) -> str:
    """Case-folded, whitespace-collapsed skill name."""
    return normalize_text(skill).casefold()


def normalize_skills(skills: Iterable[str]) -> FrozenSet[str]:
    out = set()
    for s in skills or []:
        ns = normalize_skill(str(s))
        if ns:
            out.add(ns)
    return frozenset(out)
