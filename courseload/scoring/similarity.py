"""String and topic similarity used by the course-match factor."""

from __future__ import annotations

import math
import re
from collections import Counter
from typing import Iterable, Optional, Sequence


def tokenize(text: Optional[str]) -> list[str]:
    """Lowercase alphanumeric words: 'IT 101 - Intro' -> ['it', '101', 'intro']."""
    return re.sub(r"[^a-z0-9]+", " ", str(text or "").lower()).split()


def normalize_tight(text: Optional[str]) -> str:
    """Lowercase with everything but letters and digits removed."""
    return re.sub(r"[^a-z0-9]+", "", str(text or "").lower())


def topic_tokens(text: Optional[str]) -> list[str]:
    """Words of three or more characters, used as topic-vector terms."""
    return [t for t in re.sub(r"[^a-z0-9\s]", " ", str(text or "").lower()).split() if len(t) >= 3]


def levenshtein(a: str, b: str) -> int:
    """Edit distance with unit insert, delete and substitute costs."""
    if a == b:
        return 0
    if not a:
        return len(b)
    if not b:
        return len(a)
    prev = list(range(len(b) + 1))
    for i, ca in enumerate(a, start=1):
        curr = [i] + [0] * len(b)
        for j, cb in enumerate(b, start=1):
            cost = 0 if ca == cb else 1
            curr[j] = min(prev[j] + 1, curr[j - 1] + 1, prev[j - 1] + cost)
        prev = curr
    return prev[-1]


def sim_ratio(a: str, b: str) -> float:
    """1 - distance / longer length; two empty strings are identical."""
    if not a and not b:
        return 1.0
    if not a or not b:
        return 0.0
    return max(0.0, 1.0 - levenshtein(a, b) / max(len(a), len(b)))


def _bigrams(text: str) -> Counter:
    return Counter(text[i:i + 2] for i in range(len(text) - 1))


def dice_bigram(a: Optional[str], b: Optional[str]) -> float:
    """
    Sørensen-Dice coefficient over character bigrams of the tight forms.

    Strings shorter than two characters fall back to `sim_ratio`.
    """
    a, b = normalize_tight(a), normalize_tight(b)
    if a == b:
        return 1.0
    if len(a) < 2 or len(b) < 2:
        return sim_ratio(a, b)
    ga, gb = _bigrams(a), _bigrams(b)
    intersection = sum((ga & gb).values())
    total = sum(ga.values()) + sum(gb.values())
    return 2 * intersection / total if total else 0.0


def token_fuzzy_best_ratio(query: Sequence[str], pool: Sequence[str]) -> float:
    """Mean over query tokens of the best `sim_ratio` against any pool token."""
    if not query or not pool:
        return 0.0
    best = [max(sim_ratio(q, p) for p in pool) for q in query]
    return math.fsum(best) / len(query)


def topic_vector(tags: Iterable[str]) -> Counter:
    return Counter(tags)


def cosine(a: Counter, b: Counter) -> float:
    """Cosine similarity of two term-count vectors; 0.0 when either is empty."""
    if not a or not b:
        return 0.0
    dot = math.fsum(count * b[term] for term, count in sorted(a.items()) if term in b)
    na = math.fsum(v * v for v in a.values())
    nb = math.fsum(v * v for v in b.values())
    if na == 0 or nb == 0:
        return 0.0
    return dot / math.sqrt(na * nb)
