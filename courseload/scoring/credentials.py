"""Degree/credential factor."""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Iterable, Optional

from ..names import (
    ARCHITECT_TOKENS,
    ATTORNEY_TOKENS,
    BACHELOR_TOKENS,
    CPA_TOKENS,
    DOCTORAL_TOKENS,
    ENGINEER_TOKENS,
    LICENSE_TOKENS,
    MASTERS_TOKENS,
    NameTokenizer,
    split_credential_text,
)
from .config import ScoringConstants


@dataclass(frozen=True)
class CredentialCounts:
    """Distinct credential tokens found per category."""
    doctoral: int = 0
    masters: int = 0
    license: int = 0
    attorney: int = 0
    cpa: int = 0
    engineer: int = 0
    architect: int = 0
    bachelor: int = 0

    @classmethod
    def from_tokens(cls, tokens: Iterable[str]) -> CredentialCounts:
        distinct = set(tokens)
        return cls(
            doctoral=len(distinct & DOCTORAL_TOKENS),
            masters=len(distinct & MASTERS_TOKENS),
            license=len(distinct & LICENSE_TOKENS),
            attorney=len(distinct & ATTORNEY_TOKENS),
            cpa=len(distinct & CPA_TOKENS),
            engineer=len(distinct & ENGINEER_TOKENS),
            architect=len(distinct & ARCHITECT_TOKENS),
            bachelor=len(distinct & BACHELOR_TOKENS),
        )


def collect_credential_tokens(
    names: Iterable[Optional[str]],
    free_text: Iterable[Optional[str]],
    tokenizer: Optional[NameTokenizer] = None,
) -> set[str]:
    """
    Credential tokens from display names and free-text credential fields.

    Names contribute only what the tokenizer classifies as credentials
    (trailing comma segments, leading honorifics); free text is split whole.
    """
    tokenizer = tokenizer or NameTokenizer()
    tokens: set[str] = set()
    for name in names:
        tokens.update(tokenizer.tokenize(name).credentials)
    for text in free_text:
        tokens.update(split_credential_text(text))
    return tokens


def degree_score(tokens: Iterable[str], constants: Optional[ScoringConstants] = None) -> float:
    """
    Diminishing-returns credential score in [0, 1].

    `1 - exp(-sum)` where doctoral, masters and license tokens add per
    distinct token and attorney, CPA, engineer and architect add a flat
    bonus. A profile with nothing but a bachelor-level token gets a floor.
    """
    c = constants or ScoringConstants()
    counts = CredentialCounts.from_tokens(tokens)
    total = math.fsum([
        c.degree_masters * counts.masters,
        c.degree_doctoral * counts.doctoral,
        c.degree_license * counts.license,
        c.degree_attorney if counts.attorney else 0.0,
        c.degree_cpa if counts.cpa else 0.0,
        c.degree_engineer if counts.engineer else 0.0,
        c.degree_architect if counts.architect else 0.0,
    ])
    score = 1.0 - math.exp(-max(0.0, total))
    if score == 0.0 and counts.bachelor:
        score = c.degree_bachelor_only
    return max(0.0, min(1.0, score))
