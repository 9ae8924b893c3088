"""
Faculty name tokenization.

Directory names arrive in a handful of shapes:

- "Last, First M."            -> surname, given name, middle initial
- "Last, First Suffix"        -> generational suffix (Jr., III) split off
- "Last, First M., PhD, LPT"  -> trailing comma segments are credentials
- "Dr. First M. Last"         -> leading honorifics are credentials too

The tokenizer only splits; it does not score. Credential vocabularies used
by the degree factor live here so both sides agree on what a token means.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import Iterable, Optional


# =============================================================================
# Token Vocabularies
# =============================================================================

DOCTORAL_TOKENS = frozenset({
    "PHD", "EDD", "SCD", "DRPH", "DBA", "DPA", "DENG", "DIT", "DIS", "DSM",
    "DR", "DOCTOR", "DOCTORATE",
})

MASTERS_TOKENS = frozenset({
    "MAED", "MED", "MAT", "MSC", "MSIT", "MSCS", "MIT", "MENG", "MBA", "MPA",
    "MPM", "MMATH", "MTECH", "MA", "MS", "MSCJ", "MASTER", "MASTERS", "MASTERAL",
})

LICENSE_TOKENS = frozenset({
    "LPT", "RN", "RMT", "RPH", "RSW", "RCH", "RCRIM", "RGC", "REE", "RME",
    "RCE", "RCHE", "RA", "RLA", "RL", "PRC", "LICENSED", "REGISTERED",
})

BACHELOR_TOKENS = frozenset({
    "BS", "BA", "AB", "BSC", "BSED", "BEED", "BSEE", "BSECE", "BSA",
})

ATTORNEY_TOKENS = frozenset({"ATTY", "JD"})
CPA_TOKENS = frozenset({"CPA"})
ENGINEER_TOKENS = frozenset({"ENGR"})
ARCHITECT_TOKENS = frozenset({"ARCH"})

GENERATIONAL_SUFFIXES = frozenset({
    "JR", "SR", "II", "III", "IV", "V", "VI", "VII", "VIII", "IX", "X",
})

COURTESY_TITLES = frozenset({"MR", "MRS", "MS", "MISS", "PROF"})

# Honorifics that double as credentials when they lead a name
HONORIFIC_CREDENTIALS = frozenset({"DR", "ATTY", "ENGR", "ARCH"})

CREDENTIAL_TOKENS = (
    DOCTORAL_TOKENS | MASTERS_TOKENS | LICENSE_TOKENS | BACHELOR_TOKENS
    | ATTORNEY_TOKENS | CPA_TOKENS | ENGINEER_TOKENS | ARCHITECT_TOKENS
)

# Two-letter credentials that are also common given-name abbreviations
# ("Ma. Cristina") and are only trusted outside the given-name segment.
AMBIGUOUS_IN_GIVEN = frozenset({"MA", "MS", "RA", "RL", "RN", "BA", "AB"})


def clean_token(token: str) -> str:
    """Upper-case a token and drop periods: 'Ph.D.' -> 'PHD'."""
    return re.sub(r"[^A-Z0-9]", "", token.upper())


def split_credential_text(text: Optional[str]) -> list[str]:
    """
    Split free-text credential fields into cleaned tokens.

    Example:
        >>> split_credential_text("Ph.D. in Education; MAEd, LPT")
        ['PHD', 'IN', 'EDUCATION', 'MAED', 'LPT']
    """
    raw = str(text or "").upper()
    raw = re.sub(r"[^A-Z0-9\s.,]", " ", raw)
    return [t for t in (clean_token(p) for p in re.split(r"[\s,]+", raw)) if t]


# =============================================================================
# Name Tokens
# =============================================================================

@dataclass(frozen=True)
class NameTokens:
    """Structured view of a faculty display name."""
    surname: str = ""
    given: str = ""
    middle_initial: Optional[str] = None
    suffixes: tuple[str, ...] = field(default_factory=tuple)
    credentials: tuple[str, ...] = field(default_factory=tuple)

    @property
    def display(self) -> str:
        """'Given M. Surname' style rendering."""
        parts = [self.given]
        if self.middle_initial:
            parts.append(f"{self.middle_initial}.")
        parts.append(self.surname)
        return " ".join(p for p in parts if p)


class NameTokenizer:
    """
    Split faculty display names into name parts and credential tokens.

    Usage:
        tokens = NameTokenizer().tokenize("Dela Cruz, Juan P., PhD")
        tokens.surname      # 'Dela Cruz'
        tokens.credentials  # ('PHD',)
    """

    def __init__(self, credential_vocabulary: Iterable[str] = CREDENTIAL_TOKENS):
        self.vocabulary = frozenset(credential_vocabulary)

    def tokenize(self, name: Optional[str]) -> NameTokens:
        text = re.sub(r"\s+", " ", str(name or "")).strip()
        if not text:
            return NameTokens()

        segments = [s.strip() for s in text.split(",") if s.strip()]
        if len(segments) >= 2:
            return self._tokenize_comma_form(segments)
        return self._tokenize_plain_form(segments[0])

    def _tokenize_comma_form(self, segments: list[str]) -> NameTokens:
        credentials: list[str] = []
        suffixes: list[str] = []

        surname_words = segments[0].split()
        surname_words = self._strip_honorifics(surname_words, credentials)
        surname = " ".join(surname_words)

        given_words = segments[1].split()
        given_words = self._strip_honorifics(given_words, credentials)
        # Trailing suffix/credential words inside the given-name segment
        while len(given_words) > 1:
            tail = clean_token(given_words[-1])
            if tail in GENERATIONAL_SUFFIXES:
                suffixes.insert(0, tail)
            elif tail in self.vocabulary and tail not in AMBIGUOUS_IN_GIVEN:
                credentials.append(tail)
            else:
                break
            given_words.pop()

        given, middle = self._split_middle(given_words)

        for segment in segments[2:]:
            for word in segment.split():
                token = clean_token(word)
                if not token:
                    continue
                if token in GENERATIONAL_SUFFIXES:
                    suffixes.append(token)
                else:
                    credentials.append(token)

        return NameTokens(
            surname=surname,
            given=given,
            middle_initial=middle,
            suffixes=tuple(suffixes),
            credentials=tuple(dict.fromkeys(credentials)),
        )

    def _tokenize_plain_form(self, text: str) -> NameTokens:
        credentials: list[str] = []
        suffixes: list[str] = []
        words = self._strip_honorifics(text.split(), credentials)

        while len(words) > 1:
            tail = clean_token(words[-1])
            if tail in GENERATIONAL_SUFFIXES:
                suffixes.insert(0, tail)
            elif tail in self.vocabulary and tail not in AMBIGUOUS_IN_GIVEN:
                credentials.append(tail)
            else:
                break
            words.pop()

        if not words:
            return NameTokens(credentials=tuple(dict.fromkeys(credentials)))
        surname = words[-1]
        given, middle = self._split_middle(words[:-1])
        return NameTokens(
            surname=surname,
            given=given,
            middle_initial=middle,
            suffixes=tuple(suffixes),
            credentials=tuple(dict.fromkeys(credentials)),
        )

    @staticmethod
    def _strip_honorifics(words: list[str], credentials: list[str]) -> list[str]:
        words = list(words)
        while len(words) > 1:
            lead = clean_token(words[0])
            if lead in HONORIFIC_CREDENTIALS:
                credentials.append(lead)
            elif lead not in COURTESY_TITLES:
                break
            words.pop(0)
        return words

    @staticmethod
    def _split_middle(words: list[str]) -> tuple[str, Optional[str]]:
        if len(words) >= 2:
            last = words[-1].rstrip(".")
            if len(last) == 1 and last.isalpha():
                return " ".join(words[:-1]), last.upper()
        return " ".join(words), None


def name_credential_tokens(name: Optional[str], tokenizer: Optional[NameTokenizer] = None) -> set[str]:
    """Credential tokens carried by a display name (suffix segments and honorifics)."""
    tokenizer = tokenizer or NameTokenizer()
    return set(tokenizer.tokenize(name).credentials)
