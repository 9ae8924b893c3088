"""Tests for string and topic similarity helpers."""

from __future__ import annotations

from collections import Counter

import pytest

from courseload.scoring.similarity import (
    cosine,
    dice_bigram,
    levenshtein,
    normalize_tight,
    sim_ratio,
    token_fuzzy_best_ratio,
    tokenize,
    topic_tokens,
    topic_vector,
)


class TestTokenize:
    """Tests for tokenizers."""

    def test_tokenize(self):
        assert tokenize("IT 101 - Intro") == ["it", "101", "intro"]
        assert tokenize(None) == []

    def test_normalize_tight(self):
        assert normalize_tight("IT-101 A") == "it101a"

    def test_topic_tokens_drop_short_words(self):
        assert topic_tokens("Intro to Data Structures") == ["intro", "data", "structures"]


class TestEditDistance:
    """Tests for levenshtein and sim_ratio."""

    @pytest.mark.parametrize("a,b,expected", [
        ("", "", 0),
        ("abc", "", 3),
        ("kitten", "sitting", 3),
        ("it101", "it102", 1),
        ("same", "same", 0),
    ])
    def test_levenshtein(self, a, b, expected):
        assert levenshtein(a, b) == expected

    def test_sim_ratio(self):
        assert sim_ratio("", "") == 1.0
        assert sim_ratio("abc", "") == 0.0
        assert sim_ratio("it101", "it102") == pytest.approx(0.8)


class TestDice:
    """Tests for dice_bigram."""

    def test_identical(self):
        assert dice_bigram("IT 101", "it101") == 1.0

    def test_disjoint(self):
        assert dice_bigram("abcd", "wxyz") == 0.0

    def test_partial(self):
        # it,t1,10,01 vs it,t1,10,02 -> 3 shared of 8
        assert dice_bigram("it101", "it102") == pytest.approx(0.75)

    def test_short_strings_fall_back(self):
        assert dice_bigram("a", "b") == 0.0
        assert dice_bigram("a", "a") == 1.0


class TestTokenFuzzy:
    """Tests for token_fuzzy_best_ratio."""

    def test_best_match_per_token(self):
        assert token_fuzzy_best_ratio(["data", "structures"], ["structures", "data", "algorithms"]) == 1.0

    def test_empty(self):
        assert token_fuzzy_best_ratio([], ["data"]) == 0.0
        assert token_fuzzy_best_ratio(["data"], []) == 0.0


class TestCosine:
    """Tests for topic-vector cosine."""

    def test_identical_vectors(self):
        v = topic_vector(["data", "structures"])
        assert cosine(v, v) == pytest.approx(1.0)

    def test_orthogonal_vectors(self):
        assert cosine(topic_vector(["data"]), topic_vector(["finance"])) == 0.0

    def test_empty_vector(self):
        assert cosine(Counter(), topic_vector(["data"])) == 0.0

    def test_counts_matter(self):
        a = topic_vector(["data", "data", "web"])
        b = topic_vector(["data"])
        assert cosine(a, b) == pytest.approx(2 / 5 ** 0.5)
