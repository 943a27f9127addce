"""Unit tests for the SQLite trigram and lexeme functions."""

import pytest

from novafolio_api.infrastructure.search import escape_like
from novafolio_api.infrastructure.search.trigram import (
    lexemes,
    similarity,
    to_search_vector,
    trigrams,
    websearch_match,
)


@pytest.mark.unit
class TestTrigrams:

    def test_word_is_padded_like_pg_trgm(self):
        assert trigrams("cat") == {"  c", " ca", "cat", "at "}

    def test_case_and_punctuation_are_ignored(self):
        assert trigrams("Cat!") == trigrams("cat")

    def test_identical_strings_have_similarity_one(self):
        assert similarity("contract", "Contract") == 1.0

    def test_disjoint_strings_have_similarity_zero(self):
        assert similarity("abc", "xyz") == 0.0

    def test_null_input_gives_null(self):
        assert similarity(None, "abc") is None

    def test_empty_strings(self):
        assert similarity("", "") == 0.0

    def test_closer_string_scores_higher(self):
        assert similarity("contract", "contracts") > similarity("contract", "contour")


@pytest.mark.unit
class TestWebsearchMatch:

    def test_lexemes_drop_stop_words(self):
        assert lexemes("The lease of the premises") == ["lease", "premises"]

    def test_vector_is_sorted_unique(self):
        assert to_search_vector("beta alpha beta") == "alpha beta"

    def test_all_terms_required(self):
        vector = to_search_vector("The tenant shall pay rent monthly")
        assert websearch_match(vector, "tenant rent") == 1
        assert websearch_match(vector, "tenant deposit") == 0

    def test_or_alternatives(self):
        vector = to_search_vector("deposit returned")
        assert websearch_match(vector, "rent or deposit") == 1

    def test_negated_term_excludes(self):
        vector = to_search_vector("tenant rent")
        assert websearch_match(vector, "tenant -rent") == 0
        assert websearch_match(vector, "tenant -deposit") == 1

    def test_quoted_phrase_requires_all_words(self):
        vector = to_search_vector("late payment fee")
        assert websearch_match(vector, '"late fee"') == 1
        assert websearch_match(vector, '"early fee"') == 0

    def test_stop_word_query_matches_nothing(self):
        assert websearch_match(to_search_vector("the end"), "the") == 0

    def test_empty_vector(self):
        assert websearch_match(None, "rent") == 0
        assert websearch_match("", "rent") == 0


@pytest.mark.unit
class TestEscapeLike:

    def test_wildcards_are_escaped(self):
        assert escape_like("50%_off") == "50/%/_off"

    def test_escape_char_is_doubled(self):
        assert escape_like("a/b") == "a//b"

    def test_plain_text_unchanged(self):
        assert escape_like("contract") == "contract"
