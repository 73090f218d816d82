"""
Dictionary Matcher Tests
=========================

Tests for the rank tables, the dictionary store, the dictionary, reverse
and l33t matchers, and dictionary file updates.
"""

from __future__ import annotations

import json
import math
from concurrent.futures import ThreadPoolExecutor

import pytest

from shared.errors import DictionaryError
from strata.analyzers.dictionary import (
    DictionaryStore,
    add_words,
    build_rank_table,
    dictionary_match,
    enumerate_l33t_subs,
    get_store,
    l33t_match,
    normalize_word,
    relevant_l33t_subtable,
    reverse_dictionary_match,
    uppercase_entropy,
)
from strata.core.models import PatternKind, RankTable


class TestNormalisation:
    """Tests for word normalisation and rank table construction."""

    def test_normalize_strips_and_lowercases(self):
        """Outer whitespace and characters outside [0-9a-z'] are removed."""
        assert normalize_word("  Hello-World's! ") == "helloworld's"

    def test_build_rank_table_ranks_by_position(self):
        """First occurrence wins; empty words are dropped."""
        table = build_rank_table("t", ["Alice", "alice", "", "Bob"])
        assert table.ranks == {"alice": 1, "bob": 2}

    def test_build_rank_table_with_normalisation(self):
        """normalize=True applies the full word normalisation."""
        table = build_rank_table("t", ["O'Brien!"], normalize=True)
        assert table.ranks == {"o'brien": 1}

    def test_rank_table_rejects_non_positive_ranks(self):
        """Ranks must be at least 1."""
        with pytest.raises(ValueError):
            RankTable(name="bad", ranks={"word": 0})


class TestUppercaseEntropy:
    """Tests for capitalisation pricing."""

    def test_lowercase_is_free(self):
        """All-lowercase tokens cost nothing."""
        assert uppercase_entropy("password") == 0.0

    @pytest.mark.parametrize("token", ["Password", "passworD", "PASSWORD"])
    def test_common_patterns_cost_one_bit(self, token):
        """Leading capital, trailing capital and all caps cost one bit."""
        assert uppercase_entropy(token) == 1.0

    def test_single_character_is_free(self):
        """A one-character token carries no capitalisation information."""
        assert uppercase_entropy("A") == 0.0

    def test_mixed_case_counts_arrangements(self):
        """Other mixes cost the log of the simpler-or-equal arrangements."""
        assert uppercase_entropy("PaSsword") == pytest.approx(math.log2(1 + 8 + 28))


class TestDictionaryStore:
    """Tests for DictionaryStore loading and caching."""

    def test_bundled_store_has_passwords(self, store):
        """The bundled lists include the common-password table."""
        assert "passwords" in store
        assert store.get("passwords").ranks["password"] == 1
        assert store.max_word_length > 0

    def test_load_missing_file_raises(self, tmp_path):
        """A missing file is a DictionaryError."""
        with pytest.raises(DictionaryError):
            DictionaryStore.load(tmp_path / "missing.json")

    def test_load_malformed_file_raises(self, tmp_path):
        """Invalid JSON is a DictionaryError."""
        path = tmp_path / "bad.json"
        path.write_text("{not json", encoding="utf-8")
        with pytest.raises(DictionaryError):
            DictionaryStore.load(path)

    def test_load_wrong_shape_raises(self, tmp_path):
        """A document that is not category -> {word: rank} is rejected."""
        path = tmp_path / "list.json"
        path.write_text('["password"]', encoding="utf-8")
        with pytest.raises(DictionaryError):
            DictionaryStore.load(path)

    def test_load_invalid_rank_raises(self, tmp_path):
        """Non-positive ranks are rejected at load time."""
        path = tmp_path / "zero.json"
        path.write_text('{"passwords": {"password": 0}}', encoding="utf-8")
        with pytest.raises(DictionaryError):
            DictionaryStore.load(path)

    def test_with_tables_skips_empty(self, store):
        """Empty extra tables leave the store unchanged."""
        assert store.with_tables([RankTable(name="empty", ranks={})]) is store

    def test_get_store_reloads_after_change(self, small_dictionary):
        """get_store picks up words written by add_words."""
        before = get_store(small_dictionary)
        assert "dragon" not in before.get("passwords").ranks

        assert add_words(small_dictionary, ["dragon"], "passwords")

        after = get_store(small_dictionary)
        assert after.get("passwords").ranks["dragon"] == 3


class TestDictionaryMatch:
    """Tests for the plain dictionary matcher."""

    def test_finds_every_word(self, word_table):
        """Each table word inside the password becomes a match."""
        matches = dictionary_match("xcatdog", [word_table])
        spans = [(m.start, m.end, m.matched_word) for m in matches]
        assert spans == [(1, 3, "cat"), (4, 6, "dog")]
        assert [m.entropy for m in matches] == [0.0, 1.0]

    def test_case_insensitive_with_uppercase_cost(self, word_table):
        """Lookups fold case; the capitalisation is priced on top."""
        [match] = dictionary_match("Dog", [word_table])
        assert match.token == "Dog"
        assert match.entropy == pytest.approx(1.0 + 1.0)

    def test_bundled_password(self, store):
        """'password' is the rank-1 common password."""
        matches = [
            m for m in dictionary_match("password", store)
            if m.start == 0 and m.end == 7
        ]
        assert matches[0].dictionary_name == "passwords"
        assert matches[0].rank == 1
        assert matches[0].entropy == 0.0


class TestReverseDictionaryMatch:
    """Tests for the reversed-word matcher."""

    def test_reversed_word_costs_one_bit(self, word_table):
        """A reversed word maps back in place and costs one extra bit."""
        [match] = reverse_dictionary_match("tac", [word_table])
        assert (match.start, match.end) == (0, 2)
        assert match.pattern is PatternKind.REVERSE_DICTIONARY
        assert match.matched_word == "cat"
        assert match.reversed is True
        assert match.entropy == pytest.approx(1.0)

    def test_palindromes_are_skipped(self):
        """Palindromic words are left to the forward matcher."""
        table = RankTable(name="words", ranks={"noon": 1})
        assert reverse_dictionary_match("noon", [table]) == []


class TestL33tMatch:
    """Tests for the l33t substitution matcher."""

    def test_relevant_subtable(self):
        """Only substitutes present in the password are kept."""
        assert relevant_l33t_subtable("p4$$") == {"a": ("4",), "s": ("$",)}

    def test_enumerate_ambiguous_character(self):
        """A character standing for two letters yields two maps."""
        subs = enumerate_l33t_subs({"i": ("1",), "l": ("1",)})
        assert subs == [{"1": "i"}, {"1": "l"}]

    def test_substituted_password(self):
        """'p@ssw0rd' is 'password' with two substitutions."""
        table = RankTable(name="passwords", ranks={"password": 1})
        [match] = l33t_match("p@ssw0rd", [table])
        assert match.pattern is PatternKind.L33T
        assert match.l33t_sub == {"0": "o", "@": "a"}
        assert match.l33t_entropy == pytest.approx(1.0)
        assert match.entropy == pytest.approx(1.0)

    def test_unsubstituted_word_is_not_l33t(self):
        """A plain word is not reported as l33t."""
        table = RankTable(name="passwords", ranks={"password": 1})
        assert l33t_match("password", [table]) == []

    def test_duplicates_are_merged(self):
        """Maps differing only outside the token produce one match."""
        table = RankTable(name="passwords", ranks={"pass": 1})
        matches = [m for m in l33t_match("p4ss1", [table]) if m.matched_word == "pass"]
        assert len(matches) == 1
        assert matches[0].l33t_sub == {"4": "a"}


class TestAddWords:
    """Tests for dictionary file updates."""

    def test_filters_and_ranks_new_words(self, small_dictionary):
        """Short, numeric and already-known words are skipped."""
        words = ["  Dragon!! ", "abc", "1234", "1e10", "HORSE", "letmein"]
        assert add_words(small_dictionary, words, "passwords")

        data = json.loads(small_dictionary.read_text(encoding="utf-8"))
        assert data["passwords"] == {"password": 1, "letmein": 2, "dragon": 3}
        assert data["english"] == {"horse": 1}

    def test_creates_missing_category(self, small_dictionary):
        """A new category starts at rank 1."""
        assert add_words(small_dictionary, ["zebra"], "animals")
        data = json.loads(small_dictionary.read_text(encoding="utf-8"))
        assert data["animals"] == {"zebra": 1}

    def test_is_idempotent(self, small_dictionary):
        """Adding the same word twice keeps its first rank."""
        assert add_words(small_dictionary, ["dragon"], "passwords")
        assert add_words(small_dictionary, ["dragon", "Dragon"], "passwords")
        data = json.loads(small_dictionary.read_text(encoding="utf-8"))
        assert data["passwords"]["dragon"] == 3
        assert len(data["passwords"]) == 3

    def test_no_change_leaves_file_untouched(self, small_dictionary):
        """Nothing to add is a success with no write."""
        before = small_dictionary.read_bytes()
        assert add_words(small_dictionary, ["password", "abc"], "passwords")
        assert small_dictionary.read_bytes() == before

    def test_missing_file_returns_false(self, tmp_path):
        """An unreadable file is reported, not raised."""
        assert add_words(tmp_path / "missing.json", ["dragon"], "passwords") is False

    def test_malformed_file_returns_false(self, tmp_path):
        """Invalid JSON is reported and left as is."""
        path = tmp_path / "bad.json"
        path.write_text("{not json", encoding="utf-8")
        assert add_words(path, ["dragon"], "passwords") is False
        assert path.read_text(encoding="utf-8") == "{not json"

    def test_concurrent_writers_do_not_lose_words(self, small_dictionary):
        """Parallel updates of one file keep every word with a unique rank."""
        batches = [[f"word{writer}x{index}" for index in range(5)] for writer in range(8)]

        with ThreadPoolExecutor(max_workers=len(batches)) as pool:
            results = list(
                pool.map(lambda batch: add_words(small_dictionary, batch, "passwords"), batches)
            )

        assert all(results)
        data = json.loads(small_dictionary.read_text(encoding="utf-8"))
        ranks = data["passwords"]
        expected = {word for batch in batches for word in batch} | {"password", "letmein"}
        assert set(ranks) == expected
        assert sorted(ranks.values()) == list(range(1, len(expected) + 1))
        assert data["english"] == {"horse": 1}
