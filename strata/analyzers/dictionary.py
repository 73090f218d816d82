"""
Dictionary Store and Dictionary Pattern Matchers
=================================================

Holds the ranked frequency lists (one :class:`RankTable` per category:
common passwords, English words, first names, surnames...) and implements
the three matchers that consult them:

* **dictionary** -- every substring, lowercased, looked up in each table;
* **reverse dictionary** -- the same lookup on the reversed password;
* **l33t** -- lookups after undoing common character substitutions
  (``@`` for ``a``, ``3`` for ``e``, ``$`` for ``s``...).

A word's rank stands in for the number of guesses an attacker needs to
reach it. Capitalisation and substitutions multiply that count by the
number of variants at least as simple as the observed one.

The ranked lists are a single JSON document mapping category name to a
mapping of normalised word to rank. :func:`add_words` merges new words
into that document with a read-merge-write cycle guarded by a
process-wide lock, and replaces the file atomically.

References:
    - Wheeler, D. L. (2016). zxcvbn: Low-Budget Password Strength
      Estimation. USENIX Security Symposium.
    - Bonneau, J. (2012). The Science of Guessing: Analyzing an
      Anonymized Corpus of 70 Million Passwords. IEEE S&P.
"""

from __future__ import annotations

import itertools
import json
import os
import re
import string
import tempfile
import threading
from pathlib import Path
from typing import Any, Iterable, Iterator, Mapping, Optional, Sequence

from shared.errors import DictionaryError
from shared.logger import StrataLogger
from shared.math_utils import lg, n_ck, variation_entropy
from strata.core.models import Match, PatternKind, RankTable

_log = StrataLogger("dictionary", log_level="WARNING")

DEFAULT_DICTIONARY_PATH: Path = (
    Path(__file__).resolve().parent.parent / "data" / "ranked_frequency_lists.json"
)

USER_INPUTS_TABLE: str = "user_inputs"
MIN_WORD_LENGTH: int = 4

# Serialises store loads against the read-merge-write cycle of add_words.
_STORE_LOCK = threading.RLock()

_NOT_WORD_CHARS = re.compile(r"[^0-9a-z']")
_NUMERIC = re.compile(r"[0-9]+(?:e[0-9]+)?")
_ASCII_LOWER = str.maketrans(string.ascii_uppercase, string.ascii_lowercase)

_START_UPPER = re.compile(r"[A-Z][^A-Z]+")
_END_UPPER = re.compile(r"[^A-Z]+[A-Z]")
_NO_LOWER = re.compile(r"[^a-z]+")

# Letter -> characters commonly typed in its place.
L33T_TABLE: dict[str, tuple[str, ...]] = {
    "a": ("4", "@"),
    "b": ("8",),
    "c": ("(", "{", "[", "<"),
    "e": ("3",),
    "g": ("6", "9"),
    "i": ("1", "!", "|"),
    "l": ("1", "|", "7"),
    "o": ("0",),
    "s": ("$", "5"),
    "t": ("+", "7"),
    "x": ("%",),
    "z": ("2",),
}


# ===================================================================== #
#  Normalisation
# ===================================================================== #


def normalize_word(word: str) -> str:
    """Lowercase, trim and strip every character outside ``[0-9a-z']``."""
    return _NOT_WORD_CHARS.sub("", word.strip().lower())


def lowercase_word(word: str) -> str:
    """Lowercase ASCII letters only, the folding every lookup applies."""
    return word.translate(_ASCII_LOWER)


def build_rank_table(
    name: str, words: Iterable[str], *, normalize: bool = False
) -> RankTable:
    """Rank *words* by position (first word = rank 1).

    Words are lowercased (or fully normalised with *normalize*); empty
    results are dropped and repeats keep their first rank.
    """
    fold = normalize_word if normalize else lowercase_word
    ranks: dict[str, int] = {}
    for word in words:
        normalized = fold(word)
        if normalized and normalized not in ranks:
            ranks[normalized] = len(ranks) + 1
    return RankTable(name=name, ranks=ranks)


# ===================================================================== #
#  Dictionary Store
# ===================================================================== #


class DictionaryStore:
    """An immutable, ordered set of :class:`RankTable` objects.

    The store is built once and handed to the matchers; it is never
    changed afterwards. Extra tables (user inputs, user dictionaries) are
    added by deriving a new store with :meth:`with_tables`.

    Usage::

        store = DictionaryStore.load()
        store = store.with_tables([build_rank_table("user_inputs", ["alice"])])
        matches = dictionary_match("alice2000", store)
    """

    __slots__ = ("_tables", "_max_length")

    def __init__(self, tables: Iterable[RankTable] = ()) -> None:
        self._tables: tuple[RankTable, ...] = tuple(tables)
        self._max_length = max(
            (table.max_word_length for table in self._tables), default=0
        )

    @classmethod
    def load(cls, path: str | Path | None = None) -> DictionaryStore:
        """Load ranked frequency lists from a JSON document.

        Args:
            path: Location of the document. ``None`` selects the bundled lists.

        Returns:
            A store holding one table per category, in document order.

        Raises:
            DictionaryError: If the file cannot be read, is not valid JSON
                or does not map category names to ``{word: rank}`` tables.
        """
        source = Path(path) if path else DEFAULT_DICTIONARY_PATH
        with _STORE_LOCK:
            try:
                with open(source, "r", encoding="utf-8") as fh:
                    raw = json.load(fh)
            except OSError as exc:
                raise DictionaryError(f"Cannot read dictionary {source}: {exc}") from exc
            except ValueError as exc:
                raise DictionaryError(f"Malformed dictionary {source}: {exc}") from exc

        if not _is_rank_document(raw):
            raise DictionaryError(
                f"Dictionary {source} must map category names to {{word: rank}} objects"
            )
        try:
            tables = [RankTable(name=name, ranks=ranks) for name, ranks in raw.items()]
        except ValueError as exc:
            raise DictionaryError(f"Invalid ranks in dictionary {source}: {exc}") from exc

        _log.debug("Loaded %d rank tables from %s", len(tables), source)
        return cls(tables)

    def with_tables(self, tables: Iterable[RankTable]) -> DictionaryStore:
        """Return a new store with *tables* appended (empty tables skipped)."""
        extra = [table for table in tables if len(table)]
        if not extra:
            return self
        return DictionaryStore((*self._tables, *extra))

    @property
    def tables(self) -> tuple[RankTable, ...]:
        return self._tables

    @property
    def max_word_length(self) -> int:
        """Length of the longest word across all tables."""
        return self._max_length

    def get(self, name: str) -> Optional[RankTable]:
        """Return the table called *name*, if present."""
        for table in self._tables:
            if table.name == name:
                return table
        return None

    def __iter__(self) -> Iterator[RankTable]:
        return iter(self._tables)

    def __len__(self) -> int:
        return len(self._tables)

    def __contains__(self, name: object) -> bool:
        return any(table.name == name for table in self._tables)


_store_cache: dict[Path, tuple[tuple[int, int], DictionaryStore]] = {}


def get_store(path: str | Path | None = None) -> DictionaryStore:
    """Load a store, reusing the previous load while the file is unchanged.

    The cache is keyed on the resolved path and invalidated when the
    file's modification time or size changes, so words written by
    :func:`add_words` are picked up by the next lookup.
    """
    source = (Path(path) if path else DEFAULT_DICTIONARY_PATH).resolve()
    with _STORE_LOCK:
        try:
            stat = source.stat()
        except OSError as exc:
            raise DictionaryError(f"Cannot read dictionary {source}: {exc}") from exc
        stamp = (stat.st_mtime_ns, stat.st_size)
        cached = _store_cache.get(source)
        if cached is not None and cached[0] == stamp:
            return cached[1]
        store = DictionaryStore.load(source)
        _store_cache[source] = (stamp, store)
        return store


def _is_rank_document(raw: Any) -> bool:
    if not isinstance(raw, dict):
        return False
    for ranks in raw.values():
        if not isinstance(ranks, dict):
            return False
        for word, rank in ranks.items():
            if not isinstance(word, str) or isinstance(rank, bool) or not isinstance(rank, int):
                return False
    return True


# ===================================================================== #
#  Dictionary updates
# ===================================================================== #


def add_words(path: str | Path | None, words: Iterable[str], category: str) -> bool:
    """Merge *words* into the *category* table of a dictionary file.

    Each word is normalised and skipped when it is numeric, shorter than
    four characters or already present in *any* category. New words are
    ranked after the current maximum of the category (rank 1 for a new or
    empty category). When nothing changes the file is left untouched.

    Args:
        path:     Dictionary file. ``None`` selects the bundled lists.
        words:    Candidate words, in the order they should be ranked.
        category: Table to add the words to; created if missing.

    Returns:
        ``True`` on success (including when there was nothing to add),
        ``False`` if the file could not be read, parsed or written. Failures
        are logged, never raised.
    """
    target = Path(path) if path else DEFAULT_DICTIONARY_PATH
    with _STORE_LOCK, _log.operation("add_words"):
        try:
            with open(target, "r", encoding="utf-8") as fh:
                data = json.load(fh)
        except OSError as exc:
            _log.error("Cannot read dictionary %s: %s", target, exc)
            return False
        except ValueError as exc:
            _log.error("Malformed dictionary %s: %s", target, exc)
            return False

        if not _is_rank_document(data):
            _log.error("Dictionary %s does not map categories to rank tables", target)
            return False

        table: dict[str, int] = data.setdefault(category, {})
        added: list[str] = []
        for word in words:
            normalized = normalize_word(word)
            if len(normalized) < MIN_WORD_LENGTH or _NUMERIC.fullmatch(normalized):
                continue
            if any(normalized in ranks for ranks in data.values()):
                continue
            table[normalized] = max(table.values(), default=0) + 1
            added.append(normalized)

        if not added:
            _log.debug("No new words for category %s", category)
            return True

        try:
            _atomic_write_json(target, data)
        except (OSError, TypeError, ValueError) as exc:
            _log.error("Cannot write dictionary %s: %s", target, exc)
            return False

        _log.info("Added %d words to category %s", len(added), category, words=added)
        return True


def _atomic_write_json(target: Path, data: Mapping[str, Any]) -> None:
    """Write *data* beside *target* and move it into place in one step."""
    fd, tmp_name = tempfile.mkstemp(
        prefix=f".{target.name}.", suffix=".tmp", dir=str(target.parent)
    )
    try:
        with os.fdopen(fd, "w", encoding="utf-8") as fh:
            json.dump(data, fh, ensure_ascii=False)
            fh.flush()
            os.fsync(fh.fileno())
        os.replace(tmp_name, target)
    except BaseException:
        try:
            os.unlink(tmp_name)
        except FileNotFoundError:
            pass
        raise


# ===================================================================== #
#  Entropy helpers
# ===================================================================== #


def uppercase_entropy(token: str) -> float:
    """Bits for the capitalisation pattern of *token*.

    All-lowercase tokens and single characters cost nothing. A leading
    capital, a trailing capital or an all-caps token costs one bit. Any
    other mix costs the log of the number of arrangements with no more
    capitals (or lowercase letters) than observed.
    """
    upper = sum(1 for char in token if "A" <= char <= "Z")
    if upper == 0 or len(token) == 1:
        return 0.0
    if (
        _START_UPPER.fullmatch(token)
        or _END_UPPER.fullmatch(token)
        or _NO_LOWER.fullmatch(token)
    ):
        return 1.0
    lower = sum(1 for char in token if "a" <= char <= "z")
    return variation_entropy(upper, lower)


def l33t_entropy(token: str, sub: Mapping[str, str]) -> float:
    """Bits for the substitutions of *sub* used in *token* (at least one)."""
    lowered = token.lower()
    possibilities = 0
    for subbed, unsubbed in sub.items():
        subbed_count = token.count(subbed)
        unsubbed_count = lowered.count(unsubbed)
        possibilities += sum(
            n_ck(subbed_count + unsubbed_count, i)
            for i in range(min(subbed_count, unsubbed_count) + 1)
        )
    if possibilities <= 1:
        return 1.0
    return max(lg(possibilities), 1.0)


# ===================================================================== #
#  Matchers
# ===================================================================== #


def dictionary_match(password: str, store: Iterable[RankTable]) -> list[Match]:
    """Return every substring of *password* found in a rank table."""
    matches: list[Match] = []
    lowered = lowercase_word(password)
    n = len(password)
    for table in store:
        max_length = table.max_word_length
        ranks = table.ranks
        for i in range(n):
            for j in range(i, min(n, i + max_length)):
                word = lowered[i : j + 1]
                rank = ranks.get(word)
                if rank is None:
                    continue
                token = password[i : j + 1]
                base = lg(rank)
                upper = uppercase_entropy(token)
                matches.append(
                    Match(
                        start=i,
                        end=j,
                        pattern=PatternKind.DICTIONARY,
                        token=token,
                        entropy=base + upper,
                        matched_word=word,
                        rank=rank,
                        dictionary_name=table.name,
                        base_entropy=base,
                        uppercase_entropy=upper,
                        reversed=False,
                    )
                )
    return matches


def reverse_dictionary_match(password: str, store: Iterable[RankTable]) -> list[Match]:
    """Dictionary matches on the reversed password, mapped back in place.

    Reversal costs one extra bit. Palindromic words are skipped since the
    forward matcher already finds them.
    """
    n = len(password)
    matches: list[Match] = []
    for match in dictionary_match(password[::-1], store):
        word = match.matched_word or ""
        if word == word[::-1]:
            continue
        start, end = n - 1 - match.end, n - 1 - match.start
        token = password[start : end + 1]
        base = match.base_entropy or 0.0
        upper = uppercase_entropy(token)
        matches.append(
            match.model_copy(
                update={
                    "start": start,
                    "end": end,
                    "pattern": PatternKind.REVERSE_DICTIONARY,
                    "token": token,
                    "entropy": base + upper + 1.0,
                    "uppercase_entropy": upper,
                    "reversed": True,
                }
            )
        )
    return matches


def relevant_l33t_subtable(password: str) -> dict[str, tuple[str, ...]]:
    """Restrict :data:`L33T_TABLE` to substitutes present in *password*."""
    present = set(password)
    subtable: dict[str, tuple[str, ...]] = {}
    for letter, subs in L33T_TABLE.items():
        relevant = tuple(char for char in subs if char in present)
        if relevant:
            subtable[letter] = relevant
    return subtable


def enumerate_l33t_subs(table: Mapping[str, Sequence[str]]) -> list[dict[str, str]]:
    """Every consistent substitution map for *table*.

    A substitution map assigns each l33t character to exactly one letter it
    may stand for, e.g. ``{"1": "i", "|": "l"}`` and ``{"1": "l", "|": "i"}``.
    """
    candidates: dict[str, list[str]] = {}
    for letter, subs in table.items():
        for char in subs:
            candidates.setdefault(char, []).append(letter)
    chars = sorted(candidates)
    return [
        dict(zip(chars, letters))
        for letters in itertools.product(*(candidates[char] for char in chars))
    ]


def l33t_match(password: str, store: Iterable[RankTable]) -> list[Match]:
    """Dictionary matches that required undoing at least one substitution."""
    tables = tuple(store)
    matches: list[Match] = []
    seen: set[tuple[int, int, str, str]] = set()
    for sub in enumerate_l33t_subs(relevant_l33t_subtable(password)):
        if not sub:
            continue
        translated = password.translate(str.maketrans(sub))
        for match in dictionary_match(translated, tables):
            token = password[match.start : match.end + 1]
            word = match.matched_word or ""
            if lowercase_word(token) == word:
                continue
            key = (match.start, match.end, match.dictionary_name or "", word)
            if key in seen:
                continue
            seen.add(key)

            used = {subbed: letter for subbed, letter in sub.items() if subbed in token}
            base = match.base_entropy or 0.0
            upper = uppercase_entropy(token)
            extra = l33t_entropy(token, used)
            matches.append(
                match.model_copy(
                    update={
                        "pattern": PatternKind.L33T,
                        "token": token,
                        "entropy": base + upper + extra,
                        "uppercase_entropy": upper,
                        "l33t_entropy": extra,
                        "l33t_sub": used,
                    }
                )
            )
    return matches
