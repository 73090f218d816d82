"""
Matcher Aggregator
===================

Runs every pattern matcher over a password and merges their candidates
into one list, in a fixed emission order that the searcher uses to break
ties:

1. dictionary, 2. reverse dictionary, 3. l33t, 4. spatial, 5. repeat,
6. sequence, 7. date, 8. year, 9. digit run.

Caller-supplied context is turned into extra rank tables before matching:
the user inputs (names, e-mail, site name...) become the ``user_inputs``
table ranked by order, and each configured extra dictionary becomes
``user_dictionary_<n>``.

The dictionary, reverse and l33t matchers only look at the first
``max_password_length`` characters, which bounds their substring
enumeration on pathological inputs. The spatial, repeat, sequence and
date matchers always see the whole password.
"""

from __future__ import annotations

from typing import Iterable, Optional

from shared.config import MatchingConfig
from strata.analyzers.date import date_match, digits_match, year_match
from strata.analyzers.dictionary import (
    USER_INPUTS_TABLE,
    DictionaryStore,
    build_rank_table,
    dictionary_match,
    get_store,
    l33t_match,
    reverse_dictionary_match,
)
from strata.analyzers.repeat import repeat_match
from strata.analyzers.searcher import find_minimum_entropy
from strata.analyzers.sequence import sequence_match
from strata.analyzers.spatial import spatial_match
from strata.core.models import Match


def compute_matches(
    password: str,
    user_inputs: Iterable[str] = (),
    config: Optional[MatchingConfig] = None,
    store: Optional[DictionaryStore] = None,
) -> list[Match]:
    """Return every candidate match of every pattern kind.

    Args:
        password:    Password to scan.
        user_inputs: Words tied to the user, most relevant first.
        config:      Matching options; defaults apply when omitted.
        store:       Preloaded rank tables. When omitted the store named by
                     ``config.dictionary_file`` (or the bundled one) is used.

    Returns:
        Candidate matches in emission order, overlaps included.

    Raises:
        DictionaryError: If the dictionary has to be loaded and cannot be.
    """
    if not password:
        return []
    config = config or MatchingConfig()
    if store is None:
        store = get_store(config.dictionary_file or None)

    extra_tables = [build_rank_table(USER_INPUTS_TABLE, (str(word) for word in user_inputs))]
    extra_tables.extend(
        build_rank_table(f"user_dictionary_{index}", words)
        for index, words in enumerate(config.extra_dictionaries, start=1)
    )
    store = store.with_tables(extra_tables)

    return _match_all(password, store, config.max_password_length)


def _match_all(password: str, store: DictionaryStore, scan_length: int) -> list[Match]:
    def base_entropy(token: str) -> float:
        return find_minimum_entropy(token, _match_all(token, store, scan_length)).entropy

    # only the dictionary family enumerates substrings
    scanned = password[:scan_length]

    matches: list[Match] = []
    matches.extend(dictionary_match(scanned, store))
    matches.extend(reverse_dictionary_match(scanned, store))
    matches.extend(l33t_match(scanned, store))
    matches.extend(spatial_match(password))
    matches.extend(repeat_match(password, base_entropy))
    matches.extend(sequence_match(password))
    matches.extend(date_match(password))
    matches.extend(year_match(password))
    matches.extend(digits_match(password))
    return matches
