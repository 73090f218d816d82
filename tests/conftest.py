"""
Shared Test Fixtures
=====================

Fixtures used across the Strata test suite: the bundled dictionary
store, an engine bound to it, and throwaway dictionary files under
``tmp_path`` for tests that write.
"""

from __future__ import annotations

import json
import shutil
from pathlib import Path

import pytest

from shared.config import StrataConfig
from strata.analyzers.dictionary import DEFAULT_DICTIONARY_PATH, DictionaryStore
from strata.core.engine import StrataEngine
from strata.core.models import RankTable


@pytest.fixture(scope="session")
def store() -> DictionaryStore:
    """The bundled ranked frequency lists, loaded once per session."""
    return DictionaryStore.load()


@pytest.fixture
def engine(store: DictionaryStore) -> StrataEngine:
    """An engine with default configuration over the bundled lists."""
    return StrataEngine(StrataConfig(), store=store)


@pytest.fixture
def dictionary_copy(tmp_path: Path) -> Path:
    """A writable copy of the bundled dictionary file."""
    target = tmp_path / "ranked_frequency_lists.json"
    shutil.copyfile(DEFAULT_DICTIONARY_PATH, target)
    return target


@pytest.fixture
def small_dictionary(tmp_path: Path) -> Path:
    """A tiny dictionary file with two categories."""
    target = tmp_path / "small.json"
    target.write_text(
        json.dumps(
            {
                "passwords": {"password": 1, "letmein": 2},
                "english": {"horse": 1},
            }
        ),
        encoding="utf-8",
    )
    return target


@pytest.fixture
def word_table() -> RankTable:
    """A two-word rank table for matcher tests."""
    return RankTable(name="words", ranks={"cat": 1, "dog": 2})
