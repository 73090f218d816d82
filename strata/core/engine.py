"""
Strata Estimation Engine
=========================

Central orchestrator for the Strata password strength estimator. The
StrataEngine class wires the matcher, searcher, scorer and feedback
generator together, times each computation and assembles the immutable
:class:`StrengthResult`.

Architecture follows the Facade pattern (Gamma et al., 1994), providing
a simplified interface over the individual analyzer stages. The ranked
dictionary is loaded on the first estimate and passed explicitly into the
matcher. Updating the file only drops the loaded copy, so a broken
dictionary makes the update report failure instead of stopping the
engine from being built.

References:
    - Gamma, E., Helm, R., Johnson, R., & Vlissides, J. (1994).
      Design Patterns: Elements of Reusable Object-Oriented Software.
      Addison-Wesley.
    - Wheeler, D. L. (2016). zxcvbn: Low-Budget Password Strength
      Estimation. USENIX Security Symposium.
"""

from __future__ import annotations

from pathlib import Path
from typing import Iterable, Optional

from shared.config import StrataConfig
from shared.logger import StrataLogger

from strata.analyzers.dictionary import DictionaryStore, add_words, get_store
from strata.analyzers.feedback import get_feedback
from strata.analyzers.matcher import compute_matches
from strata.analyzers.scorer import (
    crack_time_metrics,
    display_time,
    legacy_crack_time,
    score,
)
from strata.analyzers.searcher import find_minimum_entropy
from strata.core.models import SearchResult, StrengthResult


class StrataEngine:
    """Orchestrates password strength estimation and dictionary updates.

    Usage::

        engine = StrataEngine()
        result = engine.password_strength("Tr0ub4dour&3", user_inputs=["alice"])
        print(result.score, result.entropy)
        engine.add_words_to_password_list(["hunter"], "passwords")

    Attributes:
        config: Strata configuration instance.
        logger: Logger for the engine.
    """

    def __init__(
        self,
        config: Optional[StrataConfig] = None,
        store: Optional[DictionaryStore] = None,
    ) -> None:
        self.config = config or StrataConfig()
        settings = self.config.global_settings
        self.logger = StrataLogger(
            "engine",
            log_level=settings.log_level,
            log_file=settings.log_file or None,
            json_logs=settings.log_json,
        )
        self._store: Optional[DictionaryStore] = store

    @property
    def dictionary_path(self) -> Optional[Path]:
        """Dictionary file in use, ``None`` for the bundled lists."""
        configured = self.config.matching.dictionary_file
        return Path(configured) if configured else None

    @property
    def store(self) -> DictionaryStore:
        """Rank tables used for matching, loaded on first access.

        Raises:
            DictionaryError: If the dictionary file cannot be loaded.
        """
        if self._store is None:
            self._store = get_store(self.dictionary_path)
        return self._store

    # ------------------------------------------------------------------ #
    #  Strength estimation
    # ------------------------------------------------------------------ #

    def password_strength(
        self, password: str, user_inputs: Iterable[str] = ()
    ) -> StrengthResult:
        """Estimate the strength of *password*.

        An empty password short-circuits to zero entropy, score 0 and an
        empty match sequence without running the matchers.

        Args:
            password:    Password to assess.
            user_inputs: Words tied to the user (name, e-mail, site...);
                         finding them in the password makes it weaker.

        Returns:
            A fresh :class:`StrengthResult`.

        Raises:
            DictionaryError: If the rank tables have not been loaded yet and
                the dictionary file cannot be read.
        """
        with self.logger.timed("password strength") as timer:
            if not password:
                search = SearchResult(password=password, entropy=0.0, match_sequence=[])
            else:
                matches = compute_matches(
                    password, user_inputs, self.config.matching, self.store
                )
                self.logger.debug("Computed %d candidate matches", len(matches))
                search = find_minimum_entropy(password, matches)

            entropy = search.entropy
            strength = score(entropy)
            crack_time = legacy_crack_time(entropy)
            crack_times = crack_time_metrics(entropy)
            feedback = get_feedback(strength, search.match_sequence)

        return StrengthResult(
            password=password,
            entropy=entropy,
            match_sequence=search.match_sequence,
            score=strength,
            crack_time=crack_time,
            crack_time_display=display_time(crack_time),
            crack_times_seconds=crack_times,
            crack_times_display={
                profile: display_time(seconds) for profile, seconds in crack_times.items()
            },
            feedback=feedback,
            calc_time=timer.elapsed,
        )

    # ------------------------------------------------------------------ #
    #  Dictionary maintenance
    # ------------------------------------------------------------------ #

    def add_words_to_password_list(self, words: Iterable[str], category: str) -> bool:
        """Add *words* to the *category* table of the dictionary file.

        The rank tables are not loaded for this; a missing or malformed file
        is reported through the return value. On success the loaded tables
        are dropped so the next estimate sees the new words.

        Returns:
            ``False`` if the dictionary file could not be read or written.
        """
        self.logger.info(f"Adding words to dictionary category: {category}")
        if not add_words(self.dictionary_path, list(words), category):
            self.logger.warning(f"Dictionary update failed for category: {category}")
            return False
        self._store = None
        return True
