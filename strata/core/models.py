"""
Strata Core Data Models
========================

Pydantic models for the Strata password strength estimator. These models
represent the candidate pattern matches emitted by the matchers, the
minimum-entropy decomposition chosen by the searcher, the static data
the matchers consult (rank tables and keyboard adjacency graphs) and the
final strength result assembled by the engine.

Every model is immutable once constructed: a stage builds its outputs and
the next stage consumes them read-only.

References:
    - Wheeler, D. L. (2016). zxcvbn: Low-Budget Password Strength
      Estimation. USENIX Security Symposium.
    - NIST SP 800-63B (2017). Digital Identity Guidelines --
      Authentication and Lifecycle Management.
"""

from __future__ import annotations

import enum
import math
from functools import cached_property
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator


# ===================================================================== #
#  Enumerations
# ===================================================================== #


class PatternKind(str, enum.Enum):
    """The pattern theory a :class:`Match` was produced by."""

    DICTIONARY = "dictionary"
    REVERSE_DICTIONARY = "reverse_dictionary"
    L33T = "l33t"
    SPATIAL = "spatial"
    REPEAT = "repeat"
    SEQUENCE = "sequence"
    DATE = "date"
    YEAR = "year"
    DIGITS = "digits"
    BRUTEFORCE = "bruteforce"


# ===================================================================== #
#  Matches
# ===================================================================== #


class Match(BaseModel):
    """A candidate explanation for one contiguous substring of a password.

    Only the fields relevant to *pattern* are populated; everything else
    stays ``None``.

    Attributes:
        start: Index of the first covered character (0-based, inclusive).
        end: Index of the last covered character (inclusive).
        pattern: Pattern theory that produced the match.
        token: The covered substring exactly as it appears in the password.
        entropy: Estimated guesses for the token, in bits.
        matched_word: Dictionary word the token normalises to.
        rank: Popularity rank of *matched_word* (1 = most common).
        dictionary_name: Rank table the word was found in.
        base_entropy: Entropy before case / l33t variations, or the
            minimum entropy of the base token for repeats.
        uppercase_entropy: Bits added for the capitalisation pattern.
        l33t_entropy: Bits added for l33t substitutions.
        l33t_sub: Map of l33t character to the letter it replaced.
        reversed: Whether the word was found reading the token backwards.
        graph: Keyboard graph name for spatial matches.
        turns: Number of direction changes along a spatial path.
        shifted_count: Number of shifted keys on a spatial path.
        base_token: Repeated unit of a repeat match.
        repeat_count: How many times *base_token* is repeated.
        sequence_name: Alphabet of a sequence (lower, upper, digits).
        sequence_space: Size of that alphabet.
        ascending: Direction of a sequence.
        step: Constant code-point delta between sequence characters.
        separator: Separator between date fields ("" when absent).
        day: Inferred day of month.
        month: Inferred month.
        year: Inferred (four-digit) year.
        cardinality: Alphabet size used for a brute-force span.
    """

    model_config = ConfigDict(frozen=True)

    start: int = Field(..., ge=0)
    end: int = Field(..., ge=0)
    pattern: PatternKind
    token: str
    entropy: float = Field(..., ge=0.0)

    # Dictionary family
    matched_word: Optional[str] = None
    rank: Optional[int] = None
    dictionary_name: Optional[str] = None
    base_entropy: Optional[float] = None
    uppercase_entropy: Optional[float] = None
    l33t_entropy: Optional[float] = None
    l33t_sub: Optional[dict[str, str]] = None
    reversed: Optional[bool] = None

    # Spatial
    graph: Optional[str] = None
    turns: Optional[int] = None
    shifted_count: Optional[int] = None

    # Repeat
    base_token: Optional[str] = None
    repeat_count: Optional[int] = None

    # Sequence
    sequence_name: Optional[str] = None
    sequence_space: Optional[int] = None
    ascending: Optional[bool] = None
    step: Optional[int] = None

    # Date / year
    separator: Optional[str] = None
    day: Optional[int] = None
    month: Optional[int] = None
    year: Optional[int] = None

    # Brute force
    cardinality: Optional[int] = None

    @model_validator(mode="after")
    def _check_range(self) -> Match:
        if self.start > self.end:
            raise ValueError(
                f"match start {self.start} is after its end {self.end}"
            )
        if len(self.token) != self.end - self.start + 1:
            raise ValueError(
                f"token {self.token!r} does not span [{self.start}, {self.end}]"
            )
        return self

    @property
    def length(self) -> int:
        """Number of password characters covered by the match."""
        return self.end - self.start + 1


class SearchResult(BaseModel):
    """Minimum-entropy decomposition of a password.

    The match sequence covers every index of the password exactly once,
    left to right, and the reported entropy is the sum of the entropies of
    the sequence. Both facts are checked when the model is built.

    Attributes:
        password: The password that was decomposed.
        entropy: Total estimated entropy in bits.
        match_sequence: Winning matches, ordered by position.
    """

    model_config = ConfigDict(frozen=True)

    password: str
    entropy: float = Field(..., ge=0.0)
    match_sequence: list[Match] = Field(default_factory=list)

    @model_validator(mode="after")
    def _check_cover(self) -> SearchResult:
        expected_start = 0
        for match in self.match_sequence:
            if match.start != expected_start:
                raise ValueError(
                    f"match sequence has a gap or overlap at index {expected_start}"
                )
            expected_start = match.end + 1
        if expected_start != len(self.password):
            raise ValueError(
                f"match sequence covers {expected_start} of "
                f"{len(self.password)} characters"
            )

        total = math.fsum(match.entropy for match in self.match_sequence)
        if not math.isclose(total, self.entropy, rel_tol=1e-9, abs_tol=1e-9):
            raise ValueError(
                f"entropy {self.entropy} differs from the sequence total {total}"
            )
        return self


# ===================================================================== #
#  Static matcher data
# ===================================================================== #


class RankTable(BaseModel):
    """One ranked word list of the dictionary store.

    Attributes:
        name: Category name (``passwords``, ``english``, ``user_inputs``...).
        ranks: Normalised word to positive rank (1 = most common).
    """

    model_config = ConfigDict(frozen=True)

    name: str = Field(..., min_length=1)
    ranks: dict[str, int] = Field(default_factory=dict)

    @field_validator("ranks")
    @classmethod
    def _positive_ranks(cls, value: dict[str, int]) -> dict[str, int]:
        for word, rank in value.items():
            if rank < 1:
                raise ValueError(f"rank of {word!r} must be positive, got {rank}")
        return value

    @cached_property
    def max_word_length(self) -> int:
        """Length of the longest word in the table (0 when empty)."""
        return max((len(word) for word in self.ranks), default=0)

    def __len__(self) -> int:
        return len(self.ranks)


class KeyboardGraph(BaseModel):
    """Adjacency data for one physical keyboard layout.

    Attributes:
        name: Layout name (``qwerty``, ``dvorak``, ``keypad``, ``mac_keypad``).
        adjacency: Character to the key tokens around its key, clockwise.
            ``None`` marks a position with no key. A token lists the
            unshifted character first, then the shifted one if any.
        keys: Character to the token of the key that produces it.
        average_degree: Mean number of real neighbours per key.
        starting_positions: Number of keys a path can start from.
        shifted_chars: Characters that require the shift key.
    """

    model_config = ConfigDict(frozen=True)

    name: str
    adjacency: dict[str, tuple[Optional[str], ...]]
    keys: dict[str, str] = Field(default_factory=dict)
    average_degree: float = Field(..., gt=0.0)
    starting_positions: int = Field(..., gt=0)
    shifted_chars: frozenset[str] = Field(default_factory=frozenset)


# ===================================================================== #
#  Results
# ===================================================================== #


class Feedback(BaseModel):
    """User-facing explanation of a weak result.

    Attributes:
        warning: Short statement of the main weakness ("" when none).
        suggestions: Actionable advice, most relevant first.
    """

    model_config = ConfigDict(frozen=True)

    warning: str = ""
    suggestions: list[str] = Field(default_factory=list)


class StrengthResult(BaseModel):
    """Complete strength assessment of one password.

    Attributes:
        password: The assessed password.
        entropy: Total minimum entropy in bits.
        match_sequence: Winning decomposition of the password.
        score: Strength score from 0 (too guessable) to 4 (very unguessable).
        crack_time: Legacy single-attacker crack time in seconds.
        crack_time_display: Human-readable form of *crack_time*.
        crack_times_seconds: Crack time per attacker profile, in seconds.
        crack_times_display: Human-readable crack time per profile.
        feedback: Warning and suggestions derived from the decomposition.
        calc_time: Wall-clock seconds spent computing the result.
    """

    model_config = ConfigDict(frozen=True)

    password: str
    entropy: float = Field(..., ge=0.0)
    match_sequence: list[Match] = Field(default_factory=list)
    score: int = Field(..., ge=0, le=4)
    crack_time: float = Field(default=0.0, ge=0.0)
    crack_time_display: str = ""
    crack_times_seconds: dict[str, float] = Field(default_factory=dict)
    crack_times_display: dict[str, str] = Field(default_factory=dict)
    feedback: Feedback = Field(default_factory=Feedback)
    calc_time: float = Field(default=0.0, ge=0.0)
