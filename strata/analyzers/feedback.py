"""
Feedback Generator
===================

Explains a weak result in plain language. The longest match of the
winning decomposition is taken as the main weakness and produces a
warning specific to its pattern; generic suggestions follow. Results
scoring 3 or more get no feedback.

References:
    - NIST SP 800-63B (2017). Digital Identity Guidelines,
      Section 5.1.1.2 (Memorized Secret Verifiers).
    - Ur, B. et al. (2017). Design and Evaluation of a Data-Driven
      Password Meter. CHI.
"""

from __future__ import annotations

import re
from typing import Sequence

from strata.core.models import Feedback, Match, PatternKind

_DEFAULT_SUGGESTIONS = [
    "Use a few words, avoid common phrases.",
    "No need for symbols, digits, or uppercase letters.",
]
_ADD_WORD = "Add another word or two. Uncommon words are better."

_START_UPPER = re.compile(r"[A-Z][^A-Z]+")
_ALL_UPPER = re.compile(r"[^a-z]+")

_NAME_TABLES = frozenset({"surnames", "male_names", "female_names"})


def get_feedback(score: int, match_sequence: Sequence[Match]) -> Feedback:
    """Build the feedback for a result.

    Args:
        score:          Strength score of the password (0-4).
        match_sequence: Winning decomposition of the password.

    Returns:
        A :class:`Feedback` whose warning is empty when nothing stands out.
    """
    if not match_sequence:
        return Feedback(warning="", suggestions=list(_DEFAULT_SUGGESTIONS))
    if score > 2:
        return Feedback(warning="", suggestions=[])

    longest = max(match_sequence, key=lambda m: len(m.token))
    feedback = _match_feedback(longest, len(match_sequence) == 1)
    suggestions = [_ADD_WORD, *feedback.suggestions]
    return Feedback(warning=feedback.warning, suggestions=suggestions)


def _match_feedback(match: Match, sole_match: bool) -> Feedback:
    pattern = match.pattern
    if pattern in (
        PatternKind.DICTIONARY,
        PatternKind.REVERSE_DICTIONARY,
        PatternKind.L33T,
    ):
        return _dictionary_feedback(match, sole_match)

    if pattern is PatternKind.SPATIAL:
        if match.turns == 1:
            warning = "Straight rows of keys are easy to guess."
        else:
            warning = "Short keyboard patterns are easy to guess."
        return Feedback(
            warning=warning,
            suggestions=["Use a longer keyboard pattern with more turns."],
        )

    if pattern is PatternKind.REPEAT:
        if len(match.base_token or "") == 1:
            warning = 'Repeats like "aaa" are easy to guess.'
        else:
            warning = (
                'Repeats like "abcabcabc" are only slightly harder to guess '
                'than "abc".'
            )
        return Feedback(
            warning=warning,
            suggestions=["Avoid repeated words and characters."],
        )

    if pattern is PatternKind.SEQUENCE:
        return Feedback(
            warning="Sequences like abc or 6543 are easy to guess.",
            suggestions=["Avoid sequences."],
        )

    if pattern in (PatternKind.DATE, PatternKind.YEAR):
        if pattern is PatternKind.DATE:
            warning = "Dates are often easy to guess."
        else:
            warning = "Recent years are easy to guess."
        return Feedback(
            warning=warning,
            suggestions=[
                "Avoid recent years.",
                "Avoid years that are associated with you.",
                "Avoid dates and years that are associated with you.",
            ],
        )

    return Feedback(warning="", suggestions=[])


def _dictionary_feedback(match: Match, sole_match: bool) -> Feedback:
    warning = ""
    table = match.dictionary_name or ""
    rank = match.rank or 0

    if table == "passwords":
        if sole_match and match.pattern is PatternKind.DICTIONARY:
            if rank <= 10:
                warning = "This is a top-10 common password."
            elif rank <= 100:
                warning = "This is a top-100 common password."
            else:
                warning = "This is a very common password."
        else:
            warning = "This is similar to a commonly used password."
    elif table == "english":
        if sole_match:
            warning = "A word by itself is easy to guess."
    elif table in _NAME_TABLES:
        if sole_match:
            warning = "Names and surnames by themselves are easy to guess."
        else:
            warning = "Common names and surnames are easy to guess."

    suggestions: list[str] = []
    token = match.token
    if _START_UPPER.fullmatch(token):
        suggestions.append("Capitalization doesn't help very much.")
    elif _ALL_UPPER.fullmatch(token) and token.lower() != token:
        suggestions.append("All-uppercase is almost as easy to guess as all-lowercase.")

    if match.pattern is PatternKind.REVERSE_DICTIONARY and len(token) >= 4:
        suggestions.append("Reversed words aren't much harder to guess.")
    if match.pattern is PatternKind.L33T:
        suggestions.append(
            "Predictable substitutions like '@' instead of 'a' don't help very much."
        )

    return Feedback(warning=warning, suggestions=suggestions)
