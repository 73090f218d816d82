"""
Strata -- Pattern-Aware Password Strength Estimation
=====================================================

Estimates how many guesses an attacker needs to find a password by
decomposing it into recognisable patterns (dictionary words, keyboard
paths, repeats, sequences, dates, digit runs) and choosing the
minimum-entropy cover of the whole string.

Modules:
    - strata.core.engine: Central estimation orchestrator
    - strata.core.models: Pydantic data models
    - strata.analyzers: Pattern matchers, searcher, scorer and feedback
    - strata.output: Console and report output
    - strata.cli: Click-based command-line interface

References:
    - Wheeler, D. L. (2016). zxcvbn: Low-Budget Password Strength
      Estimation. USENIX Security Symposium.
    - NIST SP 800-63B (2017). Digital Identity Guidelines.
"""

__version__ = "1.0.0"
__tool_name__ = "strata"
