"""
Strata Shared Module
=====================

Common utilities shared by the Strata toolkit: configuration management,
structured logging, the Rich console wrapper, error types and the
combinatorics helpers used by the entropy model.
"""

from shared.config import StrataConfig
from shared.errors import ConfigError, DictionaryError, StrataError

__all__ = [
    "ConfigError",
    "DictionaryError",
    "StrataConfig",
    "StrataError",
]
