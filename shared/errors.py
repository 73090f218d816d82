"""
Strata Exceptions
=================

Exception hierarchy shared by every Strata module. Callers that only care
about "something in Strata went wrong" can catch :class:`StrataError`.
"""

from __future__ import annotations


class StrataError(Exception):
    """Base class for all Strata errors."""


class ConfigError(StrataError, ValueError):
    """A configuration value is missing, malformed or of the wrong type."""


class DictionaryError(StrataError):
    """A ranked frequency list could not be loaded."""
