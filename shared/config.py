"""
Strata Configuration Management
================================

Centralized configuration for the Strata password strength estimator using
Python dataclasses and TOML-based persistence.

Two sections are recognised:

* ``[global]``   -- logging verbosity and log file settings.
* ``[matching]`` -- dictionary source override, extra user dictionaries and
  the bound on how much of a password the dictionary matchers scan.

Unknown keys are ignored, but never silently: every ignored key is reported
through the ``config`` logger so a typo in a config file is visible.

References:
    - Wiggins, A. (2011). The Twelve-Factor App. https://12factor.net/
    - TOML v1.0.0 Specification. https://toml.io/en/v1.0.0
"""

from __future__ import annotations

import sys
from dataclasses import dataclass, field, asdict, fields
from pathlib import Path
from typing import Any, Mapping

if sys.version_info >= (3, 11):
    import tomllib
else:
    import tomli as tomllib

from shared.errors import ConfigError
from shared.logger import StrataLogger


# ---------------------------------------------------------------------------
# Default configuration file path relative to the project root
# ---------------------------------------------------------------------------
_DEFAULT_CONFIG_PATH: Path = Path(__file__).resolve().parent.parent / "config.toml"

_log = StrataLogger("config", log_level="WARNING")


# ============================ Sections =====================================


@dataclass(frozen=False, slots=True)
class GlobalConfig:
    """Global settings: logging verbosity and destinations."""

    log_level: str = "WARNING"
    log_file: str = ""
    log_json: bool = False


@dataclass(frozen=False, slots=True)
class MatchingConfig:
    """Options recognised by the pattern matching stage.

    Attributes:
        dictionary_file: Path to a ranked frequency list JSON document that
            replaces the bundled one. Empty string selects the bundled file.
        extra_dictionaries: Ordered user word lists. Each list becomes an
            extra rank table (``user_dictionary_1``, ``user_dictionary_2``,
            ...) ranked by position in the list.
        max_password_length: Only this many leading characters are searched
            for dictionary, reversed and l33t words.
    """

    dictionary_file: str = ""
    extra_dictionaries: list[list[str]] = field(default_factory=list)
    max_password_length: int = 256

    def __post_init__(self) -> None:
        if not isinstance(self.extra_dictionaries, list) or not all(
            isinstance(words, (list, tuple))
            and all(isinstance(word, str) for word in words)
            for words in self.extra_dictionaries
        ):
            raise ConfigError(
                "extra_dictionaries must be a list of lists of strings"
            )
        self.extra_dictionaries = [list(words) for words in self.extra_dictionaries]
        if (
            not isinstance(self.max_password_length, int)
            or isinstance(self.max_password_length, bool)
            or self.max_password_length < 1
        ):
            raise ConfigError(
                "max_password_length must be a positive integer, "
                f"got {self.max_password_length!r}"
            )

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> MatchingConfig:
        """Build a section from a plain mapping, reporting unknown keys."""
        return _build_section(cls, data, "matching")


# =========================== Master Config =================================


@dataclass(frozen=False, slots=True)
class StrataConfig:
    """Master configuration aggregating all sections.

    Usage:
        >>> config = StrataConfig.load()                  # from default path
        >>> config = StrataConfig.load("custom.toml")     # from custom path
        >>> config.matching.max_password_length
        256
    """

    global_settings: GlobalConfig = field(default_factory=GlobalConfig)
    matching: MatchingConfig = field(default_factory=MatchingConfig)

    # ------------------------------------------------------------------ #
    #  TOML Loading
    # ------------------------------------------------------------------ #

    @classmethod
    def load(cls, path: str | Path | None = None) -> StrataConfig:
        """Load configuration from a TOML file.

        If *path* is ``None`` the loader looks for ``config.toml`` in the
        project root.  Missing keys fall back to dataclass defaults.

        Args:
            path: Filesystem path to a TOML configuration file.

        Returns:
            A fully-populated :class:`StrataConfig` instance.

        Raises:
            FileNotFoundError: If the specified path does not exist
                *and* was explicitly provided by the caller.
            ConfigError: If the file is not valid TOML or a value has the
                wrong shape.
        """
        config_path = Path(path) if path is not None else _DEFAULT_CONFIG_PATH

        if not config_path.exists():
            if path is not None:
                raise FileNotFoundError(
                    f"Configuration file not found: {config_path}"
                )
            return cls()

        try:
            with open(config_path, "rb") as fh:
                raw: dict[str, Any] = tomllib.load(fh)
        except tomllib.TOMLDecodeError as exc:
            raise ConfigError(f"Invalid TOML in {config_path}: {exc}") from exc

        return cls.from_mapping(raw)

    @classmethod
    def from_mapping(cls, raw: Mapping[str, Any]) -> StrataConfig:
        """Build the configuration tree from an already-parsed mapping."""
        unknown_sections = sorted(set(raw) - {"global", "matching"})
        if unknown_sections:
            _log.warning(
                "Ignoring unrecognised config sections: %s",
                ", ".join(unknown_sections),
            )
        return cls(
            global_settings=_build_section(GlobalConfig, raw.get("global", {}), "global"),
            matching=_build_section(MatchingConfig, raw.get("matching", {}), "matching"),
        )

    # ------------------------------------------------------------------ #
    #  Serialisation helpers
    # ------------------------------------------------------------------ #

    def to_dict(self) -> dict[str, Any]:
        """Serialise the entire configuration tree to a plain dictionary."""
        return asdict(self)


# ============================ Internal helpers =============================


def _build_section(cls: type, data: Mapping[str, Any], section: str) -> Any:
    """Instantiate a dataclass *cls* using only the keys it declares.

    Unknown keys are dropped and reported with a warning.
    """
    if not isinstance(data, Mapping):
        raise ConfigError(f"[{section}] must be a table, got {type(data).__name__}")
    valid_keys = {f.name for f in fields(cls)}
    unknown = sorted(k for k in data if k not in valid_keys)
    if unknown:
        _log.warning(
            "Ignoring unrecognised keys in [%s]: %s", section, ", ".join(unknown)
        )
    filtered = {k: v for k, v in data.items() if k in valid_keys}
    return cls(**filtered)

