"""
Configuration Tests
====================

Tests for StrataConfig defaults, TOML loading and validation.
"""

from __future__ import annotations

import pytest

from shared.config import GlobalConfig, MatchingConfig, StrataConfig
from shared.errors import ConfigError


class TestDefaults:
    """Tests for default configuration values."""

    def test_global_defaults(self):
        """Logging is quiet and console-only by default."""
        settings = GlobalConfig()
        assert settings.log_level == "WARNING"
        assert settings.log_file == ""
        assert settings.log_json is False

    def test_matching_defaults(self):
        """The bundled dictionary is used and scanning is bounded."""
        matching = MatchingConfig()
        assert matching.dictionary_file == ""
        assert matching.extra_dictionaries == []
        assert matching.max_password_length == 256

    def test_to_dict(self):
        """The whole tree serialises to plain data."""
        data = StrataConfig().to_dict()
        assert data["matching"]["max_password_length"] == 256
        assert data["global_settings"]["log_level"] == "WARNING"


class TestValidation:
    """Tests for MatchingConfig validation."""

    def test_extra_dictionaries_shape(self):
        """Word lists must be lists of strings."""
        with pytest.raises(ConfigError):
            MatchingConfig(extra_dictionaries=["not", "nested"])

    def test_extra_dictionaries_tuples_become_lists(self):
        """Tuples are accepted and normalised to lists."""
        matching = MatchingConfig(extra_dictionaries=[("alpha", "beta")])
        assert matching.extra_dictionaries == [["alpha", "beta"]]

    def test_max_password_length_positive(self):
        """A zero scan bound is rejected."""
        with pytest.raises(ConfigError):
            MatchingConfig(max_password_length=0)

    @pytest.mark.parametrize("value", ["64", 12.5, True])
    def test_max_password_length_must_be_integer(self, value):
        """Strings, floats and booleans are rejected as scan bounds."""
        with pytest.raises(ConfigError):
            MatchingConfig(max_password_length=value)

    def test_config_error_is_value_error(self):
        """ConfigError can be caught as ValueError."""
        assert issubclass(ConfigError, ValueError)


class TestLoad:
    """Tests for StrataConfig.load."""

    def test_load_toml(self, tmp_path):
        """Values from the file override the defaults."""
        path = tmp_path / "strata.toml"
        path.write_text(
            "[global]\n"
            'log_level = "DEBUG"\n'
            "\n"
            "[matching]\n"
            "max_password_length = 64\n"
            'extra_dictionaries = [["acme", "widget"]]\n',
            encoding="utf-8",
        )
        config = StrataConfig.load(path)
        assert config.global_settings.log_level == "DEBUG"
        assert config.matching.max_password_length == 64
        assert config.matching.extra_dictionaries == [["acme", "widget"]]
        assert config.matching.dictionary_file == ""

    def test_unknown_keys_are_ignored(self, tmp_path):
        """Unrecognised sections and keys do not break loading."""
        path = tmp_path / "strata.toml"
        path.write_text(
            "[matching]\nmax_password_length = 10\ncolour = true\n\n[extras]\nx = 1\n",
            encoding="utf-8",
        )
        config = StrataConfig.load(path)
        assert config.matching.max_password_length == 10

    def test_missing_explicit_file(self, tmp_path):
        """An explicitly named file must exist."""
        with pytest.raises(FileNotFoundError):
            StrataConfig.load(tmp_path / "missing.toml")

    def test_invalid_toml(self, tmp_path):
        """Syntax errors surface as ConfigError."""
        path = tmp_path / "broken.toml"
        path.write_text("[matching\n", encoding="utf-8")
        with pytest.raises(ConfigError):
            StrataConfig.load(path)

    def test_section_must_be_table(self):
        """A section given as a scalar is rejected."""
        with pytest.raises(ConfigError):
            StrataConfig.from_mapping({"matching": 3})

    def test_non_integer_scan_bound_from_toml(self, tmp_path):
        """A quoted number in the file is a ConfigError, not a TypeError."""
        path = tmp_path / "strata.toml"
        path.write_text('[matching]\nmax_password_length = "64"\n', encoding="utf-8")
        with pytest.raises(ConfigError):
            StrataConfig.load(path)
