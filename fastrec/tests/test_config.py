"""
Unit Tests: Configuration and Errors

Tests:
    - Default configs validate
    - Invalid values reported by validate() and ensure_valid()
    - Environment overrides
    - Error serialization
"""

import pytest

from fastrec.core.config import (
    LoggingConfig,
    NeighborhoodConfig,
    SimilarityConfig,
    ensure_valid,
)
from fastrec.core.errors import ConfigError, ErrorCode, ParseError
from fastrec.core.types import CounterStrategy, Orientation


class TestConfigValidation:
    """Tests for validate()."""

    def test_defaults_valid(self):
        """Test default configs report no problem."""
        assert SimilarityConfig().validate() is None
        assert NeighborhoodConfig().validate() is None
        assert LoggingConfig().validate() is None

    @pytest.mark.parametrize("config", [
        SimilarityConfig(alpha=1.2),
        NeighborhoodConfig(k=-1),
        NeighborhoodConfig(max_workers=0),
        NeighborhoodConfig(window=0),
        LoggingConfig(level="LOUD"),
    ])
    def test_invalid(self, config):
        """Test invalid values are reported and raised."""
        assert config.validate() is not None

        with pytest.raises(ConfigError) as exc_info:
            ensure_valid(config)

        assert exc_info.value.code == ErrorCode.CONFIG_INVALID

    def test_frozen(self):
        """Test configs are immutable."""
        config = NeighborhoodConfig()

        with pytest.raises(AttributeError):
            config.k = 5


class TestConfigFromEnv:
    """Tests for FASTREC_* overrides."""

    def test_similarity_env(self, monkeypatch):
        """Test similarity settings read from the environment."""
        monkeypatch.setenv("FASTREC_METRIC", "cosine")
        monkeypatch.setenv("FASTREC_STRATEGY", "dense")
        monkeypatch.setenv("FASTREC_VECTORIZED", "true")
        monkeypatch.setenv("FASTREC_ORIENTATION", "item")

        config = SimilarityConfig.from_env()

        assert config.metric == "cosine"
        assert config.strategy is CounterStrategy.DENSE
        assert config.vectorized is True
        assert config.orientation is Orientation.ITEM

    def test_neighborhood_env(self, monkeypatch):
        """Test neighborhood settings read from the environment."""
        monkeypatch.setenv("FASTREC_K", "7")
        monkeypatch.setenv("FASTREC_THRESHOLD", "0.25")
        monkeypatch.setenv("FASTREC_MAX_WORKERS", "3")

        config = NeighborhoodConfig.from_env()

        assert config.k == 7
        assert config.threshold == 0.25
        assert config.max_workers == 3

    def test_env_defaults(self, monkeypatch):
        """Test unset variables fall back to defaults."""
        for name in ("FASTREC_K", "FASTREC_THRESHOLD", "FASTREC_MAX_WORKERS",
                     "FASTREC_LOG_LEVEL", "FASTREC_LOG_JSON"):
            monkeypatch.delenv(name, raising=False)

        assert NeighborhoodConfig.from_env() == NeighborhoodConfig()
        assert LoggingConfig.from_env() == LoggingConfig()

    @pytest.mark.parametrize("name, value, loader", [
        ("FASTREC_STRATEGY", "bogus", SimilarityConfig.from_env),
        ("FASTREC_ORIENTATION", "diagonal", SimilarityConfig.from_env),
        ("FASTREC_ALPHA", "half", SimilarityConfig.from_env),
        ("FASTREC_K", "x", NeighborhoodConfig.from_env),
        ("FASTREC_THRESHOLD", "high", NeighborhoodConfig.from_env),
        ("FASTREC_MAX_WORKERS", "2.5", NeighborhoodConfig.from_env),
    ])
    def test_unparseable_env_value(self, monkeypatch, name, value, loader):
        """Test a malformed variable raises ConfigError naming it."""
        monkeypatch.setenv(name, value)

        with pytest.raises(ConfigError) as exc_info:
            loader()

        err = exc_info.value
        assert err.code == ErrorCode.CONFIG_INVALID
        assert err.context["param"] == name
        assert err.context["value"] == value
        assert isinstance(err.__cause__, ValueError)


class TestErrors:
    """Tests for the error hierarchy."""

    def test_to_dict(self):
        """Test structured serialization for logging."""
        err = ParseError.unknown_id("user", "carol").at_position(4)

        data = err.to_dict()

        assert data["code"] == "PARSE_UNKNOWN_ID"
        assert data["context"]["position"] == 4
        assert str(err) == "[PARSE_UNKNOWN_ID] Record 4: Unknown user id 'carol'"

    def test_cause_kept(self):
        """Test the underlying exception is recorded."""
        cause = ValueError("bad")

        err = ParseError.invalid_token("item", "x", cause=cause)

        assert err.cause is cause
        assert "ValueError" in err.to_dict()["cause"]
