"""Tests for StatementConfig."""

import pytest

from sqlhelpers.config import DEFAULT_CONFIG, StatementConfig


def test_defaults() -> None:
    config = StatementConfig()
    assert config.always_quote_identifiers is False
    assert config.log_statements is False
    assert config.validate_parameters is True
    assert config == DEFAULT_CONFIG


def test_replace_returns_updated_copy() -> None:
    config = StatementConfig()
    updated = config.replace(always_quote_identifiers=True)
    assert updated.always_quote_identifiers is True
    assert updated.validate_parameters is True
    assert config.always_quote_identifiers is False
    assert updated != config


def test_replace_rejects_unknown_fields() -> None:
    with pytest.raises(TypeError, match="dialect"):
        StatementConfig().replace(dialect="postgres")


def test_config_is_immutable() -> None:
    config = StatementConfig()
    with pytest.raises(AttributeError, match="immutable"):
        config.log_statements = True  # type: ignore[misc]


def test_equality_and_hash() -> None:
    first = StatementConfig(log_statements=True)
    second = StatementConfig(log_statements=True)
    assert first == second
    assert hash(first) == hash(second)
    assert len({first, second, StatementConfig()}) == 2
    assert repr(first) == (
        "StatementConfig(always_quote_identifiers=False, log_statements=True, validate_parameters=True)"
    )
