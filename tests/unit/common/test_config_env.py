"""Tests for typed environment variable parsing helpers."""

import os
from unittest.mock import patch

import pytest

from athenacli.common.config.env import get_env_bool, get_env_float, get_env_str


def test_get_env_str():
    """Test string parsing."""
    with patch.dict(os.environ, {"FOO": "bar"}):
        assert get_env_str("FOO") == "bar"
        assert get_env_str("BAR", default="baz") == "baz"
        assert get_env_str("FOO", required=True) == "bar"

    with pytest.raises(KeyError):
        get_env_str("MISSING_ATHENACLI_VAR", required=True)


def test_get_env_float():
    """Test float parsing; blank values fall back to the default."""
    with patch.dict(os.environ, {"FOO": "1.5", "BLANK": "  "}):
        assert get_env_float("FOO") == 1.5
        assert get_env_float("BAR", default=4.56) == 4.56
        assert get_env_float("BLANK", default=2.0) == 2.0

    with patch.dict(os.environ, {"FOO": "not_a_float"}):
        with pytest.raises(ValueError):
            get_env_float("FOO")


def test_get_env_bool():
    """Test boolean parsing."""
    truthy = ["true", "1", "yes", "on", "TRUE", "Yes"]
    falsey = ["false", "0", "no", "off", "", "FALSE", "No"]

    for val in truthy:
        with patch.dict(os.environ, {"FOO": val}):
            assert get_env_bool("FOO") is True

    for val in falsey:
        with patch.dict(os.environ, {"FOO": val}):
            assert get_env_bool("FOO") is False

    with patch.dict(os.environ, {"FOO": "maybe"}):
        with pytest.raises(ValueError):
            get_env_bool("FOO")

    assert get_env_bool("MISSING_ATHENACLI_VAR", default=True) is True
