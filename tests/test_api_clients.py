"""
Test: client factories.
"""
import pytest

from api_clients import build_session
from utils.error_handler import ConfigError


def test_session_carries_bearer_and_json_headers():
    session = build_session("secret-key")
    assert session.headers["Authorization"] == "Bearer secret-key"
    assert session.headers["Content-Type"] == "application/json"


def test_session_is_cached_per_key():
    assert build_session("key-a") is build_session("key-a")
    assert build_session("key-a") is not build_session("key-b")


@pytest.mark.parametrize("key", [None, ""])
def test_missing_key_is_a_config_error(key):
    with pytest.raises(ConfigError):
        build_session(key)
