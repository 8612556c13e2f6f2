"""Tests for Config loading and overrides"""

import os
from unittest.mock import patch

import pytest

from quill.core.config import Config


@pytest.mark.unit
def test_defaults_match_flag_defaults():
    config = Config()

    assert config.pem_file == "private.pem"
    assert config.api_key_file == "apikey"
    assert config.api_key is None
    assert config.nonce_file == "nonce"
    assert config.token_mode == "counter"
    assert config.requests_dir == "requests"
    assert config.close_timeout == 1.0


@pytest.mark.unit
def test_from_env_reads_variables():
    with patch.dict(
        os.environ,
        {
            "QUILL_PEM_FILE": "/keys/p.pem",
            "QUILL_API_KEY_FILE": "/keys/apikey",
            "QUILL_API_KEY": "literal",
            "QUILL_NONCE_FILE": "/state/nonce",
            "QUILL_TOKEN_MODE": "TIMESTAMP",
            "QUILL_REQUESTS_DIR": "/defs",
            "QUILL_TIMEOUT": "2.5",
        },
        clear=True,
    ):
        config = Config.from_env()

    assert config.pem_file == "/keys/p.pem"
    assert config.api_key_file == "/keys/apikey"
    assert config.api_key == "literal"
    assert config.nonce_file == "/state/nonce"
    assert config.token_mode == "timestamp"
    assert config.requests_dir == "/defs"
    assert config.timeout == 2.5


@pytest.mark.unit
def test_from_env_empty_environment_uses_defaults():
    with patch.dict(os.environ, {}, clear=True):
        assert Config.from_env() == Config()


@pytest.mark.unit
def test_from_env_invalid_token_mode():
    with patch.dict(os.environ, {"QUILL_TOKEN_MODE": "sequence"}, clear=True):
        with pytest.raises(ValueError) as exc_info:
            Config.from_env()
    assert "sequence" in str(exc_info.value)


@pytest.mark.unit
def test_from_env_invalid_timeout():
    with patch.dict(os.environ, {"QUILL_TIMEOUT": "soon"}, clear=True):
        with pytest.raises(ValueError):
            Config.from_env()


@pytest.mark.unit
def test_from_env_does_not_log_literal_api_key(mocker):
    mock_logger = mocker.patch("quill.core.config.logger")
    with patch.dict(os.environ, {"QUILL_API_KEY": "sekrit"}, clear=True):
        Config.from_env()

    logged = " ".join(str(call) for call in mock_logger.info.call_args_list)
    assert "sekrit" not in logged


@pytest.mark.unit
def test_with_overrides_skips_none():
    config = Config().with_overrides(pem_file="k.pem", api_key=None, timeout=3.0)

    assert config.pem_file == "k.pem"
    assert config.api_key is None
    assert config.timeout == 3.0


@pytest.mark.unit
def test_with_overrides_without_changes_returns_same_instance():
    config = Config()
    assert config.with_overrides(pem_file=None) is config


@pytest.mark.unit
def test_with_overrides_rejects_unknown_field():
    with pytest.raises(ValueError):
        Config().with_overrides(colour="blue")


@pytest.mark.unit
def test_with_overrides_validates():
    with pytest.raises(ValueError):
        Config().with_overrides(timeout=0)


@pytest.mark.unit
def test_log_summary_includes_timeouts(mocker):
    mock_logger = mocker.patch("quill.core.config.logger")

    Config(timeout=4.0, close_timeout=0.5).log_summary()

    logged = [call.args[0] for call in mock_logger.info.call_args_list]
    assert "  Timeout: 4.0s" in logged
    assert "  Close Timeout: 0.5s" in logged
