# tests/test_settings.py
import pytest
from pydantic import ValidationError

from ceprace.config import Settings, Telemetry, load_settings
from ceprace.exceptions import ConfigError


def test_defaults():
    settings = Settings()
    assert settings.port == 8080
    assert settings.timeout == 1.0
    assert settings.skip_failures is False
    assert settings.viacep_url == "http://viacep.com.br"
    assert settings.brasilapi_url == "https://brasilapi.com.br"
    assert settings.telemetry == Telemetry.NONE


def test_yaml_file_then_env_overrides(tmp_path):
    config = tmp_path / "ceprace.yaml"
    config.write_text("timeout: 0.5\nport: 9000\ntelemetry: otel\n")

    settings = load_settings(config, environ={"CEPRACE_PORT": "9100", "CEPRACE_SKIP_FAILURES": "true"})

    assert settings.timeout == 0.5
    assert settings.port == 9100
    assert settings.skip_failures is True
    assert settings.telemetry == Telemetry.OTEL


def test_config_path_from_environment(tmp_path):
    config = tmp_path / "other.yaml"
    config.write_text("viacep_url: http://viacep.local\n")

    settings = load_settings(environ={"CEPRACE_CONFIG": str(config)})

    assert settings.viacep_url == "http://viacep.local"


def test_empty_env_values_are_ignored():
    settings = load_settings(environ={"CEPRACE_TIMEOUT": ""})
    assert settings.timeout == 1.0


def test_invalid_values_are_rejected():
    with pytest.raises(ValidationError):
        load_settings(environ={"CEPRACE_TIMEOUT": "0"})
    with pytest.raises(ValidationError):
        load_settings(environ={"CEPRACE_PORT": "not-a-port"})


def test_missing_explicit_file_is_an_error(tmp_path):
    with pytest.raises(ConfigError):
        load_settings(tmp_path / "missing.yaml", environ={})


def test_non_mapping_file_is_an_error(tmp_path):
    config = tmp_path / "ceprace.yaml"
    config.write_text("- just\n- a list\n")
    with pytest.raises(ConfigError):
        load_settings(config, environ={})
