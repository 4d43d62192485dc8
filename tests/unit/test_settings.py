import json
from pathlib import Path

import pytest

from regcheck.config.settings import load_module_options, load_settings, parse_module_list


def test_defaults_without_environment():
    settings = load_settings({})
    assert settings.enabled_modules is None
    assert settings.max_workers == 1
    assert settings.module_options == {}
    assert settings.audit_log is None
    assert settings.log_level == "INFO"


def test_environment_values_are_parsed(tmp_path):
    config_path = tmp_path / "modules.json"
    config_path.write_text(json.dumps({"cafe": {"energy_threshold": 0.5}}), encoding="utf-8")

    settings = load_settings(
        {
            "REGCHECK_ENABLED_MODULES": "cafe, gdpr,,",
            "REGCHECK_MAX_WORKERS": "4",
            "REGCHECK_MODULE_CONFIG": str(config_path),
            "REGCHECK_AUDIT_LOG": str(tmp_path / "audit.jsonl"),
            "REGCHECK_LOG_LEVEL": "debug",
        }
    )

    assert settings.enabled_modules == ["cafe", "gdpr"]
    assert settings.max_workers == 4
    assert settings.module_options == {"cafe": {"energy_threshold": 0.5}}
    assert settings.audit_log == tmp_path / "audit.jsonl"
    assert settings.log_level == "DEBUG"


@pytest.mark.parametrize("value", ["zero", "0", "-2"])
def test_invalid_worker_count(value):
    with pytest.raises(ValueError):
        load_settings({"REGCHECK_MAX_WORKERS": value})


def test_module_list_parsing():
    assert parse_module_list(None) is None
    assert parse_module_list("  ") is None
    assert parse_module_list("a,b") == ["a", "b"]


@pytest.mark.parametrize("payload", ["{not json", "[1, 2]", '{"cafe": 3}'])
def test_malformed_module_config(tmp_path, payload):
    path = tmp_path / "modules.json"
    path.write_text(payload, encoding="utf-8")
    with pytest.raises(ValueError):
        load_module_options(Path(path))
