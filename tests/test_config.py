import json
from pathlib import Path

import pytest

from intentbot.config.loader import camel_to_snake, load_config, save_config, snake_to_camel
from intentbot.config.schema import Config

TOKEN = "0123456789abcdef0123456789abcdef"


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch: pytest.MonkeyPatch) -> None:
    for name in ("INTENTBOT_NLU__CLIENT_TOKEN", "INTENTBOT_DISPATCHER__WORKERS"):
        monkeypatch.delenv(name, raising=False)


def test_defaults_disable_intelligence() -> None:
    config = Config()

    assert config.dispatcher.workers == 2
    assert config.dispatcher.queue_maxsize == 0
    assert config.dispatcher.query_timeout_seconds is None
    assert config.dispatcher.on_query_failure == "drop"
    assert config.logging.level == "INFO"
    assert config.logging.diagnostics_enabled is True
    assert config.telemetry.prometheus_enabled is False
    assert config.intelligence_enabled is False


def test_load_camel_case_json(tmp_path: Path) -> None:
    path = tmp_path / "config.json"
    path.write_text(
        json.dumps(
            {
                "nlu": {"clientToken": TOKEN, "lang": "de", "timeoutSeconds": 5},
                "dispatcher": {"queueMaxsize": 8, "onQueryFailure": "report", "queryTimeoutSeconds": -1},
                "logging": {"level": "debug", "diagnosticsEnabled": False},
            }
        )
    )

    config = load_config(path)

    assert config.intelligence_enabled is True
    assert config.nlu.lang == "de"
    assert config.nlu.timeout_seconds == 5.0
    assert config.dispatcher.queue_maxsize == 8
    assert config.dispatcher.on_query_failure == "report"
    assert config.dispatcher.query_timeout_seconds is None
    assert config.logging.level == "DEBUG"
    assert config.logging.diagnostics_enabled is False


def test_invalid_json_falls_back_to_defaults(tmp_path: Path) -> None:
    path = tmp_path / "config.json"
    path.write_text("{not json")

    config = load_config(path)

    assert config.dispatcher.workers == 2
    assert config.intelligence_enabled is False


def test_invalid_values_fall_back_to_defaults(tmp_path: Path) -> None:
    path = tmp_path / "config.json"
    path.write_text(json.dumps({"dispatcher": {"workers": 0}}))

    assert load_config(path).dispatcher.workers == 2


def test_missing_file_returns_defaults(tmp_path: Path) -> None:
    assert load_config(tmp_path / "absent.json").dispatcher.workers == 2


def test_save_writes_camel_case_with_private_permissions(tmp_path: Path) -> None:
    path = tmp_path / "nested" / "config.json"
    config = Config()
    config.nlu.client_token = TOKEN

    save_config(config, path)

    data = json.loads(path.read_text())
    assert data["nlu"]["clientToken"] == TOKEN
    assert data["dispatcher"]["onQueryFailure"] == "drop"
    assert path.stat().st_mode & 0o777 == 0o600
    assert load_config(path).intelligence_enabled is True


def test_environment_overrides(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("INTENTBOT_DISPATCHER__WORKERS", "4")
    monkeypatch.setenv("INTENTBOT_NLU__CLIENT_TOKEN", TOKEN)

    config = Config()

    assert config.dispatcher.workers == 4
    assert config.intelligence_enabled is True


def test_key_case_conversion() -> None:
    assert camel_to_snake("queryTimeoutSeconds") == "query_timeout_seconds"
    assert snake_to_camel("query_timeout_seconds") == "queryTimeoutSeconds"
