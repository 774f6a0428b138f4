import os
from pathlib import Path

import pytest
from typer.testing import CliRunner

from intentbot.app.bootstrap import build_dispatcher
from intentbot.cli.commands import app
from intentbot.config.schema import Config
from intentbot.core.models import ChatMessage
from intentbot.intents import default_intents
from intentbot.nlu import DialogflowClient, StaticNLU

TOKEN = "0123456789abcdef0123456789abcdef"

runner = CliRunner()


class RecordingReply:
    def __init__(self) -> None:
        self.sent: list[str] = []
        self.errors: list[str] = []

    async def send(self, message: ChatMessage, text: str) -> None:
        self.sent.append(text)

    async def send_error(self, message: ChatMessage, text: str) -> None:
        self.errors.append(text)


@pytest.fixture
def home(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    monkeypatch.setenv("HOME", str(tmp_path))
    monkeypatch.delenv("INTENTBOT_NLU__CLIENT_TOKEN", raising=False)
    monkeypatch.setattr("intentbot.app.bootstrap.configure_logging", lambda level="INFO": None)
    return tmp_path


def test_invalid_token_builds_disabled_dispatcher() -> None:
    config = Config()
    config.nlu.client_token = "too-short"
    reply = RecordingReply()

    dispatcher = build_dispatcher(config, reply=reply, intents=default_intents(reply))

    assert dispatcher.enabled is False
    assert len(dispatcher.registry) == 0


def test_valid_token_builds_dialogflow_backed_dispatcher() -> None:
    config = Config()
    config.nlu.client_token = TOKEN
    config.dispatcher.workers = 3
    reply = RecordingReply()

    dispatcher = build_dispatcher(config, reply=reply, intents=default_intents(reply))

    assert dispatcher.enabled is True
    assert dispatcher.worker_count == 3
    assert isinstance(dispatcher.nlu, DialogflowClient)
    assert [str(key) for key, _ in dispatcher.registry.entries()] == ["smalltalk.*", "input.unknown", "echo"]


def test_explicit_nlu_overrides_missing_token() -> None:
    reply = RecordingReply()

    dispatcher = build_dispatcher(Config(), reply=reply, nlu=StaticNLU(), intents=default_intents(reply))

    assert dispatcher.enabled is True
    assert len(dispatcher.registry) == 3
    assert dispatcher.metrics is not None


def test_chat_offline_replies_from_builtin_intents(home: Path) -> None:
    result = runner.invoke(app, ["chat", "--offline", "-m", "hello"])

    assert result.exit_code == 0
    assert "Hi there!" in result.output


def test_chat_without_token_exits(home: Path) -> None:
    result = runner.invoke(app, ["chat", "-m", "hello"])

    assert result.exit_code == 1
    assert "disabled" in result.output


def test_onboard_then_status(home: Path) -> None:
    onboard = runner.invoke(app, ["onboard"])
    assert onboard.exit_code == 0
    assert (home / ".intentbot" / "config.json").exists()

    status = runner.invoke(app, ["status"])
    assert status.exit_code == 0
    assert "missing or invalid" in status.output
    assert "unbounded" in status.output


def test_query_without_token_exits(home: Path) -> None:
    result = runner.invoke(app, ["query", "hello"])

    assert result.exit_code == 1


def test_cli_loads_dotenv_from_home(home: Path) -> None:
    env_dir = home / ".intentbot"
    env_dir.mkdir()
    (env_dir / ".env").write_text(f"INTENTBOT_NLU__CLIENT_TOKEN={TOKEN}\n")

    try:
        result = runner.invoke(app, ["status"])
    finally:
        os.environ.pop("INTENTBOT_NLU__CLIENT_TOKEN", None)

    assert result.exit_code == 0
    assert "missing or invalid" not in result.output
    assert "enabled" in result.output
