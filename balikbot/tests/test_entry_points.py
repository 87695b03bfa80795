from __future__ import annotations

from unittest.mock import MagicMock, patch

import pytest

import main
from balikbot import lambda_handler
from balikbot.config import Settings
from balikbot.notifiers import SnsNotifier, TelegramNotifier
from balikbot.store import DynamoDBStore, FileStore


def _settings(**overrides) -> Settings:
    return Settings(aws_region="ap-southeast-1", aws_account_id="123456789012", **overrides)


def _args(**values):
    defaults = {"once": False, "seed_date": None}
    defaults.update(values)
    return type("Args", (), defaults)()


def test_build_checker_wires_aws_backends() -> None:
    with patch("balikbot.lambda_handler.boto3.client") as client:
        checker = lambda_handler.build_checker(_settings())

    assert isinstance(checker.store, DynamoDBStore)
    assert isinstance(checker.notifier, SnsNotifier)
    assert checker.notifier.topic_arn == "arn:aws:sns:ap-southeast-1:123456789012:balik-kampung"
    assert {c.args[0] for c in client.call_args_list} == {"dynamodb", "sns"}


def test_build_checker_wires_local_backends(tmp_path) -> None:
    settings = _settings(
        store_backend="file",
        state_file=str(tmp_path / "state.json"),
        notifier_backend="telegram",
        telegram_bot_token="TEST_TOKEN",
        telegram_chat_ids=("1",),
    )

    with patch("balikbot.lambda_handler.boto3.client") as client:
        checker = lambda_handler.build_checker(settings)

    assert isinstance(checker.store, FileStore)
    assert isinstance(checker.notifier, TelegramNotifier)
    client.assert_not_called()


def test_handler_returns_checker_message() -> None:
    checker = MagicMock()
    checker.run.return_value = "2023-01-08 not yet open. Be patient."

    with (
        patch("balikbot.lambda_handler.load_settings", return_value=_settings()),
        patch("balikbot.lambda_handler.build_checker", return_value=checker),
    ):
        assert lambda_handler.handler({}, None) == "2023-01-08 not yet open. Be patient."


def test_handler_propagates_errors() -> None:
    checker = MagicMock()
    checker.run.side_effect = RuntimeError("boom")

    with (
        patch("balikbot.lambda_handler.load_settings", return_value=_settings()),
        patch("balikbot.lambda_handler.build_checker", return_value=checker),
    ):
        with pytest.raises(RuntimeError, match="boom"):
            lambda_handler.handler({}, None)


def test_main_once_runs_single_check(capsys: pytest.CaptureFixture[str]) -> None:
    checker = MagicMock()
    checker.run.return_value = "2023-01-08 ticket is available now!"

    with (
        patch("main.load_settings", return_value=_settings()),
        patch("main.build_checker", return_value=checker),
        patch("main.argparse.ArgumentParser.parse_args", return_value=_args(once=True)),
    ):
        assert main.main() == 0

    checker.run.assert_called_once_with()
    assert "2023-01-08 ticket is available now!" in capsys.readouterr().out


def test_main_seed_date_needs_only_store_settings(monkeypatch: pytest.MonkeyPatch, tmp_path) -> None:
    for name in ("AWS_REGION", "AWS_ACCOUNT_ID", "NOTIFIER_BACKEND", "TELEGRAM_BOT_TOKEN", "TELEGRAM_CHAT_ID"):
        monkeypatch.delenv(name, raising=False)
    state_file = tmp_path / "state.json"
    monkeypatch.setenv("STORE_BACKEND", "file")
    monkeypatch.setenv("STATE_FILE", str(state_file))

    with (
        patch("main.build_checker") as build_checker,
        patch("main.argparse.ArgumentParser.parse_args", return_value=_args(seed_date="2023-01-01")),
    ):
        assert main.main() == 0

    build_checker.assert_not_called()
    assert FileStore(str(state_file)).get("last") == "2023-01-01"


def test_run_forever_logs_failures_and_keeps_going() -> None:
    checker = MagicMock()
    checker.run.side_effect = [RuntimeError("boom"), "2023-01-08 not yet open. Be patient."]

    # Second sleep ends the loop.
    with patch("main.time.sleep", side_effect=[None, KeyboardInterrupt]):
        with pytest.raises(KeyboardInterrupt):
            main.run_forever(checker, 60)

    assert checker.run.call_count == 2
