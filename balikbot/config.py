from __future__ import annotations

import os
from dataclasses import dataclass
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from dotenv import load_dotenv

STORE_BACKENDS = {"dynamodb", "file"}
NOTIFIER_BACKENDS = {"sns", "telegram"}


def _parse_telegram_chat_ids(raw: str) -> tuple[str, ...]:
    # Comma-separated ids, in order, without duplicates.
    result: list[str] = []
    for p in filter(None, (part.strip() for part in raw.split(","))):
        try:
            int(p)
        except ValueError as e:
            raise RuntimeError(f"Invalid TELEGRAM_CHAT_ID value: {p!r}. Expected integer chat id.") from e

        if p == "0":
            raise RuntimeError("Invalid TELEGRAM_CHAT_ID value: '0' is not a valid chat id")

        if p not in result:
            result.append(p)

    if not result:
        raise RuntimeError("TELEGRAM_CHAT_ID is empty. Provide at least one chat id.")

    return tuple(result)


@dataclass(frozen=True)
class Settings:
    aws_region: str | None = None
    aws_account_id: str | None = None

    table_name: str = "balik-kampung"
    topic_name: str = "balik-kampung"

    store_backend: str = "dynamodb"
    # Used by the file store only
    state_file: str = "state.json"

    notifier_backend: str = "sns"
    telegram_bot_token: str | None = None
    telegram_chat_ids: tuple[str, ...] = ()

    booking_url: str = "http://booking.balikkampung.co/"
    check_url_template: str = (
        "http://booking.balikkampung.co/index.php?controller=pjBusScheduleFront&action=pjActionCheck"
        "&hide=0&date={date}&pickup_id=10&return_id=15&is_return=F&return_date={date}&template=template_2"
    )
    timezone: str = "Asia/Singapore"
    request_timeout_seconds: float = 20.0

    # How many times the booking site check is attempted before giving up.
    check_retry_attempts: int = 1

    # Local loop only; on Lambda the schedule rule drives invocations.
    check_interval_seconds: int = 3600

    @property
    def topic_arn(self) -> str:
        return f"arn:aws:sns:{self.aws_region}:{self.aws_account_id}:{self.topic_name}"


def _require(name: str) -> str:
    value = os.getenv(name)
    if not value:
        raise RuntimeError(f"Missing required environment variable: {name}")
    return value


def _choice(name: str, default: str, allowed: set[str]) -> str:
    value = os.getenv(name, default).strip().lower()
    if value not in allowed:
        raise RuntimeError(f"{name} must be one of {sorted(allowed)}, got {value!r}")
    return value


def load_settings(dotenv_path: str | None = None, *, with_notifier: bool = True) -> Settings:
    """Build settings from the environment and an optional .env file.

    ``with_notifier=False`` skips the credentials only the notifier needs, for
    commands that touch the store alone.
    """
    load_dotenv(dotenv_path=dotenv_path, override=False)

    store_backend = _choice("STORE_BACKEND", "dynamodb", STORE_BACKENDS)
    notifier_backend = _choice("NOTIFIER_BACKEND", "sns", NOTIFIER_BACKENDS)

    aws_region = os.getenv("AWS_REGION") or None
    if store_backend == "dynamodb" or (with_notifier and notifier_backend == "sns"):
        aws_region = _require("AWS_REGION")

    aws_account_id = os.getenv("AWS_ACCOUNT_ID") or None
    if with_notifier and notifier_backend == "sns":
        aws_account_id = _require("AWS_ACCOUNT_ID")

    telegram_bot_token = None
    telegram_chat_ids: tuple[str, ...] = ()
    if with_notifier and notifier_backend == "telegram":
        telegram_bot_token = _require("TELEGRAM_BOT_TOKEN")
        telegram_chat_ids = _parse_telegram_chat_ids(_require("TELEGRAM_CHAT_ID"))

    check_retry_attempts = int(os.getenv("CHECK_RETRY_ATTEMPTS", "1"))
    if check_retry_attempts < 1:
        raise RuntimeError("CHECK_RETRY_ATTEMPTS must be >= 1")

    timezone = os.getenv("TIMEZONE", "Asia/Singapore")
    try:
        ZoneInfo(timezone)
    except (ZoneInfoNotFoundError, ValueError) as e:
        raise RuntimeError(f"Unknown TIMEZONE: {timezone!r}") from e

    request_timeout_seconds = float(os.getenv("REQUEST_TIMEOUT_SECONDS", "20"))
    if request_timeout_seconds <= 0:
        raise RuntimeError("REQUEST_TIMEOUT_SECONDS must be > 0")

    return Settings(
        aws_region=aws_region,
        aws_account_id=aws_account_id,
        table_name=os.getenv("TABLE_NAME", "balik-kampung"),
        topic_name=os.getenv("TOPIC_NAME", "balik-kampung"),
        store_backend=store_backend,
        state_file=os.getenv("STATE_FILE", "state.json"),
        notifier_backend=notifier_backend,
        telegram_bot_token=telegram_bot_token,
        telegram_chat_ids=telegram_chat_ids,
        timezone=timezone,
        request_timeout_seconds=request_timeout_seconds,
        check_retry_attempts=check_retry_attempts,
        check_interval_seconds=int(os.getenv("CHECK_INTERVAL_SECONDS", "3600")),
    )
