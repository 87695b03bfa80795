from __future__ import annotations

import logging
from typing import Any

import boto3

from balikbot.booking_client import HttpxFetcher
from balikbot.checker import AvailabilityChecker
from balikbot.config import Settings, load_settings
from balikbot.notifiers import Notifier, SnsNotifier, TelegramNotifier
from balikbot.store import DynamoDBStore, FileStore, KeyValueStore

logger = logging.getLogger(__name__)


def build_store(settings: Settings) -> KeyValueStore:
    if settings.store_backend == "file":
        return FileStore(settings.state_file)
    return DynamoDBStore(
        table_name=settings.table_name,
        client=boto3.client("dynamodb", region_name=settings.aws_region),
    )


def build_notifier(settings: Settings) -> Notifier:
    if settings.notifier_backend == "telegram":
        return TelegramNotifier(
            bot_token=settings.telegram_bot_token or "",
            chat_ids=settings.telegram_chat_ids,
            timeout_seconds=settings.request_timeout_seconds,
        )
    return SnsNotifier(
        topic_arn=settings.topic_arn,
        client=boto3.client("sns", region_name=settings.aws_region),
    )


def build_checker(settings: Settings) -> AvailabilityChecker:
    return AvailabilityChecker(
        settings,
        store=build_store(settings),
        fetcher=HttpxFetcher(timeout_seconds=settings.request_timeout_seconds),
        notifier=build_notifier(settings),
    )


def handler(event: Any = None, context: Any = None) -> str:
    # The Lambda runtime installs its own handler on the root logger.
    logging.getLogger().setLevel(logging.INFO)

    settings = load_settings()
    message = build_checker(settings).run()
    logger.info("%s", message)
    return message
