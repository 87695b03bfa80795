from __future__ import annotations

import logging
from typing import Any, Protocol

import httpx
from botocore.exceptions import BotoCoreError, ClientError

from balikbot.domain import NotifyError
from balikbot.telegram_notifier import send_telegram_message

logger = logging.getLogger(__name__)


class Notifier(Protocol):
    def notify(self, *, subject: str, message: str) -> None:
        ...


class SnsNotifier:
    def __init__(self, *, topic_arn: str, client: Any) -> None:
        self.topic_arn = topic_arn
        self._client = client

    def notify(self, *, subject: str, message: str) -> None:
        try:
            response = self._client.publish(
                TopicArn=self.topic_arn,
                Subject=subject,
                Message=message,
            )
        except (BotoCoreError, ClientError) as e:
            raise NotifyError(f"Failed to publish to {self.topic_arn}: {e}") from e
        logger.info("Published to SNS (message_id=%s)", response.get("MessageId"))


class TelegramNotifier:
    """Sends the subject and link as one message to every configured chat."""

    def __init__(
        self,
        *,
        bot_token: str,
        chat_ids: tuple[str, ...],
        timeout_seconds: float = 20.0,
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        self.bot_token = bot_token
        self.chat_ids = chat_ids
        self.timeout_seconds = timeout_seconds
        self._transport = transport

    def notify(self, *, subject: str, message: str) -> None:
        text = f"{subject}\n\n{message}"
        failed: list[str] = []

        for chat_id in self.chat_ids:
            try:
                send_telegram_message(
                    bot_token=self.bot_token,
                    chat_id=chat_id,
                    text=text,
                    timeout_seconds=self.timeout_seconds,
                    transport=self._transport,
                )
            except (httpx.HTTPError, RuntimeError) as e:
                # Keep sending to the remaining chats.
                logger.warning("Failed to send telegram message to chat_id=%s (%s: %s)", chat_id, type(e).__name__, e)
                failed.append(chat_id)

        if failed:
            raise NotifyError(f"Failed to send telegram message to some recipients: {', '.join(failed)}")
