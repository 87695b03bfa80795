from __future__ import annotations

import logging

from tenacity import RetryCallState, retry, stop_after_attempt, wait_exponential

from balikbot.booking_client import Fetcher, build_check_url
from balikbot.config import Settings
from balikbot.dates import get_next_date
from balikbot.domain import LAST_DATE_KEY, OPEN_SENTINEL
from balikbot.notifiers import Notifier
from balikbot.store import KeyValueStore

logger = logging.getLogger(__name__)


def available_message(date_iso: str) -> str:
    return f"{date_iso} ticket is available now!"


def not_open_message(date_iso: str) -> str:
    return f"{date_iso} not yet open. Be patient."


def _short_exc(retry_state: RetryCallState) -> str | None:
    if retry_state.outcome is None or not retry_state.outcome.failed:
        return None
    exc = retry_state.outcome.exception()
    if exc is None:
        return None
    msg = str(exc).strip()
    return f"{type(exc).__name__}: {msg}" if msg else type(exc).__name__


def _log_before_attempt(retry_state: RetryCallState) -> None:
    logger.info("Check attempt %s: start", retry_state.attempt_number)


def _log_after_attempt(retry_state: RetryCallState) -> None:
    if retry_state.outcome is not None and retry_state.outcome.failed:
        logger.warning("Check attempt %s failed (%s)", retry_state.attempt_number, _short_exc(retry_state))


def _log_before_sleep(retry_state: RetryCallState) -> None:
    sleep_seconds = getattr(retry_state.next_action, "sleep", None)
    if sleep_seconds is None:
        logger.info("Waiting before check attempt %s", retry_state.attempt_number + 1)
        return
    logger.info("Waiting %.0f sec. before check attempt %s", sleep_seconds, retry_state.attempt_number + 1)


class AvailabilityChecker:
    """Advances the tracked booking date by one week once that week is on sale."""

    def __init__(self, settings: Settings, *, store: KeyValueStore, fetcher: Fetcher, notifier: Notifier) -> None:
        self.settings = settings
        self.store = store
        self.fetcher = fetcher
        self.notifier = notifier

    def get_last_date(self) -> str:
        return self.store.get(LAST_DATE_KEY)

    def get_next_date(self, date_iso: str) -> str:
        return get_next_date(date_iso, self.settings.timezone)

    def _check(self, date_iso: str) -> bool:
        url = build_check_url(self.settings.check_url_template, date_iso)
        logger.info("Checking %s", url)
        return self.fetcher.fetch(url) == OPEN_SENTINEL

    def is_open(self, date_iso: str) -> bool:
        decorated = retry(
            stop=stop_after_attempt(self.settings.check_retry_attempts),
            wait=wait_exponential(multiplier=2, min=2, max=30),
            before=_log_before_attempt,
            after=_log_after_attempt,
            before_sleep=_log_before_sleep,
            reraise=True,
        )(self._check)

        return decorated(date_iso)

    def set_last_date(self, date_iso: str) -> None:
        self.store.put(LAST_DATE_KEY, date_iso)
        logger.info("Last date set to %s", date_iso)

    def notify(self, date_iso: str) -> None:
        self.notifier.notify(subject=available_message(date_iso), message=self.settings.booking_url)
        logger.info("Notification sent for %s", date_iso)

    def run(self) -> str:
        last_date = self.get_last_date()
        next_date = self.get_next_date(last_date)
        logger.info("Last date=%s next date=%s", last_date, next_date)

        if not self.is_open(next_date):
            logger.info("%s is not open yet", next_date)
            return not_open_message(next_date)

        logger.info("%s is open", next_date)
        self.set_last_date(next_date)
        self.notify(next_date)
        return available_message(next_date)
