from __future__ import annotations

from typing import Protocol

import httpx

from balikbot.dates import format_date
from balikbot.domain import RequestError

# The check endpoint only answers AJAX-style requests.
AJAX_HEADERS = {"X-Requested-With": "XMLHttpRequest"}


class Fetcher(Protocol):
    def fetch(self, url: str) -> str:
        """GET ``url`` and return the body of a 200 answer.

        Anything else raises RequestError.
        """
        ...


def build_check_url(template: str, date_iso: str) -> str:
    return template.format(date=format_date(date_iso))


class HttpxFetcher:
    def __init__(self, *, timeout_seconds: float = 20.0, transport: httpx.BaseTransport | None = None) -> None:
        self.timeout_seconds = timeout_seconds
        self._transport = transport

    def fetch(self, url: str) -> str:
        try:
            with httpx.Client(timeout=self.timeout_seconds, transport=self._transport) as client:
                r = client.get(url, headers=AJAX_HEADERS)
        except (httpx.HTTPError, httpx.InvalidURL) as e:
            raise RequestError(f"Request to booking site failed ({type(e).__name__}: {e})") from e

        if r.status_code != 200:
            raise RequestError(f"Booking site answered HTTP {r.status_code}")
        return r.text
