from __future__ import annotations

import httpx

TELEGRAM_API_URL = "https://api.telegram.org"


def send_telegram_message(
    *,
    bot_token: str,
    chat_id: str,
    text: str,
    timeout_seconds: float = 20.0,
    transport: httpx.BaseTransport | None = None,
) -> None:
    """Post ``text`` to one chat through the Bot API.

    Raises httpx.HTTPError on transport or status failures and RuntimeError
    when the API rejects the message or answers with something other than JSON.
    """
    with httpx.Client(timeout=timeout_seconds, transport=transport) as client:
        response = client.post(
            f"{TELEGRAM_API_URL}/bot{bot_token}/sendMessage",
            json={"chat_id": chat_id, "text": text, "disable_web_page_preview": True},
        )
        response.raise_for_status()

    try:
        data = response.json()
    except ValueError as e:
        raise RuntimeError(f"Telegram API answered with a non-JSON body: {response.text[:200]!r}") from e

    if not isinstance(data, dict) or not data.get("ok", False):
        raise RuntimeError(f"Telegram API error: {data}")
