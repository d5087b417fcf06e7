"""Telegram notification backend."""
from __future__ import annotations

import logging
from typing import Iterable, Optional

import httpx

from reminders.config import TelegramConfig
from reminders.errors import NotifierError
from reminders.notifiers.base import Notification

logger = logging.getLogger(__name__)

SEND_MESSAGE_ENDPOINT = "/bot{token}/sendMessage"


class TelegramNotifier:
    """Send reminder notifications through a Telegram bot.

    Each notification is posted to every configured chat with the Bot API
    ``sendMessage`` method. With ``dry_run`` enabled nothing is sent and the
    message is only logged.
    """

    def __init__(
        self,
        config: TelegramConfig,
        transport: Optional[httpx.BaseTransport] = None,
    ) -> None:
        self._config = config
        self._client = httpx.Client(
            base_url=config.api_base_url.rstrip("/"),
            timeout=config.request_timeout,
            transport=transport,
        )

    def send(self, notifications: Iterable[Notification]) -> None:
        """Deliver notifications to the configured chats."""

        endpoint = SEND_MESSAGE_ENDPOINT.format(token=self._config.bot_token)
        for notification in notifications:
            for chat_id in self._config.chat_ids:
                if self._config.dry_run:
                    logger.info(f"[dry-run] telegram chat {chat_id}: {notification.message}")
                    continue
                self._post(endpoint, {"chat_id": chat_id, "text": notification.message})

    def close(self) -> None:
        """Close the underlying :class:`httpx.Client`."""

        self._client.close()

    def __enter__(self) -> "TelegramNotifier":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:  # type: ignore[override]
        self.close()

    # ------------------------------------------------------------------
    # Internal helpers
    def _post(self, endpoint: str, payload: dict) -> None:
        # httpx error messages carry the request URL, which embeds the bot token.
        try:
            response = self._client.post(endpoint, json=payload)
            response.raise_for_status()
        except httpx.HTTPStatusError as exc:
            raise NotifierError(
                f"telegram delivery failed with HTTP {exc.response.status_code}"
            ) from None
        except httpx.HTTPError as exc:
            raise NotifierError(f"telegram delivery failed: {type(exc).__name__}") from None
        try:
            body = response.json()
        except ValueError:
            raise NotifierError("telegram returned a non-JSON response") from None
        if not isinstance(body, dict) or not body.get("ok"):
            description = body.get("description") if isinstance(body, dict) else None
            raise NotifierError(description or "telegram rejected the message")
