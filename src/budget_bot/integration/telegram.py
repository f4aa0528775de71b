import asyncio

import httpx

from budget_bot.logger import get_logger

logger = get_logger(__name__)

DEFAULT_PARSE_MODE = "HTML"


class TelegramClient:
    def __init__(
        self,
        token: str | None,
        api_url: str = "https://api.telegram.org",
        client: httpx.AsyncClient | None = None,
        timeout: float = 10.0,
    ):
        self.token = token
        self.api_url = api_url.rstrip("/")
        self.timeout = timeout
        self._client = client
        self._client_lock = asyncio.Lock()

    async def aclose(self) -> None:
        if self._client and not self._client.is_closed:
            await self._client.aclose()

    async def _get_client(self) -> httpx.AsyncClient:
        client = self._client
        if client is not None and not client.is_closed:
            return client

        async with self._client_lock:
            client = self._client
            if client is None or client.is_closed:
                client = httpx.AsyncClient()
                self._client = client
            return client

    def _method_url(self, method: str) -> str:
        return f"{self.api_url}/bot{self.token}/{method}"

    async def send_message(
        self,
        chat_id: int,
        text: str,
        parse_mode: str = DEFAULT_PARSE_MODE,
    ) -> bool:
        if not self.token:
            logger.error("[TELEGRAM] BOT_TOKEN is not configured; cannot reply to chat %s.", chat_id)
            return False

        client = await self._get_client()
        try:
            response = await client.post(
                self._method_url("sendMessage"),
                json={
                    "chat_id": chat_id,
                    "text": text,
                    "parse_mode": parse_mode,
                },
                timeout=self.timeout,
            )
            response.raise_for_status()
            return True
        except Exception as exc:
            # The exception text can carry the request URL, which embeds the token.
            logger.error(
                "[TELEGRAM] Error sending message to chat %s: %s",
                chat_id,
                str(exc).replace(str(self.token), "[REDACTED]"),
            )
            return False
