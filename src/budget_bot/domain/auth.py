import hmac
from collections.abc import Iterable

from budget_bot.logger import get_logger

logger = get_logger(__name__)


def parse_authorized_users(raw_users: str | None) -> frozenset[int]:
    if not raw_users:
        return frozenset()
    users: set[int] = set()
    for part in raw_users.split(","):
        value = part.strip()
        if not value:
            continue
        try:
            users.add(int(value))
        except ValueError:
            logger.warning("[AUTH] Ignoring invalid user ID '%s' in AUTHORIZED_USERS.", value)
    return frozenset(users)


class AuthorizationGate:
    def __init__(self, webhook_secret: str | None, authorized_users: Iterable[int]) -> None:
        self.webhook_secret = webhook_secret or None
        self.authorized_users = frozenset(authorized_users)

    def verify_webhook(self, header_value: str | None) -> bool:
        """Check the Telegram secret token header. Passes when no secret is configured."""
        if not self.webhook_secret:
            return True
        if header_value is None:
            return False
        return hmac.compare_digest(header_value.encode("utf-8"), self.webhook_secret.encode("utf-8"))

    def is_authorized(self, sender_id: int) -> bool:
        return sender_id in self.authorized_users
