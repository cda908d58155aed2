import logging

import requests

from supportdesk.core.config import settings

logger = logging.getLogger(__name__)

NOT_CONFIGURED = "Draft replies are not configured."
UNAUTHORIZED = "Bot authorization failed (401)."
BAD_REQUEST = "Bad request to the bot (400)."
EMPTY_REPLY = "The bot returned no text reply."
CONNECTION_FAILED = "Could not connect to the Pro-Talk server."


class DraftReplyBot:
    """Pro-Talk chat bot used to prefill an agent's reply box.

    ``draft_reply`` always returns text: the bot's answer, or a readable
    error message when the upstream call did not work out.
    """

    def __init__(self, api_url: str, bot_id: int, token: str, timeout: float = 15.0):
        self.api_url = api_url.rstrip("/")
        self.bot_id = bot_id
        self.token = token
        self.timeout = timeout

    @classmethod
    def from_settings(cls) -> "DraftReplyBot":
        return cls(
            api_url=settings.PROTALK_API_URL,
            bot_id=settings.PROTALK_BOT_ID,
            token=settings.PROTALK_BOT_TOKEN,
            timeout=settings.BOT_TIMEOUT_SECONDS,
        )

    def draft_reply(self, ticket_id, message: str) -> str:
        if not self.token:
            return NOT_CONFIGURED
        payload = {"bot_id": self.bot_id, "chat_id": str(ticket_id), "message": message}
        try:
            r = requests.post(f"{self.api_url}/ask/{self.token}", json=payload, timeout=self.timeout)
        except requests.RequestException as exc:
            logger.warning("Pro-Talk connection failed for ticket %s: %s", ticket_id, exc)
            return CONNECTION_FAILED

        if not r.ok:
            logger.warning("Pro-Talk returned HTTP %s for ticket %s", r.status_code, ticket_id)
            if r.status_code == 401:
                return UNAUTHORIZED
            if r.status_code == 400:
                return BAD_REQUEST
            return f"Pro-Talk API error: {r.status_code}"

        try:
            data = r.json()
        except ValueError:
            return EMPTY_REPLY
        reply = data.get("done") if isinstance(data, dict) else None
        return reply or EMPTY_REPLY
