import json
import logging
from typing import Optional

import requests

from .constants import DISCORD_TIMEOUT_SECONDS
from .errors import DeliveryFailed, DeliveryTimeout, DeliveryUnreachable
from .models import DiscordMessage

logger = logging.getLogger(__name__)


class DiscordForwarder:
    """Entrega uma DiscordMessage ao webhook configurado.

    Uma única tentativa por mensagem; quem chamar decide se quer repetir.
    """

    def __init__(self, webhook_url: str, timeout: float = DISCORD_TIMEOUT_SECONDS,
                 session: Optional[requests.Session] = None):
        if not webhook_url:
            raise ValueError("Discord webhook URL is required")
        self.webhook_url = webhook_url
        self.timeout = timeout
        self.session = session or requests.Session()

    def forward(self, message: DiscordMessage) -> requests.Response:
        payload = message.to_dict()
        if logger.isEnabledFor(logging.DEBUG):
            logger.debug("Discord payload: %s", json.dumps(payload, ensure_ascii=False)[:500])

        try:
            resp = self.session.post(self.webhook_url, json=payload, timeout=self.timeout)
        except requests.Timeout:
            logger.error("Discord webhook timed out after %ss", self.timeout)
            raise DeliveryTimeout(self.timeout) from None
        except requests.RequestException as exc:
            logger.error("Could not send to Discord: %s", exc)
            raise DeliveryUnreachable(str(exc)) from exc

        if not 200 <= resp.status_code < 300:
            logger.error("Discord API returned error: %s %s", resp.status_code, resp.text[:200])
            raise DeliveryFailed(resp.status_code, resp.text)

        logger.debug("Discord response: %s", resp.status_code)
        return resp
