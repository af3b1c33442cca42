"""Favro webhook ingress adapter."""

import base64
import hashlib
import hmac
from typing import Any, Mapping, Optional

from pydantic import ValidationError

from rice_calculator.config import CalculatorConfig
from rice_calculator.domain.schema import RELEVANT_ACTIONS, WebhookEvent
from rice_calculator.utils.logger import get_logger

logger = get_logger(__name__)

CALCULATOR_PATH = "/calculator"
SIGNATURE_HEADER = "X-Favro-Webhook"


class FavroIngressAdapter:
    """Favro ingress adapter for webhook verification and parsing."""

    def __init__(self, config: CalculatorConfig):
        """Initialize adapter with webhook secret and public URL.

        Args:
            config: Runtime configuration.
        """
        self.webhook_secret = config.webhook_secret.encode("utf-8")
        self.webhook_url = config.webhook_url

    def _digest(self, content: str) -> str:
        """Base64 HMAC-SHA1 of ``content`` keyed with the webhook secret."""
        mac = hmac.new(self.webhook_secret, content.encode("utf-8"), hashlib.sha1)
        return base64.b64encode(mac.digest()).decode("ascii")

    def sign(self, payload_id: str) -> str:
        """Compute the signature Favro sends for a payload.

        Args:
            payload_id: ``payloadId`` of the webhook body.

        Returns:
            Expected ``X-Favro-Webhook`` header value.
        """
        return self._digest(payload_id + self.webhook_url + CALCULATOR_PATH)

    def verify(self, payload_id: Optional[str], header_value: Optional[str]) -> bool:
        """Verify the signature header with a double HMAC.

        Both the expected signature and the received header are passed
        through HMAC again before comparing, so the compared values are never
        attacker-controlled bytes.
        See https://www.isecpartners.com/blog/2011/february/double-hmac-verification.asp

        Args:
            payload_id: ``payloadId`` of the webhook body.
            header_value: Value of the ``X-Favro-Webhook`` header.

        Returns:
            True if the signature matches. A missing header never matches.
        """
        payload_id = "" if payload_id is None else str(payload_id)
        expected = self._digest(self.sign(payload_id))
        received = self._digest(header_value or "")
        return hmac.compare_digest(expected, received)

    def is_relevant_action(self, action: Optional[str]) -> bool:
        return action in RELEVANT_ACTIONS

    def parse_event(self, payload: Mapping[str, Any]) -> Optional[WebhookEvent]:
        """Validate a verified webhook body.

        Args:
            payload: Decoded JSON body.

        Returns:
            WebhookEvent, or None if the body does not describe a card event.
        """
        try:
            return WebhookEvent.model_validate(payload)
        except ValidationError as e:
            logger.error(
                "webhook_invalid_payload",
                payload_id=payload.get("payloadId"),
                error_count=e.error_count(),
                errors=[".".join(str(p) for p in err["loc"]) for err in e.errors()],
            )
            return None
