"""Port interfaces using Python Protocol for structural subtyping."""

from typing import Any, Mapping, Optional, Protocol

from rice_calculator.domain.schema import WebhookEvent


class IScorePublisher(Protocol):
    """Port for writing a RICE score back to the remote service."""

    async def publish(self, card_id: str, score: float) -> bool:
        """Write the score onto the card. Returns True if successful."""
        ...


class IWebhookIngress(Protocol):
    """Port for verifying and parsing inbound webhooks."""

    def verify(self, payload_id: Optional[str], header_value: Optional[str]) -> bool:
        """Check the webhook signature header."""
        ...

    def is_relevant_action(self, action: Optional[str]) -> bool:
        """Return True for actions that should trigger a recalculation."""
        ...

    def parse_event(self, payload: Mapping[str, Any]) -> Optional[WebhookEvent]:
        """Validate the body. Returns None if it is not a usable event."""
        ...
