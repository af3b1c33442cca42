"""Shared pytest fixtures and configuration."""

import pytest
import sys
from pathlib import Path
from typing import Callable, Optional
from unittest.mock import AsyncMock, MagicMock

# Add project root to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

from rice_calculator.config import CalculatorConfig
from rice_calculator.domain.schema import Card, FieldMapping, FieldOption

WEIGHTS = (1, 3, 5, 8, 10)
SCORE_FIELD_ID = "cf-rice-score"
WEBHOOK_URL = "https://rice.example.com:8443"
WEBHOOK_SECRET = "s3cret-key"


def make_mapping(name: str) -> FieldMapping:
    """Mapping whose option ids are ``<name>-<weight>``."""
    return FieldMapping(
        custom_field_id=f"cf-{name}",
        items=tuple(FieldOption(id=f"{name}-{weight}", value=weight) for weight in WEIGHTS),
    )


@pytest.fixture
def calculator_config() -> CalculatorConfig:
    """Create a fully populated configuration."""
    return CalculatorConfig(
        server_url="https://favro.example.com/api/v1/",
        user_email="calculator@example.com",
        user_token="token-123",
        organization_id="org-42",
        webhook_url=WEBHOOK_URL,
        webhook_secret=WEBHOOK_SECRET,
        reach=make_mapping("reach"),
        impact=make_mapping("impact"),
        confidence=make_mapping("confidence"),
        effort=make_mapping("effort"),
        score_field_id=SCORE_FIELD_ID,
        publish_retry_backoff_seconds=0,
    )


@pytest.fixture
def card_payload() -> Callable[..., dict]:
    """Build a Favro card dict with the given RICE weights selected.

    Pass ``None`` to leave a field unset, and ``score`` to store a total.
    """

    def build(
        reach: Optional[int] = 5,
        impact: Optional[int] = 8,
        confidence: Optional[int] = 10,
        effort: Optional[int] = 3,
        score: Optional[float] = None,
        card_id: str = "card-1",
    ) -> dict:
        custom_fields = [{"customFieldId": "cf-unrelated", "value": ["other"]}]
        for name, weight in (
            ("reach", reach),
            ("impact", impact),
            ("confidence", confidence),
            ("effort", effort),
        ):
            if weight is not None:
                custom_fields.append({"customFieldId": f"cf-{name}", "value": [f"{name}-{weight}"]})
        if score is not None:
            custom_fields.append({"customFieldId": SCORE_FIELD_ID, "total": score})
        return {"cardId": card_id, "customFields": custom_fields}

    return build


@pytest.fixture
def make_card(card_payload) -> Callable[..., Card]:
    """Same as ``card_payload`` but validated into a Card."""

    def build(**kwargs) -> Card:
        return Card.model_validate(card_payload(**kwargs))

    return build


@pytest.fixture
def mock_publisher() -> MagicMock:
    """Create a mock score publisher."""
    publisher = MagicMock()
    publisher.publish = AsyncMock(return_value=True)
    return publisher
