"""Favro REST API egress adapter implementing IScorePublisher."""

from __future__ import annotations

import asyncio
from typing import Dict, List, Optional

import aiohttp

from rice_calculator.config import CalculatorConfig
from rice_calculator.domain.interfaces import IScorePublisher
from rice_calculator.domain.schema import CustomFieldDefinition
from rice_calculator.utils.logger import get_logger
from rice_calculator.utils.tracing import get_trace_id

logger = get_logger(__name__)

RETRYABLE_STATUSES = {429, 500, 502, 503, 504}


class FavroAPIError(ValueError):
    """Raised when a Favro read request does not succeed."""

    def __init__(self, status: int, message: str):
        self.status = status
        super().__init__(f"Favro API error: {status}. Response: {message[:200]}")


class FavroEgressAdapter(IScorePublisher):
    """Favro egress adapter writing RICE scores with the REST API."""

    def __init__(self, config: CalculatorConfig):
        """Initialize adapter from the runtime configuration.

        Args:
            config: Runtime configuration.
        """
        self.base_url = config.server_url.rstrip("/")
        self.score_field_id = config.score_field_id
        self.dry_run = config.dry_run
        self.max_attempts = config.publish_max_attempts
        self.retry_backoff = config.publish_retry_backoff_seconds
        self.fail_on_error_status = config.publish_fail_on_error_status

        self.auth = aiohttp.BasicAuth(config.user_email, config.user_token)
        self.headers = {
            "Content-Type": "application/json",
            "organizationId": config.organization_id,
        }
        self.timeout = aiohttp.ClientTimeout(total=config.publish_timeout_seconds)

    def _session(self) -> aiohttp.ClientSession:
        return aiohttp.ClientSession(
            headers=self.headers, auth=self.auth, timeout=self.timeout
        )

    @staticmethod
    def score_payload(score_field_id: str, score: float) -> Dict[str, List[Dict[str, object]]]:
        return {"customFields": [{"customFieldId": score_field_id, "total": score}]}

    async def publish(self, card_id: str, score: float) -> bool:
        """Write the RICE score onto a card.

        Transport errors and, unless disabled, non-2xx responses are logged
        and reported as False. They are never raised.

        Args:
            card_id: Favro card id.
            score: New RICE score.

        Returns:
            True if the write was accepted (or skipped in dry run).
        """
        payload = self.score_payload(self.score_field_id, score)
        if self.dry_run:
            logger.info("score_publish_dry_run", card_id=card_id, score=score)
            return True

        url = f"{self.base_url}/cards/{card_id}"
        for attempt in range(1, self.max_attempts + 1):
            retryable = True
            try:
                async with self._session() as session:
                    async with session.put(url, json=payload) as response:
                        if 200 <= response.status < 300 or not self.fail_on_error_status:
                            logger.info(
                                "score_published",
                                card_id=card_id,
                                score=score,
                                status=response.status,
                                attempt=attempt,
                                trace_id=get_trace_id(),
                            )
                            return True
                        error_text = await response.text()
                        retryable = response.status in RETRYABLE_STATUSES
                        logger.error(
                            "score_publish_failed",
                            card_id=card_id,
                            status=response.status,
                            response=error_text[:200],
                            attempt=attempt,
                            trace_id=get_trace_id(),
                        )
            except (aiohttp.ClientError, asyncio.TimeoutError) as e:
                logger.error(
                    "score_publish_failed",
                    card_id=card_id,
                    error=str(e) or type(e).__name__,
                    attempt=attempt,
                    trace_id=get_trace_id(),
                )

            if not retryable or attempt == self.max_attempts:
                break
            await asyncio.sleep(self.retry_backoff)

        return False

    async def get_custom_fields(self) -> List[CustomFieldDefinition]:
        """Fetch the first page of custom fields in the organization."""
        data = await self._get_json(f"{self.base_url}/customfields")
        return [CustomFieldDefinition.model_validate(entry) for entry in data.get("entities", [])]

    async def get_custom_field(self, custom_field_id: str) -> CustomFieldDefinition:
        """Fetch one custom field with its selectable items."""
        data = await self._get_json(f"{self.base_url}/customfields/{custom_field_id}")
        return CustomFieldDefinition.model_validate(data)

    async def _get_json(self, url: str, params: Optional[Dict[str, str]] = None) -> dict:
        async with self._session() as session:
            async with session.get(url, params=params) as response:
                if response.status != 200:
                    raise FavroAPIError(response.status, await response.text())
                return await response.json()
