"""Command handler for RICE score recalculation."""

from typing import Optional

from rice_calculator.config import CalculatorConfig
from rice_calculator.domain.interfaces import IScorePublisher
from rice_calculator.domain.schema import Card, ScoreOutcome
from rice_calculator.domain.scoring import compute_score, has_changed, resolve_value
from rice_calculator.infrastructure.card_locks import CardLockRegistry
from rice_calculator.utils.logger import get_logger
from rice_calculator.utils.tracing import get_trace_id, get_tracer, recalculation_span, record_outcome

logger = get_logger(__name__)
tracer = get_tracer(__name__)

UNSET = 0


class RiceScoreHandler:
    """Recalculate a card's RICE score and publish it when it changed."""

    def __init__(
        self,
        config: CalculatorConfig,
        publisher: IScorePublisher,
        card_locks: Optional[CardLockRegistry] = None,
    ) -> None:
        self._config = config
        self._publisher = publisher
        self._card_locks = None
        if config.serialize_per_card:
            self._card_locks = card_locks if card_locks is not None else CardLockRegistry()

    async def handle(self, card: Card) -> ScoreOutcome:
        """Resolve inputs, compute the score, and publish if it changed.

        Args:
            card: Card snapshot from a verified webhook.

        Returns:
            Terminal outcome of the recalculation.
        """
        with recalculation_span(card.card_id, tracer) as span:
            if self._card_locks is None:
                outcome = await self._recalculate(card)
            else:
                async with self._card_locks.hold(card.card_id):
                    outcome = await self._recalculate(card)
            record_outcome(span, outcome.value)
            return outcome

    async def _recalculate(self, card: Card) -> ScoreOutcome:
        inputs = {}
        for name, mapping in self._config.input_mappings():
            value = resolve_value(card, mapping, UNSET)
            if value == UNSET:
                logger.warning(
                    "rice_input_missing",
                    card_id=card.card_id,
                    field=name,
                    trace_id=get_trace_id(),
                )
                return ScoreOutcome.ABORTED
            inputs[name] = value

        score = compute_score(**inputs)

        if not has_changed(card, self._config.score_field_id, score):
            logger.debug("rice_score_unchanged", card_id=card.card_id, score=score)
            return ScoreOutcome.SKIPPED

        if not await self._publisher.publish(card.card_id, score):
            return ScoreOutcome.FAILED
        return ScoreOutcome.PUBLISHED
