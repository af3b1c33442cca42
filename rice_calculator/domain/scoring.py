"""RICE score calculation and change detection."""

from typing import Optional

from rice_calculator.domain.schema import Card, CardCustomField, FieldMapping, Number


def _find_field(card: Card, custom_field_id: str) -> Optional[CardCustomField]:
    for field in card.custom_fields:
        if field.custom_field_id == custom_field_id:
            return field
    return None


def resolve_value(card: Card, mapping: FieldMapping, default: Number) -> Number:
    """Resolve the weight of the option currently selected on a card.

    Only the first selected option is honored, even when the Favro field
    allows multiple selections.

    Args:
        card: Card snapshot from the webhook.
        mapping: Field id and option weights to look up.
        default: Value returned when the field is absent, has no selection,
            or the selected option is not in the mapping.

    Returns:
        The configured weight or ``default``.
    """
    field = _find_field(card, mapping.custom_field_id)
    if field is None or not field.selected_options:
        return default

    weight = mapping.weight_for(field.selected_options[0])
    if weight is None:
        return default
    return weight


def compute_score(reach: Number, impact: Number, confidence: Number, effort: Number) -> float:
    """Reach x Impact x Confidence / Effort, unrounded."""
    if effort == 0:
        raise ValueError("Effort must be non-zero")
    return reach * impact * confidence / effort


def has_changed(card: Card, score_field_id: str, new_score: Number) -> bool:
    """Check whether writing ``new_score`` would change the card.

    Updating a card through the API makes Favro send an ``updated`` webhook
    for it. Skipping writes that would not change the stored total is what
    stops that from looping.

    Args:
        card: Card snapshot from the webhook.
        score_field_id: Id of the numeric RICE score field.
        new_score: Freshly computed score.

    Returns:
        True if the score field is unset or holds a different number.
    """
    field = _find_field(card, score_field_id)
    if field is None or field.total is None:
        return True
    return field.total != new_score
