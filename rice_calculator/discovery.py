"""Helpers for discovering the Favro ids needed in field_mappings.py."""

from typing import Dict, List, Optional

from rice_calculator.domain.schema import CustomFieldDefinition, PLACEHOLDER_ID

# Weight of the n-th option of a RICE field, in Favro display order.
OPTION_WEIGHTS = (1, 3, 5, 8, 10)

RICE_INPUTS = ("reach", "impact", "confidence", "effort")


def is_placeholder_id(custom_field_id: str) -> bool:
    return not custom_field_id or "CustomFieldId" in custom_field_id or custom_field_id == PLACEHOLDER_ID


def weight_for_index(index: int) -> int:
    """Return the RICE weight of the option at ``index``.

    Raises:
        ValueError: If the field has more options than there are weights.
    """
    if not 0 <= index < len(OPTION_WEIGHTS):
        raise ValueError(
            f"Option #{index + 1} has no weight; RICE fields support at most "
            f"{len(OPTION_WEIGHTS)} options"
        )
    return OPTION_WEIGHTS[index]


def format_field_mapping(field: CustomFieldDefinition) -> Dict[str, object]:
    """Format a custom field's items as a mapping entry."""
    return {
        "customField": field.custom_field_id,
        "items": [
            {"id": item.custom_field_item_id, "value": weight_for_index(index)}
            for index, item in enumerate(field.custom_field_items)
        ],
    }


def build_mapping_document(
    fields: List[CustomFieldDefinition],
    score_field_id: Optional[str] = None,
) -> Dict[str, object]:
    """Build a FAVRO_FIELD_MAPPING_FILE document.

    Args:
        fields: Reach, Impact, Confidence and Effort fields, in that order.
        score_field_id: Id of the numeric RICE Score field.

    Returns:
        JSON-serializable mapping document.
    """
    if len(fields) != len(RICE_INPUTS):
        raise ValueError(f"Expected {len(RICE_INPUTS)} fields, got {len(fields)}")

    document: Dict[str, object] = {"scoreFieldId": score_field_id or PLACEHOLDER_ID}
    for name, field in zip(RICE_INPUTS, fields):
        document[name] = format_field_mapping(field)
    return document
