"""Favro custom field ids for the RICE inputs and the score.

Replace every ``InsertRelevantId`` with the ids printed by
``scripts/get_favro_custom_fields.py``, or point ``FAVRO_FIELD_MAPPING_FILE``
at the JSON document that script writes. The service refuses to start while a
placeholder remains.
"""

from rice_calculator.domain.schema import FieldMapping, FieldOption, PLACEHOLDER_ID

RICE_SCORE_FIELD_ID = PLACEHOLDER_ID

REACH = FieldMapping(
    custom_field_id=PLACEHOLDER_ID,
    items=(
        FieldOption(id=PLACEHOLDER_ID, value=1),  # None
        FieldOption(id=PLACEHOLDER_ID, value=3),  # Minority
        FieldOption(id=PLACEHOLDER_ID, value=5),  # Some
        FieldOption(id=PLACEHOLDER_ID, value=8),  # Majority
        FieldOption(id=PLACEHOLDER_ID, value=10),  # All
    ),
)

IMPACT = FieldMapping(
    custom_field_id=PLACEHOLDER_ID,
    items=(
        FieldOption(id=PLACEHOLDER_ID, value=1),  # No impact
        FieldOption(id=PLACEHOLDER_ID, value=3),  # Minor inconvenience
        FieldOption(id=PLACEHOLDER_ID, value=5),  # Moderate impact
        FieldOption(id=PLACEHOLDER_ID, value=8),  # Significant impact
        FieldOption(id=PLACEHOLDER_ID, value=10),  # Critical impact
    ),
)

CONFIDENCE = FieldMapping(
    custom_field_id=PLACEHOLDER_ID,
    items=(
        FieldOption(id=PLACEHOLDER_ID, value=1),  # No evidence
        FieldOption(id=PLACEHOLDER_ID, value=3),  # Low
        FieldOption(id=PLACEHOLDER_ID, value=5),  # Medium
        FieldOption(id=PLACEHOLDER_ID, value=8),  # High
        FieldOption(id=PLACEHOLDER_ID, value=10),  # Absolute certainty
    ),
)

EFFORT = FieldMapping(
    custom_field_id=PLACEHOLDER_ID,
    items=(
        FieldOption(id=PLACEHOLDER_ID, value=1),  # Trivial
        FieldOption(id=PLACEHOLDER_ID, value=3),  # Minor
        FieldOption(id=PLACEHOLDER_ID, value=5),  # Moderate
        FieldOption(id=PLACEHOLDER_ID, value=8),  # Significant
        FieldOption(id=PLACEHOLDER_ID, value=10),  # Major
    ),
)
