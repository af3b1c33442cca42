"""Favro card, webhook and custom field models."""

from enum import Enum
from typing import Any, List, Optional, Tuple, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator

PLACEHOLDER_ID = "InsertRelevantId"

RELEVANT_ACTIONS = frozenset({"committed", "updated", "moved"})

Number = Union[int, float]


class FieldOption(BaseModel):
    """One selectable option of a custom field and its RICE weight."""

    model_config = ConfigDict(frozen=True)

    id: str = Field(description="Favro customFieldItemId")
    value: Number = Field(description="Numeric weight used in the RICE formula")


class FieldMapping(BaseModel):
    """Maps the options of one Favro single/multi-select field to weights."""

    model_config = ConfigDict(frozen=True)

    custom_field_id: str = Field(description="Favro customFieldId")
    items: Tuple[FieldOption, ...] = Field(default_factory=tuple)

    def weight_for(self, option_id: str) -> Optional[Number]:
        for item in self.items:
            if item.id == option_id:
                return item.value
        return None


class CardCustomField(BaseModel):
    """A custom field value as embedded in a Favro card."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    custom_field_id: str = Field(alias="customFieldId")
    # Option ids for select fields; text, link and timeline fields use other shapes.
    value: Any = Field(None, description="Raw field value")
    total: Optional[Number] = Field(None, description="Numeric field value")

    @property
    def selected_options(self) -> List[str]:
        if not isinstance(self.value, list):
            return []
        return [option for option in self.value if isinstance(option, str)]


class Card(BaseModel):
    """Snapshot of a Favro card (work item)."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    card_id: str = Field(alias="cardId")
    custom_fields: List[CardCustomField] = Field(default_factory=list, alias="customFields")

    @field_validator("custom_fields", mode="before")
    @classmethod
    def _drop_unidentified_fields(cls, value: Any) -> Any:
        # Entries without an id cannot match any mapping; keep the rest of the card.
        if not isinstance(value, list):
            return value
        return [
            entry
            for entry in value
            if not isinstance(entry, dict) or entry.get("customFieldId") or entry.get("custom_field_id")
        ]


class WebhookEvent(BaseModel):
    """Inbound Favro webhook notification."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    payload_id: str = Field(alias="payloadId")
    action: str
    card: Card


class ScoreOutcome(str, Enum):
    """Terminal state of one recalculation."""

    PUBLISHED = "published"
    SKIPPED = "skipped"
    ABORTED = "aborted"
    FAILED = "failed"


class CustomFieldItem(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    custom_field_item_id: str = Field(alias="customFieldItemId")
    name: str = ""


class CustomFieldDefinition(BaseModel):
    """A custom field as returned by ``GET customfields``."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    custom_field_id: str = Field(alias="customFieldId")
    name: str = ""
    type: str = ""
    custom_field_items: List[CustomFieldItem] = Field(
        default_factory=list, alias="customFieldItems"
    )
