"""Configuration management using Pydantic Settings."""

import json
from pathlib import Path
from typing import List, Optional, Tuple
from urllib.parse import urlsplit

from pydantic import BaseModel, ConfigDict, Field, ValidationError
from pydantic_settings import BaseSettings, SettingsConfigDict

from rice_calculator.domain.schema import FieldMapping, FieldOption, PLACEHOLDER_ID
from rice_calculator import field_mappings


class ConfigurationError(ValueError):
    """Raised when a required setting is absent or still a placeholder."""

    def __init__(self, problems: List[str]):
        self.problems = problems
        super().__init__("; ".join(problems))


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_prefix="FAVRO_",
        env_file=(".env", ".env.local"),
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Favro API
    url: str = ""
    calculator_user: str = ""
    calculator_token: str = ""
    org_id: str = ""

    # Webhook
    webhook_url: str = "http://127.0.0.1:5000"
    webhook_secret_key: str = ""

    # JSON document produced by scripts/get_favro_custom_fields.py;
    # replaces the mappings in field_mappings.py when set.
    field_mapping_file: str = ""

    # Publish policy. Defaults match a single fire-and-forget attempt.
    publish_max_attempts: int = 1
    publish_retry_backoff_seconds: float = 0.5
    publish_timeout_seconds: Optional[float] = None
    publish_fail_on_error_status: bool = True
    dry_run: bool = False
    serialize_per_card: bool = True

    # Observability
    log_level: str = "INFO"
    log_json: bool = False
    enable_tracing: bool = False


settings = Settings()


class CalculatorConfig(BaseModel):
    """Immutable runtime configuration shared by every component."""

    model_config = ConfigDict(frozen=True)

    server_url: str
    user_email: str
    user_token: str
    organization_id: str
    webhook_url: str
    webhook_secret: str

    reach: FieldMapping
    impact: FieldMapping
    confidence: FieldMapping
    effort: FieldMapping
    score_field_id: str

    publish_max_attempts: int = Field(default=1, ge=1)
    publish_retry_backoff_seconds: float = Field(default=0.5, ge=0)
    publish_timeout_seconds: Optional[float] = Field(default=None, gt=0)
    publish_fail_on_error_status: bool = True
    dry_run: bool = False
    serialize_per_card: bool = True

    @property
    def port(self) -> int:
        return get_port(self.webhook_url)

    def input_mappings(self) -> List[Tuple[str, FieldMapping]]:
        return [
            ("reach", self.reach),
            ("impact", self.impact),
            ("confidence", self.confidence),
            ("effort", self.effort),
        ]


def get_port(webhook_url: str) -> int:
    """Derive the listening port from the public webhook URL.

    Args:
        webhook_url: Externally reachable base URL of this service.

    Returns:
        The explicit port, or the protocol default (443 for https, 80 otherwise).

    Raises:
        ValueError: If the port is not an integer in 1-65535.
    """
    parts = urlsplit(webhook_url)
    port = parts.port
    if port is None:
        return 443 if parts.scheme == "https" else 80
    if port == 0:
        raise ValueError("Port 0 cannot be bound")
    return port


def _is_placeholder(value: Optional[str]) -> bool:
    return not value or value == PLACEHOLDER_ID


def check_field_mapping(name: str, mapping: FieldMapping) -> List[str]:
    """Return the problems found in one field mapping."""
    problems = []
    if _is_placeholder(mapping.custom_field_id):
        problems.append(f'"{name}" custom field id has not been properly replaced')
    if not mapping.items:
        problems.append(f"{name} should have at least 1 id associated with it")
    for item in mapping.items:
        if _is_placeholder(item.id):
            problems.append(f'One of "{name}"\'s ids has not been properly replaced')
            break
    for item in mapping.items:
        if item.value <= 0:
            problems.append(f'"{name}" option {item.id} must have a positive value')
            break
    return problems


def load_field_mapping_file(path: str) -> dict:
    """Load mappings from a JSON file.

    The document has ``scoreFieldId`` plus ``reach``, ``impact``,
    ``confidence`` and ``effort`` entries of the form
    ``{"customField": id, "items": [{"id": ..., "value": ...}]}``.

    Raises:
        ConfigurationError: If the file cannot be read or parsed.
    """
    try:
        document = json.loads(Path(path).read_text(encoding="utf-8"))
    except (OSError, json.JSONDecodeError) as exc:
        raise ConfigurationError([f"Cannot read field mapping file {path}: {exc}"]) from exc

    try:
        mappings = {
            name: FieldMapping(
                custom_field_id=document[name]["customField"],
                items=tuple(FieldOption(**item) for item in document[name]["items"]),
            )
            for name in ("reach", "impact", "confidence", "effort")
        }
        mappings["score_field_id"] = document["scoreFieldId"]
    except (KeyError, TypeError, ValidationError) as exc:
        raise ConfigurationError([f"Invalid field mapping file {path}: {exc}"]) from exc
    return mappings


def build_calculator_config(source: Optional[Settings] = None) -> CalculatorConfig:
    """Validate settings and mappings and build the runtime configuration.

    Args:
        source: Settings to validate. Defaults to the module-level settings.

    Returns:
        Frozen CalculatorConfig.

    Raises:
        ConfigurationError: Listing every missing or placeholder value.
    """
    source = source or settings
    problems = []

    required = [
        (source.url, "The server address has not been set."),
        (source.calculator_user, "The user email has not been set."),
        (source.calculator_token, "The user password has not been set."),
        (source.org_id, "The organization ID has not been set."),
        (source.webhook_url, "The webhook url has not been set."),
        (source.webhook_secret_key, "The webhook secret has not been set."),
    ]
    problems.extend(message for value, message in required if not value)

    if source.webhook_url and urlsplit(source.webhook_url).scheme not in ("http", "https"):
        problems.append(f"The webhook url must be http or https: {source.webhook_url}")
    if source.webhook_url:
        try:
            get_port(source.webhook_url)
        except ValueError as exc:
            problems.append(f"The webhook url has an invalid port: {source.webhook_url} ({exc})")

    if source.field_mapping_file:
        mappings = load_field_mapping_file(source.field_mapping_file)
    else:
        mappings = {
            "reach": field_mappings.REACH,
            "impact": field_mappings.IMPACT,
            "confidence": field_mappings.CONFIDENCE,
            "effort": field_mappings.EFFORT,
            "score_field_id": field_mappings.RICE_SCORE_FIELD_ID,
        }

    if _is_placeholder(mappings["score_field_id"]):
        problems.append('One of "RICE Score"\'s ids has not been properly replaced')
    for name in ("reach", "impact", "confidence", "effort"):
        problems.extend(check_field_mapping(name.capitalize(), mappings[name]))

    if problems:
        raise ConfigurationError(problems)

    try:
        return CalculatorConfig(
            server_url=source.url,
            user_email=source.calculator_user,
            user_token=source.calculator_token,
            organization_id=source.org_id,
            webhook_url=source.webhook_url,
            webhook_secret=source.webhook_secret_key,
            publish_max_attempts=source.publish_max_attempts,
            publish_retry_backoff_seconds=source.publish_retry_backoff_seconds,
            publish_timeout_seconds=source.publish_timeout_seconds,
            publish_fail_on_error_status=source.publish_fail_on_error_status,
            dry_run=source.dry_run,
            serialize_per_card=source.serialize_per_card,
            **mappings,
        )
    except ValidationError as exc:
        raise ConfigurationError(
            [f"{'.'.join(str(p) for p in err['loc'])}: {err['msg']}" for err in exc.errors()]
        ) from exc
