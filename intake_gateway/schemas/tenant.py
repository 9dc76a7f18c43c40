"""Pydantic schema for per-tenant intake configuration."""

from __future__ import annotations

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator

from intake_gateway.utils.text import normalize_slug


class TenantConfig(BaseModel):
    """Configuration of one tenant as stored in ``tenant_contact_settings``.

    Instances are read-only snapshots; the admission pipeline never mutates
    them.
    """

    model_config = ConfigDict(frozen=True)

    tenant_slug: str = Field(..., min_length=1, max_length=64)
    allowed_origins: frozenset[str] = Field(default_factory=frozenset)
    notification_target: str = Field(
        "",
        validation_alias=AliasChoices("notification_target", "slack_webhook_url"),
        description="Webhook URL receiving admission notifications.",
    )
    rate_limit_per_hour: int | None = Field(None, ge=1)
    enabled: bool = True

    @field_validator("tenant_slug", mode="before")
    @classmethod
    def _normalize_slug(cls, value: object) -> str:
        return normalize_slug(value)

    @field_validator("allowed_origins", mode="before")
    @classmethod
    def _none_as_empty(cls, value: object) -> object:
        return value or frozenset()

    @field_validator("notification_target", mode="before")
    @classmethod
    def _none_as_blank(cls, value: object) -> object:
        return value or ""

    def allows_origin(self, origin: str) -> bool:
        """Exact string match against the allow-list; empty never matches."""
        return bool(origin) and origin in self.allowed_origins

    def hourly_limit(self, default: int) -> int:
        return self.rate_limit_per_hour or default
