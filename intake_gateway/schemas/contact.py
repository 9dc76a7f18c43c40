"""Pydantic schemas for contact submissions and audit records."""

from __future__ import annotations

import re
import uuid
from datetime import datetime, timezone
from enum import StrEnum
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator

from intake_gateway.utils.text import clean_text

MAX_NAME_LEN = 120
MAX_EMAIL_LEN = 180
MAX_PHONE_LEN = 50
MAX_COMPANY_NAME_LEN = 160
MAX_MESSAGE_LEN = 4000

EMAIL_PATTERN = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")


class ContactType(StrEnum):
    """Closed set of contact reasons offered by the form."""

    BUDGET_REQUEST = "budget_request"
    GENERAL_QUERY = "general_query"
    COMMERCIAL_PROPOSAL = "commercial_proposal"
    OTHER = "other"

    @classmethod
    def default(cls) -> "ContactType":
        return cls.GENERAL_QUERY

    @classmethod
    def coerce(cls, value: Any) -> "ContactType":
        """Map any client value onto the enum, falling back to the default arm.

        Examples:
            >>> ContactType.coerce("BUDGET_REQUEST")
            <ContactType.BUDGET_REQUEST: 'budget_request'>
            >>> ContactType.coerce("nonsense")
            <ContactType.GENERAL_QUERY: 'general_query'>
        """
        raw = clean_text(value).lower()
        try:
            return cls(raw)
        except ValueError:
            return cls.default()

    @property
    def label(self) -> str:
        return _CONTACT_TYPE_LABELS[self]


_CONTACT_TYPE_LABELS = {
    ContactType.BUDGET_REQUEST: "Budget request",
    ContactType.GENERAL_QUERY: "General query",
    ContactType.COMMERCIAL_PROPOSAL: "Commercial proposal",
    ContactType.OTHER: "Other",
}


class ContactSubmission(BaseModel):
    """Normalized contact form payload.

    Every text field is coerced to a trimmed string before bounds are
    checked, so ``None``, numbers and padded strings all behave like the
    browser form would send them. Unknown keys are ignored.
    """

    model_config = ConfigDict(extra="ignore")

    tenant: str = ""
    name: str = Field(..., min_length=1, max_length=MAX_NAME_LEN)
    email: str = Field(..., min_length=1, max_length=MAX_EMAIL_LEN)
    phone: str = Field("", max_length=MAX_PHONE_LEN)
    company_name: str = Field("", max_length=MAX_COMPANY_NAME_LEN)
    contact_type: ContactType = ContactType.GENERAL_QUERY
    message: str = Field(..., min_length=1, max_length=MAX_MESSAGE_LEN)

    @field_validator("tenant", "name", "phone", "company_name", "message", mode="before")
    @classmethod
    def _trim(cls, value: Any) -> str:
        return clean_text(value)

    @field_validator("email", mode="before")
    @classmethod
    def _normalize_email(cls, value: Any) -> str:
        return clean_text(value).lower()

    @field_validator("email")
    @classmethod
    def _check_email_shape(cls, value: str) -> str:
        if not EMAIL_PATTERN.match(value):
            raise ValueError("email must look like local@domain.tld")
        return value

    @field_validator("contact_type", mode="before")
    @classmethod
    def _coerce_contact_type(cls, value: Any) -> ContactType:
        return ContactType.coerce(value)


class SubmissionRecord(BaseModel):
    """Append-only audit row for an admitted submission."""

    model_config = ConfigDict(frozen=True)

    id: uuid.UUID = Field(default_factory=uuid.uuid4)
    tenant_slug: str
    name: str
    email: str
    phone: str | None = None
    company_name: str | None = None
    contact_type: ContactType = ContactType.GENERAL_QUERY
    message: str
    ip: str | None = None
    user_agent: str | None = None
    created_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))


class ContactAck(BaseModel):
    """Uniform acknowledgment returned for admitted and masked submissions."""

    ok: Literal[True] = True
