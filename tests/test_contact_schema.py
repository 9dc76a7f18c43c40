"""Tests for contact payload normalization and bounds."""

from __future__ import annotations

import pytest
from pydantic import ValidationError

from intake_gateway.schemas.contact import (
    MAX_COMPANY_NAME_LEN,
    MAX_EMAIL_LEN,
    MAX_MESSAGE_LEN,
    MAX_NAME_LEN,
    MAX_PHONE_LEN,
    ContactSubmission,
    ContactType,
)


class TestContactTypeCoercion:
    @pytest.mark.parametrize(
        ("raw", "expected"),
        [
            ("BUDGET_REQUEST", ContactType.BUDGET_REQUEST),
            ("  commercial_proposal ", ContactType.COMMERCIAL_PROPOSAL),
            ("other", ContactType.OTHER),
            ("general_query", ContactType.GENERAL_QUERY),
            ("nonsense", ContactType.GENERAL_QUERY),
            ("", ContactType.GENERAL_QUERY),
            (None, ContactType.GENERAL_QUERY),
            (42, ContactType.GENERAL_QUERY),
        ],
    )
    def test_coerce(self, raw, expected) -> None:
        assert ContactType.coerce(raw) is expected

    def test_labels_cover_every_member(self) -> None:
        assert ContactType.BUDGET_REQUEST.label == "Budget request"
        assert ContactType.COMMERCIAL_PROPOSAL.label == "Commercial proposal"
        assert all(member.label for member in ContactType)


class TestContactSubmission:
    def test_trims_and_normalizes(self, valid_payload: dict) -> None:
        valid_payload.update(
            name="  Ana  ",
            email="  ANA@Example.COM ",
            contact_type="BUDGET_REQUEST",
            message="\n hola \n",
        )

        submission = ContactSubmission.model_validate(valid_payload)

        assert submission.name == "Ana"
        assert submission.email == "ana@example.com"
        assert submission.contact_type is ContactType.BUDGET_REQUEST
        assert submission.message == "hola"

    def test_optional_fields_default_to_empty(self) -> None:
        submission = ContactSubmission.model_validate(
            {"name": "Ana", "email": "ana@example.com", "message": "Hola"}
        )

        assert submission.phone == ""
        assert submission.company_name == ""
        assert submission.tenant == ""
        assert submission.contact_type is ContactType.GENERAL_QUERY

    def test_non_string_values_are_stringified(self, valid_payload: dict) -> None:
        valid_payload["phone"] = 1155550000
        valid_payload["company_name"] = None

        submission = ContactSubmission.model_validate(valid_payload)

        assert submission.phone == "1155550000"
        assert submission.company_name == ""

    @pytest.mark.parametrize(
        ("field", "value"),
        [
            ("name", ""),
            ("name", "   "),
            ("name", "x" * (MAX_NAME_LEN + 1)),
            ("email", ""),
            ("email", "not-an-email"),
            ("email", "ana@example"),
            ("email", "a b@example.com"),
            ("email", "a" * MAX_EMAIL_LEN + "@example.com"),
            ("phone", "1" * (MAX_PHONE_LEN + 1)),
            ("company_name", "c" * (MAX_COMPANY_NAME_LEN + 1)),
            ("message", ""),
            ("message", "m" * (MAX_MESSAGE_LEN + 1)),
        ],
    )
    def test_rejects_out_of_bounds_fields(self, valid_payload: dict, field: str, value: str) -> None:
        valid_payload[field] = value

        with pytest.raises(ValidationError) as exc_info:
            ContactSubmission.model_validate(valid_payload)

        assert exc_info.value.errors()[0]["loc"][0] == field

    def test_bounds_apply_after_trimming(self, valid_payload: dict) -> None:
        valid_payload["name"] = "  " + "x" * MAX_NAME_LEN + "  "

        submission = ContactSubmission.model_validate(valid_payload)

        assert len(submission.name) == MAX_NAME_LEN

    @pytest.mark.parametrize("field", ["name", "email", "message"])
    def test_required_fields(self, valid_payload: dict, field: str) -> None:
        del valid_payload[field]

        with pytest.raises(ValidationError) as exc_info:
            ContactSubmission.model_validate(valid_payload)

        assert exc_info.value.errors()[0]["loc"][0] == field
