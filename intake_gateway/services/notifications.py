"""Builds the operator-facing text for an admitted submission."""

from __future__ import annotations

from intake_gateway.schemas.contact import ContactSubmission


def build_notification_text(
    tenant_slug: str,
    submission: ContactSubmission,
    *,
    origin: str,
    source_address: str,
) -> str:
    """Render a Slack mrkdwn message; optional fields are omitted when empty."""
    lines = [
        f"*New contact ({tenant_slug})*",
        f"• *Type:* {submission.contact_type.label}",
    ]
    if submission.company_name:
        lines.append(f"• *Company:* {submission.company_name}")
    lines.append(f"• *Name:* {submission.name}")
    lines.append(f"• *Email:* {submission.email}")
    if submission.phone:
        lines.append(f"• *Phone:* {submission.phone}")
    lines.append(f"• *Message:*\n{submission.message}")
    lines.append(f"• *Origin:* {origin}")
    lines.append(f"• *IP:* {source_address}")
    return "\n".join(lines)
