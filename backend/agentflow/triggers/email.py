# Copyright (c) 2025 adcl.io
# All Rights Reserved.
#
# This software is proprietary and confidential. Unauthorized copying,
# distribution, or use of this software is strictly prohibited.

"""
Email Trigger
Fires on received mail, filtered by sender pattern, subject, attachments and labels
"""

import re
from typing import Dict, Any, List, Optional, Union

from pydantic import Field, field_validator

from agentflow.models import CamelModel, TriggerPayload, TriggerType, ValidationResult
from agentflow.triggers.base import TriggerHandler, result_from_errors

# user@domain.tld or *@domain.tld
EMAIL_PATTERN = re.compile(r"^[\w.*+-]+@[\w.-]+\.[a-zA-Z]{2,}$")


def is_valid_email_pattern(pattern: str) -> bool:
    return bool(EMAIL_PATTERN.match(pattern or ""))


def matches_email_pattern(email: str, pattern: str) -> bool:
    """
    Match a sender address against a filter pattern (case-insensitive).

    "*@acme.com" matches any user at acme.com; anything else must match exactly.
    """
    email = (email or "").lower()
    pattern = (pattern or "").lower()
    if pattern.startswith("*@"):
        return email.endswith("@" + pattern[2:])
    return email == pattern


class EmailAttachment(CamelModel):
    filename: str = ""
    content_type: Optional[str] = None
    size: Optional[int] = None
    content: Optional[str] = None


class EmailMessage(CamelModel):
    sender: str = Field(default="", alias="from")
    to: List[str] = []
    cc: List[str] = []
    subject: str = ""
    body: str = ""
    body_html: Optional[str] = None
    attachments: List[EmailAttachment] = []
    received_at: Optional[str] = None
    message_id: Optional[str] = None
    thread_id: Optional[str] = None
    labels: List[str] = []

    @field_validator("to", "cc", mode="before")
    @classmethod
    def _listify(cls, value: Union[str, List[str], None]) -> List[str]:
        if value is None:
            return []
        if isinstance(value, str):
            return [value]
        return value


class EmailTriggerHandler(TriggerHandler):
    trigger_type = TriggerType.EMAIL_RECEIVED.value

    def validate_config(self, config: Dict[str, Any]) -> ValidationResult:
        errors = []
        filters = config.get("filters") or {}

        for pattern in filters.get("from") or []:
            if not is_valid_email_pattern(pattern):
                errors.append(f"Invalid email pattern: {pattern}")

        return result_from_errors(errors)

    async def parse_payload(self, raw_data: Any, config: Dict[str, Any]) -> TriggerPayload:
        email = self._parse_raw(EmailMessage, raw_data)

        data = {
            "from": email.sender,
            "to": email.to,
            "cc": email.cc,
            "subject": email.subject,
            "body": email.body,
            "body_html": email.body_html,
            # Attachment content stays in raw_data only
            "attachments": [
                {"filename": a.filename, "content_type": a.content_type, "size": a.size}
                for a in email.attachments
            ],
            "received_at": email.received_at,
            "message_id": email.message_id,
            "thread_id": email.thread_id,
            "labels": email.labels,
        }
        return self._build_payload(data, source="email", raw_data=raw_data)

    def matches_filters(self, payload: TriggerPayload, config: Dict[str, Any]) -> bool:
        data = payload.data
        filters = config.get("filters")

        if not filters:
            return True

        # Sender
        patterns = filters.get("from") or []
        if patterns and not any(matches_email_pattern(data.get("from"), p) for p in patterns):
            return False

        # Subject substring
        subject_filter = filters.get("subject")
        if subject_filter:
            if subject_filter.lower() not in (data.get("subject") or "").lower():
                return False

        # Attachment presence
        has_attachment = filters.get("hasAttachment")
        if has_attachment is not None:
            if bool(data.get("attachments")) != has_attachment:
                return False

        # Label intersection
        wanted_labels = filters.get("labels") or []
        if wanted_labels:
            email_labels = {label.lower() for label in data.get("labels") or []}
            if not any(label.lower() in email_labels for label in wanted_labels):
                return False

        return True
