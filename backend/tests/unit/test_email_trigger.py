# Copyright (c) 2025 adcl.io
# All Rights Reserved.
#
# This software is proprietary and confidential. Unauthorized copying,
# distribution, or use of this software is strictly prohibited.

"""
Unit tests for the email trigger
"""

import pytest

from agentflow.triggers.email import EmailTriggerHandler, matches_email_pattern
from agentflow.triggers.exceptions import InvalidPayloadError


@pytest.fixture
def handler():
    return EmailTriggerHandler()


@pytest.fixture
def raw_email():
    return {
        "from": "Bob@Acme.com",
        "to": "support@example.com",
        "subject": "Invoice #42 overdue",
        "body": "Please pay",
        "attachments": [{"filename": "invoice.pdf", "contentType": "application/pdf", "size": 1024, "content": "JVBERi0"}],
        "labels": ["Billing"],
    }


class TestEmailPattern:
    def test_wildcard_domain_matches(self):
        assert matches_email_pattern("bob@acme.com", "*@acme.com") is True

    def test_wildcard_other_domain_does_not_match(self):
        assert matches_email_pattern("bob@other.com", "*@acme.com") is False

    def test_exact_match_is_case_insensitive(self):
        assert matches_email_pattern("Bob@ACME.com", "bob@acme.com") is True

    def test_wildcard_does_not_match_subdomain_suffix(self):
        assert matches_email_pattern("bob@evilacme.com", "*@acme.com") is False


class TestEmailConfig:
    def test_valid_patterns(self, handler):
        result = handler.validate_config({"filters": {"from": ["*@acme.com", "ceo@acme.com"]}})
        assert result.valid

    def test_invalid_pattern_reported(self, handler):
        result = handler.validate_config({"filters": {"from": ["not-an-email"]}})
        assert not result.valid
        assert "Invalid email pattern: not-an-email" in result.errors

    def test_empty_config_is_valid(self, handler):
        assert handler.validate_config({}).valid


class TestEmailPayload:
    @pytest.mark.asyncio
    async def test_normalizes_fields(self, handler, raw_email):
        payload = await handler.parse_payload(raw_email, {})

        assert payload.data["from"] == "Bob@Acme.com"
        assert payload.data["to"] == ["support@example.com"]
        assert payload.data["cc"] == []
        assert payload.data["attachments"] == [
            {"filename": "invoice.pdf", "content_type": "application/pdf", "size": 1024}
        ]
        assert payload.metadata.source == "email"
        assert payload.metadata.raw_data == raw_email

    @pytest.mark.asyncio
    async def test_rejects_non_object(self, handler):
        with pytest.raises(InvalidPayloadError):
            await handler.parse_payload(["not", "an", "email"], {})


class TestEmailFilters:
    @pytest.mark.asyncio
    async def test_no_filters_matches(self, handler, raw_email):
        payload = await handler.parse_payload(raw_email, {})
        assert handler.matches_filters(payload, {}) is True

    @pytest.mark.asyncio
    async def test_sender_filter(self, handler, raw_email):
        payload = await handler.parse_payload(raw_email, {})
        assert handler.matches_filters(payload, {"filters": {"from": ["*@acme.com"]}})
        assert not handler.matches_filters(payload, {"filters": {"from": ["*@other.com"]}})

    @pytest.mark.asyncio
    async def test_subject_filter_is_case_insensitive_substring(self, handler, raw_email):
        payload = await handler.parse_payload(raw_email, {})
        assert handler.matches_filters(payload, {"filters": {"subject": "INVOICE"}})
        assert not handler.matches_filters(payload, {"filters": {"subject": "refund"}})

    @pytest.mark.asyncio
    async def test_attachment_filter(self, handler, raw_email):
        payload = await handler.parse_payload(raw_email, {})
        assert handler.matches_filters(payload, {"filters": {"hasAttachment": True}})
        assert not handler.matches_filters(payload, {"filters": {"hasAttachment": False}})

    @pytest.mark.asyncio
    async def test_label_filter_needs_one_shared_label(self, handler, raw_email):
        payload = await handler.parse_payload(raw_email, {})
        assert handler.matches_filters(payload, {"filters": {"labels": ["billing", "urgent"]}})
        assert not handler.matches_filters(payload, {"filters": {"labels": ["urgent"]}})

    @pytest.mark.asyncio
    async def test_all_filters_must_pass(self, handler, raw_email):
        payload = await handler.parse_payload(raw_email, {})
        config = {"filters": {"from": ["*@acme.com"], "subject": "refund"}}
        assert handler.matches_filters(payload, config) is False
