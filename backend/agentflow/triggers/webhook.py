# Copyright (c) 2025 adcl.io
# All Rights Reserved.
#
# This software is proprietary and confidential. Unauthorized copying,
# distribution, or use of this software is strictly prohibited.

"""
Webhook Trigger
Receives HTTP webhooks with IP allowlisting, required headers and HMAC signatures
"""

import hashlib
import hmac
import ipaddress
import re
import secrets
from typing import Dict, Any, Optional, Union

from agentflow.models import AgentTrigger, CamelModel, SetupResult, TriggerPayload, TriggerType, ValidationResult
from agentflow.triggers.base import TriggerHandler, result_from_errors

IPV4_PATTERN = re.compile(r"^(\d{1,3}\.){3}\d{1,3}(/\d{1,2})?$")
SIGNATURE_PREFIX = "sha256="


def is_valid_ip_entry(entry: str) -> bool:
    """IPv4 address or IPv4 CIDR block"""
    if not isinstance(entry, str) or not IPV4_PATTERN.match(entry):
        return False
    try:
        ipaddress.IPv4Network(entry, strict=False)
    except ValueError:
        return False
    return True


def _ip_network(entry: Any) -> Optional[ipaddress.IPv4Network]:
    try:
        return ipaddress.IPv4Network(entry, strict=False)
    except (TypeError, ValueError):
        return None


def ip_allowed(client_ip: Optional[str], allowed: list) -> bool:
    """Whether client_ip falls in any allow-list entry; malformed entries match nothing"""
    try:
        address = ipaddress.IPv4Address(client_ip)
    except (ipaddress.AddressValueError, ValueError):
        return False
    networks = (_ip_network(entry) for entry in allowed)
    return any(network is not None and address in network for network in networks)


def _as_bytes(value: Union[str, bytes]) -> bytes:
    return value.encode("utf-8") if isinstance(value, str) else value


def sign_payload(payload: Union[str, bytes], secret: str) -> str:
    """Hex-encoded HMAC-SHA256 of the raw body"""
    return hmac.new(_as_bytes(secret), msg=_as_bytes(payload), digestmod=hashlib.sha256).hexdigest()


def verify_signature(payload: Union[str, bytes], signature: Optional[str], secret: str) -> bool:
    """
    Verify a webhook signature using HMAC SHA-256

    Args:
        payload: Raw request body
        signature: Hex digest, optionally prefixed with "sha256="
        secret: Per-trigger webhook secret

    Returns:
        True if signature is valid
    """
    if not signature or not secret:
        return False

    if signature.startswith(SIGNATURE_PREFIX):
        signature = signature[len(SIGNATURE_PREFIX):]

    expected = sign_payload(payload, secret)

    # Constant-time comparison; length mismatches are rejected the same way
    return hmac.compare_digest(expected.encode("utf-8"), signature.encode("utf-8"))


class WebhookRequest(CamelModel):
    method: str = "POST"
    headers: Dict[str, str] = {}
    body: Any = None
    query: Dict[str, Any] = {}
    ip: Optional[str] = None


class WebhookTriggerHandler(TriggerHandler):
    trigger_type = TriggerType.WEBHOOK.value
    supports_setup = True

    def __init__(self, base_url: str = "http://localhost:3000/api/webhooks/agents"):
        self.base_url = base_url.rstrip("/")

    def validate_config(self, config: Dict[str, Any]) -> ValidationResult:
        errors = []

        for entry in config.get("allowedIPs") or []:
            if not is_valid_ip_entry(entry):
                errors.append(f"Invalid IP address: {entry}")

        return result_from_errors(errors)

    async def parse_payload(self, raw_data: Any, config: Dict[str, Any]) -> TriggerPayload:
        request = self._parse_raw(WebhookRequest, raw_data)

        data = {
            "method": request.method.upper(),
            "headers": {key.lower(): value for key, value in request.headers.items()},
            "body": request.body,
            "query": request.query,
            "ip": request.ip,
        }
        return self._build_payload(data, source="webhook", raw_data=raw_data)

    def matches_filters(self, payload: TriggerPayload, config: Dict[str, Any]) -> bool:
        data = payload.data

        allowed = config.get("allowedIPs") or []
        if allowed and not ip_allowed(data.get("ip"), allowed):
            return False

        required_headers = config.get("headers") or {}
        if required_headers:
            request_headers = {key.lower(): value for key, value in (data.get("headers") or {}).items()}
            for key, value in required_headers.items():
                if request_headers.get(key.lower()) != value:
                    return False

        return True

    async def setup(self, trigger: AgentTrigger) -> SetupResult:
        """Generate a unique webhook URL and signing secret"""
        webhook_id = secrets.token_urlsafe(9)
        return SetupResult(
            success=True,
            webhook_url=f"{self.base_url}/{webhook_id}",
            webhook_secret=secrets.token_urlsafe(24),
        )

    def verify_signature(self, payload: Union[str, bytes], signature: Optional[str], secret: str) -> bool:
        return verify_signature(payload, signature, secret)
