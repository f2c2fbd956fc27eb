"""
Sentry initialization with data scrubbing.

Customer contact details and credentials must never reach Sentry: request
headers, bodies, extra context and breadcrumbs are scrubbed in
``before_send``.
"""

import re
from typing import Any, Dict, Optional

import sentry_sdk
from sentry_sdk.integrations.django import DjangoIntegration
from sentry_sdk.integrations.logging import LoggingIntegration

SENSITIVE_KEYS = {
    "password",
    "secret",
    "token",
    "api_key",
    "authorization",
    "cookie",
    "csrf",
    "session",
    "card_number",
    "cvv",
    "customer_email",
    "customer_phone",
}

EMAIL_PATTERN = re.compile(r"\b[A-Za-z0-9._%+-]+@[A-Za-z0-9.-]+\.[A-Za-z]{2,}\b")
PHONE_PATTERN = re.compile(r"\b\d{3}[-.]?\d{3}[-.]?\d{4}\b")


def scrub_sensitive_data(data: Any) -> Any:
    """
    Recursively scrub sensitive data from dictionaries, lists and strings.
    """
    if isinstance(data, dict):
        return {
            key: "[REDACTED]" if _is_sensitive_key(key) else scrub_sensitive_data(value)
            for key, value in data.items()
        }
    elif isinstance(data, list):
        return [scrub_sensitive_data(item) for item in data]
    elif isinstance(data, str):
        return _scrub_string(data)
    else:
        return data


def _is_sensitive_key(key: Any) -> bool:
    key_lower = str(key).lower()
    return any(sensitive in key_lower for sensitive in SENSITIVE_KEYS)


def _scrub_string(text: str) -> str:
    text = EMAIL_PATTERN.sub(lambda m: _mask_email(m.group(0)), text)
    # Keep the last 4 digits of phone numbers
    return PHONE_PATTERN.sub(lambda m: f"XXX-XXX-{m.group(0)[-4:]}", text)


def _mask_email(email: str) -> str:
    """Partially mask an email address (jo***@example.com)."""
    local, _, domain = email.partition("@")
    if not domain:
        return "REDACTED@EMAIL"
    return f"{local[:2]}***@{domain}"


def before_send(event: Dict[str, Any], hint: Dict[str, Any]) -> Optional[Dict[str, Any]]:
    """
    Sentry before_send hook to scrub sensitive data from events.
    """
    if "request" in event:
        request = event["request"]
        for key in ("headers", "query_string", "data"):
            if key in request:
                request[key] = scrub_sensitive_data(request[key])
        if "cookies" in request:
            request["cookies"] = {k: "[REDACTED]" for k in request["cookies"]}

    if "extra" in event:
        event["extra"] = scrub_sensitive_data(event["extra"])

    if "user" in event:
        user = event["user"]
        if "email" in user:
            user["email"] = _mask_email(user["email"])
        if "ip_address" in user:
            user["ip_address"] = "XXX.XXX.XXX.XXX"

    if "exception" in event and "values" in event["exception"]:
        for exception in event["exception"]["values"]:
            if exception.get("value"):
                exception["value"] = _scrub_string(exception["value"])

    if "breadcrumbs" in event and "values" in event["breadcrumbs"]:
        for breadcrumb in event["breadcrumbs"]["values"]:
            if "data" in breadcrumb:
                breadcrumb["data"] = scrub_sensitive_data(breadcrumb["data"])
            if breadcrumb.get("message"):
                breadcrumb["message"] = _scrub_string(breadcrumb["message"])

    return event


def initialize_sentry(
    dsn: Optional[str],
    environment: str = "production",
    traces_sample_rate: float = 0.1,
    release: Optional[str] = None,
) -> None:
    """
    Initialize Sentry SDK with the Django integration.

    Args:
        dsn: Sentry DSN. If None, Sentry is not initialized.
        environment: Environment name
        traces_sample_rate: Percentage of transactions to trace (0.0 to 1.0)
        release: Release version string
    """
    if not dsn:
        return

    sentry_sdk.init(
        dsn=dsn,
        environment=environment,
        release=release,
        traces_sample_rate=traces_sample_rate,
        integrations=[
            DjangoIntegration(transaction_style="url"),
            LoggingIntegration(),
        ],
        before_send=before_send,
        send_default_pii=False,
        attach_stacktrace=True,
        max_breadcrumbs=50,
    )
