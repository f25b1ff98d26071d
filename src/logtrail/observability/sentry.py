"""
Sentry initialization and outbound event scrubbing.

``redact_event`` is installed as ``before_send`` so it applies to every event
the SDK sends, whether it came from the forwarding sink or from the SDK's own
integrations.
"""

from __future__ import annotations

from typing import Any, Iterable, Optional

import sentry_sdk

from logtrail.config import EnvironmentSettings, SentrySettings
from logtrail.config.sentry import DEFAULT_REDACTED_ENV_VARS

EMAIL_PLACEHOLDER = "***@***"
EMAIL_KEYS = frozenset({"email", "user_email", "customer_email"})
_SCRUBBED_SECTIONS = ("user", "extra", "contexts", "tags")


def _is_email_key(key: Any) -> bool:
    return isinstance(key, str) and key.lower() in EMAIL_KEYS


def _collect_emails(value: Any, found: set[str]) -> None:
    if isinstance(value, dict):
        for key, val in value.items():
            if _is_email_key(key) and isinstance(val, str) and val:
                found.add(val)
            else:
                _collect_emails(val, found)
    elif isinstance(value, (list, tuple)):
        for item in value:
            _collect_emails(item, found)


def _replace(value: Any, emails: set[str]) -> Any:
    if isinstance(value, str):
        for email in emails:
            value = value.replace(email, EMAIL_PLACEHOLDER)
        return value
    if isinstance(value, dict):
        return {key: _replace(val, emails) for key, val in value.items()}
    if isinstance(value, list):
        return [_replace(item, emails) for item in value]
    if isinstance(value, tuple):
        return tuple(_replace(item, emails) for item in value)
    return value


def redact_event(
    event: dict[str, Any],
    hint: Optional[dict[str, Any]] = None,
    *,
    secret_env_vars: Iterable[str] = DEFAULT_REDACTED_ENV_VARS,
) -> dict[str, Any]:
    """Replace email addresses and drop secret env vars from an outbound event.

    Emails are discovered under email-named keys in the user, extra, contexts
    and tags sections; every occurrence of those addresses anywhere in the
    event (messages, exception values, breadcrumbs) is then replaced.
    """
    emails: set[str] = set()
    for section in _SCRUBBED_SECTIONS:
        _collect_emails(event.get(section), emails)
    if emails:
        for key in list(event):
            event[key] = _replace(event[key], emails)

    runtime = (event.get("contexts") or {}).get("runtime")
    if isinstance(runtime, dict) and isinstance(runtime.get("env"), dict):
        env = runtime["env"]
        for name in secret_env_vars:
            env.pop(name, None)
    return event


def init_sentry(sentry: SentrySettings, environment: EnvironmentSettings) -> bool:
    """Initialize the SDK when a DSN is configured. Returns whether it was."""
    if not sentry.enabled:
        return False

    secret_env_vars = tuple(sentry.redacted_env_vars)

    def before_send(event: dict[str, Any], hint: dict[str, Any]) -> dict[str, Any]:
        return redact_event(event, hint, secret_env_vars=secret_env_vars)

    traces_sample_rate = sentry.traces_sample_rate
    if traces_sample_rate is None:
        traces_sample_rate = 0.1 if environment.is_production else 1.0

    sentry_sdk.init(
        dsn=sentry.dsn,
        environment=environment.env,
        traces_sample_rate=traces_sample_rate,
        send_default_pii=False,
        debug=False,
        before_send=before_send,
    )
    return True
