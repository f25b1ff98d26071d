from .sentry import EMAIL_PLACEHOLDER, init_sentry, redact_event

__all__ = ["EMAIL_PLACEHOLDER", "init_sentry", "redact_event"]
