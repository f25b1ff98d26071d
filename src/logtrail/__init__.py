"""Logtrail: category-routed structured logging with batching, alerting and error-tracking sinks."""

__version__ = "0.1.0"
