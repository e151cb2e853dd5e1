"""Shared log message prefix."""

LOG_PREFIX = "[SSOAgent]"
