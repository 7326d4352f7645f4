"""Tests for logging setup."""

from __future__ import annotations

import logging

import structlog

from leadsift.config.settings import ObservabilitySettings
from leadsift.observability.logging import NOISY_LOGGERS, setup_logging


def test_levels_follow_settings() -> None:
    setup_logging(ObservabilitySettings(log_level="warning", log_format="console"))
    assert logging.getLogger("leadsift").level == logging.WARNING
    assert logging.getLogger("opensearch").level == logging.WARNING


def test_transport_logs_quiet_unless_debug() -> None:
    setup_logging(ObservabilitySettings(log_level="info"))
    assert all(logging.getLogger(name).level == logging.WARNING for name in NOISY_LOGGERS)

    setup_logging(ObservabilitySettings(log_level="debug"))
    assert logging.getLogger("opensearch").level == logging.DEBUG


def test_unknown_level_falls_back_to_info() -> None:
    setup_logging(ObservabilitySettings(log_level="chatty"))
    assert logging.getLogger("leadsift").level == logging.INFO


def test_service_context_is_bound() -> None:
    setup_logging()
    assert structlog.contextvars.get_contextvars() == {"service": "leadsift"}
