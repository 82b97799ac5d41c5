"""Tests for logging configuration helpers."""

import logging

import pytest

from spendlens.logging_setup import _parse_level, get_logger


@pytest.mark.parametrize(
    "value,expected",
    [
        (logging.DEBUG, logging.DEBUG),
        ("info", logging.INFO),
        (" Error ", logging.ERROR),
        ("15", 15),
    ],
)
def test_parse_level(value, expected):
    assert _parse_level(value) == expected


def test_parse_level_falls_back_to_environment(monkeypatch):
    monkeypatch.setenv("SPENDLENS_LOG_LEVEL", "debug")

    assert _parse_level(None) == logging.DEBUG
    assert _parse_level("not-a-level") == logging.DEBUG


def test_parse_level_defaults_to_warning(monkeypatch):
    monkeypatch.delenv("SPENDLENS_LOG_LEVEL", raising=False)

    assert _parse_level(None) == logging.WARNING
    assert _parse_level("verbose") == logging.WARNING


def test_get_logger_is_under_package_root():
    logger = get_logger("spendlens.domain.recurring")

    assert logger.name == "spendlens.domain.recurring"
    assert logging.getLogger("spendlens").handlers
