"""Tests for the settings model and the logger it configures."""

import logging

import pytest
from pydantic import ValidationError

from billtracker.config import AppConfig, get_config
from billtracker.logger import StructuredLogger


def test_remote_enabled_needs_both_credentials():
    assert not AppConfig(SUPABASE_URL="", SUPABASE_ANON_KEY="").remote_enabled
    assert not AppConfig(SUPABASE_URL="https://x.supabase.co", SUPABASE_ANON_KEY="").remote_enabled
    assert AppConfig(SUPABASE_URL="https://x.supabase.co", SUPABASE_ANON_KEY="key").remote_enabled


def test_missing_credentials_warn(caplog):
    with caplog.at_level(logging.WARNING, logger="billtracker.config"):
        AppConfig(SUPABASE_URL="", SUPABASE_ANON_KEY="")
    assert "remote store is disabled" in caplog.text

    caplog.clear()
    with caplog.at_level(logging.WARNING, logger="billtracker.config"):
        AppConfig(SUPABASE_URL="https://x.supabase.co", SUPABASE_ANON_KEY="key")
    assert caplog.text == ""


def test_log_level_must_be_a_level_name():
    assert AppConfig(LOG_LEVEL="DEBUG").LOG_LEVEL == "DEBUG"
    with pytest.raises(ValidationError):
        AppConfig(LOG_LEVEL="LOUD")


def test_logger_level_defaults_to_config():
    log = StructuredLogger(name="billtracker.tests.level-default")
    assert log.logger.level == logging.getLevelName(get_config().LOG_LEVEL)


def test_logger_level_override():
    log = StructuredLogger(name="billtracker.tests.level-override", level=logging.ERROR)
    assert log.logger.level == logging.ERROR
