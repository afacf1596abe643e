"""Tests for configuration loading and logging setup."""

import logging

import pytest

from s5b_instrument.config import DEFAULT_EXCHANGE_VERSION, load_exchange_version
from s5b_instrument.logging_setup import configure_logging


class TestExchangeVersion:
    def test_default(self, monkeypatch):
        monkeypatch.delenv("S5B_EXCHANGE_VERSION", raising=False)
        assert load_exchange_version() == DEFAULT_EXCHANGE_VERSION

    def test_override(self, monkeypatch):
        monkeypatch.setenv("S5B_EXCHANGE_VERSION", " 21 ")
        assert load_exchange_version() == 21

    @pytest.mark.parametrize("raw", ["abc", "-1"])
    def test_invalid_override(self, monkeypatch, raw):
        monkeypatch.setenv("S5B_EXCHANGE_VERSION", raw)
        with pytest.raises(ValueError):
            load_exchange_version()


class TestConfigureLogging:
    def test_explicit_level(self):
        assert configure_logging("debug") == logging.DEBUG

    def test_invalid_level_falls_back(self):
        assert configure_logging("LOUD") == logging.WARNING
