"""Tests for Config."""

import pytest

from logscope.config import Config, parse_levels
from logscope.errors import ConfigurationError
from logscope.models import ALL_LEVELS, LogLevel


class TestDefaults:
    def test_default_capacity(self):
        assert Config(environ={}).buffer.capacity == 1000

    def test_default_filter(self):
        c = Config(environ={})
        assert c.filter.levels == frozenset(ALL_LEVELS)
        assert c.filter.search_term == ""

    def test_default_auto_follow(self):
        assert Config(environ={}).scroll.auto_follow is True

    def test_default_export(self):
        c = Config(environ={})
        assert c.get_app_name() == "logscope"
        assert c.export.export_dir == "."

    def test_default_server(self):
        c = Config(environ={})
        assert c.server.host == "127.0.0.1"
        assert c.server.port == 5000
        assert c.server.access_log is False


class TestEnvironment:
    def test_overrides(self):
        c = Config(environ={
            "LOGSCOPE_CAPACITY": "250",
            "LOGSCOPE_APP_NAME": "antigravity",
            "LOGSCOPE_PORT": "8080",
            "LOGSCOPE_LOG_LEVEL": "DEBUG",
            "LOGSCOPE_ACCESS_LOG": "yes",
        })
        assert c.get_capacity() == 250
        assert c.get_app_name() == "antigravity"
        assert c.server.port == 8080
        assert c.server.log_level == "debug"
        assert c.server.access_log is True

    def test_empty_level_list_means_no_levels(self):
        assert Config(environ={"LOGSCOPE_LEVELS": ""}).filter.levels == frozenset()

    @pytest.mark.parametrize("capacity", ["0", "-3", "many"])
    def test_bad_capacity(self, capacity):
        with pytest.raises(ConfigurationError):
            Config(environ={"LOGSCOPE_CAPACITY": capacity})

    def test_bad_port(self):
        with pytest.raises(ConfigurationError):
            Config(environ={"LOGSCOPE_PORT": "http"})


class TestParseLevels:
    def test_case_and_whitespace(self):
        assert parse_levels(" error , Trace,") == frozenset({LogLevel.ERROR, LogLevel.TRACE})

    def test_unknown_level(self):
        with pytest.raises(ConfigurationError):
            parse_levels("ERROR,FATAL")

    def test_warning_alias(self):
        assert parse_levels("warning,INFO") == frozenset({LogLevel.WARN, LogLevel.INFO})
        assert Config(environ={"LOGSCOPE_LEVELS": "WARNING"}).filter.levels == frozenset({LogLevel.WARN})
