"""Tests for logging configuration and request context."""

import structlog

from addon_proxy.log_config import RequestContext, configure_logging, get_context_logger


class TestRequestContext:
    """Test suite for RequestContext."""

    def teardown_method(self):
        structlog.contextvars.clear_contextvars()

    def test_binds_and_unbinds(self):
        with RequestContext(config="demo", resource="stream"):
            bound = structlog.contextvars.get_contextvars()
            assert bound["config"] == "demo"
            assert bound["resource"] == "stream"

        assert "config" not in structlog.contextvars.get_contextvars()


class TestConfigureLogging:
    """Test configure_logging."""

    def teardown_method(self):
        structlog.reset_defaults()

    def test_json_output(self, capsys):
        configure_logging("DEBUG", json_output=True)

        get_context_logger("test").info("json_event", key="value")

        out = capsys.readouterr().out
        assert '"event": "json_event"' in out
        assert '"key": "value"' in out

    def test_level_filtering(self, capsys):
        configure_logging("WARNING", json_output=True)

        get_context_logger("test").info("hidden")
        get_context_logger("test").warning("shown")

        out = capsys.readouterr().out
        assert "hidden" not in out
        assert "shown" in out
