"""
Tests for hocon_config.logging module.

Tests the logger interface including:
- Verbose/debug gating
- Global logger configuration
"""

from __future__ import annotations

import io

from hocon_config.logging import (
    DefaultLogger,
    SilentLogger,
    get_global_logger,
    get_logger,
    set_global_logger,
)


class TestDefaultLogger:
    """Tests for the stderr logger."""

    def test_verbose_only(self):
        """Test that verbose mode hides debug messages."""
        stream = io.StringIO()
        logger = DefaultLogger(verbose=True, stream=stream)

        logger.verbose("PARSE", "shown")
        logger.debug("PARSE", "hidden")

        assert stream.getvalue() == "[PARSE] shown\n"

    def test_debug_implies_verbose(self):
        """Test that debug mode prints both levels."""
        stream = io.StringIO()
        logger = DefaultLogger(debug=True, stream=stream)

        logger.verbose("CONFIG", "one")
        logger.debug("RESOLVE", "two")

        assert stream.getvalue() == "[CONFIG] one\n[RESOLVE] two\n"

    def test_quiet_by_default(self, capsys):
        """Test that a default logger prints nothing."""
        logger = get_logger()

        logger.verbose("PARSE", "x")
        logger.debug("PARSE", "y")

        assert capsys.readouterr().err == ""


class TestGlobalLogger:
    """Tests for the global logger."""

    def test_default_is_silent(self):
        """Test that the library is silent unless configured."""
        assert isinstance(get_global_logger(), SilentLogger)

    def test_set_global_logger(self):
        """Test replacing the global logger."""
        logger = get_logger(verbose=True)

        set_global_logger(logger)

        assert get_global_logger() is logger
