"""Unit tests for console formatting and logging setup."""

import logging

from pkgstrap.utils.formatting import LOGGER_NAME, configure_logging, load_theme
from rich.logging import RichHandler


class TestLoadTheme:
    """Tests for the bundled theme."""

    def test_defines_output_styles(self) -> None:
        """Every style used by tables and messages is defined."""
        theme = load_theme()

        for name in ("muted", "success", "warning", "error", "info", "border", "bold_header"):
            assert name in theme.styles
        for name in ("done", "pending", "failed"):
            assert name in theme.styles

    def test_failed_is_bold(self) -> None:
        """Failures stand out in bold."""
        assert load_theme().styles["failed"].bold is True


class TestConfigureLogging:
    """Tests for configure_logging."""

    def test_default_level_is_info(self) -> None:
        """Without flags INFO records are shown."""
        logger = configure_logging()

        assert logger.name == LOGGER_NAME
        assert logger.level == logging.INFO
        assert logger.propagate is False

    def test_verbose_wins_over_quiet(self) -> None:
        """--verbose takes precedence over --quiet."""
        assert configure_logging(verbose=True, quiet=True).level == logging.DEBUG

    def test_quiet(self) -> None:
        """--quiet keeps warnings and errors."""
        assert configure_logging(quiet=True).level == logging.WARNING

    def test_single_rich_handler(self) -> None:
        """Repeated setup replaces the handler instead of stacking."""
        configure_logging()
        logger = configure_logging()

        assert len(logger.handlers) == 1
        assert isinstance(logger.handlers[0], RichHandler)
