"""Error handling utilities for SUBPACE."""

import logging
import sys
from typing import Optional


class ErrorHandler:
    """Centralized error handling for SUBPACE."""

    def __init__(self, verbose: bool = False, quiet: bool = False):
        """Initialize the error handler.

        Args:
            verbose: Enable debug diagnostics
            quiet: Only report warnings and errors
        """
        self.verbose = verbose
        self.quiet = quiet
        self._setup_logging()

    def _setup_logging(self):
        """Set up logging configuration."""
        if self.verbose:
            level = logging.DEBUG
        elif self.quiet:
            level = logging.WARNING
        else:
            level = logging.INFO
        logging.basicConfig(
            level=level,
            format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
            handlers=[
                logging.StreamHandler(sys.stderr)
            ]
        )
        self.logger = logging.getLogger('subpace')
        self.logger.setLevel(level)

    def handle_error(self, error_type: str, message: str, exception: Optional[Exception] = None) -> None:
        """Handle errors based on type.

        Args:
            error_type: Type of error (input, config, system, unexpected)
            message: Error message to display
            exception: Optional exception object

        Raises:
            SystemExit: For fatal error types
        """
        if error_type == 'input':
            self._handle_input_error(message, exception)
        elif error_type == 'config':
            self._handle_config_error(message, exception)
        elif error_type == 'system':
            self._handle_system_error(message, exception)
        else:
            self._handle_unexpected_error(message, exception)

    def _handle_input_error(self, message: str, exception: Optional[Exception] = None):
        """Handle errors reading the candidate wordlist."""
        print(f"Input Error: {message}", file=sys.stderr)
        if self.verbose and exception:
            self.logger.debug(f"Exception details: {exception!r}")
        sys.exit(1)

    def _handle_config_error(self, message: str, exception: Optional[Exception] = None):
        """Handle invalid options and resolver setup errors."""
        print(f"Configuration Error: {message}", file=sys.stderr)
        if self.verbose and exception:
            self.logger.debug(f"Exception details: {exception!r}")
        sys.exit(1)

    def _handle_system_error(self, message: str, exception: Optional[Exception] = None):
        """Handle system-related errors."""
        print(f"System Error: {message}", file=sys.stderr)
        if self.verbose and exception:
            self.logger.debug(f"Exception details: {exception!r}")
        sys.exit(1)

    def _handle_unexpected_error(self, message: str, exception: Optional[Exception] = None):
        """Handle unexpected errors."""
        print(f"Unexpected Error: {message}", file=sys.stderr)
        if exception:
            self.logger.error(f"Exception: {exception}", exc_info=exception)
        sys.exit(1)
