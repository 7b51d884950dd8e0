"""Custom exceptions for SUBPACE.

This module defines the exception hierarchy used throughout the SUBPACE application.
All exceptions inherit from the base SubpaceError class to allow for consistent
error handling and identification of SUBPACE-specific exceptions.

None of these are raised for individual lookups: a failed lookup is an
outcome, recorded as the task's terminal status.
"""


class SubpaceError(Exception):
    """Base exception for all SUBPACE errors.
    
    All custom exceptions in the SUBPACE application should inherit from this class
    to allow for consistent error handling and identification.
    """
    pass


class ValidationError(SubpaceError):
    """Raised when input validation fails.
    
    This exception is raised when user input fails validation, such as an
    invalid target domain.
    """
    pass


class ConfigurationError(SubpaceError):
    """Raised when configuration is invalid.
    
    This exception is raised for settings the scan cannot start with, such as a
    non-positive queries-per-second rate, a malformed name server address, or a
    missing system resolver configuration.
    """
    pass


class InputError(SubpaceError):
    """Raised when the candidate wordlist cannot be opened or read."""
    pass

