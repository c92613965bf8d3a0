"""Exception hierarchy for vimeokit.

All exceptions inherit from :class:`VimeoError`, which carries an
``exit_code`` attribute mapped to a constant from :mod:`vimeokit.exit_codes`.
The CLI entry point :func:`vimeokit.app.main` catches ``VimeoError`` and exits
with the matching code.

Subclass hierarchy::

    VimeoError              (exit 1)
    +-- ConfigurationError  (exit 3)
    |   +-- CacheConfigError (exit 3)
    +-- TransportError      (exit 6)
    +-- ParseError          (exit 7)

Non-2xx HTTP responses are *not* errors: they are parsed and returned like
any other response and the caller inspects the status.
"""

from vimeokit.exit_codes import (
    EXIT_CONFIG_ERROR,
    EXIT_CONNECTION_ERROR,
    EXIT_GENERIC_FAILURE,
    EXIT_PARSE_ERROR,
)


class VimeoError(Exception):
    """Base exception for all vimeokit errors.

    Args:
        message: Human-readable error description printed to stderr.
        exit_code: Optional override for the class-level exit code.
    """

    exit_code: int = EXIT_GENERIC_FAILURE

    def __init__(self, message: str, exit_code: int | None = None):
        super().__init__(message)
        if exit_code is not None:
            self.exit_code = exit_code


class ConfigurationError(VimeoError):
    """Raised when a required collaborator is missing or a config file is invalid."""

    exit_code = EXIT_CONFIG_ERROR


class CacheConfigError(ConfigurationError):
    """Raised when caching is enabled on a directory that is missing or not writable."""


class TransportError(VimeoError):
    """Raised on network-level failures reported by the HTTP transport."""

    exit_code = EXIT_CONNECTION_ERROR


class ParseError(VimeoError):
    """Raised when a response body is not valid XML or JSON."""

    exit_code = EXIT_PARSE_ERROR
