"""Numeric process exit codes used by the ``vimeokit`` CLI.

Each constant maps to a specific error category and is referenced by the
corresponding :class:`~vimeokit.exceptions.VimeoError` subclass.

Example::

    $ vimeokit call videos search -p query=cats --cache --cache-dir /nope
    $ echo $?
    3   # EXIT_CONFIG_ERROR -- the cache directory is unusable
"""

EXIT_SUCCESS = 0
"""The command completed successfully."""

EXIT_GENERIC_FAILURE = 1
"""An unclassified error occurred."""

EXIT_INVALID_USAGE = 2
"""The command was invoked with invalid arguments."""

EXIT_CONFIG_ERROR = 3
"""A required collaborator or setting is missing or unusable."""

EXIT_CONNECTION_ERROR = 6
"""A network-level error occurred (timeout, DNS failure, connection refused)."""

EXIT_PARSE_ERROR = 7
"""The response body could not be decoded in the requested format."""
