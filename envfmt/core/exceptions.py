"""
Exceptions raised while fetching, normalizing and rendering parameters.

Every class carries the process exit code the CLI uses when it is the
reason for failing.
"""

from typing import Optional

from envfmt.core import constants


class EnvfmtError(Exception):
    """Base exception for envfmt."""

    exit_code = 1


class MalformedKey(EnvfmtError):
    """Parameter key is not under the requested path."""

    exit_code = constants.EXIT_BAD_KEY


class EmptyIdentifier(EnvfmtError):
    """Nothing is left of the key once the path is stripped."""

    exit_code = constants.EXIT_BAD_KEY


class IdentifierCollision(EnvfmtError):
    """Two keys normalize to the same identifier."""

    exit_code = constants.EXIT_BAD_KEY


class SourceUnavailable(EnvfmtError):
    """Parameter Store could not be read (auth, network, region or service error)."""

    exit_code = constants.EXIT_SOURCE_UNAVAILABLE

    def __init__(self, message: str, cause: Optional[BaseException] = None):
        if cause is not None:
            message = f"{message}: {cause}"
        super().__init__(message)
        self.cause = cause


class UnsupportedFormat(EnvfmtError):
    """Output format is not one of the known formats."""

    exit_code = constants.EXIT_USAGE


class UnsupportedValue(EnvfmtError):
    """Value cannot be written in the selected output format."""

    exit_code = constants.EXIT_BAD_VALUE
