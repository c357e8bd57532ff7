"""Turn Parameter Store keys into flat, upper-case environment identifiers.

    /app/prod/db/host  under  /app/prod/  ->  DB_HOST
"""

import logging
import re
from typing import Iterable

from envfmt.core.exceptions import EmptyIdentifier, IdentifierCollision, MalformedKey
from envfmt.core.models import NormalizedParameter, Parameter

logger = logging.getLogger(__name__)

SEPARATOR = "/"
INVALID_IDENTIFIER_CHARS = re.compile(r"[^A-Za-z0-9_]")


def normalize_path(path: str) -> str:
    """Parameter Store paths are absolute; accept `app/prod` as `/app/prod`."""
    if not path.startswith(SEPARATOR):
        return SEPARATOR + path
    return path


def key_prefix(path: str) -> str:
    """The part stripped from every key, always ending in exactly one separator."""
    return normalize_path(path).rstrip(SEPARATOR) + SEPARATOR


def to_identifier(prefix: str, key: str) -> str:
    if not key.startswith(prefix):
        raise MalformedKey(f"Key '{key}' is not under path '{prefix}'")

    remainder = key[len(prefix) :].strip(SEPARATOR)
    if not remainder:
        raise EmptyIdentifier(f"Key '{key}' has no name below path '{prefix}'")

    # SSM names may also contain '-' and '.', neither is valid in a shell name
    identifier = INVALID_IDENTIFIER_CHARS.sub("_", remainder).upper()
    if identifier[0].isdigit():
        identifier = "_" + identifier
    return identifier


def normalize_parameters(path: str, parameters: Iterable[Parameter]) -> list[NormalizedParameter]:
    """Normalize every key under path, keeping source order.

    Raises:
        MalformedKey: a key is not under path
        EmptyIdentifier: a key is the path itself
        IdentifierCollision: two keys map to the same identifier
    """
    prefix = key_prefix(path)
    seen: dict[str, str] = {}
    normalized = []

    for param in parameters:
        identifier = to_identifier(prefix, param.key)
        if identifier in seen:
            raise IdentifierCollision(f"Keys '{seen[identifier]}' and '{param.key}' both map to {identifier}")
        seen[identifier] = param.key
        normalized.append(NormalizedParameter(identifier=identifier, value=param.value))

    logger.debug(f"normalized {len(normalized)} parameters under {prefix}")
    return normalized
