"""Render normalized parameters as `.env` or php-fpm pool configuration lines.

Both formats write safe values bare and double-quote everything else. dot-env
single-quotes values a shell would otherwise expand:

    DB_HOST=localhost            env[DB_HOST] = localhost
    DB_NAME="my app"             env[DB_NAME] = "my app"
    GREETING="say \\"hi\\""      env[GREETING] = "say \\"hi\\""
    PRICE='costs $5'            env[PRICE] = "costs \\$5"
"""

import re
from enum import Enum
from typing import Callable, Sequence

from envfmt.core.exceptions import UnsupportedFormat, UnsupportedValue
from envfmt.core.models import NormalizedParameter

SAFE_VALUE = re.compile(r"[A-Za-z0-9_./:@%+,-]+")

# php's ini scanner turns these into "1" or "" when unquoted
INI_KEYWORDS = frozenset({"true", "false", "on", "off", "yes", "no", "none", "null"})

DOT_ENV_ESCAPES = str.maketrans({"\\": "\\\\", '"': '\\"', "\n": "\\n", "\r": "\\r"})
PHP_FPM_ESCAPES = str.maketrans({"\\": "\\\\", '"': '\\"', "$": "\\$"})

# expanded by a shell inside double quotes
SHELL_EXPANSIONS = re.compile(r"[$`!]")
# cannot appear between single quotes in both bash and python-dotenv
SINGLE_QUOTE_UNSAFE = re.compile(r"['\\\n\r]")


def quote_dot_env(value: str) -> str:
    if value == "" or SAFE_VALUE.fullmatch(value):
        return value
    if SHELL_EXPANSIONS.search(value) and not SINGLE_QUOTE_UNSAFE.search(value):
        return "'" + value + "'"
    return '"' + value.translate(DOT_ENV_ESCAPES) + '"'


def quote_php_fpm(value: str) -> str:
    if "\n" in value or "\r" in value:
        raise UnsupportedValue("php-fpm env values cannot span multiple lines")
    if SAFE_VALUE.fullmatch(value) and value.lower() not in INI_KEYWORDS:
        return value
    return '"' + value.translate(PHP_FPM_ESCAPES) + '"'


def render_dot_env(params: Sequence[NormalizedParameter]) -> str:
    return "".join(f"{p.identifier}={quote_dot_env(p.value)}\n" for p in params)


def render_php_fpm(params: Sequence[NormalizedParameter]) -> str:
    return "".join(f"env[{p.identifier}] = {quote_php_fpm(p.value)}\n" for p in params)


class OutputFormat(Enum):
    DOT_ENV = "dot-env"
    PHP_FPM = "php-fpm"

    @classmethod
    def from_name(cls, name: str) -> "OutputFormat":
        try:
            return cls(name)
        except ValueError as e:
            choices = ", ".join(f.value for f in cls)
            raise UnsupportedFormat(f"'{name}' is not a valid output format (choose from {choices})") from e

    def render(self, params: Sequence[NormalizedParameter]) -> str:
        """Render params in the order given, one line each."""
        return RENDERERS[self](params)


RENDERERS: dict[OutputFormat, Callable[[Sequence[NormalizedParameter]], str]] = {
    OutputFormat.DOT_ENV: render_dot_env,
    OutputFormat.PHP_FPM: render_php_fpm,
}
