"""
Print every Parameter Store parameter under a path as `.env` or php-fpm config.

Usage:
    envfmt /app/prod/ dot-env > .env
    envfmt /app/prod/ php-fpm --region us-west-1 > env.conf
    envfmt /app/prod/ dot-env --profile deploy --mfa --out .env

Region comes from --region, then AWS_REGION / AWS_DEFAULT_REGION, then the
profile's configured region, and finally us-east-1.
"""

import argparse
import logging
import sys
from importlib.metadata import PackageNotFoundError, version
from pathlib import Path
from typing import Optional

import envfmt.core.logging as envfmt_logging
import envfmt.service.environment as env
from envfmt.aws.ssm import ParameterStore
from envfmt.core import constants
from envfmt.core.exceptions import EnvfmtError
from envfmt.service.formatter import OutputFormat
from envfmt.service.normalizer import normalize_parameters, normalize_path

logger = logging.getLogger(__name__)


def get_version() -> str:
    try:
        return version("envfmt")
    except PackageNotFoundError:
        return "unknown"


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="envfmt",
        description="Read parameters under a Parameter Store path and print them in a given format",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Write a .env file
  envfmt /app/prod/ dot-env > .env

  # php-fpm pool environment from another region
  envfmt /app/prod/ php-fpm --region us-west-1 > env.conf

  # Assume the profile's role, prompting for an MFA token on stderr
  envfmt /app/prod/ dot-env --profile deploy --mfa --out .env
        """,
    )

    parser.add_argument("path", help="Path prefix to select parameters for (e.g. /app/prod/)")
    parser.add_argument(
        "format",
        choices=[f.value for f in OutputFormat],
        help="Format to use when printing results",
    )
    parser.add_argument("--region", "-r", help=f"AWS region to query against (default: {constants.DEFAULT_REGION})")
    parser.add_argument("--profile", "-p", help="AWS profile to authenticate with (default: AWS_PROFILE)")

    mfa = parser.add_mutually_exclusive_group()
    mfa.add_argument("--mfa", action="store_true", help="Assume the profile's role and prompt for an MFA token")
    mfa.add_argument("--mfa-token", help="Assume the profile's role with this MFA token instead of prompting")

    parser.add_argument("--out", "-o", type=Path, help="Write parameters to this file instead of stdout")
    parser.add_argument("--debug", action="store_true", help="Display verbose debug information on stderr")
    parser.add_argument("--version", action="version", version=f"%(prog)s {get_version()}")
    return parser


def render_parameters(store: ParameterStore, path: str, output_format: OutputFormat) -> str:
    """Fetch, normalize, sort and render; nothing is emitted until this returns."""
    path = normalize_path(path)
    parameters = store.list_parameters(path)
    normalized = normalize_parameters(path, parameters)
    normalized.sort(key=lambda p: p.identifier)
    return output_format.render(normalized)


def emit(text: str, out: Optional[Path] = None) -> None:
    if out is None:
        sys.stdout.write(text)
        sys.stdout.flush()
        return

    with out.open("w", encoding="utf-8") as f:
        f.write(text)
    logger.info(f"wrote {out}")


def report(error: BaseException) -> None:
    sys.stderr.write(f"envfmt: {type(error).__name__}: {error}\n")


def run(argv: Optional[list[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    envfmt_logging.setup_logging(logging.DEBUG if args.debug else logging.WARNING)

    try:
        output_format = OutputFormat.from_name(args.format)
        config = env.build_source_config(
            region=args.region,
            profile=args.profile,
            mfa=args.mfa,
            mfa_token=args.mfa_token,
        )
        text = render_parameters(ParameterStore(config), args.path, output_format)
    except EnvfmtError as e:
        logger.debug("failed to render parameters", exc_info=True)
        report(e)
        return e.exit_code
    except KeyboardInterrupt:
        logger.warning("interrupt signal received, exiting")
        return constants.EXIT_INTERRUPTED

    try:
        emit(text, args.out)
    except (OSError, UnicodeError) as e:
        logger.debug("failed to write output", exc_info=True)
        report(e)
        return constants.EXIT_OUTPUT_FAILED

    return constants.EXIT_OK


def main():
    sys.exit(run())


if __name__ == "__main__":
    main()
