import logging
import os
from pathlib import Path
from typing import Optional

import boto3
from botocore.exceptions import BotoCoreError

from envfmt.core.constants import DEFAULT_REGION
from envfmt.core.exceptions import SourceUnavailable
from envfmt.core.models import SourceConfig

logger = logging.getLogger(__name__)


def get_aws_region() -> Optional[str]:
    return os.getenv("AWS_REGION") or os.getenv("AWS_DEFAULT_REGION") or None


def get_aws_profile() -> Optional[str]:
    return os.getenv("AWS_PROFILE") or None


def get_log_dir() -> Optional[Path]:
    log_dir = os.getenv("ENVFMT_LOG_DIR")
    return Path(log_dir) if log_dir else None


def get_profile_region(profile: Optional[str] = None) -> Optional[str]:
    """Region configured for the profile in the shared AWS config file, if any."""
    try:
        return boto3.Session(profile_name=profile).region_name
    except BotoCoreError as e:
        raise SourceUnavailable(f"Failed to load AWS profile '{profile}'", cause=e) from e


def resolve_region(explicit: Optional[str] = None, profile: Optional[str] = None) -> str:
    """Pick the region: explicit flag, then environment, then profile config, then the default."""
    if explicit:
        return explicit

    region = get_aws_region()
    if region:
        return region

    region = get_profile_region(profile)
    if region:
        return region

    logger.info(f"no region configured, falling back to {DEFAULT_REGION}")
    return DEFAULT_REGION


def build_source_config(
    region: Optional[str] = None,
    profile: Optional[str] = None,
    mfa: bool = False,
    mfa_token: Optional[str] = None,
) -> SourceConfig:
    profile = profile or get_aws_profile()
    config = SourceConfig(
        region=resolve_region(region, profile),
        profile=profile,
        mfa=mfa,
        mfa_token=mfa_token,
    )
    logger.debug(f"resolved region {config.region}, profile {config.profile}, mfa {config.uses_mfa}")
    return config
