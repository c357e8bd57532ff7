"""Assume a profile's role with an MFA token.

The profile (from ~/.aws/config or AWS_CONFIG_FILE) must name the role and the
MFA device; static keys come from the profile itself or the end of its
source_profile chain:

    [profile deploy]
    role_arn = arn:aws:iam::123456789012:role/Deploy
    mfa_serial = arn:aws:iam::123456789012:mfa/alice
    source_profile = default
"""

import logging
import sys
from typing import Callable, Optional

import boto3
import botocore.session
from botocore.exceptions import BotoCoreError, ClientError

from envfmt.core.constants import DEFAULT_PROFILE, MFA_ROLE_SESSION_NAME
from envfmt.core.exceptions import SourceUnavailable

logger = logging.getLogger(__name__)


def prompt_mfa_token() -> str:
    # stdout carries the rendered parameters, so prompt on stderr
    sys.stderr.write("MFA token is required: ")
    sys.stderr.flush()
    return sys.stdin.readline().strip()


def load_profiles() -> dict[str, dict]:
    """Profiles from the shared config and credentials files, merged by name."""
    try:
        return botocore.session.Session().full_config.get("profiles", {})
    except BotoCoreError as e:
        raise SourceUnavailable("Failed to read AWS config files", cause=e) from e


def get_source_profile(name: str, profiles: dict[str, dict], seen: Optional[set] = None) -> Optional[dict]:
    """Follow source_profile links until a profile without one is reached."""
    seen = seen or set()
    profile = profiles.get(name)
    if profile is None or name in seen:
        return None
    seen.add(name)

    source = profile.get("source_profile")
    if source and source != name:
        return get_source_profile(source, profiles, seen)
    return profile


def extract_field(field: str, *profiles: dict) -> Optional[str]:
    for profile in profiles:
        if profile.get(field):
            return profile[field]
    return None


def assume_role_with_mfa(
    profile: Optional[str],
    region: str,
    token: Optional[str] = None,
    prompt: Callable[[], str] = prompt_mfa_token,
) -> boto3.Session:
    """Return a boto3 Session on temporary credentials for the profile's role."""
    profile_name = profile or DEFAULT_PROFILE
    profiles = load_profiles()

    selected = profiles.get(profile_name)
    source = get_source_profile(profile_name, profiles)
    if selected is None or source is None:
        raise SourceUnavailable(f"Failed to find profile '{profile_name}' or its source profile")

    role_arn = selected.get("role_arn")
    if not role_arn:
        raise SourceUnavailable(f"Profile '{profile_name}' has no role_arn to assume")
    mfa_serial = selected.get("mfa_serial")
    if not mfa_serial:
        raise SourceUnavailable(f"Profile '{profile_name}' has no mfa_serial")
    access_key = extract_field("aws_access_key_id", selected, source)
    secret_key = extract_field("aws_secret_access_key", selected, source)
    if not access_key or not secret_key:
        raise SourceUnavailable(f"Failed to find access keys for profile '{profile_name}' or its source profile")

    if token is None:
        token = prompt()

    logger.info(f"assuming {role_arn} with MFA device {mfa_serial}")
    try:
        client = boto3.client(
            "sts",
            region_name=region,
            aws_access_key_id=access_key,
            aws_secret_access_key=secret_key,
            aws_session_token=extract_field("aws_session_token", selected, source),
        )
        res = client.assume_role(
            RoleArn=role_arn,
            RoleSessionName=MFA_ROLE_SESSION_NAME,
            SerialNumber=mfa_serial,
            TokenCode=token,
        )
    except (ClientError, BotoCoreError) as e:
        raise SourceUnavailable(f"Failed to assume role {role_arn} with MFA", cause=e) from e

    creds = res.get("Credentials")
    if not creds:
        raise SourceUnavailable(f"Assumed role {role_arn} but no credentials were returned")

    return boto3.Session(
        aws_access_key_id=creds["AccessKeyId"],
        aws_secret_access_key=creds["SecretAccessKey"],
        aws_session_token=creds["SessionToken"],
        region_name=region,
    )
