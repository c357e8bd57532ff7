import logging
from typing import Iterator, Optional

import boto3
from botocore.exceptions import BotoCoreError, ClientError

import envfmt.aws.sts as sts
from envfmt.core.constants import SSM_PAGE_SIZE
from envfmt.core.exceptions import SourceUnavailable
from envfmt.core.models import Parameter, SourceConfig

logger = logging.getLogger(__name__)

CLIENT_ERROR_MESSAGES = {
    "AccessDeniedException": "AWS permission denied",
    "UnrecognizedClientException": "AWS credentials were rejected",
    "InvalidSignatureException": "AWS credentials were rejected",
    "ExpiredTokenException": "AWS session token has expired",
    "ThrottlingException": "Parameter Store throttled the request",
    "ValidationException": "Parameter Store rejected the request",
}


def iter_parameters_by_path(ssm_client, path: str) -> Iterator[Parameter]:
    """Yield every parameter under path, decrypted, one page at a time."""
    paginator = ssm_client.get_paginator("get_parameters_by_path")
    pages = paginator.paginate(
        Path=path,
        Recursive=True,
        WithDecryption=True,
        PaginationConfig={"PageSize": SSM_PAGE_SIZE},
    )
    for page_number, page in enumerate(pages, start=1):
        logger.debug(f"page {page_number}: {len(page['Parameters'])} parameters")
        for param in page["Parameters"]:
            yield Parameter(key=param["Name"], value=param["Value"])


class ParameterStore:
    """Read-only access to SSM Parameter Store for one region and credential set."""

    def __init__(self, config: SourceConfig, session: Optional[boto3.Session] = None):
        self.config = config
        self._session = session

    def session(self) -> boto3.Session:
        if self._session is None:
            if self.config.uses_mfa:
                self._session = sts.assume_role_with_mfa(
                    profile=self.config.profile,
                    region=self.config.region,
                    token=self.config.mfa_token,
                )
            else:
                self._session = boto3.Session(profile_name=self.config.profile, region_name=self.config.region)
        return self._session

    def list_parameters(self, path: str) -> list[Parameter]:
        """All parameters under path in listing order. An unknown path yields an empty list.

        Raises:
            SourceUnavailable: credentials, region, network or service failure
        """
        # the API wants no trailing separator except for the root path
        query_path = path.rstrip("/") or "/"
        logger.info(f"fetching parameters under {query_path} in {self.config.region}")
        try:
            ssm_client = self.session().client("ssm", region_name=self.config.region)
            parameters = list(iter_parameters_by_path(ssm_client, query_path))
        except ClientError as e:
            self._handle_error(e)
            raise  # For type checker
        except BotoCoreError as e:
            raise SourceUnavailable("Failed to reach Parameter Store", cause=e) from e

        logger.info(f"fetched {len(parameters)} parameters")
        return parameters

    def _handle_error(self, error: ClientError) -> None:
        code = error.response.get("Error", {}).get("Code", "")
        message = CLIENT_ERROR_MESSAGES.get(code, "Parameter Store request failed")
        raise SourceUnavailable(f"{message} ({self.config.region})", cause=error) from error
