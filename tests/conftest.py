"""Shared test fixtures and utilities."""

import logging

import boto3
import pytest
from moto import mock_aws

PREFIX = "/app/prod"
REGION = "eu-west-2"


@pytest.fixture(autouse=True)
def clean_aws_environment(monkeypatch, tmp_path):
    """Keep the developer's AWS configuration out of the tests."""
    for name in ("AWS_REGION", "AWS_DEFAULT_REGION", "AWS_PROFILE", "ENVFMT_LOG_DIR"):
        monkeypatch.delenv(name, raising=False)
    monkeypatch.setenv("AWS_CONFIG_FILE", str(tmp_path / "aws_config"))
    monkeypatch.setenv("AWS_SHARED_CREDENTIALS_FILE", str(tmp_path / "aws_credentials"))
    yield
    logging.getLogger().handlers.clear()


@pytest.fixture
def ssm_parameters():
    """Start a mocked AWS environment and seed SSM parameters under PREFIX."""
    with mock_aws():
        ssm = boto3.client("ssm", region_name=REGION)
        ssm.put_parameter(Name=f"{PREFIX}/db/host", Value="localhost", Type="String")
        ssm.put_parameter(Name=f"{PREFIX}/db/name", Value="my app", Type="String")
        ssm.put_parameter(Name=f"{PREFIX}/api-key", Value="s3cr3t", Type="SecureString")
        ssm.put_parameter(Name="/app/staging/db/host", Value="staging-db", Type="String")
        yield ssm


@pytest.fixture
def aws_config(tmp_path):
    """Write the shared AWS config and credentials files the tests point boto at."""

    def write(config: str, credentials: str = "") -> None:
        (tmp_path / "aws_config").write_text(config)
        (tmp_path / "aws_credentials").write_text(credentials)

    return write
