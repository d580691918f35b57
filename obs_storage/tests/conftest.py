from __future__ import annotations

import boto3
import pytest
from moto import mock_aws

from obs_storage.storage import ObsAdapter
from obs_storage.tests.consts import TEST_BUCKET, TEST_ENDPOINT


@pytest.fixture
def aws_credentials(monkeypatch):
    monkeypatch.setenv("AWS_ACCESS_KEY_ID", "testing")
    monkeypatch.setenv("AWS_SECRET_ACCESS_KEY", "testing")
    monkeypatch.setenv("AWS_SECURITY_TOKEN", "testing")
    monkeypatch.setenv("AWS_SESSION_TOKEN", "testing")
    monkeypatch.setenv("AWS_DEFAULT_REGION", "us-east-1")


@pytest.fixture
def s3_client(aws_credentials):
    with mock_aws():
        client = boto3.client("s3", region_name="us-east-1")
        client.create_bucket(Bucket=TEST_BUCKET)
        yield client


@pytest.fixture
def adapter(s3_client):
    obs_adapter = ObsAdapter(s3_client, TEST_ENDPOINT, TEST_BUCKET)
    obs_adapter.write("fixture/read.txt", b"read-test", {"mimetype": "text/plain"})
    return obs_adapter
