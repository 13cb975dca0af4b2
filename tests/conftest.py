"""Shared fixtures for cdk-notices tests."""

from pathlib import Path
from unittest.mock import AsyncMock, MagicMock

import pytest

from cdk_notices.core.matcher import Notice


TREES_DIR = Path(__file__).parent / "fixtures" / "cloud-assembly-trees"

BASIC_NOTICE = {
    "title": "Toggling off auto_delete_objects for Bucket empties the bucket",
    "issueNumber": 16603,
    "overview": (
        "If a stack is deployed with an S3 bucket with auto_delete_objects=True, and then "
        "re-deployed with auto_delete_objects=False, all the objects in the bucket will be deleted."
    ),
    "components": [{"name": "cli", "version": "<=1.126.0"}],
    "schemaVersion": "1",
}

MULTIPLE_AFFECTED_VERSIONS_NOTICE = {
    "title": "Error when building EKS cluster with monocdk import",
    "issueNumber": 17061,
    "overview": (
        "When using monocdk/aws-eks to build a stack containing an EKS cluster, error is thrown "
        "about missing lambda-layer-node-proxy-agent/layer/package.json."
    ),
    "components": [{"name": "cli", "version": "<1.130.0 >=1.126.0"}],
    "schemaVersion": "1",
}

FRAMEWORK_2_1_0_AFFECTED_NOTICE = {
    "title": "Regression on module foobar",
    "issueNumber": 1234,
    "overview": "Some bug description",
    "components": [{"name": "framework", "version": "<= 2.1.0"}],
    "schemaVersion": "1",
}

NOTICE_FOR_APIGATEWAYV2 = {
    "title": "Regression on module foobar",
    "issueNumber": 1234,
    "overview": "Some bug description",
    "components": [{"name": "@aws-cdk/aws-apigatewayv2-alpha.", "version": "<= 2.13.0-alpha.0"}],
    "schemaVersion": "1",
}

NOTICE_FOR_APIGATEWAY = {
    "title": "Regression on module foobar",
    "issueNumber": 1234,
    "overview": "Some bug description",
    "components": [{"name": "@aws-cdk/aws-apigateway", "version": "<= 2.13.0-alpha.0"}],
    "schemaVersion": "1",
}

NOTICE_FOR_APIGATEWAYV2_CFN_STAGE = {
    "title": "Regression on module foobar",
    "issueNumber": 1234,
    "overview": "Some bug description",
    "components": [{"name": "aws-cdk-lib.aws_apigatewayv2.CfnStage", "version": "<= 2.13.0-alpha.0"}],
    "schemaVersion": "1",
}


def notice(data):
    return Notice.from_dict(data)


@pytest.fixture
def basic_notice():
    return notice(BASIC_NOTICE)


@pytest.fixture
def multiple_versions_notice():
    return notice(MULTIPLE_AFFECTED_VERSIONS_NOTICE)


@pytest.fixture
def stub_source():
    """Create a data source whose fetch() is an AsyncMock."""
    def _make(notices):
        source = MagicMock()
        source.fetch = AsyncMock(return_value=list(notices))
        return source
    return _make
