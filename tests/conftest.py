"""Pytest fixtures for routing, configuration and CDK stack tests."""

import aws_cdk as cdk
import pytest

from infrastructure.config import DeployConfig

USER_SERVICE_API_ARN = "arn:aws:apigateway:us-east-1::/restapis/abcde12345"
CERTIFICATE_ARN = (
  "arn:aws:acm:us-east-1:123456789012:certificate/0a1b2c3d-4e5f-6a7b-8c9d-0e1f2a3b4c5d"
)


@pytest.fixture
def environ() -> dict[str, str]:
  """Complete set of required environment inputs."""
  return {
    "STAGE": "dev",
    "USER_SERVICE_API_GATEWAY_ARN": USER_SERVICE_API_ARN,
    "API_DOMAIN": "api.example.com",
    "API_DOMAIN_CERTIFICATE_ARN": CERTIFICATE_ARN,
    "CAMPAIGN_API_ORIGIN": "campaign.example.com",
  }


@pytest.fixture
def deploy_config() -> DeployConfig:
  """Deployment config for the dev stage."""
  return DeployConfig(
    stage="dev",
    user_service_api_arn=USER_SERVICE_API_ARN,
    api_domain="api.example.com",
    api_domain_certificate_arn=CERTIFICATE_ARN,
    campaign_api_origin="campaign.example.com",
  )


@pytest.fixture
def app() -> cdk.App:
  """Create a CDK App for testing."""
  return cdk.App()


@pytest.fixture
def stack(app: cdk.App) -> cdk.Stack:
  """Create a CDK Stack for testing."""
  return cdk.Stack(app, "TestStack", env=cdk.Environment(region="us-east-1"))
