"""Tests for the deployment configuration loader."""

import tempfile
from pathlib import Path

import pytest

from infrastructure.config import REQUIRED_ENV_VARS, DeployConfig
from infrastructure.errors import (
  ConfigurationError,
  MalformedIdentifierError,
  MissingConfigurationError,
)


def write_yaml(content: str) -> Path:
  with tempfile.NamedTemporaryFile(mode="w", suffix=".yaml", delete=False) as f:
    f.write(content)
    f.flush()
  return Path(f.name)


class TestDeployConfig:
  """Test DeployConfig dataclass."""

  def test_default_values(self, deploy_config: DeployConfig) -> None:
    """Verify default values are set correctly."""
    assert deploy_config.region == "us-east-1"
    assert deploy_config.account is None
    assert deploy_config.cms_bucket_name == "monster-anshu-cms"
    assert deploy_config.temp_object_expiration_days == 1
    assert deploy_config.cors_allowed_origins == []

  def test_stack_name(self, deploy_config: DeployConfig) -> None:
    """Verify the stack name includes the stage."""
    assert deploy_config.stack_name == "ZenodeckApi-dev"


class TestConfigFromEnv:
  """Test DeployConfig.from_env."""

  def test_load_from_environment(self, environ: dict[str, str]) -> None:
    """Verify every required variable maps to its field."""
    config = DeployConfig.from_env(environ)

    assert config.stage == "dev"
    assert config.user_service_api_arn == environ["USER_SERVICE_API_GATEWAY_ARN"]
    assert config.api_domain == "api.example.com"
    assert config.api_domain_certificate_arn == environ["API_DOMAIN_CERTIFICATE_ARN"]
    assert config.campaign_api_origin == "campaign.example.com"

  def test_reports_all_missing_variables(self) -> None:
    """Verify every missing input is named in one error."""
    with pytest.raises(MissingConfigurationError) as exc_info:
      DeployConfig.from_env({"STAGE": "dev"})

    assert exc_info.value.missing == [
      "USER_SERVICE_API_GATEWAY_ARN",
      "API_DOMAIN",
      "API_DOMAIN_CERTIFICATE_ARN",
      "CAMPAIGN_API_ORIGIN",
    ]
    assert "CAMPAIGN_API_ORIGIN" in str(exc_info.value)

  @pytest.mark.parametrize("env_name", list(REQUIRED_ENV_VARS))
  def test_empty_variable_counts_as_missing(
    self, environ: dict[str, str], env_name: str
  ) -> None:
    """Verify blank values are treated as absent."""
    environ[env_name] = "   "

    with pytest.raises(MissingConfigurationError) as exc_info:
      DeployConfig.from_env(environ)

    assert exc_info.value.missing == [env_name]

  def test_optional_variables(self, environ: dict[str, str]) -> None:
    """Verify optional variables are picked up."""
    environ["AWS_REGION"] = "eu-west-1"
    environ["CDK_DEFAULT_ACCOUNT"] = "123456789012"
    environ["CMS_BUCKET_NAME"] = "other-cms"

    config = DeployConfig.from_env(environ)

    assert config.region == "eu-west-1"
    assert config.account == "123456789012"
    assert config.cms_bucket_name == "other-cms"

  def test_malformed_user_service_arn(self, environ: dict[str, str]) -> None:
    """Verify the user service ARN is checked eagerly."""
    environ["USER_SERVICE_API_GATEWAY_ARN"] = "a:b:c"

    with pytest.raises(MalformedIdentifierError):
      DeployConfig.from_env(environ)

  def test_certificate_must_be_acm(self, environ: dict[str, str]) -> None:
    """Verify a non-ACM ARN is rejected."""
    environ["API_DOMAIN_CERTIFICATE_ARN"] = "arn:aws:iam::123456789012:server-certificate/x"

    with pytest.raises(ConfigurationError, match="not an ACM certificate"):
      DeployConfig.from_env(environ)

  def test_certificate_must_be_in_us_east_1(self, environ: dict[str, str]) -> None:
    """Verify CloudFront's certificate region requirement is checked."""
    environ["API_DOMAIN_CERTIFICATE_ARN"] = (
      "arn:aws:acm:eu-west-1:123456789012:certificate/0a1b2c3d"
    )

    with pytest.raises(ConfigurationError, match="us-east-1"):
      DeployConfig.from_env(environ)


class TestConfigFromYaml:
  """Test DeployConfig.from_yaml loading."""

  def test_missing_file_uses_environment(self, environ: dict[str, str]) -> None:
    """Verify the YAML file is optional."""
    config = DeployConfig.from_yaml("does-not-exist.yaml", environ=environ)

    assert config.stage == "dev"

  def test_stage_section_merged_with_defaults(self) -> None:
    """Verify stage settings override defaults."""
    path = write_yaml(
      """
defaults:
  user_service_api_arn: arn:aws:apigateway:us-east-1::/restapis/abcde12345
  api_domain_certificate_arn: arn:aws:acm:us-east-1:123456789012:certificate/abc
  temp_object_expiration_days: 3

stages:
  prod:
    api_domain: api.example.com
    campaign_api_origin: campaign.example.com
    temp_object_expiration_days: 7
    cors_allowed_origins:
      - "*.example.com"
"""
    )

    config = DeployConfig.from_yaml(path, environ={"STAGE": "prod"})

    assert config.stage == "prod"
    assert config.api_domain == "api.example.com"
    assert config.temp_object_expiration_days == 7
    assert config.cors_allowed_origins == ["*.example.com"]

  def test_stage_argument_when_env_unset(self, environ: dict[str, str]) -> None:
    """Verify the stage can come from the caller (CDK context)."""
    del environ["STAGE"]
    path = write_yaml("stages:\n  qa:\n    api_domain: api.qa.example.com\n")

    config = DeployConfig.from_yaml(path, stage="qa", environ=environ)

    assert config.stage == "qa"

  def test_environment_overrides_file(self, environ: dict[str, str]) -> None:
    """Verify environment variables win over YAML values."""
    path = write_yaml(
      """
stages:
  dev:
    api_domain: from-file.example.com
    campaign_api_origin: campaign.from-file.example.com
"""
    )

    config = DeployConfig.from_yaml(path, environ=environ)

    assert config.api_domain == "api.example.com"
    assert config.campaign_api_origin == "campaign.example.com"

  def test_unknown_keys_rejected(self, environ: dict[str, str]) -> None:
    """Verify typos in the file are reported."""
    path = write_yaml("defaults:\n  api_domian: typo.example.com\n")

    with pytest.raises(ConfigurationError, match="api_domian"):
      DeployConfig.from_yaml(path, environ=environ)

  def test_missing_values_reported(self) -> None:
    """Verify inputs missing from both file and environment are reported."""
    path = write_yaml("stages:\n  dev:\n    api_domain: api.example.com\n")

    with pytest.raises(MissingConfigurationError) as exc_info:
      DeployConfig.from_yaml(path, environ={"STAGE": "dev"})

    assert "API_DOMAIN" not in exc_info.value.missing
    assert "CAMPAIGN_API_ORIGIN" in exc_info.value.missing

  def test_invalid_expiration(self, environ: dict[str, str]) -> None:
    """Verify the temp object expiration must be positive."""
    path = write_yaml("defaults:\n  temp_object_expiration_days: 0\n")

    with pytest.raises(ConfigurationError, match="temp_object_expiration_days"):
      DeployConfig.from_yaml(path, environ=environ)

  def test_non_integer_expiration(self, environ: dict[str, str]) -> None:
    """Verify a non-numeric expiration names the setting."""
    path = write_yaml("defaults:\n  temp_object_expiration_days: soon\n")

    with pytest.raises(ConfigurationError, match="temp_object_expiration_days must be an integer"):
      DeployConfig.from_yaml(path, environ=environ)

  def test_single_cors_origin_string(self, environ: dict[str, str]) -> None:
    """Verify a scalar CORS origin is a one-element list."""
    path = write_yaml('defaults:\n  cors_allowed_origins: "*.example.com"\n')

    config = DeployConfig.from_yaml(path, environ=environ)

    assert config.cors_allowed_origins == ["*.example.com"]

  def test_cors_origins_must_be_strings(self, environ: dict[str, str]) -> None:
    """Verify non-string CORS origins are rejected."""
    path = write_yaml("defaults:\n  cors_allowed_origins:\n    host: example.com\n")

    with pytest.raises(ConfigurationError, match="cors_allowed_origins must be a list of strings"):
      DeployConfig.from_yaml(path, environ=environ)

  @pytest.mark.parametrize(
    ("content", "section"),
    [
      ("- a\n- b\n", "top level"),
      ("defaults:\n  - region\n", "defaults"),
      ("stages: dev\n", "stages"),
      ("stages:\n  dev: [api.example.com]\n", "stages.dev"),
    ],
  )
  def test_sections_must_be_mappings(
    self, environ: dict[str, str], content: str, section: str
  ) -> None:
    """Verify a malformed file layout names the file and section."""
    path = write_yaml(content)

    with pytest.raises(ConfigurationError) as exc_info:
      DeployConfig.from_yaml(path, environ=environ)

    assert section in str(exc_info.value)
    assert str(path) in str(exc_info.value)
