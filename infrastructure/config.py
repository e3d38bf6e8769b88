"""Deployment configuration loaded from YAML and the environment."""

import logging
import os
from collections.abc import Mapping
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import yaml

from infrastructure.errors import ConfigurationError, MissingConfigurationError
from infrastructure.routing import parse_identifier

logger = logging.getLogger(__name__)

# Environment variable -> DeployConfig field
REQUIRED_ENV_VARS = {
  "STAGE": "stage",
  "USER_SERVICE_API_GATEWAY_ARN": "user_service_api_arn",
  "API_DOMAIN": "api_domain",
  "API_DOMAIN_CERTIFICATE_ARN": "api_domain_certificate_arn",
  "CAMPAIGN_API_ORIGIN": "campaign_api_origin",
}

OPTIONAL_ENV_VARS = {
  "AWS_REGION": "region",
  "CDK_DEFAULT_ACCOUNT": "account",
  "CMS_BUCKET_NAME": "cms_bucket_name",
}


@dataclass(frozen=True)
class DeployConfig:
  """Inputs for one stage of the API edge deployment."""

  stage: str
  user_service_api_arn: str
  api_domain: str
  api_domain_certificate_arn: str
  campaign_api_origin: str
  region: str = "us-east-1"
  account: str | None = None
  cms_bucket_name: str = "monster-anshu-cms"
  temp_object_expiration_days: int = 1
  cors_allowed_origins: list[str] = field(default_factory=list)

  @property
  def stack_name(self) -> str:
    return f"ZenodeckApi-{self.stage}"

  @classmethod
  def from_env(
    cls,
    environ: Mapping[str, str] | None = None,
    **overrides: Any,
  ) -> "DeployConfig":
    """Build a config from environment variables.

    ``overrides`` are lower-priority values (e.g. from a YAML file) keyed by
    field name; a non-empty environment variable always wins.
    """
    environ = os.environ if environ is None else environ
    values: dict[str, Any] = dict(overrides)

    for env_name, field_name in {**REQUIRED_ENV_VARS, **OPTIONAL_ENV_VARS}.items():
      value = environ.get(env_name, "").strip()
      if value:
        values[field_name] = value

    missing = [
      env_name
      for env_name, field_name in REQUIRED_ENV_VARS.items()
      if not str(values.get(field_name) or "").strip()
    ]
    if missing:
      raise MissingConfigurationError(missing)

    values["temp_object_expiration_days"] = _as_int(
      "temp_object_expiration_days", values.get("temp_object_expiration_days", 1)
    )
    values["cors_allowed_origins"] = _as_str_list(
      "cors_allowed_origins", values.get("cors_allowed_origins")
    )

    config = cls(**values)
    config.validate()
    return config

  @classmethod
  def from_yaml(
    cls,
    path: Path | str = "deploy.yaml",
    *,
    stage: str | None = None,
    environ: Mapping[str, str] | None = None,
  ) -> "DeployConfig":
    """Load a stage's settings from YAML, with the environment on top.

    The file is optional. Its ``defaults`` section is merged with the
    ``stages.<stage>`` section, where the stage comes from ``STAGE`` or the
    ``stage`` argument.
    """
    environ = os.environ if environ is None else environ
    path = Path(path)

    data: dict[str, Any] = {}
    if path.exists():
      with open(path) as f:
        data = _as_mapping(path, "top level", yaml.safe_load(f))
      logger.debug("Loaded deployment config from %s", path)
    else:
      logger.debug("No deployment config at %s, using environment only", path)

    defaults = _as_mapping(path, "defaults", data.get("defaults"))
    stages = _as_mapping(path, "stages", data.get("stages"))

    stage = environ.get("STAGE", "").strip() or stage or defaults.get("stage")
    merged = {**defaults}
    if stage:
      merged.update(_as_mapping(path, f"stages.{stage}", stages.get(stage)))
      merged["stage"] = stage

    unknown = set(merged) - cls.field_names()
    if unknown:
      raise ConfigurationError(
        f"Unknown keys in {path}: {', '.join(sorted(unknown))}"
      )

    return cls.from_env(environ, **merged)

  @classmethod
  def field_names(cls) -> set[str]:
    return set(cls.__dataclass_fields__)

  def validate(self) -> None:
    """Check values that would otherwise only fail at deploy time."""
    parse_identifier(self.user_service_api_arn)

    certificate = parse_identifier(self.api_domain_certificate_arn)
    if certificate.service != "acm" or not certificate.resource.startswith("certificate/"):
      raise ConfigurationError(
        f"API_DOMAIN_CERTIFICATE_ARN is not an ACM certificate ARN: "
        f"{self.api_domain_certificate_arn!r}"
      )
    # CloudFront only accepts certificates issued in us-east-1
    if certificate.region != "us-east-1":
      raise ConfigurationError(
        f"API_DOMAIN_CERTIFICATE_ARN must be in us-east-1, got {certificate.region!r}"
      )

    if self.temp_object_expiration_days < 1:
      raise ConfigurationError("temp_object_expiration_days must be at least 1")


def _as_mapping(path: Path, section: str, value: Any) -> dict[str, Any]:
  if value is None:
    return {}
  if not isinstance(value, dict):
    raise ConfigurationError(
      f"{section} of {path} must be a mapping, got {type(value).__name__}"
    )
  return value


def _as_int(name: str, value: Any) -> int:
  # bool is an int subclass, but "true" days is a typo
  if isinstance(value, bool):
    raise ConfigurationError(f"{name} must be an integer, got {value!r}")
  try:
    return int(value)
  except (TypeError, ValueError) as e:
    raise ConfigurationError(f"{name} must be an integer, got {value!r}") from e


def _as_str_list(name: str, value: Any) -> list[str]:
  """A single string is a one-element list."""
  if value is None or value == "":
    return []
  if isinstance(value, str):
    return [value]
  if not isinstance(value, list) or not all(isinstance(item, str) for item in value):
    raise ConfigurationError(f"{name} must be a list of strings, got {value!r}")
  return list(value)
