"""Routing table for the Zenodeck API distribution."""

from infrastructure.config import DeployConfig
from infrastructure.routing import (
  EndpointHost,
  Origin,
  RoutingTable,
  build_routing_table,
  derive_endpoint_host,
)

USER_SERVICE_PATH_PATTERN = "/api/v1/user/*"


def user_service_host(config: DeployConfig) -> EndpointHost:
  """Invoke host of the user service API Gateway."""
  return derive_endpoint_host(config.user_service_api_arn)


def build_api_routing_table(config: DeployConfig) -> RoutingTable:
  """User service paths go to API Gateway, everything else to the campaign API."""
  user_service = Origin(user_service_host(config).hostname)

  return build_routing_table(
    Origin(config.campaign_api_origin),
    [
      # API Gateway serves the stage under a path prefix
      (USER_SERVICE_PATH_PATTERN, user_service, f"/{config.stage}"),
    ],
  )
