"""CloudFront distribution routing API paths to backend origins."""

from aws_cdk import Duration
from aws_cdk import aws_certificatemanager as acm
from aws_cdk import aws_cloudfront as cloudfront
from aws_cdk import aws_cloudfront_origins as origins
from constructs import Construct

from infrastructure.routing import Origin, RoutingTable

CORS_ALLOWED_HEADERS = ["Content-Type", "Authorization"]
CORS_ALLOWED_METHODS = ["GET", "POST", "PUT", "DELETE", "PATCH", "HEAD", "OPTIONS"]


class ApiDistribution(Construct):
  """CloudFront distribution in front of the backend APIs.

  One cache behavior per rule of the routing table, in table order, with the
  table's default rule as the default behavior. API responses are never
  cached and every viewer header except Host is forwarded.
  """

  def __init__(
    self,
    scope: Construct,
    id: str,
    *,
    routing_table: RoutingTable,
    certificate: acm.ICertificate,
    domain_name: str,
    cors_allowed_origins: list[str] | None = None,
  ) -> None:
    super().__init__(scope, id)

    self.cors_policy: cloudfront.ResponseHeadersPolicy | None = None
    if cors_allowed_origins:
      self.cors_policy = cloudfront.ResponseHeadersPolicy(
        self,
        "CorsPolicy",
        cors_behavior=cloudfront.ResponseHeadersCorsBehavior(
          access_control_allow_credentials=True,
          access_control_allow_headers=CORS_ALLOWED_HEADERS,
          access_control_allow_methods=CORS_ALLOWED_METHODS,
          access_control_allow_origins=cors_allowed_origins,
          origin_override=True,
          access_control_max_age=Duration.days(1),
        ),
      )

    # Identical origins share one HttpOrigin so CloudFront gets one origin each
    self._origins: dict[Origin, origins.HttpOrigin] = {}

    self.distribution = cloudfront.Distribution(
      self,
      "Distribution",
      domain_names=[domain_name],
      certificate=certificate,
      enable_ipv6=False,
      enable_logging=False,
      http_version=cloudfront.HttpVersion.HTTP2,
      price_class=cloudfront.PriceClass.PRICE_CLASS_ALL,
      default_behavior=self._behavior(routing_table.default.origin),
      additional_behaviors={
        rule.path_pattern: self._behavior(rule.origin, self.cors_policy)
        for rule in routing_table.rules
      },
    )

  def _http_origin(self, origin: Origin) -> origins.HttpOrigin:
    if origin not in self._origins:
      self._origins[origin] = origins.HttpOrigin(
        origin.domain_name,
        origin_path=origin.origin_path,
      )
    return self._origins[origin]

  def _behavior(
    self,
    origin: Origin,
    response_headers_policy: cloudfront.IResponseHeadersPolicy | None = None,
  ) -> cloudfront.BehaviorOptions:
    return cloudfront.BehaviorOptions(
      origin=self._http_origin(origin),
      allowed_methods=cloudfront.AllowedMethods.ALLOW_ALL,
      cache_policy=cloudfront.CachePolicy.CACHING_DISABLED,
      origin_request_policy=cloudfront.OriginRequestPolicy.ALL_VIEWER_EXCEPT_HOST_HEADER,
      viewer_protocol_policy=cloudfront.ViewerProtocolPolicy.ALLOW_ALL,
      response_headers_policy=response_headers_policy,
    )
