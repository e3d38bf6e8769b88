"""Backend host derivation and path-based routing for the API distribution.

Nothing in here touches CDK: the distribution construct consumes the
``RoutingTable`` built here, so the routing decisions can be tested (and
printed by ``scripts/show_routes.py``) without synthesizing anything.
"""

import re
from collections.abc import Iterable, Iterator
from dataclasses import dataclass, field, replace

from infrastructure.errors import MalformedIdentifierError, RoutePatternError

ARN_MIN_FIELDS = 6
DEFAULT_PATH_PATTERN = "*"

# CloudFront cache behavior limits
MAX_PATTERN_LENGTH = 255
MAX_RULES = 25
_ALLOWED_PATTERN = re.compile(r"[A-Za-z0-9_\-.*$/~\"'@:+&?]+")


@dataclass(frozen=True)
class ResourceIdentifier:
  """A parsed ``arn:<partition>:<service>:<region>:<account>:<resource>``."""

  partition: str
  service: str
  region: str
  account: str
  resource: str

  @property
  def resource_parts(self) -> list[str]:
    return self.resource.split("/")


@dataclass(frozen=True)
class EndpointHost:
  """Hostname of a regional service endpoint."""

  api_id: str
  region: str
  service_name: str = "execute-api"
  provider_domain: str = "amazonaws.com"

  @property
  def hostname(self) -> str:
    return f"{self.api_id}.{self.service_name}.{self.region}.{self.provider_domain}"

  def __str__(self) -> str:
    return self.hostname


def parse_identifier(identifier: str) -> ResourceIdentifier:
  """Parse a colon-delimited resource identifier.

  The resource field keeps any further colons, so
  ``arn:aws:logs:us-east-1:123:log-group:app`` has resource ``log-group:app``.

  Raises:
    MalformedIdentifierError: if there are fewer than six colon-delimited
      fields.
  """
  fields = identifier.split(":")
  if len(fields) < ARN_MIN_FIELDS:
    raise MalformedIdentifierError(
      identifier,
      f"expected at least {ARN_MIN_FIELDS} ':'-delimited fields, got {len(fields)}",
    )
  return ResourceIdentifier(
    partition=fields[1],
    service=fields[2],
    region=fields[3],
    account=fields[4],
    resource=":".join(fields[5:]),
  )


def derive_endpoint_host(
  identifier: str,
  *,
  component_field_index: int = 5,
  component_part_index: int = 2,
  region_field_index: int = 3,
  service_name: str = "execute-api",
  provider_domain: str = "amazonaws.com",
) -> EndpointHost:
  """Derive the invoke hostname of an API from its resource identifier.

  With the default indexes an API Gateway ARN such as
  ``arn:aws:apigateway:us-east-1::/restapis/abcde12345`` gives region field
  ``us-east-1`` and resource field ``/restapis/abcde12345``, whose
  ``/``-parts are ``["", "restapis", "abcde12345"]``; part 2 is the API id,
  so the host is ``abcde12345.execute-api.us-east-1.amazonaws.com``.

  Raises:
    MalformedIdentifierError: if a field or part is missing or empty.
  """
  fields = identifier.split(":")
  required_fields = max(ARN_MIN_FIELDS, component_field_index + 1, region_field_index + 1)
  if len(fields) < required_fields:
    raise MalformedIdentifierError(
      identifier,
      f"expected at least {required_fields} ':'-delimited fields, got {len(fields)}",
    )

  region = fields[region_field_index]
  if not region:
    raise MalformedIdentifierError(identifier, f"field {region_field_index} (region) is empty")

  parts = fields[component_field_index].split("/")
  required_parts = max(3, component_part_index + 1)
  if len(parts) < required_parts:
    raise MalformedIdentifierError(
      identifier,
      f"field {component_field_index} needs at least {required_parts} "
      f"'/'-delimited parts, got {len(parts)}",
    )

  api_id = parts[component_part_index]
  if not api_id:
    raise MalformedIdentifierError(
      identifier,
      f"part {component_part_index} of field {component_field_index} is empty",
    )

  return EndpointHost(
    api_id=api_id,
    region=region,
    service_name=service_name,
    provider_domain=provider_domain,
  )


@dataclass(frozen=True)
class Origin:
  """A backend the distribution forwards requests to."""

  domain_name: str
  origin_path: str | None = None


@dataclass(frozen=True)
class RoutingRule:
  """Requests whose path matches ``path_pattern`` go to ``origin``."""

  path_pattern: str
  origin: Origin
  _regex: re.Pattern[str] = field(init=False, repr=False, compare=False)

  def __post_init__(self) -> None:
    object.__setattr__(self, "_regex", _compile_pattern(self.path_pattern))

  @property
  def is_default(self) -> bool:
    return self.path_pattern == DEFAULT_PATH_PATTERN

  def matches(self, path: str) -> bool:
    return self._regex.fullmatch(path) is not None


def _compile_pattern(pattern: str) -> re.Pattern[str]:
  # CloudFront wildcards: '*' is any run of characters (including '/'),
  # '?' is exactly one character. Matching is case-sensitive.
  translated = "".join(
    ".*" if char == "*" else "." if char == "?" else re.escape(char) for char in pattern
  )
  return re.compile(translated, re.DOTALL)


def validate_path_pattern(pattern: str) -> None:
  """Check a specific (non-default) path pattern.

  Raises:
    RoutePatternError: if the pattern cannot be used for a cache behavior.
  """
  if not pattern:
    raise RoutePatternError(pattern, "pattern is empty")
  if len(pattern) > MAX_PATTERN_LENGTH:
    raise RoutePatternError(pattern, f"longer than {MAX_PATTERN_LENGTH} characters")
  if not _ALLOWED_PATTERN.fullmatch(pattern):
    raise RoutePatternError(pattern, "contains characters CloudFront does not accept")
  if pattern == DEFAULT_PATH_PATTERN:
    raise RoutePatternError(pattern, "'*' is reserved for the default rule")


@dataclass(frozen=True)
class RoutingTable:
  """Ordered routing rules with a catch-all default.

  Lookup is first-match-wins over ``rules`` in declaration order, then the
  default, so every path resolves to exactly one rule.
  """

  default: RoutingRule
  rules: tuple[RoutingRule, ...] = ()

  def match(self, path: str) -> RoutingRule:
    for rule in self.rules:
      if rule.matches(path):
        return rule
    return self.default

  def rule_for(self, path_pattern: str) -> RoutingRule:
    """The rule declared with ``path_pattern``.

    Raises:
      KeyError: if no rule has that pattern.
    """
    for rule in self.rules_in_order():
      if rule.path_pattern == path_pattern:
        return rule
    raise KeyError(path_pattern)

  def rules_in_order(self) -> Iterator[RoutingRule]:
    yield from self.rules
    yield self.default

  def __len__(self) -> int:
    return len(self.rules) + 1


RuleSpec = tuple[str, Origin] | tuple[str, Origin, str | None]


def build_routing_table(default_origin: Origin, rules: Iterable[RuleSpec]) -> RoutingTable:
  """Build a routing table from ``(pattern, origin[, origin_path])`` entries.

  A given ``origin_path`` replaces the origin's own path prefix.

  Raises:
    RoutePatternError: on an invalid or duplicate pattern, or when there are
      more rules than a distribution can hold.
  """
  built: list[RoutingRule] = []
  seen: set[str] = set()

  for spec in rules:
    pattern, origin = spec[0], spec[1]
    validate_path_pattern(pattern)
    if pattern in seen:
      raise RoutePatternError(pattern, "pattern is declared more than once")
    seen.add(pattern)

    if len(spec) > 2 and spec[2] is not None:
      origin = replace(origin, origin_path=spec[2])
    built.append(RoutingRule(pattern, origin))

  if len(built) > MAX_RULES:
    raise RoutePatternError(built[MAX_RULES].path_pattern, f"more than {MAX_RULES} rules")

  return RoutingTable(
    default=RoutingRule(DEFAULT_PATH_PATTERN, default_origin),
    rules=tuple(built),
  )
