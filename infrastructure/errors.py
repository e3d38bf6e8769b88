"""Errors raised while building the deployment from its inputs.

All of them are fatal at synth time.
"""


class ConfigurationError(ValueError):
  """A deployment input failed validation."""


class MissingConfigurationError(ConfigurationError):
  """One or more required inputs are absent or empty."""

  def __init__(self, missing: list[str]) -> None:
    self.missing = list(missing)
    super().__init__(
      f"Missing required configuration: {', '.join(self.missing)}"
    )


class MalformedIdentifierError(ConfigurationError):
  """A resource identifier (ARN) could not be parsed."""

  def __init__(self, identifier: str, reason: str) -> None:
    self.identifier = identifier
    self.reason = reason
    super().__init__(f"Malformed resource identifier {identifier!r}: {reason}")


class RoutePatternError(ConfigurationError):
  """A routing path pattern is not valid for the distribution."""

  def __init__(self, pattern: str, reason: str) -> None:
    self.pattern = pattern
    self.reason = reason
    super().__init__(f"Invalid path pattern {pattern!r}: {reason}")
