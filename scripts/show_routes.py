#!/usr/bin/env python3
"""Print the API distribution routing table for a stage.

Reads the same configuration as the CDK app and makes no AWS calls.
"""

import argparse
import json
import sys
from pathlib import Path

# Add the project root to the Python path
sys.path.insert(0, str(Path(__file__).parent.parent))

from infrastructure.config import DeployConfig  # noqa: E402
from infrastructure.errors import ConfigurationError  # noqa: E402
from infrastructure.routes import build_api_routing_table  # noqa: E402
from infrastructure.routing import RoutingRule, RoutingTable  # noqa: E402


def rule_to_dict(rule: RoutingRule) -> dict[str, str | None]:
  return {
    "path_pattern": rule.path_pattern,
    "origin": rule.origin.domain_name,
    "origin_path": rule.origin.origin_path,
  }


def format_table(table: RoutingTable) -> list[str]:
  """One line per rule, in lookup order."""
  width = max(len(rule.path_pattern) for rule in table.rules_in_order())
  return [
    f"{rule.path_pattern:<{width}}  ->  {rule.origin.domain_name}{rule.origin.origin_path or ''}"
    for rule in table.rules_in_order()
  ]


def main() -> None:
  """Main entry point."""
  parser = argparse.ArgumentParser(
    description="Show how the API distribution routes request paths"
  )
  parser.add_argument(
    "paths",
    nargs="*",
    help="Request paths to resolve (e.g., /api/v1/user/123)",
  )
  parser.add_argument(
    "--config",
    default="deploy.yaml",
    help="Deployment config file (default: deploy.yaml)",
  )
  parser.add_argument(
    "--stage",
    help="Stage to show (default: $STAGE)",
  )
  parser.add_argument(
    "--format",
    choices=["table", "json"],
    default="table",
    help="Output format (default: table)",
  )

  args = parser.parse_args()

  try:
    config = DeployConfig.from_yaml(args.config, stage=args.stage)
    table = build_api_routing_table(config)
  except ConfigurationError as e:
    print(f"Error: {e}", file=sys.stderr)
    sys.exit(1)

  if args.format == "json":
    output: dict[str, object] = {
      "stage": config.stage,
      "rules": [rule_to_dict(rule) for rule in table.rules_in_order()],
    }
    if args.paths:
      output["resolved"] = {path: rule_to_dict(table.match(path)) for path in args.paths}
    print(json.dumps(output, indent=2))
    return

  for line in format_table(table):
    print(line)
  if args.paths:
    print()
    for path in args.paths:
      rule = table.match(path)
      print(f"{path}  =>  {rule.path_pattern} ({rule.origin.domain_name})")


if __name__ == "__main__":
  main()
