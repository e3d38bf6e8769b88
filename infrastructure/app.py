#!/usr/bin/env python3
"""CDK application entry point for the Zenodeck API edge infrastructure."""

import logging
import os
import sys
from pathlib import Path

# Add the project root to the Python path
sys.path.insert(0, str(Path(__file__).parent.parent))

import aws_cdk as cdk
import boto3

from infrastructure.config import DeployConfig
from infrastructure.errors import ConfigurationError
from infrastructure.stacks.api_stack import ZenodeckApiStack

logger = logging.getLogger("infrastructure.app")


def get_account_id() -> str:
  """Get AWS account ID from current credentials."""
  sts = boto3.client("sts")
  return str(sts.get_caller_identity()["Account"])


def main() -> None:
  """Create the CDK app with the stack for the configured stage."""
  logging.basicConfig(
    level=os.environ.get("LOG_LEVEL", "INFO").upper(),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
  )

  app = cdk.App()

  config_path = app.node.try_get_context("config") or "deploy.yaml"
  try:
    config = DeployConfig.from_yaml(
      Path(config_path),
      stage=app.node.try_get_context("stage"),
    )
    # The stack resolves its routing table before creating any resources
    stack = ZenodeckApiStack(
      app,
      config.stack_name,
      deploy_config=config,
      env=cdk.Environment(
        account=config.account or get_account_id(),
        region=config.region,
      ),
      description=f"Zenodeck storage and API distribution ({config.stage})",
    )
  except ConfigurationError as e:
    logger.error("Invalid deployment configuration: %s", e)
    sys.exit(1)

  logger.info("Synthesizing stage %s as %s", config.stage, config.stack_name)
  for rule in stack.routing_table.rules_in_order():
    logger.info(
      "Route %s -> %s%s",
      rule.path_pattern,
      rule.origin.domain_name,
      rule.origin.origin_path or "",
    )

  app.synth()


if __name__ == "__main__":
  main()
