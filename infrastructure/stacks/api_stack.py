"""CDK stack for the Zenodeck storage buckets and API distribution."""

from typing import Any

import aws_cdk as cdk
from constructs import Construct

from infrastructure.cdk_constructs import ApiDistribution, ImportedCertificate, StorageBucket
from infrastructure.config import DeployConfig
from infrastructure.routes import USER_SERVICE_PATH_PATTERN, build_api_routing_table


class ZenodeckApiStack(cdk.Stack):
  """Stack for one stage of the Zenodeck backend edge.

  Creates:
  - Temporary upload bucket (public read, objects expire)
  - User service, campaign and CMS buckets
  - CloudFront distribution routing API paths to the backend services
  """

  def __init__(
    self,
    scope: Construct,
    id: str,
    *,
    deploy_config: DeployConfig,
    **kwargs: Any,
  ) -> None:
    super().__init__(scope, id, **kwargs)

    stage = deploy_config.stage

    # Resolve routing before creating any resources
    self.routing_table = build_api_routing_table(deploy_config)

    self.temp_bucket = StorageBucket(
      self,
      "ZenodeckTempBucket",
      bucket_name=f"{stage}-zenodeck-temp",
      expiration_days=deploy_config.temp_object_expiration_days,
      public_read=True,
    )
    self.user_bucket = StorageBucket(
      self,
      "ZenodeckUserServiceBucket",
      bucket_name=f"{stage}-zenodeck-user-service",
    )
    self.campaign_bucket = StorageBucket(
      self,
      "ZenodeckCampaignBucket",
      bucket_name=f"{stage}-zenodeck-campaign",
    )
    self.cms_bucket = StorageBucket(
      self,
      "CmsBucket",
      bucket_name=deploy_config.cms_bucket_name,
    )

    self.certificate = ImportedCertificate(
      self,
      "ApiDomainCertificate",
      certificate_arn=deploy_config.api_domain_certificate_arn,
    )

    self.api_distribution = ApiDistribution(
      self,
      "ZenodeckApiDistribution",
      routing_table=self.routing_table,
      certificate=self.certificate.certificate,
      domain_name=deploy_config.api_domain,
      cors_allowed_origins=deploy_config.cors_allowed_origins,
    )

    # Outputs
    for name, bucket in (
      ("TempBucketName", self.temp_bucket),
      ("UserServiceBucketName", self.user_bucket),
      ("CampaignBucketName", self.campaign_bucket),
      ("CmsBucketName", self.cms_bucket),
    ):
      cdk.CfnOutput(self, name, value=bucket.bucket.bucket_name)
    cdk.CfnOutput(
      self,
      "DistributionId",
      value=self.api_distribution.distribution.distribution_id,
      description="CloudFront distribution ID",
    )
    cdk.CfnOutput(
      self,
      "DistributionDomainName",
      value=self.api_distribution.distribution.distribution_domain_name,
      description="CloudFront distribution domain name",
    )
    cdk.CfnOutput(
      self,
      "UserServiceHost",
      value=self.routing_table.rule_for(USER_SERVICE_PATH_PATTERN).origin.domain_name,
      description="User service API Gateway host",
    )

    cdk.Tags.of(self).add("Project", "zenodeck")
    cdk.Tags.of(self).add("Stage", stage)
