"""S3 buckets for user uploads and service assets."""

from aws_cdk import Duration, RemovalPolicy
from aws_cdk import aws_iam as iam
from aws_cdk import aws_s3 as s3
from constructs import Construct

UPLOAD_CORS_RULE = s3.CorsRule(
  allowed_methods=[s3.HttpMethods.GET, s3.HttpMethods.POST, s3.HttpMethods.DELETE],
  allowed_origins=["*"],
  allowed_headers=["*"],
  exposed_headers=[],
  max_age=3000,
)


class StorageBucket(Construct):
  """S3 bucket that browsers upload to directly.

  Objects are written with ACLs by the services, so object ownership stays
  with the writer and public ACLs/policies are not blocked.
  """

  def __init__(
    self,
    scope: Construct,
    id: str,
    *,
    bucket_name: str,
    expiration_days: int | None = None,
    public_read: bool = False,
    removal_policy: RemovalPolicy = RemovalPolicy.DESTROY,
  ) -> None:
    super().__init__(scope, id)

    lifecycle_rules = None
    if expiration_days is not None:
      lifecycle_rules = [s3.LifecycleRule(expiration=Duration.days(expiration_days))]

    self.bucket = s3.Bucket(
      self,
      "Bucket",
      bucket_name=bucket_name,
      block_public_access=s3.BlockPublicAccess(
        block_public_acls=False,
        block_public_policy=False,
      ),
      cors=[UPLOAD_CORS_RULE],
      lifecycle_rules=lifecycle_rules,
      object_ownership=s3.ObjectOwnership.OBJECT_WRITER,
      removal_policy=removal_policy,
      auto_delete_objects=removal_policy == RemovalPolicy.DESTROY,
    )

    if public_read:
      self.bucket.add_to_resource_policy(
        iam.PolicyStatement(
          effect=iam.Effect.ALLOW,
          actions=["s3:GetObject"],
          resources=[self.bucket.arn_for_objects("*")],
          principals=[iam.AnyPrincipal()],
        )
      )
