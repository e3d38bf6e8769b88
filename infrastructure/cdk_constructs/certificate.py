"""ACM certificate for the API domain."""

from aws_cdk import aws_certificatemanager as acm
from constructs import Construct


class ImportedCertificate(Construct):
  """Existing ACM certificate, referenced by ARN.

  The certificate is issued and validated outside this stack; it must live
  in us-east-1 to be usable by CloudFront.
  """

  def __init__(
    self,
    scope: Construct,
    id: str,
    *,
    certificate_arn: str,
  ) -> None:
    super().__init__(scope, id)

    self.certificate = acm.Certificate.from_certificate_arn(
      self,
      "Certificate",
      certificate_arn,
    )
