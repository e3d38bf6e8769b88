"""CDK constructs for the Zenodeck API edge."""

from .certificate import ImportedCertificate
from .distribution import ApiDistribution
from .storage import StorageBucket

__all__ = [
  "ApiDistribution",
  "ImportedCertificate",
  "StorageBucket",
]
