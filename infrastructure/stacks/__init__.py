"""CDK stacks for the Zenodeck API edge."""

from .api_stack import ZenodeckApiStack

__all__ = ["ZenodeckApiStack"]
