"""CloudFormation metrics advisor: recommended CloudWatch alarms for IaC templates."""

__version__ = "0.1.0"
