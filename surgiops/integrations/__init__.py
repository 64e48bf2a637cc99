"""surgiops.integrations - External service gateway modules.

All outbound HTTP calls to third-party services must go through a gateway
in this package, never via bare `requests` calls in services or blueprints.

Current gateways:
  insight_gateway.InsightGateway - AI insight generation function
"""
